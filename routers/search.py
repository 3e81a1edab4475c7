"""
Search Router

Search-or-discover and autocomplete.

Endpoints:
    POST /api/search - Return a word, generating it with AI if it is new
    GET /api/autocomplete - Suggestions for partial text
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

import auth as auth_utils
from core import database, models, schemas
from core.dependencies import get_gateway, get_quota
from services.ai.word_analysis import WordAnalysisGateway
from services.dictionary.search import search_or_discover
from services.dictionary.word_store import find_suggestions
from services.security.rate_limiter import QuotaTracker
from utils.logging import get_logger
from utils.rate_limit import get_client_ip, limit_autocomplete, limit_search

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Dictionary"])


@router.post(
    "/search",
    response_model=schemas.ApiResponse,
    summary="Search or discover a word",
    responses={
        400: {"description": "Invalid word format"},
        401: {"description": "Discovery requires sign-in"},
        409: {"description": "Discovery rejected"},
        422: {"description": "AI could not verify the word"},
        429: {"description": "Quota exceeded"},
    }
)
@limit_search
async def search(
    request: Request,  # Required for rate limiter
    payload: schemas.SearchRequest,
    db: AsyncSession = Depends(database.get_db),
    user: Optional[models.User] = Depends(auth_utils.get_current_user_optional),
    gateway: WordAnalysisGateway = Depends(get_gateway),
    quota: QuotaTracker = Depends(get_quota),
):
    """
    Look up a word by its canonical key.

    If it does not exist, the AI analyzes it; a validated analysis is stored
    and, for signed-in users, credited as a discovery.
    """
    outcome = await search_or_discover(
        db,
        payload.term,
        user=user,
        client_ip=get_client_ip(request),
        gateway=gateway,
        tracker=quota,
    )
    return schemas.ApiResponse(data=outcome.to_dict(), message=outcome.message)


@router.get(
    "/autocomplete",
    response_model=schemas.ApiResponse,
    summary="Autocomplete suggestions",
)
@limit_autocomplete
async def autocomplete(
    request: Request,  # Required for rate limiter
    q: Optional[str] = Query(None, description="Partial word, at least 2 characters"),
    db: AsyncSession = Depends(database.get_db),
):
    """Up to 10 suggestions, prefix matches first. Empty list when nothing matches."""
    suggestions = await find_suggestions(db, q)
    return schemas.ApiResponse(data=suggestions)
