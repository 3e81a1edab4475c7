"""
Flags Router

Endpoints:
    POST /api/flag - Report a wrong entry
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

import auth as auth_utils
from core import database, models, schemas
from core.dependencies import get_quota
from services.community.flags import submit_flag
from services.security.rate_limiter import QuotaTracker

router = APIRouter(prefix="/api", tags=["Community"])


@router.post(
    "/flag",
    response_model=schemas.ApiResponse,
    responses={
        400: {"description": "Invalid word id or reason too short"},
        401: {"description": "Not authenticated"},
        404: {"description": "Word not found"},
        429: {"description": "Too many reports"},
    },
)
async def create_flag(
    payload: schemas.FlagRequest,
    db: AsyncSession = Depends(database.get_db),
    user: models.User = Depends(auth_utils.get_current_user),
    quota: QuotaTracker = Depends(get_quota),
):
    """Report an entry; the reason needs at least 10 characters."""
    flag = await submit_flag(db, user.id, payload.word_id, payload.reason, tracker=quota)
    return schemas.ApiResponse(
        data={"flagId": flag.id},
        message="Raportul a fost trimis cu succes",
    )
