"""
Words Router

Read entries, vote on them, contribute to them and (in development)
regenerate them.

Endpoints:
    GET /api/words/recent - Latest AI discoveries
    GET /api/words/{word_id} - Single entry
    GET /api/words/{word_id}/vote - Vote counts and caller's vote
    POST /api/words/{word_id}/vote - Cast, change or retract a vote
    POST /api/words/{word_id}/contributions - Add example/synonym/antonym/definition
    POST /api/words/{word_id}/regenerate - Re-run AI analysis (development only)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

import auth as auth_utils
from core import database, models, schemas
from core.dependencies import get_gateway, get_quota
from services.ai.word_analysis import WordAnalysisGateway
from services.community.votes import cast_vote, get_vote_state
from services.dictionary.contributions import add_contribution
from services.dictionary.word_store import list_recent_discoveries, regenerate_word, require_word
from services.security.rate_limiter import QuotaTracker
from utils.exceptions import InputValidationError
from utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/words", tags=["Words"])


# =============================================================================
# Reading
# =============================================================================

@router.get("/recent", response_model=schemas.ApiResponse)
async def recent_discoveries(
    limit: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(database.get_db),
):
    """Most recently discovered words, newest first."""
    words = await list_recent_discoveries(db, limit=limit)
    return schemas.ApiResponse(data=[word.to_dict() for word in words])


@router.get(
    "/{word_id}",
    response_model=schemas.ApiResponse,
    responses={404: {"description": "Word not found"}},
)
async def get_word(word_id: str, db: AsyncSession = Depends(database.get_db)):
    """Full dictionary entry by canonical key."""
    word = await require_word(db, word_id)
    return schemas.ApiResponse(data=word.to_dict())


# =============================================================================
# Voting
# =============================================================================

@router.get(
    "/{word_id}/vote",
    response_model=schemas.ApiResponse,
    responses={404: {"description": "Word not found"}},
)
async def read_vote_state(
    word_id: str,
    db: AsyncSession = Depends(database.get_db),
    user: Optional[models.User] = Depends(auth_utils.get_current_user_optional),
):
    """Counts, community verification and (when signed in) the caller's vote."""
    state = await get_vote_state(db, word_id, user.id if user else None)
    return schemas.ApiResponse(data=state.to_dict())


@router.post(
    "/{word_id}/vote",
    response_model=schemas.ApiResponse,
    responses={
        400: {"description": "Invalid vote type"},
        401: {"description": "Not authenticated"},
        404: {"description": "Word not found"},
        429: {"description": "Too many votes"},
    },
)
async def vote(
    word_id: str,
    payload: schemas.VoteRequest,
    db: AsyncSession = Depends(database.get_db),
    user: models.User = Depends(auth_utils.get_current_user),
    quota: QuotaTracker = Depends(get_quota),
):
    """
    Cast a vote: like, dislike, validate or report_error.

    A null voteType retracts the caller's vote.
    """
    if "vote_type" not in payload.model_fields_set:
        raise InputValidationError("voteType is required", field="voteType")

    state = await cast_vote(db, user.id, word_id, payload.vote_type, tracker=quota)
    return schemas.ApiResponse(data=state.to_dict(), message=state.message)


# =============================================================================
# Contributions
# =============================================================================

@router.post(
    "/{word_id}/contributions",
    response_model=schemas.ApiResponse,
    responses={
        400: {"description": "Invalid contribution"},
        401: {"description": "Not authenticated"},
        404: {"description": "Word not found"},
        429: {"description": "Too many contributions"},
    },
)
async def contribute(
    word_id: str,
    payload: schemas.ContributionRequest,
    db: AsyncSession = Depends(database.get_db),
    user: models.User = Depends(auth_utils.get_current_user),
    quota: QuotaTracker = Depends(get_quota),
):
    """Enrich an entry; points are credited through the ledger."""
    word, award = await add_contribution(db, user.id, word_id, payload.type, payload.content, tracker=quota)
    return schemas.ApiResponse(
        success=award.success,
        data={"word": word.to_dict(), "pointsAwarded": award.points},
        message=award.message or "Contribuția a fost adăugată",
    )


# =============================================================================
# Regeneration
# =============================================================================

@router.post(
    "/{word_id}/regenerate",
    response_model=schemas.ApiResponse,
    responses={
        403: {"description": "Only available in development"},
        404: {"description": "Word not found"},
        422: {"description": "AI returned invalid response"},
        502: {"description": "AI unavailable"},
    },
)
async def regenerate(
    word_id: str,
    db: AsyncSession = Depends(database.get_db),
    gateway: WordAnalysisGateway = Depends(get_gateway),
):
    """Replace the entry's AI content with a fresh analysis."""
    word, confidence = await regenerate_word(db, word_id, gateway)
    return schemas.ApiResponse(
        data={"word": word.to_dict(), "confidence": confidence},
        message=f"Word regenerated successfully ({word.regeneration_count}x)",
    )
