"""
Flags

Users report wrong entries with a short free-text reason. Flags are stored
with status "open" for moderators; nothing in the entry changes until a
moderator acts.
"""

from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import FLAG_REASON_MAX_LENGTH, FLAG_REASON_MIN_LENGTH, FlagStatus
from config.settings import settings
from core.models import Flag
from services.dictionary.word_store import word_exists
from services.security.rate_limiter import QuotaTracker, check_endpoint_rate_limit
from utils.exceptions import InputValidationError, QuotaExceededError, WordNotFoundError
from utils.logging import get_logger
from utils.sanitize import sanitize_text
from utils.timestamps import now

logger = get_logger(__name__)


async def submit_flag(
    db: AsyncSession,
    user_id: int,
    word_id: Any,
    reason: Any,
    tracker: Optional[QuotaTracker] = None
) -> Flag:
    """
    Record a report against a word.

    Raises:
        InputValidationError: missing word id, or reason shorter than 10 characters
        QuotaExceededError: more than FLAG_RATE_LIMIT flags in the window
        WordNotFoundError: no such word
    """
    if not word_id or not isinstance(word_id, str):
        raise InputValidationError("ID cuvânt invalid", field="wordId")

    cleaned = sanitize_text(reason, max_length=FLAG_REASON_MAX_LENGTH) if isinstance(reason, str) else ""
    if len(cleaned) < FLAG_REASON_MIN_LENGTH:
        raise InputValidationError(
            f"Te rugăm să descrii problema (minim {FLAG_REASON_MIN_LENGTH} caractere)",
            field="reason",
        )

    allowed = await check_endpoint_rate_limit(
        str(user_id), "flag",
        settings.FLAG_RATE_LIMIT, settings.FLAG_RATE_WINDOW_SECONDS,
        tracker=tracker,
    )
    if not allowed:
        raise QuotaExceededError("Ai trimis prea multe rapoarte. Încearcă mai târziu.", scope="flag")

    if not await word_exists(db, word_id):
        raise WordNotFoundError(word_id)

    flag = Flag(
        word_id=word_id,
        user_id=user_id,
        reason=cleaned,
        status=FlagStatus.OPEN.value,
        created_at=now(),
    )
    db.add(flag)
    await db.commit()
    await db.refresh(flag)

    logger.info(f"[Flag] Created flag {flag.id} for word {word_id} by user {user_id}")
    return flag


async def list_flags(
    db: AsyncSession,
    status: Optional[str] = FlagStatus.OPEN.value,
    limit: int = 50
) -> List[Flag]:
    """Flags for moderation, oldest first."""
    query = select(Flag).order_by(Flag.created_at.asc()).limit(limit)
    if status:
        query = query.where(Flag.status == FlagStatus(status).value)
    result = await db.execute(query)
    return list(result.scalars().all())
