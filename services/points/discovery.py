"""
Discovery Validator

Anti-abuse gate run before a new word is credited to a user. Checks run in
order and stop at the first failure:

1. AI confidence at least MIN_AI_CONFIDENCE
2. The user has not already discovered this word
3. Fewer than BURST_MAX_DISCOVERIES discoveries in the last BURST_WINDOW_SECONDS

The checks read the ledger and decide; two concurrent requests can both pass.
The unique discovery index on contributions rejects the second credit.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import ContributionType
from config.settings import settings
from core.models import Contribution
from utils.logging import get_logger
from utils.timestamps import now

logger = get_logger(__name__)

LOW_CONFIDENCE_REASON = "Cuvântul nu pare a fi valid sau este prea rar pentru a fi verificat automat."
DUPLICATE_REASON = "Ai descoperit deja acest cuvânt."
BURST_REASON = "Prea multe descoperiri într-un timp scurt. Te rugăm să încetinești."


@dataclass
class DiscoveryCheck:
    valid: bool
    reason: Optional[str] = None


async def has_discovered(db: AsyncSession, user_id: int, word_id: str) -> bool:
    result = await db.execute(
        select(Contribution.id).where(
            Contribution.user_id == user_id,
            Contribution.word_id == word_id,
            Contribution.type == ContributionType.DISCOVERY.value,
        ).limit(1)
    )
    return result.first() is not None


async def count_recent_discoveries(db: AsyncSession, user_id: int, window_seconds: float) -> int:
    since = now() - timedelta(seconds=window_seconds)
    result = await db.execute(
        select(func.count(Contribution.id)).where(
            Contribution.user_id == user_id,
            Contribution.type == ContributionType.DISCOVERY.value,
            Contribution.created_at >= since,
        )
    )
    return result.scalar_one()


async def validate_discovery(
    db: AsyncSession,
    user_id: int,
    word_id: str,
    ai_confidence: float
) -> DiscoveryCheck:
    """
    Decide whether user_id may be credited with discovering word_id.

    Args:
        db: Database session
        user_id: Discovering user
        word_id: Canonical key
        ai_confidence: Confidence reported by the analysis

    Returns:
        DiscoveryCheck: valid, or the Romanian reason for rejection
    """
    if ai_confidence < settings.MIN_AI_CONFIDENCE:
        return DiscoveryCheck(valid=False, reason=LOW_CONFIDENCE_REASON)

    if await has_discovered(db, user_id, word_id):
        return DiscoveryCheck(valid=False, reason=DUPLICATE_REASON)

    recent = await count_recent_discoveries(db, user_id, settings.BURST_WINDOW_SECONDS)
    if recent >= settings.BURST_MAX_DISCOVERIES:
        logger.warning(f"Discovery burst from user {user_id}: {recent} in {settings.BURST_WINDOW_SECONDS}s")
        return DiscoveryCheck(valid=False, reason=BURST_REASON)

    return DiscoveryCheck(valid=True)
