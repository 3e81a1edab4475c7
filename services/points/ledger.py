"""
Points Ledger

Awards points for contributions and keeps the per-user aggregates
(total_points, daily_points, words_discovered) in step with the
append-only contributions table.

The ledger row and the aggregate update are committed separately, so a crash
between them leaves the aggregates behind the ledger. reconcile_user_aggregates()
recomputes them from the ledger (see scripts/reconcile_points.py).

Usage:
    from services.points.ledger import award_points

    result = await award_points(db, user.id, word_id, ContributionType.DISCOVERY)
    if result.success:
        print(result.points)
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import ContributionType, POINT_VALUES
from config.settings import settings
from core.models import Contribution, User
from utils.logging import get_logger, log_word_action
from utils.timestamps import local_midnight

logger = get_logger(__name__)


@dataclass
class AwardResult:
    """Outcome of award_points(). message is set on failure."""
    success: bool
    points: float = 0.0
    message: Optional[str] = None


def daily_limit_message(limit: Optional[int] = None) -> str:
    limit = limit if limit is not None else settings.MAX_DAILY_DISCOVERIES
    return f"Ai atins limita zilnică de {limit} descoperiri. Încearcă mâine!"


# =============================================================================
# Quota Queries
# =============================================================================

async def get_today_discovery_count(db: AsyncSession, user_id: int) -> int:
    """Discoveries credited to user_id since local midnight."""
    result = await db.execute(
        select(func.count(Contribution.id)).where(
            Contribution.user_id == user_id,
            Contribution.type == ContributionType.DISCOVERY.value,
            Contribution.created_at >= local_midnight(),
        )
    )
    return result.scalar_one()


async def has_exceeded_daily_limit(db: AsyncSession, user_id: int) -> bool:
    return await get_today_discovery_count(db, user_id) >= settings.MAX_DAILY_DISCOVERIES


async def get_remaining_discoveries(db: AsyncSession, user_id: int) -> int:
    count = await get_today_discovery_count(db, user_id)
    return max(0, settings.MAX_DAILY_DISCOVERIES - count)


async def calculate_daily_points(db: AsyncSession, user_id: int) -> float:
    """Sum of points recorded for user_id since local midnight."""
    result = await db.execute(
        select(func.coalesce(func.sum(Contribution.points), 0.0)).where(
            Contribution.user_id == user_id,
            Contribution.created_at >= local_midnight(),
        )
    )
    return float(result.scalar_one())


# =============================================================================
# Awarding
# =============================================================================

async def award_points(
    db: AsyncSession,
    user_id: int,
    word_id: str,
    kind: Union[ContributionType, str],
    extra: Optional[Dict[str, Any]] = None
) -> AwardResult:
    """
    Record a contribution and credit its points.

    Args:
        db: Database session
        user_id: Acting user
        word_id: Canonical key of the word
        kind: Contribution type; decides the points
        extra: Optional JSON payload stored on the contribution

    Returns:
        AwardResult: success flag, points credited, failure message
    """
    kind = ContributionType(kind)
    points = POINT_VALUES[kind]

    if kind == ContributionType.DISCOVERY and await has_exceeded_daily_limit(db, user_id):
        log_word_action("award", word_id, success=False, details=f"user {user_id} hit daily limit")
        return AwardResult(success=False, points=0.0, message=daily_limit_message())

    db.add(Contribution(
        user_id=user_id,
        word_id=word_id,
        type=kind.value,
        points=points,
        data=extra or {},
    ))

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if await db.get(User, user_id) is None:
            logger.error(f"Cannot award points: user {user_id} does not exist")
            return AwardResult(success=False, points=0.0, message="Utilizatorul nu există în baza de date.")
        log_word_action("award", word_id, success=False, details=f"duplicate {kind.value} by user {user_id}")
        return AwardResult(success=False, points=0.0, message="Ai descoperit deja acest cuvânt.")

    user = await db.get(User, user_id)
    if user is None:
        logger.error(f"Cannot award points: user {user_id} does not exist")
        return AwardResult(success=False, points=0.0, message="Utilizatorul nu există în baza de date.")

    values = {
        "total_points": User.total_points + points,
        "daily_points": User.daily_points + points,
    }
    if kind == ContributionType.DISCOVERY:
        values["words_discovered"] = User.words_discovered + 1

    try:
        await db.execute(update(User).where(User.id == user_id).values(**values))
        await db.commit()
        await db.refresh(user)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to update aggregates for user {user_id}: {e}", exc_info=True)
        return AwardResult(success=False, points=0.0, message="A apărut o eroare la acordarea punctelor.")

    log_word_action("award", word_id, success=True, details=f"user {user_id} +{points:g} ({kind.value})")
    return AwardResult(success=True, points=points)


# =============================================================================
# Reconciliation
# =============================================================================

async def reconcile_user_aggregates(db: AsyncSession, user_id: int) -> Optional[Dict[str, Any]]:
    """
    Recompute a user's aggregates from the contribution ledger.

    Returns:
        The corrected values, or None if the user does not exist
    """
    user = await db.get(User, user_id)
    if user is None:
        return None
    await db.refresh(user)

    result = await db.execute(
        select(
            func.coalesce(func.sum(Contribution.points), 0.0),
            func.coalesce(func.sum(case((Contribution.type == ContributionType.DISCOVERY.value, 1), else_=0)), 0),
        ).where(Contribution.user_id == user_id)
    )
    total_points, words_discovered = result.one()
    daily_points = await calculate_daily_points(db, user_id)

    corrected = {
        "total_points": float(total_points),
        "daily_points": daily_points,
        "words_discovered": int(words_discovered),
    }

    drift = {
        key: (getattr(user, key), value)
        for key, value in corrected.items()
        if getattr(user, key) != value
    }
    if drift:
        logger.warning(f"Reconciling user {user_id}: {drift}")

    await db.execute(update(User).where(User.id == user_id).values(**corrected))
    await db.commit()
    return corrected


async def reconcile_all_users(db: AsyncSession) -> List[int]:
    """Reconcile every user. Returns the ids that were processed."""
    result = await db.execute(select(User.id).order_by(User.id))
    user_ids = list(result.scalars().all())
    for user_id in user_ids:
        await reconcile_user_aggregates(db, user_id)
    logger.info(f"Reconciled aggregates for {len(user_ids)} users")
    return user_ids
