"""
Leaderboard and user statistics.

All-time ranking reads the user aggregates; the today/week/month views sum
the contribution ledger since the start of the period, so they do not
depend on daily_points being reset.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import ContributionType, LeaderboardPeriod
from core.models import Contribution, User, Word
from services.points.ledger import get_remaining_discoveries, get_today_discovery_count
from utils.exceptions import InputValidationError, UserNotFoundError
from utils.timestamps import local_midnight, start_of_month, start_of_week

MAX_LEADERBOARD_LIMIT = 100


def parse_period(value: Any) -> LeaderboardPeriod:
    if value is None:
        return LeaderboardPeriod.ALL_TIME
    try:
        return LeaderboardPeriod(value)
    except ValueError:
        raise InputValidationError(
            "Perioadă invalidă",
            field="period",
            details={"allowed": [p.value for p in LeaderboardPeriod]},
        )


def period_start(period: LeaderboardPeriod):
    if period == LeaderboardPeriod.TODAY:
        return local_midnight()
    if period == LeaderboardPeriod.WEEK:
        return start_of_week()
    if period == LeaderboardPeriod.MONTH:
        return start_of_month()
    return None


def _entry(user: User, rank: int, points: float, discovered: int) -> Dict[str, Any]:
    return {
        "uid": user.id,
        "display_name": user.public_name,
        "photo_url": user.photo_url,
        "total_points": float(points or 0),
        "words_discovered": int(discovered or 0),
        "rank": rank,
    }


async def get_leaderboard(
    db: AsyncSession,
    period: Any = LeaderboardPeriod.ALL_TIME,
    limit: int = 10
) -> List[Dict[str, Any]]:
    """
    Ranked users for a period. Ranks are 1-based.

    Args:
        period: today, week, month or allTime
        limit: Number of entries (clamped to 1..100)
    """
    period = parse_period(period)
    limit = max(1, min(int(limit), MAX_LEADERBOARD_LIMIT))

    start = period_start(period)
    if start is None:
        result = await db.execute(
            select(User)
            .order_by(User.total_points.desc(), User.id.asc())
            .limit(limit)
        )
        return [
            _entry(user, index + 1, user.total_points, user.words_discovered)
            for index, user in enumerate(result.scalars().all())
        ]

    points = func.sum(Contribution.points).label("points")
    discovered = func.sum(
        case((Contribution.type == ContributionType.DISCOVERY.value, 1), else_=0)
    ).label("discovered")

    result = await db.execute(
        select(User, points, discovered)
        .join(Contribution, Contribution.user_id == User.id)
        .where(Contribution.created_at >= start)
        .group_by(User.id)
        .order_by(points.desc(), User.id.asc())
        .limit(limit)
    )
    return [
        _entry(row[0], index + 1, row.points, row.discovered)
        for index, row in enumerate(result.all())
    ]


async def get_user_stats(
    db: AsyncSession,
    user_id: int,
    recent_limit: int = 10
) -> Dict[str, Any]:
    """Public profile: aggregates, today's quota and latest contributions."""
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    total = await db.execute(
        select(func.count(Contribution.id)).where(Contribution.user_id == user_id)
    )

    recent = await db.execute(
        select(Contribution, Word.display)
        .outerjoin(Word, Word.id == Contribution.word_id)
        .where(Contribution.user_id == user_id)
        .order_by(Contribution.created_at.desc(), Contribution.id.desc())
        .limit(recent_limit)
    )
    contributions = []
    for contribution, display in recent.all():
        item = contribution.to_dict()
        item["wordDisplay"] = display or contribution.word_id
        contributions.append(item)

    return {
        "uid": user.id,
        "displayName": user.public_name,
        "photoURL": user.photo_url,
        "totalPoints": user.total_points or 0.0,
        "dailyPoints": user.daily_points or 0.0,
        "wordsDiscovered": user.words_discovered or 0,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
        "todayDiscoveries": await get_today_discovery_count(db, user_id),
        "remainingDiscoveries": await get_remaining_discoveries(db, user_id),
        "totalContributions": total.scalar_one(),
        "recentContributions": contributions,
    }
