"""
Unit Tests for Leaderboards and User Statistics
"""

from datetime import timedelta

import pytest

from core.models import Contribution
from services.points.leaderboard import get_leaderboard, get_user_stats, parse_period
from services.points.ledger import award_points
from utils.exceptions import InputValidationError, UserNotFoundError
from utils.timestamps import now


class TestLeaderboard:

    @pytest.mark.asyncio
    async def test_all_time_orders_by_total(self, test_db, make_user):
        low = await make_user(display_name="Ana", total_points=2.0, words_discovered=2)
        high = await make_user(display_name="Ion", total_points=7.5, words_discovered=5)
        await make_user(display_name=None, total_points=0.0)

        entries = await get_leaderboard(test_db, "allTime", limit=2)

        assert [(e["uid"], e["rank"]) for e in entries] == [(high.id, 1), (low.id, 2)]
        assert entries[0]["display_name"] == "Ion"
        assert entries[0]["total_points"] == 7.5
        assert entries[0]["words_discovered"] == 5

    @pytest.mark.asyncio
    async def test_today_sums_ledger(self, test_db, make_user):
        first = await make_user()
        second = await make_user()

        await award_points(test_db, first.id, "unu", "discovery")
        await award_points(test_db, second.id, "doi", "discovery")
        await award_points(test_db, second.id, "doi", "example_add")
        test_db.add(Contribution(
            user_id=first.id, word_id="vechi", type="discovery", points=1.0,
            created_at=now() - timedelta(days=40),
        ))
        await test_db.commit()

        entries = await get_leaderboard(test_db, "today")

        assert [e["uid"] for e in entries] == [second.id, first.id]
        assert entries[0]["total_points"] == 1.5
        assert entries[1]["total_points"] == 1.0
        assert entries[1]["words_discovered"] == 1

    @pytest.mark.asyncio
    async def test_users_without_contributions_are_skipped(self, test_db, make_user):
        await make_user(total_points=10.0)
        assert await get_leaderboard(test_db, "week") == []

    @pytest.mark.asyncio
    async def test_limit_is_clamped(self, test_db, make_user):
        for _ in range(3):
            await make_user()
        assert len(await get_leaderboard(test_db, "allTime", limit=0)) == 1

    def test_invalid_period(self):
        with pytest.raises(InputValidationError):
            parse_period("year")

    def test_default_period(self):
        assert parse_period(None).value == "allTime"


class TestUserStats:

    @pytest.mark.asyncio
    async def test_profile(self, test_db, make_user, make_word):
        user = await make_user(display_name="Maria")
        await make_word("mere", display="mere")
        await award_points(test_db, user.id, "mere", "discovery")
        await award_points(test_db, user.id, "fara-intrare", "example_add")

        stats = await get_user_stats(test_db, user.id)

        assert stats["displayName"] == "Maria"
        assert stats["totalPoints"] == 1.5
        assert stats["wordsDiscovered"] == 1
        assert stats["todayDiscoveries"] == 1
        assert stats["remainingDiscoveries"] == 49
        assert stats["totalContributions"] == 2
        displays = {c["wordId"]: c["wordDisplay"] for c in stats["recentContributions"]}
        assert displays == {"mere": "mere", "fara-intrare": "fara-intrare"}

    @pytest.mark.asyncio
    async def test_missing_user(self, test_db):
        with pytest.raises(UserNotFoundError):
            await get_user_stats(test_db, 404)
