"""
Unit Tests for the Search Orchestrator

Search-or-discover with a fake chat model behind the real gateway.
"""

import pytest
from sqlalchemy import func, select

from core.models import Contribution, SearchLog, User, Word
from services.dictionary.search import discovery_message, search_or_discover
from utils.exceptions import (
    AuthenticationError,
    DiscoveryRejectedError,
    InvalidWordFormatError,
    QuotaExceededError,
    WordNotVerifiedError,
)


async def _count(db, model):
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class TestExistingWord:

    @pytest.mark.asyncio
    async def test_found_without_points(self, test_db, make_user, make_word, make_gateway, quota):
        user = await make_user()
        await make_word("mere")

        outcome = await search_or_discover(test_db, "Mere", user=user, gateway=make_gateway(), tracker=quota)

        assert outcome.found is True
        assert outcome.is_new_discovery is False
        assert outcome.word.id == "mere"
        assert outcome.to_dict()["wordId"] == "mere"
        assert "pointsAwarded" not in outcome.to_dict()
        await test_db.refresh(user)
        assert user.total_points == 0.0

    @pytest.mark.asyncio
    async def test_diacritic_variant_hits_same_entry(self, test_db, make_word, make_gateway, quota):
        await make_word("caine", display="câine")

        outcome = await search_or_discover(test_db, "caine", gateway=make_gateway(), tracker=quota)

        assert outcome.word.display == "câine"
        assert outcome.is_new_discovery is False

    @pytest.mark.asyncio
    async def test_search_is_logged(self, test_db, make_word, make_gateway, quota):
        await make_word("mere")

        await search_or_discover(test_db, "mere", gateway=make_gateway(), tracker=quota)

        log = (await test_db.execute(select(SearchLog))).scalars().one()
        assert log.normalized_term == "mere"
        assert log.found is True


class TestInvalidInput:

    @pytest.mark.parametrize("term", ["a", "abc123", "brr", "<script>", ""])
    @pytest.mark.asyncio
    async def test_rejected_before_lookup(self, test_db, make_gateway, quota, term):
        with pytest.raises(InvalidWordFormatError) as exc_info:
            await search_or_discover(test_db, term, gateway=make_gateway(), tracker=quota)

        assert exc_info.value.status_code == 400
        assert await _count(test_db, SearchLog) == 0

    @pytest.mark.asyncio
    async def test_non_string(self, test_db, make_gateway, quota):
        with pytest.raises(InvalidWordFormatError):
            await search_or_discover(test_db, 123, gateway=make_gateway(), tracker=quota)


class TestDiscovery:

    @pytest.mark.asyncio
    async def test_user_discovery_awards_point(self, test_db, make_user, make_gateway, quota):
        user = await make_user()

        outcome = await search_or_discover(test_db, "câine", user=user, gateway=make_gateway(), tracker=quota)

        assert outcome.is_new_discovery is True
        assert outcome.is_anonymous_discovery is False
        assert outcome.points_awarded == 1.0
        assert outcome.message == discovery_message(1.0)

        word = await test_db.get(Word, "caine")
        assert word.display == "câine"
        assert word.created_by == "ai"
        assert word.created_by_user_id == user.id
        assert word.verified is False
        assert word.likes_count == 0
        assert word.regeneration_count == 0
        assert word.definitions[0]["id"] == "def-0"
        assert word.examples == [{"text": "Câinele latră la poartă.", "source": "ai"}]
        assert word.noun_forms["pluralDefinit"] == "câinii"

        await test_db.refresh(user)
        assert user.total_points == 1.0
        assert user.words_discovered == 1

    @pytest.mark.asyncio
    async def test_second_search_is_plain_hit(self, test_db, make_user, make_gateway, quota):
        user = await make_user()
        gateway = make_gateway()

        await search_or_discover(test_db, "câine", user=user, gateway=gateway, tracker=quota)
        outcome = await search_or_discover(test_db, "CAINE", user=user, gateway=gateway, tracker=quota)

        assert outcome.found is True
        assert outcome.is_new_discovery is False
        assert await _count(test_db, Contribution) == 1

    @pytest.mark.asyncio
    async def test_anonymous_discovery(self, test_db, make_gateway, quota):
        outcome = await search_or_discover(
            test_db, "câine", client_ip="10.0.0.1", gateway=make_gateway(), tracker=quota
        )

        assert outcome.is_new_discovery is True
        assert outcome.is_anonymous_discovery is True
        assert outcome.points_awarded is None
        assert "Autentifică-te" in outcome.message
        assert (await test_db.get(Word, "caine")).created_by_user_id is None
        assert await _count(test_db, Contribution) == 0

    @pytest.mark.asyncio
    async def test_auth_required_for_discovery(self, test_db, make_word, make_gateway, quota, monkeypatch):
        from config.settings import settings
        monkeypatch.setattr(settings, "REQUIRE_AUTH_FOR_DISCOVERY", True)
        await make_word("mere")

        # Existing entries stay readable
        assert (await search_or_discover(test_db, "mere", gateway=make_gateway(), tracker=quota)).found

        with pytest.raises(AuthenticationError):
            await search_or_discover(test_db, "câine", gateway=make_gateway(), tracker=quota)

    @pytest.mark.asyncio
    async def test_anonymous_hourly_quota(self, test_db, make_gateway, ai_reply, quota, monkeypatch):
        from config.settings import settings
        monkeypatch.setattr(settings, "ANON_DISCOVERY_PER_HOUR", 1)
        gateway = make_gateway(ai_reply(), ai_reply(lemma="mere"))

        await search_or_discover(test_db, "câine", client_ip="10.0.0.1", gateway=gateway, tracker=quota)

        with pytest.raises(QuotaExceededError):
            await search_or_discover(test_db, "mere", client_ip="10.0.0.1", gateway=gateway, tracker=quota)

        await search_or_discover(test_db, "mere", client_ip="10.0.0.2", gateway=gateway, tracker=quota)


class TestRejectedDiscovery:

    @pytest.mark.asyncio
    async def test_low_confidence_persists_nothing(self, test_db, make_user, make_gateway, ai_reply, quota):
        user = await make_user()
        gateway = make_gateway(ai_reply(confidence=0.5))

        with pytest.raises(WordNotVerifiedError) as exc_info:
            await search_or_discover(test_db, "câine", user=user, gateway=gateway, tracker=quota)

        assert exc_info.value.status_code == 422
        assert exc_info.value.details["cause"] == "low_confidence"
        assert await test_db.get(Word, "caine") is None
        assert await _count(test_db, Contribution) == 0
        await test_db.refresh(user)
        assert user.total_points == 0.0

    @pytest.mark.asyncio
    async def test_model_says_invalid(self, test_db, make_gateway, ai_reply, quota):
        gateway = make_gateway(ai_reply(isValid=False, confidence=0.0))

        with pytest.raises(WordNotVerifiedError):
            await search_or_discover(test_db, "blabla", gateway=gateway, tracker=quota)

        assert await _count(test_db, Word) == 0

    @pytest.mark.asyncio
    async def test_schema_error(self, test_db, make_gateway, quota):
        with pytest.raises(WordNotVerifiedError) as exc_info:
            await search_or_discover(test_db, "câine", gateway=make_gateway("nu e json"), tracker=quota)

        assert exc_info.value.details["cause"] == "schema_error"
        assert await _count(test_db, Word) == 0

    @pytest.mark.asyncio
    async def test_daily_limit_blocks_before_ai(self, test_db, make_user, make_gateway, quota, monkeypatch):
        from config.settings import settings
        from services.points.ledger import award_points
        monkeypatch.setattr(settings, "MAX_DAILY_DISCOVERIES", 1)
        user = await make_user()
        await award_points(test_db, user.id, "mere", "discovery")

        gateway = make_gateway()
        with pytest.raises(QuotaExceededError) as exc_info:
            await search_or_discover(test_db, "câine", user=user, gateway=gateway, tracker=quota)

        assert exc_info.value.details["scope"] == "daily_discoveries"
        assert gateway.llm.i == 0

    @pytest.mark.asyncio
    async def test_burst_rejected(self, test_db, make_user, make_gateway, quota, monkeypatch):
        from config.settings import settings
        from services.points.ledger import award_points
        monkeypatch.setattr(settings, "BURST_MAX_DISCOVERIES", 1)
        user = await make_user()
        await award_points(test_db, user.id, "mere", "discovery")

        with pytest.raises(DiscoveryRejectedError) as exc_info:
            await search_or_discover(test_db, "câine", user=user, gateway=make_gateway(), tracker=quota)

        assert exc_info.value.status_code == 409
        assert await test_db.get(Word, "caine") is None

    @pytest.mark.asyncio
    async def test_ai_daily_quota(self, test_db, make_user, make_gateway, ai_reply, quota, monkeypatch):
        from config.settings import settings
        monkeypatch.setattr(settings, "AI_DAILY_LIMIT", 1)
        user = await make_user()
        gateway = make_gateway(ai_reply(), ai_reply(lemma="mere"))

        await search_or_discover(test_db, "câine", user=user, gateway=gateway, tracker=quota)

        with pytest.raises(QuotaExceededError) as exc_info:
            await search_or_discover(test_db, "mere", user=user, gateway=gateway, tracker=quota)

        assert exc_info.value.details["scope"] == "ai_daily"
        assert await test_db.get(Word, "mere") is None
