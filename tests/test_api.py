"""
Integration Tests for the HTTP API

Runs the FastAPI app in-process through httpx's ASGITransport with the
database, gateway and quota tracker replaced by test doubles.
"""

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel


class TestHealth:

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        body = response.json()
        assert response.status_code == 200
        assert body["components"]["gemini_configured"] is False
        assert body["quota_backend"] == "memory"


class TestAuthEndpoints:

    @pytest.mark.asyncio
    async def test_register_login_me(self, client, sample_user_data):
        response = await client.post("/register", json=sample_user_data)
        assert response.status_code == 201
        assert response.json()["total_points"] == 0.0

        response = await client.post("/login", data={
            "username": sample_user_data["email"],
            "password": sample_user_data["password"],
        })
        assert response.status_code == 200
        token = response.json()["access_token"]

        response = await client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["email"] == sample_user_data["email"]

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client, sample_user_data):
        await client.post("/register", json=sample_user_data)
        response = await client.post("/register", json=sample_user_data)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_wrong_password(self, client, sample_user_data):
        await client.post("/register", json=sample_user_data)
        response = await client.post("/login", data={
            "username": sample_user_data["email"],
            "password": "wrong",
        })
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_requires_token(self, client):
        response = await client.get("/users/me")
        assert response.status_code == 401
        assert response.json()["error"] == "AuthenticationError"


class TestSearchEndpoint:

    @pytest.mark.asyncio
    async def test_existing_word(self, client, make_word):
        await make_word("mere")

        response = await client.post("/api/search", json={"term": "mere"})

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["data"]["found"] is True
        assert body["data"]["wordId"] == "mere"
        assert "pointsAwarded" not in body["data"]

    @pytest.mark.asyncio
    async def test_new_word_for_user(self, client, make_user, auth_headers):
        user = await make_user()

        response = await client.post("/api/search", json={"term": "câine"}, headers=auth_headers(user))

        body = response.json()
        assert response.status_code == 200
        assert body["data"]["isNewDiscovery"] is True
        assert body["data"]["pointsAwarded"] == 1.0
        assert body["data"]["word"]["display"] == "câine"
        assert body["message"].startswith("Felicitări!")

        profile = await client.get(f"/api/users/{user.id}")
        assert profile.json()["data"]["totalPoints"] == 1.0

    @pytest.mark.asyncio
    async def test_anonymous_discovery(self, client):
        response = await client.post("/api/search", json={"term": "câine"})

        body = response.json()
        assert response.status_code == 200
        assert body["data"]["isAnonymousDiscovery"] is True
        assert body["data"]["pointsAwarded"] is None

    @pytest.mark.asyncio
    async def test_invalid_token_is_anonymous(self, client):
        response = await client.post(
            "/api/search", json={"term": "câine"}, headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.json()["data"]["isAnonymousDiscovery"] is True

    @pytest.mark.asyncio
    async def test_low_confidence(self, client, gateway, ai_reply):
        gateway.llm = FakeListChatModel(responses=[ai_reply(confidence=0.4)])

        response = await client.post("/api/search", json={"term": "câine"})

        assert response.status_code == 422
        assert response.json()["error"] == "WordNotVerifiedError"

        missing = await client.get("/api/words/caine")
        assert missing.status_code == 404

    @pytest.mark.parametrize("term", ["x1", "", None, 42])
    @pytest.mark.asyncio
    async def test_invalid_format(self, client, term):
        response = await client.post("/api/search", json={"term": term})
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidWordFormatError"

    @pytest.mark.asyncio
    async def test_autocomplete(self, client, make_word):
        await make_word("mere")
        await make_word("merisor", display="merișor")

        response = await client.get("/api/autocomplete", params={"q": "mer"})

        assert response.status_code == 200
        assert [s["id"] for s in response.json()["data"]] == ["mere", "merisor"]

    @pytest.mark.asyncio
    async def test_autocomplete_short_query(self, client):
        response = await client.get("/api/autocomplete", params={"q": "m"})
        assert response.json()["data"] == []


class TestWordEndpoints:

    @pytest.mark.asyncio
    async def test_get_word(self, client, make_word):
        await make_word("mere")
        response = await client.get("/api/words/mere")
        assert response.status_code == 200
        assert response.json()["data"]["partOfSpeech"] == "substantiv"

    @pytest.mark.asyncio
    async def test_recent(self, client, make_word):
        await make_word("mere")
        response = await client.get("/api/words/recent")
        assert [w["id"] for w in response.json()["data"]] == ["mere"]

    @pytest.mark.asyncio
    async def test_vote_flow(self, client, make_user, make_word, auth_headers):
        user = await make_user()
        await make_word("mere")
        headers = auth_headers(user)

        response = await client.post("/api/words/mere/vote", json={"voteType": "like"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["counts"]["likes"] == 1

        response = await client.get("/api/words/mere/vote", headers=headers)
        assert response.json()["data"]["userVote"] == "like"

        response = await client.post("/api/words/mere/vote", json={"voteType": None}, headers=headers)
        assert response.json()["message"] == "Vote removed"
        assert response.json()["data"]["counts"]["likes"] == 0

    @pytest.mark.asyncio
    async def test_vote_requires_auth(self, client, make_word):
        await make_word("mere")
        response = await client.post("/api/words/mere/vote", json={"voteType": "like"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_vote_type(self, client, make_user, make_word, auth_headers):
        user = await make_user()
        await make_word("mere")
        response = await client.post(
            "/api/words/mere/vote", json={"voteType": "love"}, headers=auth_headers(user)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_vote_type_keeps_vote(self, client, make_user, make_word, auth_headers):
        user = await make_user()
        await make_word("mere")
        headers = auth_headers(user)
        await client.post("/api/words/mere/vote", json={"voteType": "like"}, headers=headers)

        response = await client.post("/api/words/mere/vote", json={}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "InputValidationError"
        state = await client.get("/api/words/mere/vote", headers=headers)
        assert state.json()["data"]["userVote"] == "like"
        assert state.json()["data"]["counts"]["likes"] == 1

    @pytest.mark.asyncio
    async def test_vote_unknown_word(self, client, make_user, auth_headers):
        user = await make_user()
        response = await client.post(
            "/api/words/nu-exista/vote", json={"voteType": "like"}, headers=auth_headers(user)
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_contribution(self, client, make_user, make_word, auth_headers):
        user = await make_user()
        await make_word("mere")

        response = await client.post(
            "/api/words/mere/contributions",
            json={"type": "synonym_add", "content": "poame"},
            headers=auth_headers(user),
        )

        body = response.json()
        assert response.status_code == 200
        assert body["data"]["pointsAwarded"] == 0.5
        assert body["data"]["word"]["synonyms"] == ["poame"]

    @pytest.mark.asyncio
    async def test_regenerate(self, client, make_word):
        await make_word("caine", display="caine")

        response = await client.post("/api/words/caine/regenerate")

        body = response.json()
        assert response.status_code == 200
        assert body["data"]["confidence"] == 0.9
        assert body["data"]["word"]["display"] == "câine"
        assert body["message"] == "Word regenerated successfully (1x)"

    @pytest.mark.asyncio
    async def test_regenerate_forbidden_in_production(self, client, make_word, monkeypatch):
        from config.settings import settings
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        await make_word("caine")

        response = await client.post("/api/words/caine/regenerate")

        assert response.status_code == 403


class TestCommunityEndpoints:

    @pytest.mark.asyncio
    async def test_flag(self, client, make_user, make_word, auth_headers):
        user = await make_user()
        await make_word("mere")

        response = await client.post(
            "/api/flag",
            json={"wordId": "mere", "reason": "Definiția este greșită"},
            headers=auth_headers(user),
        )

        assert response.status_code == 200
        assert response.json()["data"]["flagId"] == 1

    @pytest.mark.asyncio
    async def test_flag_short_reason(self, client, make_user, make_word, auth_headers):
        user = await make_user()
        await make_word("mere")

        response = await client.post(
            "/api/flag", json={"wordId": "mere", "reason": "rău"}, headers=auth_headers(user)
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_leaderboard(self, client, make_user):
        user = await make_user(display_name="Ana", total_points=3.0, words_discovered=3)

        response = await client.get("/api/leaderboard", params={"period": "allTime"})

        entry = response.json()["data"][0]
        assert entry == {
            "uid": user.id,
            "displayName": "Ana",
            "photoURL": None,
            "totalPoints": 3.0,
            "wordsDiscovered": 3,
            "rank": 1,
        }

    @pytest.mark.asyncio
    async def test_leaderboard_invalid_period(self, client):
        response = await client.get("/api/leaderboard", params={"period": "year"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_user(self, client):
        response = await client.get("/api/users/999")
        assert response.status_code == 404
