"""
Unit Tests for the Word Analysis Gateway

The chat model is replaced with LangChain's FakeListChatModel so the
prompt -> model -> validation path runs end to end without network access.
"""

import asyncio
import json
from unittest.mock import patch

import pytest

from config.constants import PartOfSpeech
from services.ai.word_analysis import AnalysisStatus, WordAnalysisGateway


class TestAnalyzeSuccess:

    @pytest.mark.asyncio
    async def test_valid_reply_is_ok(self, make_gateway):
        result = await make_gateway().analyze("câine", min_confidence=0.7)

        assert result.status == AnalysisStatus.OK
        assert result.ok is True
        assert result.confidence == 0.9
        assert result.record.lemma == "câine"
        assert result.record.part_of_speech == PartOfSpeech.SUBSTANTIV
        assert result.record.noun_forms.plural_definit == "câinii"
        assert result.record.translations[0].word == "dog"

    @pytest.mark.asyncio
    async def test_plain_json_without_fence(self, make_gateway, ai_reply):
        raw = ai_reply().removeprefix("```json\n").removesuffix("\n```")
        result = await make_gateway(raw).analyze("câine")
        assert result.ok is True

    @pytest.mark.asyncio
    async def test_unknown_fields_are_ignored(self, make_gateway, ai_reply):
        result = await make_gateway(ai_reply(extraField="x")).analyze("câine")
        assert result.ok is True

    @pytest.mark.asyncio
    async def test_no_floor_without_min_confidence(self, make_gateway, ai_reply):
        result = await make_gateway(ai_reply(confidence=0.1)).analyze("câine")
        assert result.ok is True


class TestAnalyzeSchemaErrors:

    @pytest.mark.asyncio
    async def test_empty_reply(self, make_gateway):
        result = await make_gateway("   ").analyze("câine")
        assert result.status == AnalysisStatus.SCHEMA_ERROR
        assert result.record is None

    @pytest.mark.asyncio
    async def test_not_json(self, make_gateway):
        result = await make_gateway("Câinele este un animal.").analyze("câine")
        assert result.status == AnalysisStatus.SCHEMA_ERROR
        assert result.reason == "invalid JSON"

    @pytest.mark.asyncio
    async def test_missing_required_field(self, make_gateway, ai_reply):
        reply = json.loads(ai_reply().removeprefix("```json\n").removesuffix("\n```"))
        del reply["etymology"]
        result = await make_gateway(json.dumps(reply)).analyze("câine")
        assert result.status == AnalysisStatus.SCHEMA_ERROR
        assert "etymology" in result.reason

    @pytest.mark.parametrize("overrides", [
        {"partOfSpeech": "noun"},
        {"definitions": []},
        {"definitions": [{"shortDef": "   "}]},
        {"confidence": 1.5},
        {"confidence": -0.1},
        {"isValid": "true"},
        {"translations": [{"language": "it", "word": "cane"}]},
        {"difficultyLevel": "D1"},
        {"usageNotes": [{"type": "style", "note": "x"}]},
    ])
    @pytest.mark.asyncio
    async def test_schema_violations(self, make_gateway, ai_reply, overrides):
        result = await make_gateway(ai_reply(**overrides)).analyze("câine")
        assert result.status == AnalysisStatus.SCHEMA_ERROR
        assert result.ok is False


class TestAnalyzeLowConfidence:

    @pytest.mark.asyncio
    async def test_model_marks_word_invalid(self, make_gateway, ai_reply):
        result = await make_gateway(ai_reply(isValid=False, confidence=0.0)).analyze("xyzabc")
        assert result.status == AnalysisStatus.LOW_CONFIDENCE
        assert result.record.is_valid is False

    @pytest.mark.asyncio
    async def test_below_floor(self, make_gateway, ai_reply):
        result = await make_gateway(ai_reply(confidence=0.5)).analyze("câine", min_confidence=0.7)
        assert result.status == AnalysisStatus.LOW_CONFIDENCE
        assert result.confidence == 0.5

    @pytest.mark.asyncio
    async def test_floor_is_inclusive(self, make_gateway, ai_reply):
        result = await make_gateway(ai_reply(confidence=0.7)).analyze("câine", min_confidence=0.7)
        assert result.status == AnalysisStatus.OK


class TestAnalyzeUnavailable:

    @pytest.mark.asyncio
    async def test_unconfigured(self):
        with patch("services.ai.word_analysis.settings") as mock_settings:
            mock_settings.GOOGLE_API_KEY = None
            mock_settings.AI_TIMEOUT_SECONDS = 30.0
            mock_settings.GEMINI_MODEL = "gemini-1.5-flash"
            gateway = WordAnalysisGateway()

        assert gateway.configured is False
        result = await gateway.analyze("câine")
        assert result.status == AnalysisStatus.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_timeout(self, make_gateway):
        gateway = make_gateway(timeout=0.01)

        async def slow(_text):
            await asyncio.sleep(1)
            return ""

        with patch.object(gateway, "_generate", side_effect=slow):
            result = await gateway.analyze("câine")

        assert result.status == AnalysisStatus.UNAVAILABLE
        assert result.reason == "timeout"

    @pytest.mark.asyncio
    async def test_provider_error(self, make_gateway):
        gateway = make_gateway()

        with patch.object(gateway, "_generate", side_effect=RuntimeError("quota exhausted")):
            result = await gateway.analyze("câine")

        assert result.status == AnalysisStatus.UNAVAILABLE
        assert "quota exhausted" in result.reason


class TestMessageText:

    def test_joins_content_parts(self):
        parts = [{"type": "text", "text": "{\"a\": "}, {"type": "text", "text": "1}"}]
        assert WordAnalysisGateway._message_text(parts) == "{\"a\": 1}"

    def test_none_content(self):
        assert WordAnalysisGateway._message_text(None) == ""
