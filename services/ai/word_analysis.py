"""
Word Analysis Gateway (LangChain)

Asks a chat model (Gemini via langchain-google-genai) to analyze a Romanian
word and validates the reply against a strict schema before anything else
in the application sees it.

The gateway never returns partially validated data. Every call yields an
AnalysisResult whose status is one of:

    OK              record validated, model considers the word valid
    SCHEMA_ERROR    empty reply, unparsable JSON or schema violation
    LOW_CONFIDENCE  model flagged the word invalid, or confidence is below
                    the caller-supplied min_confidence
    UNAVAILABLE     provider not configured, call failed or timed out

The business confidence floor (0.7) belongs to the callers; the gateway only
enforces the schema range [0, 1] unless min_confidence is passed.

Usage:
    from services.ai.word_analysis import get_word_analysis_gateway

    gateway = get_word_analysis_gateway()
    result = await gateway.analyze("câine", min_confidence=0.7)
    if result.ok:
        record = result.record
"""

import asyncio
import json
import time
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.utils.json import parse_json_markdown
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StringConstraints, ValidationError

from config.constants import PartOfSpeech
from config.settings import settings
from services.ai.prompts.word_prompts import build_word_analysis_prompt
from utils.logging import get_logger, log_api_call

logger = get_logger(__name__)

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# =============================================================================
# Output Schema
# =============================================================================

class _AIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AIDefinition(_AIModel):
    short_def: NonEmptyStr = Field(alias="shortDef")
    long_def: Optional[str] = Field(None, alias="longDef")
    register: Optional[str] = None
    domain: Optional[str] = None


class NounForms(_AIModel):
    singular_indefinit: Optional[str] = Field(None, alias="singularIndefinit")
    singular_definit: Optional[str] = Field(None, alias="singularDefinit")
    plural_indefinit: Optional[str] = Field(None, alias="pluralIndefinit")
    plural_definit: Optional[str] = Field(None, alias="pluralDefinit")
    genitiv_dativ_singular: Optional[str] = Field(None, alias="genitivDativSingular")
    genitiv_dativ_plural: Optional[str] = Field(None, alias="genitivDativPlural")


class VerbPersons(_AIModel):
    eu: Optional[str] = None
    tu: Optional[str] = None
    el: Optional[str] = None
    noi: Optional[str] = None
    voi: Optional[str] = None
    ei: Optional[str] = None


class Imperative(_AIModel):
    tu: Optional[str] = None
    voi: Optional[str] = None


class VerbForms(_AIModel):
    infinitiv: Optional[str] = None
    participiu: Optional[str] = None
    gerunziu: Optional[str] = None
    supin: Optional[str] = None

    indicativ_prezent: Optional[VerbPersons] = Field(None, alias="indicativPrezent")
    indicativ_imperfect: Optional[VerbPersons] = Field(None, alias="indicativImperfect")
    indicativ_perfect_simplu: Optional[VerbPersons] = Field(None, alias="indicativPerfectSimplu")
    indicativ_perfect_compus: Optional[VerbPersons] = Field(None, alias="indicativPerfectCompus")
    indicativ_mai_mult_ca_perfect: Optional[VerbPersons] = Field(None, alias="indicativMaiMultCaPerfect")
    indicativ_viitor: Optional[VerbPersons] = Field(None, alias="indicativViitor")

    conjunctiv_prezent: Optional[VerbPersons] = Field(None, alias="conjunctivPrezent")
    conjunctiv_perfect: Optional[VerbPersons] = Field(None, alias="conjunctivPerfect")

    conditional_prezent: Optional[VerbPersons] = Field(None, alias="conditionalPrezent")
    conditional_perfect: Optional[VerbPersons] = Field(None, alias="conditionalPerfect")

    imperativ: Optional[Imperative] = None


class AdjectiveForms(_AIModel):
    masculin_singular: Optional[str] = Field(None, alias="masculinSingular")
    feminin_singular: Optional[str] = Field(None, alias="femininSingular")
    neutru_singular: Optional[str] = Field(None, alias="neutruSingular")
    plural: Optional[str] = None


class AITranslation(_AIModel):
    language: Literal["en", "fr", "es", "de", "hu"]
    word: NonEmptyStr
    note: Optional[str] = None


class AICollocation(_AIModel):
    phrase: NonEmptyStr
    meaning: str


class AIUsageNote(_AIModel):
    type: Literal["grammar", "register", "common_mistake", "context"]
    note: str


class AIWordRecord(_AIModel):
    """Validated structured analysis of a single word."""

    lemma: NonEmptyStr
    part_of_speech: PartOfSpeech = Field(alias="partOfSpeech")
    definitions: List[AIDefinition] = Field(min_length=1)
    examples: List[str]
    synonyms: List[str]
    antonyms: List[str]
    related_words: List[str] = Field(alias="relatedWords")
    etymology: str
    pronunciation: str
    syllables: List[str]
    tags: List[str]

    forms: Optional[Dict[str, str]] = None
    noun_forms: Optional[NounForms] = Field(None, alias="nounForms")
    verb_forms: Optional[VerbForms] = Field(None, alias="verbForms")
    adjective_forms: Optional[AdjectiveForms] = Field(None, alias="adjectiveForms")

    translations: Optional[List[AITranslation]] = None
    collocations: Optional[List[AICollocation]] = None
    usage_notes: Optional[List[AIUsageNote]] = Field(None, alias="usageNotes")
    frequency_level: Optional[Literal["very_rare", "rare", "common", "very_common"]] = Field(
        None, alias="frequencyLevel"
    )
    difficulty_level: Optional[Literal["A1", "A2", "B1", "B2", "C1", "C2"]] = Field(
        None, alias="difficultyLevel"
    )

    is_valid: StrictBool = Field(alias="isValid")
    confidence: float = Field(ge=0.0, le=1.0)


# =============================================================================
# Result Type
# =============================================================================

class AnalysisStatus(str, Enum):
    OK = "ok"
    SCHEMA_ERROR = "schema_error"
    LOW_CONFIDENCE = "low_confidence"
    UNAVAILABLE = "unavailable"


@dataclass
class AnalysisResult:
    """Outcome of one analysis call. Only OK results carry a trusted record."""
    status: AnalysisStatus
    record: Optional[AIWordRecord] = None
    reason: Optional[str] = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == AnalysisStatus.OK

    @property
    def confidence(self) -> Optional[float]:
        return self.record.confidence if self.record else None


# =============================================================================
# Gateway
# =============================================================================

class WordAnalysisGateway:
    """
    Gateway to the text-generation model used for word discovery.

    Attributes:
        llm: LangChain chat model (ChatGoogleGenerativeAI by default), or None
             when no API key is configured
        timeout: Seconds before a call is abandoned
    """

    SERVICE_NAME = "Gemini-LangChain"

    def __init__(
        self,
        llm: Optional[BaseChatModel] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the gateway.

        Args:
            llm: Pre-built chat model. Built from settings when omitted.
            api_key: Google API key. Falls back to settings.GOOGLE_API_KEY.
            model: Gemini model name. Falls back to settings.GEMINI_MODEL.
            timeout: Per-call timeout. Falls back to settings.AI_TIMEOUT_SECONDS.
        """
        self.timeout = timeout if timeout is not None else settings.AI_TIMEOUT_SECONDS
        self.model = model or settings.GEMINI_MODEL
        self.prompt = build_word_analysis_prompt()

        if llm is None:
            api_key = api_key or settings.GOOGLE_API_KEY
            if api_key:
                from langchain_google_genai import ChatGoogleGenerativeAI

                llm = ChatGoogleGenerativeAI(
                    model=self.model,
                    google_api_key=api_key,
                    temperature=0.3,
                    max_output_tokens=2048,
                )
                logger.info(f"WordAnalysisGateway initialized with LangChain, model: {self.model}")
            else:
                logger.warning("GOOGLE_API_KEY not configured - word discovery disabled")

        self.llm = llm

    @property
    def configured(self) -> bool:
        return self.llm is not None

    async def analyze(
        self,
        display_text: str,
        min_confidence: Optional[float] = None
    ) -> AnalysisResult:
        """
        Analyze a word and validate the structured reply.

        Args:
            display_text: The word exactly as the user typed it
            min_confidence: Optional floor; records under it are LOW_CONFIDENCE

        Returns:
            AnalysisResult: Tagged outcome; see module docstring
        """
        if not self.configured:
            return AnalysisResult(AnalysisStatus.UNAVAILABLE, reason="AI provider not configured")

        start = time.perf_counter()
        try:
            content = await asyncio.wait_for(self._generate(display_text), timeout=self.timeout)
        except asyncio.TimeoutError:
            duration = (time.perf_counter() - start) * 1000
            log_api_call(self.SERVICE_NAME, "analyze_word", success=False,
                         duration_ms=duration, error=f"timeout after {self.timeout}s")
            return AnalysisResult(AnalysisStatus.UNAVAILABLE, reason="timeout", duration_ms=duration)
        except Exception as e:
            duration = (time.perf_counter() - start) * 1000
            log_api_call(self.SERVICE_NAME, "analyze_word", success=False,
                         duration_ms=duration, error=str(e))
            return AnalysisResult(AnalysisStatus.UNAVAILABLE, reason=str(e), duration_ms=duration)

        duration = (time.perf_counter() - start) * 1000
        log_api_call(self.SERVICE_NAME, "analyze_word", success=True, duration_ms=duration)

        return self._validate(display_text, content, min_confidence, duration)

    async def _generate(self, display_text: str) -> str:
        """Run the prompt through the model and return the raw text reply."""
        chain = self.prompt | self.llm
        message = await chain.ainvoke({"word": display_text})
        return self._message_text(message.content)

    @staticmethod
    def _message_text(content: Any) -> str:
        # Gemini may return a list of content parts instead of a string
        if isinstance(content, list):
            return "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in content
            )
        return content or ""

    def _validate(
        self,
        display_text: str,
        content: str,
        min_confidence: Optional[float],
        duration_ms: float,
    ) -> AnalysisResult:
        if not content.strip():
            logger.error(f"No content in AI response for '{display_text}'")
            return AnalysisResult(AnalysisStatus.SCHEMA_ERROR, reason="empty response", duration_ms=duration_ms)

        try:
            payload = parse_json_markdown(content, parser=json.loads)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.error(f"AI response for '{display_text}' is not JSON: {e}")
            return AnalysisResult(AnalysisStatus.SCHEMA_ERROR, reason="invalid JSON", duration_ms=duration_ms)

        try:
            record = AIWordRecord.model_validate(payload)
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            logger.error(f"AI response for '{display_text}' failed schema validation: {fields}")
            return AnalysisResult(
                AnalysisStatus.SCHEMA_ERROR,
                reason=f"schema violation: {', '.join(fields)[:200]}",
                duration_ms=duration_ms,
            )

        if not record.is_valid:
            logger.info(f"AI rejected '{display_text}' as not a Romanian word")
            return AnalysisResult(AnalysisStatus.LOW_CONFIDENCE, record=record,
                                  reason="model marked word invalid", duration_ms=duration_ms)

        if min_confidence is not None and record.confidence < min_confidence:
            logger.info(f"AI confidence {record.confidence:.2f} below {min_confidence} for '{display_text}'")
            return AnalysisResult(AnalysisStatus.LOW_CONFIDENCE, record=record,
                                  reason=f"confidence {record.confidence:.2f}", duration_ms=duration_ms)

        return AnalysisResult(AnalysisStatus.OK, record=record, duration_ms=duration_ms)


# --- Singleton ---
_gateway_instance: Optional[WordAnalysisGateway] = None


def get_word_analysis_gateway() -> WordAnalysisGateway:
    """Get singleton WordAnalysisGateway instance."""
    global _gateway_instance
    if _gateway_instance is None:
        _gateway_instance = WordAnalysisGateway()
    return _gateway_instance
