"""
Word Store

Persistence and lifecycle of dictionary entries:

    absent -> ai-discovered (verified=False) -> verified / community-verified

plus a regeneration axis (content replaced, regeneration_count incremented,
identity and creation metadata preserved).

Counters are only changed through apply_counter_deltas(), which issues a
single UPDATE ... SET col = col + delta statement.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel
from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import (
    AUTOCOMPLETE_MAX_RESULTS,
    AUTOCOMPLETE_MIN_LENGTH,
    CreatedBy,
    ExampleSource,
    VOTE_COUNTER_FIELDS,
)
from config.settings import settings
from core.models import Word
from services.ai.word_analysis import AIWordRecord, AnalysisStatus, WordAnalysisGateway
from services.dictionary.normalizer import denormalize_word, normalize_word
from utils.exceptions import (
    AIServiceError,
    AuthorizationError,
    WordNotFoundError,
    WordNotVerifiedError,
)
from utils.logging import get_logger, log_word_action
from utils.timestamps import now

logger = get_logger(__name__)

COUNTER_COLUMNS = frozenset(VOTE_COUNTER_FIELDS.values())


# =============================================================================
# Lookup
# =============================================================================

async def get_word(db: AsyncSession, word_id: str) -> Optional[Word]:
    return await db.get(Word, word_id)


async def require_word(db: AsyncSession, word_id: str) -> Word:
    word = await get_word(db, word_id)
    if word is None:
        raise WordNotFoundError(word_id, display=denormalize_word(word_id))
    return word


async def word_exists(db: AsyncSession, word_id: str) -> bool:
    result = await db.execute(select(Word.id).where(Word.id == word_id))
    return result.first() is not None


# =============================================================================
# Creation
# =============================================================================

def _dump(model: Optional[BaseModel]) -> Optional[Dict[str, Any]]:
    if model is None:
        return None
    data = model.model_dump(by_alias=True, exclude_none=True)
    return data or None


def analysis_fields(record: AIWordRecord) -> Dict[str, Any]:
    """Map a validated analysis onto Word columns (every AI-derived field)."""
    definitions = []
    for index, definition in enumerate(record.definitions):
        entry = {"id": f"def-{index}", "shortDef": definition.short_def}
        if definition.long_def:
            entry["longDef"] = definition.long_def
        if definition.register:
            entry["register"] = definition.register
        if definition.domain:
            entry["domain"] = definition.domain
        definitions.append(entry)

    return {
        "lemma": record.lemma,
        "part_of_speech": record.part_of_speech.value,
        "definitions": definitions,
        "examples": [{"text": text, "source": ExampleSource.AI.value} for text in record.examples],
        "synonyms": list(record.synonyms),
        "antonyms": list(record.antonyms),
        "related_words": list(record.related_words),
        "pronunciation": record.pronunciation,
        "syllables": list(record.syllables),
        "etymology": record.etymology,
        "tags": list(record.tags),
        "forms": dict(record.forms or {}),
        "noun_forms": _dump(record.noun_forms),
        "verb_forms": _dump(record.verb_forms),
        "adjective_forms": _dump(record.adjective_forms),
        "translations": [t.model_dump(exclude_none=True) for t in record.translations or []],
        "collocations": [c.model_dump() for c in record.collocations or []],
        "usage_notes": [n.model_dump() for n in record.usage_notes or []],
        "frequency_level": record.frequency_level,
        "difficulty_level": record.difficulty_level,
        "ai_version": settings.AI_VERSION,
    }


async def create_word_from_analysis(
    db: AsyncSession,
    word_id: str,
    display: str,
    record: AIWordRecord,
    created_by_user_id: Optional[int] = None
) -> Word:
    """
    Persist a new entry from a validated analysis.

    Raises:
        IntegrityError: another request created word_id first (session is
            rolled back before re-raising)
    """
    word = Word(
        id=word_id,
        display=display,
        created_by=CreatedBy.AI.value,
        created_by_user_id=created_by_user_id,
        created_at=now(),
        verified=False,
        community_verified=False,
        likes_count=0,
        dislikes_count=0,
        validations_count=0,
        errors_count=0,
        regeneration_count=0,
        **analysis_fields(record),
    )
    db.add(word)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        log_word_action("create", word_id, success=False, details="already created concurrently")
        raise

    log_word_action("create", word_id, success=True, details=f"by user {created_by_user_id or 'anonymous'}")
    return word


# =============================================================================
# Regeneration
# =============================================================================

async def regenerate_word(
    db: AsyncSession,
    word_id: str,
    gateway: WordAnalysisGateway
) -> Tuple[Word, float]:
    """
    Re-run the analysis for an existing entry and replace its AI content.

    Only allowed when ENVIRONMENT is development. The AI lemma becomes the
    display form. Identity, creation metadata, verified flag and vote
    counters are preserved.

    Returns:
        (word, confidence)
    """
    if not settings.is_development:
        raise AuthorizationError("This endpoint is only available in development")

    word = await require_word(db, word_id)
    result = await gateway.analyze(word.display)

    if result.status == AnalysisStatus.UNAVAILABLE:
        log_word_action("regenerate", word_id, success=False, details=result.reason)
        raise AIServiceError(
            "Failed to regenerate word data - AI unavailable",
            service=WordAnalysisGateway.SERVICE_NAME,
            details={"reason": result.reason},
        )

    if not result.ok:
        log_word_action("regenerate", word_id, success=False, details=result.reason)
        raise WordNotVerifiedError(
            "Failed to regenerate word data - AI returned invalid response",
            cause=result.status.value,
        )

    for field, value in analysis_fields(result.record).items():
        setattr(word, field, value)
    word.display = result.record.lemma
    word.last_regenerated_at = now()
    word.regeneration_count = (word.regeneration_count or 0) + 1

    await db.commit()
    await db.refresh(word)

    log_word_action("regenerate", word_id, success=True, details=f"{word.regeneration_count}x")
    return word, result.record.confidence


# =============================================================================
# Counters
# =============================================================================

async def apply_counter_deltas(db: AsyncSession, word_id: str, deltas: Dict[str, int]) -> None:
    """
    Apply all counter changes in one UPDATE statement. Does not commit.

    Args:
        deltas: counter column -> signed delta, e.g. {"likes_count": -1, "dislikes_count": 1}
    """
    unknown = set(deltas) - COUNTER_COLUMNS
    if unknown:
        raise ValueError(f"Not a vote counter: {sorted(unknown)}")

    values = {
        column: getattr(Word, column) + delta
        for column, delta in deltas.items()
        if delta
    }
    if not values:
        return

    await db.execute(
        update(Word)
        .where(Word.id == word_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )


# =============================================================================
# Listing
# =============================================================================

async def find_suggestions(
    db: AsyncSession,
    query: Optional[str],
    limit: int = AUTOCOMPLETE_MAX_RESULTS
) -> List[Dict[str, str]]:
    """
    Autocomplete suggestions for partial text.

    Matches display, lemma or canonical key; prefix matches first, then
    substring matches, each group alphabetical by key. Fewer than two
    characters yields an empty list.
    """
    if not query or len(query.strip()) < AUTOCOMPLETE_MIN_LENGTH:
        return []

    query_lower = query.lower().strip()
    normalized = normalize_word(query)
    columns = (Word.id, Word.lemma, Word.display, Word.part_of_speech)

    prefix = or_(
        Word.id.startswith(normalized, autoescape=True),
        Word.display.istartswith(query_lower, autoescape=True),
    )
    result = await db.execute(
        select(*columns).where(prefix).order_by(Word.id).limit(limit)
    )
    rows = list(result.all())

    if len(rows) < limit:
        result = await db.execute(
            select(*columns)
            .where(or_(
                Word.id.contains(normalized, autoescape=True),
                Word.display.icontains(query_lower, autoescape=True),
                Word.lemma.icontains(query_lower, autoescape=True),
            ))
            .where(~prefix)
            .order_by(Word.id)
            .limit(limit - len(rows))
        )
        rows.extend(result.all())

    return [
        {
            "id": row.id,
            "lemma": row.lemma or "",
            "display": row.display or "",
            "partOfSpeech": row.part_of_speech or "cuvânt",
        }
        for row in rows
    ]


async def list_recent_discoveries(db: AsyncSession, limit: int = 10) -> List[Word]:
    """Most recently AI-discovered entries, newest first."""
    result = await db.execute(
        select(Word)
        .where(Word.created_by == CreatedBy.AI.value)
        .order_by(Word.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
