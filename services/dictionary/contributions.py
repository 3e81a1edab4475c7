"""
User Contributions

Signed-in users can enrich an existing entry with an example, a synonym, an
antonym or an extra definition, or report an error. The entry is updated
first, then the ledger credits the points for the contribution type.
"""

from typing import Any, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import CONTRIBUTION_MAX_LENGTH, ContributionType, ExampleSource
from config.settings import settings
from core.models import Word
from services.dictionary.word_store import require_word
from services.points.ledger import AwardResult, award_points
from services.security.rate_limiter import QuotaTracker, check_endpoint_rate_limit
from utils.exceptions import InputValidationError, QuotaExceededError
from utils.logging import get_logger
from utils.sanitize import sanitize_text

logger = get_logger(__name__)

USER_CONTRIBUTION_TYPES = (
    ContributionType.EXAMPLE_ADD,
    ContributionType.SYNONYM_ADD,
    ContributionType.ANTONYM_ADD,
    ContributionType.DEFINITION_ENHANCE,
    ContributionType.REPORT_ERROR,
)


def parse_contribution_type(value: Any) -> ContributionType:
    try:
        kind = ContributionType(value)
    except (ValueError, TypeError):
        kind = None
    if kind not in USER_CONTRIBUTION_TYPES:
        raise InputValidationError(
            "Tip de contribuție invalid",
            field="type",
            details={"allowed": [t.value for t in USER_CONTRIBUTION_TYPES]},
        )
    return kind


def _append_unique(values, item: str):
    lowered = {value.lower() for value in values or []}
    if item.lower() in lowered:
        return None
    return [*(values or []), item]


def _apply(word: Word, kind: ContributionType, content: str, user_id: int) -> None:
    if kind == ContributionType.EXAMPLE_ADD:
        word.examples = [
            *(word.examples or []),
            {"text": content, "source": ExampleSource.USER.value, "authorUserId": str(user_id)},
        ]

    elif kind in (ContributionType.SYNONYM_ADD, ContributionType.ANTONYM_ADD):
        column = "synonyms" if kind == ContributionType.SYNONYM_ADD else "antonyms"
        updated = _append_unique(getattr(word, column), content)
        if updated is None:
            raise InputValidationError("Cuvântul există deja în listă", field="content")
        setattr(word, column, updated)

    elif kind == ContributionType.DEFINITION_ENHANCE:
        definitions = list(word.definitions or [])
        definitions.append({"id": f"def-{len(definitions)}", "shortDef": content})
        word.definitions = definitions

    # report_error only lands in the ledger


async def add_contribution(
    db: AsyncSession,
    user_id: int,
    word_id: str,
    kind: Any,
    content: Any,
    tracker: Optional[QuotaTracker] = None
) -> Tuple[Word, AwardResult]:
    """
    Apply a user contribution to a word and credit it.

    Raises:
        InputValidationError: unknown type, empty content, duplicate synonym/antonym
        QuotaExceededError: more than CONTRIBUTION_RATE_LIMIT contributions in the window
        WordNotFoundError: no such word
    """
    kind = parse_contribution_type(kind)

    cleaned = sanitize_text(content, max_length=CONTRIBUTION_MAX_LENGTH) if isinstance(content, str) else ""
    if not cleaned:
        raise InputValidationError("Conținutul nu poate fi gol", field="content")

    allowed = await check_endpoint_rate_limit(
        str(user_id), "contribution",
        settings.CONTRIBUTION_RATE_LIMIT, settings.CONTRIBUTION_RATE_WINDOW_SECONDS,
        tracker=tracker,
    )
    if not allowed:
        raise QuotaExceededError("Prea multe contribuții. Te rugăm să încetinești.", scope="contribution")

    word = await require_word(db, word_id)
    _apply(word, kind, cleaned, user_id)
    await db.commit()

    award = await award_points(db, user_id, word_id, kind, extra={"content": cleaned})
    await db.refresh(word)
    logger.info(f"Contribution {kind.value} on '{word_id}' by user {user_id} (+{award.points:g})")
    return word, award
