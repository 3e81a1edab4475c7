"""
Search Orchestrator

End-to-end "search or discover":

1. Validate and normalize the term
2. Look up the entry and log the search
3. Found: return it (no points)
4. Not found: auth gate, pre-AI quota guards, AI analysis
5. Signed-in callers: discovery validation, AI daily limit
6. Create the entry, then credit discovery points to signed-in callers

Nothing is persisted unless the analysis is OK. Anonymous discoveries are
stored but earn no points.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import ContributionType
from config.settings import settings
from core.models import SearchLog, User, Word
from services.ai.word_analysis import AnalysisStatus, WordAnalysisGateway, get_word_analysis_gateway
from services.dictionary.normalizer import is_valid_word_format, normalize_word
from services.dictionary.word_store import create_word_from_analysis, get_word
from services.points.discovery import LOW_CONFIDENCE_REASON, validate_discovery
from services.points.ledger import award_points, daily_limit_message, has_exceeded_daily_limit
from services.security.rate_limiter import (
    QuotaTracker,
    check_endpoint_rate_limit,
    check_rate_limit,
    get_quota_tracker,
)
from utils.exceptions import (
    AuthenticationError,
    DiscoveryRejectedError,
    InvalidWordFormatError,
    QuotaExceededError,
    WordNotVerifiedError,
)
from utils.logging import get_logger, log_word_action
from utils.timestamps import now

logger = get_logger(__name__)

ANONYMOUS_WINDOW_SECONDS = 3600

ANONYMOUS_DISCOVERY_MESSAGE = (
    "Cuvânt adăugat cu succes! 🎉 Autentifică-te pentru a câștiga puncte pentru descoperiri ca aceasta!"
)


@dataclass
class SearchOutcome:
    found: bool
    word: Optional[Word] = None
    is_new_discovery: bool = False
    is_anonymous_discovery: bool = False
    points_awarded: Optional[float] = None
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "found": self.found,
            "word": self.word.to_dict() if self.word else None,
            "wordId": self.word.id if self.word else None,
        }
        if self.is_new_discovery:
            data["isNewDiscovery"] = True
            data["isAnonymousDiscovery"] = self.is_anonymous_discovery
            data["pointsAwarded"] = self.points_awarded
        if self.message:
            data["message"] = self.message
        return data


def discovery_message(points: float) -> str:
    unit = "punct" if points == 1 else "puncte"
    return f"Felicitări! Ai descoperit un cuvânt nou și ai primit {points:g} {unit}!"


async def _log_search(
    db: AsyncSession,
    user_id: Optional[int],
    term: str,
    key: str,
    word: Optional[Word]
) -> None:
    db.add(SearchLog(
        user_id=user_id,
        term=term[:100],
        normalized_term=key,
        found=word is not None,
        word_id=word.id if word else None,
        created_at=now(),
    ))
    await db.commit()


async def _guard_ai_spend(
    db: AsyncSession,
    user: Optional[User],
    client_ip: Optional[str],
    tracker: QuotaTracker
) -> None:
    """Reject callers who could never be credited before paying for an AI call."""
    if user is not None:
        if await has_exceeded_daily_limit(db, user.id):
            raise QuotaExceededError(daily_limit_message(), scope="daily_discoveries")
        return

    allowed = await check_endpoint_rate_limit(
        client_ip or "unknown", "anon_discovery",
        settings.ANON_DISCOVERY_PER_HOUR, ANONYMOUS_WINDOW_SECONDS,
        tracker=tracker,
    )
    if not allowed:
        raise QuotaExceededError(
            "Prea multe descoperiri. Autentifică-te sau încearcă mai târziu.",
            scope="anonymous_discovery",
        )


async def search_or_discover(
    db: AsyncSession,
    term: Any,
    user: Optional[User] = None,
    client_ip: Optional[str] = None,
    gateway: Optional[WordAnalysisGateway] = None,
    tracker: Optional[QuotaTracker] = None
) -> SearchOutcome:
    """
    Return the entry for term, generating it with AI when it does not exist.

    Args:
        db: Database session
        term: Raw search text
        user: Signed-in caller, or None for anonymous
        client_ip: Caller address, keys the anonymous quota
        gateway: AI analysis gateway
        tracker: Quota tracker

    Raises:
        InvalidWordFormatError: term is not shaped like a Romanian word
        AuthenticationError: discovery requires sign-in and caller is anonymous
        QuotaExceededError: daily, AI or anonymous quota exhausted
        WordNotVerifiedError: AI could not confirm the word
        DiscoveryRejectedError: duplicate or burst discovery
    """
    if not term or not isinstance(term, str):
        raise InvalidWordFormatError("Invalid search term")

    if not is_valid_word_format(term):
        raise InvalidWordFormatError(term=term)

    key = normalize_word(term)
    user_id = user.id if user is not None else None

    word = await get_word(db, key)
    await _log_search(db, user_id, term, key, word)

    if word is not None:
        return SearchOutcome(found=True, word=word)

    if user is None and settings.REQUIRE_AUTH_FOR_DISCOVERY:
        raise AuthenticationError("Trebuie să fii autentificat pentru a descoperi cuvinte noi")

    tracker = tracker if tracker is not None else get_quota_tracker()
    gateway = gateway or get_word_analysis_gateway()

    await _guard_ai_spend(db, user, client_ip, tracker)

    result = await gateway.analyze(term, min_confidence=settings.MIN_AI_CONFIDENCE)
    if not result.ok:
        log_word_action("discover", key, success=False, details=f"{result.status.value}: {result.reason}")
        if result.status == AnalysisStatus.LOW_CONFIDENCE and result.record and result.record.is_valid:
            raise WordNotVerifiedError(LOW_CONFIDENCE_REASON, cause=result.status.value)
        raise WordNotVerifiedError(cause=result.status.value)

    if user is not None:
        check = await validate_discovery(db, user.id, key, result.record.confidence)
        if not check.valid:
            log_word_action("discover", key, success=False, details=check.reason)
            raise DiscoveryRejectedError(check.reason, word_id=key)

        if not await check_rate_limit(str(user.id), tracker=tracker):
            raise QuotaExceededError("Ai atins limita zilnică de descoperiri. Încearcă mâine!", scope="ai_daily")

    try:
        word = await create_word_from_analysis(db, key, term.strip(), result.record, created_by_user_id=user_id)
    except IntegrityError:
        # Lost the race against a concurrent discovery of the same key
        existing = await get_word(db, key)
        if existing is None:
            raise
        return SearchOutcome(found=True, word=existing)

    if user is None:
        return SearchOutcome(
            found=True,
            word=word,
            is_new_discovery=True,
            is_anonymous_discovery=True,
            message=ANONYMOUS_DISCOVERY_MESSAGE,
        )

    award = await award_points(db, user.id, key, ContributionType.DISCOVERY)
    if award.success:
        message = discovery_message(award.points)
    else:
        message = f"Cuvânt adăugat cu succes! {award.message}"

    return SearchOutcome(
        found=True,
        word=word,
        is_new_discovery=True,
        points_awarded=award.points,
        message=message,
    )
