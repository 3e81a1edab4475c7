"""
Vote/Consensus Engine

Each user holds at most one vote per word: like, dislike, validate or
report_error. Every vote change is paired with a counter adjustment on the
word, applied as one atomic UPDATE, and followed by consensus re-derivation:

    validations >= CONSENSUS_MIN_VALIDATIONS and errors < CONSENSUS_MAX_ERRORS
        -> community_verified = verified = True
    community_verified and validations < CONSENSUS_MIN_VALIDATIONS
        -> community_verified = verified = False
    otherwise flags are left as they are

The vote response reports the consensus derived from the fresh counters, so
a third error report reads as unverified even while the stored flag (which
only drops with validations) is still set. An entry can flip in and out of
community verification as votes change.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import VOTE_COUNTER_FIELDS, VoteType
from config.settings import settings
from core.models import Word, WordVote
from services.dictionary.word_store import apply_counter_deltas, require_word
from services.security.rate_limiter import QuotaTracker, check_endpoint_rate_limit
from utils.exceptions import InputValidationError, QuotaExceededError
from utils.logging import get_logger, log_word_action
from utils.timestamps import now

logger = get_logger(__name__)


@dataclass
class VoteState:
    """Projection returned to clients after a vote or on read."""
    counts: Dict[str, int]
    community_verified: bool
    user_vote: Optional[str] = None
    message: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userVote": self.user_vote,
            "counts": self.counts,
            "communityVerified": self.community_verified,
        }


def parse_vote_type(value: Any) -> Optional[VoteType]:
    """None means retraction. Anything outside the four kinds is rejected."""
    if value is None:
        return None
    try:
        return VoteType(value)
    except (ValueError, TypeError):
        raise InputValidationError(
            "Invalid vote type",
            field="voteType",
            details={"allowed": [v.value for v in VoteType]},
        )


def compute_deltas(old: Optional[VoteType], new: Optional[VoteType]) -> Dict[str, int]:
    """Counter deltas for moving a vote slot from old to new."""
    deltas: Dict[str, int] = {}
    if old is not None:
        column = VOTE_COUNTER_FIELDS[old]
        deltas[column] = deltas.get(column, 0) - 1
    if new is not None:
        column = VOTE_COUNTER_FIELDS[new]
        deltas[column] = deltas.get(column, 0) + 1
    return {column: delta for column, delta in deltas.items() if delta}


def is_consensus(validations: int, errors: int) -> bool:
    return (
        validations >= settings.CONSENSUS_MIN_VALIDATIONS
        and errors < settings.CONSENSUS_MAX_ERRORS
    )


async def _rederive_consensus(db: AsyncSession, word: Word) -> bool:
    validations = word.validations_count or 0
    errors = word.errors_count or 0

    if is_consensus(validations, errors):
        if not word.community_verified:
            word.community_verified = True
            word.verified = True
            await db.commit()
            log_word_action("community_verify", word.id, success=True,
                            details=f"{validations} validations, {errors} errors")
        return True

    if word.community_verified and validations < settings.CONSENSUS_MIN_VALIDATIONS:
        word.community_verified = False
        word.verified = False
        await db.commit()
        log_word_action("community_unverify", word.id, success=True,
                        details=f"{validations} validations")

    return False


async def cast_vote(
    db: AsyncSession,
    user_id: int,
    word_id: str,
    vote_type: Any,
    tracker: Optional[QuotaTracker] = None
) -> VoteState:
    """
    Set, change or retract (vote_type=None) a user's vote on a word.

    Raises:
        InputValidationError: unknown vote kind
        QuotaExceededError: more than VOTE_RATE_LIMIT votes in the window
        WordNotFoundError: no such word
    """
    new_type = parse_vote_type(vote_type)

    allowed = await check_endpoint_rate_limit(
        str(user_id), "vote",
        settings.VOTE_RATE_LIMIT, settings.VOTE_RATE_WINDOW_SECONDS,
        tracker=tracker,
    )
    if not allowed:
        raise QuotaExceededError("Prea multe voturi. Te rugăm să încetinești.", scope="vote")

    word = await require_word(db, word_id)
    vote = await db.get(WordVote, (word_id, user_id))
    old_type = VoteType(vote.vote_type) if vote is not None else None

    timestamp = now()
    if new_type is None:
        if vote is not None:
            await db.delete(vote)
    elif vote is None:
        db.add(WordVote(
            word_id=word_id,
            user_id=user_id,
            vote_type=new_type.value,
            created_at=timestamp,
            updated_at=timestamp,
        ))
    else:
        vote.vote_type = new_type.value
        vote.updated_at = timestamp

    await apply_counter_deltas(db, word_id, compute_deltas(old_type, new_type))
    await db.commit()
    await db.refresh(word)

    community_verified = await _rederive_consensus(db, word)

    log_word_action(
        "vote", word_id, success=True,
        details=f"user {user_id}: {old_type.value if old_type else None} -> {new_type.value if new_type else None}",
    )
    return VoteState(
        counts=word.vote_counts,
        community_verified=community_verified,
        user_vote=new_type.value if new_type else None,
        message="Vote removed" if new_type is None else "Vote recorded successfully",
    )


async def get_vote_state(
    db: AsyncSession,
    word_id: str,
    user_id: Optional[int] = None
) -> VoteState:
    """Counts, consensus flag and the caller's own vote. Read only."""
    word = await require_word(db, word_id)

    user_vote = None
    if user_id is not None:
        vote = await db.get(WordVote, (word_id, user_id))
        if vote is not None:
            user_vote = vote.vote_type

    return VoteState(
        counts=word.vote_counts,
        community_verified=bool(word.community_verified),
        user_vote=user_vote,
    )
