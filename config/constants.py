"""
Application Constants

Centralizes the closed vocabularies and fixed values of the dictionary:
parts of speech, vote and contribution kinds, and the point table.

Usage:
    from config.constants import VoteType, ContributionType, POINT_VALUES
"""

from enum import Enum
from typing import Dict


# =============================================================================
# Dictionary Vocabulary
# =============================================================================

class PartOfSpeech(str, Enum):
    """Romanian part-of-speech tags used on dictionary entries."""
    SUBSTANTIV = "substantiv"
    VERB = "verb"
    ADJECTIV = "adjectiv"
    ADVERB = "adverb"
    PRONUME = "pronume"
    PREPOZITIE = "prepozitie"
    CONJUNCTIE = "conjunctie"
    INTERJECTIE = "interjectie"


class CreatedBy(str, Enum):
    """Origin of a dictionary entry."""
    AI = "ai"
    USER = "user"
    IMPORT = "import"


class ExampleSource(str, Enum):
    AI = "ai"
    USER = "user"


# Languages the model may translate into
TRANSLATION_LANGUAGES = ("en", "fr", "es", "de", "hu")

DEFINITION_REGISTERS = ("curent", "arhaic", "regional", "argou", "neologism")

USAGE_NOTE_TYPES = ("grammar", "register", "common_mistake", "context")

FREQUENCY_LEVELS = ("very_rare", "rare", "common", "very_common")

DIFFICULTY_LEVELS = ("A1", "A2", "B1", "B2", "C1", "C2")


# =============================================================================
# Community Voting
# =============================================================================

class VoteType(str, Enum):
    """A user's single vote slot on a word."""
    LIKE = "like"
    DISLIKE = "dislike"
    VALIDATE = "validate"
    REPORT_ERROR = "report_error"


# Word counter column touched by each vote kind
VOTE_COUNTER_FIELDS: Dict[VoteType, str] = {
    VoteType.LIKE: "likes_count",
    VoteType.DISLIKE: "dislikes_count",
    VoteType.VALIDATE: "validations_count",
    VoteType.REPORT_ERROR: "errors_count",
}


class FlagStatus(str, Enum):
    OPEN = "open"
    RESOLVED = "resolved"
    REJECTED = "rejected"


# =============================================================================
# Points Economy
# =============================================================================

class ContributionType(str, Enum):
    """Rewarded actions recorded in the contribution ledger."""
    DISCOVERY = "discovery"
    EXAMPLE_ADD = "example_add"
    SYNONYM_ADD = "synonym_add"
    ANTONYM_ADD = "antonym_add"
    DEFINITION_ENHANCE = "definition_enhance"
    REPORT_ERROR = "report_error"


POINT_VALUES: Dict[ContributionType, float] = {
    ContributionType.DISCOVERY: 1.0,
    ContributionType.EXAMPLE_ADD: 0.5,
    ContributionType.SYNONYM_ADD: 0.5,
    ContributionType.ANTONYM_ADD: 0.5,
    ContributionType.DEFINITION_ENHANCE: 0.7,
    # Not rewarded, but recorded as a quality signal
    ContributionType.REPORT_ERROR: 0.0,
}


class LeaderboardPeriod(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL_TIME = "allTime"


# =============================================================================
# Input Bounds
# =============================================================================

WORD_MIN_LENGTH = 2
WORD_MAX_LENGTH = 50

FLAG_REASON_MIN_LENGTH = 10
FLAG_REASON_MAX_LENGTH = 500

CONTRIBUTION_MAX_LENGTH = 500

AUTOCOMPLETE_MIN_LENGTH = 2
AUTOCOMPLETE_MAX_RESULTS = 10
