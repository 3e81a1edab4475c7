"""
Romanian Word Normalizer

Turns raw search text into the canonical key used as the dictionary's
primary identity, and rejects input that cannot be a Romanian word before
any lookup or AI call is made.

Normalization is lossy: "câine" and "caine" share the key "caine", so the
first discovered spelling is the one stored as the display form.

Usage:
    from services.dictionary.normalizer import normalize_word, is_valid_word_format

    if is_valid_word_format(term):
        key = normalize_word(term)   # "Mă bucur" -> "ma-bucur"
"""

import re

from config.constants import WORD_MIN_LENGTH, WORD_MAX_LENGTH


# Both the comma-below (ș, ț) and the legacy cedilla (ş, ţ) forms are in use
_DIACRITICS = str.maketrans({
    "ă": "a",
    "â": "a",
    "î": "i",
    "ș": "s",
    "ş": "s",
    "ț": "t",
    "ţ": "t",
})

_WHITESPACE = re.compile(r"\s+")
_WORD_PATTERN = re.compile(r"[a-zA-ZăâîșțĂÂÎȘȚşţŞŢ\s-]+")
_VOWEL = re.compile(r"[aeiouăâî]", re.IGNORECASE)


def normalize_word(word: str) -> str:
    """
    Normalize a Romanian word for lookup and comparison.

    Lowercases, trims, strips the Romanian diacritics and joins whitespace
    runs with a single hyphen. Idempotent.
    """
    return _WHITESPACE.sub("-", word.lower().strip().translate(_DIACRITICS))


def is_valid_word_format(word: str) -> bool:
    """
    Check whether a string could be a Romanian word.

    Rejects strings outside [2, 50] characters, strings with characters other
    than Romanian letters, whitespace and hyphens, and strings without a vowel.
    """
    if not isinstance(word, str):
        return False

    if len(word) < WORD_MIN_LENGTH or len(word) > WORD_MAX_LENGTH:
        return False

    if not _WORD_PATTERN.fullmatch(word):
        return False

    return bool(_VOWEL.search(word))


def generate_slug(word: str) -> str:
    """URL-safe slug for a word; identical to its canonical key."""
    return normalize_word(word)


def denormalize_word(normalized: str) -> str:
    """
    Approximate display text from a canonical key.

    Diacritics cannot be restored; the stored display form is authoritative.
    """
    return normalized.replace("-", " ")


def are_similar_words(first: str, second: str) -> bool:
    """Whether two spellings resolve to the same dictionary entry."""
    return normalize_word(first) == normalize_word(second)
