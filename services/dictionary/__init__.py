# Dictionary services: normalization, storage, search and user contributions

from .normalizer import normalize_word, is_valid_word_format, generate_slug
from .search import SearchOutcome, search_or_discover

__all__ = [
    "normalize_word",
    "is_valid_word_format",
    "generate_slug",
    "SearchOutcome",
    "search_or_discover",
]
