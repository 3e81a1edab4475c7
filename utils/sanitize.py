"""
Input Sanitization Utilities

Strips markup and script-shaped content from user-provided text before it
is stored (flag reasons, user examples, synonyms) and escapes text for
display.

Usage:
    from utils.sanitize import sanitize_text, sanitize_word

    reason = sanitize_text(payload.reason)
"""

import re
from typing import Optional

from utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Patterns
# =============================================================================

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_HTML_TAG = re.compile(r"<[^>]*>")
_EVENT_HANDLER = re.compile(r"on\w+\s*=\s*[\"'][^\"']*[\"']", re.IGNORECASE)
_JS_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)
_NON_WORD_CHARS = re.compile(r"[^a-zA-ZăâîșțĂÂÎȘȚşţŞŢ\s\-]")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_HTML_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
    "/": "&#x2F;",
}


# =============================================================================
# String Sanitization
# =============================================================================

def sanitize_string(
    value: Optional[str],
    max_length: int = 10000,
    allow_html: bool = False
) -> str:
    """
    Sanitize a string input.

    - Strips whitespace
    - Removes script blocks, tags, inline event handlers and javascript: URLs
    - Limits length

    Args:
        value: String to sanitize
        max_length: Maximum allowed length
        allow_html: Whether to keep HTML tags

    Returns:
        str: Sanitized string
    """
    if not value or not isinstance(value, str):
        return ""

    value = value.strip()

    if not allow_html:
        value = _SCRIPT_BLOCK.sub("", value)
        value = _HTML_TAG.sub("", value)
        value = _EVENT_HANDLER.sub("", value)
        value = _JS_PROTOCOL.sub("", value)

    return value[:max_length].strip()


def sanitize_text(value: Optional[str], max_length: int = 5000) -> str:
    """Sanitize free text such as flag reasons or user examples."""
    return sanitize_string(value, max_length=max_length)


def sanitize_word(word: Optional[str]) -> str:
    """
    Sanitize a word display form.

    Keeps only letters (including Romanian diacritics), spaces and hyphens.
    """
    if not word or not isinstance(word, str):
        return ""

    return _NON_WORD_CHARS.sub("", word.strip())[:100]


def escape_html(text: Optional[str]) -> str:
    """Escape HTML entities for safe display."""
    if not text or not isinstance(text, str):
        return ""

    return "".join(_HTML_ENTITIES.get(char, char) for char in text)


def is_valid_email(email: Optional[str]) -> bool:
    """Basic email shape check."""
    if not email or not isinstance(email, str):
        return False

    return bool(_EMAIL.match(email)) and len(email) <= 254
