"""
Unit Tests for Input Sanitization

Tests for the cleaning applied to flag reasons and user contributions.
"""

import pytest
from utils.sanitize import (
    sanitize_string,
    sanitize_text,
    sanitize_word,
    escape_html,
    is_valid_email,
)


class TestStringSanitization:
    """Tests for string sanitization."""

    def test_strips_whitespace(self):
        assert sanitize_string("  hello  ") == "hello"

    def test_removes_script_blocks(self):
        result = sanitize_string("Salut<script>alert('xss')</script> lume")
        assert "alert" not in result
        assert result == "Salut lume"

    def test_removes_tags(self):
        assert sanitize_string("<b>bold</b> text") == "bold text"

    def test_removes_event_handlers(self):
        result = sanitize_string("img onerror=\"steal()\" here")
        assert "onerror" not in result

    def test_removes_javascript_protocol(self):
        assert "javascript:" not in sanitize_string("javascript:alert(1)").lower()

    def test_keeps_html_when_allowed(self):
        assert sanitize_string("<b>bold</b>", allow_html=True) == "<b>bold</b>"

    def test_truncates_long_strings(self):
        assert len(sanitize_string("a" * 200, max_length=100)) == 100

    def test_handles_empty_and_none(self):
        assert sanitize_string("") == ""
        assert sanitize_string(None) == ""
        assert sanitize_text(42) == ""

    def test_keeps_romanian_diacritics(self):
        assert sanitize_text("Știință și înțelepciune") == "Știință și înțelepciune"


class TestWordSanitization:

    def test_keeps_letters_spaces_hyphens(self):
        assert sanitize_word("bună-ziua 123!") == "bună-ziua "

    def test_rejects_non_strings(self):
        assert sanitize_word(None) == ""


class TestEscaping:

    def test_escape_html(self):
        assert escape_html("<a href='x'>") == "&lt;a href=&#39;x&#39;&gt;"

    @pytest.mark.parametrize("email, expected", [
        ("ana@example.com", True),
        ("ana@", False),
        ("no spaces@example.com", False),
        (None, False),
    ])
    def test_email_shape(self, email, expected):
        assert is_valid_email(email) is expected
