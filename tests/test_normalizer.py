"""
Unit Tests for the Romanian Word Normalizer
"""

import pytest
from services.dictionary.normalizer import (
    normalize_word,
    is_valid_word_format,
    generate_slug,
    denormalize_word,
    are_similar_words,
)


class TestNormalizeWord:
    """Canonical key derivation."""

    @pytest.mark.parametrize("raw, expected", [
        ("Mă bucur", "ma-bucur"),
        ("ȘCOALĂ", "scoala"),
        ("  câine  ", "caine"),
        ("ţară", "tara"),
        ("înțelepciune", "intelepciune"),
        ("a  fi\tbun", "a-fi-bun"),
    ])
    def test_normalizes(self, raw, expected):
        assert normalize_word(raw) == expected

    def test_is_idempotent(self):
        for raw in ("Mă bucur", "Ştiinţă", "înger păzitor"):
            once = normalize_word(raw)
            assert normalize_word(once) == once

    def test_cedilla_and_comma_forms_share_a_key(self):
        assert normalize_word("ştiinţă") == normalize_word("știință") == "stiinta"

    def test_slug_matches_key(self):
        assert generate_slug("Mă bucur") == "ma-bucur"

    def test_similar_words(self):
        assert are_similar_words("câine", "caine") is True
        assert are_similar_words("câine", "pisică") is False

    def test_denormalize_restores_spaces(self):
        assert denormalize_word("buna-ziua") == "buna ziua"
        assert denormalize_word(normalize_word("Mă  bucur")) == "ma bucur"


class TestIsValidWordFormat:
    """Rejection of text that cannot be a Romanian word."""

    @pytest.mark.parametrize("word", ["mere", "câine", "Mă bucur", "bună-ziua", "ou"])
    def test_accepts_words(self, word):
        assert is_valid_word_format(word) is True

    @pytest.mark.parametrize("word", [
        "a",            # too short
        "x" * 51,       # too long
        "abc123",       # digits
        "hello!",       # symbols
        "brr",          # no vowel
        "",
    ])
    def test_rejects(self, word):
        assert is_valid_word_format(word) is False

    def test_length_bounds_are_inclusive(self):
        assert is_valid_word_format("a" * 50) is True
        assert is_valid_word_format("ab") is True

    def test_non_string_rejected(self):
        assert is_valid_word_format(None) is False
        assert is_valid_word_format(42) is False
