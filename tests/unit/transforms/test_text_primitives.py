"""Unit tests for string primitives."""

from __future__ import annotations

import re

import pytest

from core.errors import InvalidParameterError
from transforms.text_primitives import (
    expand_replacement,
    pad_end,
    pad_start,
    repetition_quantifier,
    replace_substring,
    trim_chars_both,
    trim_unit_both,
    trim_unit_start,
    unescape_sequences,
)


def test_unescape_sequences_handles_control_and_unicode_escapes() -> None:
    """Unescape should decode simple, hex, and unicode escapes."""
    result = unescape_sequences(r"a\nb\t\x41B\u{1F600}")

    assert result == "a\nb\tAB\U0001F600"


def test_unescape_sequences_keeps_unknown_escapes_and_trailing_backslash() -> None:
    """Unknown escapes map to the character itself; a lone backslash stays."""
    result = unescape_sequences("\\q\\")

    assert result == "q\\"


@pytest.mark.parametrize(
    ("min_count", "max_count", "expected"),
    [(0, 5, "*"), (2, 0, "{2,}"), (2, 3, "{2,3}")],
)
def test_repetition_quantifier_builds_ranges(min_count: int, max_count: int, expected: str) -> None:
    """Quantifier should follow the min/max conventions."""
    assert repetition_quantifier(min_count, max_count) == expected


@pytest.mark.parametrize(("min_count", "max_count"), [(3, 2), (-1, 0)])
def test_repetition_quantifier_rejects_invalid_ranges(min_count: int, max_count: int) -> None:
    """Quantifier should reject negative counts and inverted ranges."""
    with pytest.raises(InvalidParameterError):
        repetition_quantifier(min_count, max_count)


def test_expand_replacement_supports_dollar_tokens() -> None:
    """Template expansion should cover every dollar token."""
    match = re.search(r"(b)(?P<n>c)", "abcd")
    assert match is not None

    result = expand_replacement("$$|$&|$`|$'|$1|$<n>|$9", match)

    assert result == "$|bc|a|d|b|c|$9"


def test_replace_substring_honors_replace_all() -> None:
    """Literal replacement should treat the search string as plain text."""
    all_replaced = replace_substring("a.b.c", ".", "[$&]", True)
    first_replaced = replace_substring("a.b.c", ".", "[$&]", False)

    assert (all_replaced, first_replaced) == ("a[.]b[.]c", "a[.]b.c")


def test_trim_unit_and_chars_modes_differ() -> None:
    """Unit trim strips whole tokens while char trim strips any listed character."""
    assert trim_unit_both("ababXab", "ab") == "X"
    assert trim_chars_both("ababXab", "ab") == "X"
    assert trim_unit_both("ababXab", "ba") == "ababXab"


def test_trim_single_space_strips_all_whitespace() -> None:
    """A single space trims every kind of surrounding whitespace."""
    assert trim_unit_both("\t  Hello \n", " ") == "Hello"


def test_trim_empty_unit_is_noop() -> None:
    """An empty trim string leaves the text unchanged."""
    assert trim_unit_start("xxabc", "") == "xxabc"


def test_pad_fills_with_truncated_repetitions() -> None:
    """Padding should repeat and truncate the pad string."""
    assert pad_start("ab", 5, " ") == "   ab"
    assert pad_start("ab", 6, "xyz") == "xyzxab"
    assert pad_end("7", 3, "0") == "700"
    assert pad_start("abc", 2, "x") == "abc"
