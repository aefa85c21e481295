"""Stateless string primitives shared by the operation engine.

This module implements escape-sequence unescaping, replacement template
expansion, regex repetition quantifiers, and the unit-aware trim and pad
helpers. Every function is pure and raises only Textsmith domain errors.
"""

from __future__ import annotations

import re

from core.errors import InvalidParameterError

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def unescape_sequences(text: str) -> str:
    """Interpret backslash escape sequences.

    Supports ``\\n \\r \\t \\b \\f \\v \\0``, ``\\xHH``, ``\\uHHHH`` and
    ``\\u{H...}``. Any other escaped character stands for itself and a
    trailing lone backslash is kept.

    Args:
        text: Text typed by a user.

    Returns:
        Text with escape sequences replaced by the characters they denote.
    """
    output: list[str] = []
    index = 0
    length = len(text)
    while index < length:
        character = text[index]
        if character != "\\" or index + 1 >= length:
            output.append(character)
            index += 1
            continue
        escaped = text[index + 1]
        decoded, consumed = _decode_escape(text, index + 1, escaped)
        output.append(decoded)
        index += 1 + consumed
    return "".join(output)


def _decode_escape(text: str, start: int, escaped: str) -> tuple[str, int]:
    """Decode one escape body starting after the backslash.

    Returns:
        Decoded text and the number of characters consumed after the backslash.
    """
    if escaped in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[escaped], 1
    if escaped == "x":
        digits = text[start + 1:start + 3]
        if len(digits) == 2 and _is_hex(digits):
            return chr(int(digits, 16)), 3
        return escaped, 1
    if escaped == "u":
        return _decode_unicode_escape(text, start)
    return escaped, 1


def _decode_unicode_escape(text: str, start: int) -> tuple[str, int]:
    if text[start + 1:start + 2] == "{":
        closing = text.find("}", start + 2)
        digits = text[start + 2:closing] if closing != -1 else ""
        if 0 < len(digits) <= 6 and _is_hex(digits) and int(digits, 16) <= 0x10FFFF:
            return chr(int(digits, 16)), closing - start + 1
        return "u", 1
    digits = text[start + 1:start + 5]
    if len(digits) == 4 and _is_hex(digits):
        return chr(int(digits, 16)), 5
    return "u", 1


def _is_hex(digits: str) -> bool:
    return all(digit in _HEX_DIGITS for digit in digits)


def repetition_quantifier(min_count: int, max_count: int) -> str:
    """Build a regex quantifier from a repetition range.

    Args:
        min_count: Minimum count; 0 means "zero or more".
        max_count: Maximum count; 0 means "min or more".

    Returns:
        ``*``, ``{min,}`` or ``{min,max}``.

    Raises:
        InvalidParameterError: For negative counts or ``max < min``.
    """
    if min_count < 0 or max_count < 0:
        raise InvalidParameterError(
            f"Repetition counts must be 0 or higher, got min={min_count} max={max_count}."
        )
    if min_count == 0:
        return "*"
    if max_count == 0:
        return f"{{{min_count},}}"
    if max_count < min_count:
        raise InvalidParameterError(
            f"Repetition max ({max_count}) must not be lower than min ({min_count})."
        )
    return f"{{{min_count},{max_count}}}"


def expand_replacement(template: str, match: re.Match[str]) -> str:
    """Expand a ``$``-style replacement template for one match.

    Recognises ``$$``, ``$&``, ``$```, ``$'``, ``$n``, ``$nn`` and
    ``$<name>``; anything else is copied literally.

    Args:
        template: Replacement template.
        match: Match being replaced.

    Returns:
        Replacement text.
    """
    if "$" not in template:
        return template
    output: list[str] = []
    index = 0
    length = len(template)
    while index < length:
        character = template[index]
        if character != "$" or index + 1 >= length:
            output.append(character)
            index += 1
            continue
        expanded, consumed = _expand_token(template, index + 1, match)
        output.append(expanded)
        index += 1 + consumed
    return "".join(output)


def _expand_token(template: str, start: int, match: re.Match[str]) -> tuple[str, int]:
    token = template[start]
    if token == "$":
        return "$", 1
    if token == "&":
        return match.group(0), 1
    if token == "`":
        return match.string[:match.start()], 1
    if token == "'":
        return match.string[match.end():], 1
    if token.isdigit() and token.isascii():
        return _expand_group_number(template, start, match)
    if token == "<" and match.re.groupindex:
        closing = template.find(">", start + 1)
        if closing != -1:
            group_name = template[start + 1:closing]
            value = match.groupdict().get(group_name)
            return value or "", closing - start + 1
    return "$", 0


def _expand_group_number(template: str, start: int, match: re.Match[str]) -> tuple[str, int]:
    group_count = match.re.groups
    two_digits = template[start:start + 2]
    if len(two_digits) == 2 and two_digits.isdigit() and two_digits.isascii():
        number = int(two_digits)
        if 1 <= number <= group_count:
            return match.group(number) or "", 2
    number = int(template[start])
    if 1 <= number <= group_count:
        return match.group(number) or "", 1
    return "$", 0


def replace_substring(text: str, substring: str, value: str, replace_all: bool) -> str:
    """Replace literal occurrences of a substring.

    Args:
        text: Text to search.
        substring: Literal search string.
        value: Replacement template (``$&`` and friends are expanded).
        replace_all: Replace every occurrence instead of the first.

    Returns:
        Text with replacements applied.
    """
    pattern = re.compile(re.escape(substring))
    return pattern.sub(
        lambda match: expand_replacement(value, match),
        text,
        count=0 if replace_all else 1,
    )


def trim_unit_start(text: str, unit: str) -> str:
    """Strip repeated whole ``unit`` tokens from the start."""
    if unit == " ":
        return text.lstrip()
    if not unit:
        return text
    while text.startswith(unit):
        text = text[len(unit):]
    return text


def trim_unit_end(text: str, unit: str) -> str:
    """Strip repeated whole ``unit`` tokens from the end."""
    if unit == " ":
        return text.rstrip()
    if not unit:
        return text
    while text.endswith(unit):
        text = text[:-len(unit)]
    return text


def trim_unit_both(text: str, unit: str) -> str:
    """Strip repeated whole ``unit`` tokens from both ends."""
    if unit == " ":
        return text.strip()
    return trim_unit_end(trim_unit_start(text, unit), unit)


def trim_chars_start(text: str, characters: str) -> str:
    """Strip any leading run of characters from ``characters``."""
    if characters == " ":
        return text.lstrip()
    return text.lstrip(characters) if characters else text


def trim_chars_end(text: str, characters: str) -> str:
    """Strip any trailing run of characters from ``characters``."""
    if characters == " ":
        return text.rstrip()
    return text.rstrip(characters) if characters else text


def trim_chars_both(text: str, characters: str) -> str:
    """Strip leading and trailing runs of characters from ``characters``."""
    if characters == " ":
        return text.strip()
    return text.strip(characters) if characters else text


def pad_start(text: str, target_length: int, pad_string: str) -> str:
    """Left-pad ``text`` with repetitions of ``pad_string``."""
    return _build_fill(text, target_length, pad_string) + text


def pad_end(text: str, target_length: int, pad_string: str) -> str:
    """Right-pad ``text`` with repetitions of ``pad_string``."""
    return text + _build_fill(text, target_length, pad_string)


def _build_fill(text: str, target_length: int, pad_string: str) -> str:
    fill_length = target_length - len(text)
    if fill_length <= 0 or not pad_string:
        return ""
    repeats = fill_length // len(pad_string) + 1
    return (pad_string * repeats)[:fill_length]
