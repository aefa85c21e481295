"""Letter case conversions.

This module splits text into words the way camel/kebab/snake/start case
converters conventionally do, and applies language-sensitive upper and lower
casing for the languages whose rules differ from the default Unicode mapping.
"""

from __future__ import annotations

import re
import unicodedata

from core.constants import SUPPORTED_CASE_TYPES
from core.errors import InvalidOptionError

_LANGUAGE_TAG_PATTERN = re.compile(r"^[A-Za-z]{2,8}(?:[-_][A-Za-z0-9]{1,8})*$")
_APOSTROPHES = re.compile("['\u2019]")
_COMBINING_MARKS = re.compile("[\u0300-\u036f\ufe20-\ufe2f\u20d0-\u20ff]")
_DEBURR_OVERRIDES = {
    "Æ": "Ae", "æ": "ae", "Ð": "D", "ð": "d", "Ø": "O", "ø": "o",
    "Þ": "Th", "þ": "th", "ß": "ss", "Đ": "D", "đ": "d", "Ħ": "H",
    "ħ": "h", "ı": "i", "Ĳ": "IJ", "ĳ": "ij", "ĸ": "k", "Ŀ": "L",
    "ŀ": "l", "Ł": "L", "ł": "l", "Ŋ": "N", "ŋ": "n", "Œ": "Oe",
    "œ": "oe", "ŉ": "'n", "ſ": "s",
}
_SOFT_DOTTED = "ij\u012f\u0268"
_COMBINING_DOT_ABOVE = "\u0307"
_LITHUANIAN_ACCENTED_CAPITALS = {
    "\u00cc": "i\u0307\u0300",
    "\u00cd": "i\u0307\u0301",
    "\u0128": "i\u0307\u0303",
}


def change_case(text: str, case_type: str, language: str = "") -> str:
    """Apply one letter case conversion.

    Args:
        text: Input text.
        case_type: One of the supported case types.
        language: BCP-47 language tag for the locale-aware types.

    Returns:
        Converted text.

    Raises:
        InvalidOptionError: For unknown case types or malformed language tags.
    """
    if case_type == "camelCase":
        return camel_case(text)
    if case_type == "capitalize":
        return capitalize(text)
    if case_type == "titlecase":
        return " ".join(capitalize(word) for word in text.split(" "))
    if case_type == "kebabCase":
        return "-".join(word.lower() for word in split_words(text))
    if case_type == "snakeCase":
        return "_".join(word.lower() for word in split_words(text))
    if case_type == "startCase":
        return " ".join(word[:1].upper() + word[1:] for word in split_words(text))
    if case_type == "upperCase":
        return text.upper()
    if case_type == "lowerCase":
        return text.lower()
    if case_type == "localeUpperCase":
        return locale_upper(text, language)
    if case_type == "localeLowerCase":
        return locale_lower(text, language)
    raise InvalidOptionError(
        f"Unsupported case type '{case_type}'. Choose one of: {', '.join(SUPPORTED_CASE_TYPES)}."
    )


def capitalize(text: str) -> str:
    """Uppercase the first character and lowercase the rest."""
    return text[:1].upper() + text[1:].lower()


def camel_case(text: str) -> str:
    """Convert text to camelCase."""
    words = [word.lower() for word in split_words(text)]
    return "".join(word if index == 0 else capitalize(word) for index, word in enumerate(words))


def split_words(text: str) -> list[str]:
    """Split text into case-conversion words.

    Diacritics are removed and apostrophes dropped first. Words break at
    separators, lower-to-upper transitions, letter/digit transitions, and
    before the last capital of an acronym followed by a lowercase letter
    (``XMLHttp`` -> ``XML``, ``Http``).

    Args:
        text: Input text.

    Returns:
        Ordered words.
    """
    cleaned = _APOSTROPHES.sub("", deburr(text))
    words: list[str] = []
    current: list[str] = []
    previous_kind = ""
    for character in cleaned:
        kind = _character_kind(character)
        if not kind:
            _flush_word(words, current)
            previous_kind = ""
            continue
        if current and _starts_new_word(previous_kind, kind):
            _flush_word(words, current)
        elif current and kind == "lower" and previous_kind == "upper" and len(current) > 1:
            if _character_kind(current[-2]) == "upper":
                carried = current.pop()
                _flush_word(words, current)
                current.append(carried)
        current.append(character)
        previous_kind = kind
    _flush_word(words, current)
    return words


def deburr(text: str) -> str:
    """Replace Latin-1 and Latin Extended-A letters with basic Latin letters."""
    output: list[str] = []
    for character in text:
        if "\u00c0" <= character <= "\u017f":
            replacement = _DEBURR_OVERRIDES.get(character)
            if replacement is None:
                decomposed = unicodedata.normalize("NFD", character)
                replacement = _COMBINING_MARKS.sub("", decomposed)
            output.append(replacement)
        else:
            output.append(character)
    return _COMBINING_MARKS.sub("", "".join(output))


def locale_upper(text: str, language: str) -> str:
    """Uppercase text with the special casing rules of a language."""
    primary = _primary_language(language)
    if primary in ("tr", "az"):
        return text.replace("i", "İ").upper()
    if primary == "lt":
        return _remove_dot_after_soft_dotted(text).upper()
    return text.upper()


def locale_lower(text: str, language: str) -> str:
    """Lowercase text with the special casing rules of a language."""
    primary = _primary_language(language)
    if primary in ("tr", "az"):
        replaced = text.replace("I" + _COMBINING_DOT_ABOVE, "i")
        replaced = replaced.replace("İ", "i").replace("I", "ı")
        return replaced.lower()
    if primary == "lt":
        return _lithuanian_lower(text)
    return text.lower()


def _primary_language(language: str) -> str:
    tag = language.strip()
    if not tag:
        return ""
    if not _LANGUAGE_TAG_PATTERN.match(tag):
        raise InvalidOptionError(
            f"Invalid language tag '{language}'. Use a BCP-47 tag such as 'en' or 'tr-TR'."
        )
    return re.split(r"[-_]", tag, maxsplit=1)[0].lower()


def _remove_dot_after_soft_dotted(text: str) -> str:
    output: list[str] = []
    soft_dotted_open = False
    for character in text:
        combining_class = unicodedata.combining(character)
        if character == _COMBINING_DOT_ABOVE and soft_dotted_open:
            continue
        if character in _SOFT_DOTTED:
            soft_dotted_open = True
        elif combining_class in (0, 230):
            soft_dotted_open = False
        output.append(character)
    return "".join(output)


def _lithuanian_lower(text: str) -> str:
    output: list[str] = []
    for index, character in enumerate(text):
        if character in _LITHUANIAN_ACCENTED_CAPITALS:
            output.append(_LITHUANIAN_ACCENTED_CAPITALS[character])
            continue
        lowered = character.lower()
        if character in "IJĮ" and _has_more_above(text, index + 1):
            lowered += _COMBINING_DOT_ABOVE
        output.append(lowered)
    return "".join(output)


def _has_more_above(text: str, start: int) -> bool:
    for character in text[start:]:
        combining_class = unicodedata.combining(character)
        if combining_class == 230:
            return True
        if combining_class == 0:
            return False
    return False


def _character_kind(character: str) -> str:
    if character.isdigit():
        return "digit"
    if character.isupper() or character.istitle():
        return "upper"
    if character.isalpha():
        return "lower"
    return ""


def _starts_new_word(previous_kind: str, kind: str) -> bool:
    if kind == "upper" and previous_kind == "lower":
        return True
    return (kind == "digit") != (previous_kind == "digit")


def _flush_word(words: list[str], current: list[str]) -> None:
    if current:
        words.append("".join(current))
        current.clear()
