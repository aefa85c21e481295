"""Replace operation modes.

This module implements the four replace modes: literal substring,
escape-extended substring, regex literals with ``$`` replacement templates,
and the predefined tag and character-group rules.
"""

from __future__ import annotations

import re

from core.constants import (
    REGEX_LITERAL_FLAGS,
    SUPPORTED_PREDEFINED_RULES,
    SUPPORTED_REPLACE_MODES,
)
from core.errors import InvalidOptionError, InvalidParameterError
from core.types import CharacterGroup, CharacterGroups, ReplaceOperation
from transforms.text_primitives import (
    expand_replacement,
    repetition_quantifier,
    replace_substring,
    unescape_sequences,
)

_REGEX_LITERAL = re.compile("/([^\\n\\r\\u2028\\u2029]*?)/([" + REGEX_LITERAL_FLAGS + "]*)")
_NAMED_GROUP = re.compile(r"(?<!\\)\(\?<(?=[A-Za-z_])")
_NAMED_BACKREFERENCE = re.compile(r"\\k<([A-Za-z_][A-Za-z0-9_]*)>")
_FLAG_BITS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}

_ANY_TAG = re.compile(
    r"<!--.*?-->|<![^<>]*>|<\?[^<>]*\?>|</?[A-Za-z][^<>]*>",
    re.DOTALL,
)
_NAMED_TAG = re.compile(r"</?(?P<name>[A-Za-z][A-Za-z0-9-]*)(?:\s[^<>]*)?/?>")
_HTML_TAG_NAMES = frozenset(
    """
    a abbr acronym address applet area article aside audio b base basefont bdi bdo
    bgsound big blink blockquote body br button canvas caption center cite code col
    colgroup data datalist dd del details dfn dialog dir div dl dt em embed fieldset
    figcaption figure font footer form frame frameset h1 h2 h3 h4 h5 h6 head header
    hgroup hr html i iframe img input ins isindex kbd keygen label legend li link
    main map mark marquee menu menuitem meta meter nav nobr noembed noframes noscript
    object ol optgroup option output p param picture plaintext pre progress q rb rp
    rt rtc ruby s samp script search section select slot small source spacer span
    strike strong style sub summary sup svg table tbody td template textarea tfoot th
    thead time title tr track tt u ul var video wbr xmp
    """.split()
)
_NEWLINE_CLASS = r"(?:\r\n|\r|\n)"
_NUMBER_CLASS = r"[0-9]"
_ALPHA_CLASS = r"[a-zA-Z]"
_WHITESPACE_CLASS = r"\s"


def replace_text(text: str, operation: ReplaceOperation) -> str:
    """Apply one replace operation.

    Args:
        text: Current text value.
        operation: Replace configuration.

    Returns:
        Text with replacements applied.

    Raises:
        InvalidOptionError: For unknown replace modes or rules.
        InvalidParameterError: For invalid patterns or repetition bounds.
    """
    mode = operation.replace_mode
    if mode == "substring":
        value = _maybe_unescape(operation.value, operation.extended)
        return replace_substring(text, operation.substring, value, operation.replace_all)
    if mode == "extendedSubstring":
        value = _maybe_unescape(operation.value, operation.extended)
        substring = unescape_sequences(operation.substring)
        return replace_substring(text, substring, value, operation.replace_all)
    if mode == "regex":
        template = _maybe_unescape(operation.pattern, operation.extended)
        return replace_regex(text, operation.regex, template)
    if mode == "predefinedRule":
        return _apply_predefined_rule(text, operation)
    raise InvalidOptionError(
        f"Unsupported replace mode '{mode}'. Choose one of: {', '.join(SUPPORTED_REPLACE_MODES)}."
    )


def parse_regex_literal(regex: str) -> tuple[str, str]:
    """Split a ``/body/flags`` literal into body and flags.

    Strings that are not in literal form are returned whole with no flags.
    """
    literal_match = _REGEX_LITERAL.fullmatch(regex)
    if literal_match is None:
        return regex, ""
    return literal_match.group(1), literal_match.group(2)


def compile_pattern(body: str, flags: str) -> re.Pattern[str]:
    """Compile a pattern body written with ``(?<name>...)`` group syntax.

    Raises:
        InvalidParameterError: For duplicate flags or invalid patterns.
    """
    if len(set(flags)) != len(flags):
        raise InvalidParameterError(f"Duplicate regex flags in '{flags}'.")
    flag_bits = 0
    for flag in flags:
        flag_bits |= _FLAG_BITS.get(flag, 0)
    translated = _NAMED_GROUP.sub("(?P<", body)
    translated = _NAMED_BACKREFERENCE.sub(r"(?P=\1)", translated)
    try:
        return re.compile(translated, flag_bits)
    except re.error as error:
        raise InvalidParameterError(f"Invalid regex '{body}': {error}.") from error


def replace_regex(text: str, regex: str, template: str) -> str:
    """Replace regex matches using a ``$`` replacement template.

    The ``g`` flag replaces every match, otherwise only the first; ``y``
    only accepts matches that start where the previous one ended.
    """
    body, flags = parse_regex_literal(regex)
    pattern = compile_pattern(body, flags)
    replace_all = "g" in flags
    if "y" in flags:
        return _replace_sticky(pattern, text, template, replace_all)
    return pattern.sub(
        lambda match: expand_replacement(template, match),
        text,
        count=0 if replace_all else 1,
    )


def strip_tags(text: str, value: str, only_recognised_html: bool) -> str:
    """Replace markup tags with ``value``.

    Args:
        text: Markup text.
        value: Replacement for every stripped tag.
        only_recognised_html: Strip only tags from the HTML element vocabulary.

    Returns:
        Text with tags replaced.
    """
    if not only_recognised_html:
        return _ANY_TAG.sub(lambda match: value, text)
    return _NAMED_TAG.sub(
        lambda match: value if match.group("name").lower() in _HTML_TAG_NAMES else match.group(0),
        text,
    )


def build_character_groups_pattern(groups: CharacterGroups) -> str:
    """Build one alternation regex from the enabled character classes.

    Returns:
        Alternation source, or an empty string when no class is enabled.
    """
    alternatives: list[str] = []
    for character_class, group in (
        (_NEWLINE_CLASS, groups.newline),
        (_NUMBER_CLASS, groups.number),
        (_ALPHA_CLASS, groups.alpha),
        (_WHITESPACE_CLASS, groups.whitespace),
    ):
        if group.enabled:
            alternatives.append(character_class + _quantifier(group))
    return "|".join(alternatives)


def _quantifier(group: CharacterGroup) -> str:
    return repetition_quantifier(group.min, group.max)


def _apply_predefined_rule(text: str, operation: ReplaceOperation) -> str:
    value = _maybe_unescape(operation.value, operation.extended)
    if operation.rule == "tags":
        return strip_tags(text, value, operation.only_recognised_html)
    if operation.rule == "characterGroups":
        source = build_character_groups_pattern(operation.character_groups)
        if not source:
            return text
        pattern = re.compile(source)
        return pattern.sub(lambda match: expand_replacement(value, match), text)
    raise InvalidOptionError(
        f"Unsupported predefined rule '{operation.rule}'. "
        f"Choose one of: {', '.join(SUPPORTED_PREDEFINED_RULES)}."
    )


def _replace_sticky(pattern: re.Pattern[str], text: str, template: str, replace_all: bool) -> str:
    pieces: list[str] = []
    source_position = 0
    search_position = 0
    while search_position <= len(text):
        match = pattern.match(text, search_position)
        if match is None:
            break
        pieces.append(text[source_position:match.start()])
        pieces.append(expand_replacement(template, match))
        source_position = match.end()
        if not replace_all:
            break
        search_position = match.end() + (1 if match.end() == match.start() else 0)
    pieces.append(text[source_position:])
    return "".join(pieces)


def _maybe_unescape(text: str, extended: bool) -> str:
    return unescape_sequences(text) if extended else text

