"""URL escape and markup entity codecs.

This module decodes and encodes URL percent-escapes and XML/HTML character
references. Decoding supports a lenient ``legacy`` mode and a ``strict``
mode; encoding supports ``extensive``, ``utf8`` and ``nonAscii`` escaping.
"""

from __future__ import annotations

import functools
import html
import html.entities
import re
from urllib.parse import quote

from core.constants import (
    ENTITY_CODEC_ALIASES,
    ENTITY_ENCODE_MODE_ALIASES,
    SUPPORTED_ENTITY_CODECS,
    SUPPORTED_ENTITY_DECODE_MODES,
    SUPPORTED_ENTITY_ENCODE_MODES,
)
from core.errors import CharsetError, InvalidOptionError

_URI_SAFE = ";,/?:@&=+$!*'()#"
_URI_COMPONENT_SAFE = "!*'()"
_URI_RESERVED = frozenset(";/?:@&=+$,#")
_PERCENT_RUN = re.compile(r"(?:%[0-9A-Fa-f]{2})+")
_STRAY_PERCENT = re.compile(r"%(?![0-9A-Fa-f]{2})")

_XML_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&apos;"}
_NUMERIC_REFERENCE = r"#(?:[xX][0-9A-Fa-f]+|[0-9]+)"
_XML_LEGACY_REFERENCE = re.compile(rf"&(?:{_NUMERIC_REFERENCE}|amp|apos|gt|lt|quot);?")
_XML_STRICT_REFERENCE = re.compile(rf"&(?:{_NUMERIC_REFERENCE}|amp|apos|gt|lt|quot);")
_HTML_STRICT_REFERENCE = re.compile(rf"&(?:{_NUMERIC_REFERENCE}|[A-Za-z][A-Za-z0-9]*);")

_MARKUP_CHARACTERS = re.compile(r"""[&<>"']""")
_XML_EXTENSIVE_CHARACTERS = re.compile("[&<>\"'\x80-\U0010ffff]")
_HTML_EXTENSIVE_CHARACTERS = re.compile("[\t\n\f!-,./:-@\\[-`{-}\x80-\U0010ffff]")
_HTML_NON_ASCII_CHARACTERS = re.compile("[&<>\"'\x80-\U0010ffff]")


def decode_entities(text: str, codec: str, mode: str) -> str:
    """Decode URL escapes or markup entities.

    Args:
        text: Text to decode.
        codec: One of ``nothing``, ``url``, ``urlComponent``, ``xml``, ``html``.
        mode: ``legacy`` or ``strict``; only used by ``xml`` and ``html``.

    Returns:
        Decoded text.

    Raises:
        InvalidOptionError: For unknown codec or mode values.
        CharsetError: For malformed percent-escapes.
    """
    normalized_codec = normalize_entity_codec(codec)
    if normalized_codec == "nothing":
        return text
    if normalized_codec == "url":
        return _decode_percent(text, _URI_RESERVED)
    if normalized_codec == "urlComponent":
        return _decode_percent(text, frozenset())
    decode_mode = _validate_option(mode, SUPPORTED_ENTITY_DECODE_MODES, "entity decode mode")
    if normalized_codec == "xml":
        pattern = _XML_LEGACY_REFERENCE if decode_mode == "legacy" else _XML_STRICT_REFERENCE
        return pattern.sub(_decode_xml_reference, text)
    if decode_mode == "legacy":
        return html.unescape(text)
    return _HTML_STRICT_REFERENCE.sub(_decode_html_strict_reference, text)


def encode_entities(text: str, codec: str, mode: str) -> str:
    """Encode URL escapes or markup entities.

    Args:
        text: Text to encode.
        codec: One of ``nothing``, ``url``, ``urlComponent``, ``xml``, ``html``.
        mode: ``extensive``, ``utf8`` or ``nonAscii``; only used by ``xml``
            and ``html``. On ``xml`` the ``nonAscii`` mode behaves like
            ``extensive``.

    Returns:
        Encoded text.

    Raises:
        InvalidOptionError: For unknown codec or mode values.
        CharsetError: If the text holds unpaired surrogates.
    """
    normalized_codec = normalize_entity_codec(codec)
    if normalized_codec == "nothing":
        return text
    if normalized_codec == "url":
        return _encode_percent(text, _URI_SAFE)
    if normalized_codec == "urlComponent":
        return _encode_percent(text, _URI_COMPONENT_SAFE)
    encode_mode = _validate_option(
        ENTITY_ENCODE_MODE_ALIASES.get(mode, mode),
        SUPPORTED_ENTITY_ENCODE_MODES,
        "entity encode mode",
    )
    if encode_mode == "utf8":
        return _MARKUP_CHARACTERS.sub(lambda match: _XML_ESCAPES[match.group(0)], text)
    if normalized_codec == "xml":
        return _XML_EXTENSIVE_CHARACTERS.sub(_encode_xml_character, text)
    if encode_mode == "extensive":
        return _HTML_EXTENSIVE_CHARACTERS.sub(_encode_html_character, text)
    return _HTML_NON_ASCII_CHARACTERS.sub(_encode_html_character, text)


def normalize_entity_codec(codec: str) -> str:
    """Validate an entity codec name and resolve its aliases."""
    return _validate_option(
        ENTITY_CODEC_ALIASES.get(codec, codec), SUPPORTED_ENTITY_CODECS, "entity codec"
    )


def _validate_option(value: str, supported: tuple[str, ...], label: str) -> str:
    if value in supported:
        return value
    raise InvalidOptionError(
        f"Unsupported {label} '{value}'. Choose one of: {', '.join(supported)}."
    )


def _decode_percent(text: str, reserved: frozenset[str]) -> str:
    stray = _STRAY_PERCENT.search(text)
    if stray is not None:
        raise CharsetError(
            f"Malformed percent-escape at position {stray.start()}: "
            "expected '%' followed by two hex digits."
        )
    return _PERCENT_RUN.sub(lambda match: _decode_percent_run(match.group(0), reserved), text)


def _decode_percent_run(run: str, reserved: frozenset[str]) -> str:
    output: list[str] = []
    pending = bytearray()
    for offset in range(0, len(run), 3):
        token = run[offset:offset + 3]
        byte = int(token[1:], 16)
        if byte < 0x80 and chr(byte) in reserved:
            output.append(_decode_utf8(pending))
            pending.clear()
            output.append(token)
            continue
        pending.append(byte)
    output.append(_decode_utf8(pending))
    return "".join(output)


def _decode_utf8(data: bytearray) -> str:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as error:
        raise CharsetError(f"Percent-escapes do not form valid UTF-8: {error}.") from error


def _encode_percent(text: str, safe: str) -> str:
    try:
        return quote(text, safe=safe, errors="strict")
    except UnicodeEncodeError as error:
        raise CharsetError(f"Text cannot be percent-encoded: {error}.") from error


def _decode_xml_reference(match: re.Match[str]) -> str:
    reference = match.group(0)
    if not reference.endswith(";"):
        reference += ";"
    return html.unescape(reference)


def _decode_html_strict_reference(match: re.Match[str]) -> str:
    reference = match.group(0)
    if reference.startswith("&#"):
        return html.unescape(reference)
    return html.entities.html5.get(reference[1:], reference)


def _encode_xml_character(match: re.Match[str]) -> str:
    character = match.group(0)
    return _XML_ESCAPES.get(character) or f"&#x{ord(character):x};"


def _encode_html_character(match: re.Match[str]) -> str:
    character = match.group(0)
    name = _html_names_by_character().get(character)
    if name is not None:
        return f"&{name};"
    return f"&#x{ord(character):x};"


@functools.lru_cache(maxsize=1)
def _html_names_by_character() -> dict[str, str]:
    """Map single characters to their preferred HTML entity name.

    HTML 4 names win; otherwise the shortest lowercase HTML5 name is used.
    """
    names: dict[str, str] = {
        chr(codepoint): name for codepoint, name in html.entities.codepoint2name.items()
    }
    names["'"] = "apos"
    html5_names: dict[str, list[str]] = {}
    for reference, value in html.entities.html5.items():
        if len(value) != 1 or not reference.endswith(";"):
            continue
        html5_names.setdefault(value, []).append(reference[:-1])
    for character, candidates in html5_names.items():
        if character in names:
            continue
        names[character] = min(candidates, key=_entity_name_rank)
    return names


def _entity_name_rank(name: str) -> tuple[bool, int, str]:
    return (not name.islower(), len(name), name)

