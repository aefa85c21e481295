"""Byte-text charset registry.

This module lists the available charsets, flags which of them carry a
byte-order mark, and exposes BOM-aware encode/decode primitives on top of
Python's codec registry.
"""

from __future__ import annotations

import codecs
import encodings
import functools
import pkgutil
import re

from core.constants import BOM_AWARE_CHARSETS, BOM_CHARACTER
from core.errors import CharsetError

_INTERNAL_CODEC_MODULES = frozenset({"aliases", "charmap", "undefined"})
_BOM_EMITTING_CODECS = {"utf_16": "utf_16_le", "utf_32": "utf_32_le"}
_UNICODE_NAME_PATTERN = re.compile(r"^(?:utf|ucs)[-_ ]?(\d+)[-_ ]?(le|be)?$", re.IGNORECASE)
_WINDOWS_NAME_PATTERN = re.compile(r"^win(?:dows)?[-_ ]?(\d+)$", re.IGNORECASE)
_EXTRA_ALIASES = {"ucs2": "utf_16_le", "binary": "latin_1"}


def decode(data: bytes, charset: str, strip_bom: bool = False) -> str:
    """Decode bytes into text.

    Args:
        data: Encoded bytes.
        charset: Charset name in any supported spelling.
        strip_bom: Remove a leading byte-order mark for BOM-aware charsets.

    Returns:
        Decoded text.

    Raises:
        CharsetError: If the charset is unknown or the bytes are malformed.
    """
    codec_name = resolve_charset(charset)
    try:
        text = data.decode(codec_name)
    except UnicodeError as error:
        raise CharsetError(
            f"Failed to decode {len(data)} bytes as '{charset}': {error}."
        ) from error
    if strip_bom and is_bom_aware(codec_name) and text.startswith(BOM_CHARACTER):
        return text[len(BOM_CHARACTER):]
    return text


def encode(text: str, charset: str, add_bom: bool = False) -> bytes:
    """Encode text into bytes.

    ``utf_16`` and ``utf_32`` only write their byte-order mark when
    ``add_bom`` is set; otherwise they encode little-endian without one.

    Args:
        text: Text to encode.
        charset: Charset name in any supported spelling.
        add_bom: Prepend a byte-order mark for BOM-aware charsets.

    Returns:
        Encoded bytes.

    Raises:
        CharsetError: If the charset is unknown or cannot represent the text.
    """
    codec_name = resolve_charset(charset)
    payload = text
    if codec_name in _BOM_EMITTING_CODECS:
        if not add_bom:
            codec_name = _BOM_EMITTING_CODECS[codec_name]
    elif add_bom and is_bom_aware(codec_name):
        payload = BOM_CHARACTER + text
    try:
        return payload.encode(codec_name)
    except UnicodeError as error:
        raise CharsetError(f"Failed to encode text as '{charset}': {error}.") from error


def is_bom_aware(charset: str) -> bool:
    """Return whether a charset supports byte-order marks."""
    try:
        return resolve_charset(charset) in BOM_AWARE_CHARSETS
    except CharsetError:
        return False


def list_charsets() -> frozenset[str]:
    """Return canonical names of all available text charsets.

    Pure aliases, private modules and bytes-to-bytes codecs are excluded.
    """
    return _list_charsets()


def resolve_charset(charset: str) -> str:
    """Normalize a charset spelling to its canonical codec name.

    Args:
        charset: Name such as ``utf8``, ``UTF-16LE`` or ``win1252``.

    Returns:
        Canonical codec name, e.g. ``utf_16_le``.

    Raises:
        CharsetError: If no text codec matches the name.
    """
    candidates = _candidate_names(charset)
    for candidate in candidates:
        try:
            codec_info = codecs.lookup(candidate)
        except LookupError:
            continue
        if not getattr(codec_info, "_is_text_encoding", True):
            break
        return _normalize_codec_name(codec_info.name)
    raise CharsetError(
        f"Unsupported charset '{charset}'. "
        "Run 'textsmith charsets' to list the available charsets."
    )


@functools.lru_cache(maxsize=1)
def _list_charsets() -> frozenset[str]:
    names: set[str] = set()
    for module_info in pkgutil.iter_modules(encodings.__path__):
        module_name = module_info.name
        if module_name.startswith("_") or module_name in _INTERNAL_CODEC_MODULES:
            continue
        try:
            codec_info = codecs.lookup(module_name)
        except LookupError:
            continue
        if not getattr(codec_info, "_is_text_encoding", True):
            continue
        if _normalize_codec_name(codec_info.name) == module_name:
            names.add(module_name)
    return frozenset(names)


def _candidate_names(charset: str) -> list[str]:
    stripped = charset.strip()
    lowered = stripped.lower()
    candidates = [stripped]
    if lowered in _EXTRA_ALIASES:
        candidates.insert(0, _EXTRA_ALIASES[lowered])
    unicode_match = _UNICODE_NAME_PATTERN.match(stripped)
    if unicode_match:
        bits, order = unicode_match.groups()
        candidates.append(f"utf_{bits}_{order.lower()}" if order else f"utf_{bits}")
    windows_match = _WINDOWS_NAME_PATTERN.match(stripped)
    if windows_match:
        candidates.append(f"cp{windows_match.group(1)}")
    return candidates


def _normalize_codec_name(name: str) -> str:
    return name.lower().replace("-", "_")
