"""Path-based access to structured record fields.

This module reads and writes nested values addressed by dot-separated paths
with optional bracket segments, e.g. ``meta.tags[0]`` or ``a["b.c"]``.
"""

from __future__ import annotations

import re
from typing import Any, MutableMapping, MutableSequence

from core.errors import InvalidParameterError

MISSING: Any = object()

_SEGMENT_PATTERN = re.compile(
    r"""
    \[(?P<index>\d+)\]                       # [0]
    |\[(?P<quote>["'])(?P<quoted>.*?)(?P=quote)\]  # ["key"]
    |(?P<name>[^.\[\]]+)                     # key
    """,
    re.VERBOSE,
)


def parse_path(path: str) -> list[str | int]:
    """Split a field path into key and index segments.

    Args:
        path: Field path such as ``a.b[0].c``.

    Returns:
        Ordered segments; list indexes are ints.
    """
    segments: list[str | int] = []
    for match in _SEGMENT_PATTERN.finditer(path):
        if match.group("index") is not None:
            segments.append(int(match.group("index")))
        elif match.group("quote") is not None:
            segments.append(match.group("quoted"))
        else:
            segments.append(match.group("name"))
    return segments


def get_by_path(obj: Any, path: str) -> Any:
    """Read a nested value.

    Args:
        obj: Root mapping.
        path: Field path.

    Returns:
        The value, or ``MISSING`` when any segment is absent.
    """
    segments = parse_path(path)
    if not segments:
        return MISSING
    current = obj
    for segment in segments:
        current = _get_child(current, segment)
        if current is MISSING:
            return MISSING
    return current


def set_by_path(obj: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Write a nested value, creating intermediate containers.

    Args:
        obj: Root mapping, modified in place.
        path: Field path.
        value: Value to store.
    """
    segments = parse_path(path)
    if not segments:
        return
    current: Any = obj
    for segment, next_segment in zip(segments, segments[1:]):
        child = _get_child(current, segment)
        if not isinstance(child, (dict, list)):
            child = [] if isinstance(next_segment, int) else {}
            _set_child(current, segment, child)
        current = child
    _set_child(current, segments[-1], value)


def _get_child(container: Any, segment: str | int) -> Any:
    if isinstance(container, dict):
        key = str(segment) if isinstance(segment, int) else segment
        return container.get(key, MISSING)
    if isinstance(container, list):
        index = _as_index(segment)
        if index is None or index >= len(container):
            return MISSING
        return container[index]
    return MISSING


def _set_child(container: Any, segment: str | int, value: Any) -> None:
    if isinstance(container, list):
        index = _as_index(segment)
        if index is not None:
            _assign_list_item(container, index, value)
            return
        raise InvalidParameterError(
            f"Cannot set field '{segment}' on a list; use a numeric index segment."
        )
    key = str(segment) if isinstance(segment, int) else segment
    container[key] = value


def _assign_list_item(container: MutableSequence[Any], index: int, value: Any) -> None:
    while len(container) <= index:
        container.append(None)
    container[index] = value


def _as_index(segment: str | int) -> int | None:
    if isinstance(segment, int):
        return segment
    if segment.isdigit():
        return int(segment)
    return None
