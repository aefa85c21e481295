"""Unit tests for field path access."""

from __future__ import annotations

import pytest

from core.errors import InvalidParameterError
from core.field_paths import MISSING, get_by_path, parse_path, set_by_path


def test_parse_path_supports_indexes_and_quoted_keys() -> None:
    """Paths should split into names, indexes and quoted keys."""
    assert parse_path('a.b[0]["c.d"]') == ["a", "b", 0, "c.d"]


def test_get_by_path_reads_nested_values() -> None:
    """Nested lookups should traverse dicts and lists."""
    payload = {"a": {"b": [{"c": 1}, {"c": 2}]}}

    assert get_by_path(payload, "a.b[1].c") == 2
    assert get_by_path(payload, "a.b[5].c") is MISSING
    assert get_by_path(payload, "a.x") is MISSING


def test_set_by_path_creates_containers() -> None:
    """Writes should create dicts, and lists for index segments."""
    payload: dict[str, object] = {}

    set_by_path(payload, "x.y[2]", "v")

    assert payload == {"x": {"y": [None, None, "v"]}}


def test_set_by_path_replaces_scalar_intermediates() -> None:
    """Scalar intermediates should be replaced by containers."""
    payload: dict[str, object] = {"a": 1}

    set_by_path(payload, "a.b", "v")

    assert payload == {"a": {"b": "v"}}


def test_set_by_path_rejects_named_key_on_list() -> None:
    """Named segments cannot address list items."""
    with pytest.raises(InvalidParameterError):
        set_by_path({"a": [1]}, "a.name", "v")
