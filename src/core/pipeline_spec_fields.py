"""Type-safe field parsing helpers for pipeline spec files.

This module centralizes primitive parsing so the spec loader stays concise
and produces consistent validation errors for every step kind.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from core.errors import PipelineSpecError


def expect_mapping(value: object, context: str) -> Mapping[str, object]:
    """Validate that a YAML node is a mapping with string keys."""
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise PipelineSpecError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise PipelineSpecError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def expect_sequence(value: object, context: str) -> Sequence[object]:
    """Validate that a YAML node is a list."""
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise PipelineSpecError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def validate_keys(mapping: Mapping[str, object], allowed_keys: set[str], context: str) -> None:
    """Reject keys outside the allowed set."""
    unknown_keys = sorted(set(mapping) - allowed_keys)
    if unknown_keys:
        raise PipelineSpecError(f"Invalid {context}: unknown fields {', '.join(unknown_keys)}.")


def required_string(args: Mapping[str, object], field_name: str, context: str) -> str:
    """Read a required non-empty identifier field."""
    value = optional_string(args, field_name, context)
    if value is None:
        raise PipelineSpecError(f"Invalid {context}: missing required field '{field_name}'.")
    return value


def optional_string(args: Mapping[str, object], field_name: str, context: str) -> str | None:
    """Read an optional identifier field, stripping surrounding whitespace."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    raise PipelineSpecError(f"Invalid {context}: field '{field_name}' must be a string.")


def string_with_default(
    args: Mapping[str, object],
    field_name: str,
    context: str,
    default_value: str,
) -> str:
    """Read an identifier field with a default for missing values."""
    value = optional_string(args, field_name, context)
    return default_value if value is None else value


def text_with_default(
    args: Mapping[str, object],
    field_name: str,
    context: str,
    default_value: str,
) -> str:
    """Read a free-text field verbatim.

    Unlike identifiers, whitespace is significant here and an empty string
    is a valid value.
    """
    value = args.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, str):
        return value
    raise PipelineSpecError(f"Invalid {context}: field '{field_name}' must be a string.")


def int_with_default(
    args: Mapping[str, object],
    field_name: str,
    context: str,
    default_value: int,
) -> int:
    """Read an integer field while preserving explicit zero values."""
    value = args.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise PipelineSpecError(f"Invalid {context}: field '{field_name}' must be an integer.")


def bool_with_default(
    args: Mapping[str, object],
    field_name: str,
    context: str,
    default_value: bool,
) -> bool:
    """Read a boolean field from a spec step."""
    value = args.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, bool):
        return value
    raise PipelineSpecError(f"Invalid {context}: field '{field_name}' must be true/false.")
