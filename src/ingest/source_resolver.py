"""Source resolution for text groups.

This module produces the initial text value of one data source from the
literal text, an attachment, or a structured field. Sources that yield no
usable value resolve to ``None`` and are skipped by the orchestrator.
"""

from __future__ import annotations

import json
from typing import Any

from core.constants import SUPPORTED_READ_OPERATIONS
from core.errors import InvalidOptionError
from core.field_paths import MISSING, get_by_path
from core.types import (
    BinaryAttachment,
    DataSource,
    FromFile,
    FromJSON,
    FromText,
    InputRecord,
    OutputRecord,
)
from transforms import charset_registry


def resolve_source(
    source: DataSource,
    raw_record: InputRecord,
    output_so_far: OutputRecord,
) -> str | None:
    """Resolve the initial text value of a data source.

    Args:
        source: Configured read/write pair.
        raw_record: Unmodified input record.
        output_so_far: Output accumulator of the current record.

    Returns:
        Initial text value, or ``None`` when the source must be skipped.

    Raises:
        InvalidOptionError: For unknown read variants.
        CharsetError: If attachment bytes cannot be decoded.
    """
    read = source.read
    if isinstance(read, FromText):
        return read.text
    if isinstance(read, FromFile):
        return _resolve_file(read, raw_record, output_so_far)
    if isinstance(read, FromJSON):
        return _resolve_json(read, raw_record, output_so_far)
    raise InvalidOptionError(
        f"Unsupported read operation {type(read).__name__}. "
        f"Choose one of: {', '.join(SUPPORTED_READ_OPERATIONS)}."
    )


def _resolve_file(
    read: FromFile,
    raw_record: InputRecord,
    output_so_far: OutputRecord,
) -> str | None:
    attachment: BinaryAttachment | None = None
    if read.prefer_manipulated:
        attachment = output_so_far.binary.get(read.binary_key)
    if attachment is None:
        attachment = raw_record.binary.get(read.binary_key)
    if attachment is None:
        return None
    return charset_registry.decode(
        attachment.data, read.decode_charset, strip_bom=read.strip_bom
    )


def _resolve_json(
    read: FromJSON,
    raw_record: InputRecord,
    output_so_far: OutputRecord,
) -> str | None:
    value: Any = MISSING
    if read.prefer_manipulated:
        value = get_by_path(output_so_far.json, read.path)
    if value is MISSING or value is None:
        value = get_by_path(raw_record.json, read.path)
    if isinstance(value, str):
        return value
    if read.skip_non_string:
        return None
    return stringify_value(value)


def stringify_value(value: Any) -> str:
    """Render a non-string field value as text.

    Missing and null values become an empty string, booleans render as
    ``true``/``false`` and containers as compact JSON.
    """
    if value is MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)
