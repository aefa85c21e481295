"""Record JSON payload conversion and output writing.

This module converts records to and from their JSON line form, where
attachment bytes travel base64 encoded, and writes result streams as JSONL.
"""

from __future__ import annotations

import base64
import binascii
import json
from pathlib import Path
from typing import Any, Iterable, Mapping, TextIO

from core.errors import RecordReadError
from core.types import BinaryAttachment, InputRecord, OutputRecord, RecordResult
from store.attachments import create_binary_attachment


def input_record_from_payload(payload: Any, source_label: str = "") -> InputRecord:
    """Build an input record from a decoded JSON object.

    Args:
        payload: Object with optional ``json`` and ``binary`` members.
        source_label: Location used in error messages.

    Returns:
        Input record.

    Raises:
        RecordReadError: If the payload shape is invalid.
    """
    if not isinstance(payload, dict):
        raise RecordReadError(
            f"Invalid record at {source_label}: expected a JSON object, "
            f"got {type(payload).__name__}."
        )
    fields = payload.get("json", {})
    if not isinstance(fields, dict):
        raise RecordReadError(f"Invalid record at {source_label}: 'json' must be an object.")
    binary_payload = payload.get("binary", {})
    if not isinstance(binary_payload, dict):
        raise RecordReadError(f"Invalid record at {source_label}: 'binary' must be an object.")
    binary = {
        key: _attachment_from_payload(value, f"{source_label} binary '{key}'")
        for key, value in binary_payload.items()
    }
    return InputRecord(json=fields, binary=binary)


def output_record_to_payload(record: OutputRecord) -> dict[str, Any]:
    """Convert an output record into a JSON-serializable object.

    The ``binary`` member is omitted when the record has no attachments.
    """
    payload: dict[str, Any] = {"json": record.json}
    if record.binary:
        payload["binary"] = {
            key: attachment_to_payload(attachment) for key, attachment in record.binary.items()
        }
    return payload


def attachment_to_payload(attachment: BinaryAttachment) -> dict[str, Any]:
    """Convert an attachment into its JSON form."""
    return {
        "data": base64.b64encode(attachment.data).decode("ascii"),
        "fileName": attachment.file_name,
        "mimeType": attachment.mime_type,
        "fileExtension": attachment.file_extension,
        "fileSize": attachment.file_size,
    }


def result_to_payload(result: RecordResult) -> dict[str, Any]:
    """Convert a record result into a JSON-serializable object.

    Failed records render as ``{"json": {"error": ...}}``.
    """
    if result.output is not None:
        return output_record_to_payload(result.output)
    message = str(result.error.cause) if result.error is not None else ""
    return {"json": {"error": message}}


def write_results_jsonl(results: Iterable[RecordResult], stream: TextIO) -> int:
    """Write record results as JSON lines.

    Args:
        results: Results in input order.
        stream: Writable text stream.

    Returns:
        Number of written lines.
    """
    line_count = 0
    for result in results:
        stream.write(json.dumps(result_to_payload(result), ensure_ascii=False))
        stream.write("\n")
        line_count += 1
    return line_count


def write_results_file(results: Iterable[RecordResult], output_path: Path) -> int:
    """Write record results to a JSONL file, creating parent directories."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as output_file:
        return write_results_jsonl(results, output_file)


def _attachment_from_payload(payload: Any, source_label: str) -> BinaryAttachment:
    if not isinstance(payload, Mapping) or not isinstance(payload.get("data"), str):
        raise RecordReadError(
            f"Invalid attachment at {source_label}: expected an object with base64 'data'."
        )
    try:
        data = base64.b64decode(payload["data"], validate=True)
    except binascii.Error as error:
        raise RecordReadError(
            f"Invalid attachment at {source_label}: 'data' is not valid base64."
        ) from error
    return create_binary_attachment(
        data,
        str(payload.get("fileName") or ""),
        str(payload.get("mimeType") or ""),
    )
