"""Destination committer for manipulated texts.

This module writes a final text value into the output record, either as a
structured field or as a newly encoded attachment.
"""

from __future__ import annotations

from core.constants import DEFAULT_MIME_TYPE, SUPPORTED_WRITE_OPERATIONS
from core.errors import InvalidOptionError
from core.field_paths import set_by_path
from core.types import OutputRecord, ToFile, ToJSON, WriteOperation
from store.attachments import create_binary_attachment
from transforms import charset_registry


def commit_text(
    text: str,
    destination: WriteOperation,
    output: OutputRecord,
    default_mime_type: str = DEFAULT_MIME_TYPE,
) -> None:
    """Write a final text value into the output record.

    Args:
        text: Final text value.
        destination: Write variant of the data source.
        output: Output accumulator of the current record, modified in place.
        default_mime_type: MIME type used when the destination sets none.

    Raises:
        InvalidOptionError: For unknown write variants.
        CharsetError: If the text cannot be encoded.
    """
    if isinstance(destination, ToJSON):
        set_by_path(output.json, destination.path, text)
        return
    if isinstance(destination, ToFile):
        data = charset_registry.encode(
            text, destination.encode_charset, add_bom=destination.add_bom
        )
        output.binary[destination.binary_key] = create_binary_attachment(
            data,
            destination.file_name,
            destination.mime_type or default_mime_type,
        )
        return
    raise InvalidOptionError(
        f"Unsupported write operation {type(destination).__name__}. "
        f"Choose one of: {', '.join(SUPPORTED_WRITE_OPERATIONS)}."
    )
