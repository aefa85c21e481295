"""Binary attachment construction.

This module materializes encoded text into attachment models with a file
name, MIME type and derived file extension.
"""

from __future__ import annotations

import mimetypes
from pathlib import PurePosixPath

from core.constants import DEFAULT_MIME_TYPE
from core.types import BinaryAttachment


def create_binary_attachment(data: bytes, file_name: str, mime_type: str) -> BinaryAttachment:
    """Build an attachment for encoded bytes.

    Args:
        data: Attachment payload.
        file_name: File name; may be empty.
        mime_type: MIME type; ``text/plain`` when empty.

    Returns:
        Attachment model.
    """
    resolved_mime_type = mime_type.strip() or DEFAULT_MIME_TYPE
    return BinaryAttachment(
        data=bytes(data),
        file_name=file_name,
        mime_type=resolved_mime_type,
        file_extension=_file_extension(file_name, resolved_mime_type),
    )


def _file_extension(file_name: str, mime_type: str) -> str:
    suffix = PurePosixPath(file_name).suffix if file_name else ""
    if suffix:
        return suffix.lstrip(".")
    guessed = mimetypes.guess_extension(mime_type, strict=False)
    return guessed.lstrip(".") if guessed else ""
