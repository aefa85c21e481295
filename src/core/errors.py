"""Textsmith exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class TextsmithError(Exception):
    """Base exception for all Textsmith failures."""


class TextsmithConfigError(TextsmithError):
    """Raised for invalid runtime configuration."""


class InvalidOptionError(TextsmithError):
    """Raised when an enumerated option holds a value outside its closed set."""


class InvalidParameterError(TextsmithError):
    """Raised when a numeric or pattern parameter violates its bounds."""


class CharsetError(TextsmithError):
    """Raised for unknown charsets and malformed or unencodable text."""


class PipelineSpecError(TextsmithError):
    """Raised for invalid or unsupported pipeline spec files."""


class RecordReadError(TextsmithError):
    """Raised when input records cannot be read or parsed."""


class TextsmithDependencyError(TextsmithError):
    """Raised when an optional runtime dependency is missing."""


class RecordProcessingError(TextsmithError):
    """Raised when one input record fails; carries the record index.

    Attributes:
        record_index: Zero-based index of the failed input record.
        cause: Underlying engine error.
    """

    def __init__(self, record_index: int, cause: TextsmithError) -> None:
        super().__init__(f"Record #{record_index} failed: {cause}")
        self.record_index = record_index
        self.cause = cause
