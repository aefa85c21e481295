"""Public SDK surface for Textsmith.

This module provides a stable import path for library users.
It re-exports the client, the pipeline entry points and typed models.
"""

from __future__ import annotations

from core.config import TextsmithConfig
from core.errors import (
    CharsetError,
    InvalidOptionError,
    InvalidParameterError,
    PipelineSpecError,
    RecordProcessingError,
    RecordReadError,
    TextsmithError,
)
from core.pipeline_spec import PipelineSpec, load_pipeline_spec, parse_pipeline_spec
from core.types import (
    BinaryAttachment,
    CharacterGroup,
    CharacterGroups,
    ConcatOperation,
    DataSource,
    DecodeEncodeEntitiesOperation,
    DecodeEncodeOperation,
    FromFile,
    FromJSON,
    FromText,
    InputRecord,
    LetterCaseOperation,
    NormalizeOperation,
    OutputRecord,
    PadOperation,
    PipelineOptions,
    RecordResult,
    RepeatOperation,
    ReplaceOperation,
    SubstringOperation,
    TextGroup,
    ToFile,
    ToJSON,
    TrimOperation,
)
from ingest.pipeline import TextPipelineRunner, process_record, process_records, static_text_groups
from ingest.pipeline_sdk import TextsmithClient
from transforms.charset_registry import list_charsets
from transforms.operation_engine import apply_operation, apply_operations

__all__ = [
    "BinaryAttachment",
    "CharacterGroup",
    "CharacterGroups",
    "CharsetError",
    "ConcatOperation",
    "DataSource",
    "DecodeEncodeEntitiesOperation",
    "DecodeEncodeOperation",
    "FromFile",
    "FromJSON",
    "FromText",
    "InputRecord",
    "InvalidOptionError",
    "InvalidParameterError",
    "LetterCaseOperation",
    "NormalizeOperation",
    "OutputRecord",
    "PadOperation",
    "PipelineOptions",
    "PipelineSpec",
    "PipelineSpecError",
    "RecordProcessingError",
    "RecordReadError",
    "RecordResult",
    "RepeatOperation",
    "ReplaceOperation",
    "SubstringOperation",
    "TextGroup",
    "TextPipelineRunner",
    "TextsmithClient",
    "TextsmithConfig",
    "TextsmithError",
    "ToFile",
    "ToJSON",
    "TrimOperation",
    "apply_operation",
    "apply_operations",
    "list_charsets",
    "load_pipeline_spec",
    "parse_pipeline_spec",
    "process_record",
    "process_records",
    "static_text_groups",
]
