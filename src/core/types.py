"""Shared typed models.

This module defines the immutable configuration variants (data sources,
operations, text groups) and the record models used by the ingest, transform,
and store layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Mapping, Sequence, Union

from core.constants import (
    DEFAULT_BINARY_KEY,
    DEFAULT_CHARSET,
    DEFAULT_JSON_PATH,
    DEFAULT_MIME_TYPE,
    DEFAULT_PAD_STRING,
    DEFAULT_TRIM_STRING,
)
from core.errors import RecordProcessingError

EntityCodec = Literal["nothing", "url", "urlComponent", "xml", "html"]
EntityDecodeMode = Literal["legacy", "strict"]
EntityEncodeMode = Literal["extensive", "utf8", "nonAscii"]
CaseType = Literal[
    "camelCase",
    "capitalize",
    "titlecase",
    "kebabCase",
    "snakeCase",
    "startCase",
    "upperCase",
    "lowerCase",
    "localeUpperCase",
    "localeLowerCase",
]
NormalizeForm = Literal["NFC", "NFD", "NFKC", "NFKD"]
ReplaceMode = Literal["substring", "extendedSubstring", "regex", "predefinedRule"]
PredefinedRule = Literal["tags", "characterGroups"]
TrimMode = Literal["trimBoth", "trimStart", "trimEnd"]
PadMode = Literal["padStart", "padEnd"]
SubstringEnd = Literal["complete", "position", "length"]


@dataclass(frozen=True)
class BinaryAttachment:
    """Binary payload attached to a record.

    Attributes:
        data: Raw attachment bytes.
        file_name: File name shown to downstream consumers.
        mime_type: MIME type of the payload.
        file_extension: Extension derived from the file name, without dot.
    """

    data: bytes
    file_name: str = ""
    mime_type: str = DEFAULT_MIME_TYPE
    file_extension: str = ""

    @property
    def file_size(self) -> int:
        """Return payload size in bytes."""
        return len(self.data)


@dataclass(frozen=True)
class InputRecord:
    """Raw input record supplied by the host.

    Attributes:
        json: Structured fields tree.
        binary: Attachments keyed by binary property name.
    """

    json: Mapping[str, Any] = field(default_factory=dict)
    binary: Mapping[str, BinaryAttachment] = field(default_factory=dict)


@dataclass
class OutputRecord:
    """Mutable accumulator built while processing one input record.

    Attributes:
        json: Structured fields tree written by ``toJSON`` destinations.
        binary: Attachments written by ``toFile`` destinations.
    """

    json: dict[str, Any] = field(default_factory=dict)
    binary: dict[str, BinaryAttachment] = field(default_factory=dict)


@dataclass(frozen=True)
class FromText:
    """Read a literal text."""

    text: str = ""


@dataclass(frozen=True)
class FromFile:
    """Read and decode a binary attachment.

    Attributes:
        binary_key: Attachment key to read.
        decode_charset: Charset used to decode the bytes.
        strip_bom: Remove a leading byte-order mark after decoding.
        prefer_manipulated: Prefer attachments written earlier for the same record.
    """

    binary_key: str = DEFAULT_BINARY_KEY
    decode_charset: str = DEFAULT_CHARSET
    strip_bom: bool = True
    prefer_manipulated: bool = True


@dataclass(frozen=True)
class FromJSON:
    """Read a structured field by path.

    Attributes:
        path: Dot-separated field path.
        prefer_manipulated: Prefer fields written earlier for the same record.
        skip_non_string: Skip the source when the value is not a string.
    """

    path: str = DEFAULT_JSON_PATH
    prefer_manipulated: bool = True
    skip_non_string: bool = True


@dataclass(frozen=True)
class ToFile:
    """Encode the final text into a new attachment.

    Attributes:
        binary_key: Attachment key to write.
        encode_charset: Charset used to encode the text.
        add_bom: Prepend a byte-order mark for BOM-aware charsets.
        file_name: File name of the created attachment.
        mime_type: MIME type of the created attachment.
    """

    binary_key: str = DEFAULT_BINARY_KEY
    encode_charset: str = DEFAULT_CHARSET
    add_bom: bool = False
    file_name: str = ""
    mime_type: str = DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class ToJSON:
    """Write the final text into a structured field by path."""

    path: str = DEFAULT_JSON_PATH


ReadOperation = Union[FromText, FromFile, FromJSON]
WriteOperation = Union[ToFile, ToJSON]


@dataclass(frozen=True)
class DataSource:
    """One configured read/write pair inside a text group."""

    read: ReadOperation
    write: WriteOperation


@dataclass(frozen=True)
class ConcatOperation:
    """Surround the text with fixed strings."""

    before: str = ""
    after: str = ""


@dataclass(frozen=True)
class DecodeEncodeOperation:
    """Round-trip the text bytes through two charsets."""

    decode_charset: str = DEFAULT_CHARSET
    encode_charset: str = DEFAULT_CHARSET
    strip_bom: bool = True
    add_bom: bool = False


@dataclass(frozen=True)
class DecodeEncodeEntitiesOperation:
    """Decode then encode URL escapes or markup entities."""

    decode_with: EntityCodec = "nothing"
    encode_with: EntityCodec = "nothing"
    decode_mode: EntityDecodeMode = "legacy"
    encode_mode: EntityEncodeMode = "extensive"


@dataclass(frozen=True)
class LetterCaseOperation:
    """Change the letter case of the text."""

    case_type: CaseType = "lowerCase"
    language: str = "en"


@dataclass(frozen=True)
class NormalizeOperation:
    """Apply Unicode normalization."""

    form: NormalizeForm = "NFC"


@dataclass(frozen=True)
class CharacterGroup:
    """One toggleable character class of the ``characterGroups`` rule.

    Attributes:
        enabled: Whether the class takes part in the alternation.
        min: Minimum repetition count, 0 for "zero or more".
        max: Maximum repetition count, 0 for "no upper bound".
    """

    enabled: bool = False
    min: int = 1
    max: int = 0


@dataclass(frozen=True)
class CharacterGroups:
    """Character classes replaced by the ``characterGroups`` rule."""

    newline: CharacterGroup = field(default_factory=CharacterGroup)
    number: CharacterGroup = field(default_factory=CharacterGroup)
    alpha: CharacterGroup = field(default_factory=CharacterGroup)
    whitespace: CharacterGroup = field(default_factory=CharacterGroup)


@dataclass(frozen=True)
class ReplaceOperation:
    """Replace substrings, regex matches, or predefined patterns.

    Attributes:
        replace_mode: Sub-mode selecting which fields apply.
        substring: Search string for the substring modes.
        replace_all: Replace every occurrence in the substring modes.
        regex: Pattern, optionally as a ``/body/flags`` literal.
        pattern: Replacement template for the regex mode.
        rule: Predefined rule name for the ``predefinedRule`` mode.
        only_recognised_html: Restrict tag stripping to known HTML tags.
        character_groups: Classes for the ``characterGroups`` rule.
        value: Replacement value for the substring and predefined modes.
        extended: Unescape backslash sequences in the replacement.
    """

    replace_mode: ReplaceMode = "substring"
    substring: str = ""
    replace_all: bool = True
    regex: str = ""
    pattern: str = ""
    rule: PredefinedRule = "tags"
    only_recognised_html: bool = False
    character_groups: CharacterGroups = field(default_factory=CharacterGroups)
    value: str = ""
    extended: bool = False


@dataclass(frozen=True)
class TrimOperation:
    """Trim a string or character set from the text ends."""

    trim: TrimMode = "trimBoth"
    trim_string: str = DEFAULT_TRIM_STRING
    trim_string_unit: bool = True


@dataclass(frozen=True)
class PadOperation:
    """Pad the text to a target length."""

    pad: PadMode = "padStart"
    target_length: int = 1
    pad_string: str = DEFAULT_PAD_STRING


@dataclass(frozen=True)
class SubstringOperation:
    """Cut a window out of the text."""

    start_position: int = 0
    end: SubstringEnd = "complete"
    end_position: int = 1
    end_length: int = 1


@dataclass(frozen=True)
class RepeatOperation:
    """Repeat the text a number of times."""

    times: int = 1


Operation = Union[
    ConcatOperation,
    DecodeEncodeOperation,
    DecodeEncodeEntitiesOperation,
    LetterCaseOperation,
    NormalizeOperation,
    ReplaceOperation,
    TrimOperation,
    PadOperation,
    SubstringOperation,
    RepeatOperation,
]


@dataclass(frozen=True)
class TextGroup:
    """Data sources paired with one ordered operation list."""

    sources: tuple[DataSource, ...] = ()
    operations: tuple[Operation, ...] = ()


TextGroupProvider = Callable[[int], Sequence[TextGroup]]


@dataclass(frozen=True)
class PipelineOptions:
    """Record-level processing options.

    Attributes:
        keep_only_set: Start each output record empty instead of copying input.
        continue_on_fail: Collect per-record failures instead of raising.
    """

    keep_only_set: bool = False
    continue_on_fail: bool = False


@dataclass(frozen=True)
class RecordResult:
    """Outcome of processing one input record.

    Attributes:
        record_index: Zero-based input position.
        output: Output record when processing succeeded.
        error: Failure when processing aborted.
    """

    record_index: int
    output: OutputRecord | None = None
    error: RecordProcessingError | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether the record produced an output."""
        return self.error is None
