"""Typed pipeline spec parsing for declarative text pipelines.

This module loads and validates YAML pipeline specs used by CLI and SDK
workflows. A spec lists text groups, each pairing data sources with an
ordered operation list, and is turned into the immutable models consumed
by the pipeline orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, cast

from core.constants import (
    DEFAULT_BINARY_KEY,
    DEFAULT_CHARSET,
    DEFAULT_JSON_PATH,
    DEFAULT_MIME_TYPE,
    DEFAULT_PAD_STRING,
    DEFAULT_TRIM_STRING,
    PIPELINE_SPEC_VERSION,
    SUPPORTED_OPERATION_ACTIONS,
    SUPPORTED_READ_OPERATIONS,
    SUPPORTED_WRITE_OPERATIONS,
)
from core.errors import InvalidOptionError, PipelineSpecError, TextsmithDependencyError
from core.pipeline_spec_fields import (
    bool_with_default,
    expect_mapping,
    expect_sequence,
    int_with_default,
    required_string,
    string_with_default,
    text_with_default,
    validate_keys,
)
from core.types import (
    CaseType,
    CharacterGroup,
    CharacterGroups,
    ConcatOperation,
    DataSource,
    DecodeEncodeEntitiesOperation,
    DecodeEncodeOperation,
    EntityCodec,
    EntityDecodeMode,
    EntityEncodeMode,
    FromFile,
    FromJSON,
    FromText,
    LetterCaseOperation,
    NormalizeForm,
    NormalizeOperation,
    Operation,
    PadMode,
    PadOperation,
    PipelineOptions,
    PredefinedRule,
    ReadOperation,
    RepeatOperation,
    ReplaceMode,
    ReplaceOperation,
    SubstringEnd,
    SubstringOperation,
    TextGroup,
    ToFile,
    ToJSON,
    TrimMode,
    TrimOperation,
    WriteOperation,
)

StepFields = Mapping[str, object]


@dataclass(frozen=True)
class PipelineSpec:
    """Validated pipeline spec root object."""

    version: int
    keep_only_set: bool
    text_groups: tuple[TextGroup, ...]

    def options(self, continue_on_fail: bool = False) -> PipelineOptions:
        """Build record-level options for this spec."""
        return PipelineOptions(keep_only_set=self.keep_only_set, continue_on_fail=continue_on_fail)


def load_pipeline_spec(spec_path: str) -> PipelineSpec:
    """Load and validate a YAML pipeline spec from disk.

    Args:
        spec_path: File path to YAML pipeline spec.

    Returns:
        Fully validated pipeline spec.

    Raises:
        TextsmithDependencyError: If PyYAML is unavailable.
        PipelineSpecError: If the file is invalid or schema checks fail.
        InvalidOptionError: If an action or read/write type is unknown.
    """
    return parse_pipeline_spec(_load_yaml_payload(spec_path))


def parse_pipeline_spec(payload: object) -> PipelineSpec:
    """Validate an already decoded pipeline spec payload.

    Args:
        payload: Decoded YAML or JSON document.

    Returns:
        Fully validated pipeline spec.

    Raises:
        PipelineSpecError: If schema checks fail.
        InvalidOptionError: If an action or read/write type is unknown.
    """
    root_mapping = expect_mapping(payload, "pipeline spec root")
    validate_keys(root_mapping, {"version", "keep_only_set", "texts"}, "pipeline spec root")
    version = _parse_version(root_mapping)
    keep_only_set = bool_with_default(root_mapping, "keep_only_set", "pipeline spec root", False)
    return PipelineSpec(
        version=version,
        keep_only_set=keep_only_set,
        text_groups=_parse_text_groups(root_mapping),
    )


def _load_yaml_payload(spec_path: str) -> object:
    try:
        import yaml
    except ImportError as error:  # pragma: no cover - dependency failure
        raise TextsmithDependencyError(
            "YAML pipeline spec support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    spec_file = Path(spec_path).expanduser().resolve()
    if not spec_file.exists():
        raise PipelineSpecError(
            f"Pipeline spec file does not exist at {spec_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(spec_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise PipelineSpecError(
            f"Failed to read pipeline spec at {spec_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise PipelineSpecError(
            f"Failed to parse YAML pipeline spec at {spec_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise PipelineSpecError(
            f"Pipeline spec at {spec_file} is empty. Define 'version' and 'texts'."
        )
    return payload


def _parse_version(root_mapping: StepFields) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise PipelineSpecError(
            f"Pipeline spec field 'version' must be an integer. Set version: {PIPELINE_SPEC_VERSION}."
        )
    if raw_version != PIPELINE_SPEC_VERSION:
        raise PipelineSpecError(
            f"Unsupported pipeline spec version {raw_version}. Use version: {PIPELINE_SPEC_VERSION}."
        )
    return raw_version


def _parse_text_groups(root_mapping: StepFields) -> tuple[TextGroup, ...]:
    raw_texts = root_mapping.get("texts")
    if raw_texts is None:
        raise PipelineSpecError(
            "Pipeline spec missing required field 'texts'. Add a list of text groups."
        )
    rows = expect_sequence(raw_texts, "pipeline spec texts")
    return tuple(_parse_text_group(row, index) for index, row in enumerate(rows))


def _parse_text_group(value: object, group_index: int) -> TextGroup:
    context = f"text group #{group_index + 1}"
    group_mapping = expect_mapping(value, context)
    validate_keys(group_mapping, {"sources", "operations"}, context)
    source_rows = expect_sequence(group_mapping.get("sources", []), f"{context} sources")
    operation_rows = expect_sequence(group_mapping.get("operations", []), f"{context} operations")
    sources = tuple(
        _parse_data_source(row, f"{context} source #{index + 1}")
        for index, row in enumerate(source_rows)
    )
    operations = tuple(
        parse_operation(row, f"{context} operation #{index + 1}")
        for index, row in enumerate(operation_rows)
    )
    return TextGroup(sources=sources, operations=operations)


def _parse_data_source(value: object, context: str) -> DataSource:
    source_mapping = expect_mapping(value, context)
    validate_keys(source_mapping, {"read", "write"}, context)
    if "read" not in source_mapping or "write" not in source_mapping:
        raise PipelineSpecError(f"Invalid {context}: both 'read' and 'write' are required.")
    read = _parse_read(expect_mapping(source_mapping["read"], f"{context} read"), context)
    write = _parse_write(expect_mapping(source_mapping["write"], f"{context} write"), context)
    return DataSource(read=read, write=write)


def _parse_read(fields: StepFields, context: str) -> ReadOperation:
    context = f"{context} read"
    read_type = required_string(fields, "type", context)
    if read_type == "fromText":
        validate_keys(fields, {"type", "text"}, context)
        return FromText(text=text_with_default(fields, "text", context, ""))
    if read_type == "fromFile":
        validate_keys(
            fields,
            {"type", "binary_key", "decode_charset", "strip_bom", "prefer_manipulated"},
            context,
        )
        return FromFile(
            binary_key=string_with_default(fields, "binary_key", context, DEFAULT_BINARY_KEY),
            decode_charset=string_with_default(fields, "decode_charset", context, DEFAULT_CHARSET),
            strip_bom=bool_with_default(fields, "strip_bom", context, True),
            prefer_manipulated=bool_with_default(fields, "prefer_manipulated", context, True),
        )
    if read_type == "fromJSON":
        validate_keys(fields, {"type", "path", "prefer_manipulated", "skip_non_string"}, context)
        return FromJSON(
            path=string_with_default(fields, "path", context, DEFAULT_JSON_PATH),
            prefer_manipulated=bool_with_default(fields, "prefer_manipulated", context, True),
            skip_non_string=bool_with_default(fields, "skip_non_string", context, True),
        )
    raise InvalidOptionError(
        f"Unsupported read type '{read_type}' in {context}. "
        f"Use one of: {', '.join(SUPPORTED_READ_OPERATIONS)}."
    )


def _parse_write(fields: StepFields, context: str) -> WriteOperation:
    context = f"{context} write"
    write_type = required_string(fields, "type", context)
    if write_type == "toFile":
        validate_keys(
            fields,
            {"type", "binary_key", "encode_charset", "add_bom", "file_name", "mime_type"},
            context,
        )
        return ToFile(
            binary_key=string_with_default(fields, "binary_key", context, DEFAULT_BINARY_KEY),
            encode_charset=string_with_default(fields, "encode_charset", context, DEFAULT_CHARSET),
            add_bom=bool_with_default(fields, "add_bom", context, False),
            file_name=text_with_default(fields, "file_name", context, ""),
            mime_type=string_with_default(fields, "mime_type", context, DEFAULT_MIME_TYPE),
        )
    if write_type == "toJSON":
        validate_keys(fields, {"type", "path"}, context)
        return ToJSON(path=string_with_default(fields, "path", context, DEFAULT_JSON_PATH))
    raise InvalidOptionError(
        f"Unsupported write type '{write_type}' in {context}. "
        f"Use one of: {', '.join(SUPPORTED_WRITE_OPERATIONS)}."
    )


def parse_operation(value: object, context: str = "operation") -> Operation:
    """Parse one operation step.

    Args:
        value: Step mapping with an ``action`` key and the action's fields.
        context: Location used in error messages.

    Returns:
        Operation model.

    Raises:
        InvalidOptionError: If the action is unknown.
        PipelineSpecError: If a field is unknown or has the wrong type.
    """
    fields = expect_mapping(value, context)
    action = required_string(fields, "action", context)
    entry = _OPERATION_PARSERS.get(action)
    if entry is None:
        raise InvalidOptionError(
            f"Unsupported action '{action}' in {context}. "
            f"Use one of: {', '.join(SUPPORTED_OPERATION_ACTIONS)}."
        )
    allowed_keys, parser = entry
    validate_keys(fields, allowed_keys | {"action"}, context)
    return parser(fields, context)


def _parse_concat(fields: StepFields, context: str) -> Operation:
    return ConcatOperation(
        before=text_with_default(fields, "before", context, ""),
        after=text_with_default(fields, "after", context, ""),
    )


def _parse_decode_encode(fields: StepFields, context: str) -> Operation:
    return DecodeEncodeOperation(
        decode_charset=string_with_default(fields, "decode_charset", context, DEFAULT_CHARSET),
        encode_charset=string_with_default(fields, "encode_charset", context, DEFAULT_CHARSET),
        strip_bom=bool_with_default(fields, "strip_bom", context, True),
        add_bom=bool_with_default(fields, "add_bom", context, False),
    )


def _parse_decode_encode_entities(fields: StepFields, context: str) -> Operation:
    return DecodeEncodeEntitiesOperation(
        decode_with=cast(EntityCodec, string_with_default(fields, "decode_with", context, "nothing")),
        encode_with=cast(EntityCodec, string_with_default(fields, "encode_with", context, "nothing")),
        decode_mode=cast(
            EntityDecodeMode, string_with_default(fields, "decode_mode", context, "legacy")
        ),
        encode_mode=cast(
            EntityEncodeMode, string_with_default(fields, "encode_mode", context, "extensive")
        ),
    )


def _parse_letter_case(fields: StepFields, context: str) -> Operation:
    return LetterCaseOperation(
        case_type=cast(CaseType, string_with_default(fields, "case_type", context, "lowerCase")),
        language=text_with_default(fields, "language", context, "en"),
    )


def _parse_normalize(fields: StepFields, context: str) -> Operation:
    return NormalizeOperation(
        form=cast(NormalizeForm, string_with_default(fields, "form", context, "NFC"))
    )


def _parse_replace(fields: StepFields, context: str) -> Operation:
    return ReplaceOperation(
        replace_mode=cast(
            ReplaceMode, string_with_default(fields, "replace_mode", context, "substring")
        ),
        substring=text_with_default(fields, "substring", context, ""),
        replace_all=bool_with_default(fields, "replace_all", context, True),
        regex=text_with_default(fields, "regex", context, ""),
        pattern=text_with_default(fields, "pattern", context, ""),
        rule=cast(PredefinedRule, string_with_default(fields, "rule", context, "tags")),
        only_recognised_html=bool_with_default(fields, "only_recognised_html", context, False),
        character_groups=_parse_character_groups(fields, context),
        value=text_with_default(fields, "value", context, ""),
        extended=bool_with_default(fields, "extended", context, False),
    )


def _parse_character_groups(fields: StepFields, context: str) -> CharacterGroups:
    raw_groups = fields.get("character_groups")
    if raw_groups is None:
        return CharacterGroups()
    group_context = f"{context} character_groups"
    groups_mapping = expect_mapping(raw_groups, group_context)
    group_names = {"newline", "number", "alpha", "whitespace"}
    validate_keys(groups_mapping, group_names, group_context)
    parsed = {
        name: _parse_character_group(groups_mapping[name], f"{group_context} {name}")
        for name in group_names
        if name in groups_mapping
    }
    return CharacterGroups(**parsed)


def _parse_character_group(value: object, context: str) -> CharacterGroup:
    if isinstance(value, bool):
        return CharacterGroup(enabled=value)
    group_mapping = expect_mapping(value, context)
    validate_keys(group_mapping, {"enabled", "min", "max"}, context)
    return CharacterGroup(
        enabled=bool_with_default(group_mapping, "enabled", context, True),
        min=int_with_default(group_mapping, "min", context, 1),
        max=int_with_default(group_mapping, "max", context, 0),
    )


def _parse_trim(fields: StepFields, context: str) -> Operation:
    return TrimOperation(
        trim=cast(TrimMode, string_with_default(fields, "trim", context, "trimBoth")),
        trim_string=text_with_default(fields, "trim_string", context, DEFAULT_TRIM_STRING),
        trim_string_unit=bool_with_default(fields, "trim_string_unit", context, True),
    )


def _parse_pad(fields: StepFields, context: str) -> Operation:
    return PadOperation(
        pad=cast(PadMode, string_with_default(fields, "pad", context, "padStart")),
        target_length=int_with_default(fields, "target_length", context, 1),
        pad_string=text_with_default(fields, "pad_string", context, DEFAULT_PAD_STRING),
    )


def _parse_substring(fields: StepFields, context: str) -> Operation:
    return SubstringOperation(
        start_position=int_with_default(fields, "start_position", context, 0),
        end=cast(SubstringEnd, string_with_default(fields, "end", context, "complete")),
        end_position=int_with_default(fields, "end_position", context, 1),
        end_length=int_with_default(fields, "end_length", context, 1),
    )


def _parse_repeat(fields: StepFields, context: str) -> Operation:
    return RepeatOperation(times=int_with_default(fields, "times", context, 1))


_OPERATION_PARSERS: dict[str, tuple[set[str], Callable[[StepFields, str], Operation]]] = {
    "concat": ({"before", "after"}, _parse_concat),
    "decodeEncode": (
        {"decode_charset", "encode_charset", "strip_bom", "add_bom"},
        _parse_decode_encode,
    ),
    "decodeEncodeEntities": (
        {"decode_with", "encode_with", "decode_mode", "encode_mode"},
        _parse_decode_encode_entities,
    ),
    "letterCase": ({"case_type", "language"}, _parse_letter_case),
    "normalize": ({"form"}, _parse_normalize),
    "replace": (
        {
            "replace_mode",
            "substring",
            "replace_all",
            "regex",
            "pattern",
            "rule",
            "only_recognised_html",
            "character_groups",
            "value",
            "extended",
        },
        _parse_replace,
    ),
    "trim": ({"trim", "trim_string", "trim_string_unit"}, _parse_trim),
    "pad": ({"pad", "target_length", "pad_string"}, _parse_pad),
    "substring": ({"start_position", "end", "end_position", "end_length"}, _parse_substring),
    "repeat": ({"times"}, _parse_repeat),
}
