"""Operation engine for text manipulation chains.

This module applies one configured operation to a text value and folds an
ordered operation list over a value. It dispatches over the closed set of
operation variants and holds no state between calls.
"""

from __future__ import annotations

import unicodedata
from typing import Iterable

from core.constants import (
    SUPPORTED_NORMALIZE_FORMS,
    SUPPORTED_OPERATION_ACTIONS,
    SUPPORTED_PAD_MODES,
    SUPPORTED_SUBSTRING_ENDS,
    SUPPORTED_TRIM_MODES,
)
from core.errors import InvalidOptionError, InvalidParameterError
from core.types import (
    ConcatOperation,
    DecodeEncodeEntitiesOperation,
    DecodeEncodeOperation,
    LetterCaseOperation,
    NormalizeOperation,
    Operation,
    PadOperation,
    RepeatOperation,
    ReplaceOperation,
    SubstringOperation,
    TrimOperation,
)
from transforms import charset_registry
from transforms.entity_codecs import decode_entities, encode_entities, normalize_entity_codec
from transforms.letter_case import change_case
from transforms.replace_rules import replace_text
from transforms.text_primitives import (
    pad_end,
    pad_start,
    trim_chars_both,
    trim_chars_end,
    trim_chars_start,
    trim_unit_both,
    trim_unit_end,
    trim_unit_start,
)


def apply_operations(text: str, operations: Iterable[Operation]) -> str:
    """Fold an ordered operation list over a text value.

    Args:
        text: Initial text value.
        operations: Operations in application order.

    Returns:
        Final text value.
    """
    for operation in operations:
        text = apply_operation(text, operation)
    return text


def apply_operation(text: str, operation: Operation) -> str:
    """Apply one operation to a text value.

    Args:
        text: Current text value.
        operation: Operation variant to apply.

    Returns:
        Next text value.

    Raises:
        InvalidOptionError: If an enumerated option is outside its set.
        InvalidParameterError: If a numeric parameter is out of range.
        CharsetError: If a byte round-trip or URL escape fails.
    """
    if isinstance(operation, ConcatOperation):
        return (operation.before or "") + text + (operation.after or "")
    if isinstance(operation, DecodeEncodeOperation):
        return _decode_encode(text, operation)
    if isinstance(operation, DecodeEncodeEntitiesOperation):
        return _decode_encode_entities(text, operation)
    if isinstance(operation, LetterCaseOperation):
        return change_case(text, operation.case_type, operation.language)
    if isinstance(operation, NormalizeOperation):
        return _normalize(text, operation)
    if isinstance(operation, ReplaceOperation):
        return replace_text(text, operation)
    if isinstance(operation, TrimOperation):
        return _trim(text, operation)
    if isinstance(operation, PadOperation):
        return _pad(text, operation)
    if isinstance(operation, SubstringOperation):
        return _substring(text, operation)
    if isinstance(operation, RepeatOperation):
        return _repeat(text, operation)
    raise InvalidOptionError(
        f"Unsupported operation {type(operation).__name__}. "
        f"Supported actions: {', '.join(SUPPORTED_OPERATION_ACTIONS)}."
    )


def _decode_encode(text: str, operation: DecodeEncodeOperation) -> str:
    if operation.decode_charset == operation.encode_charset:
        return text
    decode_charset = charset_registry.resolve_charset(operation.decode_charset)
    encode_charset = charset_registry.resolve_charset(operation.encode_charset)
    if decode_charset == encode_charset:
        return text
    decoded = charset_registry.decode(
        text.encode("utf-8", errors="surrogatepass"),
        decode_charset,
        strip_bom=operation.strip_bom,
    )
    encoded = charset_registry.encode(decoded, encode_charset, add_bom=operation.add_bom)
    return encoded.decode("utf-8", errors="replace")


def _decode_encode_entities(text: str, operation: DecodeEncodeEntitiesOperation) -> str:
    if operation.decode_with == operation.encode_with:
        return text
    decode_with = normalize_entity_codec(operation.decode_with)
    encode_with = normalize_entity_codec(operation.encode_with)
    if decode_with == encode_with:
        return text
    decoded = decode_entities(text, decode_with, operation.decode_mode)
    return encode_entities(decoded, encode_with, operation.encode_mode)


def _normalize(text: str, operation: NormalizeOperation) -> str:
    if operation.form not in SUPPORTED_NORMALIZE_FORMS:
        raise InvalidOptionError(
            f"Unsupported normalization form '{operation.form}'. "
            f"Choose one of: {', '.join(SUPPORTED_NORMALIZE_FORMS)}."
        )
    return unicodedata.normalize(operation.form, text)


def _trim(text: str, operation: TrimOperation) -> str:
    trim_string = operation.trim_string or ""
    if operation.trim == "trimBoth":
        trim_function = trim_unit_both if operation.trim_string_unit else trim_chars_both
    elif operation.trim == "trimStart":
        trim_function = trim_unit_start if operation.trim_string_unit else trim_chars_start
    elif operation.trim == "trimEnd":
        trim_function = trim_unit_end if operation.trim_string_unit else trim_chars_end
    else:
        raise InvalidOptionError(
            f"Unsupported trim mode '{operation.trim}'. "
            f"Choose one of: {', '.join(SUPPORTED_TRIM_MODES)}."
        )
    return trim_function(text, trim_string)


def _pad(text: str, operation: PadOperation) -> str:
    _require_non_negative(operation.target_length, "Target Length")
    if operation.pad == "padStart":
        pad_function = pad_start
    elif operation.pad == "padEnd":
        pad_function = pad_end
    else:
        raise InvalidOptionError(
            f"Unsupported pad mode '{operation.pad}'. "
            f"Choose one of: {', '.join(SUPPORTED_PAD_MODES)}."
        )
    try:
        return pad_function(text, operation.target_length, operation.pad_string or "")
    except (OverflowError, MemoryError) as error:
        raise InvalidParameterError(
            f"The Target Length {operation.target_length} is too large to pad to."
        ) from error


def _substring(text: str, operation: SubstringOperation) -> str:
    start = operation.start_position or 0
    if operation.end == "complete":
        return text[start:]
    if operation.end == "position":
        return text[start:operation.end_position]
    if operation.end == "length":
        _require_non_negative(operation.end_length, "Length")
        if start < 0:
            begin = max(len(text) + start, 0)
            stop = max(len(text) + start + operation.end_length, 0)
            return text[begin:stop]
        return text[start:start + operation.end_length]
    raise InvalidOptionError(
        f"Unsupported substring end '{operation.end}'. "
        f"Choose one of: {', '.join(SUPPORTED_SUBSTRING_ENDS)}."
    )


def _repeat(text: str, operation: RepeatOperation) -> str:
    _require_non_negative(operation.times, "Times")
    try:
        return text * operation.times
    except (OverflowError, MemoryError) as error:
        raise InvalidParameterError(
            f"The Times {operation.times} is too large to repeat the text."
        ) from error


def _require_non_negative(value: int | None, label: str) -> None:
    if value is None or value < 0:
        raise InvalidParameterError(f"The {label} has to be set to at least 0 or higher!")
