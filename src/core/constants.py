"""Core constants used across Textsmith modules.

This module centralizes defaults and the closed option sets of every
operation kind. Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_CHARSET = "utf8"
DEFAULT_MIME_TYPE = "text/plain"
DEFAULT_BINARY_KEY = "data"
DEFAULT_JSON_PATH = "data"
DEFAULT_TRIM_STRING = " "
DEFAULT_PAD_STRING = " "
PIPELINE_SPEC_VERSION = 1
SUPPORTED_RECORD_EXTENSIONS = (".jsonl",)

BOM_CHARACTER = "\ufeff"
BOM_AWARE_CHARSETS = (
    "utf_8",
    "utf_16",
    "utf_16_le",
    "utf_16_be",
    "utf_32",
    "utf_32_le",
    "utf_32_be",
)

SUPPORTED_OPERATION_ACTIONS = (
    "concat",
    "decodeEncode",
    "decodeEncodeEntities",
    "letterCase",
    "normalize",
    "replace",
    "trim",
    "pad",
    "substring",
    "repeat",
)
SUPPORTED_READ_OPERATIONS = ("fromText", "fromFile", "fromJSON")
SUPPORTED_WRITE_OPERATIONS = ("toFile", "toJSON")

SUPPORTED_ENTITY_CODECS = ("nothing", "url", "urlComponent", "xml", "html")
ENTITY_CODEC_ALIASES = {"none": "nothing"}
SUPPORTED_ENTITY_DECODE_MODES = ("legacy", "strict")
SUPPORTED_ENTITY_ENCODE_MODES = ("extensive", "utf8", "nonAscii")
ENTITY_ENCODE_MODE_ALIASES = {"escapeUTF8": "utf8"}

SUPPORTED_CASE_TYPES = (
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
)
SUPPORTED_NORMALIZE_FORMS = ("NFC", "NFD", "NFKC", "NFKD")
SUPPORTED_REPLACE_MODES = ("substring", "extendedSubstring", "regex", "predefinedRule")
SUPPORTED_PREDEFINED_RULES = ("tags", "characterGroups")
SUPPORTED_TRIM_MODES = ("trimBoth", "trimStart", "trimEnd")
SUPPORTED_PAD_MODES = ("padStart", "padEnd")
SUPPORTED_SUBSTRING_ENDS = ("complete", "position", "length")

REGEX_LITERAL_FLAGS = "gimusy"
