"""Runtime configuration model for Textsmith.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import DEFAULT_MIME_TYPE
from core.errors import TextsmithConfigError

_TRUE_WORDS = ("1", "true", "yes", "on")
_FALSE_WORDS = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class TextsmithConfig:
    """Validated runtime configuration.

    Attributes:
        continue_on_fail: Keep processing remaining records after a failure.
        default_mime_type: MIME type used when a file destination sets none.
        s3_region: Optional default AWS region for S3 record sources.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    continue_on_fail: bool
    default_mime_type: str
    s3_region: str | None = None
    s3_profile: str | None = None

    @classmethod
    def from_env(cls) -> "TextsmithConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            TextsmithConfigError: If environment values are invalid.
        """
        continue_on_fail_value = os.getenv("TEXTSMITH_CONTINUE_ON_FAIL", "false")
        default_mime_type = os.getenv("TEXTSMITH_DEFAULT_MIME_TYPE", DEFAULT_MIME_TYPE).strip()
        s3_region = os.getenv("TEXTSMITH_S3_REGION")
        s3_profile = os.getenv("TEXTSMITH_S3_PROFILE")
        return cls(
            continue_on_fail=_parse_bool(continue_on_fail_value, "TEXTSMITH_CONTINUE_ON_FAIL"),
            default_mime_type=default_mime_type or DEFAULT_MIME_TYPE,
            s3_region=s3_region,
            s3_profile=s3_profile,
        )


def _parse_bool(raw_value: str, variable_name: str) -> bool:
    """Parse a boolean environment value.

    Args:
        raw_value: Raw string from environment.
        variable_name: Variable name used in error messages.

    Returns:
        Parsed boolean.

    Raises:
        TextsmithConfigError: If value is not a recognised boolean word.
    """
    normalized_value = raw_value.strip().lower()
    if normalized_value in _TRUE_WORDS:
        return True
    if normalized_value in _FALSE_WORDS:
        return False
    raise TextsmithConfigError(
        f"Invalid {variable_name} value: "
        f"expected a boolean, got '{raw_value}'. "
        f"Set {variable_name} to true or false."
    )
