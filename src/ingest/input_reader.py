"""Input record readers.

This module loads JSONL input records from local paths or S3 prefixes.
It normalizes every line into a typed input record for the pipeline.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from core.config import TextsmithConfig
from core.constants import SUPPORTED_RECORD_EXTENSIONS
from core.errors import RecordReadError, TextsmithDependencyError
from core.s3_uri import S3Location, parse_s3_uri
from core.types import InputRecord
from store.record_payload import input_record_from_payload


def read_input_records(input_uri: str, config: TextsmithConfig) -> list[InputRecord]:
    """Load input records from local files or S3.

    Args:
        input_uri: Local JSONL file, directory, or ``s3://`` URI.
        config: Runtime configuration for S3 session defaults.

    Returns:
        Ordered list of input records.

    Raises:
        RecordReadError: If the input cannot be read or parsed.
    """
    if input_uri.startswith("s3://"):
        return _read_s3_records(input_uri, config)
    return _read_local_records(Path(input_uri).expanduser())


def parse_jsonl_records(body: str, source_label: str) -> list[InputRecord]:
    """Parse JSONL text into input records.

    Blank lines are ignored.

    Args:
        body: JSONL text.
        source_label: File or object location used in error messages.

    Returns:
        Parsed records in line order.

    Raises:
        RecordReadError: If a line is not valid JSON or not a record object.
    """
    records: list[InputRecord] = []
    for line_number, line in enumerate(body.splitlines(), 1):
        if not line.strip():
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as error:
            raise RecordReadError(
                f"Failed to parse JSONL record at {source_label}:{line_number}: "
                f"{error.msg}. Fix the JSON syntax and retry."
            ) from error
        records.append(input_record_from_payload(payload, f"{source_label}:{line_number}"))
    return records


def _read_local_records(input_path: Path) -> list[InputRecord]:
    if not input_path.exists():
        raise RecordReadError(
            f"Failed to read input at {input_path}: path does not exist. "
            "Provide an existing JSONL file or directory."
        )
    if input_path.is_file():
        return _read_file_records(input_path)
    records: list[InputRecord] = []
    matched_files = 0
    for file_path in sorted(input_path.rglob("*")):
        if file_path.is_file() and _is_supported_name(file_path.name):
            matched_files += 1
            records.extend(_read_file_records(file_path))
    if not matched_files:
        raise RecordReadError(
            f"No JSONL files found under {input_path}. "
            f"Supported extensions: {SUPPORTED_RECORD_EXTENSIONS}."
        )
    return records


def _read_file_records(file_path: Path) -> list[InputRecord]:
    try:
        body = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise RecordReadError(f"Failed to read input file {file_path}: {error}.") from error
    return parse_jsonl_records(body, str(file_path))


def _read_s3_records(input_uri: str, config: TextsmithConfig) -> list[InputRecord]:
    """Read records from JSONL objects under an S3 prefix.

    Raises:
        RecordReadError: If no JSONL objects exist under the prefix.
    """
    location = parse_s3_uri(input_uri)
    s3_client = _create_s3_client(config)
    object_keys = _list_s3_keys(s3_client, location)
    if not object_keys:
        raise RecordReadError(
            f"No JSONL objects found for {input_uri}. Upload .jsonl files and retry."
        )
    return _download_s3_records(s3_client, location.bucket, object_keys)


def _create_s3_client(config: TextsmithConfig) -> Any:
    """Create a boto3 S3 client.

    Raises:
        TextsmithDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise TextsmithDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to read s3:// inputs."
        ) from error
    session = boto3.session.Session(**_build_boto3_session_kwargs(config))
    return session.client("s3")


def _build_boto3_session_kwargs(config: TextsmithConfig) -> dict[str, str]:
    kwargs: dict[str, str] = {}
    if config.s3_profile:
        kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        kwargs["region_name"] = config.s3_region
    return kwargs


def _list_s3_keys(s3_client: Any, location: S3Location) -> list[str]:
    paginator = s3_client.get_paginator("list_objects_v2")
    pages = paginator.paginate(Bucket=location.bucket, Prefix=location.prefix)
    keys: list[str] = []
    for page in pages:
        for obj in page.get("Contents", []):
            key = obj["Key"]
            if _is_supported_name(key):
                keys.append(key)
    return sorted(keys)


def _download_s3_records(
    s3_client: Any,
    bucket: str,
    object_keys: Iterable[str],
) -> list[InputRecord]:
    records: list[InputRecord] = []
    for key in object_keys:
        source_uri = f"s3://{bucket}/{key}"
        raw_body = s3_client.get_object(Bucket=bucket, Key=key)["Body"].read()
        try:
            body = raw_body.decode("utf-8")
        except UnicodeDecodeError as error:
            raise RecordReadError(f"Object {source_uri} is not valid UTF-8.") from error
        records.extend(parse_jsonl_records(body, source_uri))
    return records


def _is_supported_name(name: str) -> bool:
    return Path(name).suffix.lower() in SUPPORTED_RECORD_EXTENSIONS
