"""Textsmith CLI entry points.
This module exposes commands for running pipeline specs over JSONL records.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.charsets_command import add_charsets_command, run_charsets_command
from core.config import TextsmithConfig
from core.errors import TextsmithError
from ingest.pipeline_sdk import TextsmithClient
from store.record_payload import write_results_file, write_results_jsonl


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="textsmith", description="Textsmith text pipeline CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_run_command(subparsers)
    add_charsets_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Textsmith CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "run":
            return _run_pipeline_command(args)
        if args.command == "charsets":
            return run_charsets_command(args)
    except TextsmithError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(continue_on_fail: bool) -> TextsmithClient:
    """Build SDK client with optional continue-on-fail override."""
    config = TextsmithConfig.from_env()
    if continue_on_fail:
        config = replace(config, continue_on_fail=True)
    return TextsmithClient(config)


def _run_pipeline_command(args: argparse.Namespace) -> int:
    """Handle run command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code, 1 when any record failed.
    """
    client = _build_client(args.continue_on_fail)
    results = client.run(args.spec_file, args.input)
    if args.output:
        write_results_file(results, Path(args.output).expanduser())
    else:
        write_results_jsonl(results, sys.stdout)
    return 0 if all(result.succeeded for result in results) else 1


def _add_run_command(subparsers: Any) -> None:
    """Register run subcommand."""
    parser = subparsers.add_parser("run", help="Run a YAML pipeline spec over JSONL records")
    parser.add_argument("spec_file", help="Path to YAML pipeline spec file")
    parser.add_argument("input", help="JSONL file, directory, or s3://bucket/prefix")
    parser.add_argument("--output", help="Output JSONL path; defaults to stdout")
    parser.add_argument(
        "--continue-on-fail",
        action="store_true",
        help="Emit failed records as error rows and keep processing",
    )
