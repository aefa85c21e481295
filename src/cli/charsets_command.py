"""Charset listing CLI command wiring.

This module registers the charsets subcommand that prints every charset
name accepted by decode and encode settings.
"""

from __future__ import annotations

import argparse
from typing import Any

from transforms.charset_registry import is_bom_aware, list_charsets


def add_charsets_command(subparsers: Any) -> None:
    """Register charsets subcommand."""
    parser = subparsers.add_parser("charsets", help="List supported charsets")
    parser.add_argument(
        "--bom-aware",
        action="store_true",
        help="Only list charsets that support byte-order marks",
    )


def run_charsets_command(args: argparse.Namespace) -> int:
    """Handle charsets command invocation."""
    for charset in sorted(list_charsets()):
        if args.bom_aware and not is_bom_aware(charset):
            continue
        print(charset)
    return 0
