"""Common CLI argument registration helpers."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_root_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        type=str,
        help="Project root holding partscan.yaml or .partscan/ (default: current directory)",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add --json and --root."""
    add_json_flag(parser)
    add_root_flag(parser)


__all__ = ["add_json_flag", "add_root_flag", "add_standard_flags"]
