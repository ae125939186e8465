"""partscan command-line interface.

Commands live in ``partscan.cli.commands``; each module exposes ``SUMMARY``,
``register_args(parser)`` and ``main(args) -> int`` and is picked up by the
dispatcher automatically.
"""
from __future__ import annotations

from ._args import add_json_flag, add_root_flag, add_standard_flags
from ._output import OutputFormatter, format_json
from ._utils import get_root, load_target

__all__ = [
    "OutputFormatter",
    "format_json",
    "add_json_flag",
    "add_root_flag",
    "add_standard_flags",
    "get_root",
    "load_target",
]
