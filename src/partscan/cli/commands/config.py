"""
partscan config command.

SUMMARY: Show the merged configuration

Displays the configuration built from bundled defaults, project overrides
and PARTSCAN_* environment variables. A dotted KEY narrows the output.
"""
from __future__ import annotations

import argparse

import yaml

from partscan.cli import OutputFormatter, add_standard_flags, get_root
from partscan.core.config import ConfigManager
from partscan.core.exceptions import PartscanError

SUMMARY = "Show the merged configuration"


def _nest_key(key: str, value):
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    out = value
    for part in reversed([p for p in key.split(".") if p]):
        out = {part: out}
    return out


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'discovery.onError')",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    try:
        manager = ConfigManager(get_root(args))
        cfg = manager.load_config()
    except PartscanError as exc:
        formatter.error(exc)
        return 1

    data = cfg
    if args.key:
        node = cfg
        for part in args.key.split("."):
            if not isinstance(node, dict) or part not in node:
                formatter.error(KeyError(args.key), f"Unknown configuration key: {args.key}")
                return 1
            node = node[part]
        data = _nest_key(args.key, node)

    if formatter.json_mode:
        formatter.json_output(data)
    else:
        formatter.text(yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip())
    return 0
