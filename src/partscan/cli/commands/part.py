"""
partscan part command.

SUMMARY: Show the part definition of one class

Resolves MODULE:CLASS and prints its part definition, or reports that the
class exports nothing and therefore is not a part.
"""
from __future__ import annotations

import argparse

from partscan.cli import OutputFormatter, add_standard_flags, load_target
from partscan.core.discovery import AttributedPartDiscovery
from partscan.core.exceptions import PartscanError
from partscan.core.model import Failed
from partscan.core.typeinfo import describe_type

SUMMARY = "Show the part definition of one class"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("target", help="Class to inspect as MODULE:CLASS (e.g. 'myapp.parts:Mailer')")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    try:
        part_type = load_target(args.target)
        result = AttributedPartDiscovery().discover(part_type)
    except PartscanError as exc:
        formatter.error(exc)
        return 1

    if isinstance(result, Failed):
        formatter.error(result.error)
        return 1

    definition = result.definition
    if formatter.json_mode:
        formatter.json_output(
            {
                "type": describe_type(part_type),
                "part": definition.to_dict() if definition is not None else None,
            }
        )
        return 0

    if definition is None:
        formatter.text(f"{describe_type(part_type)} is not a part (it declares no exports).")
        return 0

    formatter.text(f"Part: {describe_type(part_type)}")
    formatter.text_kv("shared", definition.is_shared)
    if definition.sharing_boundary:
        formatter.text_kv("sharing boundary", definition.sharing_boundary)
    for export in definition.export_definitions:
        formatter.text_kv("export", export.contract)
        for key, value in export.metadata.items():
            formatter.text_kv(key, value, prefix="      ")
    for imp in definition.iter_imports():
        formatter.text_kv("import", f"{imp.contract} [{imp.cardinality.value}]")
    if definition.on_imports_satisfied is not None:
        formatter.text_kv("on imports satisfied", definition.on_imports_satisfied.__name__)
    return 0
