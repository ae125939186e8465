"""
partscan scan command.

SUMMARY: Discover every part a module defines

Imports MODULE, runs attributed part discovery over each public class it
defines and prints the resulting part definitions. Failures either abort
the scan or are reported alongside the parts, depending on --on-error.
"""
from __future__ import annotations

import argparse

from partscan.cli import OutputFormatter, add_standard_flags, get_root
from partscan.core.config import DiscoveryConfig
from partscan.core.discovery import AttributedPartDiscovery, ErrorPolicy
from partscan.core.exceptions import PartscanError
from partscan.core.typeinfo import describe_type

SUMMARY = "Discover every part a module defines"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("module", help="Dotted name of the module to scan (e.g. 'myapp.parts')")
    parser.add_argument(
        "--on-error",
        choices=[policy.value for policy in ErrorPolicy],
        default=None,
        help="Abort on the first failing class, or skip it and keep scanning (default: from config)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Discover classes on this many threads (default: from config)",
    )
    add_standard_flags(parser)


def _print_report(formatter: OutputFormatter, report) -> None:
    formatter.text(f"Module: {report.module}")
    formatter.text(f"Parts: {len(report.parts)}")
    for part in report.parts:
        shared = " (shared)" if part.is_shared else ""
        formatter.text(f"  {describe_type(part.type)}{shared}")
        for export in part.export_definitions:
            formatter.text(f"    export {export.contract}")
        for imp in part.iter_imports():
            formatter.text(f"    import {imp.contract} [{imp.cardinality.value}]")
    if report.failures:
        formatter.text(f"Failures: {len(report.failures)}")
        for failure in report.failures:
            formatter.text(f"  {describe_type(failure.part_type)}: {failure.error}")
    if report.skipped:
        formatter.text(f"Not discoverable: {', '.join(describe_type(t) for t in report.skipped)}")


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    try:
        config = DiscoveryConfig(get_root(args))
        discovery = AttributedPartDiscovery.from_config(config)
        report = discovery.scan(args.module, on_error=args.on_error, max_workers=args.workers)
    except PartscanError as exc:
        formatter.error(exc)
        return 1

    if formatter.json_mode:
        formatter.json_output(report.to_dict())
    else:
        _print_report(formatter, report)
    return 0 if report.ok else 1
