"""
Auto-discovery CLI dispatcher for partscan.

Every non-private module under ``partscan.cli.commands`` becomes a
subcommand. Adding a command = adding a .py file with ``SUMMARY``,
``register_args`` and ``main``.
"""
from __future__ import annotations

import argparse
import importlib
import pkgutil
import sys
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Dict, List, Optional

from partscan.cli._utils import get_root
from partscan.core.config import LoggingConfig
from partscan.core.exceptions import PartscanError
from partscan.core.stdlib_logging import configure_logging

COMMANDS_PACKAGE = "partscan.cli.commands"


def _get_version() -> str:
    from partscan import __version__

    return __version__


@lru_cache(maxsize=1)
def discover_commands() -> Dict[str, Dict[str, Any]]:
    """Import every command module and collect its entry points."""
    package = importlib.import_module(COMMANDS_PACKAGE)
    commands: Dict[str, Dict[str, Any]] = {}
    for info in pkgutil.iter_modules(package.__path__):
        if info.name.startswith("_"):
            continue
        module = importlib.import_module(f"{COMMANDS_PACKAGE}.{info.name}")
        main = getattr(module, "main", None)
        if main is None:
            continue
        commands[info.name] = {
            "summary": getattr(module, "SUMMARY", ""),
            "register_args": getattr(module, "register_args", None),
            "main": main,
        }
    return commands


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="partscan",
        description="Discover composable parts declared with partscan markers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log discovery details to stderr (overrides the configured level)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )
    for name, info in sorted(discover_commands().items()):
        cmd_parser = subparsers.add_parser(name.replace("_", "-"), help=info["summary"])
        if info["register_args"]:
            info["register_args"](cmd_parser)
        cmd_parser.set_defaults(_func=info["main"])
    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    cfg = LoggingConfig(get_root(args))
    level = "DEBUG" if args.verbose else cfg.level
    configure_logging(level=level, log_path=cfg.path)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the partscan CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    func: Optional[Callable[[argparse.Namespace], int]] = getattr(args, "_func", None)
    if func is None:
        parser.print_help()
        return 0

    try:
        _configure_logging(args)
    except PartscanError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    try:
        return func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
