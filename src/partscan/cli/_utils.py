"""Shared CLI utilities."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Optional

from partscan.core.discovery import resolve_module
from partscan.core.exceptions import InvalidArgumentError


def get_root(args: argparse.Namespace) -> Optional[Path]:
    raw = getattr(args, "root", None)
    return Path(raw).expanduser().resolve() if raw else None


def load_target(spec: str) -> Any:
    """Resolve ``package.module:ClassName`` (nested names allowed after the colon)."""
    module_name, sep, qualname = spec.partition(":")
    if not sep or not module_name or not qualname:
        raise InvalidArgumentError(f"Expected MODULE:CLASS, got '{spec}'.")
    target: Any = resolve_module(module_name)
    for name in qualname.split("."):
        try:
            target = getattr(target, name)
        except AttributeError as exc:
            raise InvalidArgumentError(f"'{module_name}' has no attribute '{qualname}'.") from exc
    return target


__all__ = ["get_root", "load_target"]
