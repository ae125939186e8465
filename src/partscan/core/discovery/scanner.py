"""Module-level part scanning.

Enumerates the public classes a module defines, drops classes marked
``PartNotDiscoverable`` and runs part discovery on the rest, optionally on
a thread pool. Discovery of one class never depends on another, so the
only policy question is what to do when a class fails.
"""
from __future__ import annotations

import importlib
import inspect
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from types import ModuleType
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Tuple, Union

from partscan.core.exceptions import InvalidArgumentError, PartDiscoveryError
from partscan.core.model import ComposablePartDefinition, DiscoveryResult, Failed
from partscan.core.typeinfo import describe_type

if TYPE_CHECKING:
    from .assembler import PartDiscovery

logger = logging.getLogger(__name__)


class ErrorPolicy(str, Enum):
    """What scanning does when discovery of one class fails."""

    RAISE = "raise"
    SKIP = "skip"


@dataclass(frozen=True)
class ScanFailure:
    part_type: Any
    error: PartDiscoveryError

    def to_dict(self) -> dict:
        return {"type": describe_type(self.part_type), "error": self.error.to_json_error()}


@dataclass(frozen=True)
class ScanReport:
    """Full outcome of scanning one module."""

    module: str
    parts: Tuple[ComposablePartDefinition, ...] = ()
    failures: Tuple[ScanFailure, ...] = ()
    skipped: Tuple[Any, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "module": self.module,
            "parts": [part.to_dict() for part in self.parts],
            "failures": [failure.to_dict() for failure in self.failures],
            "skipped": [describe_type(t) for t in self.skipped],
        }


def resolve_module(module: Union[ModuleType, str, None]) -> ModuleType:
    """Return ``module`` itself, or import it by dotted name."""
    if module is None:
        raise InvalidArgumentError("module is required.")
    if isinstance(module, ModuleType):
        return module
    if isinstance(module, str):
        try:
            return importlib.import_module(module)
        except ImportError as exc:
            raise InvalidArgumentError(f"Cannot import module '{module}': {exc}") from exc
    raise InvalidArgumentError(f"Expected a module or module name, got {module!r}.")


def _nested_types(cls: type) -> Iterator[type]:
    for name, value in vars(cls).items():
        if not inspect.isclass(value) or name.startswith("_"):
            continue
        # Skip aliases of classes defined elsewhere.
        if value.__qualname__ != f"{cls.__qualname__}.{name}":
            continue
        yield value
        yield from _nested_types(value)


def iter_candidate_types(module: ModuleType) -> List[type]:
    """Public classes defined by ``module``, limited to ``__all__`` when present.

    Public classes nested inside a candidate follow it in the result.
    """
    exported = getattr(module, "__all__", None)
    candidates: List[type] = []
    for name, value in vars(module).items():
        if not inspect.isclass(value) or value.__module__ != module.__name__:
            continue
        if name.startswith("_") or (exported is not None and name not in exported):
            continue
        candidates.append(value)
        candidates.extend(_nested_types(value))
    return candidates


def _discover_all(
    discovery: "PartDiscovery",
    types: List[type],
    max_workers: Optional[int],
) -> List[DiscoveryResult]:
    if max_workers and max_workers > 1 and len(types) > 1:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="partscan") as pool:
            return list(pool.map(discovery.discover, types))
    return [discovery.discover(t) for t in types]


def scan_module(
    discovery: "PartDiscovery",
    module: Union[ModuleType, str],
    *,
    on_error: Union[ErrorPolicy, str] = ErrorPolicy.RAISE,
    max_workers: Optional[int] = None,
) -> ScanReport:
    """Run ``discovery`` over every candidate class of ``module``.

    Raises:
        PartDiscoveryError: the first failure in module order, when
            ``on_error`` is :attr:`ErrorPolicy.RAISE`.
    """
    on_error = ErrorPolicy(on_error)
    resolved = resolve_module(module)
    types = iter_candidate_types(resolved)
    skipped = tuple(t for t in types if not discovery.is_discoverable(t))
    candidates = [t for t in types if t not in skipped]

    parts: List[ComposablePartDefinition] = []
    failures: List[ScanFailure] = []
    for result in _discover_all(discovery, candidates, max_workers):
        if isinstance(result, Failed):
            if on_error is ErrorPolicy.RAISE:
                raise result.error
            logger.warning("Skipping %s: %s", describe_type(result.part_type), result.error)
            failures.append(ScanFailure(result.part_type, result.error))
        elif result.definition is not None:
            parts.append(result.definition)

    logger.debug(
        "Scanned %s: %d part(s), %d failure(s), %d not discoverable",
        resolved.__name__,
        len(parts),
        len(failures),
        len(skipped),
    )
    return ScanReport(resolved.__name__, tuple(parts), tuple(failures), skipped)


__all__ = [
    "ErrorPolicy",
    "ScanFailure",
    "ScanReport",
    "resolve_module",
    "iter_candidate_types",
    "scan_module",
]
