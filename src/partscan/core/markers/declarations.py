"""Declarative markers recognised by attributed part discovery."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .base import Marker


@dataclass(frozen=True)
class Export(Marker):
    """Declare that a class or member provides a contract.

    ``Export(IFoo)`` is accepted as a shorthand for ``Export(contract_type=IFoo)``.
    """

    contract_name: Optional[str] = None
    contract_type: Optional[Any] = None

    def __post_init__(self) -> None:
        name = self.contract_name
        if name is not None and not isinstance(name, str):
            if self.contract_type is not None:
                raise TypeError("Export contract_name must be a string")
            object.__setattr__(self, "contract_name", None)
            object.__setattr__(self, "contract_type", name)


@dataclass(frozen=True)
class ExportMetadata(Marker):
    """Attach one metadata key/value pair to the exports of a site."""

    name: str
    value: Any = None


@dataclass(frozen=True)
class Import(Marker):
    """Require exactly one export (or at most one with ``allow_default``)."""

    contract_name: Optional[str] = None
    allow_default: bool = False


@dataclass(frozen=True)
class ImportMany(Marker):
    """Require zero or more exports, delivered as a collection."""

    contract_name: Optional[str] = None


@dataclass(frozen=True)
class ImportingConstructor(Marker):
    """Select the constructor used to inject imports."""


@dataclass(frozen=True)
class ImportMetadataConstraint(Marker):
    """Only accept exports whose metadata has ``name`` equal to ``value``."""

    name: str
    value: Any = None


@dataclass(frozen=True, init=False)
class SharingBoundary(Marker):
    """Name the sharing boundaries an ``ExportFactory`` import opens."""

    names: Tuple[str, ...]

    def __init__(self, *names: str) -> None:
        object.__setattr__(self, "names", tuple(names))


@dataclass(frozen=True)
class Shared(Marker):
    """Share one instance of the part, optionally within a named boundary."""

    boundary: Optional[str] = None


@dataclass(frozen=True)
class OnImportsSatisfied(Marker):
    """Mark the method called once all imports are set."""


@dataclass(frozen=True)
class PartNotDiscoverable(Marker):
    """Exclude a class from module-level scanning."""


__all__ = [
    "Export",
    "ExportMetadata",
    "Import",
    "ImportMany",
    "ImportingConstructor",
    "ImportMetadataConstraint",
    "SharingBoundary",
    "Shared",
    "OnImportsSatisfied",
    "PartNotDiscoverable",
]
