"""Immutable part definition model handed to the composition engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Iterator, Mapping, Optional, Tuple

from partscan.core.markers.provider import PartMember
from partscan.core.typeinfo import describe_type

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def freeze_mapping(values: Optional[Mapping[Any, Any]]) -> Mapping[Any, Any]:
    """Return a read-only copy of ``values``."""
    if not values:
        return _EMPTY
    return MappingProxyType(dict(values))


class ImportCardinality(str, Enum):
    """How many exports may satisfy an import."""

    EXACTLY_ONE = "ExactlyOne"
    ONE_OR_ZERO = "OneOrZero"
    ZERO_OR_MORE = "ZeroOrMore"


@dataclass(frozen=True)
class CompositionContract:
    contract_type: Any
    contract_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.contract_name, "type": describe_type(self.contract_type)}

    def __str__(self) -> str:
        if self.contract_name:
            return f"{self.contract_name} ({describe_type(self.contract_type)})"
        return describe_type(self.contract_type)


@dataclass(frozen=True)
class ExportDefinition:
    contract: CompositionContract
    metadata: Mapping[str, Any] = field(default_factory=lambda: _EMPTY, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", freeze_mapping(self.metadata))

    def to_dict(self) -> Dict[str, Any]:
        return {"contract": self.contract.to_dict(), "metadata": dict(self.metadata)}


@dataclass(frozen=True)
class ImportMetadataValueConstraint:
    """Satisfied by exports whose metadata maps ``name`` to ``value``."""

    name: str
    value: Any

    def is_satisfied_by(self, export: ExportDefinition) -> bool:
        return self.name in export.metadata and export.metadata[self.name] == self.value

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class ImportDefinition:
    contract: CompositionContract
    cardinality: ImportCardinality
    importing_site_type: Any
    constraints: FrozenSet[ImportMetadataValueConstraint] = frozenset()
    sharing_boundaries: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraints", frozenset(self.constraints))
        object.__setattr__(self, "sharing_boundaries", frozenset(self.sharing_boundaries))

    def is_satisfied_by(self, export: ExportDefinition) -> bool:
        """True when ``export`` matches the contract and every constraint."""
        if export.contract != self.contract:
            return False
        return all(constraint.is_satisfied_by(export) for constraint in self.constraints)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contract": self.contract.to_dict(),
            "cardinality": self.cardinality.value,
            "importingSiteType": describe_type(self.importing_site_type),
            "constraints": [c.to_dict() for c in sorted(self.constraints, key=lambda c: (c.name, repr(c.value)))],
            "sharingBoundaries": sorted(self.sharing_boundaries),
        }


@dataclass(frozen=True)
class ComposablePartDefinition:
    """Everything the composition engine needs to know about one part."""

    type: Any
    exports_on_type: Tuple[ExportDefinition, ...] = ()
    exports_on_members: Mapping[PartMember, ExportDefinition] = field(default_factory=lambda: _EMPTY, hash=False)
    imports: Mapping[PartMember, ImportDefinition] = field(default_factory=lambda: _EMPTY, hash=False)
    sharing_boundary: Optional[str] = None
    on_imports_satisfied: Optional[Callable[..., Any]] = None
    importing_constructor: Optional[Callable[..., Any]] = None
    importing_constructor_imports: Tuple[ImportDefinition, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "exports_on_type", tuple(self.exports_on_type))
        object.__setattr__(self, "exports_on_members", freeze_mapping(self.exports_on_members))
        object.__setattr__(self, "imports", freeze_mapping(self.imports))
        object.__setattr__(self, "importing_constructor_imports", tuple(self.importing_constructor_imports))

    @property
    def is_shared(self) -> bool:
        return self.sharing_boundary is not None

    @property
    def export_definitions(self) -> Tuple[ExportDefinition, ...]:
        """Type-level exports followed by member-level exports."""
        return self.exports_on_type + tuple(self.exports_on_members.values())

    @property
    def exported_contracts(self) -> FrozenSet[CompositionContract]:
        return frozenset(export.contract for export in self.export_definitions)

    def iter_imports(self) -> Iterator[ImportDefinition]:
        """Member imports followed by constructor imports."""
        yield from self.imports.values()
        yield from self.importing_constructor_imports

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": describe_type(self.type),
            "sharingBoundary": self.sharing_boundary,
            "exportsOnType": [e.to_dict() for e in self.exports_on_type],
            "exportsOnMembers": {m.name: e.to_dict() for m, e in self.exports_on_members.items()},
            "imports": {m.name: i.to_dict() for m, i in self.imports.items()},
            "onImportsSatisfied": getattr(self.on_imports_satisfied, "__name__", None),
            "importingConstructor": getattr(self.importing_constructor, "__name__", None),
            "importingConstructorImports": [i.to_dict() for i in self.importing_constructor_imports],
        }


__all__ = [
    "ImportCardinality",
    "CompositionContract",
    "ExportDefinition",
    "ImportMetadataValueConstraint",
    "ImportDefinition",
    "ComposablePartDefinition",
    "freeze_mapping",
]
