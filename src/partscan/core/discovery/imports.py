"""Import definition building for members and constructor parameters."""
from __future__ import annotations

from typing import Any, FrozenSet, Iterable, Optional

from partscan.core.exceptions import InvalidDeclarationError
from partscan.core.markers import Import, SharingBoundary, markers_of
from partscan.core.model import (
    CompositionContract,
    ImportCardinality,
    ImportDefinition,
    ImportMetadataValueConstraint,
)
from partscan.core.typeinfo import describe_type, element_type, is_export_factory_type, unwrap_import_type

from .metadata import build_import_constraints
from .sites import SiteKind, classify_site

_IMPLICIT_IMPORT = Import()


def _sharing_boundaries(declared_type: Any, markers: Iterable[Any]) -> FrozenSet[str]:
    boundary_markers = markers_of(markers, SharingBoundary)
    if not boundary_markers:
        return frozenset()
    if not is_export_factory_type(declared_type):
        raise InvalidDeclarationError(
            f"SharingBoundary is expected only on imports of ExportFactory[T], got {describe_type(declared_type)}."
        )
    return frozenset(name for marker in boundary_markers for name in marker.names)


def try_build_import(
    declared_type: Any,
    markers: Iterable[Any],
    constraints: Optional[FrozenSet[ImportMetadataValueConstraint]] = None,
) -> Optional[ImportDefinition]:
    """Build the import declared at a site, or ``None`` when there is none.

    Args:
        declared_type: Annotated type of the member or parameter.
        markers: All markers at the site.
        constraints: Prebuilt constraints; built from ``markers`` when omitted.

    Raises:
        InvalidDeclarationError: for contradictory markers, a SharingBoundary
            on anything but an ExportFactory import, or ImportMany on a
            non-collection type.
    """
    markers = tuple(markers)
    site = classify_site(markers)
    boundaries = _sharing_boundaries(declared_type, markers)
    if constraints is None:
        constraints = build_import_constraints(markers)

    if site.kind is SiteKind.IMPORT:
        marker = site.import_marker
        cardinality = ImportCardinality.ONE_OR_ZERO if marker.allow_default else ImportCardinality.EXACTLY_ONE
        contract = CompositionContract(unwrap_import_type(declared_type), marker.contract_name)
    elif site.kind is SiteKind.IMPORT_MANY:
        cardinality = ImportCardinality.ZERO_OR_MORE
        contract = CompositionContract(element_type(declared_type), site.import_many_marker.contract_name)
    else:
        return None

    return ImportDefinition(
        contract=contract,
        cardinality=cardinality,
        importing_site_type=declared_type,
        constraints=constraints,
        sharing_boundaries=boundaries,
    )


def build_import_or_default(
    declared_type: Any,
    markers: Iterable[Any],
    constraints: Optional[FrozenSet[ImportMetadataValueConstraint]] = None,
) -> ImportDefinition:
    """Like :func:`try_build_import`, treating an unmarked site as ``Import()``."""
    markers = tuple(markers)
    definition = try_build_import(declared_type, markers, constraints)
    if definition is not None:
        return definition
    definition = try_build_import(declared_type, markers + (_IMPLICIT_IMPORT,), constraints)
    if definition is None:
        raise InvalidDeclarationError("Site cannot be satisfied by an import.")
    return definition


__all__ = ["try_build_import", "build_import_or_default"]
