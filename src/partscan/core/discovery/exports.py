"""Export definition building for classes and members."""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping

from partscan.core.exceptions import InvalidOperationError
from partscan.core.markers import Export, PartMember, markers_of
from partscan.core.model import CompositionContract, ExportDefinition
from partscan.core.typeinfo import generic_definition, is_open_generic

from .metadata import extract_metadata


def build_type_exports(
    part_type: Any,
    markers: Iterable[Any],
    metadata: Mapping[str, Any],
) -> List[ExportDefinition]:
    """One export per ``Export`` marker on the class, sharing ``metadata``.

    Without an explicit contract type the contract is the generic class of a
    parameterised alias, or the class itself.
    """
    default_type = generic_definition(part_type) or part_type
    return [
        ExportDefinition(
            CompositionContract(marker.contract_type or default_type, marker.contract_name),
            metadata,
        )
        for marker in markers_of(markers, Export)
    ]


def build_member_export(part_type: Any, member: PartMember, marker: Export) -> ExportDefinition:
    """Export declared on a member, with metadata from the member's markers.

    Raises:
        InvalidOperationError: if ``part_type`` is an open generic class.
    """
    if is_open_generic(part_type):
        raise InvalidOperationError(
            "Exports on members not allowed when the declaring type is generic.",
            member=member.name,
        )
    contract = CompositionContract(marker.contract_type or member.declared_type, marker.contract_name)
    return ExportDefinition(contract, extract_metadata(member.markers))


__all__ = ["build_type_exports", "build_member_export"]
