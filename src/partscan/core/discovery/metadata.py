"""Export metadata extraction and import constraint building."""
from __future__ import annotations

import dataclasses
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

from partscan.core.exceptions import DuplicateMetadataKeyError, InvalidArgumentError
from partscan.core.markers import ExportMetadata, ImportMetadataConstraint, is_metadata_attribute, markers_of
from partscan.core.model import ImportMetadataValueConstraint, freeze_mapping


def _marker_values(marker: Any) -> Dict[str, Any]:
    """Values a metadata-attribute marker contributes, keyed by field name."""
    if dataclasses.is_dataclass(marker):
        return {f.name: getattr(marker, f.name) for f in dataclasses.fields(marker)}
    return {name: value for name, value in vars(marker).items() if not name.startswith("_")}


def extract_metadata(markers: Optional[Iterable[Any]]) -> Mapping[str, Any]:
    """Collect export metadata from the markers of one site.

    ``ExportMetadata`` contributes its name/value pair; a marker whose class
    is tagged with ``@metadata_attribute`` contributes each of its fields.

    Raises:
        InvalidArgumentError: if ``markers`` is None.
        DuplicateMetadataKeyError: if two markers provide the same key.
    """
    if markers is None:
        raise InvalidArgumentError("markers is required.")

    result: Dict[str, Any] = {}

    def _add(key: str, value: Any) -> None:
        if key in result:
            raise DuplicateMetadataKeyError(key)
        result[key] = value

    for marker in markers:
        if isinstance(marker, ExportMetadata):
            _add(marker.name, marker.value)
        elif is_metadata_attribute(marker):
            for key, value in _marker_values(marker).items():
                _add(key, value)
    return freeze_mapping(result)


def build_import_constraints(markers: Optional[Iterable[Any]]) -> FrozenSet[ImportMetadataValueConstraint]:
    """One value constraint per ``ImportMetadataConstraint`` marker.

    Constraints on the same key are not merged; the consumer ANDs them.
    Identical name and value pairs collapse into one entry of the frozenset,
    which leaves the conjunction unchanged.
    """
    if markers is None:
        raise InvalidArgumentError("markers is required.")
    try:
        return frozenset(
            ImportMetadataValueConstraint(marker.name, marker.value)
            for marker in markers_of(markers, ImportMetadataConstraint)
        )
    except TypeError as exc:
        raise InvalidArgumentError(f"Import metadata constraint values must be hashable: {exc}") from exc


__all__ = ["extract_metadata", "build_import_constraints"]
