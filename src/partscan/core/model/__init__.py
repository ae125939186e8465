"""Part definition model."""
from __future__ import annotations

from .definitions import (
    ComposablePartDefinition,
    CompositionContract,
    ExportDefinition,
    ImportCardinality,
    ImportDefinition,
    ImportMetadataValueConstraint,
    freeze_mapping,
)
from .results import DiscoveryResult, Failed, NotAPart, Part

__all__ = [
    "ComposablePartDefinition",
    "CompositionContract",
    "ExportDefinition",
    "ImportCardinality",
    "ImportDefinition",
    "ImportMetadataValueConstraint",
    "freeze_mapping",
    "DiscoveryResult",
    "Failed",
    "NotAPart",
    "Part",
]
