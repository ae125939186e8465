"""partscan: discover composable parts from declarative markers."""
from __future__ import annotations

from partscan.core.discovery import (
    AttributedPartDiscovery,
    ErrorPolicy,
    PartDiscovery,
    ScanReport,
    create_part,
    create_parts,
)
from partscan.core.exceptions import (
    DuplicateMetadataKeyError,
    InvalidArgumentError,
    InvalidDeclarationError,
    InvalidOperationError,
    PartDiscoveryError,
    PartscanError,
)
from partscan.core.markers import (
    Export,
    ExportFactory,
    ExportMetadata,
    Import,
    ImportingConstructor,
    ImportMany,
    ImportMetadataConstraint,
    Lazy,
    LazyWithMetadata,
    OnImportsSatisfied,
    PartNotDiscoverable,
    Shared,
    SharingBoundary,
    metadata_attribute,
)
from partscan.core.markers.base import Marker
from partscan.core.model import (
    ComposablePartDefinition,
    CompositionContract,
    ExportDefinition,
    ImportCardinality,
    ImportDefinition,
    ImportMetadataValueConstraint,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AttributedPartDiscovery",
    "ErrorPolicy",
    "PartDiscovery",
    "ScanReport",
    "create_part",
    "create_parts",
    "DuplicateMetadataKeyError",
    "InvalidArgumentError",
    "InvalidDeclarationError",
    "InvalidOperationError",
    "PartDiscoveryError",
    "PartscanError",
    "Export",
    "ExportFactory",
    "ExportMetadata",
    "Import",
    "ImportingConstructor",
    "ImportMany",
    "ImportMetadataConstraint",
    "Lazy",
    "LazyWithMetadata",
    "Marker",
    "OnImportsSatisfied",
    "PartNotDiscoverable",
    "Shared",
    "SharingBoundary",
    "metadata_attribute",
    "ComposablePartDefinition",
    "CompositionContract",
    "ExportDefinition",
    "ImportCardinality",
    "ImportDefinition",
    "ImportMetadataValueConstraint",
]
