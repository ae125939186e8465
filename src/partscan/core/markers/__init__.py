"""Declarative markers and the providers that read them back.

Architecture:
    base          Marker, stamping, lookup helpers
    declarations  Export, Import, ImportMany, Shared, ... (the input contract)
    wrappers      Lazy, LazyWithMetadata, ExportFactory import wrappers
    provider      MarkerProvider protocol + AnnotationMarkerProvider
"""
from __future__ import annotations

from .base import (
    Marker,
    has_marker,
    is_metadata_attribute,
    markers_of,
    metadata_attribute,
    own_markers,
    single_marker,
)
from .declarations import (
    Export,
    ExportMetadata,
    Import,
    ImportingConstructor,
    ImportMany,
    ImportMetadataConstraint,
    OnImportsSatisfied,
    PartNotDiscoverable,
    Shared,
    SharingBoundary,
)
from .wrappers import ExportFactory, Lazy, LazyWithMetadata
from .provider import (
    AnnotationMarkerProvider,
    MarkerProvider,
    MemberKind,
    MethodInfo,
    ParameterInfo,
    PartMember,
    split_annotated,
)

__all__ = [
    "Marker",
    "has_marker",
    "is_metadata_attribute",
    "markers_of",
    "metadata_attribute",
    "own_markers",
    "single_marker",
    "Export",
    "ExportMetadata",
    "Import",
    "ImportingConstructor",
    "ImportMany",
    "ImportMetadataConstraint",
    "OnImportsSatisfied",
    "PartNotDiscoverable",
    "Shared",
    "SharingBoundary",
    "ExportFactory",
    "Lazy",
    "LazyWithMetadata",
    "AnnotationMarkerProvider",
    "MarkerProvider",
    "MemberKind",
    "MethodInfo",
    "ParameterInfo",
    "PartMember",
    "split_annotated",
]
