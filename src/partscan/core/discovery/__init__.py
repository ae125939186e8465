"""Attributed part discovery.

Architecture:
    sites      classify the markers of one member/parameter
    metadata   export metadata + import constraints
    imports    ImportDefinition building
    exports    ExportDefinition building
    assembler  PartDiscovery / AttributedPartDiscovery (one class)
    scanner    module-level scanning with an error policy

``create_part`` and ``create_parts`` use a default discovery instance; build
an :class:`AttributedPartDiscovery` (or ``from_config``) to change the
marker provider, the error policy or the worker count.
"""
from __future__ import annotations

from types import ModuleType
from typing import Any, Optional, Tuple, Union

from partscan.core.model import ComposablePartDefinition

from .assembler import AttributedPartDiscovery, PartDiscovery
from .exports import build_member_export, build_type_exports
from .imports import build_import_or_default, try_build_import
from .metadata import build_import_constraints, extract_metadata
from .scanner import ErrorPolicy, ScanFailure, ScanReport, iter_candidate_types, resolve_module, scan_module
from .sites import SiteDeclaration, SiteKind, classify_site


def create_part(part_type: Any) -> Optional[ComposablePartDefinition]:
    """Discover the part declared by ``part_type``; ``None`` if it exports nothing."""
    return AttributedPartDiscovery().create_part(part_type)


def create_parts(
    module: Union[ModuleType, str],
    *,
    on_error: Union[ErrorPolicy, str] = ErrorPolicy.RAISE,
    max_workers: Optional[int] = None,
) -> Tuple[ComposablePartDefinition, ...]:
    """Discover every part defined by ``module``."""
    return AttributedPartDiscovery(on_error=on_error, max_workers=max_workers).create_parts(module)


__all__ = [
    "create_part",
    "create_parts",
    "PartDiscovery",
    "AttributedPartDiscovery",
    "build_member_export",
    "build_type_exports",
    "build_import_or_default",
    "try_build_import",
    "build_import_constraints",
    "extract_metadata",
    "ErrorPolicy",
    "ScanFailure",
    "ScanReport",
    "iter_candidate_types",
    "resolve_module",
    "scan_module",
    "SiteDeclaration",
    "SiteKind",
    "classify_site",
]
