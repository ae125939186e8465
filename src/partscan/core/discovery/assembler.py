"""Part definition assembly.

:class:`AttributedPartDiscovery` turns one class into a
:class:`~partscan.core.model.ComposablePartDefinition`:

1. type-level metadata and exports
2. sharing scope from ``Shared``
3. member imports and member exports
4. the ``OnImportsSatisfied`` hook
5. the importing constructor and its parameter imports

A class without any export is not a part. Any declaration error aborts
discovery of the whole class.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from types import ModuleType
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

from partscan.core.exceptions import (
    InvalidArgumentError,
    InvalidDeclarationError,
    InvalidOperationError,
    PartDiscoveryError,
)
from partscan.core.markers import (
    AnnotationMarkerProvider,
    ImportingConstructor,
    MarkerProvider,
    MethodInfo,
    OnImportsSatisfied,
    PartMember,
    PartNotDiscoverable,
    Shared,
    has_marker,
    single_marker,
)
from partscan.core.model import (
    ComposablePartDefinition,
    DiscoveryResult,
    ExportDefinition,
    Failed,
    ImportCardinality,
    ImportDefinition,
    NotAPart,
    Part,
)
from partscan.core.typeinfo import describe_type, is_collection_constructible, is_part_type

from .exports import build_member_export, build_type_exports
from .imports import build_import_or_default, try_build_import
from .metadata import build_import_constraints, extract_metadata
from .scanner import ErrorPolicy, ScanReport, scan_module
from .sites import SiteKind, classify_site

if TYPE_CHECKING:
    from partscan.core.config import DiscoveryConfig

logger = logging.getLogger(__name__)


class PartDiscovery(ABC):
    """Turns classes, or every public class of a module, into part definitions.

    Args:
        on_error: What :meth:`create_parts` does when one class fails.
        max_workers: Threads used by :meth:`create_parts`; ``None`` or 1 runs inline.
    """

    def __init__(
        self,
        *,
        on_error: Union[ErrorPolicy, str] = ErrorPolicy.RAISE,
        max_workers: Optional[int] = None,
    ) -> None:
        self.on_error = ErrorPolicy(on_error)
        self.max_workers = max_workers

    @abstractmethod
    def create_part(self, part_type: Any) -> Optional[ComposablePartDefinition]:
        """Return the part definition of ``part_type``, or ``None`` if it is not a part."""

    def is_discoverable(self, part_type: Any) -> bool:
        """Whether module scanning should consider ``part_type``."""
        return True

    def discover(self, part_type: Any) -> DiscoveryResult:
        """Like :meth:`create_part` but reports failures as a :class:`Failed` result."""
        try:
            definition = self.create_part(part_type)
        except PartDiscoveryError as exc:
            return Failed(part_type, exc)
        if definition is None:
            return NotAPart(part_type)
        return Part(definition)

    def scan(
        self,
        module: Union[ModuleType, str],
        *,
        on_error: Union[ErrorPolicy, str, None] = None,
        max_workers: Optional[int] = None,
    ) -> ScanReport:
        return scan_module(
            self,
            module,
            on_error=ErrorPolicy(on_error) if on_error is not None else self.on_error,
            max_workers=max_workers if max_workers is not None else self.max_workers,
        )

    def create_parts(
        self,
        module: Union[ModuleType, str],
        *,
        on_error: Union[ErrorPolicy, str, None] = None,
        max_workers: Optional[int] = None,
    ) -> Tuple[ComposablePartDefinition, ...]:
        """Discover every part of ``module``; the order of the result is not significant."""
        return self.scan(module, on_error=on_error, max_workers=max_workers).parts


class AttributedPartDiscovery(PartDiscovery):
    """Part discovery driven by declarative markers."""

    def __init__(
        self,
        provider: Optional[MarkerProvider] = None,
        *,
        on_error: Union[ErrorPolicy, str] = ErrorPolicy.RAISE,
        max_workers: Optional[int] = None,
    ) -> None:
        super().__init__(on_error=on_error, max_workers=max_workers)
        self.provider: MarkerProvider = provider or AnnotationMarkerProvider()

    @classmethod
    def from_config(
        cls,
        config: "DiscoveryConfig",
        provider: Optional[MarkerProvider] = None,
    ) -> "AttributedPartDiscovery":
        return cls(provider, on_error=config.on_error, max_workers=config.max_workers)

    def is_discoverable(self, part_type: Any) -> bool:
        return not has_marker(self.provider.type_markers(part_type), PartNotDiscoverable)

    def create_part(self, part_type: Any) -> Optional[ComposablePartDefinition]:
        if part_type is None:
            raise InvalidArgumentError("part_type is required.")
        if not is_part_type(part_type):
            raise InvalidArgumentError(f"Expected a class, got {part_type!r}.")
        try:
            return self._create_part(part_type)
        except PartDiscoveryError as exc:
            exc.with_location(part_type)
            raise

    # ------------------------------------------------------------------

    def _create_part(self, part_type: Any) -> Optional[ComposablePartDefinition]:
        type_markers = self.provider.type_markers(part_type)
        type_metadata = extract_metadata(type_markers)
        exports_on_type = build_type_exports(part_type, type_markers, type_metadata)

        shared = single_marker(type_markers, Shared)
        sharing_boundary = None if shared is None else (shared.boundary or "")

        exports_on_members: Dict[PartMember, ExportDefinition] = {}
        imports: Dict[PartMember, ImportDefinition] = {}
        for member in self.provider.members(part_type):
            try:
                self._add_member(part_type, member, imports, exports_on_members)
            except PartDiscoveryError as exc:
                exc.with_location(part_type, member.name)
                raise

        on_imports_satisfied = self._on_imports_satisfied(part_type)

        if not exports_on_type and not exports_on_members:
            logger.debug("%s declares no exports; not a part", describe_type(part_type))
            return None

        constructor = self._importing_constructor(part_type)
        constructor_imports = self._constructor_imports(constructor)

        part = ComposablePartDefinition(
            type=part_type,
            exports_on_type=exports_on_type,
            exports_on_members=exports_on_members,
            imports=imports,
            sharing_boundary=sharing_boundary,
            on_imports_satisfied=on_imports_satisfied,
            importing_constructor=constructor.function,
            importing_constructor_imports=constructor_imports,
        )
        logger.debug(
            "Discovered part %s: %d export(s), %d import(s)",
            describe_type(part_type),
            len(part.export_definitions),
            len(imports) + len(constructor_imports),
        )
        return part

    def _add_member(
        self,
        part_type: Any,
        member: PartMember,
        imports: Dict[PartMember, ImportDefinition],
        exports_on_members: Dict[PartMember, ExportDefinition],
    ) -> None:
        site = classify_site(member.markers)
        if site.kind is not SiteKind.NONE and member.declared_type is None:
            raise InvalidDeclarationError("Member carries markers but has no type annotation.")

        definition = try_build_import(
            member.declared_type,
            member.markers,
            build_import_constraints(member.markers),
        )
        if definition is not None:
            imports[member] = definition
        elif site.kind is SiteKind.EXPORT:
            exports_on_members[member] = build_member_export(part_type, member, site.export_marker)

    def _on_imports_satisfied(self, part_type: Any) -> Optional[Any]:
        found: Optional[MethodInfo] = None
        for method in self.provider.methods(part_type):
            if not has_marker(method.markers, OnImportsSatisfied):
                continue
            if method.parameters:
                raise InvalidOperationError(
                    "OnImportsSatisfied method should take no parameters.",
                    member=method.name,
                )
            if found is not None:
                raise InvalidOperationError(
                    "Only one OnImportsSatisfied method is supported.",
                    member=method.name,
                )
            found = method
        return found.function if found is not None else None

    def _importing_constructor(self, part_type: Any) -> MethodInfo:
        candidates = list(self.provider.constructors(part_type))
        marked = [c for c in candidates if has_marker(c.markers, ImportingConstructor)]
        if len(marked) > 1:
            names = ", ".join(c.name for c in marked)
            raise InvalidOperationError(f"Only one importing constructor is supported, found: {names}.")
        if marked:
            constructor = marked[0]
            if not constructor.is_public:
                raise InvalidOperationError("Importing constructor must be public.", member=constructor.name)
            return constructor
        return candidates[0]

    def _constructor_imports(self, constructor: MethodInfo) -> List[ImportDefinition]:
        definitions: List[ImportDefinition] = []
        for parameter in constructor.parameters:
            site = f"{constructor.name}({parameter.name})"
            if parameter.is_variadic:
                raise InvalidOperationError(
                    "Variadic parameters cannot be satisfied by imports.",
                    member=site,
                )
            if parameter.declared_type is None:
                raise InvalidDeclarationError("Constructor parameter has no type annotation.", member=site)
            try:
                definition = build_import_or_default(
                    parameter.declared_type,
                    parameter.markers,
                    build_import_constraints(parameter.markers),
                )
            except PartDiscoveryError as exc:
                exc.with_location(None, site)
                raise
            if definition.cardinality is ImportCardinality.ZERO_OR_MORE and not is_collection_constructible(
                definition.importing_site_type
            ):
                raise InvalidOperationError(
                    "Collection must be public with a public constructor when used with an importing constructor.",
                    member=site,
                )
            definitions.append(definition)
        return definitions


__all__ = ["PartDiscovery", "AttributedPartDiscovery"]
