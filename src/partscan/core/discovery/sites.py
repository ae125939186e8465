"""Declaration site classification.

All markers on one member or parameter are parsed once into a
:class:`SiteDeclaration`. The mutual exclusion rules between import,
import-many and export markers live here and nowhere else.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from partscan.core.exceptions import InvalidDeclarationError
from partscan.core.markers import Export, Import, ImportMany, single_marker


class SiteKind(str, Enum):
    NONE = "none"
    IMPORT = "import"
    IMPORT_MANY = "import_many"
    EXPORT = "export"


@dataclass(frozen=True)
class SiteDeclaration:
    kind: SiteKind
    import_marker: Optional[Import] = None
    import_many_marker: Optional[ImportMany] = None
    export_marker: Optional[Export] = None

    @property
    def is_import(self) -> bool:
        return self.kind in (SiteKind.IMPORT, SiteKind.IMPORT_MANY)


NO_DECLARATION = SiteDeclaration(SiteKind.NONE)


def classify_site(markers: Iterable[object]) -> SiteDeclaration:
    """Classify the markers of a single member or parameter.

    Raises:
        InvalidDeclarationError: when the site carries both Import and
            ImportMany, an import together with an Export, or a repeated
            marker of the same kind.
    """
    markers = tuple(markers)
    import_marker = single_marker(markers, Import)
    import_many_marker = single_marker(markers, ImportMany)
    export_marker = single_marker(markers, Export)

    if import_marker is not None and import_many_marker is not None:
        raise InvalidDeclarationError("Member contains both Import and ImportMany markers.")
    if export_marker is not None and (import_marker is not None or import_many_marker is not None):
        raise InvalidDeclarationError("Member contains both import and export markers.")

    if import_marker is not None:
        return SiteDeclaration(SiteKind.IMPORT, import_marker=import_marker)
    if import_many_marker is not None:
        return SiteDeclaration(SiteKind.IMPORT_MANY, import_many_marker=import_many_marker)
    if export_marker is not None:
        return SiteDeclaration(SiteKind.EXPORT, export_marker=export_marker)
    return NO_DECLARATION


__all__ = ["SiteKind", "SiteDeclaration", "NO_DECLARATION", "classify_site"]
