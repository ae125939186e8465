from __future__ import annotations

import pytest

from partscan import Export, ExportMetadata, Import, ImportMany, InvalidDeclarationError
from partscan.core.discovery import SiteKind, classify_site
from partscan.core.discovery.sites import NO_DECLARATION


class TestClassifySite:
    def test_no_markers(self) -> None:
        assert classify_site([]) is NO_DECLARATION

    def test_unrelated_markers_are_not_a_declaration(self) -> None:
        assert classify_site([ExportMetadata("k", "v")]).kind is SiteKind.NONE

    def test_import(self) -> None:
        marker = Import("db", allow_default=True)
        site = classify_site([marker])
        assert site.kind is SiteKind.IMPORT
        assert site.import_marker is marker
        assert site.is_import

    def test_import_many(self) -> None:
        site = classify_site([ImportMany()])
        assert site.kind is SiteKind.IMPORT_MANY
        assert site.import_many_marker == ImportMany()
        assert site.is_import

    def test_export(self) -> None:
        site = classify_site([Export("name"), ExportMetadata("k", 1)])
        assert site.kind is SiteKind.EXPORT
        assert site.export_marker == Export("name")
        assert not site.is_import

    def test_import_and_import_many_conflict(self) -> None:
        with pytest.raises(InvalidDeclarationError, match="both Import and ImportMany"):
            classify_site([Import(), ImportMany()])

    @pytest.mark.parametrize("import_marker", [Import(), ImportMany()])
    def test_import_and_export_conflict(self, import_marker) -> None:
        with pytest.raises(InvalidDeclarationError, match="both import and export"):
            classify_site([import_marker, Export()])

    def test_repeated_marker_kind_is_rejected(self) -> None:
        with pytest.raises(InvalidDeclarationError):
            classify_site([Import("a"), Import("b")])
