from __future__ import annotations

import collections.abc as abc

import pytest

from partscan import (
    Export,
    ExportFactory,
    Import,
    ImportMany,
    ImportMetadataConstraint,
    InvalidDeclarationError,
    Lazy,
    LazyWithMetadata,
    SharingBoundary,
)
from partscan.core.discovery import build_import_or_default, try_build_import
from partscan.core.model import (
    CompositionContract,
    ImportCardinality,
    ImportMetadataValueConstraint,
)


class Widget:
    pass


class TestSingleImport:
    def test_exactly_one_by_default(self) -> None:
        definition = try_build_import(Widget, [Import()])
        assert definition is not None
        assert definition.contract == CompositionContract(Widget)
        assert definition.cardinality is ImportCardinality.EXACTLY_ONE
        assert definition.importing_site_type is Widget
        assert definition.constraints == frozenset()
        assert definition.sharing_boundaries == frozenset()

    def test_allow_default_is_one_or_zero(self) -> None:
        definition = try_build_import(Widget, [Import("primary", allow_default=True)])
        assert definition.cardinality is ImportCardinality.ONE_OR_ZERO
        assert definition.contract == CompositionContract(Widget, "primary")

    @pytest.mark.parametrize(
        "declared",
        [Lazy[Widget], LazyWithMetadata[Widget, dict], ExportFactory[Widget]],
    )
    def test_wrappers_are_unwrapped_once(self, declared) -> None:
        definition = try_build_import(declared, [Import()])
        assert definition.contract.contract_type is Widget
        assert definition.importing_site_type == declared

    def test_constraints_built_from_markers(self) -> None:
        definition = try_build_import(Widget, [Import(), ImportMetadataConstraint("color", "red")])
        assert definition.constraints == frozenset({ImportMetadataValueConstraint("color", "red")})

    def test_explicit_constraints_are_used_as_given(self) -> None:
        given = frozenset({ImportMetadataValueConstraint("size", 3)})
        definition = try_build_import(Widget, [Import(), ImportMetadataConstraint("color", "red")], given)
        assert definition.constraints == given


class TestImportMany:
    @pytest.mark.parametrize(
        "declared",
        [
            list[Widget],
            set[Widget],
            frozenset[Widget],
            tuple[Widget, ...],
            abc.Iterable[Widget],
            abc.Sequence[Widget],
            list[Lazy[Widget]],
            list[ExportFactory[Widget]],
        ],
    )
    def test_contract_is_element_type(self, declared) -> None:
        definition = try_build_import(declared, [ImportMany("widgets")])
        assert definition.cardinality is ImportCardinality.ZERO_OR_MORE
        assert definition.contract == CompositionContract(Widget, "widgets")
        assert definition.importing_site_type == declared

    @pytest.mark.parametrize("declared", [Widget, str, dict[str, Widget], tuple[Widget, Widget]])
    def test_non_collection_is_rejected(self, declared) -> None:
        with pytest.raises(InvalidDeclarationError):
            try_build_import(declared, [ImportMany()])


class TestSharingBoundaries:
    def test_names_are_collected_and_deduplicated(self) -> None:
        definition = try_build_import(
            ExportFactory[Widget],
            [Import(), SharingBoundary("request", "session"), SharingBoundary("request")],
        )
        assert definition.sharing_boundaries == frozenset({"request", "session"})

    def test_only_allowed_on_export_factory(self) -> None:
        with pytest.raises(InvalidDeclarationError, match="ExportFactory"):
            try_build_import(Lazy[Widget], [Import(), SharingBoundary("request")])


class TestNoImport:
    def test_unmarked_site_is_not_an_import(self) -> None:
        assert try_build_import(Widget, []) is None

    def test_build_import_or_default_adds_implicit_import(self) -> None:
        definition = build_import_or_default(Widget, [])
        assert definition.cardinality is ImportCardinality.EXACTLY_ONE
        assert definition.contract == CompositionContract(Widget)

    def test_build_import_or_default_keeps_explicit_marker(self) -> None:
        definition = build_import_or_default(list[Widget], [ImportMany()])
        assert definition.cardinality is ImportCardinality.ZERO_OR_MORE

    def test_build_import_or_default_rejects_exported_site(self) -> None:
        with pytest.raises(InvalidDeclarationError):
            build_import_or_default(Widget, [Export()])
