from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from partscan import (
    Export,
    ExportFactory,
    ExportMetadata,
    Import,
    InvalidDeclarationError,
    Lazy,
    LazyWithMetadata,
    Marker,
    SharingBoundary,
    metadata_attribute,
)
from partscan.core.markers.base import has_marker, markers_of, own_markers, single_marker


class Contract:
    pass


@Export()
@ExportMetadata("a", 1)
class Stamped:
    @Import()
    @property
    def dependency(self) -> Contract:
        raise NotImplementedError


class TestStamping:
    def test_decorator_returns_target_and_keeps_source_order(self) -> None:
        assert isinstance(Stamped, type)
        assert own_markers(Stamped) == (Export(), ExportMetadata("a", 1))

    def test_property_markers_live_on_the_getter(self) -> None:
        prop = vars(Stamped)["dependency"]
        assert isinstance(prop, property)
        assert own_markers(prop) == (Import(),)
        assert own_markers(prop.fget) == (Import(),)

    def test_property_without_getter_is_rejected(self) -> None:
        with pytest.raises(InvalidDeclarationError):
            Export()(property())

    def test_unmarked_object(self) -> None:
        assert own_markers(Contract) == ()
        assert own_markers(42) == ()


class TestMarkerValues:
    def test_markers_are_frozen(self) -> None:
        with pytest.raises(FrozenInstanceError):
            Import().allow_default = True  # type: ignore[misc]

    def test_export_contract_type_shorthand(self) -> None:
        marker = Export(Contract)
        assert marker.contract_name is None
        assert marker.contract_type is Contract

    def test_export_rejects_two_contract_types(self) -> None:
        with pytest.raises(TypeError):
            Export(Contract, Contract)

    def test_sharing_boundary_names(self) -> None:
        assert SharingBoundary("request", "session").names == ("request", "session")
        assert SharingBoundary().names == ()

    def test_metadata_attribute_requires_marker_subclass(self) -> None:
        with pytest.raises(TypeError):
            metadata_attribute(Contract)  # type: ignore[arg-type]


class TestMarkerQueries:
    def test_markers_of_and_has_marker(self) -> None:
        markers = (Export(), ExportMetadata("a", 1), ExportMetadata("b", 2))
        assert markers_of(markers, ExportMetadata) == markers[1:]
        assert has_marker(markers, Export)
        assert not has_marker(markers, Import)

    def test_single_marker(self) -> None:
        assert single_marker((Import(),), Import) == Import()
        assert single_marker((), Import) is None
        with pytest.raises(InvalidDeclarationError):
            single_marker((Import(), Import("x")), Import)

    def test_marker_base_is_shared(self) -> None:
        assert all(isinstance(m, Marker) for m in (Export(), Import(), SharingBoundary()))


class TestWrappers:
    def test_lazy_creates_value_once(self) -> None:
        calls = []

        def factory() -> str:
            calls.append(1)
            return "value"

        lazy = Lazy(factory)
        assert not lazy.is_value_created
        assert lazy.value == "value"
        assert lazy.value == "value"
        assert lazy.is_value_created
        assert calls == [1]

    def test_lazy_with_metadata(self) -> None:
        lazy = LazyWithMetadata(lambda: 3, {"color": "red"})
        assert lazy.metadata == {"color": "red"}
        assert lazy.value == 3

    def test_export_factory_returns_export_and_disposer(self) -> None:
        disposed = []
        factory = ExportFactory(lambda: ("export", lambda: disposed.append(True)), {"k": 1})
        value, dispose = factory.create_export()
        assert value == "export"
        dispose()
        assert disposed == [True]
        assert factory.metadata == {"k": 1}
