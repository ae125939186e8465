from __future__ import annotations

from typing import Generic, TypeVar

import pytest

from partscan import Export, ExportMetadata, InvalidOperationError
from partscan.core.discovery import build_member_export, build_type_exports
from partscan.core.markers import MemberKind, PartMember
from partscan.core.model import CompositionContract, freeze_mapping

T = TypeVar("T")


class Service:
    pass


class Gadget(Service):
    pass


class Holder(Generic[T]):
    pass


class TestTypeExports:
    def test_one_export_per_marker_sharing_metadata(self) -> None:
        metadata = freeze_mapping({"k1": "v1"})
        exports = build_type_exports(Gadget, [Export(), Export("named", Service), ExportMetadata("k1", "v1")], metadata)
        assert [e.contract for e in exports] == [
            CompositionContract(Gadget),
            CompositionContract(Service, "named"),
        ]
        assert all(dict(e.metadata) == {"k1": "v1"} for e in exports)

    def test_contract_type_shorthand(self) -> None:
        (export,) = build_type_exports(Gadget, [Export(Service)], freeze_mapping({}))
        assert export.contract == CompositionContract(Service)

    def test_closed_generic_exports_its_definition(self) -> None:
        (export,) = build_type_exports(Holder[int], [Export()], freeze_mapping({}))
        assert export.contract.contract_type is Holder

    def test_no_export_markers(self) -> None:
        assert build_type_exports(Gadget, [ExportMetadata("k", 1)], freeze_mapping({"k": 1})) == []


class TestMemberExport:
    def test_contract_defaults_to_declared_type(self) -> None:
        marker = Export()
        member = PartMember(Gadget, "service", Service, MemberKind.PROPERTY, (marker, ExportMetadata("tier", 2)))
        export = build_member_export(Gadget, member, marker)
        assert export.contract == CompositionContract(Service)
        assert dict(export.metadata) == {"tier": 2}

    def test_explicit_contract(self) -> None:
        marker = Export("svc", Gadget)
        member = PartMember(Gadget, "service", Service, MemberKind.ATTRIBUTE, (marker,))
        assert build_member_export(Gadget, member, marker).contract == CompositionContract(Gadget, "svc")

    def test_rejected_on_open_generic(self) -> None:
        marker = Export()
        member = PartMember(Holder, "value", T, MemberKind.PROPERTY, (marker,))
        with pytest.raises(InvalidOperationError, match="generic"):
            build_member_export(Holder, member, marker)

    def test_allowed_on_closed_generic(self) -> None:
        marker = Export()
        member = PartMember(Holder[int], "value", int, MemberKind.PROPERTY, (marker,))
        assert build_member_export(Holder[int], member, marker).contract == CompositionContract(int)
