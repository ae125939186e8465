"""Discovery outcome for a single class.

Callers that must tell "not a part" apart from "failed" use these instead
of ``create_part``'s ``None``/exception pair.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from partscan.core.exceptions import PartDiscoveryError

from .definitions import ComposablePartDefinition


class DiscoveryResult:
    """Base of :class:`NotAPart`, :class:`Part` and :class:`Failed`."""

    part_type: Any

    @property
    def is_part(self) -> bool:
        return False

    @property
    def definition(self) -> Optional[ComposablePartDefinition]:
        return None


@dataclass(frozen=True)
class NotAPart(DiscoveryResult):
    part_type: Any


@dataclass(frozen=True)
class Part(DiscoveryResult):
    part: ComposablePartDefinition

    @property
    def part_type(self) -> Any:  # type: ignore[override]
        return self.part.type

    @property
    def is_part(self) -> bool:
        return True

    @property
    def definition(self) -> Optional[ComposablePartDefinition]:
        return self.part


@dataclass(frozen=True)
class Failed(DiscoveryResult):
    part_type: Any
    error: PartDiscoveryError


__all__ = ["DiscoveryResult", "NotAPart", "Part", "Failed"]
