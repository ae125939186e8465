"""Marker base class and helpers for reading markers back.

Markers are small frozen dataclasses. An instance doubles as a decorator:
applying it to a class, function or property stamps it onto the target so
that a :class:`~partscan.core.markers.provider.MarkerProvider` can find it
later. Markers may also appear inside ``typing.Annotated`` metadata.

    @Export()
    @ExportMetadata("color", "red")
    class Paint:
        brush: Annotated[Brush, Import()]
"""
from __future__ import annotations

from typing import Any, Iterable, Optional, Tuple, Type, TypeVar

from partscan.core.exceptions import InvalidDeclarationError

MARKERS_ATTR = "__partscan_markers__"
METADATA_ATTRIBUTE_FLAG = "__partscan_metadata_attribute__"

M = TypeVar("M", bound="Marker")


class Marker:
    """Base class for every declarative marker."""

    def __call__(self, target: Any) -> Any:
        stamp(target, self)
        return target


def stamp(target: Any, marker: Marker) -> None:
    """Attach ``marker`` to ``target``.

    Markers are stored on the target's own namespace and are not inherited
    by subclasses. Decorators run bottom-up, so each marker is prepended to
    keep source order.
    """
    holder = _marker_holder(target)
    existing = own_markers(holder)
    setattr(holder, MARKERS_ATTR, (marker,) + existing)


def own_markers(target: Any) -> Tuple[Marker, ...]:
    """Return the markers stamped directly on ``target`` (not inherited)."""
    holder = _marker_holder(target)
    try:
        namespace = vars(holder)
    except TypeError:
        return ()
    return tuple(namespace.get(MARKERS_ATTR, ()))


def _marker_holder(target: Any) -> Any:
    if isinstance(target, property):
        if target.fget is None:
            raise InvalidDeclarationError("Markers cannot be applied to a property without a getter.")
        return target.fget
    if isinstance(target, (classmethod, staticmethod)):
        return target.__func__
    return target


def metadata_attribute(cls: Type[M]) -> Type[M]:
    """Tag a marker class so its fields are exported as metadata."""
    if not (isinstance(cls, type) and issubclass(cls, Marker)):
        raise TypeError("@metadata_attribute can only decorate Marker subclasses")
    setattr(cls, METADATA_ATTRIBUTE_FLAG, True)
    return cls


def is_metadata_attribute(marker: Any) -> bool:
    return bool(getattr(type(marker), METADATA_ATTRIBUTE_FLAG, False))


def markers_of(markers: Iterable[Any], kind: Type[M]) -> Tuple[M, ...]:
    """Return the markers of exactly ``kind`` (or a subclass)."""
    return tuple(m for m in markers if isinstance(m, kind))


def has_marker(markers: Iterable[Any], kind: Type[Marker]) -> bool:
    return any(isinstance(m, kind) for m in markers)


def single_marker(markers: Iterable[Any], kind: Type[M]) -> Optional[M]:
    """Return the only marker of ``kind``, ``None`` when absent.

    Raises:
        InvalidDeclarationError: if the marker appears more than once.
    """
    found = markers_of(markers, kind)
    if len(found) > 1:
        raise InvalidDeclarationError(f"Only one {kind.__name__} marker is allowed per declaration.")
    return found[0] if found else None


__all__ = [
    "MARKERS_ATTR",
    "Marker",
    "stamp",
    "own_markers",
    "metadata_attribute",
    "is_metadata_attribute",
    "markers_of",
    "has_marker",
    "single_marker",
]
