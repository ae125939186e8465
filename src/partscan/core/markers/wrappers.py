"""Import wrapper types.

An import declared as ``Lazy[T]``, ``LazyWithMetadata[T, M]`` or
``ExportFactory[T]`` binds to the contract ``T``. The composition engine
supplies the wrapper instances; these classes only fix their shape.
"""
from __future__ import annotations

from typing import Any, Callable, Generic, Mapping, Optional, Tuple, TypeVar

T = TypeVar("T")
TMetadata = TypeVar("TMetadata")

_UNSET = object()


class Lazy(Generic[T]):
    """Defers producing an export until ``value`` is first read."""

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._value: Any = _UNSET

    @property
    def is_value_created(self) -> bool:
        return self._value is not _UNSET

    @property
    def value(self) -> T:
        if self._value is _UNSET:
            self._value = self._factory()
        return self._value


class LazyWithMetadata(Lazy[T], Generic[T, TMetadata]):
    """A :class:`Lazy` export that also exposes the export's metadata."""

    def __init__(self, factory: Callable[[], T], metadata: TMetadata) -> None:
        super().__init__(factory)
        self.metadata = metadata


class ExportFactory(Generic[T]):
    """Creates a fresh export (and its sharing scope) on every call.

    ``factory`` returns the export together with an optional disposal
    callback; :meth:`create_export` hands back both.
    """

    def __init__(
        self,
        factory: Callable[[], Tuple[T, Optional[Callable[[], None]]]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._factory = factory
        self.metadata = dict(metadata or {})

    def create_export(self) -> Tuple[T, Optional[Callable[[], None]]]:
        return self._factory()


__all__ = ["Lazy", "LazyWithMetadata", "ExportFactory"]
