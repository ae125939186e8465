"""Contract type normalization.

Every question discovery asks about the *shape* of a type lives here:
whether a class is an open generic definition, how an import wrapper is
unwrapped to its contract, which element type a collection import binds to
and whether a collection can be built for constructor injection.
"""
from __future__ import annotations

import collections
import collections.abc as abc
import inspect
from typing import Any, Dict, Optional, Tuple, TypeVar, get_args, get_origin

from partscan.core.exceptions import InvalidDeclarationError
from partscan.core.markers.wrappers import ExportFactory, Lazy

# Interfaces the composition engine satisfies with a plain list.
READ_ONLY_COLLECTIONS: Tuple[type, ...] = (
    abc.Iterable,
    abc.Collection,
    abc.Sequence,
    abc.Reversible,
)

_BUILTIN_COLLECTIONS: Tuple[type, ...] = (list, set, frozenset, tuple, collections.deque)
_NOT_ELEMENT_COLLECTIONS: Tuple[type, ...] = (str, bytes, bytearray, memoryview, abc.Mapping)


def is_open_generic(tp: Any) -> bool:
    """True for a generic class definition with unbound type parameters."""
    return isinstance(tp, type) and get_origin(tp) is None and bool(getattr(tp, "__parameters__", ()))


def generic_definition(tp: Any) -> Optional[type]:
    """Return the generic class behind a parameterised alias, else ``None``."""
    origin = get_origin(tp)
    return origin if isinstance(origin, type) else None


def is_part_type(tp: Any) -> bool:
    """True for values discovery can inspect: classes and aliases of classes."""
    return isinstance(tp, type) or generic_definition(tp) is not None


def _origin_subclass_of(tp: Any, base: type) -> bool:
    origin = get_origin(tp)
    return isinstance(origin, type) and issubclass(origin, base) and bool(get_args(tp))


def is_lazy_type(tp: Any) -> bool:
    return _origin_subclass_of(tp, Lazy)


def is_export_factory_type(tp: Any) -> bool:
    return _origin_subclass_of(tp, ExportFactory)


def unwrap_import_type(tp: Any) -> Any:
    """Strip one ``Lazy``/``ExportFactory`` level from an import type."""
    if is_lazy_type(tp) or is_export_factory_type(tp):
        return get_args(tp)[0]
    return tp


def element_type(tp: Any) -> Any:
    """Return the contract type of a collection import.

    Raises:
        InvalidDeclarationError: if ``tp`` is not a homogeneous collection.
    """
    origin = get_origin(tp) or tp
    if not isinstance(origin, type) or not issubclass(origin, abc.Iterable) or issubclass(
        origin, _NOT_ELEMENT_COLLECTIONS
    ):
        raise InvalidDeclarationError(f"ImportMany requires a collection type, got {describe_type(tp)}.")

    args = get_args(tp)
    if origin is tuple:
        if len(args) != 2 or args[1] is not Ellipsis:
            raise InvalidDeclarationError(
                f"ImportMany on a tuple requires the tuple[T, ...] form, got {describe_type(tp)}."
            )
        element = args[0]
    elif args:
        element = args[0]
    else:
        element = Any
    return unwrap_import_type(element)


def is_collection_constructible(tp: Any) -> bool:
    """True when the engine can build ``tp`` to pass into a constructor."""
    origin = get_origin(tp) or tp
    if origin in READ_ONLY_COLLECTIONS:
        return True
    if not isinstance(origin, type) or not issubclass(origin, abc.Collection):
        return False
    if inspect.isabstract(origin) or origin.__name__.startswith("_"):
        return False
    if origin in _BUILTIN_COLLECTIONS:
        return True
    return _callable_without_arguments(origin)


def _callable_without_arguments(cls: type) -> bool:
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return False
    for parameter in signature.parameters.values():
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            continue
        if parameter.default is parameter.empty:
            return False
    return True


def substitute(tp: Any, bindings: Dict[Any, Any]) -> Any:
    """Replace type variables in ``tp`` with their bound arguments."""
    if not bindings:
        return tp
    if isinstance(tp, TypeVar):
        return bindings.get(tp, tp)
    parameters = getattr(tp, "__parameters__", ())
    if parameters and get_origin(tp) is not None:
        return tp[tuple(bindings.get(p, p) for p in parameters)]
    return tp


def describe_type(tp: Any) -> str:
    """Readable, stable name for a type or alias."""
    if tp is None:
        return "None"
    if isinstance(tp, type) and get_origin(tp) is None:
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp).replace("typing.", "")


__all__ = [
    "READ_ONLY_COLLECTIONS",
    "is_open_generic",
    "generic_definition",
    "is_part_type",
    "is_lazy_type",
    "is_export_factory_type",
    "unwrap_import_type",
    "element_type",
    "is_collection_constructible",
    "substitute",
    "describe_type",
]
