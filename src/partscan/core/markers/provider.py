"""Marker providers.

Discovery never touches Python's introspection APIs directly. It asks a
:class:`MarkerProvider` for the markers attached to a class, its members,
its public methods and its constructor candidates. The default
:class:`AnnotationMarkerProvider` reads markers stamped by decorators and
markers carried in ``typing.Annotated`` metadata.
"""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Annotated,
    Any,
    Callable,
    ClassVar,
    Dict,
    Generic,
    Iterable,
    List,
    Optional,
    Protocol,
    Tuple,
    get_args,
    get_origin,
    get_type_hints,
    runtime_checkable,
)

from partscan.core.exceptions import InvalidDeclarationError
from partscan.core.typeinfo import substitute

from .base import Marker, own_markers

logger = logging.getLogger(__name__)


class MemberKind(str, Enum):
    ATTRIBUTE = "attribute"
    PROPERTY = "property"


@dataclass(frozen=True)
class PartMember:
    """A public instance member of a part.

    Identity is the declaring type, the name, the declared type and the kind;
    markers are carried along but do not take part in equality.
    ``declared_type`` is ``None`` when the member has no annotation.
    """

    declaring_type: Any
    name: str
    declared_type: Any
    kind: MemberKind = MemberKind.ATTRIBUTE
    markers: Tuple[Marker, ...] = field(default=(), compare=False, repr=False)


@dataclass(frozen=True)
class ParameterInfo:
    name: str
    declared_type: Any
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD
    markers: Tuple[Marker, ...] = field(default=(), compare=False, repr=False)

    @property
    def is_variadic(self) -> bool:
        return self.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class MethodInfo:
    """A method or constructor candidate; ``parameters`` excludes self/cls.

    ``function`` is ``None`` for the implicit ``object.__init__``.
    """

    name: str
    function: Optional[Callable[..., Any]]
    parameters: Tuple[ParameterInfo, ...] = ()
    markers: Tuple[Marker, ...] = field(default=(), compare=False, repr=False)

    @property
    def is_public(self) -> bool:
        return self.name == "__init__" or not self.name.startswith("_")


@runtime_checkable
class MarkerProvider(Protocol):
    """Capability interface discovery uses to read declarations."""

    def type_markers(self, part_type: Any) -> Tuple[Marker, ...]:
        ...

    def members(self, part_type: Any) -> Iterable[PartMember]:
        ...

    def methods(self, part_type: Any) -> Iterable[MethodInfo]:
        ...

    def constructors(self, part_type: Any) -> Iterable[MethodInfo]:
        """Yield ``__init__`` first, then every classmethod candidate."""
        ...


def split_annotated(hint: Any) -> Tuple[Any, Tuple[Marker, ...]]:
    """Split ``Annotated[T, ...]`` into ``T`` and the markers in its metadata."""
    if get_origin(hint) is Annotated:
        base = get_args(hint)[0]
        return base, tuple(m for m in hint.__metadata__ if isinstance(m, Marker))
    return hint, ()


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _declaring_class(cls: type, name: str) -> type:
    return next((klass for klass in cls.__mro__ if name in vars(klass)), cls)


def _raw_annotations(obj: Any, cls: type) -> Dict[str, Any]:
    """The object's own annotations, unevaluated where they are strings."""
    try:
        return dict(inspect.get_annotations(obj))
    except NameError as exc:
        raise InvalidDeclarationError(
            f"Cannot read type annotations of {getattr(obj, '__qualname__', obj)!r}: {exc}",
            part_type=cls,
        ) from exc


def _may_carry_markers(raw: Any) -> bool:
    # Markers only travel in Annotated metadata, so an unresolved string
    # without it cannot hide one.
    if isinstance(raw, str):
        return "Annotated" in raw
    return bool(split_annotated(raw)[1])


_UNRESOLVED = object()


class AnnotationMarkerProvider:
    """Read markers from decorators and ``typing.Annotated`` metadata.

    Members are the public annotated attributes and the public properties
    across the MRO. A closed generic alias such as ``Box[int]`` is inspected
    through its generic class with type variables substituted, and so is a
    subclass that closes a generic base (``class IntBox(Box[int])``).

    Annotations are resolved one site at a time. A site that cannot be
    resolved is ignored when it carries no markers, so names imported only
    for type checkers do not turn a plain class into a failure.
    """

    def type_markers(self, part_type: Any) -> Tuple[Marker, ...]:
        cls, _ = self._resolve(part_type)
        return own_markers(cls)

    def members(self, part_type: Any) -> List[PartMember]:
        cls, bindings = self._resolve(part_type)
        scopes = self._class_bindings(cls, bindings)
        properties = self._properties(cls)
        members: List[PartMember] = []

        for name, (klass, raw) in self._annotation_sites(cls).items():
            if name in properties:
                continue
            hint = self._site_hint(raw, klass.__module__, klass, name, cls)
            if hint is _UNRESOLVED or get_origin(hint) is ClassVar:
                continue
            declared, markers = split_annotated(hint)
            members.append(
                PartMember(part_type, name, substitute(declared, scopes.get(klass, {})), MemberKind.ATTRIBUTE, markers)
            )

        for name, prop in properties.items():
            stamped = own_markers(prop.fget)
            raw = _raw_annotations(prop.fget, cls).get("return")
            hint = None
            if raw is not None:
                hint = self._site_hint(raw, prop.fget.__module__, cls, name, cls, stamped)
                if hint is _UNRESOLVED:
                    continue
            declared, markers = split_annotated(hint) if hint is not None else (None, ())
            if declared is not None:
                declared = substitute(declared, scopes.get(_declaring_class(cls, name), {}))
            members.append(PartMember(part_type, name, declared, MemberKind.PROPERTY, stamped + markers))
        return members

    def methods(self, part_type: Any) -> List[MethodInfo]:
        cls, _ = self._resolve(part_type)
        found = self._namespace_items(cls, inspect.isfunction)
        return [
            MethodInfo(name, func, self._parameters(func, cls, {}, resolve=False), own_markers(func))
            for name, func in found.items()
            if _is_public(name)
        ]

    def constructors(self, part_type: Any) -> List[MethodInfo]:
        cls, bindings = self._resolve(part_type)
        scopes = self._class_bindings(cls, bindings)
        init = cls.__init__
        if inspect.isfunction(init):
            scope = scopes.get(_declaring_class(cls, "__init__"), {})
            candidates = [MethodInfo("__init__", init, self._parameters(init, cls, scope), own_markers(init))]
        else:
            # object.__init__ or a C-level slot: nothing to inject.
            candidates = [MethodInfo("__init__", None)]

        factories = self._namespace_items(cls, lambda value: isinstance(value, classmethod))
        for name, method in factories.items():
            func = method.__func__
            scope = scopes.get(_declaring_class(cls, name), {})
            candidates.append(MethodInfo(name, func, self._parameters(func, cls, scope), own_markers(func)))
        return candidates

    # ------------------------------------------------------------------

    @staticmethod
    def _resolve(part_type: Any) -> Tuple[type, Dict[Any, Any]]:
        origin = get_origin(part_type)
        if origin is None:
            return part_type, {}
        parameters = getattr(origin, "__parameters__", ())
        return origin, dict(zip(parameters, get_args(part_type)))

    @staticmethod
    def _class_bindings(cls: type, bindings: Dict[Any, Any]) -> Dict[type, Dict[Any, Any]]:
        """Type variable bindings for ``cls`` and each class in its MRO.

        Walking the MRO in order means every subclass has filled in its
        generic bases before those bases are visited.
        """
        scopes: Dict[type, Dict[Any, Any]] = {cls: dict(bindings)}
        for klass in cls.__mro__:
            scope = scopes.setdefault(klass, {})
            for base in vars(klass).get("__orig_bases__", ()):
                origin = get_origin(base)
                if not isinstance(origin, type) or origin in (Generic, Protocol):
                    continue
                parameters = getattr(origin, "__parameters__", ())
                arguments = tuple(substitute(arg, scope) for arg in get_args(base))
                scopes.setdefault(origin, {}).update(zip(parameters, arguments))
        return scopes

    @staticmethod
    def _annotation_sites(cls: type) -> Dict[str, Tuple[type, Any]]:
        """Public annotated names with their declaring class and raw annotation."""
        sites: Dict[str, Tuple[type, Any]] = {}
        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            for name, raw in _raw_annotations(klass, cls).items():
                if _is_public(name):
                    sites[name] = (klass, raw)
        return sites

    @staticmethod
    def _site_hint(
        raw: Any,
        module: str,
        owner: type,
        name: str,
        cls: type,
        stamped: Tuple[Marker, ...] = (),
    ) -> Any:
        """Resolve one annotation, or return ``_UNRESOLVED`` for an unmarked site."""
        holder = type(owner.__name__, (), {"__module__": module, "__annotations__": {name: raw}})
        try:
            return get_type_hints(holder, localns={owner.__name__: owner}, include_extras=True)[name]
        except (NameError, TypeError, AttributeError) as exc:
            if stamped or _may_carry_markers(raw):
                raise InvalidDeclarationError(
                    f"Cannot resolve type annotation of {name!r}: {exc}",
                    part_type=cls,
                    member=name,
                ) from exc
            logger.debug("Ignoring unresolvable annotation %s.%s: %s", cls.__qualname__, name, exc)
            return _UNRESOLVED

    @staticmethod
    def _hints(func: Callable[..., Any], cls: type) -> Dict[str, Any]:
        try:
            return get_type_hints(func, localns={cls.__name__: cls}, include_extras=True)
        except (NameError, TypeError, AttributeError) as exc:
            raise InvalidDeclarationError(
                f"Cannot resolve type annotations of {func.__qualname__!r}: {exc}",
                part_type=cls,
            ) from exc

    @staticmethod
    def _namespace_items(cls: type, predicate: Callable[[Any], bool]) -> Dict[str, Any]:
        """Most-derived value per name across the MRO, filtered by ``predicate``."""
        found: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            for name, value in vars(klass).items():
                if predicate(value):
                    found[name] = value
                else:
                    found.pop(name, None)
        return found

    def _properties(self, cls: type) -> Dict[str, property]:
        found = self._namespace_items(cls, lambda value: isinstance(value, property))
        return {name: prop for name, prop in found.items() if _is_public(name) and prop.fget is not None}

    def _parameters(
        self,
        func: Callable[..., Any],
        cls: type,
        bindings: Dict[Any, Any],
        *,
        resolve: bool = True,
    ) -> Tuple[ParameterInfo, ...]:
        parameters = list(inspect.signature(func).parameters.values())[1:]
        hints = self._hints(func, cls) if resolve else {}
        result: List[ParameterInfo] = []
        for parameter in parameters:
            if resolve:
                hint = hints.get(parameter.name)
            else:
                hint = None if parameter.annotation is parameter.empty else parameter.annotation
            declared, markers = split_annotated(hint) if hint is not None else (None, ())
            if declared is not None:
                declared = substitute(declared, bindings)
            result.append(ParameterInfo(parameter.name, declared, parameter.kind, markers))
        return tuple(result)


__all__ = [
    "MemberKind",
    "PartMember",
    "ParameterInfo",
    "MethodInfo",
    "MarkerProvider",
    "AnnotationMarkerProvider",
    "split_annotated",
]
