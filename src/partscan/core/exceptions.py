from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class PartscanError(Exception):
    """Base exception for partscan."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": {k: _describe(v) for k, v in self.context.items()},
        }


class PartDiscoveryError(PartscanError):
    """Raised when a class cannot be turned into a part definition.

    The offending class and member (when known) are kept in ``context`` under
    the ``part_type`` and ``member`` keys.
    """

    def __init__(
        self,
        message: str = "",
        *,
        part_type: Any = None,
        member: Optional[str] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if part_type is not None:
            ctx["part_type"] = part_type
        if member:
            ctx["member"] = member
        super().__init__(message, context=ctx)

    @property
    def part_type(self) -> Any:
        return self.context.get("part_type")

    @property
    def member(self) -> Optional[str]:
        return self.context.get("member")

    def with_location(self, part_type: Any, member: Optional[str] = None) -> "PartDiscoveryError":
        """Record where the error happened without overwriting inner locations."""
        if part_type is not None:
            self.context.setdefault("part_type", part_type)
        if member:
            self.context.setdefault("member", member)
        return self

    def __str__(self) -> str:
        message = super().__str__()
        where = []
        if "part_type" in self.context:
            where.append(_describe(self.context["part_type"]))
        if self.context.get("member"):
            where.append(str(self.context["member"]))
        if not where:
            return message
        return f"{'.'.join(where)}: {message}"


class InvalidArgumentError(PartDiscoveryError, ValueError):
    """Raised when a required input is missing or of the wrong kind."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        PartDiscoveryError.__init__(self, message, **kwargs)
        ValueError.__init__(self, message)


class DuplicateMetadataKeyError(InvalidArgumentError):
    """Raised when two markers on one site contribute the same metadata key."""

    def __init__(self, key: str, **kwargs: Any) -> None:
        super().__init__(f"Metadata key '{key}' is declared more than once.", **kwargs)
        self.key = key


class InvalidDeclarationError(PartDiscoveryError, ValueError):
    """Raised when markers on a single site contradict each other."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        PartDiscoveryError.__init__(self, message, **kwargs)
        ValueError.__init__(self, message)


class InvalidOperationError(PartDiscoveryError, RuntimeError):
    """Raised for combinations that are only invalid given the whole class."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        PartDiscoveryError.__init__(self, message, **kwargs)
        RuntimeError.__init__(self, message)


class ConfigurationError(PartscanError, ValueError):
    """Raised when discovery configuration is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        PartscanError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


def _describe(value: Any) -> Any:
    if isinstance(value, type):
        return f"{value.__module__}.{value.__qualname__}"
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return repr(value)


__all__ = [
    "PartscanError",
    "PartDiscoveryError",
    "InvalidArgumentError",
    "DuplicateMetadataKeyError",
    "InvalidDeclarationError",
    "InvalidOperationError",
    "ConfigurationError",
]
