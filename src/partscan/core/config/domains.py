"""Domain-specific configuration accessors."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Optional

from partscan.core.discovery.scanner import ErrorPolicy

from .base import BaseDomainConfig


class DiscoveryConfig(BaseDomainConfig):
    """Module scanning settings (``discovery`` section)."""

    def _config_section(self) -> str:
        return "discovery"

    @cached_property
    def on_error(self) -> ErrorPolicy:
        return ErrorPolicy(self.section.get("onError", ErrorPolicy.RAISE.value))

    @cached_property
    def max_workers(self) -> Optional[int]:
        value = self.section.get("maxWorkers")
        return int(value) if value else None


class LoggingConfig(BaseDomainConfig):
    """Log level and optional log file (``logging`` section)."""

    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level") or "WARNING").upper()

    @cached_property
    def path(self) -> Optional[Path]:
        raw = self.section.get("path")
        if not raw:
            return None
        path = Path(raw).expanduser()
        return path if path.is_absolute() else self.root / path


__all__ = ["DiscoveryConfig", "LoggingConfig"]
