"""Base class for section-specific configuration accessors."""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .manager import ConfigManager


class BaseDomainConfig(ABC):
    """Typed view over one top-level section of the merged configuration.

    Usage:
        class MyConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "mySection"

            @cached_property
            def my_setting(self) -> str:
                return self.section.get("mySetting", "default")

        cfg = MyConfig(root=Path("/path/to/project"))
        print(cfg.my_setting)
    """

    def __init__(self, root: Optional[Path] = None, *, config: Optional[Mapping[str, Any]] = None) -> None:
        """Initialize domain config.

        Args:
            root: Project root holding ``partscan.yaml`` / ``.partscan/``. Defaults to cwd.
            config: Already merged configuration; skips loading from disk.
        """
        self._root = Path(root) if root is not None else None
        if config is not None:
            self._config: Dict[str, Any] = dict(config)
        else:
            self._config = ConfigManager(self._root).load_config()

    @property
    def root(self) -> Path:
        return self._root if self._root is not None else Path.cwd()

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level config key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        return self._config.get(self._config_section(), {}) or {}


__all__ = ["BaseDomainConfig"]
