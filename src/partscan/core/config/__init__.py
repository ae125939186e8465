"""Configuration loading and typed accessors."""
from __future__ import annotations

from .base import BaseDomainConfig
from .domains import DiscoveryConfig, LoggingConfig
from .manager import ENV_PREFIX, ConfigManager

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "DiscoveryConfig",
    "ENV_PREFIX",
    "LoggingConfig",
]
