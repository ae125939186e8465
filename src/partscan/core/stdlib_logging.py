"""Stdlib logging setup for the ``partscan`` logger hierarchy."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "partscan"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_INSTALLED_HANDLER: Optional[logging.Handler] = None
_INSTALLED_TARGET: Optional[str] = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(*, level: str = "WARNING", log_path: Optional[Path] = None) -> logging.Logger:
    """Send ``partscan`` logs to ``log_path``, or to stderr when no path is given.

    Idempotent per-process: reconfiguring with the same target only updates
    the level; switching targets replaces the previously installed handler.
    """
    global _INSTALLED_HANDLER, _INSTALLED_TARGET

    logger = logging.getLogger(LOGGER_NAME)
    numeric = _level_from_name(level)
    logger.setLevel(numeric)

    target = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"
    if _INSTALLED_HANDLER is not None and _INSTALLED_TARGET == target:
        _INSTALLED_HANDLER.setLevel(numeric)
        return logger

    if _INSTALLED_HANDLER is not None:
        logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()

    if log_path is not None:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    _INSTALLED_HANDLER = handler
    _INSTALLED_TARGET = target
    return logger


def reset_logging_for_tests() -> None:
    """Test-only: remove the handler installed by :func:`configure_logging`."""
    global _INSTALLED_HANDLER, _INSTALLED_TARGET
    if _INSTALLED_HANDLER is not None:
        logger = logging.getLogger(LOGGER_NAME)
        logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
    logging.getLogger(LOGGER_NAME).setLevel(logging.NOTSET)
    _INSTALLED_HANDLER = None
    _INSTALLED_TARGET = None


__all__ = ["configure_logging", "reset_logging_for_tests", "LOGGER_NAME"]
