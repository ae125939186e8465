"""
partscan configuration management (YAML + environment overrides).
"""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import jsonschema
import yaml

from partscan.core.exceptions import ConfigurationError
from partscan.core.utils.merge import deep_merge
from partscan.data import get_data_path, read_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "PARTSCAN_"
SCHEMA_NAME = "config.schema.yaml"


class ConfigManager:
    """Load, merge, and validate partscan configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: PARTSCAN_<SECTION>__<KEY>
    2. Project config: <root>/.partscan/config/*.yaml (alphabetical order)
    3. Project file: <root>/partscan.yaml
    4. Bundled defaults: partscan.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = Path(root) if root is not None else Path.cwd()
        self.core_config_dir = get_data_path("config")
        self.project_file = self.root / "partscan.yaml"
        self.project_config_dir = self.root / ".partscan" / "config"

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Cannot read config file {path}: {exc}", context={"path": str(path)}) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {path} must contain a mapping, got {type(data).__name__}",
                context={"path": str(path)},
            )
        return data

    def iter_config_files(self) -> List[Path]:
        """Config files in merge order (lowest priority first)."""
        files = sorted(self.core_config_dir.glob("*.yaml"))
        if self.project_file.is_file():
            files.append(self.project_file)
        if self.project_config_dir.is_dir():
            files.extend(sorted(self.project_config_dir.glob("*.yaml")))
        return files

    def load_config(
        self,
        *,
        validate: bool = True,
        env: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {}
        for path in self.iter_config_files():
            logger.debug("Loading config layer %s", path)
            cfg = deep_merge(cfg, self.load_yaml(path))

        self.apply_env_overrides(cfg, os.environ if env is None else env)

        if validate:
            self.validate(cfg)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dot-separated key (e.g. ``discovery.onError``)."""
        node: Any = self.load_config()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    # --- environment overrides -------------------------------------------

    def _iter_env_overrides(self, env: Mapping[str, str]) -> Iterator[Tuple[List[str], Any, str]]:
        for key in sorted(env.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            segments = raw.split("__")
            if not raw or any(not seg for seg in segments):
                raise ConfigurationError(f"Malformed {ENV_PREFIX}* key: '{key}'", context={"key": key})
            yield segments, _coerce(env[key]), key

    def apply_env_overrides(self, cfg: Dict[str, Any], env: Mapping[str, str]) -> None:
        for segments, value, key in self._iter_env_overrides(env):
            node = cfg
            for segment in segments[:-1]:
                name = _match_key(node, segment)
                child = node.get(name)
                if not isinstance(child, dict):
                    child = {}
                    node[name] = child
                node = child
            node[_match_key(node, segments[-1])] = value
            logger.debug("Applied environment override %s", key)

    # --- validation ------------------------------------------------------

    def validate(self, cfg: Dict[str, Any]) -> None:
        schema = read_yaml("schemas", SCHEMA_NAME)
        validator = jsonschema.Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(cfg), key=lambda e: [str(p) for p in e.path])
        if not errors:
            return
        messages = []
        for error in errors:
            where = ".".join(str(p) for p in error.path)
            messages.append(f"{where}: {error.message}" if where else error.message)
        raise ConfigurationError(
            "Invalid configuration:\n" + "\n".join(f"- {m}" for m in messages),
            context={"errors": messages},
        )


def _normalize_key(key: str) -> str:
    return key.replace("_", "").replace("-", "").lower()


def _match_key(node: Dict[str, Any], segment: str) -> str:
    """Existing key matching ``segment`` case- and underscore-insensitively."""
    wanted = _normalize_key(segment)
    for existing in node:
        if _normalize_key(str(existing)) == wanted:
            return existing
    return segment.lower()


def _coerce(value: str) -> Any:
    text = value.strip()
    low = text.lower()
    if low in {"true", "false"}:
        return low == "true"
    if low in {"null", "none", ""}:
        return None
    if re.fullmatch(r"[-+]?\d+", text):
        return int(text)
    return text


__all__ = ["ConfigManager", "ENV_PREFIX"]
