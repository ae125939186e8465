from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'partscan' and tests/ importable for fixture modules
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from partscan.core.stdlib_logging import reset_logging_for_tests


@pytest.fixture(autouse=True)
def _clean_partscan_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment overrides from the developer shell must not leak into tests."""
    for key in list(os.environ):
        if key.startswith("PARTSCAN_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging_for_tests()


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty project root used as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_yaml():
    """Write a YAML document (given as text) to a path, creating parents."""

    def _write(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
