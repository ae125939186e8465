"""Unified CLI output formatting (JSON and text modes)."""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional


class OutputFormatter:
    """Writes command results either as JSON or as plain text."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        """Output key-value pair in text mode."""
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")

    def error(self, error: Exception, message: Optional[str] = None) -> None:
        """Report ``error`` on stderr; JSON mode uses the error's payload when it has one."""
        msg = message or str(error)
        if self.json_mode:
            payload: Dict[str, Any]
            to_json = getattr(error, "to_json_error", None)
            if callable(to_json):
                payload = {"error": to_json()}
            else:
                payload = {"error": {"message": msg, "code": type(error).__name__, "context": {}}}
            print(json.dumps(payload, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)


def format_json(data: Any, indent: int = 2) -> str:
    return json.dumps(data, indent=indent, default=str)


__all__ = ["OutputFormatter", "format_json"]
