from __future__ import annotations

import json
from pathlib import Path

import pytest

from partscan.cli._dispatcher import build_parser, discover_commands, main


def _run(capsys: pytest.CaptureFixture, argv: list[str]) -> tuple[int, str, str]:
    code = main(argv)
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestDispatcher:
    def test_commands_are_discovered(self) -> None:
        commands = discover_commands()
        assert {"scan", "part", "config"} <= set(commands)
        assert all(info["summary"] for info in commands.values())

    def test_no_command_prints_help(self, capsys) -> None:
        code, out, _ = _run(capsys, [])
        assert code == 0
        assert "usage: partscan" in out

    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--version"])
        assert exc.value.code == 0
        assert "partscan" in capsys.readouterr().out

    def test_invalid_logging_config_is_reported(self, capsys, project_root: Path, write_yaml) -> None:
        write_yaml(project_root / "partscan.yaml", "logging:\n  level: loud\n")
        code, _, err = _run(capsys, ["config"])
        assert code == 2
        assert "Invalid configuration" in err


class TestScanCommand:
    def test_json_report(self, capsys, project_root: Path) -> None:
        code, out, _ = _run(capsys, ["scan", "fixtures.sample_parts", "--json", "--root", str(project_root)])
        assert code == 0
        payload = json.loads(out)
        assert payload["module"] == "fixtures.sample_parts"
        assert sorted(p["type"] for p in payload["parts"]) == [
            "fixtures.sample_parts.ConsoleLogger",
            "fixtures.sample_parts.Mailer",
        ]
        assert payload["skipped"] == ["fixtures.sample_parts.Hidden"]
        assert payload["failures"] == []

    def test_text_report(self, capsys, project_root: Path) -> None:
        code, out, _ = _run(capsys, ["scan", "fixtures.sample_parts"])
        assert code == 0
        assert "Parts: 2" in out
        assert "export fixtures.sample_parts.Logger" in out
        assert "Not discoverable: fixtures.sample_parts.Hidden" in out

    def test_raise_policy_reports_error(self, capsys, project_root: Path) -> None:
        code, out, err = _run(capsys, ["scan", "fixtures.mixed_parts"])
        assert code == 1
        assert out == ""
        assert "Error: fixtures.mixed_parts.Conflicted.service" in err

    def test_raise_policy_json_error(self, capsys, project_root: Path) -> None:
        code, _, err = _run(capsys, ["scan", "fixtures.mixed_parts", "--json"])
        assert code == 1
        error = json.loads(err)["error"]
        assert error["code"] == "InvalidDeclarationError"
        assert error["context"]["member"] == "service"

    def test_skip_policy_lists_failures(self, capsys, project_root: Path) -> None:
        code, out, _ = _run(capsys, ["scan", "fixtures.mixed_parts", "--on-error", "skip", "--workers", "2", "--json"])
        assert code == 1
        payload = json.loads(out)
        assert [p["type"] for p in payload["parts"]] == ["fixtures.mixed_parts.Good"]
        assert [f["type"] for f in payload["failures"]] == ["fixtures.mixed_parts.Conflicted"]

    def test_policy_from_project_config(self, capsys, project_root: Path, write_yaml) -> None:
        write_yaml(project_root / "partscan.yaml", "discovery:\n  onError: skip\n")
        code, out, _ = _run(capsys, ["scan", "fixtures.mixed_parts", "--root", str(project_root)])
        assert code == 1
        assert "Failures: 1" in out

    def test_unknown_module(self, capsys, project_root: Path) -> None:
        code, _, err = _run(capsys, ["scan", "fixtures.nowhere"])
        assert code == 1
        assert "Cannot import module" in err


class TestPartCommand:
    def test_json_part(self, capsys, project_root: Path) -> None:
        code, out, _ = _run(capsys, ["part", "fixtures.sample_parts:Mailer", "--json"])
        assert code == 0
        payload = json.loads(out)
        assert payload["type"] == "fixtures.sample_parts.Mailer"
        part = payload["part"]
        assert part["sharingBoundary"] == ""
        assert part["imports"]["logger"]["cardinality"] == "ExactlyOne"
        assert part["imports"]["logger"]["contract"]["type"] == "fixtures.sample_parts.Logger"

    def test_text_part(self, capsys, project_root: Path) -> None:
        code, out, _ = _run(capsys, ["part", "fixtures.sample_parts:ConsoleLogger"])
        assert code == 0
        assert "Part: fixtures.sample_parts.ConsoleLogger" in out
        assert "export: fixtures.sample_parts.Logger" in out
        assert "level: info" in out

    def test_not_a_part(self, capsys, project_root: Path) -> None:
        code, out, _ = _run(capsys, ["part", "fixtures.sample_parts:Helper", "--json"])
        assert code == 0
        assert json.loads(out) == {"type": "fixtures.sample_parts.Helper", "part": None}

    def test_failed_part(self, capsys, project_root: Path) -> None:
        code, _, err = _run(capsys, ["part", "fixtures.mixed_parts:Conflicted"])
        assert code == 1
        assert "both import and export" in err

    @pytest.mark.parametrize("target", ["fixtures.sample_parts", "fixtures.sample_parts:Missing"])
    def test_bad_target(self, capsys, project_root: Path, target: str) -> None:
        code, _, err = _run(capsys, ["part", target])
        assert code == 1
        assert err.startswith("Error:")


class TestConfigCommand:
    def test_json_config(self, capsys, project_root: Path) -> None:
        code, out, _ = _run(capsys, ["config", "--json"])
        assert code == 0
        assert json.loads(out)["discovery"]["onError"] == "raise"

    def test_single_key(self, capsys, project_root: Path) -> None:
        code, out, _ = _run(capsys, ["config", "discovery.onError", "--json"])
        assert code == 0
        assert json.loads(out) == {"discovery": {"onError": "raise"}}

    def test_yaml_text(self, capsys, project_root: Path, write_yaml) -> None:
        write_yaml(project_root / "partscan.yaml", "discovery:\n  maxWorkers: 4\n")
        code, out, _ = _run(capsys, ["config", "discovery"])
        assert code == 0
        assert "maxWorkers: 4" in out

    def test_unknown_key(self, capsys, project_root: Path) -> None:
        code, _, err = _run(capsys, ["config", "discovery.nothing"])
        assert code == 1
        assert "Unknown configuration key" in err
