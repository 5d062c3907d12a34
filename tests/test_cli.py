"""Tests for the snote-grep command line."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from snote_grep.cli.main import cli

KILL = "[12:00:00] -irc.example-  *** KILL: user banned"
REMOTE = "[12:01:00] -irc.example-  *** REMOTEKILL: remote user banned"
OPER = "[12:02:00] -irc.example-  *** OPER: nick is now an operator"


@pytest.fixture(autouse=True)
def no_user_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("snote_grep.cli.main.DEFAULT_SETTINGS_PATH", tmp_path / "no-config.yml")


@pytest.fixture()
def log_dir(tmp_path: Path) -> Path:
    logs = tmp_path / "logs"
    (logs / "net").mkdir(parents=True)
    (logs / "a.log").write_text(f"{KILL}\nchatter\n{REMOTE}\n")
    (logs / "net" / "b.log").write_text(f"{OPER}\n")
    return logs


def _invoke(*args: str):
    return CliRunner().invoke(cli, list(args))


class TestOutput:
    def test_end_to_end_example(self, tmp_path: Path) -> None:
        (tmp_path / "a.log").write_text(KILL + "\n")
        out = tmp_path / "out.txt"
        result = _invoke("-s", "KILL", "-o", str(out), str(tmp_path / "a.log"))
        assert result.exit_code == 0, result.output
        assert out.read_text() == KILL + "\n"

    def test_stdout_by_default(self, log_dir: Path) -> None:
        result = _invoke(str(log_dir))
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [KILL, REMOTE, OPER]

    def test_default_path_is_cwd(self, log_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(log_dir)
        result = _invoke("-s", "OPER")
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [OPER]

    def test_snote_filter_includes_remote(self, log_dir: Path) -> None:
        result = _invoke("-s", "kill", str(log_dir))
        assert result.output.splitlines() == [KILL, REMOTE]

    def test_ignore_remote(self, log_dir: Path) -> None:
        result = _invoke("-s", "KILL", "-a", str(log_dir))
        assert result.output.splitlines() == [KILL]

    def test_strip_and_filename(self, log_dir: Path) -> None:
        result = _invoke("-s", "OPER", "--strip", "-H", str(log_dir))
        path = str(log_dir / "net" / "b.log")
        assert result.output.splitlines() == [f"{path}:nick is now an operator"]

    def test_format_template(self, log_dir: Path) -> None:
        result = _invoke("--format", "{snote}|{server_name}|{filename}", str(log_dir))
        assert result.output.splitlines() == [
            "KILL|irc.example|a.log",
            "REMOTEKILL|irc.example|a.log",
            "OPER|irc.example|b.log",
        ]

    def test_json(self, log_dir: Path) -> None:
        result = _invoke("--json", "-s", "OPER", str(log_dir))
        (line,) = result.output.splitlines()
        data = json.loads(line)
        assert data["snote"] == "OPER"
        assert data["line"] == OPER
        assert data["dir"] == str(log_dir / "net") + os.sep

    def test_null_delimited(self, log_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.bin"
        result = _invoke("-0", "--format", "{time}", "-o", str(out), str(log_dir))
        assert result.exit_code == 0, result.output
        assert out.read_bytes() == b"12:00:00\x0012:01:00\x0012:02:00\x00"

    def test_fast_mode_same_records(self, log_dir: Path) -> None:
        result = _invoke("--fast", "--workers", "4", str(log_dir))
        assert result.exit_code == 0, result.output
        assert sorted(result.output.splitlines()) == sorted([KILL, REMOTE, OPER])

    def test_output_file_is_truncated(self, log_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.txt"
        out.write_text("stale contents\n" * 10)
        _invoke("-s", "OPER", "-o", str(out), str(log_dir))
        assert out.read_text() == OPER + "\n"


class TestErrors:
    def test_unknown_template_field_is_usage_error(self, log_dir: Path) -> None:
        result = _invoke("--format", "{nick}", str(log_dir))
        assert result.exit_code == 2
        assert "Unknown template field" in result.output

    def test_unopenable_output_is_fatal(self, log_dir: Path, tmp_path: Path) -> None:
        result = _invoke("-o", str(tmp_path / "missing" / "out.txt"), str(log_dir))
        assert result.exit_code == 1
        assert "could not open output file" in result.output

    def test_missing_input_is_logged_and_skipped(self, log_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.txt"
        result = _invoke("-s", "OPER", "-o", str(out), str(tmp_path / "nope"), str(log_dir))
        assert result.exit_code == 0
        assert "could not read" in result.output
        assert out.read_text() == OPER + "\n"

    def test_quiet_hides_warnings(self, log_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.txt"
        result = _invoke("-q", "-o", str(out), str(tmp_path / "nope"))
        assert result.exit_code == 0
        assert "could not read" not in result.output


class TestSettingsFile:
    def test_settings_supply_defaults(self, log_dir: Path, tmp_path: Path) -> None:
        config = tmp_path / "config.yml"
        config.write_text("snote: KILL\nignore_remote: true\n")
        result = _invoke("--config", str(config), str(log_dir))
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [KILL]

    def test_command_line_overrides_settings(self, log_dir: Path, tmp_path: Path) -> None:
        config = tmp_path / "config.yml"
        config.write_text("snote: KILL\nignore_remote: true\n")
        result = _invoke("--config", str(config), "--no-ignore-remote", str(log_dir))
        assert result.output.splitlines() == [KILL, REMOTE]

    def test_default_settings_path(
        self, log_dir: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config = tmp_path / "default.yml"
        config.write_text("format: '{snote}'\n")
        monkeypatch.setattr("snote_grep.cli.main.DEFAULT_SETTINGS_PATH", config)
        result = _invoke(str(log_dir))
        assert result.output.splitlines() == ["KILL", "REMOTEKILL", "OPER"]

    def test_invalid_settings_is_usage_error(self, log_dir: Path, tmp_path: Path) -> None:
        config = tmp_path / "config.yml"
        config.write_text("colour: red\n")
        result = _invoke("--config", str(config), str(log_dir))
        assert result.exit_code == 2
        assert "Unknown setting" in result.output


class TestStats:
    def test_stats_summary(self, log_dir: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.txt"
        result = _invoke("--stats", "-o", str(out), str(log_dir))
        assert result.exit_code == 0, result.output
        assert "Scanned 2 file(s)" in result.output
        assert "3 record(s)" in result.output


def test_missing_settings_file_is_usage_error(log_dir: Path, tmp_path: Path) -> None:
    result = _invoke("--config", str(tmp_path / "absent.yml"), str(log_dir))
    assert result.exit_code == 2


def test_version() -> None:
    result = _invoke("--version")
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_unreadable_default_settings_is_usage_error(
    log_dir: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("snote_grep.cli.main.DEFAULT_SETTINGS_PATH", tmp_path)
    result = _invoke(str(log_dir))
    assert result.exit_code == 2
    assert "Could not read settings file" in result.output
