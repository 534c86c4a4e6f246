"""Tests for the root caliber CLI."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from caliber import __version__
from caliber.cli import cli
from tests.conftest import SAMPLE_JOURNAL, cli_args


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "caliber" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_no_subcommand_prints_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage:" in result.output


@pytest.mark.parametrize("command", ["day", "tags", "filter", "later", "agenda", "hint", "init"])
def test_commands_registered(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert command in result.output


class TestGlobalFlags:
    def test_today_accepts_slashes(self, cli_runner: CliRunner, journal_path: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--journal", str(journal_path), "--today", "2026/02/03", "--json", "day", "show"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["date"] == "2026-02-03"

    def test_today_rejects_garbage(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--today", "soon", "day", "show"])
        assert result.exit_code == 2

    def test_today_from_env(
        self, cli_runner: CliRunner, journal_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CALIBER_TODAY", "2026-03-04")
        result = cli_runner.invoke(cli, ["--journal", str(journal_path), "--json", "day", "show"])
        assert json.loads(result.output)["data"]["date"] == "2026-03-04"

    def test_invalid_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "caliber.toml").write_text("[filters\n", encoding="utf-8")
        result = cli_runner.invoke(cli, ["day", "show"])
        assert result.exit_code == 1
        assert "Invalid TOML" in result.output

    def test_config_flag(
        self, cli_runner: CliRunner, journal_path: Path, tmp_path: Path
    ) -> None:
        journal_path.write_text(SAMPLE_JOURNAL, encoding="utf-8")
        custom = tmp_path / "custom.toml"
        custom.write_text('[filters]\ndefault = "!events"\n', encoding="utf-8")
        result = cli_runner.invoke(
            cli, ["-c", str(custom), *cli_args(journal_path, "--json", "filter")]
        )
        data = json.loads(result.output)["data"]
        assert data["query"] == "!events"
        assert [row["content"] for row in data["entries"]] == ["Dentist 3pm"]

    def test_verbose_shows_telemetry(self, cli_runner: CliRunner, journal_path: Path) -> None:
        journal_path.write_text(SAMPLE_JOURNAL, encoding="utf-8")
        result = cli_runner.invoke(cli, cli_args(journal_path, "-v", "day", "show"))
        assert result.exit_code == 0
        assert "DayService.show" in result.output
        assert "ms" in result.output
