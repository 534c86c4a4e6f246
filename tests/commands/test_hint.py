"""Tests for the hint command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from caliber.cli import cli
from tests.conftest import SAMPLE_JOURNAL, cli_args


class TestHintCommand:
    def test_tag_hint(self, cli_runner: CliRunner, journal_path: Path) -> None:
        journal_path.write_text(SAMPLE_JOURNAL, encoding="utf-8")
        result = cli_runner.invoke(cli, cli_args(journal_path, "--json", "hint", "#wo"))
        assert result.exit_code == 0
        hint = json.loads(result.output)["data"]["hint"]
        assert hint["kind"] == "tags"
        assert hint["items"] == ["#work"]
        assert hint["first_completion"] == "rk"

    def test_quiet_prints_completion(self, cli_runner: CliRunner, journal_path: Path) -> None:
        journal_path.write_text(SAMPLE_JOURNAL, encoding="utf-8")
        result = cli_runner.invoke(cli, cli_args(journal_path, "-q", "hint", "#wo"))
        assert result.output.strip() == "rk"

    def test_command_mode(self, cli_runner: CliRunner, journal_path: Path) -> None:
        result = cli_runner.invoke(
            cli, cli_args(journal_path, "--json", "hint", "--mode", "command", "go")
        )
        hint = json.loads(result.output)["data"]["hint"]
        assert hint["kind"] == "commands"
        assert hint["first_completion"] == "to"

    def test_entry_mode_dates(self, cli_runner: CliRunner, journal_path: Path) -> None:
        result = cli_runner.invoke(
            cli, cli_args(journal_path, "--json", "hint", "--mode", "entry", "Call @tom")
        )
        hint = json.loads(result.output)["data"]["hint"]
        assert hint["kind"] == "date_values"
        assert hint["first_completion"] == "orrow"

    def test_inactive(self, cli_runner: CliRunner, journal_path: Path) -> None:
        result = cli_runner.invoke(cli, cli_args(journal_path, "hint", "plain text"))
        assert result.exit_code == 0
        assert "No hints" in result.output

    def test_bad_mode(self, cli_runner: CliRunner, journal_path: Path) -> None:
        result = cli_runner.invoke(cli, cli_args(journal_path, "hint", "--mode", "x", "a"))
        assert result.exit_code == 2
