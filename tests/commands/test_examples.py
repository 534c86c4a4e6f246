"""``--examples`` on every command that ships worked invocations."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from caliber.cli import cli

EXAMPLES = {
    "day": ["caliber day show", "caliber day sort"],
    "day show": ["caliber day show yesterday"],
    "day add": ["--event", "--after 2"],
    "day edit": ["--line"],
    "day toggle": ["caliber day toggle 2"],
    "day delete": ["caliber day delete"],
    "day cycle": ["caliber day cycle 1"],
    "day sort": ["caliber day sort"],
    "tags": ["caliber tags rename", "caliber tags delete"],
    "tags list": ["caliber tags list"],
    "tags rename": ["caliber tags rename work job"],
    "tags delete": ["caliber tags delete stale"],
    "filter": ["@overdue", "--quick 1", "--saved"],
    "later": ["caliber later tomorrow"],
    "agenda": ["--days 14"],
    "hint": ["--mode entry"],
    "init": ["caliber init --config"],
}


@pytest.mark.parametrize("command", list(EXAMPLES))
def test_prints_examples(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, [*command.split(), "--examples"])
    assert result.exit_code == 0, result.output
    assert result.output.startswith(f"Examples for 'cli {command}':")
    for snippet in EXAMPLES[command]:
        assert snippet in result.output


@pytest.mark.parametrize("command", ["day", "day add", "tags", "filter", "agenda", "hint"])
def test_listed_in_help(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, [*command.split(), "--help"])
    assert "--examples" in result.output


@pytest.mark.parametrize("command", ["day toggle", "day edit", "hint", "tags rename"])
def test_runs_before_argument_checks(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, [*command.split(), "--examples"])
    assert result.exit_code == 0
    assert "Missing argument" not in result.output


def test_root_has_no_examples(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--examples"])
    assert result.exit_code != 0
