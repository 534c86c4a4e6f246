"""``--help`` for every command mentions its arguments and options."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from caliber.cli import cli

HELP = {
    "": ["day", "tags", "filter", "later", "agenda", "hint", "init", "--journal", "--today"],
    "day": ["show", "add", "edit", "toggle", "delete", "cycle", "sort"],
    "day show": ["DATE"],
    "day add": ["CONTENT", "--date", "--task", "--note", "--event", "--after"],
    "day edit": ["INDEX", "--line"],
    "day toggle": ["INDEX", "--date", "--line"],
    "day delete": ["INDEX"],
    "day cycle": ["INDEX"],
    "day sort": ["--date"],
    "tags": ["list", "rename", "delete"],
    "tags rename": ["OLD", "NEW"],
    "tags delete": ["TAG"],
    "filter": ["QUERY", "--quick", "--saved", "!tasks/done", "not:TOKEN"],
    "later": ["DATE"],
    "agenda": ["START", "--days"],
    "hint": ["TEXT", "--mode"],
    "init": ["--config", "--user"],
}


@pytest.mark.parametrize("command", list(HELP), ids=lambda c: c or "root")
def test_help_mentions(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, [*command.split(), "--help"])
    assert result.exit_code == 0
    missing = [word for word in HELP[command] if word not in result.output]
    assert not missing, f"{command or 'caliber'} --help lacks {missing}"


def test_help_does_not_create_journal(cli_runner: CliRunner, tmp_path: Path) -> None:
    cli_runner.invoke(cli, ["day", "add", "--help"])
    assert not list(tmp_path.rglob("*.md"))
