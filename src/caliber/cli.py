"""The ``caliber`` entry point: global flags, then subcommands."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import click

from caliber import __version__
from caliber.commands import register_commands
from caliber.commands._context import AppContext
from caliber.config.settings import CaliberSettings

_TODAY_FORMATS = ["%Y-%m-%d", "%Y/%m/%d"]


def _as_date(_ctx: click.Context, _param: click.Parameter, value: datetime | None) -> date | None:
    return value.date() if value is not None else None


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="caliber")
@click.option(
    "--journal",
    "journal_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Read and write this journal file for this run.",
)
@click.option("--project", is_flag=True, help="Use the project journal (.caliber/journal.md).")
@click.option(
    "--today",
    type=click.DateTime(formats=_TODAY_FORMATS),
    callback=_as_date,
    help="Treat this date as today (YYYY-MM-DD).",
)
@click.option("-c", "--config", "config_path", help="Config file to use instead of discovery.")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the essentials.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and timing spans.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, project: bool, **flags: object) -> None:
    """caliber: a markdown journal and task manager."""
    settings = CaliberSettings.from_cli(config_path=config_path, project=project, **flags)
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
