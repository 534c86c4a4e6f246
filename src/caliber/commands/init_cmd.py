"""Command: create a project journal and starter config files."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from caliber.commands._base import CaliberCommand

if TYPE_CHECKING:
    from caliber.commands._context import AppContext


@click.command(
    "init",
    cls=CaliberCommand,
    examples="""\
  caliber init
  caliber init --config
  caliber init --user""",
)
@click.option("--config", "write_config", is_flag=True, help="Also write caliber.toml here.")
@click.option("--user", is_flag=True, help="Also write the per-user config file.")
@click.pass_obj
def init_cmd(app: AppContext, write_config: bool, user: bool) -> None:
    """Create .caliber/journal.md in the journal root."""
    from caliber.services.init import InitService

    app.emit(InitService(app.journal).init_project(write_config=write_config, user=user))
