"""Commands: entries scheduled onto a day from elsewhere in the journal."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from caliber.commands._base import CaliberCommand
from caliber.services.later import LaterService

if TYPE_CHECKING:
    from caliber.commands._context import AppContext


@click.command(
    cls=CaliberCommand,
    examples="""\
  caliber later
  caliber later tomorrow
  caliber later 2026/02/01""",
)
@click.argument("date", required=False, default=None)
@click.pass_obj
def later(app: AppContext, date: str | None) -> None:
    """Entries written on other days that are due on DATE (default today)."""
    app.emit(LaterService(app.journal).for_date(date))


@click.command(
    cls=CaliberCommand,
    examples="""\
  caliber agenda
  caliber agenda mon --days 14
  caliber --json agenda""",
)
@click.argument("start", required=False, default=None)
@click.option(
    "--days",
    type=click.IntRange(min=1),
    default=7,
    show_default=True,
    help="Number of days to cover.",
)
@click.pass_obj
def agenda(app: AppContext, start: str | None, days: int) -> None:
    """Later entries due on each of the next DAYS days from START."""
    app.emit(LaterService(app.journal).agenda(start, days=days))
