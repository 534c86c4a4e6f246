"""Command: filter entries across every day of the journal."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from caliber.commands._base import CaliberCommand
from caliber.services.filter import FilterService

if TYPE_CHECKING:
    from caliber.commands._context import AppContext


@click.command(
    "filter",
    cls=CaliberCommand,
    examples="""\
  caliber filter
  caliber filter '!tasks' '#work'
  caliber filter '!tasks/done' @after:mon
  caliber filter '#work' 'not:#blocked'
  caliber filter @overdue
  caliber filter '$t' review
  caliber filter --quick 1
  caliber filter --saved""",
)
@click.argument("query", nargs=-1)
@click.option("--quick", "quick", default=None, metavar="KEY", help="Filter by favorite tag 0-9.")
@click.option("--saved", is_flag=True, help="List saved filters instead of filtering.")
@click.pass_obj
def filter_cmd(app: AppContext, query: tuple[str, ...], quick: str | None, saved: bool) -> None:
    """Show entries matching QUERY (the configured default when omitted).

    \b
    !tasks !tasks/done !tasks/all !notes !events   entry type
    #tag                                           require tag
    @before:DATE @after:DATE @overdue              date bounds
    not:TOKEN                                      exclude tag/type/text
    $name                                          saved filter
    anything else                                  text search
    """
    svc = FilterService(app.journal)
    if saved:
        app.emit(svc.saved_filters())
    elif quick is not None:
        app.emit(svc.quick(quick))
    else:
        app.emit(svc.run(" ".join(query)))
