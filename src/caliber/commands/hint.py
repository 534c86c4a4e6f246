"""Command: completion hints for a partial input buffer."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from caliber.commands._base import CaliberCommand
from caliber.domain.types import HintMode
from caliber.services.hints import HintService

if TYPE_CHECKING:
    from caliber.commands._context import AppContext


@click.command(
    cls=CaliberCommand,
    examples="""\
  caliber hint '!ta'
  caliber hint '@be'
  caliber hint --mode entry 'Call Bob @tom'
  caliber hint --mode command go
  caliber -q hint '#wo'    # prints only the completion suffix""",
)
@click.argument("text")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in HintMode]),
    default=HintMode.FILTER.value,
    show_default=True,
    help="Which input the text is typed into.",
)
@click.pass_obj
def hint(app: AppContext, text: str, mode: str) -> None:
    """Show completion candidates for TEXT."""
    app.emit(HintService(app.journal).compute(text, HintMode(mode)))
