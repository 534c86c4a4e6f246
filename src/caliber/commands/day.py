"""Command group: show and edit the entries of one day."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from caliber.commands._base import CaliberGroup
from caliber.domain.types import EntryKind

if TYPE_CHECKING:
    from caliber.commands._context import AppContext
    from caliber.services.day import DayService

_DAY_EXAMPLES = """\
  caliber day show
  caliber day show 2026/01/15
  caliber day add "Call Bob @tomorrow #work"
  caliber day add --note "Standup notes" --date yesterday
  caliber day toggle 2
  caliber day edit 1 "Call Bob and Alice @fri"
  caliber day toggle 3 --line --date 01/10
  caliber day sort"""

_DATE_HELP = "Day to operate on (YYYY/MM/DD, MM/DD, today, mon, d3, ...)."
_LINE_HELP = "Treat INDEX as a line index on --date, as shown by filter and later."


@click.group(cls=CaliberGroup, examples=_DAY_EXAMPLES)
@click.pass_obj
def day(app: AppContext) -> None:
    """Show and edit the entries of a day."""


@day.command(
    examples="""\
  caliber day show
  caliber day show yesterday
  caliber --json day show 2026/01/15"""
)
@click.argument("date", required=False, default=None)
@click.pass_obj
def show(app: AppContext, date: str | None) -> None:
    """Show a day's entries and the later entries due on it."""
    app.emit(_service(app).show(date))


@day.command(
    examples="""\
  caliber day add "Buy milk #errand"
  caliber day add --event "Dentist 3pm" --date fri
  caliber day add --after 2 "Follow up with Bob\""""
)
@click.argument("content", nargs=-1, required=True)
@click.option("--date", "date", default=None, help=_DATE_HELP)
@click.option(
    "--task",
    "kind",
    flag_value=EntryKind.TASK.value,
    default=True,
    help="Add an open task (default).",
)
@click.option("--note", "kind", flag_value=EntryKind.NOTE.value, help="Add a note.")
@click.option("--event", "kind", flag_value=EntryKind.EVENT.value, help="Add an event.")
@click.option("--after", type=int, default=None, help="Insert below entry number N.")
@click.pass_obj
def add(
    app: AppContext,
    content: tuple[str, ...],
    date: str | None,
    kind: str,
    after: int | None,
) -> None:
    """Add an entry. #1..#9 expand to favorite tags; @dates are normalized."""
    svc = _service(app)
    result = svc.add_entry(" ".join(content), day=date, kind=EntryKind(kind), after=after)
    app.emit(result)


@day.command(
    examples="""\
  caliber day edit 1 "Call Bob @01/20"
  caliber day edit 4 --line --date 01/10 "Review doc @fri"
  caliber day edit 2 \"\"   # deletes entry 2"""
)
@click.argument("index", type=int)
@click.argument("content", nargs=-1)
@click.option("--date", "date", default=None, help=_DATE_HELP)
@click.option("--line", is_flag=True, help=_LINE_HELP)
@click.pass_obj
def edit(
    app: AppContext,
    index: int,
    content: tuple[str, ...],
    date: str | None,
    line: bool,
) -> None:
    """Replace an entry's content. Empty content deletes the entry."""
    svc = _service(app)
    text = " ".join(content)
    if line:
        result = svc.edit_at(date or app.journal.today(), index, text)
    else:
        result = svc.edit_entry(index, text, day=date)
    app.emit(result)


@day.command(
    examples="""\
  caliber day toggle 2
  caliber day toggle 3 --line --date 2026/01/10"""
)
@click.argument("index", type=int)
@click.option("--date", "date", default=None, help=_DATE_HELP)
@click.option("--line", is_flag=True, help=_LINE_HELP)
@click.pass_obj
def toggle(app: AppContext, index: int, date: str | None, line: bool) -> None:
    """Mark a task done, or open again."""
    svc = _service(app)
    if line:
        app.emit(svc.toggle_at(date or app.journal.today(), index))
    else:
        app.emit(svc.toggle_entry(index, day=date))


@day.command(
    examples="""\
  caliber day delete 2
  caliber day delete 5 --line --date 01/10"""
)
@click.argument("index", type=int)
@click.option("--date", "date", default=None, help=_DATE_HELP)
@click.option("--line", is_flag=True, help=_LINE_HELP)
@click.pass_obj
def delete(app: AppContext, index: int, date: str | None, line: bool) -> None:
    """Delete an entry."""
    svc = _service(app)
    if line:
        app.emit(svc.delete_at(date or app.journal.today(), index))
    else:
        app.emit(svc.delete_entry(index, day=date))


@day.command(
    examples="""\
  caliber day cycle 1
  caliber day cycle 3 --date yesterday"""
)
@click.argument("index", type=int)
@click.option("--date", "date", default=None, help=_DATE_HELP)
@click.option("--line", is_flag=True, help=_LINE_HELP)
@click.pass_obj
def cycle(app: AppContext, index: int, date: str | None, line: bool) -> None:
    """Change an entry's type: task, note, event, task."""
    svc = _service(app)
    if line:
        app.emit(svc.cycle_at(date or app.journal.today(), index))
    else:
        app.emit(svc.cycle_entry_type(index, day=date))


@day.command(
    examples="""\
  caliber day sort
  caliber day sort --date yesterday"""
)
@click.option("--date", "date", default=None, help=_DATE_HELP)
@click.pass_obj
def sort(app: AppContext, date: str | None) -> None:
    """Group a day's entries by the configured sort_order."""
    app.emit(_service(app).sort_entries(day=date))


def _service(app: AppContext) -> DayService:
    from caliber.services.day import DayService

    return DayService(app.journal)
