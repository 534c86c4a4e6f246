"""Command group: journal-wide tag maintenance."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from caliber.commands._base import CaliberGroup
from caliber.services.tags import TagService

if TYPE_CHECKING:
    from caliber.commands._context import AppContext

_TAGS_EXAMPLES = """\
  caliber tags list
  caliber tags rename work job
  caliber tags delete stale"""


@click.group(cls=CaliberGroup, examples=_TAGS_EXAMPLES)
@click.pass_obj
def tags(app: AppContext) -> None:
    """List, rename, and delete #tags across the journal."""


@tags.command("list", examples="  caliber tags list\n  caliber --json tags list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List every tag with its occurrence count."""
    app.emit(TagService(app.journal).list_tags())


@tags.command(examples="  caliber tags rename work job\n  caliber tags rename '#wip' '#doing'")
@click.argument("old")
@click.argument("new")
@click.pass_obj
def rename(app: AppContext, old: str, new: str) -> None:
    """Rename #OLD to #NEW everywhere it appears."""
    app.emit(TagService(app.journal).rename(old, new))


@tags.command(examples="  caliber tags delete stale")
@click.argument("tag")
@click.pass_obj
def delete(app: AppContext, tag: str) -> None:
    """Remove #TAG everywhere. Entries left empty are dropped."""
    app.emit(TagService(app.journal).delete(tag))
