"""Rich consoles that print into memory.

Renderers draw on a console from :func:`create_console` and hand back
the captured text, so ``format_result`` can stay a plain ``-> str``
function. Rich drops colour by itself when stdout is not a terminal.
"""

from __future__ import annotations

from io import StringIO
from typing import NamedTuple

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120


class EntryMarker(NamedTuple):
    glyph: str
    style: str
    color: str


# Keyed by the entry labels services put in row["type"].
ENTRY_MARKERS: dict[str, EntryMarker] = {
    "task": EntryMarker("[ ]", "cal.type.task", "yellow"),
    "done": EntryMarker("[x]", "cal.type.done", "dim strike"),
    "note": EntryMarker(" - ", "cal.type.note", "default"),
    "event": EntryMarker(" * ", "cal.type.event", "cyan"),
}

CALIBER_THEME = Theme(
    {
        "cal.ok": "bold green",
        "cal.error": "bold red",
        "cal.warning": "bold yellow",
        "cal.op": "bold cyan",
        "cal.key": "dim",
        "cal.path": "dim",
        "cal.source": "dim italic",
        "cal.date": "bold blue",
        "cal.tag": "magenta",
        **{marker.style: marker.color for marker in ENTRY_MARKERS.values()},
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """A themed console writing into a fresh StringIO."""
    return Console(
        file=StringIO(),
        width=width or DEFAULT_WIDTH,
        theme=CALIBER_THEME,
        highlight=False,
        no_color=no_color,
    )


def get_output(console: Console) -> str:
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console was not created by create_console()")
    return buffer.getvalue()


def entry_marker(label: str) -> tuple[str, str]:
    """``(glyph, style)`` for an entry label; ``("?", "")`` if unknown."""
    marker = ENTRY_MARKERS.get(label)
    return (marker.glyph, marker.style) if marker else ("?", "")
