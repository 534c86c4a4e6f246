"""Human-readable rendering of ServiceResult, one function per ``op``.

:func:`render_result` looks the op up in ``_OP_RENDERERS`` and lets the
renderer draw on an in-memory console; ops without an entry get
``_render_generic``. In verbose mode the result's meta block (including
the telemetry span tree) is appended after whatever the renderer drew.
"""

from __future__ import annotations

import json
from datetime import date
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from caliber.domain.entries import EntryType
from caliber.domain.tags import TAG_PATTERN
from caliber.output.console import create_console, entry_marker, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from caliber.services.result import ServiceResult

_MARKDOWN_PREFIX: dict[str, str] = {
    "task": EntryType.task().prefix,
    "done": EntryType.task(completed=True).prefix,
    "note": EntryType.note().prefix,
    "event": EntryType.event().prefix,
}

_FIELD_STYLES: dict[str, str] = {
    "date": "cal.date",
    "start": "cal.date",
    "journal": "cal.path",
    "project_journal": "cal.path",
}

# Span durations above these thresholds (ms) are highlighted.
_SLOW_MS = 100
_VERY_SLOW_MS = 1000


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Draw *result* and return the text. No ANSI codes unless on a terminal."""
    console = create_console()
    if not result.ok:
        _render_error(result, console, verbose=verbose)
    else:
        _OP_RENDERERS.get(result.op, _render_generic)(result, console, verbose=verbose)
        if verbose and result.meta:
            _render_meta(console, result.meta)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Bare output for ``--quiet``: entries as markdown lines, tags as names."""
    if not result.ok:
        reason = result.error.message if result.error else "unknown error"
        return f"ERROR: {result.op} - {reason}"

    data = result.data
    if result.op == "hint":
        return data.get("hint", {}).get("first_completion") or ""
    if result.op == "list_tags":
        return "\n".join(f"#{item['tag']}" for item in data.get("items", []))
    if result.op == "agenda":
        rows = [entry for day in data.get("agenda", []) for entry in day["entries"]]
        return "\n".join(markdown_line(row) for row in rows)
    entries = data.get("entries")
    if isinstance(entries, list):
        return "\n".join(markdown_line(row) for row in entries)
    if "entry" in data:
        return markdown_line(data["entry"])
    return f"OK: {result.op}"


def markdown_line(row: dict[str, Any]) -> str:
    """An entry row as it appears in the journal file."""
    return f"{_MARKDOWN_PREFIX.get(str(row.get('type')), '')}{row.get('content', '')}"


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "cal.ok"), "  ", (result.op, "cal.op")))


def _field(console: Console, key: str, value: Any) -> None:
    style = _FIELD_STYLES.get(key, "cal.path" if key.endswith("path") else "")
    console.print(Text.assemble((f"  {key}: ", "cal.key"), (str(value), style)))


def _short(iso: str) -> str:
    return date.fromisoformat(iso).strftime("%m/%d")


def _long(iso: str) -> str:
    return date.fromisoformat(iso).strftime("%Y/%m/%d %a")


def _content_text(row: dict[str, Any]) -> Text:
    """Entry content with tags highlighted."""
    style = "cal.type.done" if row.get("type") == "done" else ""
    text = Text(str(row.get("content", "")), style=style)
    text.highlight_regex(TAG_PATTERN, "cal.tag")
    return text


def _entry_text(row: dict[str, Any], *, number: int | None = None) -> Text:
    glyph, style = entry_marker(str(row.get("type", "")))
    text = Text()
    if number is not None:
        text.append(f"{number:>3} ", style="cal.key")
    text.append(glyph, style=style)
    text.append(" ")
    text.append_text(_content_text(row))
    return text


def _cross_day_table(rows: list[dict[str, Any]]) -> Table:
    """Entries from several days, with the day each one is stored under."""
    table = Table(pad_edge=False)
    table.add_column("Date", style="cal.date", no_wrap=True)
    table.add_column("Line", style="cal.key", justify="right")
    table.add_column("Type", no_wrap=True)
    table.add_column("Entry")
    for row in rows:
        glyph, style = entry_marker(str(row.get("type", "")))
        table.add_row(
            _short(row["source_date"]),
            str(row.get("line_index", "")),
            Text(glyph, style=style),
            _content_text(row),
        )
    return table


def _span_label(span: dict[str, Any]) -> Text:
    duration = float(span.get("duration_ms", 0.0))
    if duration > _VERY_SLOW_MS:
        style = "bold red"
    elif duration > _SLOW_MS:
        style = "yellow"
    else:
        style = "dim"
    label = Text.assemble((f"{duration:.2f}ms", style), "  ", str(span.get("name", "?")))
    notes = span.get("annotations") or {}
    if notes:
        label.append("  (" + ", ".join(f"{k}={v}" for k, v in notes.items()) + ")", "cal.key")
    return label


def _span_tree(span: dict[str, Any], tree: Tree | None = None) -> Tree:
    node = Tree(_span_label(span)) if tree is None else tree.add(_span_label(span))
    for child in span.get("children", []):
        _span_tree(child, node)
    return node


def _render_meta(console: Console, meta: dict[str, Any]) -> None:
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in meta.items():
        if key == "telemetry":
            console.print(_span_tree(value))
        else:
            _field(console, key, value)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    error = result.error
    reason = error.message if error else "unknown error"
    line = Text.assemble(("ERROR", "cal.error"), "  ", (result.op, "cal.op"), " - ", reason)
    console.print(line)
    if verbose and error and error.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in error.detail.items():
            _field(console, f"  {key}", value)


def _render_day(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render show_day: the day's entries, then later entries due on it."""
    d = result.data
    header = Text(_long(d["date"]), style="cal.date")
    header.append(f"  ({d.get('slot', 'global')})", style="cal.path")
    console.print(header)

    entries = d.get("entries", [])
    if not entries:
        console.print(Text("  No entries", style="dim"))
    for row in entries:
        console.print(_entry_text(row, number=row.get("index")))

    later = d.get("later", [])
    if later:
        console.print()
        console.print(Text("Later", style="bold"))
        for row in later:
            text = _entry_text(row)
            text.append(f" ({_short(row['source_date'])})", style="cal.source")
            console.print(Text("    "), text)

    if verbose:
        _field(console, "journal", d.get("journal", ""))


def _render_entry_mutation(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render add/edit/toggle/delete/cycle results."""
    _status_line(console, result)
    d = result.data
    _field(console, "date", d.get("date", ""))
    row = d.get("entry")
    if row:
        console.print(Text("  "), _entry_text(row, number=row.get("index")))
    if d.get("deleted"):
        _field(console, "deleted", True)


def _render_sorted(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "date", result.data.get("date", ""))
    _field(console, "sort_order", ", ".join(result.data.get("sort_order", [])))
    for row in result.data.get("entries", []):
        console.print(Text("  "), _entry_text(row, number=row.get("index")))


def _render_filter(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    entries = d.get("entries", [])
    console.print(Text(f"Filter: {d.get('query', '')}", style="bold"))
    if entries:
        console.print(_cross_day_table(entries))
    console.print(f"\n{d.get('count', len(entries))} entries")


def _render_later(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    entries = d.get("entries", [])
    console.print(Text(f"Later for {_long(d['date'])}", style="bold"))
    if entries:
        console.print(_cross_day_table(entries))
    console.print(f"\n{d.get('count', len(entries))} entries")


def _render_agenda(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    days = d.get("agenda", [])
    if not days:
        console.print(Text(f"Nothing due in the {d.get('days', 0)} days from {d['start']}"))
    for day in days:
        console.print(Text(_long(day["date"]), style="cal.date"))
        for row in day["entries"]:
            text = _entry_text(row)
            text.append(f" ({_short(row['source_date'])})", style="cal.source")
            console.print(Text("  "), text)


def _render_tags(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(pad_edge=False)
    table.add_column("Tag", style="cal.tag")
    table.add_column("Count", justify="right")
    for item in items:
        table.add_row(f"#{item['tag']}", str(item["count"]))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} tags")


def _render_tag_change(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("tag", "old", "new", "count"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_hint(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    hint = result.data.get("hint", {})
    if not hint.get("active"):
        console.print(Text("No hints", style="dim"))
        return
    message = hint.get("message") or hint.get("inner", {}).get("message")
    if message:
        console.print(Text(message, style="italic"))
    for item in hint.get("items", []):
        console.print(Text(f"  {item}"))
    completion = hint.get("first_completion")
    if completion:
        _field(console, "accept", completion)


def _render_saved_filters(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    table = Table(pad_edge=False)
    table.add_column("Name", style="cal.op")
    table.add_column("Query")
    for item in result.data.get("filters", []):
        table.add_row(f"${item['name']}", item["query"])
    console.print(table)
    _field(console, "default", result.data.get("default", ""))


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "project_journal", d.get("project_journal", ""))
    for path in d.get("created", []):
        console.print(Text("  created ", style="cal.ok"), Text(path), sep="")
    for path in d.get("existing", []):
        console.print(Text("  exists  ", style="cal.key"), Text(path), sep="")



def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            value = json.dumps(value, separators=(",", ":"))
        _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "show_day": _render_day,
    "add_entry": _render_entry_mutation,
    "edit_entry": _render_entry_mutation,
    "toggle_entry": _render_entry_mutation,
    "delete_entry": _render_entry_mutation,
    "cycle_entry_type": _render_entry_mutation,
    "sort_entries": _render_sorted,
    "filter": _render_filter,
    "saved_filters": _render_saved_filters,
    "later": _render_later,
    "agenda": _render_agenda,
    "list_tags": _render_tags,
    "rename_tag": _render_tag_change,
    "delete_tag": _render_tag_change,
    "hint": _render_hint,
    "init": _render_init,
}
