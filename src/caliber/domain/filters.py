"""Filter query language: parsing and evaluation across day-files.

A query is a whitespace-separated list of tokens, all of which must hold
for an entry to match::

    !tasks #work not:#blocked @after:mon review

Token grammar:

- ``!tasks`` / ``!t`` incomplete tasks, ``!tasks/done`` (``!completed``,
  ``!done``) completed tasks, ``!tasks/all`` any task, ``!notes`` /
  ``!n``, ``!events`` / ``!e``.
- ``#tag`` requires the tag (exact, case-insensitive).
- ``@before:<date>`` / ``@after:<date>`` bound the storage day
  (inclusive); ``@overdue`` requires an embedded ``@date`` before today.
  Date values resolve in filter scope (see :mod:`caliber.domain.dates`).
- ``not:<token>`` excludes a tag, type, or text term.
- ``$name`` expands a saved filter (one level, no recursion).
- Anything else is a case-insensitive substring. Several text terms are
  alternatives: an entry needs to contain any one of them.

Unrecognized tokens never abort parsing; they are collected in
:attr:`FilterSpec.invalid_tokens` for the caller to report.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any

from caliber.domain.dates import entry_dates, parse_date
from caliber.domain.entries import Entry, EntryType, Line, compute_entry_indices
from caliber.domain.journal import DaySource
from caliber.domain.tags import has_tag
from caliber.domain.types import DateScope, EntryKind

NEGATION_PREFIX = "not:"
SAVED_FILTER_SIGIL = "$"


class TypeFilter(StrEnum):
    """Entry-type predicates selectable with ``!``."""

    TASKS = "tasks"
    TASKS_DONE = "tasks/done"
    TASKS_ALL = "tasks/all"
    NOTES = "notes"
    EVENTS = "events"

    def matches(self, entry_type: EntryType) -> bool:
        if self is TypeFilter.TASKS:
            return entry_type.is_task and not entry_type.completed
        if self is TypeFilter.TASKS_DONE:
            return entry_type.is_task and entry_type.completed
        if self is TypeFilter.TASKS_ALL:
            return entry_type.is_task
        if self is TypeFilter.NOTES:
            return entry_type.kind is EntryKind.NOTE
        return entry_type.kind is EntryKind.EVENT


_TYPE_TOKENS: dict[str, TypeFilter] = {
    "!tasks": TypeFilter.TASKS,
    "!t": TypeFilter.TASKS,
    "!tasks/done": TypeFilter.TASKS_DONE,
    "!completed": TypeFilter.TASKS_DONE,
    "!done": TypeFilter.TASKS_DONE,
    "!tasks/all": TypeFilter.TASKS_ALL,
    "!notes": TypeFilter.NOTES,
    "!n": TypeFilter.NOTES,
    "!events": TypeFilter.EVENTS,
    "!e": TypeFilter.EVENTS,
}


@dataclass
class FilterSpec:
    """Parsed filter query: a conjunction of optional predicates."""

    entry_types: list[TypeFilter] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    excluded_tags: list[str] = field(default_factory=list)
    excluded_types: list[TypeFilter] = field(default_factory=list)
    text: list[str] = field(default_factory=list)
    excluded_text: list[str] = field(default_factory=list)
    before: date | None = None
    after: date | None = None
    overdue: bool = False
    invalid_tokens: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no predicate is active (matches every entry)."""
        return not (
            self.entry_types
            or self.tags
            or self.excluded_tags
            or self.excluded_types
            or self.text
            or self.excluded_text
            or self.before
            or self.after
            or self.overdue
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "entry_types": [str(t) for t in self.entry_types],
            "tags": list(self.tags),
            "excluded_tags": list(self.excluded_tags),
            "excluded_types": [str(t) for t in self.excluded_types],
            "text": list(self.text),
            "excluded_text": list(self.excluded_text),
            "before": self.before.isoformat() if self.before else None,
            "after": self.after.isoformat() if self.after else None,
            "overdue": self.overdue,
            "invalid_tokens": list(self.invalid_tokens),
        }


@dataclass(frozen=True)
class CrossDayEntry:
    """An entry seen from outside its own day.

    ``line_index`` addresses the storage day's line sequence. It is only
    valid until that day is next modified; re-collect after any edit.
    """

    source_date: date
    line_index: int
    content: str
    entry_type: EntryType

    @property
    def completed(self) -> bool:
        return self.entry_type.completed

    def to_entry(self) -> Entry:
        return Entry(entry_type=self.entry_type, content=self.content)

    def render(self) -> str:
        return f"{self.entry_type.prefix}{self.content}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_date": self.source_date.isoformat(),
            "line_index": self.line_index,
            "type": self.entry_type.label(),
            "completed": self.completed,
            "content": self.content,
        }


FilterEntry = CrossDayEntry
LaterEntry = CrossDayEntry


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def expand_saved_filters(query: str, saved_filters: Mapping[str, str]) -> tuple[str, list[str]]:
    """Substitute ``$name`` tokens with their stored query text.

    Expansion is a single pass: text coming out of a saved filter is not
    expanded again. Unknown names stay in the query as typed.

    Returns:
        ``(expanded_query, unknown_tokens)``.
    """
    out: list[str] = []
    unknown: list[str] = []
    for token in query.split():
        if token.startswith(SAVED_FILTER_SIGIL) and len(token) > 1:
            stored = saved_filters.get(token[1:])
            if stored is None:
                unknown.append(token)
                out.append(token)
            else:
                out.append(stored)
            continue
        out.append(token)
    return " ".join(out), unknown


def _parse_date_op(token: str, today: date) -> tuple[str, date | None] | None:
    """Classify ``@before:x`` / ``@after:x``. None if not a bound operator."""
    for op in ("before", "after"):
        head = f"@{op}:"
        if token.lower().startswith(head):
            return op, parse_date(token[len(head) :], today, DateScope.FILTER)
    return None


def parse_filter_query(
    query: str,
    saved_filters: Mapping[str, str] | None = None,
    today: date | None = None,
) -> FilterSpec:
    """Parse *query* into a :class:`FilterSpec`.

    Args:
        query: Raw filter text.
        saved_filters: ``name -> query`` table for ``$name`` expansion.
        today: Reference date for date operators. Defaults to the
            system date.
    """
    today = today or date.today()
    expanded, unknown = expand_saved_filters(query, saved_filters or {})
    spec = FilterSpec(invalid_tokens=list(unknown))
    unknown_set = set(unknown)

    for token in expanded.split():
        if token in unknown_set:
            continue

        negated = token.lower().startswith(NEGATION_PREFIX)
        body = token[len(NEGATION_PREFIX) :] if negated else token
        if negated and not body:
            spec.invalid_tokens.append(token)
            continue

        if body.startswith("!"):
            type_filter = _TYPE_TOKENS.get(body.lower())
            if type_filter is None:
                spec.invalid_tokens.append(token)
            elif negated:
                spec.excluded_types.append(type_filter)
            else:
                spec.entry_types.append(type_filter)
            continue

        if body.startswith("#"):
            tag = body[1:]
            if not tag:
                spec.invalid_tokens.append(token)
            elif negated:
                spec.excluded_tags.append(tag)
            else:
                spec.tags.append(tag)
            continue

        if body.startswith("@"):
            if negated:
                spec.invalid_tokens.append(token)
                continue
            if body.lower() == "@overdue":
                spec.overdue = True
                continue
            date_op = _parse_date_op(body, today)
            if date_op is None or date_op[1] is None:
                spec.invalid_tokens.append(token)
            elif date_op[0] == "before":
                bound = date_op[1]
                spec.before = bound if spec.before is None else min(spec.before, bound)
            else:
                bound = date_op[1]
                spec.after = bound if spec.after is None else max(spec.after, bound)
            continue

        if body.startswith(SAVED_FILTER_SIGIL):
            spec.invalid_tokens.append(token)
            continue

        if negated:
            spec.excluded_text.append(body.lower())
        else:
            spec.text.append(body.lower())

    return spec


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def entry_matches(spec: FilterSpec, entry: Entry, source_date: date, today: date) -> bool:
    """True when *entry* (stored on *source_date*) satisfies every predicate."""
    entry_type = entry.entry_type
    if not all(t.matches(entry_type) for t in spec.entry_types):
        return False
    if any(t.matches(entry_type) for t in spec.excluded_types):
        return False

    content = entry.content
    if not all(has_tag(content, tag) for tag in spec.tags):
        return False
    if any(has_tag(content, tag) for tag in spec.excluded_tags):
        return False

    lowered = content.lower()
    if spec.text and not any(term in lowered for term in spec.text):
        return False
    if any(term in lowered for term in spec.excluded_text):
        return False

    if spec.before is not None and source_date > spec.before:
        return False
    if spec.after is not None and source_date < spec.after:
        return False
    if spec.overdue and not any(d < today for d in entry_dates(content, source_date)):
        return False
    return True


def iter_cross_day_entries(days: Iterable[tuple[date, list[Line]]]) -> Iterator[CrossDayEntry]:
    """Every entry of every day as a :class:`CrossDayEntry`, in storage order."""
    for day, lines in days:
        for line_index in compute_entry_indices(lines):
            entry = lines[line_index]
            assert isinstance(entry, Entry)
            yield CrossDayEntry(
                source_date=day,
                line_index=line_index,
                content=entry.content,
                entry_type=entry.entry_type,
            )


def collect_filtered_entries(
    spec: FilterSpec,
    days: DaySource,
    today: date | None = None,
) -> list[CrossDayEntry]:
    """Entries across all day-files matching *spec*.

    Ordered by source date ascending, then position within the day.
    """
    today = today or date.today()
    results = [
        item
        for item in iter_cross_day_entries(days.iter_days())
        if entry_matches(spec, item.to_entry(), item.source_date, today)
    ]
    results.sort(key=lambda item: (item.source_date, item.line_index))
    return results
