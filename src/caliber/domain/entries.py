"""Line model: typed entries and opaque raw lines of a day-file.

A day-file is an ordered sequence of :data:`Line` values. Lines that
carry one of the four entry markers become :class:`Entry`; everything
else (headings, prose, blank lines) is kept verbatim as :class:`RawLine`
so arbitrary markdown survives a load/save cycle.

INVARIANT: ``serialize_lines(parse_lines(text)) == text`` whenever
*text* consists of marker lines without leading indentation plus
headings and blank lines. Indentation before a marker is dropped on
parse (accepted lossy normalization).

INVARIANT: ``entry_indices`` is always recomputed from the line
sequence after a structural change, never patched in place.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import date

from caliber.domain.types import EntryKind, SortKey


@dataclass(frozen=True)
class EntryType:
    """Entry variant: a task (open or completed), a note, or an event."""

    kind: EntryKind
    completed: bool = False

    def __post_init__(self) -> None:
        if self.completed and self.kind is not EntryKind.TASK:
            msg = f"Only tasks can be completed, got kind={self.kind!r}"
            raise ValueError(msg)

    @classmethod
    def task(cls, *, completed: bool = False) -> EntryType:
        return cls(EntryKind.TASK, completed)

    @classmethod
    def note(cls) -> EntryType:
        return cls(EntryKind.NOTE)

    @classmethod
    def event(cls) -> EntryType:
        return cls(EntryKind.EVENT)

    @property
    def is_task(self) -> bool:
        return self.kind is EntryKind.TASK

    @property
    def prefix(self) -> str:
        """Markdown marker written before the entry content."""
        if self.kind is EntryKind.TASK:
            return COMPLETED_TASK_PREFIX if self.completed else TASK_PREFIX
        if self.kind is EntryKind.EVENT:
            return EVENT_PREFIX
        return NOTE_PREFIX

    def cycle(self) -> EntryType:
        """Rotate task -> note -> event -> open task."""
        if self.kind is EntryKind.TASK:
            return EntryType.note()
        if self.kind is EntryKind.NOTE:
            return EntryType.event()
        return EntryType.task()

    def label(self) -> str:
        """Short label used in structured output (``task``, ``done``, ...)."""
        if self.kind is EntryKind.TASK and self.completed:
            return "done"
        return str(self.kind)


COMPLETED_TASK_PREFIX = "- [x] "
TASK_PREFIX = "- [ ] "
EVENT_PREFIX = "* "
NOTE_PREFIX = "- "

# Tested in order; the first matching marker wins.
_MARKERS: tuple[tuple[str, EntryType], ...] = (
    (COMPLETED_TASK_PREFIX, EntryType.task(completed=True)),
    (TASK_PREFIX, EntryType.task()),
    (EVENT_PREFIX, EntryType.event()),
    (NOTE_PREFIX, EntryType.note()),
)


@dataclass
class Entry:
    """One typed, taggable, datable unit of journal content."""

    entry_type: EntryType
    content: str

    @classmethod
    def new_task(cls, content: str = "") -> Entry:
        return cls(EntryType.task(), content)

    @property
    def prefix(self) -> str:
        return self.entry_type.prefix

    @property
    def completed(self) -> bool:
        return self.entry_type.completed

    def toggle_complete(self) -> None:
        """Flip completion for tasks; notes and events are unchanged."""
        if self.entry_type.is_task:
            self.entry_type = EntryType.task(completed=not self.entry_type.completed)

    def render(self) -> str:
        return f"{self.prefix}{self.content}"


@dataclass(frozen=True)
class RawLine:
    """A non-entry markdown line, kept byte-for-byte."""

    text: str

    def render(self) -> str:
        return self.text

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


Line = Entry | RawLine


# ---------------------------------------------------------------------------
# Parse / serialize
# ---------------------------------------------------------------------------


def parse_line(line: str) -> Line:
    """Classify a single line. Never fails: unknown lines become raw."""
    trimmed = line.lstrip()
    for marker, entry_type in _MARKERS:
        if trimmed.startswith(marker):
            return Entry(entry_type=entry_type, content=trimmed[len(marker) :])
    return RawLine(line)


def parse_lines(text: str) -> list[Line]:
    """Split *text* on ``\\n`` and classify each line.

    Splitting (rather than ``splitlines``) keeps a trailing empty segment
    so a final newline survives the round trip.
    """
    return [parse_line(line) for line in text.split("\n")]


def serialize_lines(lines: Sequence[Line]) -> str:
    """Render lines back to text, joined with ``\\n``."""
    return "\n".join(line.render() for line in lines)


def compute_entry_indices(lines: Sequence[Line]) -> list[int]:
    """Positions of every :class:`Entry` in *lines*, in document order."""
    return [i for i, line in enumerate(lines) if isinstance(line, Entry)]


def is_blank_lines(lines: Sequence[Line]) -> bool:
    """True when *lines* holds no entries and only whitespace raw lines."""
    return all(isinstance(line, RawLine) and line.is_blank for line in lines)


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


def _sort_key_for(entry_type: EntryType) -> SortKey:
    if entry_type.is_task:
        return SortKey.COMPLETED if entry_type.completed else SortKey.UNCOMPLETED
    if entry_type.kind is EntryKind.NOTE:
        return SortKey.NOTES
    return SortKey.EVENTS


def sort_entry_lines(lines: Sequence[Line], sort_order: Sequence[str]) -> list[Line]:
    """Reorder entries by *sort_order* priority, leaving raw lines in place.

    Entries are permuted among the positions entries already occupy, so
    headings and prose keep their line numbers. The sort is stable:
    entries in the same group keep their relative order. Groups missing
    from *sort_order* go last.
    """
    priority = {name: i for i, name in enumerate(sort_order)}
    positions = compute_entry_indices(lines)
    entries = [lines[i] for i in positions]
    entries.sort(
        key=lambda line: priority.get(
            str(_sort_key_for(line.entry_type)),  # type: ignore[union-attr]
            len(priority),
        )
    )
    result = list(lines)
    for pos, entry in zip(positions, entries, strict=True):
        result[pos] = entry
    return result


# ---------------------------------------------------------------------------
# DayFile: the in-memory arena for one day's lines
# ---------------------------------------------------------------------------


@dataclass
class DayFile:
    """Ordered lines for one calendar date plus the derived entry index."""

    day: date
    lines: list[Line] = field(default_factory=list)
    entry_indices: list[int] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.reindex()

    @classmethod
    def from_text(cls, day: date, text: str) -> DayFile:
        return cls(day=day, lines=parse_lines(text) if text else [])

    def reindex(self) -> None:
        self.entry_indices = compute_entry_indices(self.lines)

    def to_text(self) -> str:
        return serialize_lines(self.lines)

    @property
    def entry_count(self) -> int:
        return len(self.entry_indices)

    def iter_entries(self) -> Iterator[tuple[int, Entry]]:
        """Yield ``(line_index, entry)`` pairs in document order."""
        for line_index in self.entry_indices:
            line = self.lines[line_index]
            assert isinstance(line, Entry)
            yield line_index, line

    def line_index_of(self, entry_index: int) -> int | None:
        if 0 <= entry_index < len(self.entry_indices):
            return self.entry_indices[entry_index]
        return None

    def entry(self, entry_index: int) -> Entry | None:
        line_index = self.line_index_of(entry_index)
        if line_index is None:
            return None
        return self.entry_at_line(line_index)

    def entry_at_line(self, line_index: int) -> Entry | None:
        if 0 <= line_index < len(self.lines):
            line = self.lines[line_index]
            if isinstance(line, Entry):
                return line
        return None

    def insert_entry(self, entry: Entry, *, after: int | None = None) -> int:
        """Insert *entry* below entry index *after*, or at the bottom.

        Returns the line index the entry now occupies.
        """
        anchor = None if after is None else self.line_index_of(after)
        if anchor is None:
            position = len(self.lines)
            # Keep a trailing blank segment (final newline) after the entry.
            while position > 0 and _is_trailing_blank(self.lines[position - 1]):
                position -= 1
        else:
            position = anchor + 1
        self.lines.insert(position, entry)
        self.reindex()
        return position

    def insert_line(self, line_index: int, line: Line) -> int:
        """Insert *line* at *line_index* (clamped to the end)."""
        position = min(max(line_index, 0), len(self.lines))
        self.lines.insert(position, line)
        self.reindex()
        return position

    def remove_line(self, line_index: int) -> Line:
        line = self.lines.pop(line_index)
        self.reindex()
        return line

    def swap_entries(self, first: int, second: int) -> bool:
        """Swap two entries by entry index. Returns False if out of range."""
        a = self.line_index_of(first)
        b = self.line_index_of(second)
        if a is None or b is None:
            return False
        self.lines[a], self.lines[b] = self.lines[b], self.lines[a]
        self.reindex()
        return True

    def sort(self, sort_order: Sequence[str]) -> None:
        self.lines = sort_entry_lines(self.lines, sort_order)
        self.reindex()


def _is_trailing_blank(line: Line) -> bool:
    return isinstance(line, RawLine) and line.text == ""
