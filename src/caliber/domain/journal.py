"""Journal document: day sections inside a single markdown file.

A journal is an optional preamble followed by day sections::

    # 2026/01/10
    - [ ] Call Bob @01/20
    - Notes from standup

    # 2026/01/11
    * Dentist 3pm

Each section body is one day-file. Trailing blank lines of a body are
not part of the day; rendering separates sections with one blank line
and ends non-empty output with a newline.

:class:`JournalDocument` satisfies :class:`DaySource`, the read-only
accessor the filter, projection, and tag-collection code iterates.
"""

from __future__ import annotations

import bisect
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol, runtime_checkable

from caliber.domain.entries import Line, is_blank_lines, parse_lines, serialize_lines

DAY_HEADER_PATTERN = re.compile(r"^# (\d{4})/(\d{2})/(\d{2})\s*$")


def day_header(day: date) -> str:
    return f"# {day.strftime('%Y/%m/%d')}"


def parse_day_header(line: str) -> date | None:
    match = DAY_HEADER_PATTERN.match(line)
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


@runtime_checkable
class DaySource(Protocol):
    """Read access to every day-file of a journal."""

    def iter_days(self) -> Iterator[tuple[date, list[Line]]]:
        """Yield ``(date, lines)`` for each stored day in ascending date order."""
        ...


@dataclass
class DaySection:
    """Raw text lines of one day section (header excluded)."""

    day: date
    body: list[str] = field(default_factory=list)


def _trim_trailing_blank(lines: list[str]) -> list[str]:
    end = len(lines)
    while end > 0 and not lines[end - 1].strip():
        end -= 1
    return lines[:end]


@dataclass
class JournalDocument:
    """Parsed journal file: preamble plus day sections in file order."""

    preamble: list[str] = field(default_factory=list)
    sections: list[DaySection] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> JournalDocument:
        doc = cls()
        by_day: dict[date, DaySection] = {}
        current: DaySection | None = None
        for line in text.split("\n") if text else []:
            day = parse_day_header(line)
            if day is not None and day in by_day:
                # A repeated header continues the earlier section of that day.
                current = by_day[day]
                current.body = _trim_trailing_blank(current.body)
                if current.body:
                    current.body.append("")
            elif day is not None:
                current = by_day[day] = DaySection(day=day)
                doc.sections.append(current)
            elif current is None:
                doc.preamble.append(line)
            else:
                current.body.append(line)
        doc.preamble = _trim_trailing_blank(doc.preamble)
        for section in doc.sections:
            section.body = _trim_trailing_blank(section.body)
        return doc

    def render(self) -> str:
        out: list[str] = list(self.preamble)
        for section in self.sections:
            if out:
                out.append("")
            out.append(day_header(section.day))
            out.extend(section.body)
        if not out:
            return ""
        return "\n".join(out) + "\n"

    # --- Day access ---

    def _find(self, day: date) -> DaySection | None:
        for section in self.sections:
            if section.day == day:
                return section
        return None

    def days(self) -> list[date]:
        return sorted({section.day for section in self.sections})

    def day_text(self, day: date) -> str:
        section = self._find(day)
        return "\n".join(section.body) if section else ""

    def day_lines(self, day: date) -> list[Line]:
        text = self.day_text(day)
        return parse_lines(text) if text else []

    def set_day_lines(self, day: date, lines: Sequence[Line]) -> None:
        """Replace a day's body. Blank days are removed from the document."""
        body = _trim_trailing_blank(serialize_lines(lines).split("\n")) if lines else []
        section = self._find(day)
        if is_blank_lines(lines) or not body:
            if section is not None:
                self.sections.remove(section)
            return
        if section is not None:
            section.body = body
            return
        # New days go in chronological position among sorted neighbours.
        keys = [s.day for s in self.sections]
        position = bisect.bisect_right(keys, day) if keys == sorted(keys) else len(keys)
        self.sections.insert(position, DaySection(day=day, body=body))

    def iter_days(self) -> Iterator[tuple[date, list[Line]]]:
        for day in self.days():
            yield day, self.day_lines(day)
