"""Cross-day projection: entries stored on one day, due on another.

An entry written on 2026-01-10 as ``- [ ] Call Bob @01/20`` is stored
once, under 01/10, but is *projected* onto the 01/20 view. Recurring
entries (``@every-mon``, ``@every-15``) project onto every matching day
after the day they were written.

Projection is a read-time synthesis: results are
:class:`~caliber.domain.filters.CrossDayEntry` values pointing at the
storage location. Nothing here writes.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, timedelta

from caliber.domain.dates import entry_dates, entry_recurrences
from caliber.domain.entries import Line
from caliber.domain.filters import CrossDayEntry, iter_cross_day_entries
from caliber.domain.journal import DaySource


def projects_onto(item: CrossDayEntry, target: date) -> bool:
    """True when *item* should appear on the *target* day's view."""
    if target == item.source_date:
        return False
    if target in entry_dates(item.content, item.source_date):
        return True
    if target > item.source_date:
        return any(rule.matches(target) for rule in entry_recurrences(item.content))
    return False


def collect_later_entries_for_date(target: date, days: DaySource) -> list[CrossDayEntry]:
    """Entries from other days whose embedded date lands on *target*.

    Ordered by source date, then position within the source day.
    """
    results = [
        item for item in iter_cross_day_entries(days.iter_days()) if projects_onto(item, target)
    ]
    results.sort(key=lambda item: (item.source_date, item.line_index))
    return results


class LaterIndex:
    """Reverse index from target date to projected entries.

    Built with one scan over the journal. Single-date entries are keyed
    by their resolved date; recurring entries are kept aside and tested
    per query.
    """

    def __init__(self, days: Iterable[tuple[date, list[Line]]]) -> None:
        self._by_date: dict[date, list[CrossDayEntry]] = defaultdict(list)
        self._recurring: list[CrossDayEntry] = []
        for item in iter_cross_day_entries(days):
            for target in set(entry_dates(item.content, item.source_date)):
                if target != item.source_date:
                    self._by_date[target].append(item)
            if entry_recurrences(item.content):
                self._recurring.append(item)

    @classmethod
    def from_source(cls, source: DaySource) -> LaterIndex:
        return cls(source.iter_days())

    def for_date(self, target: date) -> list[CrossDayEntry]:
        seen: set[tuple[date, int]] = set()
        results: list[CrossDayEntry] = []
        candidates = [*self._by_date.get(target, []), *self._recurring]
        for item in candidates:
            key = (item.source_date, item.line_index)
            if key in seen or not projects_onto(item, target):
                continue
            seen.add(key)
            results.append(item)
        results.sort(key=lambda item: (item.source_date, item.line_index))
        return results

    def window(self, start: date, days: int) -> dict[date, list[CrossDayEntry]]:
        """Projected entries for each of *days* consecutive dates from *start*."""
        return {
            start + timedelta(days=offset): self.for_date(start + timedelta(days=offset))
            for offset in range(max(days, 0))
        }
