"""Tests for cross-day projection of later entries."""

from __future__ import annotations

from datetime import date

from caliber.domain.entries import EntryType
from caliber.domain.filters import CrossDayEntry
from caliber.domain.journal import JournalDocument
from caliber.domain.projection import LaterIndex, collect_later_entries_for_date, projects_onto
from tests.conftest import SAMPLE_JOURNAL


def _item(content: str, source: date) -> CrossDayEntry:
    return CrossDayEntry(
        source_date=source,
        line_index=0,
        content=content,
        entry_type=EntryType.task(),
    )


class TestProjectsOnto:
    def test_single_date(self) -> None:
        item = _item("Call Bob @01/20", date(2026, 1, 10))
        assert projects_onto(item, date(2026, 1, 20))
        assert not projects_onto(item, date(2026, 1, 21))

    def test_not_onto_own_day(self) -> None:
        item = _item("Today @01/10", date(2026, 1, 10))
        assert not projects_onto(item, date(2026, 1, 10))

    def test_recurrence_only_after_source_day(self) -> None:
        item = _item("Water @every-mon", date(2026, 1, 12))
        assert projects_onto(item, date(2026, 1, 19))
        assert projects_onto(item, date(2026, 3, 2))
        assert not projects_onto(item, date(2026, 1, 5))
        assert not projects_onto(item, date(2026, 1, 20))

    def test_monthly_recurrence(self) -> None:
        item = _item("Rent @every-1", date(2026, 1, 10))
        assert projects_onto(item, date(2026, 2, 1))
        assert not projects_onto(item, date(2026, 1, 1))


class TestCollectLaterEntries:
    def test_entry_projected_to_its_date(self) -> None:
        doc = JournalDocument.parse("# 2026/01/10\n- [ ] Call Bob @01/20\n")
        (later,) = collect_later_entries_for_date(date(2026, 1, 20), doc)
        assert later.source_date == date(2026, 1, 10)
        assert later.line_index == 0
        assert "Call Bob @01/20" in later.content

    def test_sample_journal(self) -> None:
        doc = JournalDocument.parse(SAMPLE_JOURNAL)
        monday = collect_later_entries_for_date(date(2026, 1, 19), doc)
        assert [item.content for item in monday] == ["Water plants @every-mon"]
        assert collect_later_entries_for_date(date(2026, 1, 16), doc) == []

    def test_ordered_by_source(self) -> None:
        doc = JournalDocument.parse(
            "# 2026/01/11\n- b @01/20\n- c @01/20\n\n# 2026/01/10\n- a @01/20\n"
        )
        later = collect_later_entries_for_date(date(2026, 1, 20), doc)
        assert [item.content for item in later] == ["a @01/20", "b @01/20", "c @01/20"]


class TestLaterIndex:
    def test_matches_direct_collection(self) -> None:
        doc = JournalDocument.parse(SAMPLE_JOURNAL)
        index = LaterIndex.from_source(doc)
        for offset in range(1, 32):
            target = date(2026, 1, offset)
            assert index.for_date(target) == collect_later_entries_for_date(target, doc)

    def test_window(self) -> None:
        index = LaterIndex.from_source(JournalDocument.parse(SAMPLE_JOURNAL))
        window = index.window(date(2026, 1, 15), 7)
        assert list(window) == [date(2026, 1, d) for d in range(15, 22)]
        busy = {day: [i.content for i in items] for day, items in window.items() if items}
        assert busy == {
            date(2026, 1, 19): ["Water plants @every-mon"],
            date(2026, 1, 20): ["Call Bob @01/20 #work"],
        }

    def test_duplicate_dates_listed_once(self) -> None:
        index = LaterIndex.from_source(
            JournalDocument.parse("# 2026/01/10\n- a @01/20 @1/20\n")
        )
        assert len(index.for_date(date(2026, 1, 20))) == 1

    def test_empty_window(self) -> None:
        assert LaterIndex([]).window(date(2026, 1, 1), 0) == {}
