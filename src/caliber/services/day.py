"""DayService: entry operations on a single day of the active journal.

Pipeline for every mutation: LOAD → LOCATE → APPLY → SAVE → RESPOND.
The day is read fresh from the journal file, changed in memory through
:class:`~caliber.domain.entries.DayFile`, and the whole journal is
written back.

Entries are addressed two ways:

- By *number* (1-based position among the day's entries), as shown by
  ``caliber day show``.
- By ``(source_date, line_index)``, as carried by filter and later
  results. These ``*_at`` variants write through to the storage day.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from caliber.domain.dates import parse_goto_date
from caliber.domain.entries import DayFile, Entry, EntryType
from caliber.domain.projection import collect_later_entries_for_date
from caliber.domain.types import EntryKind
from caliber.services._helpers import entry_row, entry_rows, prepare_content
from caliber.services.base import BaseService
from caliber.services.result import ErrorCode, ServiceResult
from caliber.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

_ENTRY_TYPES: dict[EntryKind, EntryType] = {
    EntryKind.TASK: EntryType.task(),
    EntryKind.NOTE: EntryType.note(),
    EntryKind.EVENT: EntryType.event(),
}


class _Abort(Exception):
    """Carries a failure result out of a nested helper."""

    def __init__(self, result: ServiceResult) -> None:
        super().__init__(result.error.message if result.error else result.op)
        self.result = result


class DayService(BaseService):
    """Reads and edits the entries of one day."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @traced
    def show(self, day: date | str | None = None) -> ServiceResult:
        """Entries stored on *day* plus later entries projected onto it."""
        op = "show_day"
        try:
            target = self._resolve_day(op, day)
            with trace_span("load"):
                doc = self._journal.document()
            day_file = DayFile(day=target, lines=doc.day_lines(target))
            with trace_span("project"):
                later = collect_later_entries_for_date(target, doc)
        except _Abort as abort:
            return abort.result
        except OSError as exc:
            return self._io_failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "date": target.isoformat(),
                "journal": str(self._journal.path),
                "slot": str(self._journal.context.active_slot),
                "entries": entry_rows(day_file),
                "later": [item.to_dict() for item in later],
            },
        )

    # ------------------------------------------------------------------
    # Mutations by entry number
    # ------------------------------------------------------------------

    @traced
    def add_entry(
        self,
        content: str,
        *,
        day: date | str | None = None,
        kind: EntryKind = EntryKind.TASK,
        after: int | None = None,
    ) -> ServiceResult:
        """Add an entry to *day*, at the bottom or below entry *after*."""
        op = "add_entry"
        try:
            target = self._resolve_day(op, day)
            text = self._prepare(op, content)
            day_file = self._load(target)
            if after is not None:
                self._entry_line(op, day_file, after)
            entry = Entry(entry_type=_ENTRY_TYPES[kind], content=text)
            line_index = day_file.insert_entry(
                entry, after=None if after is None else after - 1
            )
            self._journal.save_day_lines(target, day_file.lines)
        except _Abort as abort:
            return abort.result
        except OSError as exc:
            return self._io_failure(op, exc)

        number = day_file.entry_indices.index(line_index) + 1
        logger.info("Added %s to %s", entry.entry_type.label(), target)
        return self._entry_result(op, target, number, line_index, entry)

    @traced
    def edit_entry(
        self,
        index: int,
        content: str,
        *,
        day: date | str | None = None,
    ) -> ServiceResult:
        """Replace the content of entry *index*. Empty content deletes it."""
        op = "edit_entry"
        try:
            target = self._resolve_day(op, day)
            day_file = self._load(target)
            line_index = self._entry_line(op, day_file, index)
        except _Abort as abort:
            return abort.result
        except OSError as exc:
            return self._io_failure(op, exc)
        return self.edit_at(target, line_index, content)

    @traced
    def toggle_entry(self, index: int, *, day: date | str | None = None) -> ServiceResult:
        """Flip completion of task *index*. Notes and events are unchanged."""
        return self._by_number("toggle_entry", index, day, self.toggle_at)

    @traced
    def delete_entry(self, index: int, *, day: date | str | None = None) -> ServiceResult:
        return self._by_number("delete_entry", index, day, self.delete_at)

    @traced
    def cycle_entry_type(self, index: int, *, day: date | str | None = None) -> ServiceResult:
        """Rotate entry *index* through task, note, event."""
        return self._by_number("cycle_entry_type", index, day, self.cycle_at)

    @traced
    def sort_entries(self, *, day: date | str | None = None) -> ServiceResult:
        """Reorder entries by the configured ``sort_order``."""
        op = "sort_entries"
        order = self._settings.entries.validated_sort_order()
        try:
            target = self._resolve_day(op, day)
            day_file = self._load(target)
            day_file.sort(order)
            if day_file.entry_count:
                self._journal.save_day_lines(target, day_file.lines)
        except _Abort as abort:
            return abort.result
        except OSError as exc:
            return self._io_failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "date": target.isoformat(),
                "sort_order": order,
                "entries": entry_rows(day_file),
            },
        )

    # ------------------------------------------------------------------
    # Write-through by storage location
    # ------------------------------------------------------------------

    @traced
    def edit_at(
        self,
        source_date: date | str,
        line_index: int,
        content: str,
    ) -> ServiceResult:
        """Replace content of the entry stored at *line_index* on *source_date*."""
        op = "edit_entry"
        text = content.strip()
        if not text:
            result = self.delete_at(source_date, line_index)
            if not result.ok:
                return result.model_copy(update={"op": op})
            return result.model_copy(update={"op": op, "data": {**result.data, "deleted": True}})
        try:
            source_date = self._resolve_day(op, source_date)
            day_file = self._load(source_date)
            entry = self._entry_at(op, day_file, line_index)
            entry.content = self._prepare(op, text)
            self._journal.save_day_lines(source_date, day_file.lines)
        except _Abort as abort:
            return abort.result
        except OSError as exc:
            return self._io_failure(op, exc)
        return self._located_result(op, source_date, day_file, line_index, entry)

    @traced
    def toggle_at(self, source_date: date | str, line_index: int) -> ServiceResult:
        op = "toggle_entry"
        try:
            source_date = self._resolve_day(op, source_date)
            day_file = self._load(source_date)
            entry = self._entry_at(op, day_file, line_index)
            entry.toggle_complete()
            self._journal.save_day_lines(source_date, day_file.lines)
        except _Abort as abort:
            return abort.result
        except OSError as exc:
            return self._io_failure(op, exc)
        return self._located_result(op, source_date, day_file, line_index, entry)

    @traced
    def cycle_at(self, source_date: date | str, line_index: int) -> ServiceResult:
        op = "cycle_entry_type"
        try:
            source_date = self._resolve_day(op, source_date)
            day_file = self._load(source_date)
            entry = self._entry_at(op, day_file, line_index)
            entry.entry_type = entry.entry_type.cycle()
            self._journal.save_day_lines(source_date, day_file.lines)
        except _Abort as abort:
            return abort.result
        except OSError as exc:
            return self._io_failure(op, exc)
        return self._located_result(op, source_date, day_file, line_index, entry)

    @traced
    def delete_at(self, source_date: date | str, line_index: int) -> ServiceResult:
        op = "delete_entry"
        try:
            source_date = self._resolve_day(op, source_date)
            day_file = self._load(source_date)
            entry = self._entry_at(op, day_file, line_index)
            number = day_file.entry_indices.index(line_index) + 1
            day_file.remove_line(line_index)
            self._journal.save_day_lines(source_date, day_file.lines)
        except _Abort as abort:
            return abort.result
        except OSError as exc:
            return self._io_failure(op, exc)
        return self._entry_result(op, source_date, number, line_index, entry)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _by_number(
        self,
        op: str,
        index: int,
        day: date | str | None,
        action: Callable[[date, int], ServiceResult],
    ) -> ServiceResult:
        try:
            target = self._resolve_day(op, day)
            line_index = self._entry_line(op, self._load(target), index)
        except _Abort as abort:
            return abort.result
        except OSError as exc:
            return self._io_failure(op, exc)
        return action(target, line_index)

    def _resolve_day(self, op: str, day: date | str | None) -> date:
        if day is None:
            return self._today()
        if isinstance(day, date):
            return day
        resolved = parse_goto_date(day, self._today())
        if resolved is None:
            message = f"Unrecognized date: {day!r}"
            raise _Abort(ServiceResult.failure(op, ErrorCode.INVALID_DATE, message))
        return resolved

    def _prepare(self, op: str, content: str) -> str:
        text = prepare_content(content, self._settings.entries.favorite_tags, self._today())
        if not text:
            failed = ServiceResult.failure(op, ErrorCode.EMPTY_CONTENT, "Entry content is empty")
            raise _Abort(failed)
        return text

    def _load(self, day: date) -> DayFile:
        return DayFile(day=day, lines=self._journal.load_day_lines(day))

    @staticmethod
    def _entry_line(op: str, day_file: DayFile, index: int) -> int:
        line_index = day_file.line_index_of(index - 1)
        if line_index is None:
            raise _Abort(
                ServiceResult.failure(
                    op,
                    ErrorCode.INVALID_INDEX,
                    f"No entry {index} on {day_file.day.isoformat()}"
                    f" ({day_file.entry_count} entries)",
                    index=index,
                )
            )
        return line_index

    @staticmethod
    def _entry_at(op: str, day_file: DayFile, line_index: int) -> Entry:
        entry = day_file.entry_at_line(line_index)
        if entry is None:
            raise _Abort(
                ServiceResult.failure(
                    op,
                    ErrorCode.INVALID_INDEX,
                    f"Line {line_index} on {day_file.day.isoformat()} is not an entry",
                    line_index=line_index,
                )
            )
        return entry

    def _located_result(
        self,
        op: str,
        day: date,
        day_file: DayFile,
        line_index: int,
        entry: Entry,
    ) -> ServiceResult:
        number = day_file.entry_indices.index(line_index) + 1
        return self._entry_result(op, day, number, line_index, entry)

    @staticmethod
    def _entry_result(
        op: str,
        day: date,
        number: int,
        line_index: int,
        entry: Entry,
    ) -> ServiceResult:
        return ServiceResult(
            ok=True,
            op=op,
            data={"date": day.isoformat(), "entry": entry_row(number, line_index, entry)},
        )

    @staticmethod
    def _io_failure(op: str, exc: OSError) -> ServiceResult:
        logger.warning("Journal I/O failed during %s: %s", op, exc)
        return ServiceResult.failure(op, ErrorCode.IO_ERROR, f"Journal I/O failed: {exc}")
