"""LaterService: entries projected onto a day from other days."""

from __future__ import annotations

from datetime import date

from caliber.domain.dates import parse_goto_date
from caliber.domain.projection import LaterIndex, collect_later_entries_for_date
from caliber.services.base import BaseService
from caliber.services.result import ErrorCode, ServiceResult
from caliber.services.telemetry import trace_span, traced


class LaterService(BaseService):
    """Read-only views over later entries."""

    def _parse(self, day: date | str | None) -> date | None:
        if day is None:
            return self._today()
        if isinstance(day, date):
            return day
        return parse_goto_date(day, self._today())

    @traced
    def for_date(self, day: date | str | None = None) -> ServiceResult:
        op = "later"
        target = self._parse(day)
        if target is None:
            return ServiceResult.failure(op, ErrorCode.INVALID_DATE, f"Unrecognized date: {day!r}")
        try:
            doc = self._journal.document()
        except OSError as exc:
            return ServiceResult.failure(op, ErrorCode.IO_ERROR, f"Journal I/O failed: {exc}")

        entries = collect_later_entries_for_date(target, doc)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "date": target.isoformat(),
                "count": len(entries),
                "entries": [item.to_dict() for item in entries],
            },
        )

    @traced
    def agenda(self, start: date | str | None = None, days: int = 7) -> ServiceResult:
        """Later entries for each of *days* dates beginning at *start*.

        Days with nothing due are omitted from the result.
        """
        op = "agenda"
        first = self._parse(start)
        if first is None:
            message = f"Unrecognized date: {start!r}"
            return ServiceResult.failure(op, ErrorCode.INVALID_DATE, message)
        try:
            with trace_span("index"):
                index = LaterIndex.from_source(self._journal.document())
        except OSError as exc:
            return ServiceResult.failure(op, ErrorCode.IO_ERROR, f"Journal I/O failed: {exc}")

        window = index.window(first, days)
        agenda_days = [
            {
                "date": day.isoformat(),
                "entries": [item.to_dict() for item in items],
            }
            for day, items in window.items()
            if items
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "start": first.isoformat(),
                "days": max(days, 0),
                "count": sum(len(day["entries"]) for day in agenda_days),
                "agenda": agenda_days,
            },
        )
