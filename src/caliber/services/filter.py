"""FilterService: run filter queries across every day of the journal."""

from __future__ import annotations

from caliber.domain.filters import collect_filtered_entries, parse_filter_query
from caliber.domain.tags import get_favorite_tag
from caliber.services.base import BaseService
from caliber.services.result import ErrorCode, ServiceResult
from caliber.services.telemetry import get_current_span, trace_span, traced


class FilterService(BaseService):
    """Parses filter queries and collects matching entries."""

    @traced
    def run(self, query: str | None = None) -> ServiceResult:
        """Entries matching *query*; the configured default when omitted.

        Unrecognized tokens are reported as warnings and otherwise
        ignored.
        """
        op = "filter"
        filters = self._settings.filters
        text = filters.default if query is None or not query.strip() else query
        today = self._today()
        spec = parse_filter_query(text, filters.saved, today)

        try:
            with trace_span("load"):
                doc = self._journal.document()
        except OSError as exc:
            return ServiceResult.failure(op, ErrorCode.IO_ERROR, f"Journal I/O failed: {exc}")

        with trace_span("match"):
            matches = collect_filtered_entries(spec, doc, today)

        span = get_current_span()
        if span is not None:
            span.annotate("matches", len(matches))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "query": text,
                "filter": spec.to_dict(),
                "count": len(matches),
                "entries": [item.to_dict() for item in matches],
            },
            warnings=[f"Unrecognized filter token: {token}" for token in spec.invalid_tokens],
        )

    def quick(self, key: str) -> ServiceResult:
        """Filter by the favorite tag bound to number *key*."""
        tag = get_favorite_tag(self._settings.entries.favorite_tags, key)
        if tag is None:
            return ServiceResult.failure(
                "filter", ErrorCode.NOT_FOUND, f"No favorite tag bound to key {key!r}"
            )
        return self.run(f"#{tag}")

    def saved_filters(self) -> ServiceResult:
        saved = self._settings.filters.saved
        return ServiceResult(
            ok=True,
            op="saved_filters",
            data={
                "default": self._settings.filters.default,
                "filters": [{"name": name, "query": saved[name]} for name in sorted(saved)],
            },
        )
