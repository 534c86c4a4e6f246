"""Shared service-layer helper functions."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from caliber.domain.dates import normalize_natural_dates
from caliber.domain.entries import DayFile, Entry
from caliber.domain.tags import expand_favorite_tags


def prepare_content(content: str, favorites: Sequence[str], today: date) -> str:
    """Content as it is saved: favorite tags expanded, then dates normalized."""
    return normalize_natural_dates(expand_favorite_tags(content.strip(), favorites), today)


def entry_rows(day_file: DayFile) -> list[dict[str, object]]:
    """Entries of a day as output rows, numbered from 1."""
    return [
        entry_row(number, line_index, entry)
        for number, (line_index, entry) in enumerate(day_file.iter_entries(), start=1)
    ]


def entry_row(number: int, line_index: int, entry: Entry) -> dict[str, object]:
    return {
        "index": number,
        "line_index": line_index,
        "type": entry.entry_type.label(),
        "completed": entry.completed,
        "content": entry.content,
    }
