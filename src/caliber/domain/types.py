"""Classification enums shared across the domain layer.

Entry kinds, date-expression scopes, hint input modes, and the two
journal slots a session can switch between.
"""

from __future__ import annotations

from enum import StrEnum


class EntryKind(StrEnum):
    """Primary entry kinds in a day-file."""

    TASK = "task"
    NOTE = "note"
    EVENT = "event"


class DateScope(StrEnum):
    """Where a date expression is being resolved.

    Entry scope prefers the nearest future occurrence; filter scope
    prefers the nearest past occurrence unless a ``+`` suffix is given.
    """

    ENTRY = "entry"
    FILTER = "filter"


class HintMode(StrEnum):
    """Which input buffer hints are computed for."""

    COMMAND = "command"
    FILTER = "filter"
    ENTRY = "entry"


class JournalSlot(StrEnum):
    """Which journal file is active."""

    GLOBAL = "global"
    PROJECT = "project"


class SortKey(StrEnum):
    """Entry groups accepted by the ``sort_order`` setting."""

    COMPLETED = "completed"
    UNCOMPLETED = "uncompleted"
    NOTES = "notes"
    EVENTS = "events"
