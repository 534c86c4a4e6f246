"""BaseService: abstract foundation for all caliber services.

Every service receives a :class:`Journal` at construction time. The
Journal provides whole-file access to the active journal, the settings,
and the reference date.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from caliber.domain.tags import collect_journal_tags

if TYPE_CHECKING:
    from datetime import date

    from caliber.config.settings import CaliberSettings
    from caliber.infrastructure.journal import Journal

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Subclasses implement operations over the journal (day edits, filters,
    later entries, tags, hints) and return a
    :class:`~caliber.services.result.ServiceResult`.

    Usage::

        class DayService(BaseService):
            def add_entry(self, content: str, ...) -> ServiceResult:
                lines = self._journal.load_day_lines(day)
                ...
    """

    def __init__(self, journal: Journal) -> None:
        self._journal = journal

    @property
    def _settings(self) -> CaliberSettings:
        return self._journal.settings

    def _today(self) -> date:
        return self._journal.today()

    def _journal_tags(self) -> list[str]:
        """Tags used anywhere in the active journal, sorted."""
        return collect_journal_tags([self._journal.load_journal()])
