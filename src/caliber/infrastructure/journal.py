"""Journal storage: whole-file read/write of the active journal.

The :class:`Journal` is the single dependency injected into every
service. It owns the :class:`JournalContext` (which file is active), the
settings, and the clock. Every operation reads the file fresh and writes
the whole file back: there is no caching, no locking, and the most
recent write wins.

INVARIANT: Files are truth. Nothing derived from a journal (entry
indices, projections, tag lists) outlives the call that computed it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from caliber.domain.entries import Line
from caliber.domain.journal import JournalDocument
from caliber.domain.types import JournalSlot

if TYPE_CHECKING:
    from caliber.config.settings import CaliberSettings

logger = logging.getLogger(__name__)


class ProjectJournalMissingError(LookupError):
    """Raised when switching to a project journal that does not exist."""


@dataclass
class JournalContext:
    """Which journal files exist and which one is active.

    Owned by the top-level session and passed explicitly; there is no
    process-wide journal state.
    """

    global_path: Path
    project_path: Path | None = None
    active: JournalSlot = JournalSlot.GLOBAL

    @property
    def active_path(self) -> Path:
        """The active file. A missing project journal falls back to global."""
        if self.active is JournalSlot.PROJECT and self.project_path is not None:
            return self.project_path
        return self.global_path

    @property
    def active_slot(self) -> JournalSlot:
        if self.active is JournalSlot.PROJECT and self.project_path is None:
            return JournalSlot.GLOBAL
        return self.active

    @classmethod
    def from_settings(cls, settings: CaliberSettings) -> JournalContext:
        project = settings.project_journal_path
        return cls(
            global_path=settings.global_journal_path,
            project_path=project if project.is_file() else None,
            active=settings.journal.active,
        )


class Journal:
    """Storage I/O over the active journal file.

    Constructed once per CLI invocation from :class:`CaliberSettings`.
    Services receive it via their :class:`BaseService` constructor.
    """

    def __init__(
        self,
        settings: CaliberSettings,
        *,
        context: JournalContext | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._settings = settings
        self._context = context or JournalContext.from_settings(settings)
        self._clock = clock

    @property
    def settings(self) -> CaliberSettings:
        return self._settings

    @property
    def context(self) -> JournalContext:
        return self._context

    @property
    def path(self) -> Path:
        """Path of the active journal file."""
        return self._context.active_path

    def today(self) -> date:
        """Reference date: ``--today`` if given, otherwise the clock."""
        return self._settings.today or self._clock()

    # --- Whole-file I/O ---

    def load_journal(self, path: Path | None = None) -> str:
        """Read a journal file. A missing file reads as empty.

        Raises:
            OSError: The file exists but cannot be read.
        """
        target = path or self.path
        if not target.exists():
            return ""
        return target.read_text(encoding="utf-8")

    def save_journal(self, text: str, path: Path | None = None) -> None:
        """Write *text* as the whole journal file.

        Creates parent directories if they don't exist.

        Raises:
            OSError: The file cannot be written.
        """
        target = path or self.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        logger.debug("Wrote journal %s (%d bytes)", target, len(text))

    def document(self) -> JournalDocument:
        """Parse the active journal into day sections."""
        return JournalDocument.parse(self.load_journal())

    def iter_days(self) -> Iterator[tuple[date, list[Line]]]:
        return self.document().iter_days()

    # --- Day-level I/O ---

    def load_day_lines(self, day: date) -> list[Line]:
        return self.document().day_lines(day)

    def save_day_lines(self, day: date, lines: Sequence[Line]) -> None:
        """Replace one day's lines and write the whole journal back."""
        doc = self.document()
        doc.set_day_lines(day, lines)
        self.save_journal(doc.render())

    # --- Context ---

    def switch(self, slot: JournalSlot) -> Path:
        """Make *slot* the active journal and return its path.

        Raises:
            ProjectJournalMissingError: No project journal exists.
        """
        if slot is JournalSlot.PROJECT and self._context.project_path is None:
            msg = f"No project journal at {self._settings.project_journal_path}"
            raise ProjectJournalMissingError(msg)
        self._context.active = slot
        return self.path

    def init_project(self) -> tuple[Path, bool]:
        """Create the project journal if missing. Returns ``(path, created)``."""
        path = self._settings.project_journal_path
        created = not path.exists()
        if created:
            self.save_journal("", path)
        self._context.project_path = path
        return path, created
