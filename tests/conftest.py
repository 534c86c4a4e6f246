"""Shared pytest fixtures and test helpers for caliber tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from pathlib import Path

import pytest
from click.testing import CliRunner

from caliber.config.settings import CaliberSettings
from caliber.infrastructure.journal import Journal
from caliber.services.telemetry import disable_telemetry

# Thursday. Weekday arithmetic in tests is written against this date.
TODAY = date(2026, 1, 15)

SAMPLE_JOURNAL = """\
# 2026/01/10
- [ ] Call Bob @01/20 #work
- [x] Send invoice #work
- Standup notes
* Dentist 3pm

# 2026/01/12
- [ ] Water plants @every-mon
- [ ] Draft proposal #work #idea
- Lunch with Alice

# 2026/01/15
- [ ] Review PR #work
"""


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep every test away from the real home directory and config."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("CALIBER_CONFIG", raising=False)
    monkeypatch.delenv("CALIBER_TODAY", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    """`caliber -v` enables telemetry for the current context; undo it."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Runner for invoking the root group in-process."""
    return CliRunner()


@pytest.fixture
def journal_root(tmp_path: Path) -> Path:
    """Temporary directory that holds the journal files and caliber.toml."""
    root = tmp_path / "work"
    root.mkdir()
    return root


@pytest.fixture
def journal_path(journal_root: Path) -> Path:
    return journal_root / "journal.md"


@pytest.fixture
def settings(journal_root: Path, journal_path: Path) -> CaliberSettings:
    return CaliberSettings.from_cli(journal_root=journal_root, journal_file=journal_path)


@pytest.fixture
def journal(settings: CaliberSettings) -> Journal:
    """Journal over an empty file with the clock pinned to TODAY."""
    return Journal(settings, clock=lambda: TODAY)


@pytest.fixture
def seeded_journal(journal: Journal, journal_path: Path) -> Journal:
    """Journal pre-filled with SAMPLE_JOURNAL."""
    journal_path.write_text(SAMPLE_JOURNAL, encoding="utf-8")
    return journal


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def cli_args(journal_path: Path, *args: str) -> list[str]:
    """Global flags that point the CLI at *journal_path* on TODAY."""
    return ["--journal", str(journal_path), "--today", TODAY.isoformat(), *args]
