"""Where caliber looks for its config file and default journal.

Lookup order for the config file:

1. ``CALIBER_CONFIG`` (an unreadable path here means no config at all)
2. the nearest ``caliber.toml`` in the working directory or a parent
3. ``~/.config/caliber/config.toml``
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "caliber.toml"
CONFIG_ENV_VAR = "CALIBER_CONFIG"


def user_config_dir() -> Path:
    """``~/.config/caliber``: user config and the default global journal."""
    return Path.home() / ".config" / "caliber"


def user_config_path() -> Path:
    return user_config_dir() / "config.toml"


def default_journal_path() -> Path:
    return user_config_dir() / "journals" / "journal.md"


def _ancestors(start: Path) -> Iterator[Path]:
    here = start.resolve()
    yield here
    yield from here.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), or None."""
    if override := os.environ.get(CONFIG_ENV_VAR):
        candidate = Path(override)
        return candidate if candidate.is_file() else None

    for directory in _ancestors(start or Path.cwd()):
        if (directory / CONFIG_FILENAME).is_file():
            return directory / CONFIG_FILENAME

    fallback = user_config_path()
    return fallback if fallback.is_file() else None
