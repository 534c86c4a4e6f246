"""CaliberSettings: one frozen object built from flags, env and TOML.

Later sources lose to earlier ones:

1. keyword arguments from the Click root (``--today``, ``--journal`` ...)
2. ``CALIBER_*`` environment variables, ``__`` for nested sections
3. the TOML file picked by :func:`caliber.config.discovery.find_config`
4. defaults on the section models
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from datetime import date
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from caliber.config.discovery import CONFIG_FILENAME, default_journal_path, find_config
from caliber.config.models import EntriesConfig, FiltersConfig, JournalConfig
from caliber.domain.types import JournalSlot

# TOML tables parsed by from_cli, read back while pydantic builds the sources.
_pending_toml: ContextVar[dict[str, Any]] = ContextVar("caliber_pending_toml", default={})


def load_toml(path: Path | None) -> dict[str, Any]:
    """Parse *path*; a missing path gives an empty mapping.

    Raises:
        click.ClickException: The file exists but is not valid TOML.
    """
    if path is None or not path.is_file():
        return {}
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


class TomlTablesSource(PydanticBaseSettingsSource):
    """Settings source over already-parsed TOML tables."""

    def __init__(self, settings_cls: type[BaseSettings], tables: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._tables = tables

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._tables.get(field_name), field_name, field_name in self._tables

    def __call__(self) -> dict[str, Any]:
        known = self.settings_cls.model_fields
        return {key: value for key, value in self._tables.items() if key in known}


class CaliberSettings(BaseSettings):
    """Everything a command needs to know about the invocation.

    ``journal_root`` anchors relative paths: the directory holding a
    walked-up ``caliber.toml``, otherwise the working directory.
    ``journal_file`` is the ``--journal`` override and beats
    ``[journal] default_file``. ``today`` pins the reference date;
    None means the system clock.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CALIBER_",
        "env_nested_delimiter": "__",
    }

    journal_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    journal_file: Path | None = None
    today: date | None = None

    # output switches
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    journal: JournalConfig = Field(default_factory=JournalConfig)
    entries: EntriesConfig = Field(default_factory=EntriesConfig)
    filters: FiltersConfig = Field(default_factory=FiltersConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, TomlTablesSource(settings_cls, _pending_toml.get())

    def resolve_path(self, raw: str | Path) -> Path:
        """Expand ``~`` and anchor relative paths at ``journal_root``."""
        path = Path(raw).expanduser()
        return path if path.is_absolute() else self.journal_root / path

    @property
    def global_journal_path(self) -> Path:
        override = self.journal_file or self.journal.default_file
        return self.resolve_path(override) if override else default_journal_path()

    @property
    def project_journal_path(self) -> Path:
        return self.resolve_path(self.journal.project_file)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        journal_root: Path | None = None,
        project: bool = False,
        **cli_flags: Any,
    ) -> CaliberSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* that does not exist is ignored rather
        than falling back to discovery. Flags left at None do not
        override lower sources. *project* switches the active journal
        to the project slot after everything else is merged.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(journal_root)

        if journal_root is None:
            walked_up = toml_path is not None and toml_path.name == CONFIG_FILENAME
            journal_root = toml_path.parent if walked_up else Path.cwd()

        flags = {name: value for name, value in cli_flags.items() if value is not None}
        token = _pending_toml.set(load_toml(toml_path))
        try:
            settings = cls(journal_root=journal_root, config_path=toml_path, **flags)
        finally:
            _pending_toml.reset(token)

        if not project:
            return settings
        journal = settings.journal.model_copy(update={"active": JournalSlot.PROJECT})
        return settings.model_copy(update={"journal": journal})
