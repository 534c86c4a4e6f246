"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``caliber.toml`` only
contains overrides. An empty file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from caliber.domain.types import JournalSlot, SortKey

DEFAULT_SORT_ORDER: tuple[str, ...] = (
    SortKey.COMPLETED,
    SortKey.EVENTS,
    SortKey.NOTES,
    SortKey.UNCOMPLETED,
)


def _default_saved_filters() -> dict[str, str]:
    return {"t": "!tasks", "n": "!notes", "e": "!events"}


# --- caliber.toml sections ---


class JournalConfig(BaseModel):
    """[journal] section."""

    model_config = {"frozen": True}

    default_file: str | None = None
    project_file: str = ".caliber/journal.md"
    active: JournalSlot = JournalSlot.GLOBAL


class EntriesConfig(BaseModel):
    """[entries] section."""

    model_config = {"frozen": True}

    sort_order: list[str] = Field(default_factory=lambda: list(DEFAULT_SORT_ORDER))
    favorite_tags: list[str] = Field(default_factory=lambda: ["feature", "bug", "idea"])

    @field_validator("favorite_tags")
    @classmethod
    def _strip_hashes(cls, value: list[str]) -> list[str]:
        return [tag.strip().lstrip("#") for tag in value]

    def validated_sort_order(self) -> list[str]:
        """Known group names in configured order, deduplicated.

        Falls back to the default order when nothing valid remains.
        """
        valid = {str(key) for key in SortKey}
        seen: set[str] = set()
        result: list[str] = []
        for name in self.sort_order:
            if name in valid and name not in seen:
                seen.add(name)
                result.append(name)
        return result or [str(key) for key in DEFAULT_SORT_ORDER]


class FiltersConfig(BaseModel):
    """[filters] section."""

    model_config = {"frozen": True}

    saved: dict[str, str] = Field(default_factory=_default_saved_filters)
    default: str = "!tasks"
