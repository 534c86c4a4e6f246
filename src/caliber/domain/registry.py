"""Static vocabularies offered to completion: commands and filter syntax."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class Command:
    """A command-line command the session understands."""

    name: str
    aliases: tuple[str, ...]
    args: str
    description: str

    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)


COMMANDS: tuple[Command, ...] = (
    Command("config-reload", (), "", "Reload configuration from disk"),
    Command("global", (), "", "Switch to the global journal"),
    Command("goto", ("g",), "<date>", "Go to a date (YYYY/MM/DD or MM/DD)"),
    Command("init-project", (), "", "Create a project journal here"),
    Command("open", ("o",), "<path>", "Open a journal file"),
    Command("project", (), "", "Switch to the project journal"),
    Command("quit", ("q",), "", "Quit"),
)


class FilterCategory(StrEnum):
    """Grammatical category of a filter token."""

    ENTRY_TYPE = "entry_type"
    TAG = "tag"
    DATE_OP = "date_op"
    NEGATION = "negation"
    SAVED_FILTER = "saved_filter"


@dataclass(frozen=True)
class FilterSyntax:
    """One documented piece of filter syntax."""

    syntax: str
    category: FilterCategory
    description: str
    aliases: tuple[str, ...] = ()


FILTER_SYNTAX: tuple[FilterSyntax, ...] = (
    FilterSyntax("!tasks", FilterCategory.ENTRY_TYPE, "Incomplete tasks", ("!t",)),
    FilterSyntax(
        "!tasks/done",
        FilterCategory.ENTRY_TYPE,
        "Completed tasks",
        ("!completed", "!done"),
    ),
    FilterSyntax("!tasks/all", FilterCategory.ENTRY_TYPE, "All tasks"),
    FilterSyntax("!notes", FilterCategory.ENTRY_TYPE, "Notes", ("!n",)),
    FilterSyntax("!events", FilterCategory.ENTRY_TYPE, "Events", ("!e",)),
    FilterSyntax("@before:", FilterCategory.DATE_OP, "Entries on or before a date"),
    FilterSyntax("@after:", FilterCategory.DATE_OP, "Entries on or after a date"),
    FilterSyntax("@overdue", FilterCategory.DATE_OP, "Entries with a past @date"),
    FilterSyntax("#", FilterCategory.TAG, "Entries with a tag"),
    FilterSyntax("not:", FilterCategory.NEGATION, "Exclude a tag, type or text"),
    FilterSyntax("$", FilterCategory.SAVED_FILTER, "Expand a saved filter"),
)


def syntax_for(category: FilterCategory) -> list[FilterSyntax]:
    return [item for item in FILTER_SYNTAX if item.category is category]
