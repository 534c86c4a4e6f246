"""Completion hints: structured suggestions for partial input.

:func:`compute_hints` inspects an input buffer and returns one
:data:`HintContext` variant describing what could complete the token
being typed. The result is ephemeral: callers recompute it on every
change to the buffer.

Every variant offers the same three queries:

- ``is_active``: whether there is anything to show.
- ``first_completion()``: the suffix one accept keystroke inserts.
- ``display_items()``: candidate labels, in registry order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar

from caliber.domain.dates import (
    DateValue,
    date_values_for_scope,
    matches_date_value,
    matches_date_value_exact,
)
from caliber.domain.registry import COMMANDS, Command, FilterCategory, FilterSyntax, syntax_for
from caliber.domain.types import DateScope, HintMode

NEGATION_GUIDANCE = "Exclude with not:#tag, not:!type or not:text"


@dataclass(frozen=True)
class Inactive:
    kind: ClassVar[str] = "inactive"
    is_active: ClassVar[bool] = False

    def first_completion(self) -> str | None:
        return None

    def display_items(self) -> list[str]:
        return []


@dataclass(frozen=True)
class GuidanceMessage:
    """A hint that explains syntax instead of offering completions."""

    message: str

    kind: ClassVar[str] = "guidance"
    is_active: ClassVar[bool] = True

    def first_completion(self) -> str | None:
        return None

    def display_items(self) -> list[str]:
        return []


@dataclass(frozen=True)
class Tags:
    prefix: str
    matches: tuple[str, ...]

    kind: ClassVar[str] = "tags"
    is_active: ClassVar[bool] = True

    def first_completion(self) -> str | None:
        return self.matches[0][len(self.prefix) :] if self.matches else None

    def display_items(self) -> list[str]:
        return [f"#{tag}" for tag in self.matches]


@dataclass(frozen=True)
class Commands:
    prefix: str
    matches: tuple[Command, ...]

    kind: ClassVar[str] = "commands"
    is_active: ClassVar[bool] = True

    def first_completion(self) -> str | None:
        if not self.matches:
            return None
        needle = self.prefix.lower()
        for name in self.matches[0].names():
            if name.startswith(needle):
                return name[len(self.prefix) :]
        return None

    def display_items(self) -> list[str]:
        return [command.name for command in self.matches]


@dataclass(frozen=True)
class FilterTypes:
    """``!`` entry-type candidates. ``prefix`` excludes the ``!``."""

    prefix: str
    matches: tuple[FilterSyntax, ...]

    kind: ClassVar[str] = "filter_types"
    is_active: ClassVar[bool] = True

    def first_completion(self) -> str | None:
        if not self.matches:
            return None
        typed = f"!{self.prefix}".lower()
        first = self.matches[0]
        for spelling in (first.syntax, *first.aliases):
            if spelling.startswith(typed):
                return spelling[len(typed) :]
        return None

    def display_items(self) -> list[str]:
        return [item.syntax for item in self.matches]


@dataclass(frozen=True)
class DateOps:
    """``@`` operator candidates. ``prefix`` excludes the ``@``."""

    prefix: str
    matches: tuple[FilterSyntax, ...]

    kind: ClassVar[str] = "date_ops"
    is_active: ClassVar[bool] = True

    def first_completion(self) -> str | None:
        if not self.matches:
            return None
        return self.matches[0].syntax[1 + len(self.prefix) :]

    def display_items(self) -> list[str]:
        return [item.syntax for item in self.matches]


@dataclass(frozen=True)
class DateValues:
    """Date-expression candidates for the text after ``@`` or ``@op:``."""

    prefix: str
    scope: DateScope
    matches: tuple[DateValue, ...]

    kind: ClassVar[str] = "date_values"
    is_active: ClassVar[bool] = True

    def first_completion(self) -> str | None:
        for dv in self.matches:
            completed = dv.completion_for(self.prefix)
            if completed is not None:
                return completed[len(self.prefix) :]
        return None

    def display_items(self) -> list[str]:
        # Registry items are already grouped: one label per weekday group.
        return [dv.syntax for dv in self.matches]


@dataclass(frozen=True)
class SavedFilters:
    """``$`` saved-filter candidates. ``prefix`` excludes the ``$``."""

    prefix: str
    matches: tuple[str, ...]

    kind: ClassVar[str] = "saved_filters"
    is_active: ClassVar[bool] = True

    def first_completion(self) -> str | None:
        return self.matches[0][len(self.prefix) :] if self.matches else None

    def display_items(self) -> list[str]:
        return [f"${name}" for name in self.matches]


@dataclass(frozen=True)
class Negation:
    """Hints for the token after ``not:``."""

    inner: HintContext

    kind: ClassVar[str] = "negation"
    is_active: ClassVar[bool] = True

    def first_completion(self) -> str | None:
        return self.inner.first_completion()

    def display_items(self) -> list[str]:
        return [f"not:{item}" for item in self.inner.display_items()]


HintContext = (
    Inactive
    | GuidanceMessage
    | Tags
    | Commands
    | FilterTypes
    | DateOps
    | DateValues
    | SavedFilters
    | Negation
)

INACTIVE = Inactive()


def hint_to_dict(hint: HintContext) -> dict[str, object]:
    """Structured form used by JSON output."""
    data: dict[str, object] = {
        "kind": hint.kind,
        "active": hint.is_active,
        "items": hint.display_items(),
        "first_completion": hint.first_completion(),
    }
    if isinstance(hint, GuidanceMessage):
        data["message"] = hint.message
    elif isinstance(hint, Negation):
        data["inner"] = hint_to_dict(hint.inner)
    return data


# ---------------------------------------------------------------------------
# Computation
# ---------------------------------------------------------------------------


def _current_token(text: str) -> str:
    """Last whitespace-delimited token; empty when the input ends in a space."""
    if not text or text[-1].isspace():
        return ""
    return text.split()[-1]


def _prefix_matches(candidates: Sequence[str], prefix: str) -> list[str]:
    needle = prefix.lower()
    return [c for c in candidates if c.lower().startswith(needle)]


def _is_exhausted(matches: Sequence[str], typed: str) -> bool:
    return not matches or (len(matches) == 1 and matches[0].lower() == typed.lower())


def _tag_hints(prefix: str, journal_tags: Sequence[str]) -> HintContext:
    matches = _prefix_matches(journal_tags, prefix)
    if _is_exhausted(matches, prefix):
        return INACTIVE
    return Tags(prefix=prefix, matches=tuple(matches))


def _command_hints(text: str) -> HintContext:
    stripped = text.strip()
    if not stripped or " " in text.lstrip():
        return INACTIVE
    needle = stripped.lower()
    matches = [c for c in COMMANDS if any(n.startswith(needle) for n in c.names())]
    if not matches:
        return INACTIVE
    if len(matches) == 1 and needle in matches[0].names():
        return INACTIVE
    return Commands(prefix=stripped, matches=tuple(matches))


def _filter_type_hints(prefix: str) -> HintContext:
    typed = f"!{prefix}".lower()
    matches = [
        item
        for item in syntax_for(FilterCategory.ENTRY_TYPE)
        if any(s.startswith(typed) for s in (item.syntax, *item.aliases))
    ]
    if not matches:
        return INACTIVE
    if len(matches) == 1 and typed in (matches[0].syntax, *matches[0].aliases):
        return INACTIVE
    return FilterTypes(prefix=prefix, matches=tuple(matches))


def _date_value_hints(prefix: str, scope: DateScope) -> HintContext:
    matches = [dv for dv in date_values_for_scope(scope) if matches_date_value(prefix, dv)]
    if not matches:
        return INACTIVE
    if len(matches) == 1:
        only = matches[0]
        completion = only.completion_for(prefix)
        if matches_date_value_exact(prefix, only) and completion in (None, prefix.lower()):
            return INACTIVE
    return DateValues(prefix=prefix, scope=scope, matches=tuple(matches))


def _date_op_hints(prefix: str) -> HintContext:
    lowered = prefix.lower()
    for item in syntax_for(FilterCategory.DATE_OP):
        head = item.syntax[1:]
        if head.endswith(":") and lowered.startswith(head):
            return _date_value_hints(prefix[len(head) :], DateScope.FILTER)
    matches = [
        item for item in syntax_for(FilterCategory.DATE_OP) if item.syntax[1:].startswith(lowered)
    ]
    if _is_exhausted([item.syntax[1:] for item in matches], lowered):
        return INACTIVE
    return DateOps(prefix=prefix, matches=tuple(matches))


def _saved_filter_hints(prefix: str, names: Sequence[str]) -> HintContext:
    matches = _prefix_matches(sorted(names), prefix)
    if _is_exhausted(matches, prefix):
        return INACTIVE
    return SavedFilters(prefix=prefix, matches=tuple(matches))


def _filter_token_hints(
    token: str,
    journal_tags: Sequence[str],
    saved_filter_names: Sequence[str],
) -> HintContext:
    if token.startswith("#"):
        return _tag_hints(token[1:], journal_tags)
    if token.startswith("!"):
        return _filter_type_hints(token[1:])
    if token.startswith("@"):
        return _date_op_hints(token[1:])
    if token.startswith("$"):
        return _saved_filter_hints(token[1:], saved_filter_names)
    return INACTIVE


def _negation_hints(rest: str, journal_tags: Sequence[str]) -> HintContext:
    if not rest:
        return Negation(GuidanceMessage(NEGATION_GUIDANCE))
    # Date operators and saved filters cannot be negated.
    if rest[0] in "@$":
        return INACTIVE
    inner = _filter_token_hints(rest, journal_tags, ())
    if not inner.is_active:
        return INACTIVE
    return Negation(inner)


def compute_hints(
    text: str,
    mode: HintMode,
    journal_tags: Sequence[str] = (),
    saved_filter_names: Sequence[str] = (),
) -> HintContext:
    """Compute completion hints for *text* typed in *mode*.

    Args:
        text: Current input buffer.
        mode: Which buffer is being edited.
        journal_tags: Known tags, without ``#``, in display order.
        saved_filter_names: Names usable after ``$``.
    """
    if mode is HintMode.COMMAND:
        return _command_hints(text)

    token = _current_token(text)
    if not token:
        return INACTIVE

    if mode is HintMode.ENTRY:
        if token.startswith("#"):
            return _tag_hints(token[1:], journal_tags)
        if token.startswith("@"):
            return _date_value_hints(token[1:], DateScope.ENTRY)
        return INACTIVE

    if token.lower().startswith("not:"):
        return _negation_hints(token[4:], journal_tags)
    return _filter_token_hints(token, journal_tags, saved_filter_names)
