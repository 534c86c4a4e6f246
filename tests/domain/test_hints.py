"""Tests for completion hints."""

from __future__ import annotations

import pytest

from caliber.domain.hints import (
    INACTIVE,
    NEGATION_GUIDANCE,
    Commands,
    DateOps,
    DateValues,
    FilterTypes,
    GuidanceMessage,
    HintContext,
    Negation,
    SavedFilters,
    Tags,
    compute_hints,
    hint_to_dict,
)
from caliber.domain.types import DateScope, HintMode

TAGS = ["idea", "work", "workshop"]
SAVED = ["t", "n", "e"]


def _filter(text: str) -> HintContext:
    return compute_hints(text, HintMode.FILTER, TAGS, SAVED)


class TestFilterTypeHints:
    def test_partial_type(self) -> None:
        hint = compute_hints("!ta", HintMode.FILTER, [], [])
        assert isinstance(hint, FilterTypes)
        assert "!tasks" in hint.display_items()
        assert hint.first_completion() == "sks"

    def test_bang_alone_lists_all_types(self) -> None:
        hint = _filter("!")
        assert isinstance(hint, FilterTypes)
        assert hint.display_items() == [
            "!tasks",
            "!tasks/done",
            "!tasks/all",
            "!notes",
            "!events",
        ]

    def test_complete_unique_type_is_inactive(self) -> None:
        assert _filter("!notes") is INACTIVE
        assert _filter("!n") is INACTIVE

    def test_alias_completion(self) -> None:
        hint = _filter("!do")
        assert isinstance(hint, FilterTypes)
        assert hint.display_items() == ["!tasks/done"]
        assert hint.first_completion() == "ne"

    def test_no_match(self) -> None:
        assert _filter("!zz") is INACTIVE


class TestDateHints:
    def test_operator_prefix(self) -> None:
        hint = _filter("@be")
        assert isinstance(hint, DateOps)
        assert hint.first_completion() == "fore:"

    def test_all_operators(self) -> None:
        hint = _filter("@")
        assert isinstance(hint, DateOps)
        assert hint.display_items() == ["@before:", "@after:", "@overdue"]

    def test_values_after_operator(self) -> None:
        hint = _filter("@before:fr")
        assert isinstance(hint, DateValues)
        assert hint.scope is DateScope.FILTER
        assert hint.display_items() == ["mon..sun"]
        assert hint.first_completion() == "i"

    def test_filter_scope_has_no_recurrence(self) -> None:
        assert _filter("@after:ev") is INACTIVE

    def test_complete_operator_is_inactive(self) -> None:
        assert _filter("@overdue") is INACTIVE

    def test_entry_date_values(self) -> None:
        hint = compute_hints("Call Bob @tom", HintMode.ENTRY, TAGS)
        assert isinstance(hint, DateValues)
        assert hint.scope is DateScope.ENTRY
        assert hint.first_completion() == "orrow"

    def test_entry_recurrence(self) -> None:
        hint = compute_hints("Water @every-", HintMode.ENTRY)
        assert isinstance(hint, DateValues)
        assert hint.display_items() == ["every-[1-31]", "every-mon..sun"]
        assert hint.first_completion() == "mon"


class TestTagHints:
    def test_prefix(self) -> None:
        hint = _filter("#wo")
        assert isinstance(hint, Tags)
        assert hint.display_items() == ["#work", "#workshop"]
        assert hint.first_completion() == "rk"

    def test_exact_single_is_inactive(self) -> None:
        assert _filter("#workshop") is INACTIVE

    def test_entry_mode_tags(self) -> None:
        hint = compute_hints("Plan #i", HintMode.ENTRY, TAGS)
        assert hint == Tags(prefix="i", matches=("idea",))


class TestSavedFilterHints:
    def test_all_names_sorted(self) -> None:
        hint = _filter("$")
        assert isinstance(hint, SavedFilters)
        assert hint.display_items() == ["$e", "$n", "$t"]

    def test_exact_is_inactive(self) -> None:
        assert _filter("$t") is INACTIVE


class TestNegationHints:
    def test_guidance_when_empty(self) -> None:
        hint = _filter("not:")
        assert hint == Negation(GuidanceMessage(NEGATION_GUIDANCE))
        assert hint.is_active
        assert hint.first_completion() is None

    def test_wraps_inner_hint(self) -> None:
        hint = _filter("not:#wo")
        assert isinstance(hint, Negation)
        assert hint.display_items() == ["not:#work", "not:#workshop"]
        assert hint.first_completion() == "rk"

    @pytest.mark.parametrize("text", ["not:@be", "not:$t", "not:plain"])
    def test_inactive_for_non_negatable(self, text: str) -> None:
        assert _filter(text) is INACTIVE


class TestCommandHints:
    def test_prefix(self) -> None:
        hint = compute_hints("g", HintMode.COMMAND)
        assert isinstance(hint, Commands)
        assert hint.display_items() == ["global", "goto"]
        assert hint.first_completion() == "lobal"

    def test_unique_prefix(self) -> None:
        hint = compute_hints("pro", HintMode.COMMAND)
        assert isinstance(hint, Commands)
        assert hint.first_completion() == "ject"

    @pytest.mark.parametrize("text", ["", "goto", "q", "goto 01/10", "zzz"])
    def test_inactive(self, text: str) -> None:
        assert compute_hints(text, HintMode.COMMAND) is INACTIVE


class TestInactive:
    @pytest.mark.parametrize("text", ["", "!ta ", "review", "#wo and "])
    def test_filter_inputs(self, text: str) -> None:
        assert _filter(text) is INACTIVE

    def test_plain_entry_text(self) -> None:
        assert compute_hints("Buy milk", HintMode.ENTRY, TAGS) is INACTIVE

    def test_inactive_shape(self) -> None:
        assert not INACTIVE.is_active
        assert INACTIVE.first_completion() is None
        assert INACTIVE.display_items() == []


class TestHintToDict:
    def test_tags(self) -> None:
        assert hint_to_dict(_filter("#wo")) == {
            "kind": "tags",
            "active": True,
            "items": ["#work", "#workshop"],
            "first_completion": "rk",
        }

    def test_negation_guidance(self) -> None:
        data = hint_to_dict(Negation(GuidanceMessage(NEGATION_GUIDANCE)))
        assert data["kind"] == "negation"
        assert data["inner"]["message"] == NEGATION_GUIDANCE  # type: ignore[index]
