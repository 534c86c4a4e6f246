"""Tests for date expressions, recurrences, and the completion registry."""

from __future__ import annotations

from datetime import date

import pytest

from caliber.domain.dates import (
    DATE_VALUES,
    DateValue,
    Recurrence,
    date_values_for_scope,
    entry_dates,
    entry_recurrences,
    extract_date_tokens,
    format_short_date,
    matches_date_value,
    matches_date_value_exact,
    normalize_natural_dates,
    parse_date,
    parse_goto_date,
    parse_recurrence,
    weekday_from_name,
)
from caliber.domain.types import DateScope

TODAY = date(2026, 1, 15)  # Thursday


class TestParseDate:
    @pytest.mark.parametrize(
        ("expr", "expected"),
        [
            ("today", TODAY),
            ("t", TODAY),
            ("tomorrow", date(2026, 1, 16)),
            ("yesterday", date(2026, 1, 14)),
            ("TOMORROW", date(2026, 1, 16)),
        ],
    )
    def test_keywords(self, expr: str, expected: date) -> None:
        assert parse_date(expr, TODAY) == expected

    def test_weekday_entry_scope_is_future(self) -> None:
        assert parse_date("fri", TODAY, DateScope.ENTRY) == date(2026, 1, 16)
        assert parse_date("m", TODAY, DateScope.ENTRY) == date(2026, 1, 19)

    def test_same_weekday_is_a_week_away(self) -> None:
        assert parse_date("thu", TODAY, DateScope.ENTRY) == date(2026, 1, 22)
        assert parse_date("thursday", TODAY, DateScope.FILTER) == date(2026, 1, 8)

    def test_weekday_filter_scope_is_past(self) -> None:
        assert parse_date("fri", TODAY, DateScope.FILTER) == date(2026, 1, 9)

    def test_plus_suffix_forces_future_in_filter(self) -> None:
        assert parse_date("fri+", TODAY, DateScope.FILTER) == date(2026, 1, 16)

    def test_minus_suffix_forces_past_in_entry(self) -> None:
        assert parse_date("fri-", TODAY, DateScope.ENTRY) == date(2026, 1, 9)

    def test_relative_days(self) -> None:
        assert parse_date("d3", TODAY, DateScope.ENTRY) == date(2026, 1, 18)
        assert parse_date("d3", TODAY, DateScope.FILTER) == date(2026, 1, 12)
        assert parse_date("d3+", TODAY, DateScope.FILTER) == date(2026, 1, 18)

    def test_relative_days_bounds(self) -> None:
        assert parse_date("d0", TODAY) is None
        assert parse_date("d1000", TODAY) is None

    def test_absolute_rolls_forward_in_entry_scope(self) -> None:
        assert parse_date("1/20", TODAY, DateScope.ENTRY) == date(2026, 1, 20)
        assert parse_date("1/10", TODAY, DateScope.ENTRY) == date(2027, 1, 10)

    def test_absolute_stays_in_year_in_filter_scope(self) -> None:
        assert parse_date("1/10", TODAY, DateScope.FILTER) == date(2026, 1, 10)
        assert parse_date("1/20", TODAY, DateScope.FILTER) == date(2026, 1, 20)

    def test_absolute_with_bias_rolls(self) -> None:
        assert parse_date("1/20-", TODAY, DateScope.FILTER) == date(2025, 1, 20)

    def test_absolute_with_year(self) -> None:
        assert parse_date("12/25/25", TODAY) == date(2025, 12, 25)
        assert parse_date("12/25/2024", TODAY) == date(2024, 12, 25)

    @pytest.mark.parametrize("expr", ["", "xyz", "2/30", "13/01", "every-mon", "s", "+"])
    def test_unrecognized(self, expr: str) -> None:
        assert parse_date(expr, TODAY) is None


class TestWeekdayFromName:
    def test_prefixes(self) -> None:
        assert weekday_from_name("w") == 2
        assert weekday_from_name("tu") == 1
        assert weekday_from_name("th") == 3
        assert weekday_from_name("sa") == 5
        assert weekday_from_name("sunday") == 6

    def test_ambiguous(self) -> None:
        assert weekday_from_name("s") is None
        assert weekday_from_name("t") is None


class TestParseGotoDate:
    def test_full_formats(self) -> None:
        assert parse_goto_date("2026/02/01", TODAY) == date(2026, 2, 1)
        assert parse_goto_date("2026-02-01", TODAY) == date(2026, 2, 1)

    def test_month_day_uses_current_year(self) -> None:
        assert parse_goto_date("01/10", TODAY) == date(2026, 1, 10)
        assert parse_goto_date("12/31", TODAY) == date(2026, 12, 31)

    def test_falls_back_to_expressions(self) -> None:
        assert parse_goto_date("yesterday", TODAY) == date(2026, 1, 14)
        assert parse_goto_date("mon", TODAY) == date(2026, 1, 19)

    def test_garbage(self) -> None:
        assert parse_goto_date("not a date", TODAY) is None

    def test_short_format(self) -> None:
        assert format_short_date(date(2026, 3, 7)) == "03/07"


class TestRecurrence:
    def test_day_of_month(self) -> None:
        rule = parse_recurrence("every-15")
        assert rule == Recurrence(day_of_month=15)
        assert rule.matches(date(2026, 2, 15))
        assert not rule.matches(date(2026, 2, 16))
        assert rule.render() == "every-15"

    def test_weekday(self) -> None:
        rule = parse_recurrence("every-monday")
        assert rule == Recurrence(weekday=0)
        assert rule.matches(date(2026, 1, 19))
        assert rule.render() == "every-mon"

    @pytest.mark.parametrize("expr", ["every-", "every-0", "every-32", "every-s", "monday"])
    def test_invalid(self, expr: str) -> None:
        assert parse_recurrence(expr) is None


class TestEmbeddedDates:
    def test_tokens(self) -> None:
        tokens = extract_date_tokens("Call @01/20 then @fri")
        assert [t.expr for t in tokens] == ["01/20", "fri"]
        assert tokens[0].start == 5

    def test_email_is_not_a_date(self) -> None:
        assert extract_date_tokens("mail bob@example.com") == []

    def test_entry_dates_resolve_against_source_day(self) -> None:
        source = date(2026, 1, 10)
        assert entry_dates("Call Bob @01/20 and @tomorrow", source) == [
            date(2026, 1, 20),
            date(2026, 1, 11),
        ]

    def test_entry_dates_skip_recurrences(self) -> None:
        assert entry_dates("Water @every-mon", TODAY) == []
        assert entry_recurrences("Water @every-mon") == [Recurrence(weekday=0)]


class TestNormalizeNaturalDates:
    def test_relative_words(self) -> None:
        assert normalize_natural_dates("Call @tomorrow", TODAY) == "Call @01/16"
        assert normalize_natural_dates("Ship @fri #work", TODAY) == "Ship @01/16 #work"

    def test_year_kept_when_needed(self) -> None:
        assert normalize_natural_dates("Recap @12/25/25", TODAY) == "Recap @12/25/25"
        assert normalize_natural_dates("Renew @d400", TODAY) == "Renew @02/19/27"

    def test_untouched(self) -> None:
        text = "Water @every-mon, ask @nobody, mail a@b.com"
        assert normalize_natural_dates(text, TODAY) == text


# ---------------------------------------------------------------------------
# Completion registry
# ---------------------------------------------------------------------------

# One complete value per registry form.
_SAMPLE_VALUES: dict[str, list[str]] = {
    "today": ["today"],
    "tomorrow": ["tomorrow"],
    "yesterday": ["yesterday"],
    "mon..sun": ["wednesday", "fri", "sa"],
    "d[1-999]": ["d7", "d123"],
    "MM/DD": ["12/31", "1/5"],
    "MM/DD/YY": ["1/5/26", "12/31/2026"],
    "every-[1-31]": ["every-15", "every-3"],
    "every-mon..sun": ["every-fri", "every-tuesday"],
}


class TestDateValueRegistry:
    @pytest.mark.parametrize("dv", DATE_VALUES, ids=lambda dv: dv.syntax)
    def test_every_prefix_of_a_value_matches(self, dv: DateValue) -> None:
        for value in _SAMPLE_VALUES[dv.syntax]:
            assert matches_date_value_exact(value, dv), value
            for end in range(len(value) + 1):
                assert matches_date_value(value[:end], dv), value[:end]

    def test_bias_suffix(self) -> None:
        weekdays = next(dv for dv in DATE_VALUES if dv.syntax == "mon..sun")
        assert matches_date_value("fri+", weekdays)
        assert matches_date_value_exact("fri-", weekdays)
        assert not matches_date_value("s+", weekdays)

    def test_rejects(self) -> None:
        month_day = next(dv for dv in DATE_VALUES if dv.syntax == "MM/DD")
        assert not matches_date_value("13", month_day)
        assert not matches_date_value("1/32", month_day)
        assert not matches_date_value("1/2/3", month_day)

    @pytest.mark.parametrize(
        ("value", "syntax"), [("2/31", "MM/DD"), ("4/31", "MM/DD"), ("2/29/26", "MM/DD/YY")]
    )
    def test_calendar_invalid_value_is_not_complete(self, value: str, syntax: str) -> None:
        dv = next(dv for dv in DATE_VALUES if dv.syntax == syntax)
        assert not matches_date_value_exact(value, dv)
        assert parse_date(value, TODAY, DateScope.FILTER) is None

    def test_leap_day_is_complete(self) -> None:
        month_day = next(dv for dv in DATE_VALUES if dv.syntax == "MM/DD")
        with_year = next(dv for dv in DATE_VALUES if dv.syntax == "MM/DD/YY")
        assert matches_date_value_exact("2/29", month_day)
        assert matches_date_value_exact("2/29/28", with_year)
        assert parse_date("2/29/28", TODAY, DateScope.FILTER) == date(2028, 2, 29)

    def test_filter_scope_excludes_recurrence(self) -> None:
        syntaxes = [dv.syntax for dv in date_values_for_scope(DateScope.FILTER)]
        assert "every-[1-31]" not in syntaxes
        assert "every-mon..sun" not in syntaxes
        assert "today" in syntaxes
        assert len(date_values_for_scope(DateScope.ENTRY)) == len(DATE_VALUES)

    def test_completion_for(self) -> None:
        by_syntax = {dv.syntax: dv for dv in DATE_VALUES}
        assert by_syntax["mon..sun"].completion_for("we") == "wed"
        assert by_syntax["tomorrow"].completion_for("tom") == "tomorrow"
        assert by_syntax["d[1-999]"].completion_for("") == "d"
        assert by_syntax["d[1-999]"].completion_for("d") is None
        assert by_syntax["every-mon..sun"].completion_for("every-th") == "every-thu"
