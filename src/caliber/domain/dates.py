"""Date expressions: resolution, recurrence rules, and completion matching.

One resolver is shared by dates embedded in entries (``@01/20``) and by
filter date operators (``@before:mon``). The :class:`DateScope` decides
which way ambiguous expressions lean:

- ``ENTRY``: nearest *future* occurrence (``@fri`` means next Friday).
- ``FILTER``: nearest *past* occurrence, unless the expression ends in
  ``+`` (``@after:fri+``). A trailing ``-`` forces the past in either
  scope.

Recognized forms:

- Absolute ``M/D``, ``M/D/YY``, ``M/D/YYYY``.
- ``today`` (also ``t``), ``tomorrow``, ``yesterday``.
- Weekdays by full name, abbreviation, or shortest unambiguous prefix
  (``m``, ``tu``, ``w``, ``th``, ``f``, ``sa``, ``su``).
- Relative offsets ``d1`` .. ``d999``.
- Recurrence ``every-1`` .. ``every-31`` and ``every-<weekday>``. These
  are rules, not dates; see :func:`parse_recurrence`.

Pure functions, no I/O. ``today`` is always passed in.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import StrEnum

from caliber.domain.types import DateScope

WEEKDAY_NAMES: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
WEEKDAY_ABBREVIATIONS: tuple[str, ...] = tuple(name[:3] for name in WEEKDAY_NAMES)

# Shortest prefix that identifies each weekday. Bare "t" is reserved for today.
_WEEKDAY_MIN_PREFIX: tuple[int, ...] = (1, 2, 1, 2, 1, 2, 2)

_RELATIVE_DAYS = re.compile(r"d([1-9]\d{0,2})")
_ABSOLUTE = re.compile(r"(\d{1,2})/(\d{1,2})(?:/(\d{2}|\d{4}))?")
_EVERY_PREFIX = "every-"

# "@" followed by a date-ish token. The lookbehind skips e-mail addresses;
# the token class stops at any character that cannot belong to a date.
_ENTRY_DATE_TOKEN = re.compile(r"(?<![\w@])@([A-Za-z0-9][A-Za-z0-9/+\-]*)")


# ---------------------------------------------------------------------------
# Single-date resolution
# ---------------------------------------------------------------------------


def weekday_from_name(token: str) -> int | None:
    """Map a weekday name or unambiguous prefix to ``date.weekday()``."""
    token = token.lower()
    if not token.isalpha():
        return None
    for index, name in enumerate(WEEKDAY_NAMES):
        if len(token) >= _WEEKDAY_MIN_PREFIX[index] and name.startswith(token):
            return index
    return None


def _split_bias(text: str) -> tuple[str, str | None]:
    if text and text[-1] in "+-":
        return text[:-1], text[-1]
    return text, None


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _resolve_absolute(
    match: re.Match[str],
    today: date,
    *,
    roll: bool,
    prefer_future: bool,
) -> date | None:
    month, day = int(match.group(1)), int(match.group(2))
    year_text = match.group(3)
    if year_text is not None:
        year = int(year_text)
        if len(year_text) == 2:
            year += 2000
        return _safe_date(year, month, day)

    candidate = _safe_date(today.year, month, day)
    if not roll:
        return candidate
    if prefer_future and (candidate is None or candidate < today):
        return _safe_date(today.year + 1, month, day) or candidate
    if not prefer_future and (candidate is None or candidate > today):
        return _safe_date(today.year - 1, month, day) or candidate
    return candidate


def parse_date(expr: str, today: date, scope: DateScope = DateScope.ENTRY) -> date | None:
    """Resolve a single-date expression to a concrete date.

    Returns ``None`` for anything unrecognized, including recurrence
    rules (use :func:`parse_recurrence` for those).
    """
    text = expr.strip().lower()
    body, bias = _split_bias(text)
    if not body:
        return None

    if bias is None:
        prefer_future = scope is DateScope.ENTRY
    else:
        prefer_future = bias == "+"

    if body in ("today", "t"):
        return today
    if body == "tomorrow":
        return today + timedelta(days=1)
    if body == "yesterday":
        return today - timedelta(days=1)

    relative = _RELATIVE_DAYS.fullmatch(body)
    if relative:
        offset = timedelta(days=int(relative.group(1)))
        return today + offset if prefer_future else today - offset

    weekday = weekday_from_name(body)
    if weekday is not None:
        if prefer_future:
            ahead = (weekday - today.weekday()) % 7 or 7
            return today + timedelta(days=ahead)
        behind = (today.weekday() - weekday) % 7 or 7
        return today - timedelta(days=behind)

    absolute = _ABSOLUTE.fullmatch(body)
    if absolute:
        # Year rolling applies to entry contexts, or when a bias is explicit.
        roll = bias is not None or scope is DateScope.ENTRY
        return _resolve_absolute(absolute, today, roll=roll, prefer_future=prefer_future)

    return None


def parse_goto_date(text: str, today: date) -> date | None:
    """Parse a navigation target: ``YYYY/MM/DD``, ``YYYY-MM-DD``, ``MM/DD``.

    ``MM/DD`` uses the current year without rolling. Anything else falls
    back to :func:`parse_date` in entry scope.
    """
    text = text.strip()
    for fmt in ("%Y/%m/%d", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            pass
    try:
        return datetime.strptime(f"{today.year}/{text}", "%Y/%m/%d").date()
    except ValueError:
        pass
    return parse_date(text, today, DateScope.ENTRY)


def format_short_date(day: date) -> str:
    """``MM/DD`` as used in entry dates and source-day suffixes."""
    return day.strftime("%m/%d")


# ---------------------------------------------------------------------------
# Recurrence
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Recurrence:
    """A repeating date rule: a day of the month or a weekday."""

    day_of_month: int | None = None
    weekday: int | None = None

    def matches(self, day: date) -> bool:
        if self.day_of_month is not None:
            return day.day == self.day_of_month
        if self.weekday is not None:
            return day.weekday() == self.weekday
        return False

    def render(self) -> str:
        if self.day_of_month is not None:
            return f"{_EVERY_PREFIX}{self.day_of_month}"
        if self.weekday is not None:
            return f"{_EVERY_PREFIX}{WEEKDAY_ABBREVIATIONS[self.weekday]}"
        return _EVERY_PREFIX


def parse_recurrence(expr: str) -> Recurrence | None:
    """Parse ``every-<1-31>`` or ``every-<weekday>``."""
    text = expr.strip().lower()
    if not text.startswith(_EVERY_PREFIX):
        return None
    rest = text[len(_EVERY_PREFIX) :]
    if _is_day_of_month(rest):
        return Recurrence(day_of_month=int(rest))
    weekday = weekday_from_name(rest)
    if weekday is not None:
        return Recurrence(weekday=weekday)
    return None


def _is_day_of_month(text: str) -> bool:
    return bool(re.fullmatch(r"[1-9]\d?", text)) and int(text) <= 31


# ---------------------------------------------------------------------------
# Dates embedded in entry content
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DateToken:
    """An ``@expr`` occurrence inside entry content."""

    expr: str
    start: int
    end: int


def extract_date_tokens(content: str) -> list[DateToken]:
    """All ``@expr`` tokens in *content*, recognized or not."""
    return [
        DateToken(expr=m.group(1), start=m.start(), end=m.end())
        for m in _ENTRY_DATE_TOKEN.finditer(content)
    ]


def entry_dates(content: str, source_date: date) -> list[date]:
    """Concrete dates an entry points at, resolved against its storage day."""
    results: list[date] = []
    for token in extract_date_tokens(content):
        resolved = parse_date(token.expr, source_date, DateScope.ENTRY)
        if resolved is not None:
            results.append(resolved)
    return results


def entry_recurrences(content: str) -> list[Recurrence]:
    """Recurrence rules embedded in an entry."""
    results: list[Recurrence] = []
    for token in extract_date_tokens(content):
        rule = parse_recurrence(token.expr)
        if rule is not None:
            results.append(rule)
    return results


def normalize_natural_dates(content: str, today: date) -> str:
    """Rewrite resolvable ``@`` dates to ``@MM/DD`` (or ``@MM/DD/YY``).

    ``@tomorrow`` written on 2026-01-10 becomes ``@01/11``. The year is
    spelled out only when ``MM/DD`` alone would resolve to a different
    date. Recurrence tokens and unrecognized tokens are left untouched.
    """

    def replace(match: re.Match[str]) -> str:
        expr = match.group(1)
        if parse_recurrence(expr) is not None:
            return match.group(0)
        resolved = parse_date(expr, today, DateScope.ENTRY)
        if resolved is None:
            return match.group(0)
        short = format_short_date(resolved)
        if parse_date(short, today, DateScope.ENTRY) == resolved:
            return f"@{short}"
        return f"@{resolved.strftime('%m/%d/%y')}"

    return _ENTRY_DATE_TOKEN.sub(replace, content)


# ---------------------------------------------------------------------------
# Date-value vocabulary (completion registry)
# ---------------------------------------------------------------------------


class DateValueKind(StrEnum):
    """How a registry item recognizes its values."""

    ENUMERATED = "enumerated"
    PATTERN = "pattern"
    LITERAL = "literal"


_BOTH = frozenset({DateScope.ENTRY, DateScope.FILTER})
_ENTRY_ONLY = frozenset({DateScope.ENTRY})


@dataclass(frozen=True)
class DateValue:
    """One recognized date-expression form, as offered to completion."""

    kind: DateValueKind
    syntax: str
    hint: str
    scopes: frozenset[DateScope] = _BOTH
    values: tuple[str, ...] = ()
    accepts_bias: bool = False

    def in_scope(self, scope: DateScope) -> bool:
        return scope in self.scopes

    def completion_for(self, prefix: str) -> str | None:
        """Full text a single accept turns *prefix* into, if any."""
        prefix = prefix.lower()
        if self.kind is DateValueKind.LITERAL:
            return self.syntax if self.syntax.startswith(prefix) else None
        if self.kind is DateValueKind.ENUMERATED:
            for value in self.values:
                if value.startswith(prefix):
                    return value
            return None
        head = _PATTERN_HEADS.get(self.syntax, "")
        if head and head.startswith(prefix) and len(prefix) < len(head):
            return head
        return None


def _prefix_relative_days(text: str) -> bool:
    return text in ("", "d") or bool(re.fullmatch(r"d[1-9]\d{0,2}", text))


def _exact_relative_days(text: str) -> bool:
    return bool(_RELATIVE_DAYS.fullmatch(text))


def _month_ok(part: str, *, complete: bool) -> bool:
    if not part.isdigit() or len(part) > 2:
        return False
    if len(part) == 2 or complete:
        return 1 <= int(part) <= 12
    return True


def _day_ok(part: str, *, complete: bool) -> bool:
    if not part.isdigit() or len(part) > 2:
        return False
    if len(part) == 2 or complete:
        return 1 <= int(part) <= 31
    return True


def _prefix_absolute(text: str, *, with_year: bool) -> bool:
    if text == "":
        return True
    parts = text.split("/")
    if len(parts) > (3 if with_year else 2):
        return False
    month = parts[0]
    if not _month_ok(month, complete=len(parts) > 1):
        return False
    if len(parts) >= 2:
        day = parts[1]
        if day == "" and len(parts) == 2:
            return True
        if not _day_ok(day, complete=len(parts) > 2):
            return False
    if len(parts) == 3:
        year = parts[2]
        return year == "" or (year.isdigit() and len(year) <= 4)
    return True


def _exact_absolute(text: str, *, with_year: bool) -> bool:
    pattern = r"(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})" if with_year else r"(\d{1,2})/(\d{1,2})"
    match = re.fullmatch(pattern, text)
    if not match:
        return False
    # Year-less values are checked against a leap year so 2/29 stays valid.
    year = 2000
    if with_year:
        year = int(match.group(3)) + (2000 if len(match.group(3)) == 2 else 0)
    return _safe_date(year, int(match.group(1)), int(match.group(2))) is not None


def _prefix_every_day(text: str) -> bool:
    if _EVERY_PREFIX.startswith(text):
        return True
    if not text.startswith(_EVERY_PREFIX):
        return False
    rest = text[len(_EVERY_PREFIX) :]
    return _is_day_of_month(rest)


def _exact_every_day(text: str) -> bool:
    return text.startswith(_EVERY_PREFIX) and _is_day_of_month(text[len(_EVERY_PREFIX) :])


def _prefix_weekday(text: str) -> bool:
    return any(name.startswith(text) for name in WEEKDAY_NAMES)


def _exact_weekday(text: str) -> bool:
    return weekday_from_name(text) is not None


def _prefix_every_weekday(text: str) -> bool:
    if _EVERY_PREFIX.startswith(text):
        return True
    if not text.startswith(_EVERY_PREFIX):
        return False
    return _prefix_weekday(text[len(_EVERY_PREFIX) :])


def _exact_every_weekday(text: str) -> bool:
    rule = parse_recurrence(text)
    return rule is not None and rule.weekday is not None


_PATTERN_HEADS: dict[str, str] = {
    "d[1-999]": "d",
    "every-[1-31]": _EVERY_PREFIX,
}

# syntax -> (prefix check, exact check)
_MATCHERS: dict[str, tuple[Callable[[str], bool], Callable[[str], bool]]] = {
    "d[1-999]": (_prefix_relative_days, _exact_relative_days),
    "MM/DD": (
        lambda t: _prefix_absolute(t, with_year=False),
        lambda t: _exact_absolute(t, with_year=False),
    ),
    "MM/DD/YY": (
        lambda t: _prefix_absolute(t, with_year=True),
        lambda t: _exact_absolute(t, with_year=True),
    ),
    "every-[1-31]": (_prefix_every_day, _exact_every_day),
    "mon..sun": (_prefix_weekday, _exact_weekday),
    "every-mon..sun": (_prefix_every_weekday, _exact_every_weekday),
}

DATE_VALUES: tuple[DateValue, ...] = (
    DateValue(DateValueKind.LITERAL, "today", "Today"),
    DateValue(DateValueKind.LITERAL, "tomorrow", "Tomorrow"),
    DateValue(DateValueKind.LITERAL, "yesterday", "Yesterday"),
    DateValue(
        DateValueKind.ENUMERATED,
        "mon..sun",
        "Next weekday (entries) or last weekday (filters); + or - forces direction",
        values=WEEKDAY_ABBREVIATIONS,
        accepts_bias=True,
    ),
    DateValue(
        DateValueKind.PATTERN,
        "d[1-999]",
        "N days from today; + or - forces direction",
        accepts_bias=True,
    ),
    DateValue(DateValueKind.PATTERN, "MM/DD", "Month/day", accepts_bias=True),
    DateValue(DateValueKind.PATTERN, "MM/DD/YY", "Month/day/year"),
    DateValue(
        DateValueKind.PATTERN,
        "every-[1-31]",
        "Repeat monthly on day N",
        scopes=_ENTRY_ONLY,
    ),
    DateValue(
        DateValueKind.ENUMERATED,
        "every-mon..sun",
        "Repeat weekly on a weekday",
        scopes=_ENTRY_ONLY,
        values=tuple(f"{_EVERY_PREFIX}{abbr}" for abbr in WEEKDAY_ABBREVIATIONS),
    ),
)


def _check(text: str, dv: DateValue, *, exact: bool) -> bool:
    if dv.kind is DateValueKind.LITERAL:
        return text == dv.syntax if exact else dv.syntax.startswith(text)
    prefix_fn, exact_fn = _MATCHERS[dv.syntax]
    return exact_fn(text) if exact else prefix_fn(text)


def matches_date_value(prefix: str, dv: DateValue) -> bool:
    """True when *prefix* can still be completed into a value of *dv*.

    A trailing ``+``/``-`` is only a valid prefix once the part before it
    is already a complete value of a bias-accepting form.
    """
    text = prefix.strip().lower()
    if _check(text, dv, exact=False):
        return True
    body, bias = _split_bias(text)
    return bias is not None and dv.accepts_bias and _check(body, dv, exact=True)


def matches_date_value_exact(value: str, dv: DateValue) -> bool:
    """True when *value* is a complete expression of form *dv*."""
    text = value.strip().lower()
    if _check(text, dv, exact=True):
        return True
    body, bias = _split_bias(text)
    return bias is not None and dv.accepts_bias and _check(body, dv, exact=True)


def date_values_for_scope(scope: DateScope) -> list[DateValue]:
    return [dv for dv in DATE_VALUES if dv.in_scope(scope)]
