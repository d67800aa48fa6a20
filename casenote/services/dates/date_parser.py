"""Free-text date expression parsing.

Expressions are resolved against a reference day by an ordered ladder of
rules. The first rule whose pattern matches and whose resolver produces
a date wins; a rule that matches but cannot resolve (e.g. "the 45th")
lets the ladder continue. The last rule hands the text to dateutil.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

from dateutil import parser as date_parser

from casenote.models.extracted_date import MONTH_NAMES
from casenote.utils.logging import get_logger

logger = get_logger(__name__)

# Monday == 0, matching date.weekday()
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
MONDAY = 0
FRIDAY = 4

MONTHS = {name.lower(): index for index, name in enumerate(MONTH_NAMES, start=1)}
MONTHS.update({name[:3].lower(): index for index, name in enumerate(MONTH_NAMES, start=1)})
MONTHS["sept"] = 9

_WEEKDAY_GROUP = "(" + "|".join(WEEKDAYS) + ")"

Resolver = Callable[[re.Match, date], Optional[date]]


@dataclass(frozen=True)
class DateRule:
    """One rung of the resolution ladder."""

    name: str
    pattern: re.Pattern
    resolver: Resolver
    anchored: bool = True

    def match(self, text: str) -> Optional[re.Match]:
        if self.anchored:
            return self.pattern.fullmatch(text)
        return self.pattern.search(text)


def days_until(weekday: int, today: date) -> int:
    """Days until the next weekday strictly after today (1..7)."""
    return (weekday - today.weekday() + 7) % 7 or 7


def days_since(weekday: int, today: date) -> int:
    """Days since the last weekday strictly before today (1..7)."""
    return (today.weekday() - weekday + 7) % 7 or 7


def add_months(year: int, month: int, months: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _roll_to_next_year(month: int, day: int, today: date) -> Optional[date]:
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return None

    result = _safe_date(today.year, month, day)
    if result is None or result < today:
        result = _safe_date(today.year + 1, month, day)
    return result


def _resolve_keyword(match: re.Match, today: date) -> Optional[date]:
    offsets = {"today": 0, "yesterday": -1, "tomorrow": 1}
    return today + timedelta(days=offsets[match.group(1).lower()])


def _resolve_weekday(match: re.Match, today: date) -> Optional[date]:
    weekday = WEEKDAYS.index(match.group(1).lower())
    return today + timedelta(days=days_until(weekday, today))


def _resolve_next_last(match: re.Match, today: date) -> Optional[date]:
    direction, name = match.group(1).lower(), match.group(2).lower()
    weekday = WEEKDAYS.index(name)
    if direction == "next":
        return today + timedelta(days=days_until(weekday, today))
    return today - timedelta(days=days_since(weekday, today))


def _resolve_ordinal(match: re.Match, today: date) -> Optional[date]:
    day = int(match.group(1))
    if not 1 <= day <= 31:
        return None

    # Walk forward until the day exists and has not passed (31st skips short months)
    for offset in range(13):
        year, month = add_months(today.year, today.month, offset)
        result = _safe_date(year, month, day)
        if result is not None and result >= today:
            return result
    return None


def _resolve_month_day(match: re.Match, today: date) -> Optional[date]:
    month = MONTHS.get(match.group(1).lower())
    if month is None:
        return None
    return _roll_to_next_year(month, int(match.group(2)), today)


def _resolve_numeric_month_day(match: re.Match, today: date) -> Optional[date]:
    return _roll_to_next_year(int(match.group(1)), int(match.group(2)), today)


def _resolve_end_of_week(match: re.Match, today: date) -> Optional[date]:
    return today + timedelta(days=days_until(FRIDAY, today))


def _resolve_end_of_month(match: re.Match, today: date) -> Optional[date]:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=last_day)


def _resolve_beginning_of_week(match: re.Match, today: date) -> Optional[date]:
    return today + timedelta(days=days_until(MONDAY, today))


def _resolve_beginning_of_month(match: re.Match, today: date) -> Optional[date]:
    year, month = add_months(today.year, today.month, 1)
    return date(year, month, 1)


def _resolve_generic(match: re.Match, today: date) -> Optional[date]:
    default = datetime.combine(today, time.min)
    try:
        return date_parser.parse(match.group(0), default=default).date()
    except (ValueError, OverflowError):
        return None


def _rule(name: str, pattern: str, resolver: Resolver, anchored: bool = True) -> DateRule:
    return DateRule(name, re.compile(pattern, re.IGNORECASE), resolver, anchored)


DEFAULT_RULES: tuple[DateRule, ...] = (
    _rule("keyword", r"(today|yesterday|tomorrow)", _resolve_keyword),
    _rule("weekday", _WEEKDAY_GROUP, _resolve_weekday),
    _rule("next_last_weekday", r"(next|last)\s+" + _WEEKDAY_GROUP, _resolve_next_last),
    _rule("ordinal_day", r"(?:the\s+)?(\d{1,2})(?:st|nd|rd|th)?", _resolve_ordinal),
    _rule("month_day", r"([a-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?", _resolve_month_day),
    _rule("numeric_month_day", r"(\d{1,2})[/-](\d{1,2})", _resolve_numeric_month_day),
    _rule("end_of_week", r"end\s+of\s+(?:the\s+)?week", _resolve_end_of_week, anchored=False),
    _rule("end_of_month", r"end\s+of\s+(?:the\s+)?month", _resolve_end_of_month, anchored=False),
    _rule(
        "beginning_of_week",
        r"beginning\s+of\s+(?:next\s+)?week",
        _resolve_beginning_of_week,
        anchored=False,
    ),
    _rule(
        "beginning_of_month",
        r"beginning\s+of\s+(?:next\s+)?month",
        _resolve_beginning_of_month,
        anchored=False,
    ),
    _rule("generic", r".+", _resolve_generic),
)


class DateParser:
    """
    Resolve free-text date expressions to calendar days.

    The reference day is fixed at construction so every expression parsed
    by one instance is resolved against the same "today".
    """

    def __init__(self, today: Optional[date] = None, rules: tuple[DateRule, ...] = DEFAULT_RULES):
        """
        Initialize parser.

        Args:
            today: Reference day (defaults to the current local date)
            rules: Resolution ladder, highest priority first
        """
        if isinstance(today, datetime):
            today = today.date()
        self.today = today or date.today()
        self.rules = rules

    def parse(self, text: Optional[str]) -> Optional[date]:
        """
        Parse a date expression.

        Args:
            text: Expression such as "yesterday", "next Friday", "Jan 30"

        Returns:
            Resolved date, or None if the expression is unparseable
        """
        if not text or not text.strip():
            return None

        resolution = self.resolve_with_rule(text)
        if resolution is None:
            logger.debug("date_unparseable", text=text, today=self.today.isoformat())
            return None

        return resolution[1]

    def resolve_with_rule(self, text: str) -> Optional[tuple[str, date]]:
        """Like parse(), but also report which rule produced the date."""
        if not text or not text.strip():
            return None

        candidate = " ".join(text.split())
        for rule in self.rules:
            match = rule.match(candidate)
            if match is None:
                continue
            resolved = rule.resolver(match, self.today)
            if resolved is not None:
                return rule.name, resolved
        return None


def parse_date(text: Optional[str], today: Optional[date] = None) -> Optional[date]:
    """Parse a single expression against today (or the given reference day)."""
    return DateParser(today).parse(text)
