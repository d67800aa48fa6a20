"""Extracted date data model."""

from dataclasses import dataclass
from datetime import date

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def format_date(value: date) -> str:
    """
    Render a date as its canonical display string.

    Uses a fixed English month table so the result never depends on the
    process locale; it doubles as the same-day grouping key.

    Examples:
        >>> format_date(date(2025, 1, 6))
        'January 6, 2025'
    """
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


@dataclass(frozen=True)
class ExtractedDate:
    """
    A date found in pasted text.

    Attributes:
        date: Resolved calendar day
        formatted: Canonical display string, always format_date(date)
        context: Where the date was found ("Email header: ...")
        is_last_date: True only for the manual override marker
    """

    date: date
    formatted: str
    context: str
    is_last_date: bool = False

    def __post_init__(self):
        """Validate fields after initialization."""
        if self.formatted != format_date(self.date):
            raise ValueError(
                f"formatted must match date: {self.formatted!r} != {format_date(self.date)!r}"
            )

    @classmethod
    def create(cls, value: date, context: str, is_last_date: bool = False) -> "ExtractedDate":
        """Build an ExtractedDate, deriving the canonical string from the date."""
        return cls(
            date=value,
            formatted=format_date(value),
            context=context,
            is_last_date=is_last_date,
        )
