"""Point of contact data model."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class ContactType(Enum):
    """Kind of contact a POC records."""

    EMAIL = "email"
    MEETING = "meeting"
    CALL = "call"
    PENDING = "pending"


@dataclass(frozen=True)
class PointOfContact:
    """
    One consolidated record of communication on a given calendar day.

    Attributes:
        id: Identifier, ordered by generation within a run
        date: Representative calendar day
        date_str: Canonical string for date, the grouping key
        type: Contact kind; PENDING marks a not-yet-resolvable record
        context: Summary of where the contact came from
        content: Raw text the contact was extracted from
        exchanges: Number of source occurrences merged into this record
        combined_context: Contexts of the merged occurrences, in order
        is_last_date: True if any merged occurrence was the manual override
        selected: Whether the record is selected for note generation
    """

    id: str
    date: date
    date_str: str
    type: ContactType
    context: str
    content: str
    exchanges: int = 1
    combined_context: tuple[str, ...] = ()
    is_last_date: bool = False
    selected: bool = True

    def __post_init__(self):
        """Validate fields after initialization."""
        if self.exchanges < 1:
            raise ValueError("exchanges must be at least 1")

    @property
    def is_pending(self) -> bool:
        return self.type is ContactType.PENDING
