"""Email thread data model."""

from dataclasses import dataclass
from datetime import datetime

from .email_message import EmailMessage


@dataclass(frozen=True)
class EmailThread:
    """
    A set of messages judged to belong to the same conversation.

    Attributes:
        id: Generated thread identifier
        subject: Normalized, case-folded subject used for matching
        display_subject: Subject of the first message without prefixes, original case
        participants: Every address seen on member messages
        messages: Member messages in chronological order
        start_date: Earliest message date
        end_date: Latest message date
        is_active: Latest message falls inside the activity window
        summary: Message count, span and top topics
    """

    id: str
    subject: str
    display_subject: str
    participants: frozenset[str]
    messages: tuple[EmailMessage, ...]
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    summary: str = ""

    def __post_init__(self):
        """Validate fields after initialization."""
        if not self.messages:
            raise ValueError("a thread needs at least one message")
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")

    @property
    def last_message(self) -> EmailMessage:
        return self.messages[-1]

    @property
    def message_ids(self) -> frozenset[str]:
        return frozenset(m.message_id for m in self.messages if m.message_id)
