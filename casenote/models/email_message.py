"""Email message data model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from casenote.utils.path_utils import coerce_message_id


def _address_set(addresses: Iterable[str] | str | None) -> frozenset[str]:
    if not addresses:
        return frozenset()
    if isinstance(addresses, str):
        addresses = [addresses]
    return frozenset(a.strip().lower() for a in addresses if a and a.strip())


@dataclass
class EmailMessage:
    """
    A single message taking part in thread grouping.

    Attributes:
        sender: Address from the From header
        to: Recipient addresses
        subject: Raw subject line, prefixes included
        date: When the message was sent
        content: Message body
        cc: Carbon-copy addresses
        message_id: RFC 5322 Message-ID, if known
        in_reply_to: Message-ID this message replies to
        references: Ancestor Message-IDs, oldest first
        id: Caller-supplied identifier (optional)
    """

    sender: str
    to: frozenset[str]
    subject: str
    date: datetime
    content: str = ""
    cc: frozenset[str] = field(default_factory=frozenset)
    message_id: Optional[str] = None
    in_reply_to: Optional[str] = None
    references: tuple[str, ...] = ()
    id: Optional[str] = None

    def __post_init__(self):
        """Validate and normalize fields after initialization."""
        if not self.sender or not self.sender.strip():
            raise ValueError("sender is required")
        if not isinstance(self.date, datetime):
            raise ValueError(f"date must be a datetime, got {type(self.date).__name__}")

        self.sender = self.sender.strip().lower()
        self.to = _address_set(self.to)
        self.cc = _address_set(self.cc)
        self.subject = self.subject or ""
        self.message_id = coerce_message_id(self.message_id)
        self.in_reply_to = coerce_message_id(self.in_reply_to)
        self.references = tuple(
            ref for ref in (coerce_message_id(r) for r in self.references) if ref
        )

    @property
    def participants(self) -> frozenset[str]:
        """All addresses on the message: sender, recipients and cc."""
        return frozenset({self.sender}) | self.to | self.cc
