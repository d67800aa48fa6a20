"""Split a pasted email thread into individual messages."""

import re
from datetime import datetime
from email.utils import getaddresses
from typing import Optional

from dateutil import parser as date_parser

from casenote.models.email_message import EmailMessage
from casenote.utils.logging import get_logger

logger = get_logger(__name__)

_MESSAGE_START = re.compile(r"^[ \t]*>?[ \t]*From:", re.IGNORECASE | re.MULTILINE)
HEADER_LINE = re.compile(
    r"^[ \t]*>?[ \t]*(From|To|Cc|Subject|Sent|Date|Message-ID|In-Reply-To|References):[ \t]*(.*)$",
    re.IGNORECASE,
)
_MESSAGE_ID = re.compile(r"<[^<>\s]+>")


def parse_addresses(value: str) -> list[str]:
    """Extract bare addresses from a header value ("Name <a@b.com>; c@d.com")."""
    value = value.replace(";", ",")
    return [addr.lower() for _, addr in getaddresses([value]) if addr]


def parse_header_date(value: str) -> Optional[datetime]:
    """
    Parse a header timestamp into naive local time.

    Timestamps carrying an offset are converted to local time first, so
    messages sent from different time zones still compare correctly.
    """
    try:
        parsed = date_parser.parse(value, fuzzy=True)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone()
    except (ValueError, OverflowError, OSError):
        return None

    return parsed.replace(tzinfo=None)


def _split_blocks(text: str) -> list[str]:
    starts = [match.start() for match in _MESSAGE_START.finditer(text)]
    return [text[start:end] for start, end in zip(starts, starts[1:] + [len(text)])]


def _parse_block(block: str) -> Optional[EmailMessage]:
    headers: dict[str, str] = {}
    body_lines: list[str] = []
    in_headers = True

    for line in block.split("\n"):
        match = HEADER_LINE.match(line) if in_headers else None
        if match:
            name = match.group(1).lower()
            # Sent and Date are the same field in different clients
            name = "date" if name == "sent" else name
            headers.setdefault(name, match.group(2).strip())
            continue
        if in_headers and not line.strip() and not headers:
            continue
        in_headers = False
        body_lines.append(line)

    senders = parse_addresses(headers.get("from", ""))
    sent = parse_header_date(headers.get("date", "")) if headers.get("date") else None
    if not senders or sent is None:
        logger.debug("thread_block_skipped", has_sender=bool(senders), has_date=sent is not None)
        return None

    in_reply_to = _MESSAGE_ID.findall(headers.get("in-reply-to", ""))
    return EmailMessage(
        sender=senders[0],
        to=frozenset(parse_addresses(headers.get("to", ""))),
        cc=frozenset(parse_addresses(headers.get("cc", ""))),
        subject=headers.get("subject", "No Subject"),
        date=sent,
        content="\n".join(body_lines).strip(),
        message_id=headers.get("message-id") or None,
        in_reply_to=in_reply_to[0] if in_reply_to else None,
        references=tuple(_MESSAGE_ID.findall(headers.get("references", ""))),
    )


def parse_email_thread(text: Optional[str]) -> list[EmailMessage]:
    """
    Parse pasted thread text into messages sorted by date.

    A message starts at each "From:" line; the header lines that follow
    (To, Cc, Subject, Sent/Date, Message-ID, In-Reply-To, References)
    are read until the first other line, which starts the body. Blocks
    without a sender address or a parseable date are skipped.

    Args:
        text: Sanitized thread text

    Returns:
        Messages in chronological order
    """
    if not text or not text.strip():
        return []

    messages = [message for message in map(_parse_block, _split_blocks(text)) if message]
    messages.sort(key=lambda message: message.date)
    return messages
