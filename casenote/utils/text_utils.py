"""Sanitization of pasted text before it reaches the extraction pipeline."""

import re
from typing import Literal

ContentType = Literal["email", "task", "unknown"]

DANGEROUS_PATTERNS = [
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    re.compile(r"<(?:iframe|object|embed)\b[^>]*>(?:.*?</(?:iframe|object|embed)>)?", re.IGNORECASE | re.DOTALL),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"\bon\w+\s*=\s*(?:\"[^\"]*\"|'[^']*'|[^\s>]+)", re.IGNORECASE),
]

EMAIL_MARKERS = re.compile(r"@|from:|to:|subject:|sent:|date:", re.IGNORECASE)
TASK_MARKERS = re.compile(r"task|project|deliverable|milestone|complete|implement", re.IGNORECASE)

_INLINE_SPACE = re.compile(r"[ \t\u00a0\u2009\u202f]+")
_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


def sanitize_email_content(text: str | None) -> str:
    """
    Strip dangerous markup and normalize whitespace.

    Line structure is preserved because header detection works per line.
    Angle brackets are left alone so addresses and Message-IDs survive.

    Args:
        text: Raw pasted text

    Returns:
        Sanitized text, or an empty string for empty input
    """
    if not text:
        return ""

    sanitized = text.replace("\r\n", "\n").replace("\r", "\n")
    for pattern in DANGEROUS_PATTERNS:
        sanitized = pattern.sub("", sanitized)

    lines = [_INLINE_SPACE.sub(" ", line).rstrip() for line in sanitized.split("\n")]
    sanitized = _EXCESS_BLANK_LINES.sub("\n\n", "\n".join(lines))

    return sanitized.strip()


def detect_content_type(text: str | None) -> ContentType:
    """
    Guess whether pasted text is an email thread or a task description.

    Examples:
        >>> detect_content_type("From: a@b.com")
        'email'
        >>> detect_content_type("Implement the export milestone")
        'task'
    """
    sanitized = sanitize_email_content(text)

    if EMAIL_MARKERS.search(sanitized):
        return "email"
    if TASK_MARKERS.search(sanitized):
        return "task"
    return "unknown"
