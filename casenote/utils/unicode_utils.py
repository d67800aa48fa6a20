"""Subject line helpers."""

import re

_REPLY_PREFIX = re.compile(r"^(?:(?:re|fwd|fw)\s*:\s*)+", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def strip_subject_prefixes(subject: str | None) -> str:
    """
    Remove leading reply/forward prefixes and collapse whitespace.

    Case is preserved, so the result is suitable for display.

    Examples:
        >>> strip_subject_prefixes("RE: Fwd:  Project   Update")
        'Project Update'
    """
    if not subject:
        return ""

    stripped = _REPLY_PREFIX.sub("", subject.strip())
    return _WHITESPACE.sub(" ", stripped).strip()


def normalize_subject(subject: str | None) -> str:
    """
    Normalize a subject for thread comparison.

    Strips any number of leading RE:/FW:/Fwd: prefixes, collapses
    whitespace and case-folds. Applying it twice yields the same string.

    Examples:
        >>> normalize_subject("RE: re: Project Update")
        'project update'
    """
    return strip_subject_prefixes(subject).casefold()


def truncate_subject(subject: str | None, max_length: int = 50) -> str:
    """
    Truncate subject to max_length with '...' if needed.

    Args:
        subject: Subject line text
        max_length: Maximum length (default 50)

    Returns:
        Truncated subject with ellipsis if needed

    Examples:
        >>> truncate_subject("Short subject")
        'Short subject'
        >>> truncate_subject("This is a very long subject that exceeds the maximum length", 30)
        'This is a very long subject...'
    """
    if not subject:
        return ""

    if len(subject) <= max_length:
        return subject

    return subject[: max_length - 3] + "..."
