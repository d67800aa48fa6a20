"""Slicing of a thread body into per-date sections."""

from datetime import date
from typing import Callable, Iterable, Optional

from casenote.models.extracted_date import format_date
from casenote.services.dates.header_extractor import OVERRIDE_PATTERN
from casenote.services.threads.thread_parser import HEADER_LINE

HeaderDate = Callable[[str], Optional[date]]


def split_by_date(text: Optional[str], date_strs: Iterable[str], header_date: HeaderDate) -> dict[str, str]:
    """
    Collect the body lines written under each wanted date's header.

    A header line whose date is one of date_strs opens a section for that
    date; a header for any other date closes the current section. Other
    header lines (From, To, Subject, ...), the override marker and any
    lines before the first wanted header are dropped. Several exchanges
    on the same day are joined in text order.

    Args:
        text: Sanitized thread text
        date_strs: Formatted dates to collect
        header_date: Maps a line to the date it publishes, or None

    Returns:
        Section text keyed by formatted date; dates without body text are absent

    Examples:
        "Sent: Monday, January 6, 2025\\nHi" -> {"January 6, 2025": "Hi"}
    """
    wanted = set(date_strs)
    if not text or not wanted:
        return {}

    # one list of lines per exchange, grouped by date
    exchanges: dict[str, list[list[str]]] = {}
    current: Optional[list[str]] = None

    for line in text.split("\n"):
        if OVERRIDE_PATTERN.search(line):
            continue

        published = header_date(line)
        if published is not None:
            key = format_date(published)
            current = [] if key in wanted else None
            if current is not None:
                exchanges.setdefault(key, []).append(current)
            continue

        if current is not None and not HEADER_LINE.match(line):
            current.append(line)

    sections = {}
    for key, chunks in exchanges.items():
        bodies = [body for body in ("\n".join(lines).strip() for lines in chunks) if body]
        if bodies:
            sections[key] = "\n\n".join(bodies)
    return sections
