"""Extraction of message timestamps from pasted email threads.

Only dates sitting in header positions ("Sent:", "Date:") are taken,
plus the manual override marker. Dates mentioned in the body are left
alone to keep false positives out of the contact log.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from casenote.models.extracted_date import ExtractedDate, format_date
from casenote.utils.logging import get_logger

from .date_parser import DateParser

logger = get_logger(__name__)

OVERRIDE_PATTERN = re.compile(r"\[Last date in response:\s*([^\]]+)\]", re.IGNORECASE)

# Labels only count at the start of a line, after an optional quote marker
_LINE_START = r"^[ \t>]*"
_LABEL = r"(?:Sent|Date):\s*"

HEADER_PATTERNS: tuple[re.Pattern, ...] = tuple(
    re.compile(pattern, re.IGNORECASE | re.MULTILINE)
    for pattern in (
        # Sent: Monday, January 6, 2025
        _LINE_START + _LABEL + r"(\w+,\s+\w+\s+\d{1,2},\s+\d{4})",
        # Sent: January 6, 2025
        _LINE_START + _LABEL + r"(\w+\s+\d{1,2},\s+\d{4})",
        # Sent: Monday, 01/06/2025
        _LINE_START + _LABEL + r"(\w+,\s+\d{1,2}[/-]\d{1,2}[/-]\d{4})",
        # Sent: Monday, January 6, 2025 10:30
        _LINE_START + _LABEL + r"(\w+,\s+\w+\s+\d{1,2},\s+\d{4}\s+\d{1,2}:\d{2})",
        # From: Jane <j@x.ca> Sent: Monday, January 6, 2025
        _LINE_START + r"(?:On|From)\b.*?\bSent:\s*(\w+,\s+\w+\s+\d{1,2},\s+\d{4})",
        # Date: 01/06/2025
        _LINE_START + _LABEL + r"(\d{1,2}[/-]\d{1,2}[/-]\d{4})",
        # Date: Mon, 6 Jan 2025 10:30:00 -0500
        _LINE_START + _LABEL + r"(\w+,\s+\d{1,2}\s+[A-Za-z]{3,9}\s+\d{4})",
    )
)


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of scanning one text.

    Attributes:
        dates: Override date (if parsed) followed by unique header dates
        has_override: The override marker is present in the text
        override_resolved: The marker's date text parsed successfully
    """

    dates: tuple[ExtractedDate, ...] = field(default_factory=tuple)
    has_override: bool = False
    override_resolved: bool = False


def has_manual_override(text: Optional[str]) -> bool:
    """Check for the manual override marker without parsing its date."""
    return bool(text) and OVERRIDE_PATTERN.search(text) is not None


class HeaderDateExtractor:
    """Find dates published as message timestamps."""

    def __init__(self, parser: Optional[DateParser] = None):
        """
        Initialize extractor.

        Args:
            parser: Date parser carrying the reference day
        """
        self.parser = parser or DateParser()

    def extract(self, text: Optional[str]) -> ExtractionResult:
        """
        Extract the override date and all unique header dates.

        Args:
            text: Sanitized multi-line text

        Returns:
            ExtractionResult; never raises for malformed text
        """
        if not text or not text.strip():
            return ExtractionResult()

        dates: list[ExtractedDate] = []
        override = self._extract_override(text)
        if override is not None:
            dates.append(override)

        seen: set[str] = set()
        for raw in self._header_candidates(text):
            parsed = self.parser.parse(raw)
            if parsed is None:
                logger.debug("header_date_skipped", raw=raw)
                continue

            key = format_date(parsed)
            if key in seen:
                continue

            seen.add(key)
            dates.append(ExtractedDate.create(parsed, context=f"Email header: {raw}"))
            logger.debug("header_date_added", raw=raw, formatted=key)

        return ExtractionResult(
            dates=tuple(dates),
            has_override=has_manual_override(text),
            override_resolved=override is not None,
        )

    def extract_dates(self, text: Optional[str]) -> list[ExtractedDate]:
        """Extract dates only, dropping the override flags."""
        return list(self.extract(text).dates)

    def header_date(self, line: str) -> Optional[date]:
        """Date published by a single header line, None for any other line."""
        for raw in self._header_candidates(line):
            parsed = self.parser.parse(raw)
            if parsed is not None:
                return parsed
        return None

    def _extract_override(self, text: str) -> Optional[ExtractedDate]:
        match = OVERRIDE_PATTERN.search(text)
        if match is None:
            return None

        raw = match.group(1).strip()
        parsed = self.parser.parse(raw)
        if parsed is None:
            logger.warning("override_date_unparseable", raw=raw)
            return None

        logger.debug("override_date_parsed", raw=raw, formatted=format_date(parsed))
        return ExtractedDate.create(parsed, context=f"Last response: {raw}", is_last_date=True)

    def _header_candidates(self, text: str) -> list[str]:
        """Header date strings in text order, ties broken by pattern priority."""
        found: list[tuple[int, int, str]] = []
        for priority, pattern in enumerate(HEADER_PATTERNS):
            for match in pattern.finditer(text):
                found.append((match.start(1), priority, match.group(1).strip()))

        found.sort()
        return [raw for _, _, raw in found]
