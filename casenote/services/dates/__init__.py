"""Date parsing and header date extraction."""

from .date_parser import DateParser, DateRule, parse_date
from .header_extractor import ExtractionResult, HeaderDateExtractor, has_manual_override

__all__ = [
    "DateParser",
    "DateRule",
    "parse_date",
    "ExtractionResult",
    "HeaderDateExtractor",
    "has_manual_override",
]
