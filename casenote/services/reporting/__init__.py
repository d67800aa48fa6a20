"""Rendering of contacts and threads."""

from .date_sections import split_by_date
from .poc_formatter import POCFormatter

__all__ = ["POCFormatter", "split_by_date"]
