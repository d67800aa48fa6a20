"""Email thread parsing and grouping."""

from .thread_grouper import ThreadGrouper, detect_threads, overlap_ratio
from .thread_parser import parse_email_thread
from .topics import top_topics

__all__ = [
    "ThreadGrouper",
    "detect_threads",
    "overlap_ratio",
    "parse_email_thread",
    "top_topics",
]
