"""Business logic services"""

from .case_notes import CaseNoteService, NoteResult
from .consolidation import POCConsolidator
from .dates import DateParser, HeaderDateExtractor
from .reporting import POCFormatter
from .threads import ThreadGrouper, parse_email_thread

__all__ = [
    "CaseNoteService",
    "NoteResult",
    "POCConsolidator",
    "DateParser",
    "HeaderDateExtractor",
    "POCFormatter",
    "ThreadGrouper",
    "parse_email_thread",
]
