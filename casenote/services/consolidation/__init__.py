"""Point-of-contact consolidation."""

from .poc_consolidator import (
    PENDING_DATE_STR,
    POCConsolidator,
    merge_contact,
    select_contacts,
    summarize_context,
    total_exchanges,
)

__all__ = [
    "PENDING_DATE_STR",
    "POCConsolidator",
    "merge_contact",
    "select_contacts",
    "summarize_context",
    "total_exchanges",
]
