"""Same-day consolidation of extracted dates into points of contact.

Same calendar day means one POC with several exchanges; different days
mean separate POCs. Without the manual override the thread may still be
incomplete, so a single pending placeholder is returned instead.
"""

from dataclasses import replace
from datetime import date
from functools import reduce
from typing import Iterable, Optional
from uuid import uuid4

from casenote.models.extracted_date import ExtractedDate
from casenote.models.point_of_contact import ContactType, PointOfContact
from casenote.utils.logging import get_logger

logger = get_logger(__name__)

PENDING_DATE_STR = "Waiting for last date..."
PENDING_CONTEXT = "Please wait for the last date prompt"


def merge_contact(accumulated: PointOfContact, draft: PointOfContact) -> PointOfContact:
    """
    Fold a same-day draft into the accumulated record.

    Returns a new record; neither argument is modified. The type only
    moves away from EMAIL, never back.
    """
    contact_type = accumulated.type
    if accumulated.type is ContactType.EMAIL and draft.type is not ContactType.EMAIL:
        contact_type = draft.type

    return replace(
        accumulated,
        type=contact_type,
        exchanges=accumulated.exchanges + 1,
        combined_context=accumulated.combined_context + (draft.context,),
        is_last_date=accumulated.is_last_date or draft.is_last_date,
    )


def summarize_context(poc: PointOfContact) -> PointOfContact:
    """Rewrite the context of multi-exchange records; single ones are untouched."""
    if poc.exchanges <= 1:
        return poc

    joined = "; ".join(poc.combined_context)
    return replace(poc, context=f"{poc.exchanges} exchanges on this day: {joined}")


def total_exchanges(pocs: Iterable[PointOfContact]) -> int:
    """Total number of exchanges across POCs."""
    return sum(poc.exchanges for poc in pocs)


def select_contacts(pocs: Iterable[PointOfContact], date_strs: Optional[Iterable[str]]) -> list[PointOfContact]:
    """
    Mark which contacts go into the generated note.

    Args:
        pocs: Consolidated contacts
        date_strs: Formatted dates to keep; None or empty keeps every contact

    Returns:
        Copies with `selected` set; the pending placeholder is left untouched
    """
    wanted = set(date_strs or ())
    return [
        poc if poc.is_pending else replace(poc, selected=not wanted or poc.date_str in wanted)
        for poc in pocs
    ]


class POCConsolidator:
    """Group extracted dates by calendar day."""

    def consolidate(
        self,
        dates: Iterable[ExtractedDate],
        content: str,
        has_override: bool,
        today: Optional[date] = None,
    ) -> list[PointOfContact]:
        """
        Build the ordered list of points of contact.

        Args:
            dates: Extracted dates in discovery order
            content: Original full text, attached to every record
            has_override: The last-date override is available
            today: Reference day for the pending placeholder

        Returns:
            One POC per distinct day sorted by date, or a single pending POC
        """
        run_id = uuid4().hex[:8]

        if not has_override:
            logger.info("consolidation_pending", run_id=run_id)
            return [self.pending(content, run_id, today)]

        drafts = [self._draft(extracted, content, run_id, index) for index, extracted in enumerate(dates)]

        by_day: dict[str, list[PointOfContact]] = {}
        for draft in drafts:
            by_day.setdefault(draft.date_str, []).append(draft)

        consolidated = [
            summarize_context(reduce(merge_contact, group[1:], self._seed(group[0])))
            for group in by_day.values()
        ]
        consolidated.sort(key=lambda poc: poc.date)

        logger.info(
            "consolidation_complete",
            run_id=run_id,
            dates=len(drafts),
            contacts=len(consolidated),
        )
        return consolidated

    def pending(self, content: str, run_id: str, today: Optional[date] = None) -> PointOfContact:
        """Placeholder returned until the override date is supplied."""
        return PointOfContact(
            id=f"{run_id}-pending",
            date=today or date.today(),
            date_str=PENDING_DATE_STR,
            type=ContactType.PENDING,
            context=PENDING_CONTEXT,
            content=content,
            selected=False,
        )

    def _draft(self, extracted: ExtractedDate, content: str, run_id: str, index: int) -> PointOfContact:
        return PointOfContact(
            id=f"{run_id}-{index}",
            date=extracted.date,
            date_str=extracted.formatted,
            type=ContactType.EMAIL,
            context=extracted.context,
            content=content,
            is_last_date=extracted.is_last_date,
        )

    def _seed(self, draft: PointOfContact) -> PointOfContact:
        return replace(draft, exchanges=1, combined_context=(draft.context,))
