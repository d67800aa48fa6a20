"""Plain-text rendering of points of contact and threads."""

from typing import Dict, Iterable, Mapping, Optional

from casenote.models.email_thread import EmailThread
from casenote.models.point_of_contact import PointOfContact
from casenote.services.consolidation.poc_consolidator import total_exchanges
from casenote.utils.unicode_utils import truncate_subject

ORIGINAL_RULE = "-" * 80


class POCFormatter:
    """Format contacts and threads for display."""

    def __init__(self, config: Dict | None = None):
        """
        Initialize formatter with configuration.

        Args:
            config: Configuration dict with display_templates
        """
        templates = (config or {}).get("display_templates", {})
        self.poc_line = templates.get("poc_line", "{label} - {date}")
        self.exchange_label = templates.get("exchange_label", "{type} ({exchanges} exchanges)")
        self.thread_line = templates.get(
            "thread_line", "{subject} | {start} - {end} | {count} messages{status}"
        )
        self.inactive_marker = templates.get("inactive_marker", " [inactive]")
        self.original_header = templates.get("original_header", "ORIGINAL EMAIL:")

    def format_poc(self, poc: PointOfContact) -> str:
        """
        Format a single contact line.

        Pending contacts show only their placeholder text.

        Examples:
            email - January 6, 2025
            email (2 exchanges) - January 6, 2025
        """
        if poc.is_pending:
            return poc.date_str

        label = poc.type.value
        if poc.exchanges > 1:
            label = self.exchange_label.format(type=label, exchanges=poc.exchanges)

        return self.poc_line.format(label=label, date=poc.date_str)

    def format_thread(self, thread: EmailThread) -> str:
        """Format a one-line thread overview followed by its summary."""
        line = self.thread_line.format(
            subject=truncate_subject(thread.display_subject or "(no subject)", max_length=50),
            start=thread.start_date.strftime("%Y-%m-%d"),
            end=thread.end_date.strftime("%Y-%m-%d"),
            count=len(thread.messages),
            status="" if thread.is_active else self.inactive_marker,
        )
        return f"{line}\n  {thread.summary}" if thread.summary else line

    def render(
        self,
        pocs: Iterable[PointOfContact],
        sections: Optional[Mapping[str, str]] = None,
        original: Optional[str] = None,
    ) -> str:
        """
        Render a contact listing, one block per selected contact.

        Args:
            pocs: Consolidated contacts; unselected ones are skipped
            sections: Body text written on each date, keyed by date_str
            original: Full thread text appended after the listing

        Returns:
            Listing text; several contacts get a count header
        """
        pocs = list(pocs)
        if not pocs:
            return "No points of contact found."

        shown = [poc for poc in pocs if poc.selected or poc.is_pending]
        if not shown:
            return "No points of contact selected."

        sections = sections or {}
        blocks = []
        for poc in shown:
            block = f"{self.format_poc(poc)}\n  {poc.context}"
            if sections.get(poc.date_str):
                block += f"\n\n{sections[poc.date_str]}"
            blocks.append(block)

        if len(shown) > 1:
            exchanges = total_exchanges(shown)
            blocks.insert(0, f"// {len(shown)} Points of Contact Detected ({exchanges} exchanges)")

        rendered = "\n\n".join(blocks)
        if original and not all(poc.is_pending for poc in shown):
            rendered += f"\n\n{ORIGINAL_RULE}\n{self.original_header}\n\n{original}"
        return rendered

    def render_threads(self, threads: Iterable[EmailThread]) -> str:
        """Render a thread listing."""
        return "\n\n".join(self.format_thread(thread) for thread in threads)
