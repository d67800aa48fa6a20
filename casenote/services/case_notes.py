"""Application entry point tying extraction, consolidation and rendering together."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from casenote.config.app_config import AppConfig
from casenote.models.email_thread import EmailThread
from casenote.models.point_of_contact import PointOfContact
from casenote.storage.environment import Environment
from casenote.utils.logging import get_logger
from casenote.utils.text_utils import ContentType, detect_content_type, sanitize_email_content

from .consolidation.poc_consolidator import POCConsolidator, select_contacts
from .dates.date_parser import DateParser
from .dates.header_extractor import ExtractionResult, HeaderDateExtractor
from .reporting.date_sections import split_by_date
from .reporting.poc_formatter import POCFormatter
from .threads.thread_grouper import ThreadGrouper
from .threads.thread_parser import parse_email_thread

logger = get_logger(__name__)

LAST_INPUT_KEY = "last_input"
LAST_OUTPUT_KEY = "last_output"


@dataclass
class NoteResult:
    """Outcome of processing one pasted text."""

    content_type: ContentType
    extraction: ExtractionResult
    contacts: list[PointOfContact] = field(default_factory=list)
    sections: dict[str, str] = field(default_factory=dict)
    rendered: str = ""

    @property
    def is_pending(self) -> bool:
        return len(self.contacts) == 1 and self.contacts[0].is_pending


class CaseNoteService:
    """
    Turn pasted email threads into contact listings.

    All host access goes through the Environment; the clock is read once
    per call so a single run resolves every relative date consistently.
    """

    def __init__(self, env: Environment, config: Optional[AppConfig] = None):
        """
        Initialize service.

        Args:
            env: Storage and clock capabilities
            config: Application configuration (defaults if omitted)
        """
        self.env = env
        self.config = config or AppConfig()
        self.consolidator = POCConsolidator()
        self.formatter = POCFormatter(self.config.model_dump())

    def process(self, text: Optional[str], selected_dates: Optional[Iterable[str]] = None) -> NoteResult:
        """
        Extract, consolidate and render contacts for one text.

        Extraction and the rendered note work on the sanitized text; the
        contacts carry the raw input as their content. The raw input and
        the rendered output are saved as the session's last input/output.

        Args:
            text: Pasted thread or task text
            selected_dates: Formatted dates to include in the note (all if omitted)

        Returns:
            NoteResult with the contacts and the rendered note
        """
        today = self.env.now().date()
        raw = text or ""
        sanitized = sanitize_email_content(text)

        extractor = HeaderDateExtractor(DateParser(today))
        extraction = extractor.extract(sanitized)
        ready = self._is_ready(extraction)

        contacts = self.consolidator.consolidate(extraction.dates, raw, ready, today=today)
        contacts = select_contacts(contacts, selected_dates)

        chosen = [poc.date_str for poc in contacts if poc.selected and not poc.is_pending]
        sections = split_by_date(sanitized, chosen, extractor.header_date)
        rendered = self.formatter.render(contacts, sections, original=sanitized)

        self.env.storage_set(LAST_INPUT_KEY, raw)
        self.env.storage_set(LAST_OUTPUT_KEY, rendered)

        logger.info(
            "note_processed",
            dates=len(extraction.dates),
            contacts=len(contacts),
            selected=len(chosen),
            has_override=extraction.has_override,
            override_resolved=extraction.override_resolved,
        )
        return NoteResult(
            content_type=detect_content_type(sanitized),
            extraction=extraction,
            contacts=contacts,
            sections=sections,
            rendered=rendered,
        )

    def group_threads(self, text: Optional[str], merge: bool = False) -> list[EmailThread]:
        """Parse pasted thread text and group its messages into threads."""
        grouper = ThreadGrouper(self.env.now(), self.config.threading)
        threads = grouper.group(parse_email_thread(sanitize_email_content(text)))
        return grouper.merge_threads(threads) if merge else threads

    def render_threads(self, threads: list[EmailThread]) -> str:
        return self.formatter.render_threads(threads)

    def restore_last(self) -> tuple[Optional[str], Optional[str]]:
        """Last saved (input, output), None where nothing was saved."""
        return self.env.storage_get(LAST_INPUT_KEY), self.env.storage_get(LAST_OUTPUT_KEY)

    def _is_ready(self, extraction: ExtractionResult) -> bool:
        if self.config.extraction.unparsed_override_policy == "degrade":
            return extraction.has_override
        if extraction.has_override and not extraction.override_resolved:
            logger.warning("override_unparsed_pending")
        return extraction.override_resolved
