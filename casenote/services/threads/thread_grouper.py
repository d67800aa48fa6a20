"""Grouping of discrete messages into conversation threads.

Messages are placed one at a time in date order, so a message can only
join a thread built from earlier messages. Each candidate thread gets a
weighted score from four signals (subject, participants, reply
references, timing); the message joins the best thread only when that
score clears the threshold, otherwise it starts a new thread.
"""

import math
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional
from uuid import uuid4

from casenote.config.app_config import ThreadingConfig
from casenote.models.email_message import EmailMessage
from casenote.models.email_thread import EmailThread
from casenote.utils.logging import get_logger
from casenote.utils.unicode_utils import normalize_subject, strip_subject_prefixes

from .topics import top_topics

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400


def days_between(first: datetime, second: datetime) -> float:
    return abs((second - first).total_seconds()) / SECONDS_PER_DAY


def overlap_ratio(first: frozenset[str], second: frozenset[str]) -> float:
    """Shared members divided by the size of the larger set; 0 if either is empty."""
    if not first or not second:
        return 0.0
    return len(first & second) / max(len(first), len(second))


def new_thread(message: EmailMessage) -> EmailThread:
    """Start a thread holding a single message."""
    return EmailThread(
        id=f"thread_{uuid4().hex[:12]}",
        subject=normalize_subject(message.subject),
        display_subject=strip_subject_prefixes(message.subject),
        participants=message.participants,
        messages=(message,),
        start_date=message.date,
        end_date=message.date,
    )


def add_message(thread: EmailThread, message: EmailMessage) -> EmailThread:
    """Return a copy of thread with message appended and bounds widened."""
    return replace(
        thread,
        messages=thread.messages + (message,),
        participants=thread.participants | message.participants,
        start_date=min(thread.start_date, message.date),
        end_date=max(thread.end_date, message.date),
    )


def summarize(thread: EmailThread) -> str:
    """Describe message count, day span and the top three topics."""
    count = len(thread.messages)
    duration = math.ceil((thread.end_date - thread.start_date).total_seconds() / SECONDS_PER_DAY)

    summary = f"Thread with {count} message{'s' if count != 1 else ''} over {duration} day{'s' if duration != 1 else ''}."
    topics = top_topics(thread.messages)
    if topics:
        summary += f" Key topics: {', '.join(topics)}."
    return summary


class ThreadGrouper:
    """Partition messages into threads."""

    def __init__(self, now: Optional[datetime] = None, settings: Optional[ThreadingConfig] = None):
        """
        Initialize grouper.

        Args:
            now: Reference time for the activity window (sampled once)
            settings: Signal weights and thresholds
        """
        self.now = now or datetime.now()
        self.settings = settings or ThreadingConfig()

    def score(self, message: EmailMessage, thread: EmailThread) -> float:
        """
        Weighted match score in [0, 1] for message against thread.

        Args:
            message: Candidate message
            thread: Existing thread

        Returns:
            Sum of the subject, participant, reference and timing signals
        """
        s = self.settings
        total = 0.0

        subject = normalize_subject(message.subject)
        if subject == thread.subject:
            total += s.subject_weight
        elif subject in thread.subject or thread.subject in subject:
            total += s.subject_weight * 0.5

        total += s.participant_weight * overlap_ratio(message.participants, thread.participants)

        thread_ids = thread.message_ids
        if message.in_reply_to and message.in_reply_to in thread_ids:
            total += s.reference_weight
        elif any(ref in thread_ids for ref in message.references):
            total += s.reference_weight * 0.5

        if thread.messages:
            gap = days_between(thread.last_message.date, message.date)
            if gap < 1:
                total += s.timing_weight
            elif gap < s.timing_window_days:
                total += s.timing_weight * (1 - gap / s.timing_window_days)

        return min(total, 1.0)

    def best_match(self, message: EmailMessage, threads: list[EmailThread]) -> Optional[int]:
        """
        Index of the thread the message should join, if any.

        The score must strictly exceed the threshold; on equal scores the
        earlier thread keeps the message.
        """
        best_index: Optional[int] = None
        best_score = self.settings.match_threshold

        for index, thread in enumerate(threads):
            score = self.score(message, thread)
            if score > best_score:
                best_index, best_score = index, score

        return best_index

    def group(self, messages: Iterable[EmailMessage]) -> list[EmailThread]:
        """
        Group messages into threads.

        Args:
            messages: Messages in any order

        Returns:
            Threads in creation order with is_active and summary computed
        """
        threads: list[EmailThread] = []

        for message in sorted(messages, key=lambda m: m.date):
            index = self.best_match(message, threads)
            if index is None:
                threads.append(new_thread(message))
            else:
                threads[index] = add_message(threads[index], message)

        finalized = [self.finalize(thread) for thread in threads]
        logger.info("threads_grouped", messages=sum(len(t.messages) for t in finalized), threads=len(finalized))
        return finalized

    def finalize(self, thread: EmailThread) -> EmailThread:
        """Compute the derived activity flag and summary."""
        return replace(thread, is_active=self.is_active(thread), summary=summarize(thread))

    def is_active(self, thread: EmailThread) -> bool:
        """True if the latest message is within the activity window of now."""
        return (self.now - thread.end_date).total_seconds() < self.settings.active_window_days * SECONDS_PER_DAY

    def should_merge(self, first: EmailThread, second: EmailThread) -> bool:
        """Identical subjects, heavy participant overlap, or close start with moderate overlap."""
        s = self.settings
        if first.subject == second.subject:
            return True

        overlap = overlap_ratio(first.participants, second.participants)
        if overlap > s.merge_overlap:
            return True

        return days_between(first.start_date, second.start_date) < s.merge_window_days and overlap > s.merge_window_overlap

    def merge_threads(self, threads: list[EmailThread]) -> list[EmailThread]:
        """
        Merge similar threads in a single pairwise pass.

        Each unmerged thread absorbs every later unmerged thread that it
        should merge with. Absorbed threads are not compared again within
        the pass, so chains A~B~C may need another pass to fully collapse.
        """
        merged: list[EmailThread] = []
        absorbed: set[str] = set()

        for i, thread in enumerate(threads):
            if thread.id in absorbed:
                continue

            current = thread
            for other in threads[i + 1 :]:
                if other.id in absorbed or not self.should_merge(current, other):
                    continue
                current = self._combine(current, other)
                absorbed.add(other.id)

            merged.append(current)

        logger.info("threads_merged", before=len(threads), after=len(merged))
        return merged

    def _combine(self, target: EmailThread, source: EmailThread) -> EmailThread:
        combined = replace(
            target,
            messages=tuple(sorted(target.messages + source.messages, key=lambda m: m.date)),
            participants=target.participants | source.participants,
            start_date=min(target.start_date, source.start_date),
            end_date=max(target.end_date, source.end_date),
            is_active=target.is_active or source.is_active,
        )
        return replace(combined, summary=summarize(combined))


def detect_threads(
    messages: Iterable[EmailMessage],
    now: Optional[datetime] = None,
    settings: Optional[ThreadingConfig] = None,
    merge: bool = False,
) -> list[EmailThread]:
    """Group messages into threads, optionally followed by one merge pass."""
    grouper = ThreadGrouper(now, settings)
    threads = grouper.group(messages)
    return grouper.merge_threads(threads) if merge else threads
