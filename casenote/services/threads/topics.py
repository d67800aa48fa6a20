"""Keyword-category topic detection for thread summaries."""

import re
from typing import Iterable

from casenote.models.email_message import EmailMessage

TOPIC_PATTERNS: tuple[tuple[str, re.Pattern], ...] = tuple(
    (topic, re.compile(pattern, re.IGNORECASE))
    for topic, pattern in (
        ("scheduling", r"meeting|appointment|schedule"),
        ("accommodations", r"accommodation|disability|support"),
        ("assessments", r"exam|test|quiz|assignment"),
        ("deadlines", r"deadline|extension|due date"),
        ("grades", r"grade|mark|score|feedback"),
        ("courses", r"course|class|lecture|tutorial"),
        ("registration", r"registration|enroll|drop|add"),
        ("mental health", r"stress|anxiety|mental health|wellness"),
    )
)

TOPIC_ORDER = {topic: index for index, (topic, _) in enumerate(TOPIC_PATTERNS)}


def count_topics(messages: Iterable[EmailMessage]) -> dict[str, int]:
    """Count keyword hits per topic over subjects and bodies."""
    counts: dict[str, int] = {}
    for message in messages:
        text = f"{message.subject} {message.content}"
        for topic, pattern in TOPIC_PATTERNS:
            hits = len(pattern.findall(text))
            if hits:
                counts[topic] = counts.get(topic, 0) + hits
    return counts


def top_topics(messages: Iterable[EmailMessage], limit: int = 3) -> list[str]:
    """
    Most frequent topics first.

    Equal counts keep the order of TOPIC_PATTERNS.
    """
    counts = count_topics(messages)
    ranked = sorted(counts, key=lambda topic: (-counts[topic], TOPIC_ORDER[topic]))
    return ranked[:limit]
