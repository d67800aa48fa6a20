"""Utility functions"""

from .path_utils import coerce_message_id, normalize_message_id
from .text_utils import detect_content_type, sanitize_email_content
from .unicode_utils import normalize_subject, strip_subject_prefixes, truncate_subject

__all__ = [
    "normalize_message_id",
    "coerce_message_id",
    "sanitize_email_content",
    "detect_content_type",
    "normalize_subject",
    "strip_subject_prefixes",
    "truncate_subject",
]
