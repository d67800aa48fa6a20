"""Data models for contact extraction and thread grouping"""

from .email_message import EmailMessage
from .email_thread import EmailThread
from .extracted_date import ExtractedDate, format_date
from .point_of_contact import ContactType, PointOfContact

__all__ = [
    "EmailMessage",
    "EmailThread",
    "ExtractedDate",
    "format_date",
    "ContactType",
    "PointOfContact",
]
