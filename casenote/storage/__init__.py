"""Data persistence layer"""

from .database import DatabaseConnection, KeyValueStore, StorageError
from .environment import Environment

__all__ = [
    "DatabaseConnection",
    "KeyValueStore",
    "StorageError",
    "Environment",
]
