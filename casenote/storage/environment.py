"""Host capabilities handed to the application entry point."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .database import KeyValueStore


@dataclass(frozen=True)
class Environment:
    """
    Everything the application needs from its host.

    Attributes:
        storage_get: Read a stored string by key (None if missing)
        storage_set: Store a string under a key
        now: Clock returning the current local time
    """

    storage_get: Callable[[str], Optional[str]]
    storage_set: Callable[[str, str], None]
    now: Callable[[], datetime] = datetime.now

    @classmethod
    def from_store(cls, store: KeyValueStore, clock: Callable[[], datetime] = datetime.now) -> "Environment":
        """Wire a sqlite key-value store and a clock."""
        return cls(storage_get=store.get, storage_set=store.set, now=clock)

    @classmethod
    def in_memory(cls, now: Optional[datetime] = None) -> "Environment":
        """Dictionary-backed environment, optionally frozen at a fixed time."""
        values: dict[str, str] = {}
        clock = (lambda: now) if now is not None else datetime.now
        return cls(storage_get=values.get, storage_set=values.__setitem__, now=clock)
