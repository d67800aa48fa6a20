"""SQLite-backed key-value persistence for the last input and output."""

import sqlite3
from pathlib import Path
from typing import Optional


class StorageError(Exception):
    """Raised when the key-value store cannot be read or written."""

    pass


class DatabaseConnection:
    """Database connection and schema management."""

    SCHEMA_VERSION = "1.0"

    def __init__(self, db_path: Path | str):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> sqlite3.Connection:
        """
        Establish database connection.

        Returns:
            SQLite connection object
        """
        if self._conn is None:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row

        return self._conn

    def execute_schema(self) -> None:
        """Create database tables if they don't exist."""
        conn = self.connect()

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT NOT NULL PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            )
        """
        )

        conn.commit()

    def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None


class KeyValueStore:
    """Opaque string storage keyed by name."""

    def __init__(self, db: DatabaseConnection):
        """
        Initialize store.

        Args:
            db: Database connection with the kv_store schema applied
        """
        self.db = db

    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Args:
            key: Entry name

        Returns:
            Stored string, or None if the key is unknown
        """
        try:
            row = self.db.connect().execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Error reading {key!r}: {e}") from e

        return None if row is None else row["value"]

    def set(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Args:
            key: Entry name
            value: String to store
        """
        conn = self.db.connect()
        try:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
            """,
                (key, value),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Error writing {key!r}: {e}") from e
