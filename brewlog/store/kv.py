"""
KeyValueStore — SQLite-backed durable key → text slots.

Usage::

    kv = KeyValueStore(db_path="~/.brewlog/brewlog.db")

    kv.set("theme", "dark")
    kv.get("theme")          # "dark"
    kv.get("missing")        # None
    kv.delete("theme")

Every call opens its own connection and commits before returning, so a value
is either fully replaced or left untouched.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from brewlog.exceptions import StoreError

__all__ = ["KeyValueStore", "DEFAULT_DB_PATH"]

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "~/.brewlog/brewlog.db"

# Path to the SQL schema file bundled with this package
_SCHEMA_PATH = Path(__file__).parent / "migrations" / "schema.sql"


class KeyValueStore:
    """
    Durable string slots in a local SQLite file.

    The database file and schema are created automatically on first open.
    No persistent connection is kept open between calls.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path).expanduser()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
        except (OSError, sqlite3.Error) as exc:
            raise StoreError(f"Cannot open store at {self._db_path}: {exc}") from exc
        logger.debug("Opened key-value store at %s", self._db_path)

    @property
    def path(self) -> Path:
        return self._db_path

    # ── Internal helpers ──────────────────────────────────────────────────

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        """Create tables if they don't already exist."""
        sql = _SCHEMA_PATH.read_text(encoding="utf-8")
        conn = self._connect()
        try:
            conn.executescript(sql)
        finally:
            conn.close()

    # ── Public API ────────────────────────────────────────────────────────

    def get(self, key: str) -> Optional[str]:
        """
        Return the value stored under *key*, or None if the key is absent.

        Raises:
            StoreError: the database could not be read.
            UnicodeDecodeError: the stored value is not valid UTF-8.
        """
        try:
            conn = self._connect()
            # Fetch raw bytes; sqlite3's own decoding fails as OperationalError
            conn.text_factory = bytes
            try:
                row = conn.execute(
                    "SELECT value FROM slots WHERE key=?", (key,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to read {key!r}: {exc}") from exc
        if row is None:
            return None
        value = row[0]
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    def set(self, key: str, value: str) -> None:
        """Replace the value under *key* (created if absent) in one transaction."""
        now = datetime.now(tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute(
                        "INSERT OR REPLACE INTO slots (key, value, updated_at) VALUES (?, ?, ?)",
                        (key, value, now),
                    )
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to write {key!r}: {exc}") from exc
        logger.debug("Wrote %d chars to slot %r", len(value), key)

    def delete(self, key: str) -> bool:
        """
        Remove *key*.

        Returns:
            True if a slot was removed, False if the key was absent.
        """
        try:
            conn = self._connect()
            try:
                with conn:
                    cur = conn.execute("DELETE FROM slots WHERE key=?", (key,))
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to delete {key!r}: {exc}") from exc
        return cur.rowcount > 0
