"""
RecordStore — the brew log as one JSON array under a single key.

Usage::

    store = RecordStore(KeyValueStore("~/.brewlog/brewlog.db"))

    store.create(record)
    store.list_all()            # every decodable record, in insertion order
    store.update(edited)        # replace by id; unknown id → no-op
    store.delete_by_id(rec_id)  # unknown id → no-op

Reads never raise on bad content: a blob that is not UTF-8, not JSON (or
nested too deeply to decode), or not a JSON array reads as an empty log, and
individual elements that do not decode are skipped.  Writes
rewrite the whole blob and propagate StoreError.
"""

import json
import logging
from typing import Any, Optional

from brewlog.exceptions import RecordDecodeError
from brewlog.store.kv import KeyValueStore
from brewlog.store.models import BrewRecord

__all__ = ["RecordStore", "STORAGE_KEY"]

logger = logging.getLogger(__name__)

STORAGE_KEY = "coffee-brewing-entries"


class RecordStore:
    """CRUD over the serialised brew list held in a KeyValueStore slot."""

    def __init__(self, kv: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self._kv = kv
        self._key = key

    # ── Internal helpers ──────────────────────────────────────────────────

    def _read_raw(self) -> list[Any]:
        """Return the decoded JSON array, or [] when absent or unparsable."""
        try:
            raw = self._kv.get(self._key)
        except UnicodeDecodeError as exc:
            logger.warning("Stored brew log is not valid UTF-8 (%s); treating as empty", exc)
            return []
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            logger.warning("Stored brew log is not valid JSON (%s); treating as empty", exc)
            return []
        if not isinstance(items, list):
            logger.warning(
                "Stored brew log is a JSON %s, not an array; treating as empty",
                type(items).__name__,
            )
            return []
        return items

    def _write_raw(self, items: list[Any]) -> None:
        # NaN / Infinity are not JSON; refuse to write them
        self._kv.set(self._key, json.dumps(items, ensure_ascii=False, allow_nan=False))

    @staticmethod
    def _raw_id(item: Any) -> Optional[str]:
        return item.get("id") if isinstance(item, dict) else None

    # ── Public API ────────────────────────────────────────────────────────

    def list_all(self) -> list[BrewRecord]:
        """Return every stored record that decodes, in stored order."""
        records: list[BrewRecord] = []
        for index, item in enumerate(self._read_raw()):
            try:
                records.append(BrewRecord.from_dict(item))
            except RecordDecodeError as exc:
                logger.warning("Skipping stored brew #%d: %s", index, exc)
        return records

    def get(self, record_id: str) -> Optional[BrewRecord]:
        """Return the record with *record_id*, or None."""
        return next((r for r in self.list_all() if r.id == record_id), None)

    def create(self, record: BrewRecord) -> None:
        """Append *record* and rewrite the blob.  No uniqueness check."""
        items = self._read_raw()
        items.append(record.to_dict())
        self._write_raw(items)
        logger.info("Created brew %s", record.id)

    def update(self, record: BrewRecord) -> None:
        """Replace the stored record with the same id; silent no-op if absent."""
        items = self._read_raw()
        for index, item in enumerate(items):
            if self._raw_id(item) == record.id:
                items[index] = record.to_dict()
                self._write_raw(items)
                logger.info("Updated brew %s", record.id)
                return
        logger.debug("update: no brew with id %s", record.id)

    def delete_by_id(self, record_id: str) -> None:
        """Drop the record with *record_id* and rewrite the blob."""
        items = self._read_raw()
        kept = [item for item in items if self._raw_id(item) != record_id]
        if len(kept) == len(items):
            logger.debug("delete: no brew with id %s", record_id)
            return
        self._write_raw(kept)
        logger.info("Deleted brew %s", record_id)
