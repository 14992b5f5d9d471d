"""
BrewView — newest-first projection of a RecordStore.

The projection is never patched: every mutation made through the view is
followed by a full re-read of the store and a re-sort by createdAt (as an
instant, newest first).  Records with equal createdAt keep their stored
order.

Listeners registered with subscribe() receive the recomputed list after
every recomputation.
"""

import logging
from typing import Callable, Optional

from brewlog.store.models import BrewRecord
from brewlog.store.records import RecordStore

__all__ = ["BrewView", "sort_newest_first"]

logger = logging.getLogger(__name__)

Listener = Callable[[list[BrewRecord]], None]


def sort_newest_first(records: list[BrewRecord]) -> list[BrewRecord]:
    """Return *records* ordered by createdAt instant, most recent first."""
    return sorted(records, key=lambda r: r.created_instant, reverse=True)


class BrewView:
    """
    Sorted, observable view over a RecordStore.

    Attributes
    ──────────
    entries — derived: current records, newest first (a fresh list per access)
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._listeners: list[Listener] = []
        self._entries: list[BrewRecord] = sort_newest_first(store.list_all())

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def entries(self) -> list[BrewRecord]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def find(self, record_id: str) -> Optional[BrewRecord]:
        """Return the projected record with *record_id*, or None."""
        return next((r for r in self._entries if r.id == record_id), None)

    # ── Observers ─────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ── Mutations ─────────────────────────────────────────────────────────

    def add(self, record: BrewRecord) -> None:
        self._store.create(record)
        self.refresh()

    def edit(self, record: BrewRecord) -> None:
        self._store.update(record)
        self.refresh()

    def remove(self, record_id: str) -> None:
        self._store.delete_by_id(record_id)
        self.refresh()

    def refresh(self) -> None:
        """Re-read the whole store, re-sort, and notify listeners."""
        self._entries = sort_newest_first(self._store.list_all())
        logger.debug("View recomputed: %d brews", len(self._entries))
        for listener in list(self._listeners):
            listener(self.entries)
