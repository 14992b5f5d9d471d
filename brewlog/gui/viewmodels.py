"""
GUI ViewModels — pure-Python observable state containers.

No Qt imports here; every class is testable without a display.
Qt widgets observe these objects and update themselves in response to state
changes.  (Signal emission is handled by the Qt layer, not here.)

Public API
──────────
BrewListViewModel   — newest-first brew list + search + selection + summary
BrewDetailViewModel — the brew shown on the detail page, or "not found"
ThemeViewModel      — light / dark preference persisted in the key-value store
"""

import logging
from typing import Optional

from brewlog.display import summarize
from brewlog.store.kv import KeyValueStore
from brewlog.store.models import BrewRecord
from brewlog.store.view import BrewView

__all__ = [
    "BrewListViewModel",
    "BrewDetailViewModel",
    "ThemeViewModel",
    "NOT_FOUND_MESSAGE",
    "THEME_KEY",
]

logger = logging.getLogger(__name__)


# ── BrewListViewModel ──────────────────────────────────────────────────────────

class BrewListViewModel:
    """
    Manages the brew history shown on the home page.

    Attributes
    ──────────
    records         — derived: every brew, newest first (from the BrewView)
    search_query    — substring filter over producer, origin and variety
    selected        — currently highlighted record, or None
    visible_records — derived: records matching search_query
    summary         — derived: "N sessions logged · avg X.X★"
    """

    def __init__(self, view: BrewView) -> None:
        self._view = view
        self.search_query: str                  = ""
        self.selected:     Optional[BrewRecord] = None
        view.subscribe(self._on_entries_changed)

    @property
    def view(self) -> BrewView:
        return self._view

    @property
    def records(self) -> list[BrewRecord]:
        return self._view.entries

    @property
    def visible_records(self) -> list[BrewRecord]:
        """Return records whose producer, origin or variety contains search_query."""
        if not self.search_query:
            return self.records
        q = self.search_query.lower()
        return [
            r for r in self.records
            if q in r.coffee_producer.lower()
            or q in r.country_of_origin.lower()
            or q in (r.coffee_variety or "").lower()
        ]

    @property
    def summary(self) -> str:
        return summarize(self.records)

    @property
    def is_empty(self) -> bool:
        return len(self._view) == 0

    def select(self, record: Optional[BrewRecord]) -> None:
        """Mark *record* as selected (None clears the selection)."""
        self.selected = record

    def select_row(self, row: int) -> None:
        """Select the *row*-th visible record; out-of-range rows clear the selection."""
        visible = self.visible_records
        self.selected = visible[row] if 0 <= row < len(visible) else None

    def _on_entries_changed(self, entries: list[BrewRecord]) -> None:
        # Keep the selection pointing at the fresh copy, or drop it if deleted
        if self.selected is not None:
            self.selected = next((r for r in entries if r.id == self.selected.id), None)


# ── BrewDetailViewModel ────────────────────────────────────────────────────────

NOT_FOUND_MESSAGE = "Brew not found."


class BrewDetailViewModel:
    """
    Tracks which brew the detail page shows.

    Attributes
    ──────────
    record_id — id requested by the caller, or None
    record    — derived: the matching record from the view, or None
    not_found — derived: an id was requested but no brew has it
    """

    def __init__(self, view: BrewView) -> None:
        self._view = view
        self.record_id: Optional[str] = None

    def load(self, record_id: str) -> Optional[BrewRecord]:
        self.record_id = record_id
        return self.record

    @property
    def record(self) -> Optional[BrewRecord]:
        if self.record_id is None:
            return None
        return self._view.find(self.record_id)

    @property
    def not_found(self) -> bool:
        return self.record_id is not None and self.record is None

    def delete(self) -> None:
        """Remove the shown brew from the store; a no-op when nothing is shown."""
        if self.record_id is None:
            return
        logger.info("Deleting brew %s", self.record_id)
        self._view.remove(self.record_id)
        self.record_id = None


# ── ThemeViewModel ─────────────────────────────────────────────────────────────

THEME_KEY = "theme"
_THEMES = ("light", "dark")


class ThemeViewModel:
    """
    Light / dark preference, restored from and saved to the key-value store.

    Attributes
    ──────────
    theme   — "light" or "dark"
    is_dark — derived
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv
        stored = kv.get(THEME_KEY)
        self.theme: str = stored if stored in _THEMES else "light"

    @property
    def is_dark(self) -> bool:
        return self.theme == "dark"

    def toggle(self) -> str:
        """Flip the theme, persist it, and return the new value."""
        self.theme = "light" if self.is_dark else "dark"
        self._kv.set(THEME_KEY, self.theme)
        return self.theme
