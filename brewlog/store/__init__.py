"""
store — durable brew records and their newest-first view.

Public API
──────────
KeyValueStore — SQLite-backed durable key → text slots
RecordStore   — list_all / create / update / delete_by_id over one JSON blob
BrewView      — sorted, observable projection recomputed after every mutation
BrewRecord    — dataclass for one logged brew (plus GuestRating and enums)
"""

from brewlog.store.kv import DEFAULT_DB_PATH, KeyValueStore
from brewlog.store.models import (
    BrewingMethod,
    BrewRecord,
    GrindCoarseness,
    GuestRating,
    WaterSource,
)
from brewlog.store.records import STORAGE_KEY, RecordStore
from brewlog.store.view import BrewView

__all__ = [
    "DEFAULT_DB_PATH",
    "KeyValueStore",
    "RecordStore",
    "STORAGE_KEY",
    "BrewView",
    "BrewRecord",
    "GuestRating",
    "GrindCoarseness",
    "BrewingMethod",
    "WaterSource",
]
