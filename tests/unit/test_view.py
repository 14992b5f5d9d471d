"""
Unit tests for brewlog/store/view.py

Coverage plan
─────────────
ordering      → 6 tests  (newest first, instants not strings, stable ties,
                          corrupt / non-UTF-8 / deeply nested store → empty)
mutations     → 6 tests  (add / edit / remove re-derive, edit of unknown id
                          writes nothing, entries is a copy)
observers     → 3 tests  (notified on refresh, unsubscribe, no duplicates)
end-to-end    → 1 test   (create A, B → [B, A]; edit A; delete B → [A])
─────────────────────────────────────────────────────────────────
Total         = 16 tests
"""

from datetime import datetime, timezone

import pytest


@pytest.fixture
def store(tmp_path):
    from brewlog.store.kv import KeyValueStore
    from brewlog.store.records import RecordStore
    return RecordStore(KeyValueStore(db_path=str(tmp_path / "view.db")))


def _record(record_id: str, created_at: str, producer: str = "Blue Bottle"):
    from brewlog.store.models import (
        BrewingMethod,
        BrewRecord,
        GrindCoarseness,
        WaterSource,
    )
    return BrewRecord(
        id=record_id,
        created_at=created_at,
        updated_at=created_at,
        coffee_producer=producer,
        country_of_origin="Ethiopia",
        grind_coarseness=GrindCoarseness.MEDIUM,
        grind_equipment="Baratza Encore",
        brewing_method=BrewingMethod.POUR_OVER,
        grams_of_coffee=15,
        milliliters_of_water=250,
        water_source=WaterSource.FILTERED_TAP,
        number_of_people=1,
        brew_time_seconds=180,
        rating=4,
    )


def _ids(view) -> list[str]:
    return [r.id for r in view.entries]


# ─────────────────────────────────────────────────────────────────────────────
# 1. Ordering
# ─────────────────────────────────────────────────────────────────────────────

class TestOrdering:

    def test_initial_load_is_newest_first(self, store):
        from brewlog.store.view import BrewView
        store.create(_record("t1", "2024-01-01T00:00:00.000Z"))
        store.create(_record("t3", "2024-01-03T00:00:00.000Z"))
        store.create(_record("t2", "2024-01-02T00:00:00.000Z"))
        assert _ids(BrewView(store)) == ["t3", "t2", "t1"]

    def test_sorts_by_instant_across_formats(self, store):
        from brewlog.store.view import BrewView
        # 09:30Z < 10:00Z (written as 12:00+02:00) < 10:00:00.500Z
        store.create(_record("t2", "2024-03-15T12:00:00+02:00"))
        store.create(_record("t3", "2024-03-15T10:00:00.500Z"))
        store.create(_record("t1", "2024-03-15T09:30:00Z"))
        assert _ids(BrewView(store)) == ["t3", "t2", "t1"]

    def test_equal_timestamps_keep_stored_order(self, store):
        from brewlog.store.view import BrewView
        for rid in ("first", "second", "third"):
            store.create(_record(rid, "2024-03-15T10:00:00.000Z"))
        assert _ids(BrewView(store)) == ["first", "second", "third"]

    def test_corrupt_store_presents_empty_list(self, store):
        from brewlog.store.view import BrewView
        store._kv.set("coffee-brewing-entries", "]]garbage[[")
        view = BrewView(store)
        assert view.entries == []
        assert len(view) == 0

    def test_non_utf8_store_presents_empty_list(self, store):
        import sqlite3
        from brewlog.store.view import BrewView
        conn = sqlite3.connect(str(store._kv.path))
        with conn:
            conn.execute(
                "INSERT OR REPLACE INTO slots (key, value, updated_at) "
                "VALUES ('coffee-brewing-entries', CAST(X'5BFF5D' AS TEXT), '')"
            )
        conn.close()
        assert BrewView(store).entries == []

    def test_deeply_nested_store_presents_empty_list(self, store):
        from brewlog.store.view import BrewView
        store._kv.set("coffee-brewing-entries", "[" * 200000 + "]" * 200000)
        assert BrewView(store).entries == []


# ─────────────────────────────────────────────────────────────────────────────
# 2. Mutations
# ─────────────────────────────────────────────────────────────────────────────

class TestMutations:

    def test_add_places_newer_record_first(self, store):
        from brewlog.store.view import BrewView
        view = BrewView(store)
        view.add(_record("old", "2024-01-01T00:00:00.000Z"))
        view.add(_record("new", "2024-02-01T00:00:00.000Z"))
        assert _ids(view) == ["new", "old"]

    def test_add_of_backdated_record_sorts_below(self, store):
        from brewlog.store.view import BrewView
        view = BrewView(store)
        view.add(_record("new", "2024-02-01T00:00:00.000Z"))
        view.add(_record("old", "2024-01-01T00:00:00.000Z"))
        assert _ids(view) == ["new", "old"]

    def test_remove_drops_record(self, store):
        from brewlog.store.view import BrewView
        view = BrewView(store)
        view.add(_record("a", "2024-01-01T00:00:00.000Z"))
        view.remove("a")
        assert view.entries == []
        assert view.find("a") is None

    def test_edit_unknown_id_changes_nothing(self, store):
        from unittest.mock import patch
        from brewlog.store.view import BrewView
        view = BrewView(store)
        view.add(_record("a", "2024-01-01T00:00:00.000Z"))
        before = view.entries
        with patch.object(store._kv, "set") as mock_set:
            view.edit(_record("ghost", "2024-01-05T00:00:00.000Z", producer="Nobody"))
        mock_set.assert_not_called()
        assert view.entries == before

    def test_edit_replaces_fields_in_place(self, store):
        from brewlog.store.view import BrewView
        view = BrewView(store)
        view.add(_record("a", "2024-01-01T00:00:00.000Z"))
        view.add(_record("b", "2024-01-02T00:00:00.000Z"))
        view.edit(_record("a", "2024-01-01T00:00:00.000Z", producer="Stumptown"))
        assert _ids(view) == ["b", "a"]
        assert view.find("a").coffee_producer == "Stumptown"

    def test_entries_returns_a_copy(self, store):
        from brewlog.store.view import BrewView
        view = BrewView(store)
        view.add(_record("a", "2024-01-01T00:00:00.000Z"))
        view.entries.clear()
        assert len(view) == 1


# ─────────────────────────────────────────────────────────────────────────────
# 3. Observers
# ─────────────────────────────────────────────────────────────────────────────

class TestObservers:

    def test_listener_receives_recomputed_list(self, store):
        from brewlog.store.view import BrewView
        view = BrewView(store)
        seen = []
        view.subscribe(lambda entries: seen.append([r.id for r in entries]))
        view.add(_record("a", "2024-01-01T00:00:00.000Z"))
        view.add(_record("b", "2024-01-02T00:00:00.000Z"))
        assert seen == [["a"], ["b", "a"]]

    def test_unsubscribe_stops_notifications(self, store):
        from brewlog.store.view import BrewView
        view = BrewView(store)
        seen = []
        listener = seen.append
        view.subscribe(listener)
        view.unsubscribe(listener)
        view.add(_record("a", "2024-01-01T00:00:00.000Z"))
        assert seen == []

    def test_subscribing_twice_notifies_once(self, store):
        from brewlog.store.view import BrewView
        view = BrewView(store)
        seen = []
        listener = seen.append
        view.subscribe(listener)
        view.subscribe(listener)
        view.refresh()
        assert len(seen) == 1


# ─────────────────────────────────────────────────────────────────────────────
# 4. End-to-end
# ─────────────────────────────────────────────────────────────────────────────

class TestEndToEnd:

    def test_create_edit_delete_scenario(self, store):
        from brewlog.store.view import BrewView
        view = BrewView(store)
        a = _record("A", "2024-01-01T00:00:00Z")
        b = _record("B", "2024-01-02T00:00:00Z")
        view.add(a)
        view.add(b)
        assert _ids(view) == ["B", "A"]

        edited = _record("A", "2024-01-01T00:00:00Z", producer="Stumptown")
        edited = edited.touched(datetime(2024, 1, 3, tzinfo=timezone.utc))
        view.edit(edited)
        assert _ids(view) == ["B", "A"]
        fresh_a = view.find("A")
        assert fresh_a.coffee_producer == "Stumptown"
        assert fresh_a.updated_at == "2024-01-03T00:00:00.000Z"
        assert fresh_a.created_at == a.created_at

        view.remove(b.id)
        assert _ids(view) == ["A"]
