"""
Unit tests for brewlog/gui/viewmodels.py — no Qt dependency.

ViewModels are pure-Python observable state containers.
All tests run on every platform without a display.

Coverage plan
─────────────
BrewListViewModel   → 7 tests
BrewDetailViewModel → 4 tests
ThemeViewModel      → 3 tests
─────────────────────────────────
Total               = 14 tests
"""

import pytest


@pytest.fixture
def kv(tmp_path):
    from brewlog.store.kv import KeyValueStore
    return KeyValueStore(db_path=str(tmp_path / "vm.db"))


@pytest.fixture
def view(kv):
    from brewlog.store.records import RecordStore
    from brewlog.store.view import BrewView
    return BrewView(RecordStore(kv))


def _record(record_id, created_at, producer="Blue Bottle", country="Ethiopia",
            variety=None, rating=4):
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
        country_of_origin=country,
        grind_coarseness=GrindCoarseness.MEDIUM,
        grind_equipment="Baratza Encore",
        brewing_method=BrewingMethod.POUR_OVER,
        grams_of_coffee=15,
        milliliters_of_water=250,
        water_source=WaterSource.FILTERED_TAP,
        number_of_people=1,
        brew_time_seconds=180,
        rating=rating,
        coffee_variety=variety,
    )


# ─────────────────────────────────────────────────────────────────────────────
# 1. BrewListViewModel
# ─────────────────────────────────────────────────────────────────────────────

class TestBrewListViewModel:
    """Newest-first brew list with search and selection."""

    def _vm(self, view):
        from brewlog.gui.viewmodels import BrewListViewModel
        return BrewListViewModel(view)

    def test_initially_empty(self, view):
        vm = self._vm(view)
        assert vm.is_empty
        assert vm.records == []
        assert vm.summary == "No brews logged yet"

    def test_records_follow_view_order(self, view):
        vm = self._vm(view)
        view.add(_record("a", "2024-01-01T00:00:00Z"))
        view.add(_record("b", "2024-01-02T00:00:00Z"))
        assert [r.id for r in vm.records] == ["b", "a"]
        assert not vm.is_empty

    def test_search_matches_producer_origin_and_variety(self, view):
        vm = self._vm(view)
        view.add(_record("a", "2024-01-01T00:00:00Z", producer="Blue Bottle"))
        view.add(_record("b", "2024-01-02T00:00:00Z", producer="Onyx", country="Colombia"))
        view.add(_record("c", "2024-01-03T00:00:00Z", producer="Tim Wendelboe", variety="Geisha"))
        vm.search_query = "BLUE"
        assert [r.id for r in vm.visible_records] == ["a"]
        vm.search_query = "colombia"
        assert [r.id for r in vm.visible_records] == ["b"]
        vm.search_query = "geisha"
        assert [r.id for r in vm.visible_records] == ["c"]

    def test_summary_averages_ratings(self, view):
        vm = self._vm(view)
        view.add(_record("a", "2024-01-01T00:00:00Z", rating=3))
        view.add(_record("b", "2024-01-02T00:00:00Z", rating=4))
        assert vm.summary == "2 sessions logged · avg 3.5★"

    def test_select_row_uses_visible_records(self, view):
        vm = self._vm(view)
        view.add(_record("a", "2024-01-01T00:00:00Z"))
        view.add(_record("b", "2024-01-02T00:00:00Z"))
        vm.select_row(1)
        assert vm.selected.id == "a"
        vm.select_row(7)
        assert vm.selected is None

    def test_selection_follows_edits(self, view):
        vm = self._vm(view)
        view.add(_record("a", "2024-01-01T00:00:00Z"))
        vm.select_row(0)
        view.edit(_record("a", "2024-01-01T00:00:00Z", producer="Stumptown"))
        assert vm.selected.coffee_producer == "Stumptown"

    def test_selection_cleared_when_deleted(self, view):
        vm = self._vm(view)
        view.add(_record("a", "2024-01-01T00:00:00Z"))
        vm.select_row(0)
        view.remove("a")
        assert vm.selected is None


# ─────────────────────────────────────────────────────────────────────────────
# 2. BrewDetailViewModel
# ─────────────────────────────────────────────────────────────────────────────

class TestBrewDetailViewModel:

    def _vm(self, view):
        from brewlog.gui.viewmodels import BrewDetailViewModel
        return BrewDetailViewModel(view)

    def test_nothing_loaded(self, view):
        vm = self._vm(view)
        assert vm.record is None
        assert vm.not_found is False

    def test_load_existing(self, view):
        view.add(_record("a", "2024-01-01T00:00:00Z"))
        vm = self._vm(view)
        assert vm.load("a").id == "a"
        assert vm.not_found is False

    def test_load_missing_is_not_found(self, view):
        vm = self._vm(view)
        assert vm.load("ghost") is None
        assert vm.not_found is True

    def test_delete_removes_from_view(self, view):
        view.add(_record("a", "2024-01-01T00:00:00Z"))
        vm = self._vm(view)
        vm.load("a")
        vm.delete()
        assert view.find("a") is None
        assert vm.record_id is None


# ─────────────────────────────────────────────────────────────────────────────
# 3. ThemeViewModel
# ─────────────────────────────────────────────────────────────────────────────

class TestThemeViewModel:

    def test_defaults_to_light(self, kv):
        from brewlog.gui.viewmodels import ThemeViewModel
        vm = ThemeViewModel(kv)
        assert vm.theme == "light"
        assert not vm.is_dark

    def test_toggle_persists(self, kv):
        from brewlog.gui.viewmodels import THEME_KEY, ThemeViewModel
        assert ThemeViewModel(kv).toggle() == "dark"
        assert kv.get(THEME_KEY) == "dark"
        assert ThemeViewModel(kv).is_dark

    def test_unknown_stored_value_falls_back_to_light(self, kv):
        from brewlog.gui.viewmodels import THEME_KEY, ThemeViewModel
        kv.set(THEME_KEY, "sepia")
        assert ThemeViewModel(kv).theme == "light"
