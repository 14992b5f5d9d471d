"""
Unit tests for brewlog/gui/ Qt widgets — requires PyQt6 + offscreen display.

Run with: QT_QPA_PLATFORM=offscreen pytest tests/unit/test_gui_widgets.py

Coverage plan
─────────────
StarRating          → 3 tests
HomePage            → 4 tests
DetailPage          → 2 tests
BrewFormPage        → 4 tests
MainWindow          → 7 tests
─────────────────────────────────
Total               = 20 tests
"""

import os
import sys
from unittest.mock import patch

import pytest

# Ensure offscreen rendering when no display is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

PyQt6 = pytest.importorskip("PyQt6", reason="PyQt6 not installed")


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def app():
    """Single QApplication for the entire module (can only have one per process)."""
    from PyQt6.QtWidgets import QApplication
    _app = QApplication.instance() or QApplication(sys.argv)
    yield _app
    # Don't call app.quit() — other tests in the session may still need it.


@pytest.fixture
def kv(tmp_path):
    from brewlog.store.kv import KeyValueStore
    return KeyValueStore(db_path=str(tmp_path / "gui.db"))


@pytest.fixture
def view(kv):
    from brewlog.store.records import RecordStore
    from brewlog.store.view import BrewView
    return BrewView(RecordStore(kv))


def _record(record_id="entry-1", created_at="2024-03-15T10:00:00.000Z",
            producer="Blue Bottle", **overrides):
    from brewlog.store.models import (
        BrewingMethod,
        BrewRecord,
        GrindCoarseness,
        GuestRating,
        WaterSource,
    )
    fields = dict(
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
        comment="Bright and fruity",
        guest_ratings=[GuestRating(id="g1", rating=5, comment="Amazing!")],
    )
    fields.update(overrides)
    return BrewRecord(**fields)


def _fill_coffee_step(page):
    page._producer_edit.setText("Onyx")
    page._country_edit.setText("Kenya")
    page._grinder_edit.setText("Wilfa Svart")


# ─────────────────────────────────────────────────────────────────────────────
# 1. StarRating
# ─────────────────────────────────────────────────────────────────────────────

class TestStarRating:

    def test_click_sets_value_and_emits(self, app, qtbot):
        from brewlog.gui.widgets import StarRating
        widget = StarRating()
        qtbot.addWidget(widget)
        with qtbot.waitSignal(widget.valueChanged, timeout=1000) as blocker:
            widget._buttons[2].click()
        assert blocker.args == [3]
        assert widget.value() == 3
        assert [b.text() for b in widget._buttons] == ["★", "★", "★", "☆", "☆"]

    def test_read_only_ignores_clicks(self, app, qtbot):
        from brewlog.gui.widgets import StarRating
        widget = StarRating(value=2, read_only=True)
        qtbot.addWidget(widget)
        widget._on_clicked(5)
        assert widget.value() == 2

    def test_set_value_clamps(self, app):
        from brewlog.gui.widgets import StarRating
        widget = StarRating()
        widget.setValue(9)
        assert widget.value() == 5


# ─────────────────────────────────────────────────────────────────────────────
# 2. HomePage
# ─────────────────────────────────────────────────────────────────────────────

class TestHomePage:

    def test_empty_state(self, app, view):
        from brewlog.gui.pages.home import HomePage
        page = HomePage(view)
        assert page._table.rowCount() == 0
        assert page._summary_label.text() == "No brews logged yet"
        assert not page._view_btn.isEnabled()

    def test_rows_follow_view_newest_first(self, app, view):
        from brewlog.gui.pages.home import HomePage
        page = HomePage(view)
        view.add(_record("a", "2024-01-01T00:00:00Z", producer="Older"))
        view.add(_record("b", "2024-01-02T00:00:00Z", producer="Newer"))
        assert page._table.rowCount() == 2
        assert page._table.item(0, 1).text() == "Newer"
        assert page._table.item(1, 1).text() == "Older"

    def test_search_and_selection(self, app, view):
        from brewlog.gui.pages.home import HomePage
        view.add(_record("a", "2024-01-01T00:00:00Z", producer="Blue Bottle"))
        view.add(_record("b", "2024-01-02T00:00:00Z", producer="Onyx"))
        page = HomePage(view)
        page._search_edit.setText("onyx")
        assert page._table.rowCount() == 1
        page._table.setCurrentCell(0, 0)
        assert page._vm.selected.id == "b"
        assert page._view_btn.isEnabled()

    def test_search_without_matches_says_so(self, app, view):
        from brewlog.gui.pages.home import NO_MATCH_MESSAGE, HomePage
        view.add(_record("a", "2024-01-01T00:00:00Z", producer="Blue Bottle"))
        page = HomePage(view)
        assert page._no_match_label.isHidden()
        page._search_edit.setText("zzz")
        assert page._table.rowCount() == 0
        assert not page._no_match_label.isHidden()
        assert page._no_match_label.text() == NO_MATCH_MESSAGE
        assert page._empty_label.isHidden()
        page._search_edit.setText("")
        assert page._no_match_label.isHidden()


# ─────────────────────────────────────────────────────────────────────────────
# 3. DetailPage
# ─────────────────────────────────────────────────────────────────────────────

class TestDetailPage:

    def test_shows_record_fields(self, app, view):
        from brewlog.gui.pages.detail import DetailPage
        view.add(_record())
        page = DetailPage(view)
        page.show_record("entry-1")
        assert "Blue Bottle" in page._title_label.text()
        assert page._values["Ratio"].text() == "1:16.7"
        assert page._values["Brew Time"].text() == "3:00"
        assert page._guest_list.count() == 1
        assert page._rating_widget.value() == 4

    def test_unknown_id_shows_not_found(self, app, view):
        from brewlog.gui.pages.detail import DetailPage
        from brewlog.gui.viewmodels import NOT_FOUND_MESSAGE
        page = DetailPage(view)
        assert page.show_record("ghost") is None
        assert page._vm.not_found
        assert page._not_found_label.text() == NOT_FOUND_MESSAGE


# ─────────────────────────────────────────────────────────────────────────────
# 4. BrewFormPage
# ─────────────────────────────────────────────────────────────────────────────

class TestBrewFormPage:

    def test_next_blocked_until_coffee_step_valid(self, app):
        from brewlog.form.models import WizardStep
        from brewlog.gui.pages.brew_form import BrewFormPage
        page = BrewFormPage()
        page._next_btn.click()
        assert page.wizard.step is WizardStep.COFFEE
        assert "Coffee producer is required" in page._error_label.text()
        _fill_coffee_step(page)
        page._next_btn.click()
        assert page.wizard.step is WizardStep.BREWING
        assert page._steps.currentIndex() == 1
        assert page._error_label.text() == ""

    def test_method_change_updates_dose_fields(self, app):
        from brewlog.gui.pages.brew_form import BrewFormPage
        page = BrewFormPage()
        page._method_combo.setCurrentIndex(page._method_combo.findData("aeropress"))
        assert page._coffee_edit.text() == "14"
        assert page._water_edit.text() == "200"

    def test_submit_emits_record(self, app, qtbot):
        from brewlog.gui.pages.brew_form import BrewFormPage
        page = BrewFormPage()
        qtbot.addWidget(page)
        _fill_coffee_step(page)
        page._next_btn.click()
        page._minutes_edit.setText("2")
        page._seconds_edit.setText("30")
        page._next_btn.click()
        page._rating_widget._buttons[4].click()
        page._next_btn.click()
        page._add_guest_btn.click()
        assert page._save_btn.isVisibleTo(page)
        with qtbot.waitSignal(page.submitted, timeout=1000) as blocker:
            page._save_btn.click()
        rec = blocker.args[0]
        assert rec.coffee_producer == "Onyx"
        assert rec.brew_time_seconds == 150
        assert rec.rating == 5
        assert len(rec.guest_ratings) == 1

    def test_start_with_record_prefills(self, app):
        from brewlog.gui.pages.brew_form import BrewFormPage
        page = BrewFormPage()
        page.start(_record())
        assert page.wizard.is_editing
        assert page._producer_edit.text() == "Blue Bottle"
        assert page._coffee_edit.text() == "15"
        assert page._minutes_edit.text() == "3"
        assert page._rating_widget.value() == 4
        assert page._save_btn.text() == "Update Brew"


# ─────────────────────────────────────────────────────────────────────────────
# 5. MainWindow
# ─────────────────────────────────────────────────────────────────────────────

class TestMainWindow:

    def test_creates_on_home_page(self, app, kv, qtbot):
        from brewlog.gui.main_window import PAGE_HOME, MainWindow
        from PyQt6.QtWidgets import QStackedWidget
        win = MainWindow(kv)
        qtbot.addWidget(win)
        assert win.findChildren(QStackedWidget)
        assert win._stack.currentIndex() == PAGE_HOME
        assert win.windowTitle() == "Brew Log"

    def test_log_brew_flow_lands_on_detail(self, app, kv, qtbot):
        from brewlog.gui.main_window import PAGE_DETAIL, PAGE_FORM, MainWindow
        win = MainWindow(kv)
        qtbot.addWidget(win)
        win._page_home._new_btn.click()
        assert win._stack.currentIndex() == PAGE_FORM
        form = win._page_form
        _fill_coffee_step(form)
        form._next_btn.click()
        form._next_btn.click()
        form._rating_widget._buttons[3].click()
        form._next_btn.click()
        form._save_btn.click()
        assert win._stack.currentIndex() == PAGE_DETAIL
        assert len(win.view) == 1
        assert win._page_home._table.rowCount() == 1
        assert "Onyx" in win._page_detail._title_label.text()

    def test_view_button_opens_detail(self, app, kv, qtbot):
        from brewlog.gui.main_window import PAGE_DETAIL, MainWindow
        win = MainWindow(kv)
        qtbot.addWidget(win)
        win.view.add(_record())
        win._page_home._table.setCurrentCell(0, 0)
        win._page_home._view_btn.click()
        assert win._stack.currentIndex() == PAGE_DETAIL
        assert win._page_detail._vm.record_id == "entry-1"

    def test_edit_keeps_created_at(self, app, kv, qtbot):
        from brewlog.gui.main_window import PAGE_DETAIL, PAGE_FORM, MainWindow
        win = MainWindow(kv)
        qtbot.addWidget(win)
        win.view.add(_record())
        win.open_detail("entry-1")
        win._page_detail._edit_btn.click()
        assert win._stack.currentIndex() == PAGE_FORM
        form = win._page_form
        form._producer_edit.setText("Stumptown")
        for _ in range(3):
            form._next_btn.click()
        form._save_btn.click()
        assert win._stack.currentIndex() == PAGE_DETAIL
        rec = win.view.find("entry-1")
        assert rec.coffee_producer == "Stumptown"
        assert rec.created_at == "2024-03-15T10:00:00.000Z"
        assert rec.was_edited
        assert len(win.view) == 1

    def test_delete_confirmed_returns_home(self, app, kv, qtbot):
        from brewlog.gui.main_window import PAGE_HOME, MainWindow
        win = MainWindow(kv)
        qtbot.addWidget(win)
        win.view.add(_record())
        win.open_detail("entry-1")
        with patch.object(MainWindow, "_confirm_delete", return_value=True):
            win._page_detail._delete_btn.click()
        assert win._stack.currentIndex() == PAGE_HOME
        assert len(win.view) == 0

    def test_delete_declined_keeps_brew(self, app, kv, qtbot):
        from brewlog.gui.main_window import PAGE_DETAIL, MainWindow
        win = MainWindow(kv)
        qtbot.addWidget(win)
        win.view.add(_record())
        win.open_detail("entry-1")
        with patch.object(MainWindow, "_confirm_delete", return_value=False):
            win._page_detail._delete_btn.click()
        assert win._stack.currentIndex() == PAGE_DETAIL
        assert len(win.view) == 1

    def test_theme_toggle_persists(self, app, kv, qtbot):
        from brewlog.gui.main_window import MainWindow
        from brewlog.gui.viewmodels import THEME_KEY
        win = MainWindow(kv)
        qtbot.addWidget(win)
        win._theme_action.trigger()
        assert kv.get(THEME_KEY) == "dark"
        win._theme_action.trigger()
        assert kv.get(THEME_KEY) == "light"
