"""
MainWindow — top-level application window for the brew log GUI.

Uses a QStackedWidget to host three pages:
  0  HomePage     — newest-first brew list with search
  1  DetailPage   — every field of one brew, with Edit / Delete
  2  BrewFormPage — four-step wizard for logging or editing a brew

Navigation between pages is done programmatically via go_to(index).
The window owns the single RecordStore / BrewView pair; every page reads
from that view, so a save or delete on one page shows up on the others.
"""

import logging
from typing import Optional

from PyQt6.QtGui import QAction, QColor, QPalette
from PyQt6.QtWidgets import (
    QApplication,
    QMainWindow,
    QMessageBox,
    QStackedWidget,
    QToolBar,
    QWidget,
)

from brewlog.gui.pages.brew_form import BrewFormPage
from brewlog.gui.pages.detail import DetailPage
from brewlog.gui.pages.home import HomePage
from brewlog.gui.viewmodels import ThemeViewModel
from brewlog.store.kv import KeyValueStore
from brewlog.store.models import BrewRecord
from brewlog.store.records import RecordStore
from brewlog.store.view import BrewView

__all__ = ["MainWindow", "PAGE_HOME", "PAGE_DETAIL", "PAGE_FORM"]

logger = logging.getLogger(__name__)

# Page indices — keep in sync with the order they are added to the stack
PAGE_HOME   = 0
PAGE_DETAIL = 1
PAGE_FORM   = 2


def _dark_palette() -> QPalette:
    palette = QPalette()
    base = QColor(35, 31, 28)
    panel = QColor(52, 46, 41)
    text = QColor(236, 228, 218)
    palette.setColor(QPalette.ColorRole.Window, panel)
    palette.setColor(QPalette.ColorRole.WindowText, text)
    palette.setColor(QPalette.ColorRole.Base, base)
    palette.setColor(QPalette.ColorRole.AlternateBase, panel)
    palette.setColor(QPalette.ColorRole.Text, text)
    palette.setColor(QPalette.ColorRole.Button, panel)
    palette.setColor(QPalette.ColorRole.ButtonText, text)
    palette.setColor(QPalette.ColorRole.Highlight, QColor(166, 109, 60))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor(255, 255, 255))
    return palette


class MainWindow(QMainWindow):
    """Root window: hosts the QStackedWidget and wires page navigation."""

    def __init__(self, kv: KeyValueStore, parent: QWidget = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Brew Log")
        self.resize(720, 560)

        self._kv = kv
        self._view = BrewView(RecordStore(kv))
        self._theme = ThemeViewModel(kv)
        # Where Cancel on the form returns to
        self._form_origin = PAGE_HOME

        self._build_ui()
        self._connect_navigation()
        self._apply_theme()

    @property
    def view(self) -> BrewView:
        return self._view

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        toolbar = QToolBar("Main")
        toolbar.setMovable(False)
        self._home_action = QAction("Brew Log", self)
        self._home_action.triggered.connect(lambda: self.go_to(PAGE_HOME))
        toolbar.addAction(self._home_action)
        self._theme_action = QAction(self)
        self._theme_action.triggered.connect(self._on_toggle_theme)
        toolbar.addAction(self._theme_action)
        self.addToolBar(toolbar)

        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        self._page_home   = HomePage(self._view)
        self._page_detail = DetailPage(self._view)
        self._page_form   = BrewFormPage()

        self._stack.addWidget(self._page_home)    # 0
        self._stack.addWidget(self._page_detail)  # 1
        self._stack.addWidget(self._page_form)    # 2

        self._stack.setCurrentIndex(PAGE_HOME)

    # ── Navigation wiring ──────────────────────────────────────────────────

    def _connect_navigation(self) -> None:
        # HomePage → BrewFormPage (new brew)
        self._page_home._new_btn.clicked.connect(lambda: self.open_form(None))

        # HomePage → DetailPage
        self._page_home._view_btn.clicked.connect(self._on_view_clicked)

        # DetailPage ← back / edit / delete
        self._page_detail._back_btn.clicked.connect(lambda: self.go_to(PAGE_HOME))
        self._page_detail._edit_btn.clicked.connect(self._on_edit_clicked)
        self._page_detail._delete_btn.clicked.connect(self._on_delete_clicked)

        # BrewFormPage → save / cancel
        self._page_form.submitted.connect(self._on_form_submitted)
        self._page_form._cancel_btn.clicked.connect(
            lambda: self.go_to(self._form_origin)
        )

    # ── Slots ──────────────────────────────────────────────────────────────

    def _on_view_clicked(self) -> None:
        rec = self._page_home._vm.selected
        if rec is not None:
            self.open_detail(rec.id)

    def _on_edit_clicked(self) -> None:
        rec = self._page_detail._vm.record
        if rec is not None:
            self.open_form(rec)

    def _on_delete_clicked(self) -> None:
        rec = self._page_detail._vm.record
        if rec is None or not self._confirm_delete(rec):
            return
        self._page_detail._vm.delete()
        self.go_to(PAGE_HOME)

    def _confirm_delete(self, rec: BrewRecord) -> bool:
        answer = QMessageBox.question(
            self,
            "Delete Brew",
            f"Delete the {rec.coffee_producer} brew? This cannot be undone.",
        )
        return answer == QMessageBox.StandardButton.Yes

    def _on_form_submitted(self, record: BrewRecord) -> None:
        if self._page_form.wizard.is_editing:
            self._view.edit(record)
        else:
            self._view.add(record)
        self.open_detail(record.id)

    def _on_toggle_theme(self) -> None:
        self._theme.toggle()
        self._apply_theme()

    def _apply_theme(self) -> None:
        dark = self._theme.is_dark
        self._theme_action.setText("☀ Light" if dark else "☾ Dark")
        app = QApplication.instance()
        if app is not None:
            app.setPalette(_dark_palette() if dark else app.style().standardPalette())
        logger.debug("Theme applied: %s", self._theme.theme)

    # ── Public API ─────────────────────────────────────────────────────────

    def go_to(self, page_index: int) -> None:
        """Switch the visible page to *page_index*."""
        if page_index == PAGE_DETAIL:
            self._page_detail.refresh()
        self._stack.setCurrentIndex(page_index)

    def open_detail(self, record_id: str) -> None:
        self._page_detail.show_record(record_id)
        self.go_to(PAGE_DETAIL)

    def open_form(self, record: Optional[BrewRecord]) -> None:
        """Show the wizard, blank for a new brew or pre-filled with *record*."""
        self._form_origin = PAGE_DETAIL if record is not None else PAGE_HOME
        self._page_form.start(record)
        self.go_to(PAGE_FORM)
