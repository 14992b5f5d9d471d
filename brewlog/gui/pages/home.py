"""
HomePage — the brew list, newest first.

Layout
──────
  ┌─────────────────────────────────────────┐
  │ My Brews                    [+ Log Brew]│
  │ 3 sessions logged · avg 4.3★            │
  │ Search: [_______________________________]│
  │ ┌──────────────────────────────────────┐│
  │ │ Date   │ Producer │ Origin │ Method …││
  │ │ Mar 15 │ Blue Bot…│ Ethiop…│ Pour O… ││
  │ └──────────────────────────────────────┘│
  │                                 [View →]│
  └─────────────────────────────────────────┘
"""

import logging

from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from brewlog.display import format_brewing_method, format_date, format_time, stars
from brewlog.gui.viewmodels import BrewListViewModel
from brewlog.store.view import BrewView

__all__ = ["HomePage"]

logger = logging.getLogger(__name__)

# Column indices
_COL_DATE     = 0
_COL_PRODUCER = 1
_COL_ORIGIN   = 2
_COL_METHOD   = 3
_COL_RATING   = 4
_COL_TIME     = 5
_HEADERS = ["Date", "Producer", "Origin", "Method", "Rating", "Brew Time"]

EMPTY_MESSAGE = "No brews logged yet. Start tracking your coffee journey!"
NO_MATCH_MESSAGE = "No brews match your search."


class HomePage(QWidget):
    """First page: browse and search logged brews."""

    def __init__(self, view: BrewView, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._vm = BrewListViewModel(view)
        self._build_ui()
        view.subscribe(lambda _entries: self.refresh())
        self.refresh()

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        # Title row
        title_row = QHBoxLayout()
        title_row.addWidget(QLabel("<b>My Brews</b>"))
        title_row.addStretch()
        self._new_btn = QPushButton("+ Log Brew")
        title_row.addWidget(self._new_btn)
        layout.addLayout(title_row)

        self._summary_label = QLabel()
        layout.addWidget(self._summary_label)

        # Search bar
        search_row = QHBoxLayout()
        search_row.addWidget(QLabel("Search:"))
        self._search_edit = QLineEdit()
        self._search_edit.setPlaceholderText("Filter by producer, origin or variety…")
        self._search_edit.textChanged.connect(self._on_search_changed)
        search_row.addWidget(self._search_edit)
        layout.addLayout(search_row)

        # Brew table
        self._table = QTableWidget(0, len(_HEADERS))
        self._table.setHorizontalHeaderLabels(_HEADERS)
        self._table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self._table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self._table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        self._table.horizontalHeader().setStretchLastSection(True)
        self._table.currentCellChanged.connect(self._on_current_cell_changed)
        self._table.cellDoubleClicked.connect(lambda *_: self._view_btn.click())
        layout.addWidget(self._table)

        self._empty_label = QLabel(EMPTY_MESSAGE)
        layout.addWidget(self._empty_label)

        self._no_match_label = QLabel(NO_MATCH_MESSAGE)
        layout.addWidget(self._no_match_label)

        # Bottom button row
        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self._view_btn = QPushButton("View →")
        self._view_btn.setEnabled(False)
        btn_row.addWidget(self._view_btn)
        layout.addLayout(btn_row)

    # ── Slots ──────────────────────────────────────────────────────────────

    def _on_search_changed(self, text: str) -> None:
        self._vm.search_query = text
        self.refresh()

    def _on_current_cell_changed(self, row: int, *_args) -> None:
        self._vm.select_row(row)
        self._view_btn.setEnabled(self._vm.selected is not None)

    # ── Public API ─────────────────────────────────────────────────────────

    def refresh(self) -> None:
        """Redraw summary and table from the view model."""
        self._summary_label.setText(self._vm.summary)
        empty = self._vm.is_empty
        self._empty_label.setVisible(empty)
        self._table.setVisible(not empty)

        records = self._vm.visible_records
        self._no_match_label.setVisible(not empty and not records)
        self._table.blockSignals(True)
        self._table.setRowCount(len(records))
        for row, rec in enumerate(records):
            self._table.setItem(row, _COL_DATE,     QTableWidgetItem(format_date(rec.created_at)))
            self._table.setItem(row, _COL_PRODUCER, QTableWidgetItem(rec.coffee_producer))
            self._table.setItem(row, _COL_ORIGIN,   QTableWidgetItem(rec.country_of_origin))
            self._table.setItem(row, _COL_METHOD,
                                QTableWidgetItem(format_brewing_method(rec.brewing_method)))
            self._table.setItem(row, _COL_RATING,   QTableWidgetItem(stars(rec.rating)))
            self._table.setItem(row, _COL_TIME,
                                QTableWidgetItem(format_time(rec.brew_time_seconds)))
        self._table.setCurrentCell(-1, -1)
        self._table.clearSelection()
        self._table.blockSignals(False)
        self._vm.select(None)
        self._view_btn.setEnabled(False)
