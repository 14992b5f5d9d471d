"""
DetailPage — every field of one brew.

Layout
──────
  ┌─────────────────────────────────────────┐
  │ Blue Bottle                  ★★★★☆      │
  │ Ethiopia · Heirloom   Mar 15, 2024 10:00 │
  │ [Pour Over]                             │
  │ Grind      Medium                       │
  │ Grinder    Baratza Encore               │
  │ …                                       │
  │ Notes: "Bright and fruity"              │
  │ Guest Ratings (1)                       │
  │ ┌─────────────────────────────────────┐ │
  │ │ Guest 1  ★★★★★  "Amazing!"          │ │
  │ └─────────────────────────────────────┘ │
  │ [← Back]               [Edit] [Delete]  │
  └─────────────────────────────────────────┘
"""

import logging
from typing import Optional

from PyQt6.QtWidgets import (
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from brewlog.display import (
    format_brewing_method,
    format_date,
    format_grind_coarseness,
    format_ratio,
    format_time,
    format_water_source,
    plural,
    stars,
)
from brewlog.gui.viewmodels import NOT_FOUND_MESSAGE, BrewDetailViewModel
from brewlog.gui.widgets.star_rating import StarRating
from brewlog.store.models import BrewRecord
from brewlog.store.view import BrewView

__all__ = ["DetailPage"]

logger = logging.getLogger(__name__)

# Detail rows, in display order
_ROWS = ["Grind", "Grinder", "Coffee", "Water", "Ratio", "Brew Time", "Served"]


class DetailPage(QWidget):
    """Second page: read one brew; Edit and Delete are wired by MainWindow."""

    def __init__(self, view: BrewView, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._vm = BrewDetailViewModel(view)
        self._values: dict[str, QLabel] = {}
        self._build_ui()
        self._render(None)

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        self._not_found_label = QLabel(NOT_FOUND_MESSAGE)
        layout.addWidget(self._not_found_label)

        # Header
        header = QHBoxLayout()
        titles = QVBoxLayout()
        self._title_label = QLabel()
        self._origin_label = QLabel()
        titles.addWidget(self._title_label)
        titles.addWidget(self._origin_label)
        header.addLayout(titles)
        header.addStretch()
        dates = QVBoxLayout()
        self._rating_widget = StarRating(read_only=True)
        self._date_label = QLabel()
        self._updated_label = QLabel()
        dates.addWidget(self._rating_widget)
        dates.addWidget(self._date_label)
        dates.addWidget(self._updated_label)
        header.addLayout(dates)
        layout.addLayout(header)

        self._method_label = QLabel()
        layout.addWidget(self._method_label)

        # Brew details
        self._details = QWidget()
        form = QFormLayout(self._details)
        for name in _ROWS:
            value = QLabel()
            self._values[name] = value
            form.addRow(f"{name}:", value)
        layout.addWidget(self._details)

        self._notes_label = QLabel()
        self._notes_label.setWordWrap(True)
        layout.addWidget(self._notes_label)

        self._guests_title = QLabel()
        layout.addWidget(self._guests_title)
        self._guest_list = QListWidget()
        layout.addWidget(self._guest_list)

        layout.addStretch()

        # Button row
        btn_row = QHBoxLayout()
        self._back_btn = QPushButton("← Back to list")
        btn_row.addWidget(self._back_btn)
        btn_row.addStretch()
        self._edit_btn   = QPushButton("Edit")
        self._delete_btn = QPushButton("Delete")
        btn_row.addWidget(self._edit_btn)
        btn_row.addWidget(self._delete_btn)
        layout.addLayout(btn_row)

    # ── Rendering ──────────────────────────────────────────────────────────

    def _render(self, rec: Optional[BrewRecord]) -> None:
        found = rec is not None
        self._not_found_label.setVisible(self._vm.not_found)
        for widget in (
            self._title_label, self._origin_label, self._rating_widget,
            self._date_label, self._method_label, self._details,
            self._edit_btn, self._delete_btn,
        ):
            widget.setVisible(found)
        if not found:
            self._updated_label.setVisible(False)
            self._notes_label.setVisible(False)
            self._guests_title.setVisible(False)
            self._guest_list.setVisible(False)
            self._guest_list.clear()
            return

        self._title_label.setText(f"<b>{rec.coffee_producer}</b>")
        origin = rec.country_of_origin
        if rec.coffee_variety:
            origin += f" · <i>{rec.coffee_variety}</i>"
        self._origin_label.setText(origin)
        self._rating_widget.setValue(rec.rating)
        self._date_label.setText(format_date(rec.created_at, with_time=True))
        self._updated_label.setText(f"Updated {format_date(rec.updated_at)}")
        self._updated_label.setVisible(rec.was_edited)
        self._method_label.setText(format_brewing_method(rec.brewing_method))

        self._values["Grind"].setText(format_grind_coarseness(rec.grind_coarseness))
        self._values["Grinder"].setText(rec.grind_equipment)
        self._values["Coffee"].setText(f"{rec.grams_of_coffee}g")
        self._values["Water"].setText(
            f"{rec.milliliters_of_water}ml ({format_water_source(rec.water_source)})"
        )
        self._values["Ratio"].setText(format_ratio(rec))
        self._values["Brew Time"].setText(format_time(rec.brew_time_seconds))
        self._values["Served"].setText(plural(rec.number_of_people, "person"))

        self._notes_label.setText(f'Notes: "{rec.comment}"' if rec.comment else "")
        self._notes_label.setVisible(bool(rec.comment))

        self._guest_list.clear()
        has_guests = bool(rec.guest_ratings)
        self._guests_title.setText(f"<b>Guest Ratings ({len(rec.guest_ratings)})</b>")
        self._guests_title.setVisible(has_guests)
        self._guest_list.setVisible(has_guests)
        for idx, guest in enumerate(rec.guest_ratings, start=1):
            line = f"Guest {idx}  {stars(guest.rating)}"
            if guest.comment:
                line += f'  "{guest.comment}"'
            self._guest_list.addItem(line)

    # ── Public API ─────────────────────────────────────────────────────────

    def show_record(self, record_id: str) -> Optional[BrewRecord]:
        """Load and display the brew with *record_id* (or the not-found state)."""
        rec = self._vm.load(record_id)
        self._render(rec)
        return rec

    def refresh(self) -> None:
        self._render(self._vm.record)
