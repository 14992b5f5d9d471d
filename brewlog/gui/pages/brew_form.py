"""
BrewFormPage — the four-step "Log a Brew" / "Edit Brew" wizard.

Every widget writes straight into the BrewFormWizard's values; Next validates
only the current step, Save validates everything and emits submitted(record).

Layout
──────
  ┌─────────────────────────────────────────┐
  │ Log a Brew — Step 1 of 4: Coffee        │
  │ ┌─────────────────────────────────────┐ │
  │ │ Coffee Producer* [_______________]  │ │
  │ │ Country of Origin* [_____________]  │ │
  │ │ …                                   │ │
  │ └─────────────────────────────────────┘ │
  │ • Coffee producer is required           │
  │ [Cancel]              [← Back] [Next →] │
  └─────────────────────────────────────────┘
"""

import logging
from typing import Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QComboBox,
    QCompleter,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QSpinBox,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from brewlog.display import GRIND_LABELS, METHOD_LABELS, WATER_LABELS
from brewlog.exceptions import FormValidationError
from brewlog.form.models import WizardStep
from brewlog.form.wizard import GRIND_EQUIPMENT_SUGGESTIONS, BrewFormWizard
from brewlog.gui.widgets.star_rating import StarRating
from brewlog.store.models import BrewRecord

__all__ = ["BrewFormPage"]

logger = logging.getLogger(__name__)

_STEP_TITLES: dict[WizardStep, str] = {
    WizardStep.COFFEE:  "Coffee",
    WizardStep.BREWING: "Brewing",
    WizardStep.RATING:  "Your Rating",
    WizardStep.GUESTS:  "Guest Ratings",
}

# Error keys → labels shown in the error list
_FIELD_LABELS: dict[str, str] = {
    "coffee_producer":      "Coffee Producer",
    "country_of_origin":    "Country of Origin",
    "coffee_variety":       "Coffee Variety",
    "grind_coarseness":     "Grind Coarseness",
    "grind_equipment":      "Grind Equipment",
    "brewing_method":       "Brewing Method",
    "water_source":         "Water Source",
    "grams_of_coffee":      "Coffee (grams)",
    "milliliters_of_water": "Water (ml)",
    "number_of_people":     "People Served",
    "brew_minutes":         "Brew Minutes",
    "brew_seconds":         "Brew Seconds",
    "rating":               "Overall Rating",
    "comment":              "Notes",
}


def _field_label(name: str) -> str:
    # "guest_ratings.1.rating" → "Guest 2 rating"
    if name.startswith("guest_ratings."):
        _, index, part = name.split(".")
        return f"Guest {int(index) + 1} {part}"
    return _FIELD_LABELS.get(name, name)


def _combo(labels: dict) -> QComboBox:
    combo = QComboBox()
    for member, label in labels.items():
        combo.addItem(label, member.value)
    return combo


def _select(combo: QComboBox, value) -> None:
    idx = combo.findData(getattr(value, "value", value))
    if idx >= 0:
        combo.setCurrentIndex(idx)


class BrewFormPage(QWidget):
    """Third page: create or edit a brew step by step."""

    submitted = pyqtSignal(object)  # the BrewRecord built by the wizard

    def __init__(self, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._wizard = BrewFormWizard()
        self._loading = False
        self._build_ui()
        self.start(None)

    @property
    def wizard(self) -> BrewFormWizard:
        return self._wizard

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        self._title_label = QLabel()
        layout.addWidget(self._title_label)

        self._steps = QStackedWidget()
        self._steps.addWidget(self._build_coffee_step())
        self._steps.addWidget(self._build_brewing_step())
        self._steps.addWidget(self._build_rating_step())
        self._steps.addWidget(self._build_guests_step())
        layout.addWidget(self._steps)

        self._error_label = QLabel()
        self._error_label.setStyleSheet("color: #c0392b;")
        self._error_label.setWordWrap(True)
        layout.addWidget(self._error_label)

        btn_row = QHBoxLayout()
        self._cancel_btn = QPushButton("Cancel")
        btn_row.addWidget(self._cancel_btn)
        btn_row.addStretch()
        self._back_btn = QPushButton("← Back")
        self._next_btn = QPushButton("Next →")
        self._save_btn = QPushButton("Log Brew")
        self._back_btn.clicked.connect(self._on_back)
        self._next_btn.clicked.connect(self._on_next)
        self._save_btn.clicked.connect(self._on_save)
        btn_row.addWidget(self._back_btn)
        btn_row.addWidget(self._next_btn)
        btn_row.addWidget(self._save_btn)
        layout.addLayout(btn_row)

    def _text_field(self, attr: str, placeholder: str = "") -> QLineEdit:
        edit = QLineEdit()
        edit.setPlaceholderText(placeholder)
        edit.textChanged.connect(lambda text, a=attr: self._set_value(a, text))
        return edit

    def _build_coffee_step(self) -> QWidget:
        page = QWidget()
        form = QFormLayout(page)
        self._producer_edit = self._text_field("coffee_producer", "e.g. Stumptown, Blue Bottle")
        self._country_edit  = self._text_field("country_of_origin", "e.g. Ethiopia, Colombia")
        self._variety_edit  = self._text_field("coffee_variety", "e.g. Geisha, Bourbon")
        self._grind_combo   = _combo(GRIND_LABELS)
        self._grind_combo.currentIndexChanged.connect(
            lambda _i: self._set_value("grind_coarseness", self._grind_combo.currentData())
        )
        self._grinder_edit = self._text_field("grind_equipment", "e.g. Baratza Encore, Hario")
        self._grinder_edit.setCompleter(QCompleter(GRIND_EQUIPMENT_SUGGESTIONS, self._grinder_edit))
        form.addRow("Coffee Producer *", self._producer_edit)
        form.addRow("Country of Origin *", self._country_edit)
        form.addRow("Coffee Variety", self._variety_edit)
        form.addRow("Grind Coarseness *", self._grind_combo)
        form.addRow("Grind Equipment *", self._grinder_edit)
        return page

    def _build_brewing_step(self) -> QWidget:
        page = QWidget()
        form = QFormLayout(page)
        self._method_combo = _combo(METHOD_LABELS)
        self._method_combo.currentIndexChanged.connect(self._on_method_changed)
        self._water_source_combo = _combo(WATER_LABELS)
        self._water_source_combo.currentIndexChanged.connect(
            lambda _i: self._set_value("water_source", self._water_source_combo.currentData())
        )
        self._coffee_edit  = self._text_field("grams_of_coffee")
        self._water_edit   = self._text_field("milliliters_of_water")
        self._people_edit  = self._text_field("number_of_people")
        self._minutes_edit = self._text_field("brew_minutes")
        self._seconds_edit = self._text_field("brew_seconds")
        time_row = QHBoxLayout()
        time_row.addWidget(self._minutes_edit)
        time_row.addWidget(QLabel(":"))
        time_row.addWidget(self._seconds_edit)
        form.addRow("Brewing Method *", self._method_combo)
        form.addRow("Water Source *", self._water_source_combo)
        form.addRow("Coffee (grams) *", self._coffee_edit)
        form.addRow("Water (ml) *", self._water_edit)
        form.addRow("People Served *", self._people_edit)
        form.addRow("Brew Time (min : sec) *", time_row)
        return page

    def _build_rating_step(self) -> QWidget:
        page = QWidget()
        form = QFormLayout(page)
        self._rating_widget = StarRating()
        self._rating_widget.valueChanged.connect(lambda v: self._set_value("rating", v))
        self._comment_edit = QPlainTextEdit()
        self._comment_edit.setPlaceholderText("Tasting notes, observations, improvements…")
        self._comment_edit.textChanged.connect(
            lambda: self._set_value("comment", self._comment_edit.toPlainText())
        )
        form.addRow("Overall Rating *", self._rating_widget)
        form.addRow("Notes (optional)", self._comment_edit)
        return page

    def _build_guests_step(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        header = QHBoxLayout()
        self._guest_count_label = QLabel()
        header.addWidget(self._guest_count_label)
        header.addStretch()
        self._add_guest_btn = QPushButton("+ Add Guest")
        self._add_guest_btn.clicked.connect(self._on_add_guest)
        header.addWidget(self._add_guest_btn)
        layout.addLayout(header)
        self._guest_rows = QVBoxLayout()
        layout.addLayout(self._guest_rows)
        self._no_guests_label = QLabel("No guest ratings yet. Add guests who tried your brew!")
        layout.addWidget(self._no_guests_label)
        layout.addStretch()
        return page

    # ── Guests ─────────────────────────────────────────────────────────────

    def _rebuild_guests(self) -> None:
        while self._guest_rows.count():
            item = self._guest_rows.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

        guests = self._wizard.values.guest_ratings
        self._guest_count_label.setText(f"<b>Guest Ratings</b> ({len(guests)})")
        self._no_guests_label.setVisible(not guests)
        for index, guest in enumerate(guests):
            row = QWidget()
            row_layout = QHBoxLayout(row)
            row_layout.setContentsMargins(0, 0, 0, 0)
            row_layout.addWidget(QLabel(f"Guest {index + 1}"))
            spin = QSpinBox()
            spin.setRange(1, 5)
            spin.setValue(int(guest.rating) if str(guest.rating).isdigit() else 3)
            spin.valueChanged.connect(lambda v, g=guest: setattr(g, "rating", v))
            row_layout.addWidget(spin)
            comment = QLineEdit(guest.comment or "")
            comment.setPlaceholderText("What did they think?")
            comment.textChanged.connect(lambda t, g=guest: setattr(g, "comment", t))
            row_layout.addWidget(comment)
            remove = QPushButton("Remove")
            remove.setAccessibleName(f"Remove guest {index + 1}")
            remove.clicked.connect(lambda _c=False, i=index: self._on_remove_guest(i))
            row_layout.addWidget(remove)
            self._guest_rows.addWidget(row)

    def _on_add_guest(self) -> None:
        self._wizard.add_guest()
        self._rebuild_guests()

    def _on_remove_guest(self, index: int) -> None:
        self._wizard.remove_guest(index)
        self._rebuild_guests()

    # ── Slots ──────────────────────────────────────────────────────────────

    def _set_value(self, attr: str, value) -> None:
        if not self._loading:
            setattr(self._wizard.values, attr, value)

    def _on_method_changed(self, _index: int) -> None:
        if self._loading:
            return
        self._wizard.set_brewing_method(self._method_combo.currentData())
        # Method defaults may have changed dose and water
        self._loading = True
        self._coffee_edit.setText(str(self._wizard.values.grams_of_coffee))
        self._water_edit.setText(str(self._wizard.values.milliliters_of_water))
        self._loading = False

    def _on_back(self) -> None:
        self._wizard.back()
        self._sync_step()

    def _on_next(self) -> None:
        self._wizard.next()
        self._sync_step()

    def _on_save(self) -> None:
        try:
            record = self._wizard.submit()
        except FormValidationError:
            self._sync_step()
            return
        logger.info("Form submitted for brew %s", record.id)
        self.submitted.emit(record)

    # ── Internal helpers ───────────────────────────────────────────────────

    def _sync_step(self) -> None:
        wiz = self._wizard
        self._steps.setCurrentIndex(wiz.index)
        action = "Edit Brew" if wiz.is_editing else "Log a Brew"
        self._title_label.setText(
            f"<b>{action}</b> — Step {wiz.index + 1} of {len(WizardStep)}: "
            f"{_STEP_TITLES[wiz.step]}"
        )
        self._back_btn.setEnabled(not wiz.is_first)
        self._next_btn.setVisible(not wiz.is_last)
        self._save_btn.setVisible(wiz.is_last)
        self._error_label.setText("\n".join(
            f"• {_field_label(name)}: {message}"
            for name, message in wiz.errors.items()
        ))

    def _load_values(self) -> None:
        values = self._wizard.values
        self._loading = True
        try:
            self._producer_edit.setText(values.coffee_producer)
            self._country_edit.setText(values.country_of_origin)
            self._variety_edit.setText(values.coffee_variety)
            _select(self._grind_combo, values.grind_coarseness)
            self._grinder_edit.setText(values.grind_equipment)
            _select(self._method_combo, values.brewing_method)
            _select(self._water_source_combo, values.water_source)
            self._coffee_edit.setText(str(values.grams_of_coffee))
            self._water_edit.setText(str(values.milliliters_of_water))
            self._people_edit.setText(str(values.number_of_people))
            self._minutes_edit.setText(str(values.brew_minutes))
            self._seconds_edit.setText(str(values.brew_seconds))
            self._rating_widget.setValue(int(values.rating))
            self._comment_edit.setPlainText(values.comment)
        finally:
            self._loading = False
        self._rebuild_guests()

    # ── Public API ─────────────────────────────────────────────────────────

    def start(self, record: Optional[BrewRecord]) -> None:
        """Reset the wizard for a new brew (None) or for editing *record*."""
        self._wizard = BrewFormWizard(record=record)
        self._save_btn.setText("Update Brew" if record else "Log Brew")
        self._load_values()
        self._sync_step()
