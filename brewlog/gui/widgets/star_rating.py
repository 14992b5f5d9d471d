"""
StarRating — five clickable stars bound to an integer 0–5.

0 means "no rating chosen"; clicking the currently selected star keeps it.
In read-only mode the buttons are disabled and only display the value.
"""

import logging

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import QHBoxLayout, QToolButton, QWidget

__all__ = ["StarRating"]

logger = logging.getLogger(__name__)

MAX_STARS = 5


class StarRating(QWidget):
    """Row of star buttons; emits valueChanged(int) when the user picks one."""

    valueChanged = pyqtSignal(int)

    def __init__(self, value: int = 0, read_only: bool = False, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._value = 0
        self._read_only = read_only
        self._buttons: list[QToolButton] = []

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)
        for star in range(1, MAX_STARS + 1):
            btn = QToolButton()
            btn.setAutoRaise(True)
            btn.setAccessibleName(f"{star} star{'s' if star > 1 else ''}")
            btn.setEnabled(not read_only)
            btn.clicked.connect(lambda _checked=False, s=star: self._on_clicked(s))
            self._buttons.append(btn)
            layout.addWidget(btn)
        layout.addStretch()

        self.setValue(value)

    def value(self) -> int:
        return self._value

    def setValue(self, value: int) -> None:
        self._value = max(0, min(MAX_STARS, int(value)))
        for star, btn in enumerate(self._buttons, start=1):
            btn.setText("★" if star <= self._value else "☆")

    def _on_clicked(self, star: int) -> None:
        if self._read_only or star == self._value:
            return
        self.setValue(star)
        self.valueChanged.emit(star)
