"""
Project-wide custom exception hierarchy.
All modules raise subclasses of BrewlogBaseError — never bare Exception.
"""

__all__ = [
    "BrewlogBaseError",
    "StoreError",
    "RecordDecodeError",
    "RecordNotFoundError",
    "FormValidationError",
]


class BrewlogBaseError(Exception):
    """Root exception for all brewlog errors."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StoreError(BrewlogBaseError):
    """Raised on SQLite / store I/O errors."""


class RecordDecodeError(StoreError):
    """Raised when a stored element does not have the BrewRecord shape."""


class RecordNotFoundError(BrewlogBaseError):
    """Raised by commands that address a brew id which is not in the store."""


# ── Form ──────────────────────────────────────────────────────────────────────

class FormValidationError(BrewlogBaseError):
    """
    Raised when a brew form is submitted with invalid fields.

    ``errors`` maps each failing field name to its user-facing message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        summary = "; ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(f"Invalid brew form — {summary}")
