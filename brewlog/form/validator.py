"""
BrewFormValidator — field checks for the brew form.

Checks (per field):
  coffee_producer       — required
  country_of_origin     — required
  coffee_variety        — optional text
  grind_coarseness      — one of GrindCoarseness
  grind_equipment       — required
  brewing_method        — one of BrewingMethod
  water_source          — one of WaterSource
  grams_of_coffee       — number in [1, 1000]
  milliliters_of_water  — number in [1, 10000]
  number_of_people      — integer in [1, 100]
  brew_minutes          — integer in [0, 60]
  brew_seconds          — integer in [0, 59]
  rating                — integer in [1, 5]; 0 means "not chosen"
  comment               — optional text
  guest_ratings         — every guest rating an integer in [1, 5]

Numeric fields accept strings ("15", " 15.5 ") and are coerced; the coerced
values are returned in FormValidation.cleaned.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Iterable, Optional

from brewlog.store.models import (
    BrewingMethod,
    GrindCoarseness,
    GuestRating,
    WaterSource,
)

from .models import STEP_FIELDS, BrewFormValues, FormValidation, WizardStep

__all__ = ["BrewFormValidator", "ALL_FIELDS"]

logger = logging.getLogger(__name__)

ALL_FIELDS: tuple[str, ...] = tuple(
    name for step in WizardStep for name in STEP_FIELDS[step]
)


class _FieldError(Exception):
    """Internal: one field failed; the message is user-facing."""


# ── Coercion helpers ──────────────────────────────────────────────────────────

def _to_number(value: Any) -> float | int:
    if isinstance(value, bool):
        raise _FieldError("Must be a number")
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            raise _FieldError("Must be a number") from None
    else:
        raise _FieldError("Must be a number")
    # "nan" / "inf" parse as floats but are not usable amounts
    if isinstance(number, float) and not math.isfinite(number):
        raise _FieldError("Must be a number")
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def _to_int(value: Any) -> int:
    number = _to_number(value)
    if not isinstance(number, int):
        raise _FieldError("Must be a whole number")
    return number


def _bounded(value: Any, low, high, too_low: str, too_high: str, integer: bool = False):
    number = _to_int(value) if integer else _to_number(value)
    if number < low:
        raise _FieldError(too_low)
    if number > high:
        raise _FieldError(too_high)
    return number


def _required_text(value: Any, message: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise _FieldError(message)
    return text


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise _FieldError("Must be text")
    return value.strip() or None


def _member(enum_cls, message: str) -> Callable[[Any], Any]:
    def check(value: Any):
        try:
            return enum_cls(value)
        except ValueError:
            raise _FieldError(message) from None
    return check


# ── Validator ─────────────────────────────────────────────────────────────────

class BrewFormValidator:
    """
    Validate BrewFormValues, whole or per step.

    Usage::
        result = BrewFormValidator().validate(values, fields=STEP_FIELDS[step])
        if not result.passed:
            show(result.errors)
    """

    def __init__(self) -> None:
        self._checks: dict[str, Callable[[Any], Any]] = {
            "coffee_producer":
                lambda v: _required_text(v, "Coffee producer is required"),
            "country_of_origin":
                lambda v: _required_text(v, "Country of origin is required"),
            "coffee_variety": _optional_text,
            "grind_coarseness":
                _member(GrindCoarseness, "Select a grind coarseness"),
            "grind_equipment":
                lambda v: _required_text(v, "Grind equipment is required"),
            "brewing_method":
                _member(BrewingMethod, "Select a brewing method"),
            "water_source":
                _member(WaterSource, "Select a water source"),
            "grams_of_coffee":
                lambda v: _bounded(v, 1, 1000, "Must be at least 1g", "Max 1000g"),
            "milliliters_of_water":
                lambda v: _bounded(v, 1, 10000, "Must be at least 1ml", "Max 10000ml"),
            "number_of_people":
                lambda v: _bounded(v, 1, 100, "At least 1 person", "Max 100 people",
                                   integer=True),
            "brew_minutes":
                lambda v: _bounded(v, 0, 60, "Minutes cannot be negative", "Max 60 minutes",
                                   integer=True),
            "brew_seconds":
                lambda v: _bounded(v, 0, 59, "Seconds cannot be negative", "Max 59 seconds",
                                   integer=True),
            "rating":
                lambda v: _bounded(v, 1, 5, "Please select a rating", "Max 5 stars",
                                   integer=True),
            "comment": _optional_text,
        }

    # ── Public API ────────────────────────────────────────────────────────────

    def validate(
        self,
        values: BrewFormValues,
        fields: Optional[Iterable[str]] = None,
    ) -> FormValidation:
        """
        Check *fields* (default: every field) of *values*.

        Unknown field names raise KeyError.
        """
        result = FormValidation()
        for name in (ALL_FIELDS if fields is None else tuple(fields)):
            result.checked.append(name)
            if name == "guest_ratings":
                self._validate_guests(values.guest_ratings, result)
                continue
            check = self._checks[name]
            try:
                result.cleaned[name] = check(getattr(values, name))
            except _FieldError as exc:
                result.errors[name] = str(exc)

        if not result.passed:
            logger.debug("Form validation failed: %s", result.errors)
        return result

    # ── Internal helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _validate_guests(guests: list[GuestRating], result: FormValidation) -> None:
        cleaned: list[GuestRating] = []
        failed = False
        for index, guest in enumerate(guests):
            try:
                rating = _bounded(guest.rating, 1, 5, "Guest rating must be 1–5",
                                  "Guest rating must be 1–5", integer=True)
            except _FieldError as exc:
                result.errors[f"guest_ratings.{index}.rating"] = str(exc)
                failed = True
                continue
            try:
                comment = _optional_text(guest.comment)
            except _FieldError as exc:
                result.errors[f"guest_ratings.{index}.comment"] = str(exc)
                failed = True
                continue
            cleaned.append(GuestRating(id=guest.id, rating=rating, comment=comment))
        if not failed:
            result.cleaned["guest_ratings"] = cleaned
