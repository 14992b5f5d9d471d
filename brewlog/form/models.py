"""Data models for the form module."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from brewlog.store.models import (
    BrewingMethod,
    BrewRecord,
    GrindCoarseness,
    GuestRating,
    WaterSource,
)

__all__ = ["WizardStep", "STEP_FIELDS", "BrewFormValues", "FormValidation"]


class WizardStep(str, Enum):
    COFFEE  = "coffee"
    BREWING = "brewing"
    RATING  = "rating"
    GUESTS  = "guests"


# Fields validated when leaving each step, in display order
STEP_FIELDS: dict[WizardStep, tuple[str, ...]] = {
    WizardStep.COFFEE: (
        "coffee_producer",
        "country_of_origin",
        "coffee_variety",
        "grind_coarseness",
        "grind_equipment",
    ),
    WizardStep.BREWING: (
        "brewing_method",
        "water_source",
        "grams_of_coffee",
        "milliliters_of_water",
        "number_of_people",
        "brew_minutes",
        "brew_seconds",
    ),
    WizardStep.RATING: (
        "rating",
        "comment",
    ),
    WizardStep.GUESTS: (
        "guest_ratings",
    ),
}

# Numeric inputs arrive from text widgets and CLI flags as strings
Number = Union[int, float, str]


@dataclass
class BrewFormValues:
    """
    Raw, not-yet-validated form input.

    Defaults are those of a fresh "Log a Brew" form; rating 0 means
    "not chosen yet" and fails validation.
    """
    coffee_producer:      str                          = ""
    country_of_origin:    str                          = ""
    coffee_variety:       str                          = ""
    grind_coarseness:     Union[GrindCoarseness, str]  = GrindCoarseness.MEDIUM
    grind_equipment:      str                          = ""
    brewing_method:       Union[BrewingMethod, str]    = BrewingMethod.POUR_OVER
    grams_of_coffee:      Number                       = 30
    milliliters_of_water: Number                       = 500
    water_source:         Union[WaterSource, str]      = WaterSource.FILTERED_TAP
    number_of_people:     Number                       = 1
    brew_minutes:         Number                       = 3
    brew_seconds:         Number                       = 0
    rating:               Number                       = 0
    comment:              str                          = ""
    guest_ratings:        list[GuestRating]            = field(default_factory=list)

    @classmethod
    def from_record(cls, record: BrewRecord) -> "BrewFormValues":
        """Pre-fill the form for editing *record*."""
        return cls(
            coffee_producer=record.coffee_producer,
            country_of_origin=record.country_of_origin,
            coffee_variety=record.coffee_variety or "",
            grind_coarseness=record.grind_coarseness,
            grind_equipment=record.grind_equipment,
            brewing_method=record.brewing_method,
            grams_of_coffee=record.grams_of_coffee,
            milliliters_of_water=record.milliliters_of_water,
            water_source=record.water_source,
            number_of_people=record.number_of_people,
            brew_minutes=record.brew_time_seconds // 60,
            brew_seconds=record.brew_time_seconds % 60,
            rating=record.rating,
            comment=record.comment or "",
            guest_ratings=[
                GuestRating(id=g.id, rating=g.rating, comment=g.comment)
                for g in record.guest_ratings
            ],
        )


@dataclass
class FormValidation:
    """
    Result of BrewFormValidator.validate().

    errors  — field name → user-facing message (guest fields use
              "guest_ratings.<index>.rating")
    cleaned — field name → coerced value, for every field that passed
    checked — field names examined, in order
    """
    errors:  dict[str, str] = field(default_factory=dict)
    cleaned: dict[str, Any] = field(default_factory=dict)
    checked: list[str]      = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    def __str__(self) -> str:
        if self.passed:
            return f"FormValidation(passed, {len(self.checked)} fields)"
        return f"FormValidation(failed: {', '.join(self.errors)})"
