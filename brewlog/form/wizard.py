"""
BrewFormWizard — four-step linear state machine for logging or editing a brew.

    COFFEE → BREWING → RATING → GUESTS → submit()

next() validates only the fields of the current step and advances when they
are clean.  submit() validates everything and returns a ready-to-store
BrewRecord: a new record gets a uuid4 id and createdAt == updatedAt == now,
an edited record keeps its id and createdAt and gets a fresh updatedAt.

No Qt imports here; the form page and the CLI both drive this class.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional, Union

from brewlog.exceptions import FormValidationError
from brewlog.store.models import (
    BrewingMethod,
    BrewRecord,
    GuestRating,
    now_iso,
    parse_timestamp,
)

from .models import STEP_FIELDS, BrewFormValues, FormValidation, WizardStep
from .validator import BrewFormValidator

__all__ = [
    "BrewFormWizard",
    "METHOD_DEFAULTS",
    "GRIND_EQUIPMENT_SUGGESTIONS",
    "NEW_GUEST_RATING",
]

logger = logging.getLogger(__name__)

# Dose / water pre-filled when the user switches to one of these methods
METHOD_DEFAULTS: dict[BrewingMethod, tuple[int, int]] = {
    BrewingMethod.POUR_OVER:    (30, 500),
    BrewingMethod.KALITA:       (30, 500),
    BrewingMethod.AEROPRESS:    (14, 200),
    BrewingMethod.AEROPRESS_GO: (14, 200),
}

GRIND_EQUIPMENT_SUGGESTIONS = ["Knock Aergrind", "Wilfa Svart"]

NEW_GUEST_RATING = 3

_STEPS = list(WizardStep)


def _step_of(field_name: str) -> WizardStep:
    base = field_name.split(".", 1)[0]
    for step, names in STEP_FIELDS.items():
        if base in names:
            return step
    raise KeyError(field_name)


class BrewFormWizard:
    """
    Drives the brew form across its four steps.

    Attributes
    ──────────
    record — the record being edited, or None for a new brew
    values — BrewFormValues being filled in
    step   — current WizardStep
    errors — field → message from the most recent next()/submit()
    """

    def __init__(
        self,
        record: Optional[BrewRecord] = None,
        validator: Optional[BrewFormValidator] = None,
    ) -> None:
        self.record = record
        self.values = BrewFormValues.from_record(record) if record else BrewFormValues()
        self.step = WizardStep.COFFEE
        self.errors: dict[str, str] = {}
        self._validator = validator or BrewFormValidator()
        # A stored record already passed every step
        self._reached: set[WizardStep] = set(_STEPS) if record else {WizardStep.COFFEE}

    # ── Navigation ────────────────────────────────────────────────────────

    @property
    def is_editing(self) -> bool:
        return self.record is not None

    @property
    def index(self) -> int:
        return _STEPS.index(self.step)

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == len(_STEPS) - 1

    def validate_step(self, step: Optional[WizardStep] = None) -> FormValidation:
        """Validate the fields of *step* (default: current step) without moving."""
        return self._validator.validate(self.values, STEP_FIELDS[step or self.step])

    def next(self) -> FormValidation:
        """Validate the current step and advance if it is clean."""
        result = self.validate_step()
        self.errors = dict(result.errors)
        if result.passed and not self.is_last:
            self.step = _STEPS[self.index + 1]
            self._reached.add(self.step)
            logger.debug("Wizard advanced to %s", self.step.value)
        return result

    def back(self) -> None:
        """Return to the previous step; a no-op on the first step."""
        if not self.is_first:
            self.step = _STEPS[self.index - 1]
            self.errors = {}

    def go_to(self, step: WizardStep) -> None:
        """
        Jump to *step*.

        Raises:
            ValueError: *step* lies ahead and has not been reached via next().
        """
        step = WizardStep(step)
        if step not in self._reached:
            raise ValueError(f"Step {step.value!r} has not been reached yet")
        self.step = step
        self.errors = {}

    # ── Field helpers ─────────────────────────────────────────────────────

    def set_brewing_method(self, method: Union[BrewingMethod, str]) -> None:
        """Set the method; a change of method pre-fills dose and water."""
        method = BrewingMethod(method)
        changed = method != self.values.brewing_method
        self.values.brewing_method = method
        if changed and method in METHOD_DEFAULTS:
            grams, ml = METHOD_DEFAULTS[method]
            self.values.grams_of_coffee = grams
            self.values.milliliters_of_water = ml

    def add_guest(self) -> GuestRating:
        guest = GuestRating(id=str(uuid.uuid4()), rating=NEW_GUEST_RATING, comment="")
        self.values.guest_ratings.append(guest)
        return guest

    def remove_guest(self, index: int) -> None:
        del self.values.guest_ratings[index]

    # ── Submission ────────────────────────────────────────────────────────

    def submit(self, now: Optional[datetime] = None) -> BrewRecord:
        """
        Validate every field and build the BrewRecord.

        Raises:
            FormValidationError: at least one field is invalid.  The wizard
                moves to the first step holding an error.
        """
        result = self._validator.validate(self.values)
        self.errors = dict(result.errors)
        if not result.passed:
            self.step = min((_step_of(name) for name in result.errors), key=_STEPS.index)
            raise FormValidationError(result.errors)

        c = result.cleaned
        timestamp = now_iso(now)
        if self.record is None:
            record_id, created_at = str(uuid.uuid4()), timestamp
        else:
            record_id, created_at = self.record.id, self.record.created_at
            # updatedAt never precedes createdAt, even with a skewed clock
            if parse_timestamp(timestamp) < self.record.created_instant:
                timestamp = created_at

        record = BrewRecord(
            id=record_id,
            created_at=created_at,
            updated_at=timestamp,
            coffee_producer=c["coffee_producer"],
            country_of_origin=c["country_of_origin"],
            coffee_variety=c["coffee_variety"],
            grind_coarseness=c["grind_coarseness"],
            grind_equipment=c["grind_equipment"],
            brewing_method=c["brewing_method"],
            grams_of_coffee=c["grams_of_coffee"],
            milliliters_of_water=c["milliliters_of_water"],
            water_source=c["water_source"],
            number_of_people=c["number_of_people"],
            brew_time_seconds=c["brew_minutes"] * 60 + c["brew_seconds"],
            rating=c["rating"],
            comment=c["comment"],
            guest_ratings=c["guest_ratings"],
        )
        logger.debug("Wizard built %s", record)
        return record
