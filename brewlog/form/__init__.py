"""Brew form — step-scoped validation and the four-step wizard."""

from .models import STEP_FIELDS, BrewFormValues, FormValidation, WizardStep
from .validator import BrewFormValidator
from .wizard import GRIND_EQUIPMENT_SUGGESTIONS, METHOD_DEFAULTS, BrewFormWizard

__all__ = [
    "BrewFormWizard",
    "BrewFormValidator",
    "BrewFormValues",
    "FormValidation",
    "WizardStep",
    "STEP_FIELDS",
    "METHOD_DEFAULTS",
    "GRIND_EQUIPMENT_SUGGESTIONS",
]
