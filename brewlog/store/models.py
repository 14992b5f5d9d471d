"""Data models for the store module."""

import math
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from brewlog.exceptions import RecordDecodeError

__all__ = [
    "GrindCoarseness",
    "BrewingMethod",
    "WaterSource",
    "GuestRating",
    "BrewRecord",
    "now_iso",
    "parse_timestamp",
]


# ── Enumerations ──────────────────────────────────────────────────────────────

class GrindCoarseness(str, Enum):
    EXTRA_FINE    = "extra-fine"
    FINE          = "fine"
    MEDIUM_FINE   = "medium-fine"
    MEDIUM        = "medium"
    MEDIUM_COARSE = "medium-coarse"
    COARSE        = "coarse"
    EXTRA_COARSE  = "extra-coarse"


class BrewingMethod(str, Enum):
    POUR_OVER    = "pour-over"
    FRENCH_PRESS = "french-press"
    AEROPRESS    = "aeropress"
    AEROPRESS_GO = "aeropress-go"
    KALITA       = "kalita"
    SIEMENS_DRIP = "siemens-drip"
    ESPRESSO     = "espresso"
    MOKA_POT     = "moka-pot"
    COLD_BREW    = "cold-brew"
    DRIP         = "drip"
    OTHER        = "other"


class WaterSource(str, Enum):
    TAP               = "tap"
    FILTERED_TAP      = "filtered-tap"
    BOTTLED_STILL     = "bottled-still"
    BOTTLED_SPARKLING = "bottled-sparkling"
    SPRING            = "spring"
    OTHER             = "other"


# ── Timestamps ────────────────────────────────────────────────────────────────

def now_iso(now: Optional[datetime] = None) -> str:
    """
    Return *now* (default: current UTC time) as ``2024-03-15T10:00:00.000Z``.

    Naive datetimes are taken to be UTC.
    """
    if now is None:
        now = datetime.now(tz=timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


_FRACTION_RE = re.compile(r"(?<=\d\d:\d\d:\d\d)\.(\d+)")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 string into an aware UTC datetime.

    Raises:
        ValueError: *value* is not an ISO-8601 timestamp.
    """
    text = value.strip().replace("Z", "+00:00")
    # fromisoformat (before 3.11) only takes 3 or 6 fractional digits
    text = _FRACTION_RE.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# ── Shape checks used by from_dict ────────────────────────────────────────────

def _require(data: dict, key: str) -> Any:
    if key not in data:
        raise RecordDecodeError(f"missing field {key!r}")
    return data[key]


def _str(data: dict, key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str):
        raise RecordDecodeError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


def _opt_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise RecordDecodeError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


def _number(data: dict, key: str) -> float:
    value = _require(data, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecordDecodeError(f"field {key!r} must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise RecordDecodeError(f"field {key!r} must be a finite number")
    return int(value) if isinstance(value, float) and value.is_integer() else value


def _int(data: dict, key: str) -> int:
    value = _number(data, key)
    if not isinstance(value, int):
        raise RecordDecodeError(f"field {key!r} must be an integer")
    return value


def _enum(data: dict, key: str, enum_cls):
    value = _str(data, key)
    try:
        return enum_cls(value)
    except ValueError:
        raise RecordDecodeError(f"field {key!r} has unknown value {value!r}") from None


def _timestamp(data: dict, key: str) -> str:
    value = _str(data, key)
    try:
        parse_timestamp(value)
    except ValueError:
        raise RecordDecodeError(f"field {key!r} is not an ISO-8601 timestamp: {value!r}") from None
    return value


# ── Records ───────────────────────────────────────────────────────────────────

@dataclass
class GuestRating:
    """One guest's verdict on a brew (rating 1–5, optional comment)."""
    id:      str
    rating:  int
    comment: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"id": self.id, "rating": self.rating}
        if self.comment is not None:
            data["comment"] = self.comment
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "GuestRating":
        if not isinstance(data, dict):
            raise RecordDecodeError("guest rating must be an object")
        return cls(
            id=_str(data, "id"),
            rating=_int(data, "rating"),
            comment=_opt_str(data, "comment"),
        )


@dataclass
class BrewRecord:
    """
    One logged brew session.

    Fields
    ──────
    id                   — opaque unique id (uuid4 string), immutable
    created_at           — ISO-8601 creation time, immutable
    updated_at           — ISO-8601 time of the last edit
    coffee_producer      — roaster / producer name
    country_of_origin    — bean origin
    grind_coarseness     — GrindCoarseness
    grind_equipment      — grinder used
    brewing_method       — BrewingMethod
    grams_of_coffee      — dose in grams (1–1000)
    milliliters_of_water — water in ml (1–10000)
    water_source         — WaterSource
    number_of_people     — people served (1–100)
    brew_time_seconds    — total brew time, flattened from minutes + seconds
    rating               — own rating 1–5
    coffee_variety       — optional varietal
    comment              — optional tasting notes
    guest_ratings        — ordered GuestRating list
    """
    id:                   str
    created_at:           str
    updated_at:           str
    coffee_producer:      str
    country_of_origin:    str
    grind_coarseness:     GrindCoarseness
    grind_equipment:      str
    brewing_method:       BrewingMethod
    grams_of_coffee:      float
    milliliters_of_water: float
    water_source:         WaterSource
    number_of_people:     int
    brew_time_seconds:    int
    rating:               int
    coffee_variety:       Optional[str]     = None
    comment:              Optional[str]     = None
    guest_ratings:        list[GuestRating] = field(default_factory=list)

    @property
    def created_instant(self) -> datetime:
        """created_at as an aware UTC datetime (the view's sort key)."""
        return parse_timestamp(self.created_at)

    @property
    def was_edited(self) -> bool:
        return self.updated_at != self.created_at

    def touched(self, now: Optional[datetime] = None) -> "BrewRecord":
        """Return a copy whose updated_at is refreshed to *now*."""
        return replace(self, updated_at=now_iso(now))

    # ── JSON shape ────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """Serialise to the camelCase JSON object stored in the blob."""
        data: dict[str, Any] = {
            "id":                 self.id,
            "createdAt":          self.created_at,
            "updatedAt":          self.updated_at,
            "coffeeProducer":     self.coffee_producer,
            "countryOfOrigin":    self.country_of_origin,
            "grindCoarseness":    self.grind_coarseness.value,
            "grindEquipment":     self.grind_equipment,
            "brewingMethod":      self.brewing_method.value,
            "gramsOfCoffee":      self.grams_of_coffee,
            "millilitersOfWater": self.milliliters_of_water,
            "waterSource":        self.water_source.value,
            "numberOfPeople":     self.number_of_people,
            "brewTimeSeconds":    self.brew_time_seconds,
            "rating":             self.rating,
            "guestRatings":       [g.to_dict() for g in self.guest_ratings],
        }
        if self.coffee_variety is not None:
            data["coffeeVariety"] = self.coffee_variety
        if self.comment is not None:
            data["comment"] = self.comment
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "BrewRecord":
        """
        Build a BrewRecord from a decoded JSON object.

        Checks types and enum membership only; value ranges belong to the
        form layer.

        Raises:
            RecordDecodeError: *data* does not have the record shape.
        """
        if not isinstance(data, dict):
            raise RecordDecodeError(f"record must be an object, got {type(data).__name__}")

        guests = data.get("guestRatings", [])
        if not isinstance(guests, list):
            raise RecordDecodeError("field 'guestRatings' must be a list")

        record_id = _str(data, "id")
        if not record_id:
            raise RecordDecodeError("field 'id' must not be empty")

        return cls(
            id=record_id,
            created_at=_timestamp(data, "createdAt"),
            updated_at=_timestamp(data, "updatedAt"),
            coffee_producer=_str(data, "coffeeProducer"),
            country_of_origin=_str(data, "countryOfOrigin"),
            grind_coarseness=_enum(data, "grindCoarseness", GrindCoarseness),
            grind_equipment=_str(data, "grindEquipment"),
            brewing_method=_enum(data, "brewingMethod", BrewingMethod),
            grams_of_coffee=_number(data, "gramsOfCoffee"),
            milliliters_of_water=_number(data, "millilitersOfWater"),
            water_source=_enum(data, "waterSource", WaterSource),
            number_of_people=_int(data, "numberOfPeople"),
            brew_time_seconds=_int(data, "brewTimeSeconds"),
            rating=_int(data, "rating"),
            coffee_variety=_opt_str(data, "coffeeVariety"),
            comment=_opt_str(data, "comment"),
            guest_ratings=[GuestRating.from_dict(g) for g in guests],
        )

    def __str__(self) -> str:
        return (
            f"BrewRecord(id={self.id!r}, producer={self.coffee_producer!r}, "
            f"method={self.brewing_method.value}, rating={self.rating})"
        )
