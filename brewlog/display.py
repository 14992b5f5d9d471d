"""
Formatting helpers shared by the CLI and the GUI pages.

Public API
──────────
format_time             — 185 → "3:05"
format_brewing_method   — BrewingMethod → label
format_grind_coarseness — GrindCoarseness → label
format_water_source     — WaterSource → label
format_ratio            — record → "1:16.7" (water per gram of coffee)
format_date             — ISO string → "Mar 15, 2024" (optionally with time)
average_rating          — mean own rating, None for no records
summarize               — "3 sessions logged · avg 4.3★"
stars                   — 4 → "★★★★☆"
"""

from typing import Iterable, Optional, Union

from brewlog.store.models import (
    BrewingMethod,
    BrewRecord,
    GrindCoarseness,
    WaterSource,
    parse_timestamp,
)

__all__ = [
    "METHOD_LABELS",
    "GRIND_LABELS",
    "WATER_LABELS",
    "format_time",
    "format_brewing_method",
    "format_grind_coarseness",
    "format_water_source",
    "format_ratio",
    "format_date",
    "average_rating",
    "summarize",
    "plural",
    "stars",
]

METHOD_LABELS: dict[BrewingMethod, str] = {
    BrewingMethod.POUR_OVER:    "Pour Over",
    BrewingMethod.FRENCH_PRESS: "French Press",
    BrewingMethod.AEROPRESS:    "AeroPress",
    BrewingMethod.AEROPRESS_GO: "Aeropress Go",
    BrewingMethod.KALITA:       "Kalita Hand Brewer",
    BrewingMethod.SIEMENS_DRIP: "Siemens Coffee Brewer",
    BrewingMethod.ESPRESSO:     "Espresso",
    BrewingMethod.MOKA_POT:     "Moka Pot",
    BrewingMethod.COLD_BREW:    "Cold Brew",
    BrewingMethod.DRIP:         "Drip",
    BrewingMethod.OTHER:        "Other",
}

GRIND_LABELS: dict[GrindCoarseness, str] = {
    GrindCoarseness.EXTRA_FINE:    "Extra Fine",
    GrindCoarseness.FINE:          "Fine",
    GrindCoarseness.MEDIUM_FINE:   "Medium Fine",
    GrindCoarseness.MEDIUM:        "Medium",
    GrindCoarseness.MEDIUM_COARSE: "Medium Coarse",
    GrindCoarseness.COARSE:        "Coarse",
    GrindCoarseness.EXTRA_COARSE:  "Extra Coarse",
}

WATER_LABELS: dict[WaterSource, str] = {
    WaterSource.TAP:               "Tap",
    WaterSource.FILTERED_TAP:      "Filtered Tap",
    WaterSource.BOTTLED_STILL:     "Bottled Still",
    WaterSource.BOTTLED_SPARKLING: "Bottled Sparkling",
    WaterSource.SPRING:            "Spring",
    WaterSource.OTHER:             "Other",
}


def plural(count: int, word: str, suffix: str = "s") -> str:
    return f"{count} {word}{'' if count == 1 else suffix}"


def format_time(seconds: int) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def format_brewing_method(method: Union[BrewingMethod, str]) -> str:
    return METHOD_LABELS[BrewingMethod(method)]


def format_grind_coarseness(coarseness: Union[GrindCoarseness, str]) -> str:
    return GRIND_LABELS[GrindCoarseness(coarseness)]


def format_water_source(source: Union[WaterSource, str]) -> str:
    return WATER_LABELS[WaterSource(source)]


def format_ratio(record: BrewRecord) -> str:
    """Brew ratio as water per gram of coffee, one decimal: ``1:16.7``."""
    if not record.grams_of_coffee:
        return "1:–"
    return f"1:{record.milliliters_of_water / record.grams_of_coffee:.1f}"


def format_date(value: str, with_time: bool = False) -> str:
    """
    Render an ISO timestamp for display, in UTC.

    Unparsable input is returned unchanged.
    """
    try:
        dt = parse_timestamp(value)
    except ValueError:
        return value
    text = f"{dt:%b} {dt.day}, {dt.year}"
    if with_time:
        text += f" {dt:%H:%M}"
    return text


def average_rating(records: Iterable[BrewRecord]) -> Optional[float]:
    ratings = [r.rating for r in records]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


def summarize(records: list[BrewRecord]) -> str:
    """One-line header for the brew list; empty log → "No brews logged yet"."""
    if not records:
        return "No brews logged yet"
    avg = average_rating(records)
    return f"{plural(len(records), 'session')} logged · avg {avg:.1f}★"


def stars(rating: int, out_of: int = 5) -> str:
    """Render *rating* as filled / empty stars: 4 → ``★★★★☆``."""
    filled = max(0, min(out_of, int(rating)))
    return "★" * filled + "☆" * (out_of - filled)
