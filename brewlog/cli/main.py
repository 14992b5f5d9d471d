"""
CLI entry point for brewlog.

Usage
─────
  # Log a brew
  python -m brewlog add --producer "Blue Bottle" --country Ethiopia \\
      --grinder "Baratza Encore" --method pour-over --rating 4

  # List brews, newest first
  python -m brewlog list
  python -m brewlog list --search ethiopia

  # Show / edit / delete by id (a unique id prefix is enough)
  python -m brewlog show --id 3f2a
  python -m brewlog edit --id 3f2a --rating 5 --comment "Even better"
  python -m brewlog delete --id 3f2a

  # Dump every brew as a JSON array, or open the desktop app
  python -m brewlog export --output brews.json
  python -m brewlog gui

Subcommands are implemented as standalone functions (cmd_list, cmd_show,
cmd_add, cmd_edit, cmd_delete, cmd_export) so they can be unit-tested without
invoking argparse.
"""

import argparse
import json as _json
import logging
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from brewlog.display import (
    format_brewing_method,
    format_date,
    format_grind_coarseness,
    format_ratio,
    format_time,
    format_water_source,
    plural,
    stars,
    summarize,
)
from brewlog.exceptions import BrewlogBaseError, FormValidationError, RecordNotFoundError
from brewlog.form.wizard import BrewFormWizard
from brewlog.store.kv import DEFAULT_DB_PATH, KeyValueStore
from brewlog.store.models import (
    BrewingMethod,
    BrewRecord,
    GrindCoarseness,
    GuestRating,
    WaterSource,
)
from brewlog.store.records import RecordStore
from brewlog.store.view import BrewView

__all__ = [
    "build_parser",
    "cmd_list",
    "cmd_show",
    "cmd_add",
    "cmd_edit",
    "cmd_delete",
    "cmd_export",
    "cmd_gui",
    "main",
]

logger = logging.getLogger(__name__)

# argparse dest → BrewFormValues attribute
_FIELD_FLAGS: dict[str, str] = {
    "producer":     "coffee_producer",
    "country":      "country_of_origin",
    "variety":      "coffee_variety",
    "grind":        "grind_coarseness",
    "grinder":      "grind_equipment",
    "coffee":       "grams_of_coffee",
    "water":        "milliliters_of_water",
    "water_source": "water_source",
    "people":       "number_of_people",
    "minutes":      "brew_minutes",
    "seconds":      "brew_seconds",
    "rating":       "rating",
    "comment":      "comment",
}


# ── Argument parser ────────────────────────────────────────────────────────────


def _add_field_args(p: argparse.ArgumentParser) -> None:
    """Brew field flags shared by `add` and `edit`; all default to None."""
    p.add_argument("--producer", metavar="NAME", help="Coffee producer / roaster")
    p.add_argument("--country", metavar="NAME", help="Country of origin")
    p.add_argument("--variety", metavar="NAME", help="Coffee variety (optional)")
    p.add_argument(
        "--grind",
        choices=[g.value for g in GrindCoarseness],
        help="Grind coarseness",
    )
    p.add_argument("--grinder", metavar="NAME", help="Grind equipment")
    p.add_argument(
        "--method",
        choices=[m.value for m in BrewingMethod],
        help="Brewing method (pre-fills coffee/water for some methods)",
    )
    p.add_argument("--coffee", metavar="GRAMS", help="Coffee dose in grams (1–1000)")
    p.add_argument("--water", metavar="ML", help="Water in millilitres (1–10000)")
    p.add_argument(
        "--water-source",
        dest="water_source",
        choices=[w.value for w in WaterSource],
        help="Water source",
    )
    p.add_argument("--people", metavar="N", help="Number of people served (1–100)")
    p.add_argument("--minutes", metavar="M", help="Brew time, minutes part (0–60)")
    p.add_argument("--seconds", metavar="S", help="Brew time, seconds part (0–59)")
    p.add_argument("--rating", metavar="1-5", help="Your rating (1–5)")
    p.add_argument("--comment", metavar="TEXT", help="Tasting notes (optional)")
    p.add_argument(
        "--guest",
        action="append",
        default=None,
        metavar="RATING[:COMMENT]",
        help="Guest rating; repeat for several guests (replaces existing on edit)",
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: list | show | add | edit | delete | export | gui
    """
    parser = argparse.ArgumentParser(
        prog="brewlog",
        description="Personal coffee-brewing logbook",
    )
    parser.add_argument(
        "--db",
        default=DEFAULT_DB_PATH,
        metavar="PATH",
        help=f"SQLite database path (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── list ──────────────────────────────────────────────────────────────
    lst = sub.add_parser("list", help="List logged brews, newest first")
    lst.add_argument(
        "--search",
        default=None,
        metavar="TEXT",
        help="Filter by producer / origin / variety substring",
    )

    # ── show ──────────────────────────────────────────────────────────────
    show = sub.add_parser("show", help="Show one brew in detail")
    show.add_argument("--id", required=True, metavar="ID", help="Brew id or unique prefix")

    # ── add ───────────────────────────────────────────────────────────────
    add = sub.add_parser("add", help="Log a new brew")
    _add_field_args(add)

    # ── edit ──────────────────────────────────────────────────────────────
    edit = sub.add_parser("edit", help="Edit a logged brew")
    edit.add_argument("--id", required=True, metavar="ID", help="Brew id or unique prefix")
    _add_field_args(edit)

    # ── delete ────────────────────────────────────────────────────────────
    delete = sub.add_parser("delete", help="Delete a logged brew")
    delete.add_argument("--id", required=True, metavar="ID", help="Brew id or unique prefix")

    # ── export ────────────────────────────────────────────────────────────
    exp = sub.add_parser("export", help="Export every brew as a JSON array")
    exp.add_argument(
        "--output",
        default=None,
        metavar="FILE",
        help="Output file (default: ./brewlog-export.json)",
    )

    # ── gui ───────────────────────────────────────────────────────────────
    sub.add_parser("gui", help="Open the desktop application")

    return parser


# ── Helpers ───────────────────────────────────────────────────────────────────


def _parse_guest(spec: str) -> GuestRating:
    """Turn ``"4:Lovely cup"`` into a GuestRating (rating validated later)."""
    rating, _, comment = spec.partition(":")
    return GuestRating(id=str(uuid.uuid4()), rating=rating.strip(), comment=comment.strip() or None)


def _apply_fields(wizard: BrewFormWizard, fields: dict[str, Any]) -> None:
    """Copy the non-None CLI flags in *fields* onto the wizard's form values."""
    # Method first so explicit --coffee / --water win over method defaults
    if fields.get("method") is not None:
        wizard.set_brewing_method(fields["method"])
    for flag, attr in _FIELD_FLAGS.items():
        value = fields.get(flag)
        if value is not None:
            setattr(wizard.values, attr, value)
    if fields.get("guest") is not None:
        wizard.values.guest_ratings = [_parse_guest(g) for g in fields["guest"]]


def _resolve(view: BrewView, record_id: str) -> BrewRecord:
    """Find a brew by exact id or unique id prefix."""
    exact = view.find(record_id)
    if exact is not None:
        return exact
    matches = [r for r in view.entries if r.id.startswith(record_id)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise RecordNotFoundError(f"No brew with id {record_id!r}")
    raise RecordNotFoundError(
        f"Id prefix {record_id!r} is ambiguous ({len(matches)} brews match)"
    )


def _matches(record: BrewRecord, query: str) -> bool:
    q = query.lower()
    haystack = (record.coffee_producer, record.country_of_origin, record.coffee_variety or "")
    return any(q in text.lower() for text in haystack)


# ── Command implementations ───────────────────────────────────────────────────


def cmd_list(view: BrewView, search: Optional[str]) -> None:
    """Print the brew list, newest first, to stdout."""
    records = view.entries
    if search:
        records = [r for r in records if _matches(r, search)]
    print(summarize(records))
    for rec in records:
        print(
            f"[{rec.id[:8]}]  {format_date(rec.created_at):<13} "
            f"{rec.coffee_producer:<24} {rec.country_of_origin:<14} "
            f"{format_brewing_method(rec.brewing_method):<22} {stars(rec.rating)}"
        )


def cmd_show(view: BrewView, record_id: str) -> BrewRecord:
    """Print every field of one brew."""
    rec = _resolve(view, record_id)
    print(rec.coffee_producer)
    origin = rec.country_of_origin
    if rec.coffee_variety:
        origin += f" · {rec.coffee_variety}"
    print(origin)
    print(f"{stars(rec.rating)}  {format_brewing_method(rec.brewing_method)}")
    print(f"Logged      {format_date(rec.created_at, with_time=True)}")
    if rec.was_edited:
        print(f"Updated     {format_date(rec.updated_at)}")
    print(f"Grind       {format_grind_coarseness(rec.grind_coarseness)}")
    print(f"Grinder     {rec.grind_equipment}")
    print(f"Coffee      {rec.grams_of_coffee}g")
    print(f"Water       {rec.milliliters_of_water}ml ({format_water_source(rec.water_source)})")
    print(f"Ratio       {format_ratio(rec)}")
    print(f"Brew Time   {format_time(rec.brew_time_seconds)}")
    print(f"Served      {plural(rec.number_of_people, 'person')}")
    if rec.comment:
        print(f'Notes       "{rec.comment}"')
    if rec.guest_ratings:
        print(f"Guest Ratings ({len(rec.guest_ratings)})")
        for idx, guest in enumerate(rec.guest_ratings, start=1):
            line = f"  Guest {idx}  {stars(guest.rating)}"
            if guest.comment:
                line += f'  "{guest.comment}"'
            print(line)
    return rec


def cmd_add(view: BrewView, fields: dict[str, Any], now: Optional[datetime] = None) -> BrewRecord:
    """
    Validate *fields* through the brew form and log the new brew.

    Raises:
        FormValidationError: a field is missing or out of range.
    """
    wizard = BrewFormWizard()
    _apply_fields(wizard, fields)
    record = wizard.submit(now=now)
    view.add(record)
    print(f"Logged brew {record.id}")
    return record


def cmd_edit(
    view: BrewView,
    record_id: str,
    fields: dict[str, Any],
    now: Optional[datetime] = None,
) -> BrewRecord:
    """
    Apply *fields* to an existing brew and save it with a fresh updatedAt.

    Raises:
        RecordNotFoundError: no brew matches *record_id*.
        FormValidationError: the edited form is invalid.
    """
    wizard = BrewFormWizard(record=_resolve(view, record_id))
    _apply_fields(wizard, fields)
    record = wizard.submit(now=now)
    view.edit(record)
    print(f"Updated brew {record.id}")
    return record


def cmd_delete(view: BrewView, record_id: str) -> None:
    rec = _resolve(view, record_id)
    view.remove(rec.id)
    print(f"Deleted brew {rec.id} ({rec.coffee_producer})")


def cmd_export(view: BrewView, output: Optional[str]) -> Path:
    """Write every brew, newest first, as the stored JSON shape."""
    out_path = Path(output) if output else Path.cwd() / "brewlog-export.json"
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [rec.to_dict() for rec in view.entries]
    out_path.write_text(_json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Exported %d brews to %s", len(payload), out_path)
    print(f"Exported {plural(len(payload), 'brew')} → {out_path}")
    return out_path


def cmd_gui(kv: KeyValueStore) -> int:
    """Open the PyQt6 desktop app on *kv*; returns the Qt exit code."""
    from PyQt6.QtWidgets import QApplication

    from brewlog.gui.main_window import MainWindow

    app = QApplication.instance() or QApplication(sys.argv)
    win = MainWindow(kv)
    win.show()
    return app.exec()


# ── Entry point ───────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    if ns.subcommand is None:
        parser.print_help()
        return 0

    try:
        kv = KeyValueStore(db_path=ns.db)
        if ns.subcommand == "gui":
            return cmd_gui(kv)

        view = BrewView(RecordStore(kv))
        fields = vars(ns)

        if ns.subcommand == "list":
            cmd_list(view=view, search=ns.search)
        elif ns.subcommand == "show":
            cmd_show(view=view, record_id=ns.id)
        elif ns.subcommand == "add":
            cmd_add(view=view, fields=fields)
        elif ns.subcommand == "edit":
            cmd_edit(view=view, record_id=ns.id, fields=fields)
        elif ns.subcommand == "delete":
            cmd_delete(view=view, record_id=ns.id)
        elif ns.subcommand == "export":
            cmd_export(view=view, output=ns.output)
    except FormValidationError as exc:
        for name, message in exc.errors.items():
            print(f"Error: {name}: {message}", file=sys.stderr)
        return 1
    except BrewlogBaseError as exc:
        logger.debug("%s failed", ns.subcommand, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
