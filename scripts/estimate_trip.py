#!/usr/bin/env python3
"""
Estimate reimbursement totals for one group's trip.

Reads a YAML trip description, turns every entry into a tagged quantity,
runs the reimbursement engines and prints the totals.

Trip file layout (every section optional except attendees):

    trip_id: spring-conference
    attendees: 4
    registration: {amount: 50.00, unit: per person}
    transportation:
      mode: rental                 # none|airplane|train|bus|rental|charter|custom
      ticket: {amount: 120.00, unit: per person}
      ticket_direction: one_way    # one_way|round_trip
      fixed: {amount: 20.00, unit: per person}
      distance: 100                # miles
      cost_per_mile: 0.50
      distance_direction: round_trip
    lodging:
      rooms: 2
      cost_per_room_per_night: 75.00
      check_in: 2026-03-10
      check_out: 2026-03-13
      fees: {amount: 10.00, unit: per group}

Usage:
    python3 scripts/estimate_trip.py trip.yaml
    python3 scripts/estimate_trip.py trip.yaml --policy my_policy.yaml --json
"""

import argparse
import json
import logging
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any
from uuid import uuid4

import yaml

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from travel_config import get_active_policy  # noqa: E402
from travel_engines import (  # noqa: E402
    LodgingInput,
    TransportationInput,
    TransportationMode,
    TripInput,
    TripTotals,
    compute_trip_totals,
)
from travel_kernel.domain.entry import parse_entry  # noqa: E402
from travel_kernel.domain.values import (  # noqa: E402
    COST_UNITS,
    DateRange,
    Direction,
    TaggedQuantity,
    Unit,
    attendee_count,
)
from travel_kernel.exceptions import InputError, InvalidEntryError, PolicyError  # noqa: E402
from travel_kernel.logging_config import LogContext, configure_logging, get_logger  # noqa: E402

logger = get_logger("scripts.estimate_trip")

EXIT_OK = 0
EXIT_INVALID = 2


# ---------------------------------------------------------------------------
# Trip file parsing
# ---------------------------------------------------------------------------


class _TripLoader(yaml.SafeLoader):
    """SafeLoader that reads YAML floats as exact Decimals."""


def _construct_decimal(loader: yaml.SafeLoader, node: yaml.Node) -> Decimal | str:
    text = loader.construct_scalar(node)
    try:
        return Decimal(text)
    except InvalidOperation:
        # .inf / .nan -- left as text so entry parsing rejects it
        return text


_TripLoader.add_constructor("tag:yaml.org,2002:float", _construct_decimal)


def load_trip_file(path: Path) -> dict[str, Any]:
    with open(path) as f:
        data = yaml.load(f, Loader=_TripLoader) or {}
    if not isinstance(data, dict):
        raise InvalidEntryError(str(path), "trip", "trip file must contain a mapping")
    return data


def _line_item(
    data: Any,
    default_unit: Unit,
    allowed: tuple[Unit, ...],
    field: str,
) -> TaggedQuantity:
    """Parse ``50`` or ``{amount: 50, unit: per group}`` into a quantity."""
    if data is None:
        return TaggedQuantity.zero(default_unit)
    if isinstance(data, dict):
        raw_unit = data.get("unit", default_unit.value)
        try:
            unit = Unit(raw_unit)
        except ValueError:
            raise InvalidEntryError(str(raw_unit), field, "unknown unit") from None
        if unit not in allowed:
            raise InvalidEntryError(
                unit.value, field, f"unit must be one of {[u.value for u in allowed]}",
            )
        return parse_entry(data.get("amount", 0), unit)
    return parse_entry(data, default_unit)


def _direction(value: Any, field: str) -> Direction:
    if value is None:
        return Direction.ROUND_TRIP
    try:
        return Direction(value)
    except ValueError:
        raise InvalidEntryError(str(value), field, "expected one_way or round_trip") from None


def _date(value: Any, field: str) -> date | None:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidEntryError(str(value), field, "expected YYYY-MM-DD") from None


def _section(data: dict[str, Any], field: str) -> dict[str, Any]:
    section = data.get(field)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise InvalidEntryError(str(section), field, "expected a mapping of line items")
    return section


def parse_trip(data: dict[str, Any]) -> TripInput:
    """Build a TripInput from a parsed trip file.

    Raises:
        InputError: If any entry is missing, malformed or in the wrong unit.
    """
    if "attendees" not in data:
        raise InvalidEntryError("", Unit.PERSONS.value, "attendees is required")
    attendees = attendee_count(parse_entry(data["attendees"], Unit.PERSONS).value)

    transport = _section(data, "transportation")
    raw_mode = transport.get("mode", TransportationMode.NONE.value)
    try:
        mode = TransportationMode(raw_mode)
    except ValueError:
        raise InvalidEntryError(str(raw_mode), "transportation.mode", "unknown mode") from None

    lodging = _section(data, "lodging")

    return TripInput(
        attendees=attendees,
        registration=_line_item(
            data.get("registration"), Unit.COST_PER_PERSON, COST_UNITS, "registration",
        ),
        transportation=TransportationInput(
            mode=mode,
            ticket=_line_item(
                transport.get("ticket"), Unit.COST_PER_PERSON, COST_UNITS, "transportation.ticket",
            ),
            ticket_direction=_direction(
                transport.get("ticket_direction"), "transportation.ticket_direction",
            ),
            fixed=_line_item(
                transport.get("fixed"), Unit.COST_PER_PERSON, COST_UNITS, "transportation.fixed",
            ),
            distance=_line_item(
                transport.get("distance"), Unit.MILES, (Unit.MILES,), "transportation.distance",
            ),
            cost_per_mile=_line_item(
                transport.get("cost_per_mile"), Unit.COST_PER_MILE, (Unit.COST_PER_MILE,),
                "transportation.cost_per_mile",
            ),
            distance_direction=_direction(
                transport.get("distance_direction"), "transportation.distance_direction",
            ),
        ),
        lodging=LodgingInput(
            rooms=_line_item(lodging.get("rooms"), Unit.ROOMS, (Unit.ROOMS,), "lodging.rooms"),
            cost_per_room_per_night=_line_item(
                lodging.get("cost_per_room_per_night"), Unit.COST_PER_ROOM_PER_NIGHT,
                (Unit.COST_PER_ROOM_PER_NIGHT,), "lodging.cost_per_room_per_night",
            ),
            stay=DateRange(
                check_in=_date(lodging.get("check_in"), "lodging.check_in"),
                check_out=_date(lodging.get("check_out"), "lodging.check_out"),
            ),
            fees=_line_item(lodging.get("fees"), Unit.COST_PER_PERSON, COST_UNITS, "lodging.fees"),
        ),
    )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

_ROWS = (
    ("Number of attendees", "attendees"),
    ("Hotel nights", "nights"),
    ("Registration", "registration_total"),
    ("Transportation", "transportation_total"),
    ("Lodging", "lodging_total"),
    ("Travel reimbursement", "mileage_reimbursement"),
    ("Requested per person", "per_person_requested"),
    ("Out of pocket per person", "per_person_out_of_pocket"),
    ("Requested variable", "requested_variable"),
    ("Requested fixed", "requested_fixed"),
    ("Total requested expenses", "grand_total_requested"),
    ("Total out of pocket", "grand_total_out_of_pocket"),
    ("Total approved expenses", "grand_total_approved"),
)


def render_table(totals: TripTotals) -> str:
    display = totals.as_display()
    # counts carry their unit label, money rows are bare amounts
    display["attendees"] += f" {totals.attendees.unit.label}"
    display["nights"] += f" {totals.nights.unit.label}"
    width = max(len(label) for label, _ in _ROWS)
    lines = [f"{label:<{width}}  {display[key]:>14}" for label, key in _ROWS]
    lines.append(f"{'Policy':<{width}}  {totals.policy_id:>14}")
    return "\n".join(lines)


def render_json(totals: TripTotals) -> str:
    payload = {"policy_id": totals.policy_id, **totals.as_display()}
    return json.dumps(payload, indent=2, sort_keys=True)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Estimate travel reimbursement totals")
    parser.add_argument("trip", type=Path, help="YAML trip description")
    parser.add_argument("--policy", type=Path, default=None,
                        help="Reimbursement policy YAML (default: built-in policy file)")
    parser.add_argument("--json", action="store_true", help="Print totals as JSON")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Structured log level (logs go to stderr)")
    args = parser.parse_args(argv)

    configure_logging(level=getattr(logging, args.log_level))

    try:
        data = load_trip_file(args.trip)
        trip = parse_trip(data)
        policy = get_active_policy(args.policy)
    except (InputError, PolicyError) as e:
        print(f"error [{e.code}]: {e}", file=sys.stderr)
        return EXIT_INVALID
    except (FileNotFoundError, yaml.YAMLError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID

    trip_id = str(data.get("trip_id") or args.trip.stem)
    with LogContext.bind(correlation_id=str(uuid4()), trip_id=trip_id):
        totals = compute_trip_totals(trip=trip, policy=policy)

    print(render_json(totals) if args.json else render_table(totals))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
