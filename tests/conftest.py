"""
Pytest fixtures for the travel reimbursement test suite.

Provides:
- Structured logging configuration and log capture
- Attendee counts, unit operators and common line items
- The reference four-person rental-car trip
"""

import json
import logging
from datetime import date
from io import StringIO

import pytest

from travel_engines.aggregation import TripInput
from travel_engines.lodging import LodgingInput
from travel_engines.operators import UnitOperators
from travel_engines.transportation import TransportationInput, TransportationMode
from travel_kernel.domain.values import DateRange, Direction, TaggedQuantity, Unit, attendee_count
from travel_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture travel_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compute_trip_totals(trip=trip)
            logs = captured_logs()
            assert any(r["message"] == "trip_totals_computed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("travel_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Quantity helpers
# =============================================================================


def q(value: str | int, unit: Unit) -> TaggedQuantity:
    """Shorthand for TaggedQuantity.of."""
    return TaggedQuantity.of(value, unit)


@pytest.fixture
def four_attendees() -> TaggedQuantity:
    return attendee_count(4)


@pytest.fixture
def ops(four_attendees) -> UnitOperators:
    return UnitOperators(four_attendees)


@pytest.fixture
def zero_ops() -> UnitOperators:
    return UnitOperators(attendee_count(0))


def rental_trip(fee: str = "10.00") -> TripInput:
    """Four attendees, registration, a rental car and two rooms for three nights."""
    return TripInput(
        attendees=attendee_count(4),
        registration=q("50.00", Unit.COST_PER_PERSON),
        transportation=TransportationInput(
            mode=TransportationMode.RENTAL,
            fixed=q("20.00", Unit.COST_PER_PERSON),
            distance=q("100", Unit.MILES),
            cost_per_mile=q("0.50", Unit.COST_PER_MILE),
            distance_direction=Direction.ROUND_TRIP,
        ),
        lodging=LodgingInput(
            rooms=q(2, Unit.ROOMS),
            cost_per_room_per_night=q("75.00", Unit.COST_PER_ROOM_PER_NIGHT),
            stay=DateRange(check_in=date(2026, 3, 10), check_out=date(2026, 3, 13)),
            fees=q(fee, Unit.COST_PER_GROUP),
        ),
    )


@pytest.fixture
def rental_trip_input() -> TripInput:
    return rental_trip()
