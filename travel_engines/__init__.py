"""
Module: travel_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    front ends and scripts.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import travel_kernel (domain values, exceptions, logging).
    MUST NOT import travel_config; policies are passed in explicitly.

Invariants enforced:
    - Decimal-only arithmetic: floats are rejected at every boundary.
    - Determinism: identical inputs always produce identical outputs.
    - Unit safety: quantities combine only through UnitOperators.

Usage:
    from travel_engines import TripInput, compute_trip_totals
    from travel_engines import TransportationInput, TransportationMode
    from travel_engines import LodgingInput, UnitOperators
"""

from travel_kernel.logging_config import get_logger

logger = get_logger("engines")

from travel_engines.aggregation import TripInput, TripTotals, compute_trip_totals
from travel_engines.lodging import LodgingCost, LodgingInput, compose_lodging
from travel_engines.nights import count_nights, nights_for
from travel_engines.operators import UnitOperators, sum_quantities
from travel_engines.out_of_pocket import (
    DEFAULT_SCHEDULE,
    ROUNDING_MODES,
    OutOfPocketSchedule,
    OutOfPocketTier,
    out_of_pocket,
    per_person_out_of_pocket,
)
from travel_engines.policy import (
    DEFAULT_POLICY,
    MILEAGE_REIMBURSEMENT_RATE,
    ReimbursementPolicy,
)
from travel_engines.registration import RegistrationCost, compose_registration
from travel_engines.tracer import traced_engine
from travel_engines.transportation import (
    TRANSPORTATION_LABELS,
    TRANSPORTATION_SPEC,
    TransportationCost,
    TransportationFormula,
    TransportationInput,
    TransportationMode,
    compose_transportation,
)

__all__ = [
    "DEFAULT_POLICY",
    "DEFAULT_SCHEDULE",
    "MILEAGE_REIMBURSEMENT_RATE",
    "ROUNDING_MODES",
    "TRANSPORTATION_LABELS",
    "TRANSPORTATION_SPEC",
    "LodgingCost",
    "LodgingInput",
    "OutOfPocketSchedule",
    "OutOfPocketTier",
    "RegistrationCost",
    "ReimbursementPolicy",
    "TransportationCost",
    "TransportationFormula",
    "TransportationInput",
    "TransportationMode",
    "TripInput",
    "TripTotals",
    "UnitOperators",
    "compose_lodging",
    "compose_registration",
    "compose_transportation",
    "compute_trip_totals",
    "count_nights",
    "nights_for",
    "out_of_pocket",
    "per_person_out_of_pocket",
    "sum_quantities",
    "traced_engine",
]
