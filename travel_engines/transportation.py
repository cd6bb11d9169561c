"""
travel_engines.transportation -- Transportation cost composition.

Responsibility:
    Assemble the requested transportation total from the formula
    components the selected mode requires.  The mode table below is the
    single source of truth for which inputs are shown and summed.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Combines quantities only through travel_engines.operators.

Components:
    ticket    -- per-person fare, doubled for one-way entries, totaled
    fixed     -- flat fee (per person or per group), totaled
    variable  -- distance x cost per mile, doubled for one-way legs

    The mileage reimbursement (distance x policy mileage rate, with the
    same direction applied) is always computed.  It joins the requested
    total only when the policy includes it.

Invariants enforced:
    - Inputs of inactive components are ignored and contribute zero.
    - fixed + variable == total.
    - per_person is the group total divided once by the attendee count.

Failure modes:
    - UnitMismatchError if an input carries a unit its component does not
      accept (e.g. a ticket entered in miles).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from travel_engines.operators import UnitOperators, sum_quantities
from travel_engines.policy import DEFAULT_POLICY, ReimbursementPolicy
from travel_engines.tracer import traced_engine
from travel_kernel.domain.values import Direction, TaggedQuantity, Unit
from travel_kernel.logging_config import get_logger

logger = get_logger("engines.transportation")


class TransportationMode(str, Enum):
    """Mode of transportation selected for the group."""

    NONE = "none"
    AIRPLANE = "airplane"
    TRAIN = "train"
    BUS = "bus"
    RENTAL = "rental"
    CHARTER = "charter"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return TRANSPORTATION_LABELS[self]

    @property
    def components(self) -> tuple[TransportationFormula, ...]:
        return TRANSPORTATION_SPEC[self]


class TransportationFormula(str, Enum):
    """Cost component a transportation mode may require."""

    TICKET = "ticket"
    FIXED = "fixed"
    VARIABLE = "variable"


TRANSPORTATION_SPEC: dict[TransportationMode, tuple[TransportationFormula, ...]] = {
    TransportationMode.AIRPLANE: (TransportationFormula.TICKET,),
    TransportationMode.TRAIN: (TransportationFormula.TICKET,),
    TransportationMode.BUS: (TransportationFormula.TICKET,),
    TransportationMode.RENTAL: (TransportationFormula.VARIABLE, TransportationFormula.FIXED),
    TransportationMode.CHARTER: (TransportationFormula.FIXED,),
    TransportationMode.CUSTOM: (
        TransportationFormula.FIXED,
        TransportationFormula.VARIABLE,
        TransportationFormula.TICKET,
    ),
    TransportationMode.NONE: (),
}

TRANSPORTATION_LABELS: dict[TransportationMode, str] = {
    TransportationMode.NONE: "N/A",
    TransportationMode.AIRPLANE: "Airplane",
    TransportationMode.TRAIN: "Train",
    TransportationMode.BUS: "Bus",
    TransportationMode.RENTAL: "Rental vehicle",
    TransportationMode.CHARTER: "Charter bus",
    TransportationMode.CUSTOM: "Other",
}


@dataclass(frozen=True)
class TransportationInput:
    """Raw transportation line items for one group."""

    mode: TransportationMode = TransportationMode.NONE
    ticket: TaggedQuantity = TaggedQuantity.zero(Unit.COST_PER_PERSON)
    ticket_direction: Direction = Direction.ROUND_TRIP
    fixed: TaggedQuantity = TaggedQuantity.zero(Unit.COST_PER_PERSON)
    distance: TaggedQuantity = TaggedQuantity.zero(Unit.MILES)
    cost_per_mile: TaggedQuantity = TaggedQuantity.zero(Unit.COST_PER_MILE)
    distance_direction: Direction = Direction.ROUND_TRIP

    def uses(self, formula: TransportationFormula) -> bool:
        return formula in TRANSPORTATION_SPEC[self.mode]


@dataclass(frozen=True)
class TransportationCost:
    """Composed transportation figures; all group amounts are CostPerGroup."""

    mode: TransportationMode
    ticket: TaggedQuantity
    fixed: TaggedQuantity
    variable: TaggedQuantity
    mileage_reimbursement: TaggedQuantity
    mileage_reimbursement_included: bool
    total: TaggedQuantity
    per_person: TaggedQuantity
    requested_variable: TaggedQuantity
    requested_fixed: TaggedQuantity


@traced_engine("transportation", "1.0", fingerprint_fields=("transportation",))
def compose_transportation(
    *,
    transportation: TransportationInput,
    operators: UnitOperators,
    policy: ReimbursementPolicy = DEFAULT_POLICY,
) -> TransportationCost:
    """Compose the requested transportation total for the active mode."""
    ops = operators
    zero_group = TaggedQuantity.zero(Unit.COST_PER_GROUP)

    ticket = fixed = variable = reimbursement = zero_group

    if transportation.uses(TransportationFormula.TICKET):
        fare = ops.ways(transportation.ticket, transportation.ticket_direction)
        ticket = ops.total(fare)

    if transportation.uses(TransportationFormula.FIXED):
        fixed = ops.total(transportation.fixed)

    include_reimbursement = False
    if transportation.uses(TransportationFormula.VARIABLE):
        variable = ops.ways(
            ops.times(transportation.distance, transportation.cost_per_mile),
            transportation.distance_direction,
        )
        reimbursement = ops.ways(
            ops.times(transportation.distance, policy.mileage_rate_quantity),
            transportation.distance_direction,
        )
        include_reimbursement = policy.include_mileage_reimbursement

    requested_variable = variable + (reimbursement if include_reimbursement else zero_group)
    total = sum_quantities(Unit.COST_PER_GROUP, ticket, fixed, requested_variable)
    per_person = ops.per_person(total)

    logger.debug("transportation_composed", extra={
        "mode": transportation.mode.value,
        "components": [f.value for f in TRANSPORTATION_SPEC[transportation.mode]],
        "total": str(total.value),
        "mileage_reimbursement": str(reimbursement.value),
        "mileage_reimbursement_included": include_reimbursement,
    })

    return TransportationCost(
        mode=transportation.mode,
        ticket=ticket,
        fixed=fixed,
        variable=variable,
        mileage_reimbursement=reimbursement,
        mileage_reimbursement_included=include_reimbursement,
        total=total,
        per_person=per_person,
        requested_variable=requested_variable,
        requested_fixed=total - requested_variable,
    )
