"""
travel_engines.aggregation -- Trip totals pipeline.

Responsibility:
    Combine registration, transportation and lodging into the grand
    totals a presentation layer renders: requested, out-of-pocket and
    approved amounts, per person and for the whole group, plus the
    fixed/variable split.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Top of the engine stack; consumed by scripts and any front end.

Invariants enforced:
    - Everything is recomputed from the inputs on every call; nothing is
      cached or partially updated.
    - grand_total_approved == grand_total_requested - grand_total_out_of_pocket
    - requested_fixed + requested_variable == grand_total_requested
    - grand_total_out_of_pocket == rounded per-person out-of-pocket x attendees
    - per_person_requested is grand_total_requested divided once by the
      attendee count, so an exact share stays exact at a tier bound.

Failure modes:
    - UnitMismatchError propagates from the operators if an input carries
      a unit its line item does not accept.

Usage:
    from travel_engines.aggregation import TripInput, compute_trip_totals
    from travel_kernel.domain.values import TaggedQuantity, Unit, attendee_count

    totals = compute_trip_totals(trip=TripInput(
        attendees=attendee_count(4),
        registration=TaggedQuantity.of("50.00", Unit.COST_PER_PERSON),
    ))
    totals.as_display()["grand_total_requested"]   # '200.00'
"""

from __future__ import annotations

from dataclasses import dataclass

from travel_engines.lodging import LodgingCost, LodgingInput, compose_lodging
from travel_engines.operators import UnitOperators, sum_quantities
from travel_engines.out_of_pocket import per_person_out_of_pocket
from travel_engines.policy import DEFAULT_POLICY, ReimbursementPolicy
from travel_engines.registration import RegistrationCost, compose_registration
from travel_engines.tracer import traced_engine
from travel_engines.transportation import (
    TransportationCost,
    TransportationInput,
    compose_transportation,
)
from travel_kernel.domain.entry import format_amount, format_quantity
from travel_kernel.domain.values import TaggedQuantity, Unit
from travel_kernel.logging_config import get_logger

logger = get_logger("engines.aggregation")


@dataclass(frozen=True)
class TripInput:
    """Every line item for one group's trip."""

    attendees: TaggedQuantity = TaggedQuantity.zero(Unit.PERSONS)
    registration: TaggedQuantity = TaggedQuantity.zero(Unit.COST_PER_PERSON)
    transportation: TransportationInput = TransportationInput()
    lodging: LodgingInput = LodgingInput()


@dataclass(frozen=True)
class TripTotals:
    """Computed view over a TripInput. Group amounts are CostPerGroup."""

    attendees: TaggedQuantity
    registration: RegistrationCost
    transportation: TransportationCost
    lodging: LodgingCost
    nights: TaggedQuantity
    per_person_requested: TaggedQuantity
    per_person_out_of_pocket: TaggedQuantity
    grand_total_requested: TaggedQuantity
    grand_total_out_of_pocket: TaggedQuantity
    grand_total_approved: TaggedQuantity
    requested_fixed: TaggedQuantity
    requested_variable: TaggedQuantity
    mileage_reimbursement: TaggedQuantity
    policy_id: str

    def as_display(self) -> dict[str, str]:
        """All figures as display strings: 2 places for money, 0 for counts."""
        return {
            "attendees": format_quantity(self.attendees),
            "nights": format_quantity(self.nights),
            "registration_total": format_amount(self.registration.total.value),
            "registration_per_person": format_amount(self.registration.per_person.value),
            "transportation_total": format_amount(self.transportation.total.value),
            "transportation_per_person": format_amount(self.transportation.per_person.value),
            "lodging_total": format_amount(self.lodging.total.value),
            "lodging_per_person": format_amount(self.lodging.per_person.value),
            "mileage_reimbursement": format_amount(self.mileage_reimbursement.value),
            "per_person_requested": format_amount(self.per_person_requested.value),
            "per_person_out_of_pocket": format_amount(self.per_person_out_of_pocket.value),
            "grand_total_requested": format_amount(self.grand_total_requested.value),
            "grand_total_out_of_pocket": format_amount(self.grand_total_out_of_pocket.value),
            "grand_total_approved": format_amount(self.grand_total_approved.value),
            "requested_fixed": format_amount(self.requested_fixed.value),
            "requested_variable": format_amount(self.requested_variable.value),
        }


@traced_engine("trip_totals", "1.0", fingerprint_fields=("trip",))
def compute_trip_totals(
    *,
    trip: TripInput,
    policy: ReimbursementPolicy | None = None,
) -> TripTotals:
    """Compute every total for one trip under a reimbursement policy."""
    policy = policy or DEFAULT_POLICY
    ops = UnitOperators(trip.attendees)

    registration = compose_registration(trip.registration, ops)
    transportation = compose_transportation(
        transportation=trip.transportation, operators=ops, policy=policy,
    )
    lodging = compose_lodging(lodging=trip.lodging, operators=ops)

    grand_total_requested = sum_quantities(
        Unit.COST_PER_GROUP,
        registration.total,
        transportation.total,
        lodging.total,
    )
    per_person_requested = ops.per_person(grand_total_requested)

    oop_per_person = TaggedQuantity(
        value=per_person_out_of_pocket(
            per_person_requested.value, policy.schedule, policy.rounding,
        ),
        unit=Unit.COST_PER_PERSON,
    )
    grand_total_out_of_pocket = ops.total(oop_per_person)
    grand_total_approved = grand_total_requested - grand_total_out_of_pocket

    requested_variable = transportation.requested_variable
    requested_fixed = grand_total_requested - requested_variable

    logger.info("trip_totals_computed", extra={
        "policy_id": policy.policy_id,
        "attendees": str(trip.attendees.value),
        "per_person_requested": str(per_person_requested.value),
        "per_person_out_of_pocket": str(oop_per_person.value),
        "grand_total_requested": str(grand_total_requested.value),
        "grand_total_approved": str(grand_total_approved.value),
    })

    return TripTotals(
        attendees=trip.attendees,
        registration=registration,
        transportation=transportation,
        lodging=lodging,
        nights=lodging.nights,
        per_person_requested=per_person_requested,
        per_person_out_of_pocket=oop_per_person,
        grand_total_requested=grand_total_requested,
        grand_total_out_of_pocket=grand_total_out_of_pocket,
        grand_total_approved=grand_total_approved,
        requested_fixed=requested_fixed,
        requested_variable=requested_variable,
        mileage_reimbursement=transportation.mileage_reimbursement,
        policy_id=policy.policy_id,
    )
