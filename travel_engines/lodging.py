"""
travel_engines.lodging -- Lodging cost composition.

    rooms_total = rooms x cost per room per night x nights
    total       = rooms_total + total(fees)
    per_person  = per_person(total)

Nights come from the stay's check-in / check-out dates
(see travel_engines.nights).
"""

from __future__ import annotations

from dataclasses import dataclass

from travel_engines.nights import nights_for
from travel_engines.operators import UnitOperators
from travel_engines.tracer import traced_engine
from travel_kernel.domain.values import DateRange, TaggedQuantity, Unit
from travel_kernel.logging_config import get_logger

logger = get_logger("engines.lodging")


@dataclass(frozen=True)
class LodgingInput:
    """Raw lodging line items for one group."""

    rooms: TaggedQuantity = TaggedQuantity.zero(Unit.ROOMS)
    cost_per_room_per_night: TaggedQuantity = TaggedQuantity.zero(Unit.COST_PER_ROOM_PER_NIGHT)
    stay: DateRange = DateRange()
    fees: TaggedQuantity = TaggedQuantity.zero(Unit.COST_PER_PERSON)


@dataclass(frozen=True)
class LodgingCost:
    nights: TaggedQuantity
    rooms_total: TaggedQuantity
    fees: TaggedQuantity
    total: TaggedQuantity
    per_person: TaggedQuantity


@traced_engine("lodging", "1.0", fingerprint_fields=("lodging",))
def compose_lodging(*, lodging: LodgingInput, operators: UnitOperators) -> LodgingCost:
    """Compose the requested lodging total."""
    nights = nights_for(lodging.stay)
    rooms_total = operators.times(lodging.rooms, lodging.cost_per_room_per_night, nights)
    fees = operators.total(lodging.fees)
    total = rooms_total + fees

    logger.debug("lodging_composed", extra={
        "nights": str(nights.value),
        "rooms_total": str(rooms_total.value),
        "fees": str(fees.value),
    })

    return LodgingCost(
        nights=nights,
        rooms_total=rooms_total,
        fees=fees,
        total=total,
        per_person=operators.per_person(total),
    )
