"""
travel_engines.operators -- Unit-checked operators over TaggedQuantity.

Responsibility:
    The only legal ways to combine tagged quantities: ``total``,
    ``per_person``, ``times`` and ``ways``.  Each operator recognizes a
    fixed set of unit combinations and fails loudly on anything else.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Imports only travel_kernel.domain.values and travel_kernel.exceptions.
    Consumed by every cost composition engine.

Invariants enforced:
    - The attendee count is an explicit constructor argument; operators
      never read module-level state.
    - Unit dispatch is a ``match`` over the closed Unit enumeration;
      unrecognized combinations raise UnitMismatchError.
    - Division by a zero attendee count yields zero (value comparison,
      never identity).
    - A per-person cost multiplied out to the group is quantized to whole
      cents (half-even), so total(per_person(x)) == x for any group cost
      in cents even when the attendee count does not divide it.

Failure modes:
    - UnitMismatchError for any unrecognized unit combination.  This is a
      defect in the calling composition rule, not bad user input, and is
      never caught inside the engines.
    - InvalidQuantityError if the attendee count is negative.

Usage:
    from travel_engines.operators import UnitOperators
    from travel_kernel.domain.values import TaggedQuantity, Unit, attendee_count

    ops = UnitOperators(attendee_count(4))
    ops.total(TaggedQuantity.of("50.00", Unit.COST_PER_PERSON))
    # TaggedQuantity(Decimal('200.00'), 'per group')
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal

from travel_kernel.domain.values import Direction, TaggedQuantity, Unit
from travel_kernel.exceptions import InvalidQuantityError, UnitMismatchError
from travel_kernel.logging_config import get_logger

logger = get_logger("engines.operators")

_CENTS = Decimal(10) ** -Unit.COST_PER_GROUP.decimal_places


def _reject(operation: str, *quantities: TaggedQuantity | None) -> UnitMismatchError:
    units = tuple(q.unit.value for q in quantities if q is not None)
    logger.error("unit_mismatch", extra={"operation": operation, "units": list(units)})
    return UnitMismatchError(operation, units)


@dataclass(frozen=True, slots=True)
class UnitOperators:
    """
    Unit algebra bound to one attendee count.

    Contract:
        ``total`` and ``per_person`` convert between per-attendee and
        whole-group costs; ``times`` performs dimensional multiplication;
        ``ways`` applies a transportation direction.

    Guarantees:
        - Every result is a new TaggedQuantity with an explicit unit.
        - Same inputs always produce the same outputs.
    """

    attendees: TaggedQuantity

    def __post_init__(self) -> None:
        if self.attendees.unit != Unit.PERSONS:
            raise _reject("attendees", self.attendees)
        if self.attendees.is_negative:
            raise InvalidQuantityError(
                str(self.attendees.value), Unit.PERSONS.value, "must not be negative",
            )

    def total(self, x: TaggedQuantity) -> TaggedQuantity:
        """Convert a per-person or per-group cost to a group cost.

        Per-person costs are multiplied out and quantized to cents.
        """
        match x.unit:
            case Unit.COST_PER_PERSON:
                value = (x.value * self.attendees.value).quantize(
                    _CENTS, rounding=ROUND_HALF_EVEN,
                )
            case Unit.COST_PER_GROUP:
                value = x.value
            case _:
                raise _reject("total", x)
        return TaggedQuantity(value=value, unit=Unit.COST_PER_GROUP)

    def per_person(self, x: TaggedQuantity) -> TaggedQuantity:
        """Convert a per-person or per-group cost to a per-person cost.

        A group cost shared by zero attendees is zero per person.
        """
        match x.unit:
            case Unit.COST_PER_PERSON:
                value = x.value
            case Unit.COST_PER_GROUP:
                if self.attendees.value == Decimal("0"):
                    value = Decimal("0")
                else:
                    value = x.value / self.attendees.value
            case _:
                raise _reject("per_person", x)
        return TaggedQuantity(value=value, unit=Unit.COST_PER_PERSON)

    def times(
        self,
        scalar: TaggedQuantity,
        rate: TaggedQuantity,
        rate2: TaggedQuantity | None = None,
    ) -> TaggedQuantity:
        """Dimensional multiplication yielding a group cost.

        Recognized forms:
            miles x per-mile cost
            rooms x per-room-per-night cost x nights
        """
        third = rate2.unit if rate2 is not None else None
        match (scalar.unit, rate.unit, third):
            case (Unit.MILES, Unit.COST_PER_MILE, None):
                value = scalar.value * rate.value
            case (Unit.ROOMS, Unit.COST_PER_ROOM_PER_NIGHT, Unit.NIGHTS):
                value = scalar.value * rate.value * rate2.value
            case _:
                raise _reject("times", scalar, rate, rate2)
        return TaggedQuantity(value=value, unit=Unit.COST_PER_GROUP)

    def ways(self, quantity: TaggedQuantity, direction: Direction) -> TaggedQuantity:
        """Apply a leg direction: one-way entries are doubled, round trips kept."""
        match direction:
            case Direction.ROUND_TRIP:
                return quantity
            case Direction.ONE_WAY:
                return TaggedQuantity(value=quantity.value * 2, unit=quantity.unit)
            case _:
                raise ValueError(f"Unknown direction: {direction!r}")


def sum_quantities(unit: Unit, *quantities: TaggedQuantity) -> TaggedQuantity:
    """Sum same-unit quantities, starting from zero of ``unit``."""
    return sum(quantities, TaggedQuantity.zero(unit))
