"""
Values -- Immutable, self-validating domain value objects.

Responsibility:
    Provides the foundational value types for every reimbursement
    computation: Unit, TaggedQuantity, Direction and DateRange. A raw
    Decimal never travels through the engines without the unit that says
    what it measures.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every engine. No outward dependencies except
    travel_kernel.exceptions.

Invariants enforced:
    - Quantity values are always Decimal (floats are rejected, never coerced)
    - Arithmetic and comparison between quantities require identical units
    - Quantities are immutable; edits produce new instances

Failure modes:
    - TypeError on construction with a float value
    - ValueError on construction with a non-numeric or non-finite value
    - UnitMismatchError when arithmetic mixes different units
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum

from travel_kernel.exceptions import InvalidQuantityError, UnitMismatchError


class Unit(str, Enum):
    """Closed set of units a TaggedQuantity may carry."""

    COST_PER_PERSON = "per person"
    COST_PER_GROUP = "per group"
    MILES = "miles"
    COST_PER_MILE = "per mile"
    PERSONS = "people"
    ROOMS = "rooms"
    COST_PER_ROOM_PER_NIGHT = "USD/room/night"
    NIGHTS = "nights"

    @property
    def label(self) -> str:
        return UNIT_SPECS[self].label

    @property
    def decimal_places(self) -> int:
        return UNIT_SPECS[self].decimal_places


@dataclass(frozen=True, slots=True)
class UnitSpec:
    """Entry and display metadata for a unit."""

    label: str
    decimal_places: int


UNIT_SPECS: dict[Unit, UnitSpec] = {
    Unit.COST_PER_PERSON: UnitSpec(label="per person", decimal_places=2),
    Unit.COST_PER_GROUP: UnitSpec(label="per group", decimal_places=2),
    Unit.MILES: UnitSpec(label="miles", decimal_places=1),
    Unit.COST_PER_MILE: UnitSpec(label="per mile", decimal_places=2),
    Unit.PERSONS: UnitSpec(label="people", decimal_places=0),
    Unit.ROOMS: UnitSpec(label="rooms", decimal_places=0),
    Unit.COST_PER_ROOM_PER_NIGHT: UnitSpec(label="per room", decimal_places=2),
    Unit.NIGHTS: UnitSpec(label="nights", decimal_places=0),
}

# Units a cost line item may be entered in.
COST_UNITS: tuple[Unit, ...] = (Unit.COST_PER_PERSON, Unit.COST_PER_GROUP)


class Direction(str, Enum):
    """Whether a transportation leg's entered rate covers one way or both."""

    ONE_WAY = "one_way"
    ROUND_TRIP = "round_trip"


@dataclass(frozen=True, slots=True)
class TaggedQuantity:
    """
    Decimal value paired with the unit it measures.

    Contract:
        The unit decides which operators may consume the quantity and what
        unit their result carries. There is no implicit coercion between
        units.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - value is always a finite Decimal (never float)
        - unit is always a member of Unit
        - Addition, subtraction and ordering enforce the same-unit constraint

    Non-goals:
        - Does NOT convert between units (see travel_engines.operators)
        - Does NOT auto-round -- display rounding happens at the boundary
    """

    value: Decimal
    unit: Unit

    def __post_init__(self) -> None:
        if isinstance(self.value, float):
            raise TypeError(
                f"TaggedQuantity value must not be float, got {self.value!r}"
            )
        if not isinstance(self.value, Decimal):
            try:
                object.__setattr__(self, "value", Decimal(str(self.value)))
            except (InvalidOperation, ValueError) as e:
                raise ValueError(f"Invalid quantity value: {self.value!r}") from e
        if not self.value.is_finite():
            raise ValueError(f"Quantity value must be finite: {self.value}")

        if not isinstance(self.unit, Unit):
            try:
                object.__setattr__(self, "unit", Unit(self.unit))
            except ValueError as e:
                raise ValueError(f"Unknown unit: {self.unit!r}") from e

    @classmethod
    def of(cls, value: Decimal | str | int, unit: Unit | str) -> TaggedQuantity:
        """Factory method for creating a TaggedQuantity.

        Raises:
            ValueError: If value is not a finite number or unit is unknown.
        """
        return cls(value=value, unit=unit)

    @classmethod
    def zero(cls, unit: Unit | str) -> TaggedQuantity:
        """Create a zero quantity with the given unit."""
        return cls(value=Decimal("0"), unit=unit)

    def with_value(self, value: Decimal | str | int) -> TaggedQuantity:
        """Return a copy carrying a new value and the same unit."""
        return TaggedQuantity.of(value, self.unit)

    def with_unit(self, unit: Unit | str) -> TaggedQuantity:
        """Return a copy carrying the same value under a different unit."""
        return TaggedQuantity(value=self.value, unit=unit)

    @property
    def is_zero(self) -> bool:
        return self.value == Decimal("0")

    @property
    def is_negative(self) -> bool:
        return self.value < Decimal("0")

    def _require_same_unit(self, other: TaggedQuantity, operation: str) -> None:
        if self.unit != other.unit:
            raise UnitMismatchError(operation, (self.unit.value, other.unit.value))

    def __add__(self, other: TaggedQuantity) -> TaggedQuantity:
        if not isinstance(other, TaggedQuantity):
            return NotImplemented
        self._require_same_unit(other, "add")
        return TaggedQuantity(value=self.value + other.value, unit=self.unit)

    def __sub__(self, other: TaggedQuantity) -> TaggedQuantity:
        if not isinstance(other, TaggedQuantity):
            return NotImplemented
        self._require_same_unit(other, "subtract")
        return TaggedQuantity(value=self.value - other.value, unit=self.unit)

    def __lt__(self, other: TaggedQuantity) -> bool:
        if not isinstance(other, TaggedQuantity):
            return NotImplemented
        self._require_same_unit(other, "compare")
        return self.value < other.value

    def __le__(self, other: TaggedQuantity) -> bool:
        if not isinstance(other, TaggedQuantity):
            return NotImplemented
        self._require_same_unit(other, "compare")
        return self.value <= other.value

    def __gt__(self, other: TaggedQuantity) -> bool:
        if not isinstance(other, TaggedQuantity):
            return NotImplemented
        self._require_same_unit(other, "compare")
        return self.value > other.value

    def __ge__(self, other: TaggedQuantity) -> bool:
        if not isinstance(other, TaggedQuantity):
            return NotImplemented
        self._require_same_unit(other, "compare")
        return self.value >= other.value

    def __str__(self) -> str:
        return f"{self.value} {self.unit.value}"

    def __repr__(self) -> str:
        return f"TaggedQuantity({self.value!r}, {self.unit.value!r})"


def attendee_count(value: Decimal | str | int) -> TaggedQuantity:
    """
    Build the shared attendee count.

    Raises:
        InvalidQuantityError: If the count is negative or fractional.
    """
    count = TaggedQuantity.of(value, Unit.PERSONS)
    if count.is_negative:
        raise InvalidQuantityError(str(count.value), Unit.PERSONS.value, "must not be negative")
    if count.value != count.value.to_integral_value():
        raise InvalidQuantityError(str(count.value), Unit.PERSONS.value, "must be a whole number")
    return count


@dataclass(frozen=True, slots=True)
class DateRange:
    """
    Optional check-in / check-out pair.

    Either end may be missing. datetime values are truncated to their
    calendar date on construction, so time of day never affects a night
    count.
    """

    check_in: date | None = None
    check_out: date | None = None

    def __post_init__(self) -> None:
        for name in ("check_in", "check_out"):
            val = getattr(self, name)
            if isinstance(val, datetime):
                object.__setattr__(self, name, val.date())
            elif val is not None and not isinstance(val, date):
                raise TypeError(f"{name} must be a date, got {type(val).__name__}")

    @property
    def is_empty(self) -> bool:
        return self.check_in is None and self.check_out is None

    @property
    def is_complete(self) -> bool:
        return self.check_in is not None and self.check_out is not None
