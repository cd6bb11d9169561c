"""
travel_engines.out_of_pocket -- Tiered out-of-pocket schedule.

Responsibility:
    Map a per-person requested total to the per-person amount the
    organization does not reimburse, then round it to whole currency
    units.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Tiers are evaluated top-down; the first tier whose exclusive upper
      bound exceeds the input wins.  Bounds strictly increase and only the
      last tier is unbounded, so exactly one tier matches any input.
    - Every tier is ``x * rate + offset`` with exact Decimal constants.
      Floats are rejected: a binary approximation can move a value across
      a tier boundary.

Default schedule:

    x < 10.00     ->  x
    x < 25.00     ->  5.00
    x < 35.00     ->  10.00
    x < 100.00    ->  x * 0.25
    x < 700.00    ->  x * 0.125 + 12.50
    otherwise     ->  x - 600.00

Failure modes:
    - InvalidPolicyError on construction of a malformed schedule.
    - InvalidPolicyError for an unsupported rounding mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, ROUND_UP, Decimal

from travel_kernel.exceptions import InvalidPolicyError
from travel_kernel.logging_config import get_logger

logger = get_logger("engines.out_of_pocket")

ROUNDING_MODES: frozenset[str] = frozenset({ROUND_HALF_EVEN, ROUND_HALF_UP, ROUND_UP})


@dataclass(frozen=True, slots=True)
class OutOfPocketTier:
    """One linear piece of the schedule: ``x * rate + offset`` for x < below."""

    below: Decimal | None
    rate: Decimal
    offset: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        for name in ("below", "rate", "offset"):
            val = getattr(self, name)
            if val is None and name == "below":
                continue
            if not isinstance(val, Decimal):
                raise InvalidPolicyError(
                    f"tier {name} must be Decimal, got {type(val).__name__}"
                )

    def matches(self, x: Decimal) -> bool:
        return self.below is None or x < self.below

    def apply(self, x: Decimal) -> Decimal:
        return x * self.rate + self.offset


@dataclass(frozen=True, slots=True)
class OutOfPocketSchedule:
    """Ordered, mutually exclusive tiers covering every non-negative input."""

    tiers: tuple[OutOfPocketTier, ...]

    def __post_init__(self) -> None:
        if not self.tiers:
            raise InvalidPolicyError("out-of-pocket schedule has no tiers")

        *bounded, last = self.tiers
        if last.below is not None:
            raise InvalidPolicyError("last out-of-pocket tier must be unbounded")

        previous: Decimal | None = None
        for index, tier in enumerate(bounded):
            if tier.below is None:
                raise InvalidPolicyError(
                    f"out-of-pocket tier {index} is unbounded but is not the last tier"
                )
            if previous is not None and tier.below <= previous:
                raise InvalidPolicyError(
                    f"out-of-pocket tier bounds must strictly increase: "
                    f"{tier.below} follows {previous}"
                )
            previous = tier.below

    def select(self, x: Decimal) -> tuple[int, OutOfPocketTier]:
        """Return the index and tier that apply to ``x``."""
        for index, tier in enumerate(self.tiers):
            if tier.matches(x):
                return index, tier
        # The last tier is unbounded, so this is unreachable for a valid schedule.
        raise AssertionError("no out-of-pocket tier matched")

    def evaluate(self, x: Decimal) -> Decimal:
        index, tier = self.select(x)
        result = tier.apply(x)
        logger.debug("out_of_pocket_tier_selected", extra={
            "requested_per_person": str(x),
            "tier_index": index,
            "tier_below": str(tier.below) if tier.below is not None else None,
            "out_of_pocket": str(result),
        })
        return result


DEFAULT_SCHEDULE = OutOfPocketSchedule(tiers=(
    OutOfPocketTier(below=Decimal("10.00"), rate=Decimal("1")),
    OutOfPocketTier(below=Decimal("25.00"), rate=Decimal("0"), offset=Decimal("5.00")),
    OutOfPocketTier(below=Decimal("35.00"), rate=Decimal("0"), offset=Decimal("10.00")),
    OutOfPocketTier(below=Decimal("100.00"), rate=Decimal("0.25")),
    OutOfPocketTier(below=Decimal("700.00"), rate=Decimal("0.125"), offset=Decimal("12.50")),
    OutOfPocketTier(below=None, rate=Decimal("1"), offset=Decimal("-600.00")),
))


def validate_rounding(rounding: str) -> str:
    if rounding not in ROUNDING_MODES:
        raise InvalidPolicyError(
            f"unsupported rounding mode {rounding!r}; "
            f"expected one of {sorted(ROUNDING_MODES)}"
        )
    return rounding


def out_of_pocket(
    requested_per_person: Decimal,
    schedule: OutOfPocketSchedule = DEFAULT_SCHEDULE,
) -> Decimal:
    """Unrounded per-person out-of-pocket amount."""
    return schedule.evaluate(requested_per_person)


def per_person_out_of_pocket(
    requested_per_person: Decimal,
    schedule: OutOfPocketSchedule = DEFAULT_SCHEDULE,
    rounding: str = ROUND_HALF_EVEN,
) -> Decimal:
    """Per-person out-of-pocket amount rounded to whole currency units."""
    validate_rounding(rounding)
    return out_of_pocket(requested_per_person, schedule).quantize(
        Decimal("1"), rounding=rounding,
    )
