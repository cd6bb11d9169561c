"""
travel_engines.nights -- Lodging night count from a check-in/check-out pair.

Rules:
    neither date    -> 0 nights
    exactly one     -> 1 night
    both dates      -> max(1, whole calendar days between them)

Same-day and inverted ranges floor to one night; the count is never
negative.  Time of day is ignored.
"""

from __future__ import annotations

from datetime import date

from travel_kernel.domain.values import DateRange, TaggedQuantity, Unit


def count_nights(
    check_in: date | None = None,
    check_out: date | None = None,
) -> TaggedQuantity:
    """Return the night count as a ``Nights`` quantity."""
    stay = DateRange(check_in=check_in, check_out=check_out)
    return nights_for(stay)


def nights_for(stay: DateRange | None) -> TaggedQuantity:
    """Return the night count for an optional DateRange."""
    if stay is None or stay.is_empty:
        nights = 0
    elif not stay.is_complete:
        nights = 1
    else:
        nights = max(1, (stay.check_out - stay.check_in).days)
    return TaggedQuantity.of(nights, Unit.NIGHTS)
