"""
Pure domain layer.

Value objects and entry handling with NO dependencies on I/O, clocks or
the engines. All domain objects are immutable and deterministic.
"""

from travel_kernel.domain.entry import (
    BACKSPACE,
    apply_keystroke,
    format_amount,
    format_quantity,
    parse_entry,
)
from travel_kernel.domain.values import (
    COST_UNITS,
    UNIT_SPECS,
    DateRange,
    Direction,
    TaggedQuantity,
    Unit,
    UnitSpec,
    attendee_count,
)

__all__ = [
    "BACKSPACE",
    "COST_UNITS",
    "UNIT_SPECS",
    "DateRange",
    "Direction",
    "TaggedQuantity",
    "Unit",
    "UnitSpec",
    "apply_keystroke",
    "attendee_count",
    "format_amount",
    "format_quantity",
    "parse_entry",
]
