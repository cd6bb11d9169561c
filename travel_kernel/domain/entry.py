"""
Entry -- Raw user entry parsing, keystroke editing and display formatting.

Responsibility:
    The boundary between whatever collects numbers from a person and the
    engines. Raw text is validated and quantized here, so malformed input
    is rejected before a TaggedQuantity ever exists.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Failure modes:
    - InvalidEntryError for empty, non-numeric, non-finite, negative or
      float input.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from travel_kernel.domain.values import TaggedQuantity, Unit
from travel_kernel.exceptions import InvalidEntryError

BACKSPACE = "Backspace"

_FIRST_DIGITS = frozenset("123456789")
_DIGITS = frozenset("0123456789")


def _exponent(decimal_places: int) -> Decimal:
    return Decimal(1).scaleb(-decimal_places)


def parse_entry(raw: str | int | Decimal, unit: Unit) -> TaggedQuantity:
    """
    Turn a raw entry into a TaggedQuantity quantized to the unit's places.

    Accepts a leading ``$`` and ``,`` group separators in text entries.

    Raises:
        InvalidEntryError: If the entry is not a usable non-negative number.
    """
    if isinstance(raw, float) or isinstance(raw, bool):
        raise InvalidEntryError(repr(raw), unit.value, f"{type(raw).__name__} is not accepted")

    if isinstance(raw, str):
        text = raw.strip()
        if text.startswith("$"):
            text = text[1:].strip()
        text = text.replace(",", "")
        if not text:
            raise InvalidEntryError(raw, unit.value, "empty entry")
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise InvalidEntryError(raw, unit.value, "not a number") from None
    elif isinstance(raw, (int, Decimal)):
        value = Decimal(raw)
    else:
        raise InvalidEntryError(repr(raw), unit.value, f"{type(raw).__name__} is not accepted")

    if not value.is_finite():
        raise InvalidEntryError(str(raw), unit.value, "not a finite number")
    if value < 0:
        raise InvalidEntryError(str(raw), unit.value, "must not be negative")
    value = value.copy_abs()

    try:
        value = value.quantize(_exponent(unit.decimal_places), rounding=ROUND_HALF_EVEN)
    except InvalidOperation:
        raise InvalidEntryError(str(raw), unit.value, "too large") from None

    return TaggedQuantity(value=value, unit=unit)


def apply_keystroke(value: Decimal, key: str, decimal_places: int = 0) -> Decimal:
    """
    Apply one keystroke to a shift-in numeric field.

    Digits enter at the last decimal position and shift earlier digits
    left (typing 1, 2, 3 with two places gives 0.01, 0.12, 1.23).
    Backspace drops the last digit. A zero field ignores a leading ``0``
    and backspace; any other key leaves the value unchanged.
    """
    if value == 0:
        if key not in _FIRST_DIGITS:
            return value
    elif key not in _DIGITS and key != BACKSPACE:
        return value

    shift = Decimal(10) ** decimal_places
    digits = str(int((value * shift).to_integral_value(rounding=ROUND_HALF_EVEN)))

    if key == BACKSPACE:
        digits = digits[:-1] or "0"
    elif value == 0:
        digits = key
    else:
        digits = digits + key

    return (Decimal(digits) / shift).quantize(_exponent(decimal_places))


def format_amount(value: Decimal, decimal_places: int = 2) -> str:
    """Format with a fixed number of places (half-even) and ``,`` grouping."""
    rounded = value.quantize(_exponent(decimal_places), rounding=ROUND_HALF_EVEN)
    return f"{rounded:,.{decimal_places}f}"


def format_quantity(quantity: TaggedQuantity) -> str:
    """Format a quantity using its unit's display places."""
    return format_amount(quantity.value, quantity.unit.decimal_places)
