"""
Typed Exception Hierarchy for the Travel Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from TravelKernelError:

    TravelKernelError (base)
    |
    +-- UnitError
    |   +-- UnitMismatchError
    |
    +-- InputError
    |   +-- InvalidEntryError
    |   +-- InvalidQuantityError
    |
    +-- PolicyError
        +-- InvalidPolicyError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Unit            | UNIT_MISMATCH               | Operator given units it does not accept
----------------|-----------------------------|-----------------------------------------
Input           | INVALID_ENTRY               | Raw entry is not a usable number
                | INVALID_QUANTITY            | Quantity outside its legal range
----------------|-----------------------------|-----------------------------------------
Policy          | INVALID_POLICY              | Reimbursement policy is malformed

===============================================================================
HANDLING PATTERNS
===============================================================================

UnitMismatchError is a contract violation between the cost composition
rules and the unit operators. It is never caught inside the engines:

    totals = compute_trip_totals(trip)   # UnitMismatchError propagates

InputError subclasses are raised at the entry boundary, before a
TaggedQuantity exists, and are safe to show to the user:

    try:
        fee = parse_entry(raw, Unit.COST_PER_PERSON)
    except InvalidEntryError as e:
        return {"error": e.code, "raw": e.raw, "reason": e.reason}
"""


class TravelKernelError(Exception):
    """
    Base exception for all travel kernel errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "TRAVEL_KERNEL_ERROR"


# Unit-related exceptions


class UnitError(TravelKernelError):
    """Base exception for unit algebra errors."""

    code: str = "UNIT_ERROR"


class UnitMismatchError(UnitError):
    """An operator was given a unit combination it does not recognize."""

    code: str = "UNIT_MISMATCH"

    def __init__(self, operation: str, units: tuple[str, ...]):
        self.operation = operation
        self.units = units
        super().__init__(
            f"Invalid unit for {operation}: {', '.join(units) or '(none)'}"
        )


# Input-related exceptions


class InputError(TravelKernelError):
    """Base exception for rejected user input."""

    code: str = "INPUT_ERROR"


class InvalidEntryError(InputError):
    """A raw entry could not be turned into a quantity."""

    code: str = "INVALID_ENTRY"

    def __init__(self, raw: str, unit: str, reason: str):
        self.raw = raw
        self.unit = unit
        self.reason = reason
        super().__init__(f"Invalid entry {raw!r} for '{unit}': {reason}")


class InvalidQuantityError(InputError):
    """A quantity value is outside the range its unit allows."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, value: str, unit: str, reason: str):
        self.value = value
        self.unit = unit
        self.reason = reason
        super().__init__(f"Invalid {unit} quantity {value}: {reason}")


# Policy-related exceptions


class PolicyError(TravelKernelError):
    """Base exception for reimbursement policy errors."""

    code: str = "POLICY_ERROR"


class InvalidPolicyError(PolicyError):
    """Reimbursement policy definition is malformed."""

    code: str = "INVALID_POLICY"

    def __init__(self, reason: str, policy_id: str | None = None):
        self.reason = reason
        self.policy_id = policy_id
        prefix = f"Policy '{policy_id}': " if policy_id else "Policy: "
        super().__init__(prefix + reason)
