"""
travel_engines.policy -- Reimbursement policy parameters consumed by the engines.

The engines never read configuration themselves.  A ReimbursementPolicy
is built by travel_config (or taken from DEFAULT_POLICY) and passed in
explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, Decimal

from travel_engines.out_of_pocket import (
    DEFAULT_SCHEDULE,
    OutOfPocketSchedule,
    validate_rounding,
)
from travel_kernel.domain.values import TaggedQuantity, Unit
from travel_kernel.exceptions import InvalidPolicyError

# Flat reimbursement paid per mile driven.
MILEAGE_REIMBURSEMENT_RATE = Decimal("0.435")


@dataclass(frozen=True)
class ReimbursementPolicy:
    """
    Policy constants for one reimbursement computation.

    Attributes:
        policy_id: Identifier of the source policy definition.
        version: Policy version.
        mileage_rate: Reimbursement paid per mile of a variable leg.
        include_mileage_reimbursement: When true, the mileage
            reimbursement is added to the requested total; otherwise it
            is reported for reference only.
        rounding: Decimal rounding mode for the per-person out-of-pocket
            amount.
        schedule: Out-of-pocket tier schedule.
        checksum: SHA-256 of the source definition, empty for built-ins.
    """

    policy_id: str = "default"
    version: int = 1
    mileage_rate: Decimal = MILEAGE_REIMBURSEMENT_RATE
    include_mileage_reimbursement: bool = False
    rounding: str = ROUND_HALF_EVEN
    schedule: OutOfPocketSchedule = field(default=DEFAULT_SCHEDULE)
    checksum: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.mileage_rate, Decimal):
            raise InvalidPolicyError(
                f"mileage_rate must be Decimal, got {type(self.mileage_rate).__name__}",
                self.policy_id,
            )
        if self.mileage_rate < 0:
            raise InvalidPolicyError("mileage_rate must not be negative", self.policy_id)
        try:
            validate_rounding(self.rounding)
        except InvalidPolicyError as e:
            raise InvalidPolicyError(e.reason, self.policy_id) from e

    @property
    def mileage_rate_quantity(self) -> TaggedQuantity:
        return TaggedQuantity(value=self.mileage_rate, unit=Unit.COST_PER_MILE)


DEFAULT_POLICY = ReimbursementPolicy()
