"""travel_engines.registration -- Registration fee composition (no branching)."""

from __future__ import annotations

from dataclasses import dataclass

from travel_engines.operators import UnitOperators
from travel_kernel.domain.values import TaggedQuantity


@dataclass(frozen=True)
class RegistrationCost:
    total: TaggedQuantity
    per_person: TaggedQuantity


def compose_registration(fee: TaggedQuantity, operators: UnitOperators) -> RegistrationCost:
    return RegistrationCost(total=operators.total(fee), per_person=operators.per_person(fee))
