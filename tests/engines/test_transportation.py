"""
Tests for transportation cost composition.

Covers:
- The static mode table
- Ticket, fixed and variable components and their directions
- Mileage reimbursement (reference-only and included)
- Inactive component inputs are ignored
"""

from decimal import Decimal

import pytest

from tests.conftest import q
from travel_engines.policy import DEFAULT_POLICY, ReimbursementPolicy
from travel_engines.transportation import (
    TRANSPORTATION_LABELS,
    TRANSPORTATION_SPEC,
    TransportationFormula,
    TransportationInput,
    TransportationMode,
    compose_transportation,
)
from travel_kernel.domain.values import Direction, Unit
from travel_kernel.exceptions import UnitMismatchError

TICKET = TransportationFormula.TICKET
FIXED = TransportationFormula.FIXED
VARIABLE = TransportationFormula.VARIABLE


def _all_inputs(mode: TransportationMode, **overrides) -> TransportationInput:
    values = dict(
        mode=mode,
        ticket=q("100.00", Unit.COST_PER_PERSON),
        fixed=q("20.00", Unit.COST_PER_PERSON),
        distance=q("100", Unit.MILES),
        cost_per_mile=q("0.50", Unit.COST_PER_MILE),
    )
    values.update(overrides)
    return TransportationInput(**values)


class TestModeTable:
    def test_every_mode_mapped(self):
        assert set(TRANSPORTATION_SPEC) == set(TransportationMode)
        assert set(TRANSPORTATION_LABELS) == set(TransportationMode)

    @pytest.mark.parametrize(
        "mode, components",
        [
            (TransportationMode.NONE, ()),
            (TransportationMode.AIRPLANE, (TICKET,)),
            (TransportationMode.TRAIN, (TICKET,)),
            (TransportationMode.BUS, (TICKET,)),
            (TransportationMode.RENTAL, (VARIABLE, FIXED)),
            (TransportationMode.CHARTER, (FIXED,)),
            (TransportationMode.CUSTOM, (FIXED, VARIABLE, TICKET)),
        ],
    )
    def test_components(self, mode, components):
        assert mode.components == components

    def test_labels(self):
        assert TransportationMode.RENTAL.label == "Rental vehicle"
        assert TransportationMode.NONE.label == "N/A"


class TestComponents:
    def test_no_transportation(self, ops):
        cost = compose_transportation(
            transportation=_all_inputs(TransportationMode.NONE), operators=ops,
        )
        assert cost.total.is_zero
        assert cost.per_person.is_zero
        assert cost.mileage_reimbursement.is_zero

    def test_airplane_ticket_round_trip(self, ops):
        cost = compose_transportation(
            transportation=_all_inputs(TransportationMode.AIRPLANE), operators=ops,
        )
        assert cost.ticket.value == Decimal("400.00")
        assert cost.total.value == Decimal("400.00")
        assert cost.per_person.value == Decimal("100.00")
        assert cost.fixed.is_zero
        assert cost.variable.is_zero

    def test_one_way_ticket_doubled(self, ops):
        cost = compose_transportation(
            transportation=_all_inputs(
                TransportationMode.TRAIN, ticket_direction=Direction.ONE_WAY,
            ),
            operators=ops,
        )
        assert cost.total.value == Decimal("800.00")
        assert cost.per_person.value == Decimal("200.00")

    def test_charter_group_fee(self, ops):
        cost = compose_transportation(
            transportation=_all_inputs(
                TransportationMode.CHARTER, fixed=q("600.00", Unit.COST_PER_GROUP),
            ),
            operators=ops,
        )
        assert cost.total.value == Decimal("600.00")
        assert cost.per_person.value == Decimal("150")

    def test_rental_fixed_and_variable(self, ops):
        cost = compose_transportation(
            transportation=_all_inputs(TransportationMode.RENTAL), operators=ops,
        )
        assert cost.fixed.value == Decimal("80.00")
        assert cost.variable.value == Decimal("50.00")
        assert cost.ticket.is_zero
        assert cost.total.value == Decimal("130.00")
        assert cost.per_person.value == Decimal("32.5")
        assert cost.requested_variable.value == Decimal("50.00")
        assert cost.requested_fixed.value == Decimal("80.00")

    def test_one_way_distance_doubles_variable_and_reimbursement(self, ops):
        cost = compose_transportation(
            transportation=_all_inputs(
                TransportationMode.RENTAL, distance_direction=Direction.ONE_WAY,
            ),
            operators=ops,
        )
        assert cost.variable.value == Decimal("100.00")
        assert cost.mileage_reimbursement.value == Decimal("87.000")

    def test_custom_uses_all_components(self, ops):
        cost = compose_transportation(
            transportation=_all_inputs(TransportationMode.CUSTOM), operators=ops,
        )
        assert cost.total.value == Decimal("400.00") + Decimal("80.00") + Decimal("50.00")

    def test_inactive_inputs_ignored_even_with_wrong_units(self, ops):
        cost = compose_transportation(
            transportation=_all_inputs(
                TransportationMode.AIRPLANE, fixed=q(3, Unit.NIGHTS), distance=q(1, Unit.ROOMS),
            ),
            operators=ops,
        )
        assert cost.total.value == Decimal("400.00")

    def test_active_input_with_wrong_unit_raises(self, ops):
        with pytest.raises(UnitMismatchError):
            compose_transportation(
                transportation=_all_inputs(TransportationMode.BUS, ticket=q(3, Unit.MILES)),
                operators=ops,
            )


class TestMileageReimbursement:
    def test_reference_only_by_default(self, ops):
        cost = compose_transportation(
            transportation=_all_inputs(TransportationMode.RENTAL), operators=ops,
        )
        assert cost.mileage_reimbursement.value == Decimal("43.500")
        assert cost.mileage_reimbursement.unit is Unit.COST_PER_GROUP
        assert not cost.mileage_reimbursement_included
        assert cost.total.value == Decimal("130.00")

    def test_included_when_policy_says_so(self, ops):
        policy = ReimbursementPolicy(policy_id="with-mileage", include_mileage_reimbursement=True)
        cost = compose_transportation(
            transportation=_all_inputs(TransportationMode.RENTAL), operators=ops, policy=policy,
        )
        assert cost.mileage_reimbursement_included
        assert cost.total.value == Decimal("173.500")
        assert cost.requested_variable.value == Decimal("93.500")
        assert cost.requested_fixed.value == Decimal("80.00")
        assert cost.per_person.value == Decimal("32.5") + Decimal("10.875")

    def test_custom_rate(self, ops):
        policy = ReimbursementPolicy(policy_id="cheap", mileage_rate=Decimal("0.10"))
        cost = compose_transportation(
            transportation=_all_inputs(TransportationMode.RENTAL), operators=ops, policy=policy,
        )
        assert cost.mileage_reimbursement.value == Decimal("10.00")

    def test_not_computed_without_variable_component(self, ops):
        cost = compose_transportation(
            transportation=_all_inputs(TransportationMode.CHARTER), operators=ops,
        )
        assert cost.mileage_reimbursement.is_zero

    def test_default_policy_rate(self):
        assert DEFAULT_POLICY.mileage_rate == Decimal("0.435")


class TestZeroAttendees:
    def test_group_cost_per_person_is_zero(self, zero_ops):
        cost = compose_transportation(
            transportation=_all_inputs(
                TransportationMode.CHARTER, fixed=q("600.00", Unit.COST_PER_GROUP),
            ),
            operators=zero_ops,
        )
        assert cost.total.value == Decimal("600.00")
        assert cost.per_person.is_zero


class TestTracing:
    def test_emits_engine_trace(self, ops, captured_logs):
        compose_transportation(
            transportation=_all_inputs(TransportationMode.RENTAL), operators=ops,
        )
        traces = [r for r in captured_logs() if r["message"] == "TRAVEL_ENGINE_TRACE"]
        assert len(traces) == 1
        assert traces[0]["engine_name"] == "transportation"
        assert len(traces[0]["input_fingerprint"]) == 16
