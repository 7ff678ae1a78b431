"""Tests for the affordability solver."""

import math
from typing import List

import pytest

from margin_simulator.errors import (
    InvalidInputError,
    InvalidMarginError,
    NonConvergenceError,
    PricingFunctionError,
)
from margin_simulator.pricing import CapacityLeg, Constant, FunctionOf, QuantityValue, capacity_cost
from margin_simulator.solver import CostModel, PayerPolicy, SearchStrategy, converted_budget, solve

RATE = 0.88


def _total_cost(
    count: int,
    unit_price: QuantityValue,
    margin: QuantityValue,
    transport: QuantityValue,
    payer: PayerPolicy,
) -> float:
    model = CostModel(unit_price.resolve(), margin.resolve(), transport.resolve(), payer)
    return model.total_cost(count)


@pytest.fixture
def stepped_transport() -> QuantityValue:
    """300 per started truck of 1000 units."""
    return capacity_cost([CapacityLeg("truck", 300, 1000)])


class TestTieredScenario:
    """Tiered unit price with truck and container transport."""

    def test_solves_to_full_truck(self, tiered_price, flat_margin, truck_and_container) -> None:
        """Test the 60000 budget scenario fills exactly one truck."""
        count = solve(60_000, RATE, tiered_price, flat_margin, truck_and_container, PayerPolicy.CLIENT)
        assert count == 7000

    def test_budget_respected_at_result(self, tiered_price, flat_margin, truck_and_container) -> None:
        """Test the result fits and one more unit does not."""
        count = solve(60_000, RATE, tiered_price, flat_margin, truck_and_container, PayerPolicy.CLIENT)
        available = 60_000 * RATE

        assert _total_cost(count, tiered_price, flat_margin, truck_and_container, PayerPolicy.CLIENT) <= available
        assert _total_cost(count + 1, tiered_price, flat_margin, truck_and_container, PayerPolicy.CLIENT) > available

    def test_pricing_reevaluated_at_each_probe(self, flat_margin, truck_and_container) -> None:
        """Test every probed quantity is priced afresh."""
        probed: List[int] = []

        def price(quantity: int) -> float:
            probed.append(quantity)
            if quantity < 8000:
                return 3.5
            if quantity < 10000:
                return 3.25
            return 3.0

        count = solve(60_000, RATE, FunctionOf(price), flat_margin, truck_and_container, PayerPolicy.CLIENT)

        assert count == 7000
        # Seed, two proportional shrinks, then the final probe of one more unit
        assert {9051, 7618, 6918, 7000, 7001} <= set(probed)


class TestConstantPricing:
    """Quantity-independent price, margin and transport."""

    @pytest.mark.parametrize(
        "price,margin,budget,rate",
        [
            (3.0, 0.25, 1001, 0.5),
            (2.5, 0.5, 1234, 1.25),
            (1.0, 0.0, 10, 1.0),
            (3.0, 0.25, 40_000, 0.5),
        ],
    )
    def test_closed_form_when_purchaser_pays(self, price: float, margin: float, budget: float, rate: float) -> None:
        """Test the result equals floor(budget / sell price)."""
        count = solve(budget, rate, Constant(price), Constant(margin), Constant(500.0), PayerPolicy.PURCHASER)
        assert count == math.floor(budget * rate / (price / (1 - margin)))

    def test_client_pays_constant_transport(self) -> None:
        """Test constant transport is simply taken off the budget."""
        count = solve(1000, 1.0, Constant(3.0), Constant(0.25), Constant(200.0), PayerPolicy.CLIENT)
        assert count == 200

    def test_monotonic_in_budget(self, stepped_transport) -> None:
        """Test a larger budget never buys fewer items."""
        counts = [
            solve(budget, RATE, Constant(2.0), Constant(0.2), stepped_transport, PayerPolicy.CLIENT)
            for budget in range(0, 20_001, 250)
        ]
        assert counts == sorted(counts)
        assert counts[-1] > 0

    @pytest.mark.parametrize("budget", [500, 5_000, 20_000])
    def test_client_pays_never_exceeds_purchaser_pays(self, budget: float, stepped_transport) -> None:
        """Test transport charged to the client can only reduce the quantity."""
        args = (budget, RATE, Constant(2.0), Constant(0.2), stepped_transport)
        assert solve(*args, PayerPolicy.CLIENT) <= solve(*args, PayerPolicy.PURCHASER)

    @pytest.mark.parametrize("budget", [400, 2_500, 12_345])
    def test_budget_respected(self, budget: float, stepped_transport) -> None:
        """Test the result fits the budget and the next unit does not."""
        price, margin = Constant(2.0), Constant(0.2)
        count = solve(budget, RATE, price, margin, stepped_transport, PayerPolicy.CLIENT)
        available = budget * RATE

        assert count > 0
        assert _total_cost(count, price, margin, stepped_transport, PayerPolicy.CLIENT) <= available
        assert _total_cost(count + 1, price, margin, stepped_transport, PayerPolicy.CLIENT) > available

    def test_idempotent(self, stepped_transport) -> None:
        """Test identical inputs give identical results."""
        args = (7_500, RATE, Constant(2.0), Constant(0.2), stepped_transport, PayerPolicy.CLIENT)
        assert solve(*args) == solve(*args)


class TestUnitBoundaryBudgets:
    """Budgets that land exactly on a whole number of units."""

    def test_purchaser_pays_on_unit_boundary(self) -> None:
        """Test a budget of exactly 1056 sell prices settles without cycling."""
        price, margin, transport = Constant(3.5), Constant(0.4), Constant(0.0)
        count = solve(7000, RATE, price, margin, transport, PayerPolicy.PURCHASER)
        available = 7000 * RATE

        assert count in (1055, 1056)
        assert _total_cost(count, price, margin, transport, PayerPolicy.PURCHASER) <= available
        assert _total_cost(count + 1, price, margin, transport, PayerPolicy.PURCHASER) > available

    def test_client_pays_on_unit_boundary(self) -> None:
        """Test the shrink path settles when budget minus transport is a whole number of units."""
        price, margin, transport = Constant(3.5), Constant(0.4), Constant(6850.0)
        count = solve(29500, RATE, price, margin, transport, PayerPolicy.CLIENT)
        available = 29500 * RATE

        assert count in (3275, 3276)
        assert _total_cost(count, price, margin, transport, PayerPolicy.CLIENT) <= available
        assert _total_cost(count + 1, price, margin, transport, PayerPolicy.CLIENT) > available

    def test_large_purchaser_pays_shipment(self) -> None:
        """Test climbing past a million units does not count against the iteration cap."""
        count = solve(2_000_000, 1.0, Constant(1.0), Constant(0.2), Constant(0.0), PayerPolicy.PURCHASER)
        assert count == 1_600_000

    def test_climb_ignores_small_iteration_cap(self) -> None:
        """Test a cap of one still lets a long monotone climb finish."""
        count = solve(1000, 1.0, Constant(3.0), Constant(0.25), Constant(0.0), PayerPolicy.PURCHASER, max_iterations=1)
        assert count == 250

    def test_climb_stops_below_known_overshoot(self) -> None:
        """Test a price jump is not climbed into twice."""
        price = FunctionOf(lambda n: 1.0 if n < 10 else 2.0)
        count = solve(11, 1.0, price, Constant(0.0), Constant(0.0), PayerPolicy.PURCHASER)
        assert count == 9


SWEEP_BUDGETS = sorted(set(range(0, 70_001, 3_500)) | {29_500, 53_030, 60_000})


class TestTieredBudgetSweep:
    """Properties over a sweep of budgets with tiered price and vehicle transport."""

    def _counts(self, payer: PayerPolicy, price, margin, transport) -> List[int]:
        return [solve(budget, RATE, price, margin, transport, payer) for budget in SWEEP_BUDGETS]

    @pytest.mark.parametrize("payer", list(PayerPolicy))
    def test_monotonic_in_budget(self, payer: PayerPolicy, tiered_price, flat_margin, truck_and_container) -> None:
        """Test a larger budget never buys fewer items."""
        counts = self._counts(payer, tiered_price, flat_margin, truck_and_container)
        assert counts == sorted(counts)
        assert counts[-1] > 0

    @pytest.mark.parametrize("payer", list(PayerPolicy))
    def test_budget_respected(self, payer: PayerPolicy, tiered_price, flat_margin, truck_and_container) -> None:
        """Test every result fits its budget and one more unit does not."""
        counts = self._counts(payer, tiered_price, flat_margin, truck_and_container)
        for budget, count in zip(SWEEP_BUDGETS, counts):
            available = budget * RATE
            if count > 0:
                assert _total_cost(count, tiered_price, flat_margin, truck_and_container, payer) <= available
            assert _total_cost(count + 1, tiered_price, flat_margin, truck_and_container, payer) > available

    def test_client_pays_never_exceeds_purchaser_pays(self, tiered_price, flat_margin, truck_and_container) -> None:
        """Test transport charged to the client can only reduce the quantity."""
        client = self._counts(PayerPolicy.CLIENT, tiered_price, flat_margin, truck_and_container)
        purchaser = self._counts(PayerPolicy.PURCHASER, tiered_price, flat_margin, truck_and_container)
        for budget, client_count, purchaser_count in zip(SWEEP_BUDGETS, client, purchaser):
            assert client_count <= purchaser_count, budget


class TestZeroBoundary:
    """Budgets too small for a single unit."""

    @pytest.mark.parametrize("payer", list(PayerPolicy))
    def test_zero_budget(self, payer: PayerPolicy) -> None:
        """Test a zero budget buys nothing."""
        assert solve(0, RATE, Constant(3.0), Constant(0.2), Constant(100.0), payer) == 0

    def test_below_single_unit_with_transport(self) -> None:
        """Test the client cannot cover one unit plus transport."""
        assert solve(100, 1.0, Constant(3.0), Constant(0.25), Constant(200.0), PayerPolicy.CLIENT) == 0

    def test_below_single_unit_price(self) -> None:
        """Test the purchaser-pays floor is the single-unit sell price."""
        assert solve(3, 1.0, Constant(3.0), Constant(0.25), Constant(200.0), PayerPolicy.PURCHASER) == 0
        assert solve(4, 1.0, Constant(3.0), Constant(0.25), Constant(200.0), PayerPolicy.PURCHASER) == 1


class TestBisection:
    """Bisection search strategy."""

    @pytest.mark.parametrize("budget", [0, 400, 2_500, 12_345, 20_000])
    @pytest.mark.parametrize("payer", list(PayerPolicy))
    def test_agrees_with_refinement_on_monotone_costs(
        self, budget: float, payer: PayerPolicy, stepped_transport
    ) -> None:
        """Test both strategies agree when total cost grows with quantity."""
        args = (budget, RATE, Constant(2.0), Constant(0.2), stepped_transport, payer)
        assert solve(*args, strategy=SearchStrategy.BISECTION) == solve(*args)

    def test_tiered_scenario(self, tiered_price, flat_margin, truck_and_container) -> None:
        """Test bisection on the tiered scenario."""
        count = solve(
            60_000,
            RATE,
            tiered_price,
            flat_margin,
            truck_and_container,
            PayerPolicy.CLIENT,
            strategy=SearchStrategy.BISECTION,
        )
        assert count == 7000

    def test_settles_where_refinement_oscillates(self) -> None:
        """Test bisection finds the answer when the price jumps up."""
        price = FunctionOf(lambda n: 1.0 if n < 10 else 2.0)
        count = solve(
            11,
            1.0,
            price,
            Constant(0.0),
            Constant(0.0),
            PayerPolicy.PURCHASER,
            strategy=SearchStrategy.BISECTION,
        )
        assert count == 9

    def test_accepts_strategy_string(self) -> None:
        """Test strategies can be given by value."""
        count = solve(1000, 1.0, Constant(3.0), Constant(0.25), Constant(0.0), PayerPolicy.PURCHASER, strategy="bisection")
        assert count == 250


class TestErrors:
    """Error handling in the solver."""

    @pytest.mark.parametrize("budget", [-1, -0.01, float("nan"), float("inf")])
    def test_rejects_bad_budget(self, budget: float) -> None:
        """Test negative and non-finite budgets are rejected."""
        with pytest.raises(InvalidInputError) as exc_info:
            solve(budget, RATE, Constant(3.0), Constant(0.2), Constant(0.0), PayerPolicy.CLIENT)
        assert exc_info.value.param_name == "budget"

    @pytest.mark.parametrize("rate", [0, -0.88])
    def test_rejects_non_positive_exchange_rate(self, rate: float) -> None:
        """Test zero and negative exchange rates are rejected."""
        with pytest.raises(InvalidInputError) as exc_info:
            solve(1000, rate, Constant(3.0), Constant(0.2), Constant(0.0), PayerPolicy.CLIENT)
        assert exc_info.value.param_name == "exchange_rate"

    @pytest.mark.parametrize("margin", [1.0, 1.5, -0.1])
    def test_rejects_margin_outside_unit_interval(self, margin: float) -> None:
        """Test a margin of one or more, or below zero, is fatal."""
        with pytest.raises(InvalidMarginError) as exc_info:
            solve(1000, RATE, Constant(3.0), Constant(margin), Constant(0.0), PayerPolicy.CLIENT)
        assert exc_info.value.margin == margin
        assert exc_info.value.quantity == 1

    def test_margin_checked_at_every_probe(self) -> None:
        """Test a margin that only breaks at volume is still caught."""
        margin = FunctionOf(lambda n: 0.2 if n < 100 else 1.0)
        with pytest.raises(InvalidMarginError) as exc_info:
            solve(10_000, 1.0, Constant(1.0), margin, Constant(0.0), PayerPolicy.PURCHASER)
        assert exc_info.value.quantity >= 100

    @pytest.mark.parametrize("price", [0.0, -2.0, float("nan"), float("inf")])
    def test_rejects_unusable_unit_price(self, price: float) -> None:
        """Test zero, negative and non-finite prices fail loudly."""
        with pytest.raises(PricingFunctionError) as exc_info:
            solve(1000, RATE, Constant(price), Constant(0.2), Constant(0.0), PayerPolicy.CLIENT)
        assert exc_info.value.function_name == "unit_price"

    def test_rejects_negative_transport(self) -> None:
        """Test negative transport costs fail loudly."""
        with pytest.raises(PricingFunctionError) as exc_info:
            solve(1000, RATE, Constant(3.0), Constant(0.2), Constant(-5.0), PayerPolicy.CLIENT)
        assert exc_info.value.function_name == "transport_cost"

    def test_iteration_cap(self) -> None:
        """Test a cost model that overshoots at every quantity but one raises instead of crawling."""
        price = FunctionOf(lambda n: 1.0 if n == 1 else 1000.0 / (n - 1))
        with pytest.raises(NonConvergenceError) as exc_info:
            solve(1000, 1.0, price, Constant(0.0), Constant(0.0), PayerPolicy.CLIENT, max_iterations=50)
        assert exc_info.value.iterations == 50
        assert 1 <= exc_info.value.last_estimate <= 1000

    def test_rejects_plain_numbers(self) -> None:
        """Test raw numbers must be wrapped in Constant."""
        with pytest.raises(TypeError):
            solve(1000, RATE, 3.0, Constant(0.2), Constant(0.0), PayerPolicy.CLIENT)  # type: ignore[arg-type]

    def test_rejects_zero_iteration_cap(self) -> None:
        """Test the iteration cap must allow at least one step."""
        with pytest.raises(InvalidInputError) as exc_info:
            solve(1000, RATE, Constant(3.0), Constant(0.2), Constant(0.0), PayerPolicy.CLIENT, max_iterations=0)
        assert exc_info.value.param_name == "max_iterations"

    def test_rejects_unknown_payer(self) -> None:
        """Test an unknown payer name is an input error."""
        with pytest.raises(InvalidInputError) as exc_info:
            solve(1000, RATE, Constant(3.0), Constant(0.2), Constant(0.0), "nobody")  # type: ignore[arg-type]
        assert exc_info.value.param_name == "payer"
        assert "Allowed values: client, purchaser" in str(exc_info.value)

    def test_rejects_unknown_strategy(self) -> None:
        """Test an unknown strategy name is an input error."""
        with pytest.raises(InvalidInputError) as exc_info:
            solve(1000, RATE, Constant(3.0), Constant(0.2), Constant(0.0), PayerPolicy.CLIENT, strategy="guess")  # type: ignore[arg-type]
        assert exc_info.value.param_name == "strategy"

    def test_payer_name_is_case_insensitive(self) -> None:
        """Test payer names are accepted in any case."""
        count = solve(1000, 1.0, Constant(3.0), Constant(0.25), Constant(200.0), "Client")  # type: ignore[arg-type]
        assert count == 200


def test_converted_budget() -> None:
    """Test budget conversion into pricing currency."""
    assert converted_budget(1000, 0.5) == 500.0
    assert converted_budget(0, 0.88) == 0.0
