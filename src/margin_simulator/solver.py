"""Affordability solver.

Finds the largest integer quantity whose total cost fits a client budget:

    sell(n) * n + transport(n) <= budget * exchange_rate      (client pays)
    sell(n) * n                <= budget * exchange_rate      (purchaser pays)

with ``sell(n) = unit_price(n) / (1 - margin(n))``. Quantity appears on both
sides because price, margin and transport may all be step functions of the
quantity, so the answer is found by iterative refinement rather than by
inverting the equation.

Typical usage:

    from margin_simulator import CapacityLeg, Constant, PayerPolicy, capacity_cost, solve

    count = solve(
        budget=50_000,
        exchange_rate=0.88,
        unit_price=Constant(3.5),
        margin=Constant(0.2),
        transport_cost=capacity_cost([CapacityLeg("truck", 850, 7000)]),
        payer=PayerPolicy.CLIENT,
    )
"""

import math
from enum import Enum
from .constraints import BUDGET, EXCHANGE_RATE, PAYER, STRATEGY
from .errors import InvalidInputError, InvalidMarginError, NonConvergenceError, PricingFunctionError
from .logging import LogEvent, get_logger, log_debug, log_info
from .pricing import QuantityFn, QuantityValue, resolve, sell_price

# Create module logger
logger = get_logger("solver")

DEFAULT_MAX_ITERATIONS = 1_000_000


class PayerPolicy(str, Enum):
    """Which party's budget carries the transport cost."""

    CLIENT = "client"
    PURCHASER = "purchaser"

    def __str__(self) -> str:
        return self.value


class SearchStrategy(str, Enum):
    """How the affordable quantity is searched for.

    REFINEMENT scales an overshooting estimate down by the overshoot ratio and
    climbs one unit at a time while the next unit fits, never climbing back
    into a quantity already seen to overshoot. BISECTION brackets the
    answer by doubling and then binary-searches it; it assumes total cost never
    decreases as quantity grows.
    """

    REFINEMENT = "refinement"
    BISECTION = "bisection"

    def __str__(self) -> str:
        return self.value


class CostModel:
    """Evaluates the cost model for one solve call.

    Every call re-evaluates the pricing functions at the requested quantity
    and checks what they return.
    """

    def __init__(
        self,
        unit_price: QuantityFn,
        margin: QuantityFn,
        transport_cost: QuantityFn,
        payer: PayerPolicy,
    ):
        self._unit_price = unit_price
        self._margin = margin
        self._transport_cost = transport_cost
        self.payer = payer

    def unit_price(self, quantity: int) -> float:
        value = self._unit_price(quantity)
        if not _is_number(value) or not math.isfinite(value) or value <= 0:
            raise PricingFunctionError(
                f"Unit price must be a finite positive number, got {value!r} at quantity {quantity}",
                quantity=quantity,
                function_name="unit_price",
                value=value,
            )
        return float(value)

    def margin(self, quantity: int) -> float:
        value = self._margin(quantity)
        if not _is_number(value) or math.isnan(value):
            raise InvalidMarginError(
                f"Margin must be a number, got {value!r} at quantity {quantity}",
                quantity=quantity,
                margin=value,
            )
        if value >= 1 or value < 0:
            raise InvalidMarginError(
                f"Margin must be in [0, 1), got {value} at quantity {quantity}",
                quantity=quantity,
                margin=value,
            )
        return float(value)

    def transport_cost(self, quantity: int) -> float:
        value = self._transport_cost(quantity)
        if not _is_number(value) or not math.isfinite(value) or value < 0:
            raise PricingFunctionError(
                f"Transport cost must be a finite non-negative number, got {value!r} at quantity {quantity}",
                quantity=quantity,
                function_name="transport_cost",
                value=value,
            )
        return float(value)

    def sell_price(self, quantity: int) -> float:
        return sell_price(self.unit_price(quantity), self.margin(quantity))

    def charged_transport(self, quantity: int) -> float:
        """Transport counted against the client budget for ``quantity`` units."""
        if self.payer is PayerPolicy.CLIENT:
            return self.transport_cost(quantity)
        return 0.0

    def charge(self, quantity: int, sell: float, transport: float) -> float:
        """Combine an evaluated sell price and transport into a total cost.

        Every total the solver compares against the budget goes through here,
        so equal inputs always round the same way.
        """
        return sell * quantity + transport

    def total_cost(self, quantity: int) -> float:
        """Total cost charged to the client for ``quantity`` units."""
        return self.charge(quantity, self.sell_price(quantity), self.charged_transport(quantity))

    def next_total_cost(self, quantity: int, sell: float, transport: float) -> float:
        """Cost used to decide whether ``quantity + 1`` units still fit.

        The marginal cost of one more unit, ``sell(quantity + 1)`` plus the
        change in charged transport, is added to the cost of ``quantity``
        units. While the sell price stays the same that sum is the exact
        ``total_cost(quantity + 1)`` and is computed the same way. Across a
        price breakpoint the lower of the marginal estimate and the exact
        cost is returned, so a volume discount is never missed.

        Args:
            quantity: Current quantity
            sell: Sell price already evaluated at ``quantity``
            transport: Charged transport already evaluated at ``quantity``

        Returns:
            Cost to compare against the converted budget
        """
        sell_next = self.sell_price(quantity + 1)
        transport_next = self.charged_transport(quantity + 1)
        exact = self.charge(quantity + 1, sell_next, transport_next)
        if sell_next == sell:
            return exact
        marginal = self.charge(quantity, sell, transport) + sell_next + (transport_next - transport)
        return min(exact, marginal)

    def floor_cost(self) -> float:
        """Cost of a single unit, below which nothing is affordable."""
        return self.total_cost(1)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def payer_policy(value: str) -> PayerPolicy:
    """Coerce a payer name (any case) to a ``PayerPolicy``.

    Raises:
        InvalidInputError: If the name is not a known payer
    """
    PAYER.validate("payer", value)
    return PayerPolicy(value.lower())


def search_strategy(value: str) -> SearchStrategy:
    STRATEGY.validate("strategy", value)
    return SearchStrategy(value.lower())


def converted_budget(budget: float, exchange_rate: float) -> float:
    """Convert a client-currency budget into pricing currency.

    Raises:
        InvalidInputError: If the budget is negative or the rate non-positive
    """
    BUDGET.validate("budget", budget)
    EXCHANGE_RATE.validate("exchange_rate", exchange_rate)
    return budget * exchange_rate


def solve(
    budget: float,
    exchange_rate: float,
    unit_price: QuantityValue,
    margin: QuantityValue,
    transport_cost: QuantityValue,
    payer: PayerPolicy,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    strategy: SearchStrategy = SearchStrategy.REFINEMENT,
) -> int:
    """Compute the maximum number of items the client can afford.

    Args:
        budget: Client budget in client currency (>= 0)
        exchange_rate: Pricing-currency units per client-currency unit (> 0)
        unit_price: Purchase price per unit in pricing currency
        margin: Desired margin as a fraction of the sell price, in ``[0, 1)``
        transport_cost: Transport cost for a whole shipment in pricing currency
        payer: Whether transport counts against the client's budget
        max_iterations: Cap on overshoot corrections (refinement) or search
            steps (bisection), guarding against cost models that never settle
        strategy: Search strategy

    Returns:
        Largest affordable item count (0 when not even one unit fits)

    Raises:
        InvalidInputError: Negative budget, non-positive exchange rate, unknown
            payer or strategy, or an iteration cap below 1
        InvalidMarginError: A probed margin is outside ``[0, 1)``
        PricingFunctionError: A probed price or transport cost is unusable
        NonConvergenceError: The search exceeded ``max_iterations``
    """
    available = converted_budget(budget, exchange_rate)
    if max_iterations < 1:
        raise InvalidInputError(
            f"max_iterations must be at least 1, got {max_iterations}",
            param_name="max_iterations",
            value=max_iterations,
        )
    payer = payer_policy(payer)
    strategy = search_strategy(strategy)

    model = CostModel(resolve(unit_price), resolve(margin), resolve(transport_cost), payer)

    floor_cost = model.floor_cost()
    if available < floor_cost:
        log_debug(
            LogEvent.SOLVER,
            "Budget below single-unit cost",
            available=available,
            floor_cost=floor_cost,
        )
        return 0

    if strategy is SearchStrategy.BISECTION:
        count = _bisect(model, available, max_iterations)
    else:
        count = _refine(model, available, max_iterations)

    log_info(
        LogEvent.SOLVER,
        f"Solved item count {count}",
        item_count=count,
        budget=budget,
        available=available,
        payer=str(payer),
        strategy=str(strategy),
    )
    return count


def _refine(model: CostModel, available: float, max_iterations: int) -> int:
    if model.payer is PayerPolicy.CLIENT:
        # Seed from single-unit pricing, ignoring transport
        estimate = math.floor(available / model.sell_price(1))
    else:
        estimate = 1

    # Smallest quantity already seen to overshoot; climbing stops below it
    ceiling = math.inf
    corrections = 0
    steps = 0
    while True:
        steps += 1
        sell = model.sell_price(estimate)
        transport = model.charged_transport(estimate)
        total = model.charge(estimate, sell, transport)

        if total > available:
            if corrections >= max_iterations:
                raise NonConvergenceError(
                    f"Quantity search did not settle after {corrections} corrections "
                    f"(last estimate {estimate})",
                    iterations=corrections,
                    last_estimate=estimate,
                )
            corrections += 1
            ceiling = estimate
            previous = estimate
            estimate = max(1, min(math.floor(estimate * (available / total)), estimate - 1))
            log_debug(
                LogEvent.SOLVER,
                "Estimate overshoots budget, scaling down",
                previous=previous,
                estimate=estimate,
                total_cost=total,
            )
        elif estimate + 1 >= ceiling:
            break
        elif model.next_total_cost(estimate, sell, transport) <= available:
            estimate += 1
        else:
            break

    log_debug(
        LogEvent.SOLVER,
        "Refinement finished",
        steps=steps,
        corrections=corrections,
        estimate=estimate,
    )
    return estimate


def _bisect(model: CostModel, available: float, max_iterations: int) -> int:
    def fits(quantity: int) -> bool:
        return model.total_cost(quantity) <= available

    iterations = 0

    def step(estimate: int) -> None:
        nonlocal iterations
        if iterations >= max_iterations:
            raise NonConvergenceError(
                f"Bisection did not settle after {iterations} iterations (last estimate {estimate})",
                iterations=iterations,
                last_estimate=estimate,
            )
        iterations += 1

    # One unit fits here, so [low, high) brackets the answer once high stops fitting
    low, high = 1, 2
    while fits(high):
        step(high)
        low, high = high, high * 2

    while high - low > 1:
        step(low)
        middle = (low + high) // 2
        if fits(middle):
            low = middle
        else:
            high = middle

    log_debug(LogEvent.SOLVER, "Bisection finished", iterations=iterations, estimate=low)
    return low
