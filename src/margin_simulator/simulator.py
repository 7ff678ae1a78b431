"""Shipment configuration and the MarginSimulator facade.

``MarginSimulator`` binds one shipment configuration to the solver and exposes
the derived reporting values. Typical usage:

    from margin_simulator import (
        CapacityLeg, Constant, DesiredMargin, MarginSimulator, PayerPolicy,
        ShipmentConfig, capacity_cost,
    )

    simulator = MarginSimulator(
        ShipmentConfig(
            budget=50_000,
            price_per_item=Constant(3.98),
            margin=DesiredMargin(Constant(0.2)),
            transport_cost=capacity_cost([
                CapacityLeg("container", 6000, 2750),
                CapacityLeg("truck", 850, 7000),
            ]),
            payer=PayerPolicy.CLIENT,
        )
    )
    simulator.log_number_of_sellable_items()
"""

import dataclasses
import math
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .constraints import BUDGET, EXCHANGE_RATE
from .errors import InvalidInputError
from .logging import LogEvent, get_logger, log_info
from .pricing import FunctionOf, MarginSource, QuantityValue, resolve_margin
from .quote import Quote, build_quote
from .solver import (
    DEFAULT_MAX_ITERATIONS,
    PayerPolicy,
    SearchStrategy,
    payer_policy,
    search_strategy,
    solve,
)

# Create module logger
logger = get_logger("simulator")

# Client currency -> pricing currency (1 dollar = 0.88 euros)
DEFAULT_EXCHANGE_RATE = 0.88

ENV_EXCHANGE_RATE = "MARGIN_SIMULATOR_EXCHANGE_RATE"
ENV_MAX_ITERATIONS = "MARGIN_SIMULATOR_MAX_ITERATIONS"


class SimulatorConfig:
    """Process-wide settings for the simulator."""

    def __init__(
        self,
        exchange_rate: Optional[float] = None,
        max_iterations: Optional[int] = None,
        strategy: SearchStrategy = SearchStrategy.REFINEMENT,
    ):
        """Initialize simulator configuration.

        Args:
            exchange_rate: Pricing-currency units per client-currency unit. If
                           None, ``MARGIN_SIMULATOR_EXCHANGE_RATE`` or 0.88 is used.
            max_iterations: Iteration cap for the quantity search. If None,
                            ``MARGIN_SIMULATOR_MAX_ITERATIONS`` or the default is used.
            strategy: Quantity search strategy.
        """
        if exchange_rate is None:
            exchange_rate = _env_number(ENV_EXCHANGE_RATE, float, DEFAULT_EXCHANGE_RATE)
        if max_iterations is None:
            max_iterations = _env_number(ENV_MAX_ITERATIONS, int, DEFAULT_MAX_ITERATIONS)

        EXCHANGE_RATE.validate("exchange_rate", exchange_rate)
        if max_iterations < 1:
            raise InvalidInputError(
                f"max_iterations must be at least 1, got {max_iterations}",
                param_name="max_iterations",
                value=max_iterations,
            )

        self.exchange_rate = exchange_rate
        self.max_iterations = max_iterations
        self.strategy = search_strategy(strategy)


def _env_number(name: str, kind: type, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return kind(raw)
    except ValueError as e:
        raise InvalidInputError(
            f"Environment variable {name} must be a {kind.__name__}, got '{raw}'",
            param_name=name,
            value=raw,
        ) from e


@dataclass(frozen=True)
class ShipmentConfig:
    """One shipment negotiation.

    - budget: client budget in client currency
    - price_per_item: purchase price per unit in pricing currency
    - margin: how the desired margin is obtained
    - transport_cost: shipment transport cost in pricing currency
    - payer: who pays for transport
    """

    budget: float
    price_per_item: QuantityValue
    margin: MarginSource
    transport_cost: QuantityValue
    payer: PayerPolicy = PayerPolicy.CLIENT
    exchange_rate: Optional[float] = None

    def __post_init__(self) -> None:  # noqa: D401
        """Validate the scalar fields at construction time."""
        BUDGET.validate("budget", self.budget)
        if self.exchange_rate is not None:
            EXCHANGE_RATE.validate("exchange_rate", self.exchange_rate)
        object.__setattr__(self, "payer", payer_policy(self.payer))

    def with_budget(self, budget: float) -> "ShipmentConfig":
        return dataclasses.replace(self, budget=budget)

    def with_payer(self, payer: PayerPolicy) -> "ShipmentConfig":
        return dataclasses.replace(self, payer=payer_policy(payer))


class MarginSimulator:
    """Affordability calculations for one shipment."""

    def __init__(self, shipment: ShipmentConfig, config: Optional[SimulatorConfig] = None):
        """Initialize the simulator.

        Args:
            shipment: Shipment to evaluate
            config: Simulator settings. If None, defaults (and environment
                    overrides) are used. A shipment-level exchange rate takes
                    precedence over the configured one.
        """
        self.shipment = shipment
        self.config = config or SimulatorConfig()

    @property
    def exchange_rate(self) -> float:
        if self.shipment.exchange_rate is not None:
            return self.shipment.exchange_rate
        return self.config.exchange_rate

    def _margin_fn(self) -> FunctionOf:
        # Resolved per call; the solver evaluates it at every probed quantity
        return resolve_margin(self.shipment.margin, self.shipment.price_per_item, self.exchange_rate)

    def calculate_number_of_sellable_items(self) -> int:
        """Maximum number of items the client can buy with their budget."""
        return solve(
            budget=self.shipment.budget,
            exchange_rate=self.exchange_rate,
            unit_price=self.shipment.price_per_item,
            margin=self._margin_fn(),
            transport_cost=self.shipment.transport_cost,
            payer=self.shipment.payer,
            max_iterations=self.config.max_iterations,
            strategy=self.config.strategy,
        )

    def quote(self) -> Quote:
        """Solve and compute every reporting value for the shipment."""
        item_count = self.calculate_number_of_sellable_items()
        return build_quote(
            item_count=item_count,
            budget=self.shipment.budget,
            exchange_rate=self.exchange_rate,
            unit_price=self.shipment.price_per_item,
            margin=self._margin_fn(),
            transport_cost=self.shipment.transport_cost,
            payer=self.shipment.payer,
        )

    def calculate_margin_in_client_currency(self) -> float:
        return self.quote().margin_in_client_currency

    def calculate_total_shipping_cost(self) -> float:
        """Transport cost for the sellable items, in client currency."""
        return self.quote().shipping_cost_in_client_currency

    def calculate_total_cost_per_item(self) -> float:
        """Blended cost per item (sell price plus shipping share), in client currency."""
        return self.quote().total_cost_per_unit_in_client_currency

    def calculate_margin_rate(self, item_count: int) -> float:
        """Margin fraction applying at ``item_count`` units."""
        return self._margin_fn().fn(max(item_count, 1))

    def sweep(self, budgets: Iterable[float]) -> List[Tuple[float, Quote]]:
        """Quote the same shipment at several budgets.

        Args:
            budgets: Client budgets in client currency

        Returns:
            ``(budget, Quote)`` pairs in input order
        """
        series = []
        for budget in budgets:
            simulator = MarginSimulator(self.shipment.with_budget(budget), self.config)
            series.append((budget, simulator.quote()))
        return series

    def log_number_of_sellable_items(self) -> None:
        item_count = self.calculate_number_of_sellable_items()
        log_info(
            LogEvent.REPORTING,
            f"Number of items that can be shipped to the client: {item_count}",
            item_count=item_count,
        )

    def log_margin_in_client_currency(self) -> None:
        margin = self.calculate_margin_in_client_currency()
        log_info(LogEvent.REPORTING, f"Margin in client currency: {margin:.2f}", margin=margin)

    def log_total_shipping_cost(self) -> None:
        shipping = self.calculate_total_shipping_cost()
        log_info(LogEvent.REPORTING, f"Total shipping cost: {shipping:.2f}", shipping=shipping)

    def log_total_cost_per_item(self) -> None:
        per_item = self.calculate_total_cost_per_item()
        log_info(
            LogEvent.REPORTING,
            f"Total cost per item (all included): {per_item:.2f}",
            total_cost_per_item=per_item,
        )


def budget_range(start: float, stop: float, step: float) -> List[float]:
    """Budgets from ``start`` to ``stop`` inclusive in increments of ``step``."""
    if step <= 0:
        raise InvalidInputError(f"Sweep step must be positive, got {step}", param_name="step", value=step)
    if stop < start:
        raise InvalidInputError(
            f"Sweep stop ({stop}) must not be below start ({start})", param_name="stop", value=stop
        )
    # Tolerate float steps landing a hair short of the inclusive stop
    count = math.floor((stop - start) / step + 1e-9) + 1
    return [start + i * step for i in range(count)]
