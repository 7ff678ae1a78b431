"""Pricing data structures for the margin simulator.

Quantity-dependent inputs (unit price, margin, transport cost) are expressed
as a tagged variant:

- ``Constant``: the same value for every quantity
- ``FunctionOf``: an arbitrary ``quantity -> value`` callable

Both resolve to a plain callable once per solve. ``tiered`` and
``capacity_cost`` build the step functions used for volume discounts and
truck/container pricing.
"""

import bisect
import math
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Union

from .logging import LogEvent, log_warning

QuantityFn = Callable[[int], float]


@dataclass(frozen=True)
class Constant:
    """Quantity-independent value."""

    value: float

    def __post_init__(self) -> None:  # noqa: D401
        """Reject values that are not real numbers."""
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Constant value must be a number, got {type(self.value).__name__}")

    def resolve(self) -> QuantityFn:
        value = float(self.value)
        return lambda quantity: value

    def describe(self) -> str:
        return f"{self.value:g}"


@dataclass(frozen=True)
class FunctionOf:
    """Value computed from the quantity by a pure function."""

    fn: QuantityFn = field(compare=False)
    description: str = "f(n)"

    def __post_init__(self) -> None:  # noqa: D401
        """Reject non-callables."""
        if not callable(self.fn):
            raise TypeError("FunctionOf requires a callable")

    def resolve(self) -> QuantityFn:
        return self.fn

    def describe(self) -> str:
        return self.description


QuantityValue = Union[Constant, FunctionOf]


def resolve(value: QuantityValue) -> QuantityFn:
    """Resolve a tagged quantity value to a callable.

    Args:
        value: ``Constant`` or ``FunctionOf``

    Returns:
        Callable mapping a quantity to a value

    Raises:
        TypeError: If ``value`` is not one of the variants
    """
    if isinstance(value, (Constant, FunctionOf)):
        return value.resolve()
    raise TypeError(
        f"Expected Constant or FunctionOf, got {type(value).__name__}. "
        "Wrap plain numbers in Constant(...) and callables in FunctionOf(...)."
    )


@dataclass(frozen=True)
class PriceTier:
    """Price applying from ``min_quantity`` units upwards."""

    min_quantity: int
    price: float

    def __post_init__(self) -> None:  # noqa: D401
        """Basic validation of the breakpoint."""
        if self.min_quantity < 0:
            raise ValueError("Tier min_quantity must be non-negative")


@dataclass(frozen=True)
class CapacityLeg:
    """One transport leg charged per started vehicle.

    - name: display name (``truck``, ``container``)
    - cost: cost per vehicle in pricing currency
    - capacity: units per vehicle
    """

    name: str
    cost: float
    capacity: int

    def __post_init__(self) -> None:  # noqa: D401
        """Basic validation ensuring non-negative cost and positive capacity."""
        if self.cost < 0:
            raise ValueError(f"Cost for leg '{self.name}' must be non-negative")
        if self.capacity <= 0:
            raise ValueError(f"Capacity for leg '{self.name}' must be positive")

    def vehicles(self, quantity: int) -> int:
        return math.ceil(quantity / self.capacity)


def tiered(tiers: Sequence[PriceTier]) -> FunctionOf:
    """Build a step function from price tiers.

    The tier with the greatest ``min_quantity`` not above the probed quantity
    applies. Quantities below the first breakpoint use the first tier.

    Args:
        tiers: Tiers in any order; breakpoints must be distinct

    Returns:
        ``FunctionOf`` evaluating the tiers

    Raises:
        ValueError: If no tiers are given or breakpoints repeat
    """
    if not tiers:
        raise ValueError("At least one tier is required")
    ordered: List[PriceTier] = sorted(tiers, key=lambda t: t.min_quantity)
    breakpoints = [t.min_quantity for t in ordered]
    if len(set(breakpoints)) != len(breakpoints):
        raise ValueError(f"Duplicate tier breakpoints: {breakpoints}")
    prices = [float(t.price) for t in ordered]

    def price_at(quantity: int) -> float:
        index = bisect.bisect_right(breakpoints, quantity) - 1
        return prices[max(index, 0)]

    description = ", ".join(f"{t.price:g} from {t.min_quantity}" for t in ordered)
    return FunctionOf(price_at, description=f"tiered({description})")


def capacity_cost(legs: Sequence[CapacityLeg]) -> FunctionOf:
    """Build a transport cost function charged per started vehicle.

    ``cost(n) = sum(leg.cost * ceil(n / leg.capacity) for leg in legs)``

    Args:
        legs: Transport legs, e.g. one truck and one container leg

    Returns:
        ``FunctionOf`` evaluating the total transport cost
    """
    legs = tuple(legs)

    def cost_at(quantity: int) -> float:
        return float(sum(leg.cost * leg.vehicles(quantity) for leg in legs))

    description = " + ".join(f"{leg.cost:g}*ceil(n/{leg.capacity})" for leg in legs) or "0"
    return FunctionOf(cost_at, description=description)


@dataclass(frozen=True)
class DesiredMargin:
    """Margin given directly as a fraction of the sell price."""

    value: QuantityValue

    def resolve(self, unit_price: QuantityFn, exchange_rate: float) -> QuantityFn:
        return resolve(self.value)


@dataclass(frozen=True)
class MarginFromClientPrice:
    """Margin inferred from the per-unit price the client accepts.

    ``client_price`` is expressed in client currency; the margin is whatever
    makes the sell price equal to it:
    ``1 - unit_price(n) / (client_price(n) * exchange_rate)``.
    """

    client_price: QuantityValue

    def resolve(self, unit_price: QuantityFn, exchange_rate: float) -> QuantityFn:
        client_price = resolve(self.client_price)

        def margin_at(quantity: int) -> float:
            accepted = client_price(quantity) * exchange_rate
            if accepted <= 0:
                # Makes the margin undefined; reported by the solver's margin check
                log_warning(
                    LogEvent.PRICING,
                    "Client price is not positive, margin is undefined",
                    quantity=quantity,
                    client_price=accepted,
                )
                return math.inf
            return 1.0 - unit_price(quantity) / accepted

        return margin_at


MarginSource = Union[DesiredMargin, MarginFromClientPrice]


def resolve_margin(source: MarginSource, unit_price: QuantityValue, exchange_rate: float) -> FunctionOf:
    """Turn a margin strategy into a margin function.

    Args:
        source: ``DesiredMargin`` or ``MarginFromClientPrice``
        unit_price: Unit price used by ``MarginFromClientPrice``
        exchange_rate: Pricing-currency units per client-currency unit

    Returns:
        ``FunctionOf`` giving the margin at each quantity
    """
    if isinstance(source, DesiredMargin):
        return FunctionOf(resolve(source.value), description=source.value.describe())
    if isinstance(source, MarginFromClientPrice):
        fn = source.resolve(resolve(unit_price), exchange_rate)
        return FunctionOf(fn, description=f"from client price {source.client_price.describe()}")
    raise TypeError(f"Unknown margin source: {type(source).__name__}")


def sell_price(price: float, margin: float) -> float:
    """Inflate a purchase price by a margin: ``price / (1 - margin)``."""
    return price / (1.0 - margin)

