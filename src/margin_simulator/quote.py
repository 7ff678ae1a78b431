"""Quote values derived from a solved item count.

Everything here is a post-computation: the pricing functions are evaluated
once more at the final item count and converted back to client currency.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict

from .logging import LogEvent, log_debug
from .pricing import QuantityValue, resolve
from .solver import CostModel, PayerPolicy, payer_policy


@dataclass(frozen=True)
class Quote:
    """Outcome of one affordability calculation.

    Money fields ending in ``_in_client_currency`` are converted back with the
    exchange rate; ``sell_price_per_unit`` stays in pricing currency.
    """

    item_count: int
    budget: float
    payer: PayerPolicy
    sell_price_per_unit: float
    margin_rate: float
    margin_in_client_currency: float
    shipping_cost_in_client_currency: float
    total_cost_per_unit_in_client_currency: float

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["payer"] = str(self.payer)
        return data


def build_quote(
    item_count: int,
    budget: float,
    exchange_rate: float,
    unit_price: QuantityValue,
    margin: QuantityValue,
    transport_cost: QuantityValue,
    payer: PayerPolicy,
) -> Quote:
    """Compute the reporting values for a solved item count.

    Args:
        item_count: Result of ``solve``
        budget: Client budget in client currency
        exchange_rate: Pricing-currency units per client-currency unit
        unit_price: Unit price used for the solve
        margin: Margin used for the solve
        transport_cost: Transport cost used for the solve
        payer: Payer policy used for the solve

    Returns:
        Quote for ``item_count`` units. With zero items nothing ships, so all
        money values are zero and the sell price is the single-unit price.
    """
    payer = payer_policy(payer)
    model = CostModel(resolve(unit_price), resolve(margin), resolve(transport_cost), payer)

    if item_count == 0:
        return Quote(
            item_count=0,
            budget=budget,
            payer=payer,
            sell_price_per_unit=model.sell_price(1),
            margin_rate=model.margin(1),
            margin_in_client_currency=0.0,
            shipping_cost_in_client_currency=0.0,
            total_cost_per_unit_in_client_currency=0.0,
        )

    price = model.unit_price(item_count)
    margin_rate = model.margin(item_count)
    sell = model.sell_price(item_count)
    shipping = model.transport_cost(item_count)

    cost = price * item_count
    margin_amount = cost / (1 - margin_rate) - cost

    per_unit = sell
    if payer is PayerPolicy.CLIENT:
        per_unit += shipping / item_count

    quote = Quote(
        item_count=item_count,
        budget=budget,
        payer=payer,
        sell_price_per_unit=sell,
        margin_rate=margin_rate,
        margin_in_client_currency=margin_amount / exchange_rate,
        shipping_cost_in_client_currency=shipping / exchange_rate,
        total_cost_per_unit_in_client_currency=per_unit / exchange_rate,
    )
    log_debug(LogEvent.QUOTE, "Built quote", **quote.to_dict())
    return quote
