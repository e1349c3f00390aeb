"""Domain service: price resolution for a product line.

Product records are not uniform: some carry a price per tub, some only a
price per packet plus the packets-per-tub count, and a few carry neither.
``resolve_pricing`` turns whatever is present into a complete
``LinePricing`` using one fixed fallback order:

1. price per tub   = ``cost_per_tub``, else ``cost_per_packet * packets_per_tub``
2. price per packet = ``cost_per_packet``, else ``price_per_tub / packets_per_tub``
3. packets per tub  = ``packets_per_tub``, else 1

A zero counts as absent. A product with no resolvable tub price is priced
at zero and flagged through ``is_priced`` so callers can warn the operator
instead of failing the whole order.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from milksync.domain.model.product import Product
from milksync.domain.model.value_objects import Money


@dataclass(frozen=True)
class LinePricing:
    price_per_tub: Money
    cost_per_packet: Money
    packets_per_tub: int
    is_priced: bool = True

    def line_total(self, tubs: int) -> Money:
        return self.price_per_tub * tubs

    def damaged_cost(self, packets: int) -> Money:
        return self.cost_per_packet * packets


def resolve_pricing(product: Product) -> LinePricing:
    packets_per_tub = product.packets_per_tub or 1

    price_per_tub: Decimal | None = product.cost_per_tub or None
    if price_per_tub is None and product.cost_per_packet and product.packets_per_tub:
        price_per_tub = product.cost_per_packet * product.packets_per_tub

    cost_per_packet: Decimal | None = product.cost_per_packet or None
    if cost_per_packet is None and price_per_tub is not None:
        cost_per_packet = price_per_tub / Decimal(packets_per_tub)

    # A packet price alone still prices damage, but the tub total is unknown.
    return LinePricing(
        price_per_tub=Money(price_per_tub) if price_per_tub is not None else Money.zero(),
        cost_per_packet=Money(cost_per_packet) if cost_per_packet is not None else Money.zero(),
        packets_per_tub=packets_per_tub,
        is_priced=price_per_tub is not None,
    )
