"""Domain service: damage assessment at delivery time.

Orders are counted in tubs while damage is counted in packets. The
``DamageSheet`` holds one line per order line with the operator's
damaged-packet count and turns the sheet into the adjusted bill.

Entries are clamped, never rejected: a count above what was delivered is
brought down to the delivered packet count, a negative or unreadable
count becomes zero.
"""

from __future__ import annotations

from dataclasses import dataclass

from milksync.domain.exceptions import ValidationError
from milksync.domain.model.order import DamageRecord, Order, OrderLineItem
from milksync.domain.model.value_objects import Money
from milksync.domain.service.pricing import LinePricing, resolve_pricing


@dataclass
class DamageLine:
    item: OrderLineItem
    pricing: LinePricing
    damaged_packets: int = 0

    @property
    def product_id(self) -> str:
        return self.item.product_id

    @property
    def product_name(self) -> str:
        return self.item.product_name

    @property
    def ordered_tubs(self) -> int:
        return self.item.quantity.value

    @property
    def max_damaged_packets(self) -> int:
        return self.ordered_tubs * self.pricing.packets_per_tub

    @property
    def line_total(self) -> Money:
        return self.pricing.line_total(self.ordered_tubs)

    @property
    def damaged_cost(self) -> Money:
        return self.pricing.damaged_cost(self.damaged_packets)


@dataclass(frozen=True)
class BillSummary:
    """Exact bill figures; round only via ``Money.display``/``str``."""

    total_bill: Money
    total_damaged_cost: Money
    final_bill: Money
    damaged_lines: int


def parse_packet_count(raw: object) -> int:
    """Read an operator entry as a packet count; anything unreadable is 0."""
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        return 0


class DamageSheet:

    def __init__(self, order: Order) -> None:
        self._lines = [
            DamageLine(item=item, pricing=resolve_pricing(item.product))
            for item in order.items
        ]

    @property
    def lines(self) -> list[DamageLine]:
        return list(self._lines)

    def line_for(self, product_id: str) -> DamageLine:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        raise ValidationError(
            f"Cannot record damage for product '{product_id}': it is not in this order"
        )

    def set_damage(self, product_id: str, raw: object) -> int:
        """Record damaged packets for a line; return the stored (clamped) count."""
        line = self.line_for(product_id)
        packets = parse_packet_count(raw)
        line.damaged_packets = min(max(packets, 0), line.max_damaged_packets)
        return line.damaged_packets

    # --- Results --------------------------------------------------------------

    @property
    def has_damage(self) -> bool:
        return any(line.damaged_packets > 0 for line in self._lines)

    def damage_records(self) -> list[DamageRecord]:
        """Non-zero damage only; zero lines are never reported."""
        return [
            DamageRecord(
                product_id=line.product_id,
                product_name=line.product_name,
                damaged_packets=line.damaged_packets,
            )
            for line in self._lines
            if line.damaged_packets > 0
        ]

    def unpriced_lines(self) -> list[DamageLine]:
        return [line for line in self._lines if not line.pricing.is_priced]

    def summary(self) -> BillSummary:
        total_bill = Money.zero()
        total_damaged = Money.zero()
        for line in self._lines:
            total_bill = total_bill + line.line_total
            total_damaged = total_damaged + line.damaged_cost
        return BillSummary(
            total_bill=total_bill,
            total_damaged_cost=total_damaged,
            final_bill=total_bill.minus_floored(total_damaged),
            damaged_lines=sum(1 for line in self._lines if line.damaged_packets > 0),
        )
