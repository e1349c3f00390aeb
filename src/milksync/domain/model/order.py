"""Order aggregate: a distributor order and its delivery lock.

The Order owns its line items. Once delivered it is locked for good:
delivery is the only transition and it is terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from milksync.domain.exceptions import ValidationError
from milksync.domain.model.product import Product
from milksync.domain.model.value_objects import Actor, Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


DEFAULT_UNIT = "tub"
MAX_LINE_ITEMS = 50


@dataclass
class OrderLineItem:
    """One product line of an order, counted in tubs.

    ``unit`` is a display label only; it never drives pricing.
    """

    product: Product
    quantity: Quantity
    unit: str = DEFAULT_UNIT

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def product_name(self) -> str:
        return self.product.name


@dataclass(frozen=True)
class DamageRecord:
    """Packets of one product found damaged at delivery."""

    product_id: str
    product_name: str
    damaged_packets: int

    def __post_init__(self) -> None:
        if isinstance(self.damaged_packets, bool) or not isinstance(self.damaged_packets, int):
            raise ValidationError("Damaged packets must be an integer")
        if self.damaged_packets < 0:
            raise ValidationError("Damaged packets cannot be negative")


@dataclass
class Order:
    """Aggregate root for distributor orders.

    The ``__init__`` is intentionally simple so repositories can
    reconstitute orders exactly as the backend reports them.
    """

    id: str
    distributor_id: str
    order_date: date
    items: list[OrderLineItem]
    status: OrderStatus = OrderStatus.PENDING
    locked: bool = False
    damaged_products: list[DamageRecord] = field(default_factory=list)
    updated_by: Actor | None = None
    distributor_name: str = ""
    company_name: str = ""
    final_bill_amount: Money | None = None
    total_damaged_cost: Money | None = None

    # --- Guards ---------------------------------------------------------------

    @property
    def is_editable(self) -> bool:
        return not self.locked and self.status != OrderStatus.DELIVERED

    def ensure_editable(self) -> None:
        if self.status == OrderStatus.DELIVERED:
            raise ValidationError(f"Order {self.id} is already delivered")
        if self.locked:
            raise ValidationError(f"Order {self.id} is locked")

    # --- State transitions ----------------------------------------------------

    def mark_delivered(
        self,
        damaged: list[DamageRecord],
        updated_by: Actor,
        final_bill: Money | None = None,
        damaged_cost: Money | None = None,
    ) -> None:
        """Transition pending -> delivered and lock the order.

        Only ever applied after the backend confirmed the delivery.
        """
        self.ensure_editable()
        if self.status != OrderStatus.PENDING:
            raise ValidationError(
                f"Cannot deliver order in {self.status.value} status"
            )
        self.status = OrderStatus.DELIVERED
        self.locked = True
        self.damaged_products = [d for d in damaged if d.damaged_packets > 0]
        self.updated_by = updated_by
        self.final_bill_amount = final_bill
        self.total_damaged_cost = damaged_cost

    # --- Totals --------------------------------------------------------------

    @property
    def total_tubs(self) -> int:
        return sum(item.quantity.value for item in self.items)
