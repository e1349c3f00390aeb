"""Data Transfer Objects handed from the use cases to the CLI.

Amounts on display DTOs are pre-formatted strings. Receipts keep Money.
"""

from __future__ import annotations

from dataclasses import dataclass

from milksync.domain.model.order import Order
from milksync.domain.model.value_objects import Money
from milksync.domain.service.damage_assessment import BillSummary


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    product_name: str
    quantity: int
    unit: str
    price_per_tub: str  # formatted, e.g. "₹50.00"
    line_total: str
    priced: bool = True


@dataclass(frozen=True)
class DamageRecordDTO:
    product_name: str
    damaged_packets: int


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    distributor: str
    status: str
    locked: bool
    order_date: str
    items: list[OrderLineItemDTO]
    total: str
    damaged_products: list[DamageRecordDTO]
    updated_by: str | None = None
    final_bill: str | None = None


@dataclass(frozen=True)
class OrderSummaryDTO:
    """Output: one row of an order list."""

    id: str
    distributor: str
    order_date: str
    status: str
    locked: bool
    total_tubs: int
    line_count: int


@dataclass(frozen=True)
class OrderListDTO:
    orders: list[OrderSummaryDTO]
    pending: int
    delivered: int


@dataclass(frozen=True)
class DeliverySummary:
    """What the operator must approve before a damaged delivery is submitted."""

    order_id: str
    bill: BillSummary

    @property
    def damaged_lines(self) -> int:
        return self.bill.damaged_lines

    def message(self) -> str:
        return (
            f"You have marked {self.bill.damaged_lines} product(s) as damaged "
            f"with a total cost of {self.bill.total_damaged_cost}.\n"
            f"This will reduce the final bill from {self.bill.total_bill} "
            f"to {self.bill.final_bill}."
        )


@dataclass(frozen=True)
class DeliveryReceipt:
    """Output of a confirmed delivery.

    Amounts stay as Money so callers can compare them exactly; ``str()``
    gives the display form.
    """

    order: Order
    bill_generated: bool
    credited_amount: Money
    wallet_balance: Money
    final_bill: Money
    original_bill: Money
    total_damaged_cost: Money
    bill_id: str | None
    message: str
