"""What the backend reports back after it accepted a delivery."""

from __future__ import annotations

from dataclasses import dataclass, field

from milksync.domain.model.order import DamageRecord
from milksync.domain.model.value_objects import Actor, Money


@dataclass(frozen=True)
class DeliveryConfirmation:
    """Result of ``POST /orders/:id/deliver``.

    ``credited_amount`` is what was added to the distributor wallet and
    ``wallet_balance`` the balance afterwards.
    """

    order_id: str
    bill_generated: bool
    credited_amount: Money
    wallet_balance: Money
    final_bill_amount: Money | None = None
    original_bill_amount: Money | None = None
    total_damaged_cost: Money | None = None
    bill_id: str | None = None
    message: str = ""
    damaged_products: list[DamageRecord] = field(default_factory=list)
    updated_by: Actor | None = None
