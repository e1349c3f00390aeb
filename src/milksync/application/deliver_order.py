"""Application service: Deliver Order use case (delivery reconciliation).

Turns a pending order plus the operator's damaged-packet counts into a
delivered order. The backend generates the bill, credits the distributor
wallet with the adjusted amount and locks the order; this handler
computes the same figures up front, asks the operator to approve any
damaged delivery, and submits exactly once per confirm action.

The local order is only marked delivered from the backend's confirmation.
A rejected request leaves it pending and unlocked.
"""

from __future__ import annotations

import copy
import logging
from typing import Callable

from milksync.application.context import SessionContext
from milksync.application.dto import DeliveryReceipt, DeliverySummary
from milksync.application.request_guard import RequestGuard
from milksync.domain.exceptions import DomainException, ValidationError
from milksync.domain.model.delivery import DeliveryConfirmation
from milksync.domain.model.order import Order
from milksync.domain.repository.order_repository import OrderRepository
from milksync.domain.service.damage_assessment import BillSummary, DamageLine, DamageSheet

logger = logging.getLogger(__name__)

Approver = Callable[[DeliverySummary], bool]


class DeliveryReconciler:

    def __init__(
        self,
        order: Order,
        order_repo: OrderRepository,
        context: SessionContext,
    ) -> None:
        self._order = order
        self._order_repo = order_repo
        self._context = context
        self._sheet = DamageSheet(order)
        self._guard = RequestGuard()

    @property
    def order(self) -> Order:
        return self._order

    @property
    def busy(self) -> bool:
        return self._guard.busy

    @property
    def can_confirm(self) -> bool:
        return self._order.is_editable and not self._guard.busy

    @property
    def lines(self) -> list[DamageLine]:
        return self._sheet.lines

    # --- Damage entry ---------------------------------------------------------

    def set_damage(self, product_id: str, raw: object) -> int:
        """Record damaged packets for a product; returns the clamped count."""
        return self._sheet.set_damage(product_id, raw)

    def summary(self) -> BillSummary:
        return self._sheet.summary()

    def delivery_summary(self) -> DeliverySummary:
        return DeliverySummary(order_id=self._order.id, bill=self._sheet.summary())

    def unpriced_lines(self) -> list[DamageLine]:
        return self._sheet.unpriced_lines()

    # --- Confirm --------------------------------------------------------------

    def confirm(self, approve: Approver | None = None) -> DeliveryReceipt | None:
        """Submit the delivery.

        Returns ``None`` without contacting the backend when the operator
        declines the damage summary, or when another confirm for this
        order is still in flight.
        """
        self._order.ensure_editable()

        for line in self._sheet.unpriced_lines():
            logger.warning(
                "Order %s: %s has no price information; billed at zero",
                self._order.id,
                line.product_name,
            )

        summary = self.delivery_summary()
        if self._sheet.has_damage:
            if approve is None:
                raise ValidationError("A delivery with damaged products must be approved")
            if not approve(summary):
                logger.info("Delivery of order %s not approved", self._order.id)
                return None

        with self._guard.attempt() as owned:
            if not owned:
                logger.warning(
                    "Delivery of order %s already in progress; ignoring duplicate request",
                    self._order.id,
                )
                return None
            self._order.ensure_editable()
            confirmation = self._submit()
            # The order must be locked before the guard is released.
            return self._settle(confirmation, summary.bill)

    # --- Internal helpers -----------------------------------------------------

    def _submit(self) -> DeliveryConfirmation:
        records = self._sheet.damage_records()
        logger.info(
            "Delivering order %s (%d damaged line(s)) as %s %s",
            self._order.id,
            len(records),
            self._context.actor.role,
            self._context.actor.id,
        )
        try:
            return self._order_repo.deliver(self._order.id, records, self._context.actor)
        except DomainException as exc:
            logger.warning("Delivery of order %s rejected: %s", self._order.id, exc)
            raise

    def _settle(self, confirmation: DeliveryConfirmation, bill: BillSummary) -> DeliveryReceipt:
        final_bill = confirmation.final_bill_amount or confirmation.credited_amount
        if confirmation.credited_amount.display() != bill.final_bill.display():
            logger.warning(
                "Order %s: backend credited %s, expected %s",
                self._order.id,
                confirmation.credited_amount,
                bill.final_bill,
            )

        delivered = copy.deepcopy(self._order)
        delivered.mark_delivered(
            damaged=confirmation.damaged_products or self._sheet.damage_records(),
            updated_by=confirmation.updated_by or self._context.actor,
            final_bill=final_bill,
            damaged_cost=confirmation.total_damaged_cost or bill.total_damaged_cost,
        )
        self._order = delivered
        logger.info(
            "Order %s delivered; credited %s, wallet balance %s",
            delivered.id,
            confirmation.credited_amount,
            confirmation.wallet_balance,
        )

        return DeliveryReceipt(
            order=delivered,
            bill_generated=confirmation.bill_generated,
            credited_amount=confirmation.credited_amount,
            wallet_balance=confirmation.wallet_balance,
            final_bill=final_bill,
            original_bill=confirmation.original_bill_amount or bill.total_bill,
            total_damaged_cost=confirmation.total_damaged_cost or bill.total_damaged_cost,
            bill_id=confirmation.bill_id,
            message=confirmation.message,
        )
