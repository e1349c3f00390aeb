"""Abstract repository for Order aggregate.

The backend owns persisted order state and computes the bill and wallet
side effects of a delivery. Implementations raise ``ConflictError`` when
the backend refuses a change to a delivered or locked order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from milksync.domain.model.delivery import DeliveryConfirmation
from milksync.domain.model.order import DamageRecord, Order, OrderLineItem
from milksync.domain.model.value_objects import Actor


class OrderRepository(ABC):

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order visible to admins and staff."""

    @abstractmethod
    def list_mine(self) -> list[Order]:
        """Return the orders placed by the current user."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def update(
        self, order_id: str, order_date: date, items: list[OrderLineItem]
    ) -> Order:
        """Replace the order date and line items; return the stored order."""

    @abstractmethod
    def deliver(
        self,
        order_id: str,
        damaged: list[DamageRecord],
        updated_by: Actor,
    ) -> DeliveryConfirmation:
        """Mark the order delivered, generate its bill and credit the wallet."""

    @abstractmethod
    def delete(self, order_id: str) -> None:
        """Remove a pending order."""
