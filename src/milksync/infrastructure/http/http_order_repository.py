"""REST-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import date
from urllib.parse import quote

from milksync.domain.model.delivery import DeliveryConfirmation
from milksync.domain.model.order import DamageRecord, Order, OrderLineItem
from milksync.domain.model.value_objects import Actor
from milksync.domain.repository.order_repository import OrderRepository
from milksync.infrastructure.http import codec
from milksync.infrastructure.http.api_client import ApiClient


class HttpOrderRepository(OrderRepository):

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    # --- OrderRepository interface --------------------------------------------

    def list_all(self) -> list[Order]:
        return codec.decode_orders(self._client.get("/orders"))

    def list_mine(self) -> list[Order]:
        return codec.decode_orders(self._client.get("/orders/my-orders"))

    def get_by_id(self, order_id: str) -> Order | None:
        # The backend has no single-order read; look it up in the full list.
        for order in self.list_all():
            if order.id == order_id:
                return order
        return None

    def update(
        self, order_id: str, order_date: date, items: list[OrderLineItem]
    ) -> Order:
        raw = self._client.put(
            f"/orders/{quote(order_id, safe='')}", codec.encode_update(order_date, items)
        )
        return codec.decode_order(raw)

    def deliver(
        self,
        order_id: str,
        damaged: list[DamageRecord],
        updated_by: Actor,
    ) -> DeliveryConfirmation:
        raw = self._client.post(
            f"/orders/{quote(order_id, safe='')}/deliver",
            codec.encode_delivery(damaged, updated_by),
        )
        return codec.decode_delivery(raw, order_id)

    def delete(self, order_id: str) -> None:
        self._client.delete(f"/orders/{quote(order_id, safe='')}")
