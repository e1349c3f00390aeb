"""Application service: Delete Order use case.

Only pending, unlocked orders can be removed. The check is repeated here
so a locked order never reaches the backend.
"""

from __future__ import annotations

import logging

from milksync.domain.exceptions import EntityNotFoundError
from milksync.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class DeleteOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str) -> None:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")

        order.ensure_editable()
        self._order_repo.delete(order_id)
        logger.info("Order %s deleted", order_id)
