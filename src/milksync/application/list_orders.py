"""Application service: List Orders use case (query).

Filtering is done client-side on the fetched collection, the same way
the order screens narrow their lists.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from milksync.application.dto import OrderListDTO, OrderSummaryDTO
from milksync.domain.model.order import Order, OrderStatus
from milksync.domain.repository.order_repository import OrderRepository


class OrderScope(Enum):
    ALL = "all"
    MINE = "mine"


@dataclass(frozen=True)
class OrderFilter:
    status: OrderStatus | None = None
    distributor: str | None = None
    month: int | None = None
    year: int | None = None
    search: str | None = None

    def matches(self, order: Order) -> bool:
        if self.status is not None and order.status != self.status:
            return False
        if self.distributor and distributor_label(order).lower() != self.distributor.lower():
            return False
        if self.month is not None and order.order_date.month != self.month:
            return False
        if self.year is not None and order.order_date.year != self.year:
            return False
        if self.search:
            haystack = " ".join(
                [
                    order.id,
                    distributor_label(order),
                    order.status.value,
                    order.order_date.isoformat(),
                ]
            ).lower()
            if self.search.lower() not in haystack:
                return False
        return True


def distributor_label(order: Order) -> str:
    return order.distributor_name or order.company_name or "Unknown Distributor"


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        scope: OrderScope = OrderScope.ALL,
        order_filter: OrderFilter | None = None,
    ) -> OrderListDTO:
        if scope == OrderScope.MINE:
            orders = self._order_repo.list_mine()
        else:
            orders = self._order_repo.list_all()

        order_filter = order_filter or OrderFilter()
        selected = [o for o in orders if order_filter.matches(o)]

        return OrderListDTO(
            orders=[self._to_dto(o) for o in selected],
            pending=sum(1 for o in selected if o.status == OrderStatus.PENDING),
            delivered=sum(1 for o in selected if o.status == OrderStatus.DELIVERED),
        )

    @staticmethod
    def _to_dto(order: Order) -> OrderSummaryDTO:
        return OrderSummaryDTO(
            id=order.id,
            distributor=distributor_label(order),
            order_date=order.order_date.isoformat(),
            status=order.status.value,
            locked=order.locked,
            total_tubs=order.total_tubs,
            line_count=len(order.items),
        )
