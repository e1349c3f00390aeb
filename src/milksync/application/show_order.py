"""Application service: Show Order use case (query)."""

from __future__ import annotations

from milksync.application.dto import DamageRecordDTO, OrderDTO, OrderLineItemDTO
from milksync.application.list_orders import distributor_label
from milksync.domain.exceptions import EntityNotFoundError
from milksync.domain.model.order import Order
from milksync.domain.model.value_objects import Money
from milksync.domain.repository.order_repository import OrderRepository
from milksync.domain.service.pricing import resolve_pricing


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")
        return to_order_dto(order)


def to_order_dto(order: Order) -> OrderDTO:
    lines: list[OrderLineItemDTO] = []
    total = Money.zero()
    for item in order.items:
        pricing = resolve_pricing(item.product)
        line_total = pricing.line_total(item.quantity.value)
        total = total + line_total
        lines.append(
            OrderLineItemDTO(
                product_id=item.product_id,
                product_name=item.product.label,
                quantity=item.quantity.value,
                unit=item.unit,
                price_per_tub=str(pricing.price_per_tub),
                line_total=str(line_total),
                priced=pricing.is_priced,
            )
        )

    updated_by = None
    if order.updated_by is not None:
        updated_by = f"{order.updated_by.name} ({order.updated_by.role})"

    return OrderDTO(
        id=order.id,
        distributor=distributor_label(order),
        status=order.status.value,
        locked=order.locked,
        order_date=order.order_date.isoformat(),
        items=lines,
        total=str(total),
        damaged_products=[
            DamageRecordDTO(product_name=d.product_name, damaged_packets=d.damaged_packets)
            for d in order.damaged_products
        ],
        updated_by=updated_by,
        final_bill=str(order.final_bill_amount) if order.final_bill_amount else None,
    )
