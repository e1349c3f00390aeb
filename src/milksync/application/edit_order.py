"""Application service: Edit Order use case.

The editor works on a private copy of the order's line items (the edit
set). Nothing reaches the backend until ``save()``; the order the editor
was built with is only replaced by what the backend returns.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from milksync.application.context import SessionContext
from milksync.domain.exceptions import ValidationError
from milksync.domain.model.order import DEFAULT_UNIT, MAX_LINE_ITEMS, Order, OrderLineItem
from milksync.domain.model.product import Product
from milksync.domain.model.value_objects import Money, Quantity
from milksync.domain.repository.order_repository import OrderRepository
from milksync.domain.repository.product_repository import ProductRepository
from milksync.domain.service.pricing import resolve_pricing

logger = logging.getLogger(__name__)


class OrderEditor:

    def __init__(
        self,
        order: Order,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        context: SessionContext,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._context = context
        self._available: list[Product] = []
        self._reset(order)

    # --- State ----------------------------------------------------------------

    @property
    def order(self) -> Order:
        """The last server-confirmed order."""
        return self._order

    @property
    def items(self) -> list[OrderLineItem]:
        return list(self._items)

    @property
    def order_date(self) -> date:
        return self._order_date

    @property
    def total_tubs(self) -> int:
        return sum(item.quantity.value for item in self._items)

    @property
    def total_value(self) -> Money:
        total = Money.zero()
        for item in self._items:
            total = total + resolve_pricing(item.product).line_total(item.quantity.value)
        return total

    # --- Line edits -----------------------------------------------------------

    def change_quantity(self, product_id: str, delta: int) -> int:
        """Step a line's tub count; never goes below 1."""
        item = self._line(product_id)
        new_value = max(1, item.quantity.value + delta)
        item.quantity = Quantity(new_value)
        return new_value

    def set_quantity(self, product_id: str, raw: object) -> int:
        """Set a line's tub count from operator input.

        Unreadable or sub-1 input is refused and the line keeps its
        current quantity.
        """
        item = self._line(product_id)
        try:
            value = int(str(raw).strip())
        except ValueError:
            raise ValidationError(
                f"Invalid quantity {raw!r} for {item.product_name}"
            ) from None
        if value < 1:
            raise ValidationError(
                f"Quantity for {item.product_name} must be at least 1"
            )
        item.quantity = Quantity(value)
        return value

    def change_unit(self, product_id: str, unit: str) -> None:
        item = self._line(product_id)
        if not unit or not unit.strip():
            raise ValidationError("Unit is required")
        item.unit = unit.strip()

    def remove_item(self, product_id: str) -> None:
        item = self._line(product_id)
        self._items.remove(item)

    def add_item(self, product: Product) -> bool:
        """Append a one-tub line for *product*.

        Returns False (and changes nothing) when the product already has a
        line: an order holds at most one line per product.
        """
        self._order.ensure_editable()
        if any(item.product_id == product.id for item in self._items):
            logger.debug("Product %s already in order %s", product.id, self._order.id)
            return False
        self._items.append(
            OrderLineItem(product=product, quantity=Quantity(1), unit=DEFAULT_UNIT)
        )
        return True

    def set_order_date(self, order_date: date) -> None:
        self._order.ensure_editable()
        self._order_date = order_date

    # --- Product picker -------------------------------------------------------

    def load_available_products(self) -> list[Product]:
        """Fetch the products the order's company can order."""
        if not self._order.company_name:
            logger.warning("Order %s has no company; no products to add", self._order.id)
            self._available = []
        else:
            self._available = self._product_repo.list_by_company(self._order.company_name)
        return list(self._available)

    def remaining_products(self) -> list[Product]:
        """Available products not already in the edit set."""
        in_order = {item.product_id for item in self._items}
        return [p for p in self._available if p.id not in in_order]

    # --- Persist --------------------------------------------------------------

    def save(self) -> Order | None:
        """Send the edit set to the backend.

        Re-checks the lock first: a locked or delivered order is never
        sent and ``None`` is returned. On success the editor adopts the
        order returned by the backend. On failure the exception propagates
        and the edit set is left as it was.
        """
        if not self._order.is_editable:
            logger.info("Order %s is locked; save skipped", self._order.id)
            return None
        if not self._items:
            raise ValidationError("Order must contain at least one item")
        if len(self._items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        updated = self._order_repo.update(
            self._order.id, self._order_date, [replace(item) for item in self._items]
        )
        logger.info(
            "Order %s updated by %s %s", updated.id, self._context.actor.role, self._context.actor.id
        )
        self._reset(updated)
        return updated

    # --- Internal helpers -----------------------------------------------------

    def _reset(self, order: Order) -> None:
        self._order = order
        self._items = [replace(item) for item in order.items]
        self._order_date = order.order_date

    def _line(self, product_id: str) -> OrderLineItem:
        self._order.ensure_editable()
        for item in self._items:
            if item.product_id == product_id:
                return item
        raise ValidationError(f"Product ID '{product_id}' is not in this order")
