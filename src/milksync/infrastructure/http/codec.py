"""Translation between backend JSON documents and domain objects.

Backend documents are loosely shaped: references such as ``productId``
and ``distributorId`` arrive either populated (an object) or as a bare
id, and numeric fields may be missing on older records. Missing values
decode to ``None``; values that are present but unusable raise
``DataShapeError``.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from milksync.domain.exceptions import DataShapeError, DomainException
from milksync.domain.model.delivery import DeliveryConfirmation
from milksync.domain.model.order import (
    DEFAULT_UNIT,
    DamageRecord,
    Order,
    OrderLineItem,
    OrderStatus,
)
from milksync.domain.model.product import Product
from milksync.domain.model.value_objects import Actor, Money, Quantity

logger = logging.getLogger(__name__)


# --- Scalars -------------------------------------------------------------------


def _ref_id(raw: Any) -> str:
    if isinstance(raw, dict):
        raw = raw.get("_id") or raw.get("id")
    if raw is None or raw == "":
        raise DataShapeError("Missing id reference")
    return str(raw)


def _decimal(raw: Any, field: str) -> Decimal | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise DataShapeError(f"{field} must be a number, got {raw!r}")
    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        raise DataShapeError(f"{field} must be a number, got {raw!r}") from None
    if not value.is_finite() or value < 0:
        raise DataShapeError(f"{field} must be a non-negative number, got {raw!r}")
    return value


def _int(raw: Any, field: str) -> int | None:
    value = _decimal(raw, field)
    if value is None:
        return None
    if value != value.to_integral_value():
        raise DataShapeError(f"{field} must be a whole number, got {raw!r}")
    return int(value)


def _money(raw: Any, field: str) -> Money | None:
    value = _decimal(raw, field)
    return Money(value) if value is not None else None


def _date(raw: Any) -> date:
    if not isinstance(raw, str) or len(raw) < 10:
        raise DataShapeError(f"orderDate must be an ISO date, got {raw!r}")
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        raise DataShapeError(f"orderDate must be an ISO date, got {raw!r}") from None


# --- Products ------------------------------------------------------------------


def decode_product(raw: Any) -> Product:
    """Decode a populated product, or wrap a bare product id.

    A line whose product was deleted arrives with a null reference; it
    decodes to an unpriced placeholder instead of failing the whole order.
    """
    if raw is None or raw == "":
        logger.warning("Order line references a missing product")
        return Product.reference("")
    if not isinstance(raw, dict):
        return Product.reference(_ref_id(raw))
    return Product(
        id=_ref_id(raw),
        name=raw.get("name") or "Unknown Product",
        company=raw.get("company") or "",
        cost_per_packet=_decimal(raw.get("costPerPacket"), "costPerPacket"),
        packets_per_tub=_int(raw.get("packetsPerTub"), "packetsPerTub"),
        cost_per_tub=_decimal(raw.get("costPerTub"), "costPerTub"),
        unit=raw.get("unit") or raw.get("productUnit") or "",
        pack_size=_decimal(raw.get("quantity", raw.get("productQuantity")), "quantity"),
    )


# --- Orders --------------------------------------------------------------------


def decode_actor(raw: Any) -> Actor | None:
    if not isinstance(raw, dict):
        return None
    try:
        return Actor.create(
            role=str(raw.get("role") or ""),
            id=str(raw.get("id") or raw.get("_id") or ""),
            name=raw.get("name") or raw.get("username"),
        )
    except DomainException as exc:
        logger.warning("Ignoring unreadable updatedBy %r: %s", raw, exc)
        return None


def decode_damage(raw: Any) -> DamageRecord:
    if not isinstance(raw, dict):
        raise DataShapeError(f"Expected a damage record object, got {type(raw).__name__}")
    product = raw.get("productId")
    name = raw.get("productName")
    if not name and isinstance(product, dict):
        name = product.get("name")
    packets = raw.get("damagedPackets", raw.get("damagedQuantity", raw.get("quantity")))
    return DamageRecord(
        product_id=_ref_id(product),
        product_name=name or "Unknown Product",
        damaged_packets=_int(packets, "damagedPackets") or 0,
    )


def decode_line(raw: Any) -> OrderLineItem:
    if not isinstance(raw, dict):
        raise DataShapeError(f"Expected an order line object, got {type(raw).__name__}")
    quantity = _int(raw.get("quantity"), "quantity")
    if quantity is None or quantity < 1:
        raise DataShapeError(f"Line quantity must be at least 1, got {raw.get('quantity')!r}")
    return OrderLineItem(
        product=decode_product(raw.get("productId")),
        quantity=Quantity(quantity),
        unit=raw.get("unit") or DEFAULT_UNIT,
    )


def decode_order(raw: Any) -> Order:
    if not isinstance(raw, dict):
        raise DataShapeError(f"Expected an order object, got {type(raw).__name__}")

    distributor = raw.get("distributorId")
    if isinstance(distributor, dict):
        distributor_name = distributor.get("distributorName") or distributor.get("name") or ""
        company_name = distributor.get("companyName") or distributor.get("company") or ""
    else:
        distributor_name = company_name = ""

    try:
        status = OrderStatus(raw.get("status") or OrderStatus.PENDING.value)
    except ValueError:
        raise DataShapeError(f"Unknown order status {raw.get('status')!r}") from None

    return Order(
        id=_ref_id(raw),
        distributor_id=_ref_id(distributor) if distributor else "",
        order_date=_date(raw.get("orderDate")),
        items=[decode_line(item) for item in raw.get("items") or []],
        status=status,
        locked=bool(raw.get("locked", False)),
        damaged_products=[decode_damage(d) for d in raw.get("damagedProducts") or []],
        updated_by=decode_actor(raw.get("updatedBy")),
        distributor_name=distributor_name,
        company_name=company_name,
        final_bill_amount=_money(raw.get("finalBillAmount"), "finalBillAmount"),
        total_damaged_cost=_money(raw.get("totalDamagedCost"), "totalDamagedCost"),
    )


def decode_orders(raw: Any) -> list[Order]:
    if not isinstance(raw, list):
        raise DataShapeError(f"Expected a list of orders, got {type(raw).__name__}")
    return [decode_order(o) for o in raw]


def decode_delivery(raw: Any, order_id: str) -> DeliveryConfirmation:
    if not isinstance(raw, dict):
        raise DataShapeError("Expected a delivery result object")
    credited = _money(raw.get("creditedAmount"), "creditedAmount")
    balance = _money(raw.get("walletBalance"), "walletBalance")
    if credited is None or balance is None:
        raise DataShapeError("Delivery result is missing creditedAmount or walletBalance")
    bill_id = raw.get("billId")
    return DeliveryConfirmation(
        order_id=str(raw.get("orderId") or order_id),
        bill_generated=bool(raw.get("billGenerated", False)),
        credited_amount=credited,
        wallet_balance=balance,
        final_bill_amount=_money(raw.get("finalBillAmount"), "finalBillAmount"),
        original_bill_amount=_money(raw.get("originalBillAmount"), "originalBillAmount"),
        total_damaged_cost=_money(raw.get("totalDamagedCost"), "totalDamagedCost"),
        bill_id=str(bill_id) if bill_id else None,
        message=raw.get("message") or "",
        damaged_products=[decode_damage(d) for d in raw.get("damagedProducts") or []],
        updated_by=decode_actor(raw.get("updatedBy")),
    )


# --- Requests ------------------------------------------------------------------


def encode_update(order_date: date, items: list[OrderLineItem]) -> dict[str, Any]:
    return {
        "orderDate": order_date.isoformat(),
        "items": [
            {
                "productId": item.product_id,
                "quantity": item.quantity.value,
                "unit": item.unit,
            }
            for item in items
        ],
    }


def encode_actor(actor: Actor) -> dict[str, str]:
    return {"role": actor.role, "id": actor.id, "name": actor.name}


def encode_delivery(damaged: list[DamageRecord], updated_by: Actor) -> dict[str, Any]:
    """Body for ``POST /orders/:id/deliver``.

    ``damagedQuantity`` is the packet count field the backend reads.
    ``damagedProducts`` is left out entirely for a clean delivery.
    """
    body: dict[str, Any] = {"updatedBy": encode_actor(updated_by)}
    records = [d for d in damaged if d.damaged_packets > 0]
    if records:
        body["damagedProducts"] = [
            {
                "productId": d.product_id,
                "productName": d.product_name,
                "damagedQuantity": d.damaged_packets,
            }
            for d in records
        ]
    return body
