"""Tests for decoding backend documents and encoding request bodies."""

from datetime import date
from decimal import Decimal

import pytest

from milksync.domain.exceptions import DataShapeError
from milksync.domain.model.order import DamageRecord, OrderStatus
from milksync.domain.model.value_objects import Money
from milksync.domain.service.pricing import resolve_pricing
from milksync.infrastructure.http import codec
from tests.fakes import STAFF, make_order


def _order_doc(**overrides):
    doc = {
        "_id": "o1",
        "distributorId": {"_id": "d1", "distributorName": "Sharma Dairy", "companyName": "Amul"},
        "orderDate": "2024-03-15T00:00:00.000Z",
        "status": "pending",
        "locked": False,
        "items": [
            {
                "productId": {
                    "_id": "p1",
                    "name": "Curd",
                    "costPerPacket": 10,
                    "packetsPerTub": 5,
                    "unit": "ml",
                    "quantity": 500,
                },
                "quantity": 3,
                "unit": "tub",
            }
        ],
    }
    doc.update(overrides)
    return doc


class TestDecodeOrder:

    def test_populated_order(self):
        order = codec.decode_order(_order_doc())
        assert order.id == "o1"
        assert order.distributor_id == "d1"
        assert order.distributor_name == "Sharma Dairy"
        assert order.company_name == "Amul"
        assert order.order_date == date(2024, 3, 15)
        assert order.status == OrderStatus.PENDING
        item = order.items[0]
        assert item.product.cost_per_packet == Decimal("10")
        assert item.product.packets_per_tub == 5
        assert item.product.label == "Curd 500ml"
        assert item.quantity.value == 3

    def test_bare_references(self):
        doc = _order_doc(distributorId="d1", items=[{"productId": "p1", "quantity": 2}])
        order = codec.decode_order(doc)
        assert order.distributor_id == "d1"
        assert order.distributor_name == ""
        assert order.items[0].product.name == "Unknown Product"
        assert order.items[0].unit == "tub"

    def test_delivered_order(self):
        doc = _order_doc(
            status="delivered",
            locked=True,
            damagedProducts=[{"productId": "p1", "productName": "Curd", "quantity": 6, "unit": "packets"}],
            updatedBy={"role": "staff", "id": "u-7", "name": "Ravi"},
            finalBillAmount=90,
        )
        order = codec.decode_order(doc)
        assert order.locked
        assert order.damaged_products == [DamageRecord("p1", "Curd", 6)]
        assert order.updated_by == STAFF
        assert order.final_bill_amount == Money.of("90")

    def test_unreadable_updated_by_is_ignored(self):
        order = codec.decode_order(_order_doc(updatedBy={"role": "robot", "id": "x"}))
        assert order.updated_by is None

    def test_unknown_status(self):
        with pytest.raises(DataShapeError, match="Unknown order status"):
            codec.decode_order(_order_doc(status="shipped"))

    def test_bad_date(self):
        with pytest.raises(DataShapeError, match="orderDate"):
            codec.decode_order(_order_doc(orderDate="yesterday"))

    def test_negative_price(self):
        doc = _order_doc(items=[{"productId": {"_id": "p1", "costPerPacket": -1}, "quantity": 1}])
        with pytest.raises(DataShapeError, match="costPerPacket"):
            codec.decode_order(doc)

    def test_zero_quantity_line(self):
        doc = _order_doc(items=[{"productId": "p1", "quantity": 0}])
        with pytest.raises(DataShapeError, match="at least 1"):
            codec.decode_order(doc)

    def test_list_required(self):
        with pytest.raises(DataShapeError, match="list of orders"):
            codec.decode_orders({"orders": []})


class TestDecodeDelivery:

    def test_full_response(self):
        result = codec.decode_delivery(
            {
                "message": "Order marked as delivered successfully",
                "orderId": "o1",
                "billId": "b1",
                "creditedAmount": 90,
                "walletBalance": 1090.5,
                "billGenerated": True,
                "damagedProducts": [{"productId": "p1", "productName": "Curd", "quantity": 6}],
                "totalDamagedCost": 60,
                "originalBillAmount": 150,
                "finalBillAmount": 90,
            },
            "o1",
        )
        assert result.credited_amount == Money.of("90")
        assert result.wallet_balance == Money.of("1090.5")
        assert result.bill_id == "b1"
        assert result.original_bill_amount == Money.of("150")
        assert result.damaged_products[0].damaged_packets == 6

    def test_missing_amounts(self):
        with pytest.raises(DataShapeError, match="creditedAmount"):
            codec.decode_delivery({"walletBalance": 10}, "o1")


class TestEncode:

    def test_update_body(self):
        order = make_order()
        body = codec.encode_update(date(2024, 4, 1), order.items)
        assert body == {
            "orderDate": "2024-04-01",
            "items": [{"productId": "p1", "quantity": 3, "unit": "tub"}],
        }

    def test_delivery_body_with_damage(self):
        body = codec.encode_delivery(
            [DamageRecord("p1", "Curd", 6), DamageRecord("p2", "Milk", 0)], STAFF
        )
        assert body == {
            "updatedBy": {"role": "staff", "id": "u-7", "name": "Ravi"},
            "damagedProducts": [{"productId": "p1", "productName": "Curd", "damagedQuantity": 6}],
        }

    def test_clean_delivery_omits_damage(self):
        body = codec.encode_delivery([], STAFF)
        assert "damagedProducts" not in body


class TestMissingProducts:

    def test_null_product_decodes_as_unpriced_placeholder(self):
        doc = _order_doc(items=[{"productId": None, "quantity": 1}])
        item = codec.decode_order(doc).items[0]
        assert item.product_id == ""
        assert item.product_name == "Unknown Product"
        assert not resolve_pricing(item.product).is_priced
