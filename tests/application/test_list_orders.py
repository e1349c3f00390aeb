"""Integration tests for the List Orders and Show Order queries."""

from datetime import date

import pytest

from milksync.application.list_orders import ListOrdersHandler, OrderFilter, OrderScope
from milksync.application.show_order import ShowOrderHandler
from milksync.domain.exceptions import EntityNotFoundError
from milksync.domain.model.order import DamageRecord, OrderStatus
from milksync.domain.model.value_objects import Money
from tests.fakes import STAFF, FakeOrderRepository, make_order, make_product


def _setup():
    orders = [
        make_order(id="o1", distributor_name="Sharma Dairy", order_date=date(2024, 3, 15)),
        make_order(
            id="o2",
            distributor_name="Gupta Milk",
            order_date=date(2024, 4, 2),
            status=OrderStatus.DELIVERED,
            locked=True,
        ),
        make_order(id="o3", distributor_name="", company_name="Amul", order_date=date(2023, 3, 9)),
    ]
    return FakeOrderRepository(orders, mine={"o2"})


class TestListOrders:

    def test_lists_all_with_counts(self):
        result = ListOrdersHandler(_setup()).handle()
        assert [o.id for o in result.orders] == ["o1", "o2", "o3"]
        assert result.pending == 2
        assert result.delivered == 1

    def test_mine_scope(self):
        result = ListOrdersHandler(_setup()).handle(OrderScope.MINE)
        assert [o.id for o in result.orders] == ["o2"]
        assert result.orders[0].locked

    def test_summary_row(self):
        row = ListOrdersHandler(_setup()).handle().orders[0]
        assert row.distributor == "Sharma Dairy"
        assert row.order_date == "2024-03-15"
        assert row.status == "pending"
        assert row.total_tubs == 3
        assert row.line_count == 1

    def test_distributor_falls_back_to_company(self):
        rows = ListOrdersHandler(_setup()).handle().orders
        assert rows[2].distributor == "Amul"

    @pytest.mark.parametrize(
        "order_filter, expected",
        [
            (OrderFilter(status=OrderStatus.DELIVERED), ["o2"]),
            (OrderFilter(distributor="sharma dairy"), ["o1"]),
            (OrderFilter(month=3), ["o1", "o3"]),
            (OrderFilter(month=3, year=2024), ["o1"]),
            (OrderFilter(search="gupta"), ["o2"]),
            (OrderFilter(search="2023-03"), ["o3"]),
            (OrderFilter(search="nothing"), []),
        ],
    )
    def test_filters(self, order_filter, expected):
        result = ListOrdersHandler(_setup()).handle(order_filter=order_filter)
        assert [o.id for o in result.orders] == expected


class TestShowOrder:

    def test_show_prices_lines(self):
        dto = ShowOrderHandler(_setup()).handle("o1")
        assert dto.status == "pending"
        assert dto.items[0].price_per_tub == "₹50.00"
        assert dto.items[0].line_total == "₹150.00"
        assert dto.total == "₹150.00"
        assert dto.final_bill is None

    def test_show_delivered_order(self):
        order = make_order(id="o9")
        order.mark_delivered([DamageRecord("p1", "Curd", 6)], STAFF, final_bill=Money.of("90"))
        dto = ShowOrderHandler(FakeOrderRepository([order])).handle("o9")
        assert dto.locked
        assert dto.final_bill == "₹90.00"
        assert dto.updated_by == "Ravi (staff)"
        assert dto.damaged_products[0].damaged_packets == 6

    def test_unpriced_line_flagged(self):
        free = make_product(cost_per_packet=None, packets_per_tub=None)
        dto = ShowOrderHandler(FakeOrderRepository([make_order((free, 1))])).handle("o1")
        assert not dto.items[0].priced
        assert dto.total == "₹0.00"

    def test_missing_order(self):
        with pytest.raises(EntityNotFoundError, match="not found"):
            ShowOrderHandler(_setup()).handle("nope")
