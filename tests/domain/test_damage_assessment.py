"""Unit tests for the damage sheet and the adjusted bill."""

import pytest

from milksync.domain.exceptions import ValidationError
from milksync.domain.model.order import DamageRecord
from milksync.domain.model.value_objects import Money
from milksync.domain.service.damage_assessment import DamageSheet, parse_packet_count
from tests.fakes import make_order, make_product


class TestParsePacketCount:

    @pytest.mark.parametrize(
        "raw, expected",
        [(4, 4), ("7", 7), (" 3 ", 3), ("", 0), ("abc", 0), (None, 0), ("2.5", 0), (True, 0), (-2, -2)],
    )
    def test_parse(self, raw, expected):
        assert parse_packet_count(raw) == expected


class TestClamping:

    def test_count_above_delivered_is_capped(self):
        # 3 tubs x 5 packets
        sheet = DamageSheet(make_order())
        assert sheet.set_damage("p1", 99) == 15
        assert sheet.line_for("p1").damaged_packets == 15

    def test_negative_count_becomes_zero(self):
        sheet = DamageSheet(make_order())
        assert sheet.set_damage("p1", -4) == 0

    def test_unreadable_entry_becomes_zero(self):
        sheet = DamageSheet(make_order())
        sheet.set_damage("p1", 5)
        assert sheet.set_damage("p1", "lots") == 0

    def test_missing_packet_count_caps_at_tub_count(self):
        product = make_product(cost_per_tub="40", cost_per_packet=None, packets_per_tub=None)
        sheet = DamageSheet(make_order((product, 2)))
        assert sheet.set_damage("p1", 10) == 2

    def test_product_not_in_order_rejected(self):
        sheet = DamageSheet(make_order())
        with pytest.raises(ValidationError, match="not in this order"):
            sheet.set_damage("p9", 1)


class TestSummary:

    def test_no_damage(self):
        bill = DamageSheet(make_order()).summary()
        assert bill.total_bill == Money.of("150")
        assert bill.total_damaged_cost == Money.zero()
        assert bill.final_bill == Money.of("150")
        assert bill.damaged_lines == 0

    def test_three_tubs_six_damaged_packets(self):
        sheet = DamageSheet(make_order())
        sheet.set_damage("p1", 6)
        bill = sheet.summary()
        assert bill.total_damaged_cost == Money.of("60")
        assert str(bill.final_bill) == "₹90.00"
        assert bill.damaged_lines == 1

    def test_two_lines(self):
        # 2 tubs x 10 packets at 5 => 100; 4 damaged => 20
        milk = make_product(id="p2", name="Milk", cost_per_packet="5", packets_per_tub=10)
        curd = make_product()
        sheet = DamageSheet(make_order((milk, 2), (curd, 1)))
        sheet.set_damage("p2", 4)
        bill = sheet.summary()
        assert bill.total_bill == Money.of("150")
        assert bill.total_damaged_cost == Money.of("20")
        assert bill.final_bill == Money.of("130")

    def test_final_bill_never_negative(self):
        # Damage priced per packet while the tub price is lower than packets x packet price
        product = make_product(cost_per_tub="20", cost_per_packet="10", packets_per_tub=5)
        sheet = DamageSheet(make_order((product, 1)))
        sheet.set_damage("p1", 5)
        bill = sheet.summary()
        assert bill.total_damaged_cost == Money.of("50")
        assert bill.final_bill == Money.zero()

    def test_unpriced_line_is_flagged_not_fatal(self):
        free = make_product(id="p2", name="Sample", cost_per_packet=None, packets_per_tub=None)
        sheet = DamageSheet(make_order((make_product(), 3), (free, 1)))
        assert [line.product_id for line in sheet.unpriced_lines()] == ["p2"]
        assert sheet.summary().total_bill == Money.of("150")


class TestDamageRecords:

    def test_only_nonzero_lines_reported(self):
        milk = make_product(id="p2", name="Milk")
        sheet = DamageSheet(make_order((make_product(), 3), (milk, 1)))
        sheet.set_damage("p1", 2)
        sheet.set_damage("p2", 0)
        assert sheet.has_damage
        assert sheet.damage_records() == [DamageRecord("p1", "Curd", 2)]
