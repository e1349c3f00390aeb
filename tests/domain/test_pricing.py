"""Unit tests for price resolution."""

from milksync.domain.model.value_objects import Money
from milksync.domain.service.pricing import resolve_pricing
from tests.fakes import make_product


class TestTubPrice:

    def test_explicit_tub_price_wins(self):
        pricing = resolve_pricing(make_product(cost_per_tub="60", cost_per_packet="10", packets_per_tub=5))
        assert pricing.price_per_tub == Money.of("60")
        assert pricing.cost_per_packet == Money.of("10")
        assert pricing.is_priced

    def test_derived_from_packet_price(self):
        pricing = resolve_pricing(make_product(cost_per_packet="10", packets_per_tub=5))
        assert pricing.price_per_tub == Money.of("50")

    def test_zero_tub_price_counts_as_missing(self):
        pricing = resolve_pricing(make_product(cost_per_tub="0", cost_per_packet="10", packets_per_tub=5))
        assert pricing.price_per_tub == Money.of("50")

    def test_packet_price_without_packet_count_leaves_tub_unpriced(self):
        pricing = resolve_pricing(make_product(cost_per_packet="10", packets_per_tub=None))
        assert not pricing.is_priced
        assert pricing.price_per_tub == Money.zero()
        assert pricing.cost_per_packet == Money.of("10")


class TestPacketPrice:

    def test_derived_from_tub_price(self):
        pricing = resolve_pricing(make_product(cost_per_tub="40", cost_per_packet=None, packets_per_tub=4))
        assert pricing.cost_per_packet == Money.of("10")

    def test_missing_packet_count_defaults_to_one(self):
        pricing = resolve_pricing(make_product(cost_per_tub="40", cost_per_packet=None, packets_per_tub=None))
        assert pricing.packets_per_tub == 1
        assert pricing.cost_per_packet == Money.of("40")


class TestUnpriced:

    def test_no_price_fields(self):
        pricing = resolve_pricing(make_product(cost_per_packet=None, packets_per_tub=None))
        assert not pricing.is_priced
        assert pricing.line_total(3) == Money.zero()
        assert pricing.damaged_cost(2) == Money.zero()


class TestLineArithmetic:

    def test_line_total_and_damage(self):
        pricing = resolve_pricing(make_product(cost_per_packet="10", packets_per_tub=5))
        assert pricing.line_total(3) == Money.of("150")
        assert pricing.damaged_cost(6) == Money.of("60")
