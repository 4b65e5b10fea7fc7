"""Tests for the pure checkout price computation."""

import pytest
from storefront.pricing.totals import LineItem, ShippingPolicy, compute_subtotal, compute_totals

STANDARD_SHIPPING = ShippingPolicy(flat_rate=60.0, free_threshold=1000.0)


class TestLineItem:
    def test_unit_price_without_attributes(self):
        assert LineItem(base_price=250.0, quantity=2).unit_price == 250.0

    def test_unit_price_adds_attribute_surcharges(self):
        item = LineItem(base_price=500.0, quantity=1, additional_prices=(50.0, 25.0))
        assert item.unit_price == 575.0

    def test_line_total(self):
        item = LineItem(base_price=500.0, quantity=2, additional_prices=(50.0,))
        assert item.line_total == 1100.0


class TestShippingPolicy:
    def test_flat_rate_below_threshold(self):
        assert STANDARD_SHIPPING.cost_for(999.99) == 60.0

    def test_free_at_threshold(self):
        assert STANDARD_SHIPPING.cost_for(1000.0) == 0.0

    def test_free_above_threshold(self):
        assert STANDARD_SHIPPING.cost_for(2500.0) == 0.0

    def test_no_threshold_always_charges(self):
        assert ShippingPolicy(flat_rate=80.0).cost_for(10_000.0) == 80.0


class TestComputeSubtotal:
    def test_empty(self):
        assert compute_subtotal([]) == 0.0

    def test_sums_line_totals(self):
        items = [
            LineItem(base_price=100.0, quantity=3),
            LineItem(base_price=49.99, quantity=1),
        ]
        assert compute_subtotal(items) == 349.99


class TestComputeTotals:
    def test_reference_checkout(self):
        """Two shirts at 500 + 50 surcharge, 100 off, 10% tax, free shipping from 1000."""
        items = [LineItem(base_price=500.0, quantity=2, additional_prices=(50.0,))]

        totals = compute_totals(items, coupon_discount=100.0, tax_rate=0.10, shipping_policy=STANDARD_SHIPPING)

        assert totals.subtotal == 1100.0
        assert totals.discount == 100.0
        assert totals.tax == 100.0
        assert totals.shipping == 0.0
        assert totals.total == 1100.0

    def test_shipping_charged_below_threshold(self):
        items = [LineItem(base_price=200.0, quantity=2)]

        totals = compute_totals(items, coupon_discount=0.0, tax_rate=0.10, shipping_policy=STANDARD_SHIPPING)

        assert totals.subtotal == 400.0
        assert totals.tax == 40.0
        assert totals.shipping == 60.0
        assert totals.total == 500.0

    def test_shipping_threshold_uses_subtotal_before_discount(self):
        items = [LineItem(base_price=1000.0, quantity=1)]

        totals = compute_totals(items, coupon_discount=200.0, tax_rate=0.0, shipping_policy=STANDARD_SHIPPING)

        assert totals.shipping == 0.0
        assert totals.total == 800.0

    def test_discount_clamped_to_subtotal(self):
        items = [LineItem(base_price=50.0, quantity=1)]

        totals = compute_totals(items, coupon_discount=500.0, tax_rate=0.10, shipping_policy=STANDARD_SHIPPING)

        assert totals.discount == 50.0
        assert totals.tax == 0.0
        assert totals.total == 60.0

    def test_negative_discount_ignored(self):
        items = [LineItem(base_price=100.0, quantity=1)]

        totals = compute_totals(items, coupon_discount=-20.0, tax_rate=0.0, shipping_policy=STANDARD_SHIPPING)

        assert totals.discount == 0.0
        assert totals.total == 160.0

    def test_empty_cart_with_free_shipping_policy_only_charges_shipping(self):
        totals = compute_totals([], coupon_discount=0.0, tax_rate=0.10, shipping_policy=STANDARD_SHIPPING)

        assert totals.subtotal == 0.0
        assert totals.tax == 0.0
        assert totals.total == 60.0

    def test_total_never_negative(self):
        items = [LineItem(base_price=10.0, quantity=1)]
        free = ShippingPolicy(flat_rate=0.0)

        totals = compute_totals(items, coupon_discount=10.0, tax_rate=0.10, shipping_policy=free)

        assert totals.total == 0.0

    def test_amounts_rounded_to_two_decimals(self):
        items = [LineItem(base_price=33.333, quantity=3)]

        totals = compute_totals(items, coupon_discount=0.0, tax_rate=0.075, shipping_policy=STANDARD_SHIPPING)

        assert totals.subtotal == 100.0
        assert totals.tax == 7.5
        assert totals.total == 167.5

    @pytest.mark.parametrize("tax_rate", [0.0, 0.05, 0.15])
    def test_same_inputs_same_totals(self, tax_rate):
        items = [LineItem(base_price=120.0, quantity=4, additional_prices=(15.0,))]

        first = compute_totals(items, 40.0, tax_rate, STANDARD_SHIPPING)
        second = compute_totals(items, 40.0, tax_rate, STANDARD_SHIPPING)

        assert first == second

    def test_as_dict(self):
        items = [LineItem(base_price=100.0, quantity=1)]
        totals = compute_totals(items, 0.0, 0.10, STANDARD_SHIPPING)

        assert totals.as_dict() == {
            "subtotal": 100.0,
            "tax": 10.0,
            "shipping": 60.0,
            "discount": 0.0,
            "total": 170.0,
        }
