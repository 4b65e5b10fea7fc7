"""Tests for order number formatting and the yearly sequence."""

from storefront.order.numbering import OrderNumberSequence, format_order_number


class TestFormatOrderNumber:
    def test_zero_padded(self):
        assert format_order_number("2026", 1) == "ORD-2026-000001"

    def test_wide_values(self):
        assert format_order_number("2026", 1234567) == "ORD-2026-1234567"


class TestOrderNumberSequence:
    def test_numbers_increase(self):
        sequence = OrderNumberSequence(year="2026", last_value=0)

        assert sequence.next_number() == "ORD-2026-000001"
        assert sequence.next_number() == "ORD-2026-000002"
        assert sequence.last_value == 2

    def test_continues_from_last_value(self):
        sequence = OrderNumberSequence(year="2027", last_value=41)
        assert sequence.next_number() == "ORD-2027-000042"
