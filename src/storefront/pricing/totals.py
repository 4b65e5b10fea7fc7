"""Checkout price computation.

Pure functions over plain data: no repositories, no clock. The same inputs
always yield the same totals, so carts, quotes and order placement can share
one implementation.
"""

from dataclasses import dataclass, field


def _money(amount: float) -> float:
    # 2dp, and never "-0.0"
    return round(amount, 2) + 0.0


@dataclass(frozen=True)
class LineItem:
    """One purchasable line: a base price plus any selected attribute surcharges."""

    base_price: float
    quantity: int
    additional_prices: tuple[float, ...] = field(default_factory=tuple)

    @property
    def unit_price(self) -> float:
        return self.base_price + sum(self.additional_prices)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class ShippingPolicy:
    """Flat-rate shipping, waived when the subtotal reaches ``free_threshold``."""

    flat_rate: float
    free_threshold: float | None = None

    def cost_for(self, subtotal: float) -> float:
        if self.free_threshold is not None and subtotal >= self.free_threshold:
            return 0.0
        return self.flat_rate


@dataclass(frozen=True)
class PricingTotals:
    subtotal: float
    tax: float
    shipping: float
    discount: float
    total: float

    def as_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "tax": self.tax,
            "shipping": self.shipping,
            "discount": self.discount,
            "total": self.total,
        }


def compute_subtotal(items) -> float:
    return _money(sum(item.line_total for item in items))


def compute_totals(
    items,
    coupon_discount: float,
    tax_rate: float,
    shipping_policy: ShippingPolicy,
) -> PricingTotals:
    """Compute order totals.

    Args:
        items: Iterable of ``LineItem``.
        coupon_discount: Discount granted by a validated coupon. Clamped to
            ``[0, subtotal]``.
        tax_rate: Fraction applied to ``subtotal - discount`` (0.10 for 10%).
        shipping_policy: Flat rate and free-shipping threshold.
    """
    subtotal = compute_subtotal(items)
    discount = _money(min(max(coupon_discount or 0.0, 0.0), subtotal))
    shipping = _money(shipping_policy.cost_for(subtotal))
    tax = _money(max(tax_rate * (subtotal - discount), 0.0))
    total = _money(max(subtotal + tax + shipping - discount, 0.0))

    return PricingTotals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        discount=discount,
        total=total,
    )
