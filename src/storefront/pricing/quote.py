"""Cart quotes: resolve live catalogue prices and run them through the pricing rules."""

from dataclasses import dataclass, field

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.coupon.coupon import CouponEvaluation
from storefront.coupon.validation import validate_coupon
from storefront.pricing.policy import PricingPolicy, current_pricing_policy
from storefront.pricing.totals import LineItem, PricingTotals, compute_subtotal, compute_totals


@dataclass(frozen=True)
class QuotedLine:
    item_id: str
    product_id: str
    attribute_id: str | None
    category_id: str | None
    product_name: str
    attribute_label: str | None
    unit_price: float
    quantity: int
    line_item: LineItem

    @property
    def line_total(self) -> float:
        return round(self.line_item.line_total, 2)


@dataclass(frozen=True)
class CartQuote:
    lines: list[QuotedLine]
    totals: PricingTotals
    currency: str
    coupon: CouponEvaluation | None = None
    category_ids: list[str] = field(default_factory=list)
    product_ids: list[str] = field(default_factory=list)


def price_lines(cart, products) -> list[QuotedLine]:
    """Turn cart lines into priced lines using already-loaded products.

    Args:
        cart: ``ShoppingCart`` to price.
        products: Mapping of product id to ``Product``.
    """
    lines = []
    for item in cart.items:
        product = products[str(item.product_id)]
        if not product.is_active:
            raise ValidationError({"product_id": [f"{product.name} is not available"]})

        additional = ()
        attribute_label = None
        if item.attribute_id:
            attribute = product.find_attribute(item.attribute_id)
            additional = (attribute.additional_price or 0.0,)
            attribute_label = attribute.display_name

        line_item = LineItem(base_price=product.price, quantity=item.quantity, additional_prices=additional)
        lines.append(
            QuotedLine(
                item_id=str(item.id),
                product_id=str(product.id),
                attribute_id=str(item.attribute_id) if item.attribute_id else None,
                category_id=str(product.category_id) if product.category_id else None,
                product_name=product.name,
                attribute_label=attribute_label,
                unit_price=line_item.unit_price,
                quantity=item.quantity,
                line_item=line_item,
            )
        )
    return lines


def quote_lines(lines, policy: PricingPolicy, coupon_code=None) -> CartQuote:
    items = [line.line_item for line in lines]
    category_ids = sorted({line.category_id for line in lines if line.category_id})
    product_ids = sorted({line.product_id for line in lines})

    evaluation = None
    discount = 0.0
    if coupon_code:
        evaluation = validate_coupon(coupon_code, compute_subtotal(items), category_ids, product_ids)
        if evaluation.valid:
            discount = evaluation.discount_amount

    return CartQuote(
        lines=lines,
        totals=compute_totals(items, discount, policy.tax_rate, policy.shipping),
        currency=policy.currency,
        coupon=evaluation,
        category_ids=category_ids,
        product_ids=product_ids,
    )


def quote_cart(customer_id, coupon_code=None) -> CartQuote:
    """Price the customer's cart as it stands, optionally with a coupon applied."""
    from storefront.cart.cart import ShoppingCart
    from storefront.product.product import Product

    policy = current_pricing_policy()
    cart = current_domain.repository_for(ShoppingCart).for_customer(customer_id)
    if cart is None or cart.is_empty:
        return quote_lines([], policy, coupon_code)

    products = current_domain.repository_for(Product).get_many(item.product_id for item in cart.items)
    return quote_lines(price_lines(cart, products), policy, coupon_code)
