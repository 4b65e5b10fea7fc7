"""Checkout: turn a customer's cart into an order.

Everything the order depends on is re-read and re-checked here: catalogue
prices, stock and the coupon. Nothing the client computed earlier is trusted.
All checks run against loaded aggregates before anything is saved, and every
aggregate touched (products, coupon, order number sequence, order, cart) is
saved in the handler's unit of work, so a rejected checkout leaves no trace.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.coupon.coupon import Coupon, normalize_code
from storefront.domain import logger, storefront
from storefront.order.numbering import OrderNumberSequence, sequence_for
from storefront.order.order import Address, Order, OrderPricing, PaymentMethod
from storefront.pricing.policy import current_pricing_policy
from storefront.pricing.quote import price_lines, quote_lines
from storefront.product.product import Product
from storefront.utils.logging import add_context, clear_context


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON object
    billing_address = Text()  # JSON object, defaults to the shipping address
    payment_method = String(required=True, max_length=20)
    coupon_code = String(max_length=50)
    notes = Text()


def _address(raw, field_name):
    if not raw:
        return None
    try:
        data = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        raise ValidationError({field_name: ["Address must be a JSON object"]}) from None
    return Address(**data)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        add_context(customer_id=str(command.customer_id), operation="place_order")
        try:
            return self._place(command)
        finally:
            clear_context()

    def _place(self, command):
        try:
            payment_method = PaymentMethod(command.payment_method)
        except ValueError:
            raise ValidationError({"payment_method": [f"Unknown payment method '{command.payment_method}'"]}) from None

        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.for_customer(command.customer_id)
        if cart is None or cart.is_empty:
            raise ValidationError({"cart": ["Cart is empty"]})

        shipping_address = _address(command.shipping_address, "shipping_address")
        billing_address = _address(command.billing_address, "billing_address")

        # Price from live catalogue data and re-validate the coupon
        product_repo = current_domain.repository_for(Product)
        products = product_repo.get_many(item.product_id for item in cart.items)
        lines = price_lines(cart, products)
        policy = current_pricing_policy()
        quote = quote_lines(lines, policy, coupon_code=command.coupon_code)
        if quote.coupon is not None and not quote.coupon.valid:
            raise ValidationError({"coupon_code": [quote.coupon.message]})

        coupon = None
        if quote.coupon is not None:
            coupon = current_domain.repository_for(Coupon).get(quote.coupon.coupon_id)

        # Take stock on the loaded products. Any shortfall aborts before a save.
        for line in lines:
            products[line.product_id].decrease_stock(line.quantity, attribute_id=line.attribute_id)

        sequence = sequence_for()
        order_number = sequence.next_number()

        totals = quote.totals
        order = Order.place(
            order_number=order_number,
            customer_id=command.customer_id,
            items_data=[
                {
                    "product_id": line.product_id,
                    "attribute_id": line.attribute_id,
                    "product_name": line.product_name,
                    "attribute_label": line.attribute_label,
                    "price": round(line.unit_price, 2),
                    "quantity": line.quantity,
                    "total": line.line_total,
                }
                for line in lines
            ],
            pricing=OrderPricing(
                subtotal=totals.subtotal,
                tax=totals.tax,
                shipping_cost=totals.shipping,
                discount=totals.discount,
                total=totals.total,
                currency=policy.currency,
            ),
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=payment_method.value,
            coupon_code=normalize_code(command.coupon_code) if coupon is not None else None,
            notes=command.notes,
        )
        if coupon is not None:
            coupon.redeem(order_id=str(order.id))

        for product in products.values():
            product_repo.add(product)
        if coupon is not None:
            current_domain.repository_for(Coupon).add(coupon)
        current_domain.repository_for(OrderNumberSequence).add(sequence)
        current_domain.repository_for(Order).add(order)

        # Online orders keep the cart until the gateway confirms payment
        if payment_method == PaymentMethod.COD:
            cart.clear(order_id=str(order.id))
            cart_repo.add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order_number,
            total=totals.total,
            payment_method=payment_method.value,
            coupon_code=order.coupon_code,
        )
        return str(order.id)
