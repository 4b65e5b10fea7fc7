"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer's cart became an order: stock taken, coupon redeemed, number assigned."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of line snapshots
    subtotal = Float(required=True)
    tax = Float(required=True)
    shipping_cost = Float(required=True)
    discount = Float(required=True)
    total = Float(required=True)
    currency = String(required=True)
    payment_method = String(required=True)
    coupon_code = String()
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    user_id = Identifier()
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderNoteAdded:
    __version__ = 1

    order_id = Identifier(required=True)
    note = Text(required=True)
    user_id = Identifier()
    added_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentInitiated:
    """The customer was handed to the payment gateway."""

    __version__ = 1

    order_id = Identifier(required=True)
    session_id = String(required=True)
    amount = Float(required=True)
    currency = String(required=True)


@storefront.event(part_of="Order")
class PaymentConfirmed:
    __version__ = 1

    order_id = Identifier(required=True)
    transaction_id = String(required=True)
    amount = Float(required=True)
    confirmed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentFailed:
    __version__ = 1

    order_id = Identifier(required=True)
    reason = String(required=True)
    failed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentStatusChanged:
    """An admin changed the payment status by hand (e.g. cash collected, refund issued)."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    user_id = Identifier()


@storefront.event(part_of="Order")
class PaymentReceivedAfterCancellation:
    """The gateway captured money for an order that had already been cancelled; it is owed back."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    transaction_id = String(required=True)
    amount = Float(required=True)
    received_at = DateTime(required=True)
