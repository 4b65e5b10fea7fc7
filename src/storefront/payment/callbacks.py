"""Payment callbacks: the gateway reporting how a payment session ended.

Three outcomes, handled differently:
    success: mark paid, move a pending order to processing, empty the cart
    fail:    mark the payment failed, leave the order status alone
    cancel:  the customer backed out; nothing changes

Gateways retry callbacks, so a success for an order that is already paid or
refunded is acknowledged without touching anything. A success for a cancelled
order is recorded and the order is flagged as owing a refund.
"""

from enum import Enum

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.domain import logger, storefront
from storefront.order.order import Order


class CallbackOutcome(Enum):
    SUCCESS = "success"
    FAIL = "fail"
    CANCEL = "cancel"


@storefront.command(part_of="Order")
class HandlePaymentCallback:
    order_id = Identifier(required=True)
    outcome = String(required=True, max_length=20)
    transaction_id = String(max_length=255)
    reason = String(max_length=500)


@storefront.command_handler(part_of=Order)
class PaymentCallbackHandler:
    @handle(HandlePaymentCallback)
    def handle_callback(self, command):
        try:
            outcome = CallbackOutcome(command.outcome)
        except ValueError:
            raise ValidationError({"outcome": [f"Unknown payment outcome '{command.outcome}'"]}) from None

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if outcome == CallbackOutcome.CANCEL:
            logger.info("payment_cancelled_by_customer", order_id=str(order.id))
            return "ignored"

        if outcome == CallbackOutcome.FAIL:
            if not order.record_payment_failure(command.reason or "Payment failed"):
                logger.info("payment_callback_ignored", order_id=str(order.id), outcome=outcome.value)
                return "ignored"
            repo.add(order)
            logger.warning("payment_failed", order_id=str(order.id), reason=command.reason)
            return "failed"

        if not command.transaction_id:
            raise ValidationError({"transaction_id": ["A successful payment needs a transaction id"]})

        was_cancelled = order.is_cancelled
        if not order.confirm_payment(command.transaction_id):
            logger.info(
                "payment_callback_ignored",
                order_id=str(order.id),
                outcome=outcome.value,
                transaction_id=command.transaction_id,
            )
            return "ignored"
        repo.add(order)

        if was_cancelled:
            # Stock went back on cancellation and the cart may hold a new basket
            logger.warning(
                "payment_received_after_cancellation",
                order_id=str(order.id),
                transaction_id=command.transaction_id,
                amount=order.pricing.total,
            )
            return "refund_due"

        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.for_customer(order.customer_id)
        if cart is not None and not cart.is_empty:
            cart.clear(order_id=str(order.id))
            cart_repo.add(cart)

        logger.info("payment_confirmed", order_id=str(order.id), transaction_id=command.transaction_id)
        return "paid"
