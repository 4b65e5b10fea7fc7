"""Payment initiation: open a gateway session for an online order.

Runs after the order has been saved, in its own unit of work. A declined
session marks the payment failed and leaves the order in place so the
customer can try again. An unreachable gateway is logged and re-raised for
the caller to report as a retryable error.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.order.order import Order
from storefront.payment.gateway import get_gateway
from storefront.payment.gateway.port import (
    InitiationResult,
    PaymentCustomer,
    PaymentGatewayUnavailable,
    PaymentRequest,
)


@storefront.command(part_of="Order")
class InitiatePayment:
    order_id = Identifier(required=True)


def payment_request_for(order) -> PaymentRequest:
    address = order.shipping_address
    return PaymentRequest(
        order_id=str(order.id),
        order_number=order.order_number,
        amount=order.pricing.total,
        currency=order.pricing.currency,
        customer=PaymentCustomer(
            name=address.name,
            phone=address.phone,
            address=address.address,
            city=address.city,
            country=address.country,
            postal_code=address.postal_code,
        ),
        item_count=len(order.items),
    )


@storefront.command_handler(part_of=Order)
class InitiatePaymentHandler:
    @handle(InitiatePayment)
    def initiate_payment(self, command) -> InitiationResult:
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        # Checked before the gateway is called so a rejected order never opens a session
        order.assert_can_take_payment()

        try:
            result = get_gateway().initiate_payment(payment_request_for(order))
        except PaymentGatewayUnavailable as exc:
            logger.error(
                "payment_gateway_unavailable",
                order_id=str(order.id),
                operation=exc.operation or "initiate_payment",
                error=str(exc),
            )
            raise

        if result.success:
            order.record_payment_initiated(result.session_id or order.order_number)
            logger.info("payment_initiated", order_id=str(order.id), session_id=result.session_id)
        else:
            order.record_payment_failure(result.failure_reason or "Payment initiation failed")
            logger.warning("payment_initiation_declined", order_id=str(order.id), reason=result.failure_reason)
        repo.add(order)

        return result
