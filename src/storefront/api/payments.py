"""FastAPI routes the payment gateway calls back into.

``POST /payments/callback`` takes a JSON body and an ``X-Gateway-Signature``
header. ``POST /payments/sslcommerz/{outcome}`` takes the form post
SSLCommerz sends to the success/fail/cancel/ipn URLs it was given; a success
is confirmed through its ``val_id`` and any other outcome through the
gateway's transaction record.
"""

import os
from urllib.parse import parse_qs

from fastapi import APIRouter, Header, HTTPException, Request
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    ConfigureGatewayRequest,
    GatewayConfigResponse,
    PaymentCallbackRequest,
    PaymentCallbackResponse,
)
from storefront.domain import logger
from storefront.order.order import Order
from storefront.payment.callbacks import CallbackOutcome, HandlePaymentCallback
from storefront.payment.gateway import get_gateway
from storefront.payment.gateway.fake_adapter import FakeGateway

payment_router = APIRouter(prefix="/payments", tags=["payments"])

# SSLCommerz IPN status -> callback outcome
_IPN_OUTCOMES = {
    "VALID": CallbackOutcome.SUCCESS,
    "VALIDATED": CallbackOutcome.SUCCESS,
    "FAILED": CallbackOutcome.FAIL,
    "CANCELLED": CallbackOutcome.CANCEL,
}


def _reject_signature(order_id):
    logger.warning("payment_callback_rejected", order_id=order_id)
    raise HTTPException(status_code=401, detail="Invalid payment callback signature")


@payment_router.post("/callback", response_model=PaymentCallbackResponse)
async def payment_callback(
    body: PaymentCallbackRequest,
    x_gateway_signature: str = Header(default=""),
) -> PaymentCallbackResponse:
    """Process a signed payment outcome posted by the gateway."""
    order = current_domain.repository_for(Order).get(body.order_id)
    if not get_gateway().verify_callback(order.order_number, x_gateway_signature):
        _reject_signature(body.order_id)

    command = HandlePaymentCallback(
        order_id=body.order_id,
        outcome=body.status,
        transaction_id=body.transaction_id,
        reason=body.reason,
    )
    result = current_domain.process(command, asynchronous=False)
    return PaymentCallbackResponse(result=result)


@payment_router.post("/sslcommerz/{outcome}", response_model=PaymentCallbackResponse)
async def sslcommerz_callback(outcome: str, request: Request) -> PaymentCallbackResponse:
    """Form post from SSLCommerz. ``tran_id`` carries the order number."""
    form = {key: values[0] for key, values in parse_qs((await request.body()).decode("utf-8")).items()}

    if outcome == "ipn":
        callback_outcome = _IPN_OUTCOMES.get(form.get("status", "").upper(), CallbackOutcome.FAIL)
    else:
        try:
            callback_outcome = CallbackOutcome(outcome)
        except ValueError:
            raise HTTPException(status_code=404, detail=f"Unknown payment outcome '{outcome}'") from None

    order = current_domain.repository_for(Order).find_by_number(form.get("tran_id", ""))
    if order is None:
        raise HTTPException(status_code=404, detail="Unknown transaction")

    gateway = get_gateway()
    if callback_outcome == CallbackOutcome.SUCCESS:
        if not gateway.verify_callback(order.order_number, form.get("val_id", "")):
            _reject_signature(str(order.id))
    elif gateway.transaction_outcome(order.order_number) != callback_outcome.value:
        # Fail and cancel posts carry no token; the gateway's transaction record must agree
        _reject_signature(str(order.id))

    command = HandlePaymentCallback(
        order_id=str(order.id),
        outcome=callback_outcome.value,
        transaction_id=form.get("bank_tran_id") or form.get("val_id"),
        reason=form.get("error") or form.get("failedreason"),
    )
    result = current_domain.process(command, asynchronous=False)
    return PaymentCallbackResponse(result=result)


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
        available=body.available,
    )
    return GatewayConfigResponse(
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
        available=gateway.available,
    )
