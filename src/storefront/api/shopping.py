"""FastAPI routes customers use: coupon checks, the cart and placing orders."""

import json

from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddToCartRequest,
    CouponEvaluationResponse,
    ItemIdResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
    ValidateCouponRequest,
)
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from storefront.coupon.validation import validate_coupon
from storefront.order.checkout import PlaceOrder
from storefront.order.order import Order, PaymentMethod
from storefront.payment.gateway.port import PaymentGatewayUnavailable
from storefront.payment.initiation import InitiatePayment
from storefront.pricing.quote import quote_cart

coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])

GATEWAY_UNAVAILABLE_MESSAGE = "Payment service is temporarily unavailable, please retry"


def order_payload(order):
    pricing = order.pricing
    return {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "order_status": order.order_status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "transaction_id": order.transaction_id,
        "refund_due": bool(order.refund_due),
        "coupon_code": order.coupon_code,
        "notes": order.notes,
        "pricing": {
            "subtotal": pricing.subtotal,
            "tax": pricing.tax,
            "shipping_cost": pricing.shipping_cost,
            "discount": pricing.discount,
            "total": pricing.total,
            "currency": pricing.currency,
        },
        "shipping_address": order.shipping_address.to_dict(),
        "billing_address": order.billing_address.to_dict() if order.billing_address else None,
        "items": [
            {
                "product_id": str(item.product_id),
                "attribute_id": str(item.attribute_id) if item.attribute_id else None,
                "product_name": item.product_name,
                "attribute_label": item.attribute_label,
                "price": item.price,
                "quantity": item.quantity,
                "total": item.total,
            }
            for item in order.items
        ],
        "status_history": [entry.as_dict() for entry in order.status_history],
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }


# ---------------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------------
@coupon_router.post("/validate", response_model=CouponEvaluationResponse)
async def validate_coupon_code(body: ValidateCouponRequest) -> CouponEvaluationResponse:
    evaluation = validate_coupon(body.code, body.subtotal, body.category_ids, body.product_ids)
    return CouponEvaluationResponse(
        valid=evaluation.valid,
        discount_amount=evaluation.discount_amount,
        message=evaluation.message,
        code=evaluation.code,
    )


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
@cart_router.get("/{customer_id}")
async def get_cart(customer_id: str, coupon_code: str | None = None):
    """Current cart priced with live catalogue data, plus an optional coupon preview."""
    quote = quote_cart(customer_id, coupon_code=coupon_code)
    return {
        "customer_id": customer_id,
        "items": [
            {
                "item_id": line.item_id,
                "product_id": line.product_id,
                "attribute_id": line.attribute_id,
                "product_name": line.product_name,
                "attribute_label": line.attribute_label,
                "unit_price": line.unit_price,
                "quantity": line.quantity,
                "line_total": line.line_total,
            }
            for line in quote.lines
        ],
        "totals": quote.totals.as_dict(),
        "currency": quote.currency,
        "coupon": (
            {
                "valid": quote.coupon.valid,
                "message": quote.coupon.message,
                "discount_amount": quote.coupon.discount_amount,
            }
            if quote.coupon
            else None
        ),
    }


@cart_router.post("/{customer_id}/items", status_code=201, response_model=ItemIdResponse)
async def add_cart_item(customer_id: str, body: AddToCartRequest) -> ItemIdResponse:
    command = AddToCart(
        customer_id=customer_id,
        product_id=body.product_id,
        attribute_id=body.attribute_id,
        quantity=body.quantity,
    )
    result = current_domain.process(command, asynchronous=False)
    return ItemIdResponse(item_id=result)


@cart_router.put("/{customer_id}/items/{item_id}", response_model=StatusResponse)
async def update_cart_item(customer_id: str, item_id: str, body: UpdateCartQuantityRequest) -> StatusResponse:
    command = UpdateCartQuantity(customer_id=customer_id, item_id=item_id, new_quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{customer_id}/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(customer_id: str, item_id: str) -> StatusResponse:
    command = RemoveFromCart(customer_id=customer_id, item_id=item_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{customer_id}", response_model=StatusResponse)
async def clear_cart(customer_id: str) -> StatusResponse:
    current_domain.process(ClearCart(customer_id=customer_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=PlaceOrderResponse)
async def place_order(body: PlaceOrderRequest) -> PlaceOrderResponse:
    """Place an order from the customer's cart.

    Online orders are handed to the payment gateway once the order is saved.
    A declined session is reported in ``payment_error``; the order stays and
    payment can be retried through ``POST /orders/{order_id}/payment``.
    """
    command = PlaceOrder(
        customer_id=body.customer_id,
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        billing_address=json.dumps(body.billing_address.model_dump()) if body.billing_address else None,
        payment_method=body.payment_method,
        coupon_code=body.coupon_code,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)

    payment_url = None
    payment_error = None
    if body.payment_method == PaymentMethod.ONLINE.value:
        try:
            result = current_domain.process(InitiatePayment(order_id=order_id), asynchronous=False)
        except PaymentGatewayUnavailable:
            payment_error = GATEWAY_UNAVAILABLE_MESSAGE
        else:
            payment_url = result.redirect_url
            payment_error = None if result.success else result.failure_reason

    order = current_domain.repository_for(Order).get(order_id)
    return PlaceOrderResponse(
        order_id=order_id,
        order_number=order.order_number,
        total=order.pricing.total,
        payment_url=payment_url,
        payment_error=payment_error,
    )


@order_router.post("/{order_id}/payment")
async def retry_payment(order_id: str):
    """Open a new gateway session for an online order that is not paid yet."""
    try:
        result = current_domain.process(InitiatePayment(order_id=order_id), asynchronous=False)
    except PaymentGatewayUnavailable:
        raise HTTPException(status_code=503, detail=GATEWAY_UNAVAILABLE_MESSAGE) from None
    return {
        "success": result.success,
        "payment_url": result.redirect_url,
        "payment_error": result.failure_reason,
    }


@order_router.get("")
async def list_orders(customer_id: str, status: str | None = None):
    orders = current_domain.repository_for(Order).for_customer(customer_id, status=status)
    return {"orders": [order_payload(order) for order in orders]}


@order_router.get("/{order_id}")
async def get_order(order_id: str):
    order = current_domain.repository_for(Order).get(order_id)
    return order_payload(order)
