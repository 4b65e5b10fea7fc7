"""Shared BDD fixtures and step definitions for orders."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.order.events import OrderPlaced, OrderStatusChanged, PaymentConfirmed, PaymentFailed
from storefront.order.order import Address, Order, OrderPricing, PaymentMethod

_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderStatusChanged": OrderStatusChanged,
    "PaymentConfirmed": PaymentConfirmed,
    "PaymentFailed": PaymentFailed,
}


def _placed_order(payment_method):
    order = Order.place(
        order_number="ORD-2026-000042",
        customer_id="cust-bdd",
        items_data=[
            {
                "product_id": "prod-bdd",
                "attribute_id": None,
                "product_name": "Jamdani Saree",
                "attribute_label": None,
                "price": 2500.0,
                "quantity": 1,
                "total": 2500.0,
            }
        ],
        pricing=OrderPricing(subtotal=2500.0, tax=250.0, shipping_cost=0.0, discount=0.0, total=2750.0),
        shipping_address=Address(
            name="Fatema Begum",
            phone="01600000000",
            address="Zindabazar",
            city="Sylhet",
            country="Bangladesh",
        ),
        payment_method=payment_method,
    )
    order._events.clear()
    return order


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a pending cash-on-delivery order", target_fixture="order")
def pending_cod_order():
    return _placed_order(PaymentMethod.COD.value)


@given("a pending online order", target_fixture="order")
def pending_online_order():
    return _placed_order(PaymentMethod.ONLINE.value)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.order_status == status


@then(parsers.cfparse('the payment status is "{status}"'))
def payment_status_is(order, status):
    assert order.payment_status == status


@then(parsers.cfparse("an {event_type} event is raised"))
def order_event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"


@then("the status change fails with a validation error")
def status_change_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)
