"""Application tests for the staff order index."""

import json

import pytest
from protean.utils.globals import current_domain
from storefront.cart.items import AddToCart
from storefront.order.checkout import PlaceOrder
from storefront.order.index import order_index
from storefront.order.order import Order
from storefront.order.status import UpdateOrderStatus
from storefront.payment.gateway import set_gateway
from storefront.payment.gateway.fake_adapter import FakeGateway
from storefront.product.creation import CreateProduct


def _address(name, phone):
    return {"name": name, "phone": phone, "address": "Station Road", "city": "Khulna", "country": "Bangladesh"}


def _place_order(product_id, customer_id, name, phone, payment_method="cod"):
    current_domain.process(AddToCart(customer_id=customer_id, product_id=product_id, quantity=1), asynchronous=False)
    command = PlaceOrder(
        customer_id=customer_id,
        shipping_address=json.dumps(_address(name, phone)),
        payment_method=payment_method,
    )
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def orders():
    set_gateway(FakeGateway())
    product_id = current_domain.process(CreateProduct(name="Clay Pot", price=350.0, quantity=50), asynchronous=False)
    first = _place_order(product_id, "cust-001", "Farhana Islam", "01711111111")
    second = _place_order(product_id, "cust-002", "Jamal Hossain", "01822222222", payment_method="online")
    third = _place_order(product_id, "cust-003", "Farid Alam", "01933333333")
    current_domain.process(UpdateOrderStatus(order_id=third, status="processing"), asynchronous=False)
    return first, second, third


def _ids(page):
    return [str(order.id) for order in page.items]


class TestOrderIndex:
    def test_newest_first(self, orders):
        first, second, third = orders

        page = order_index()

        assert _ids(page) == [third, second, first]
        assert page.per_page == 15

    def test_filter_by_order_status(self, orders):
        assert _ids(order_index(order_status="processing")) == [orders[2]]

    def test_filter_by_payment_status(self, orders):
        assert order_index(payment_status="pending").total == 3
        assert order_index(payment_status="paid").total == 0

    def test_search_by_order_number(self, orders):
        first = orders[0]
        number = current_domain.repository_for(Order).get(first).order_number

        assert _ids(order_index(search=number.lower())) == [first]

    def test_search_by_contact_and_customer(self, orders):
        first, second, third = orders

        assert _ids(order_index(search="far")) == [third, first]
        assert _ids(order_index(search="01822")) == [second]
        assert _ids(order_index(search="cust-003")) == [third]

    def test_search_combined_with_status(self, orders):
        assert _ids(order_index(search="far", order_status="pending")) == [orders[0]]

    def test_pages(self, orders):
        page = order_index(page=2, per_page=2)

        assert _ids(page) == [orders[0]]
        assert page.last_page == 2
