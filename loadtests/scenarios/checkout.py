"""Checkout load test scenarios.

Shopper journeys from an empty cart to a placed order. Each journey creates
its own product first so that concurrent shoppers never compete for stock
they did not create.

Online journeys finish with a signed callback to ``/payments/callback``,
which only works while the server runs with the FakeGateway.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    coupon_data,
    customer_id,
    payment_callback_data,
    place_order_data,
    product_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState

FAKE_GATEWAY_SIGNATURE = "test-signature"


class _ShopperJourney(SequentialTaskSet):
    """Common first steps: stock a product and fill a cart."""

    def on_start(self):
        self.state = ShopperState(customer_id=customer_id())

    def _create_product(self):
        with self.client.post(
            "/products",
            json=product_data(),
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_ids.append(resp.json()["product_id"])
            else:
                resp.failure(f"Create product failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    def _add_to_cart(self, quantity):
        with self.client.post(
            f"/cart/{self.state.customer_id}/items",
            json={"product_id": self.state.product_ids[-1], "quantity": quantity},
            catch_response=True,
            name="POST /cart/{customer_id}/items",
        ) as resp:
            if resp.status_code == 201:
                self.state.cart_item_ids.append(resp.json()["item_id"])
            else:
                resp.failure(f"Add to cart failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    def _view_cart(self):
        params = {"coupon_code": self.state.coupon_code} if self.state.coupon_code else None
        with self.client.get(
            f"/cart/{self.state.customer_id}",
            params=params,
            catch_response=True,
            name="GET /cart/{customer_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"View cart failed: {resp.status_code}")

    def _place_order(self, payment_method):
        payload = place_order_data(self.state.customer_id, payment_method, coupon_code=self.state.coupon_code)
        with self.client.post(
            "/orders",
            json=payload,
            catch_response=True,
            name=f"POST /orders ({payment_method})",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["order_id"]
                self.state.order_number = body["order_number"]
                self.state.payment_url = body.get("payment_url")
                self.state.order_status = "pending"
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()


class CashOnDeliveryJourney(_ShopperJourney):
    """Product -> Cart -> Coupon -> COD Order -> Staff moves it to delivered.

    Generates events: ProductCreated, CartItemAdded, CouponCreated,
    OrderPlaced, CouponRedeemed, StockLevelChanged, CartCleared,
    OrderStatusChanged (x3).
    """

    @task
    def create_product(self):
        self._create_product()

    @task
    def add_to_cart(self):
        self._add_to_cart(random.randint(1, 3))

    @task
    def create_coupon(self):
        payload = coupon_data()
        with self.client.post(
            "/admin/coupons",
            json=payload,
            catch_response=True,
            name="POST /admin/coupons",
        ) as resp:
            if resp.status_code == 201:
                self.state.coupon_code = payload["code"]
            else:
                resp.failure(f"Create coupon failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def validate_coupon(self):
        if not self.state.coupon_code:
            return
        with self.client.post(
            "/coupons/validate",
            json={"code": self.state.coupon_code, "subtotal": 2000.0},
            catch_response=True,
            name="POST /coupons/validate",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Validate coupon failed: {resp.status_code}")
            elif not resp.json()["valid"]:
                # Minimum order not met; check out without it
                self.state.coupon_code = None

    @task
    def view_cart(self):
        self._view_cart()

    @task
    def place_order(self):
        self._place_order("cod")

    @task
    def fulfil_order(self):
        for status in ("processing", "shipped", "delivered"):
            with self.client.put(
                f"/admin/orders/{self.state.order_id}/status",
                json={"status": status, "user_id": "staff-loadtest"},
                catch_response=True,
                name="PUT /admin/orders/{id}/status",
            ) as resp:
                if resp.status_code == 200:
                    self.state.order_status = status
                else:
                    resp.failure(f"Move to {status} failed: {resp.status_code} - {extract_error_detail(resp)}")
                    return

    @task
    def done(self):
        self.interrupt()


class OnlinePaymentJourney(_ShopperJourney):
    """Product -> Cart -> Online Order -> Gateway Callback (success or fail + retry).

    Generates events: ProductCreated, CartItemAdded, OrderPlaced,
    PaymentInitiated, PaymentFailed (sometimes), PaymentConfirmed,
    OrderStatusChanged, CartCleared.
    """

    @task
    def create_product(self):
        self._create_product()

    @task
    def add_to_cart(self):
        self._add_to_cart(1)

    @task
    def view_cart(self):
        self._view_cart()

    @task
    def place_order(self):
        self._place_order("online")

    def _callback(self, succeed):
        with self.client.post(
            "/payments/callback",
            json=payment_callback_data(self.state.order_id, succeed=succeed),
            headers={"X-Gateway-Signature": FAKE_GATEWAY_SIGNATURE},
            catch_response=True,
            name=f"POST /payments/callback ({'success' if succeed else 'fail'})",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Payment callback failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()
            return resp

    @task
    def first_attempt(self):
        if random.random() < 0.2:
            self._callback(succeed=False)
            with self.client.post(
                f"/orders/{self.state.order_id}/payment",
                catch_response=True,
                name="POST /orders/{id}/payment",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Retry payment failed: {resp.status_code} - {extract_error_detail(resp)}")
        self._callback(succeed=True)
        self.state.order_status = "processing"

    @task
    def view_order(self):
        with self.client.get(
            f"/orders/{self.state.order_id}",
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get order failed: {resp.status_code}")
            elif resp.json()["payment_status"] != "paid":
                resp.failure("Order not marked paid after successful callback")

    @task
    def done(self):
        self.interrupt()


class AbandonedCartJourney(_ShopperJourney):
    """Product -> Cart -> Change Quantity -> Remove -> Leave.

    Generates events: ProductCreated, CartItemAdded, CartQuantityUpdated,
    CartItemRemoved.
    """

    @task
    def create_product(self):
        self._create_product()

    @task
    def add_to_cart(self):
        self._add_to_cart(1)

    @task
    def change_quantity(self):
        with self.client.put(
            f"/cart/{self.state.customer_id}/items/{self.state.cart_item_ids[-1]}",
            json={"quantity": random.randint(2, 5)},
            catch_response=True,
            name="PUT /cart/{customer_id}/items/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update quantity failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def view_cart(self):
        self._view_cart()

    @task
    def remove_item(self):
        with self.client.delete(
            f"/cart/{self.state.customer_id}/items/{self.state.cart_item_ids[-1]}",
            catch_response=True,
            name="DELETE /cart/{customer_id}/items/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Remove item failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    """Locust user simulating customers.

    Weighted distribution:
    - 40% Abandoned cart (browsing without buying)
    - 30% Online payment
    - 30% Cash on delivery
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        AbandonedCartJourney: 4,
        OnlinePaymentJourney: 3,
        CashOnDeliveryJourney: 3,
    }
