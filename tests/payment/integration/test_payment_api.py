"""Integration tests for gateway callback endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers
from storefront.api import admin_router, cart_router, order_router, payment_router, product_router
from storefront.payment.gateway import set_gateway
from storefront.payment.gateway.fake_adapter import TEST_SIGNATURE, FakeGateway

CUSTOMER = "cust-pay-001"

ADDRESS = {
    "name": "Karim Ahmed",
    "phone": "01800000000",
    "address": "Agrabad C/A",
    "city": "Chattogram",
    "country": "Bangladesh",
}

SIGNED = {"X-Gateway-Signature": TEST_SIGNATURE}


@pytest.fixture()
def client():
    app = FastAPI()
    for router in (product_router, cart_router, order_router, payment_router, admin_router):
        app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def gateway():
    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def order(client, gateway):
    response = client.post("/products", json={"name": "Nakshi Kantha", "price": 1500.0, "quantity": 3})
    product_id = response.json()["product_id"]
    client.post(f"/cart/{CUSTOMER}/items", json={"product_id": product_id, "quantity": 1})
    response = client.post(
        "/orders",
        json={"customer_id": CUSTOMER, "shipping_address": ADDRESS, "payment_method": "online"},
    )
    assert response.status_code == 201
    return response.json()


def _callback(client, order_id, status, headers=SIGNED, **extra):
    return client.post("/payments/callback", json={"order_id": order_id, "status": status, **extra}, headers=headers)


class TestSignedCallback:
    def test_success(self, client, order):
        response = _callback(client, order["order_id"], "success", transaction_id="txn-9001")

        assert response.status_code == 200
        assert response.json()["result"] == "paid"

        data = client.get(f"/orders/{order['order_id']}").json()
        assert data["payment_status"] == "paid"
        assert data["order_status"] == "processing"
        assert data["transaction_id"] == "txn-9001"
        assert client.get(f"/cart/{CUSTOMER}").json()["items"] == []

    def test_bad_signature_rejected(self, client, order):
        response = _callback(
            client,
            order["order_id"],
            "success",
            headers={"X-Gateway-Signature": "forged"},
            transaction_id="txn-9001",
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid payment callback signature"
        assert client.get(f"/orders/{order['order_id']}").json()["payment_status"] == "pending"

    def test_missing_signature_rejected(self, client, order):
        response = _callback(client, order["order_id"], "success", headers={}, transaction_id="txn-9001")
        assert response.status_code == 401

    def test_duplicate_success(self, client, order):
        _callback(client, order["order_id"], "success", transaction_id="txn-9001")

        response = _callback(client, order["order_id"], "success", transaction_id="txn-9002")

        assert response.status_code == 200
        assert response.json()["result"] == "ignored"
        assert client.get(f"/orders/{order['order_id']}").json()["transaction_id"] == "txn-9001"

    def test_success_replayed_after_refund(self, client, order):
        _callback(client, order["order_id"], "success", transaction_id="txn-9001")
        client.put(f"/admin/orders/{order['order_id']}/payment-status", json={"payment_status": "refunded"})

        response = _callback(client, order["order_id"], "success", transaction_id="txn-9001")

        assert response.json()["result"] == "ignored"
        assert client.get(f"/orders/{order['order_id']}").json()["payment_status"] == "refunded"

    def test_success_after_cancellation(self, client, order):
        client.put(f"/admin/orders/{order['order_id']}/status", json={"status": "cancelled"})

        response = _callback(client, order["order_id"], "success", transaction_id="txn-9003")

        assert response.json()["result"] == "refund_due"
        data = client.get(f"/orders/{order['order_id']}").json()
        assert data["order_status"] == "cancelled"
        assert data["refund_due"] is True

    def test_failure(self, client, order):
        response = _callback(client, order["order_id"], "fail", reason="Card declined")

        assert response.json()["result"] == "failed"
        data = client.get(f"/orders/{order['order_id']}").json()
        assert data["payment_status"] == "failed"
        assert data["order_status"] == "pending"

    def test_unknown_status_rejected(self, client, order):
        response = _callback(client, order["order_id"], "refunded")
        assert response.status_code == 422


class TestSSLCommerzCallback:
    def test_success_form_post(self, client, order):
        response = client.post(
            "/payments/sslcommerz/success",
            data={"tran_id": order["order_number"], "val_id": TEST_SIGNATURE, "bank_tran_id": "bank-77"},
        )

        assert response.status_code == 200
        assert response.json()["result"] == "paid"
        assert client.get(f"/orders/{order['order_id']}").json()["transaction_id"] == "bank-77"

    def test_success_with_invalid_val_id(self, client, order):
        response = client.post(
            "/payments/sslcommerz/success",
            data={"tran_id": order["order_number"], "val_id": "not-valid"},
        )
        assert response.status_code == 401

    def test_fail_form_post(self, client, gateway, order):
        gateway.record_transaction(order["order_number"], "fail")

        response = client.post(
            "/payments/sslcommerz/fail",
            data={"tran_id": order["order_number"], "error": "Transaction timed out"},
        )

        assert response.json()["result"] == "failed"
        data = client.get(f"/orders/{order['order_id']}").json()
        assert data["payment_status"] == "failed"

    def test_ipn_cancelled(self, client, gateway, order):
        gateway.record_transaction(order["order_number"], "cancel")

        response = client.post(
            "/payments/sslcommerz/ipn",
            data={"tran_id": order["order_number"], "status": "CANCELLED"},
        )

        assert response.json()["result"] == "ignored"

    def test_unverified_fail_post_rejected(self, client, order):
        response = client.post(
            "/payments/sslcommerz/fail",
            data={"tran_id": order["order_number"], "error": "Forged failure"},
        )

        assert response.status_code == 401
        assert client.get(f"/orders/{order['order_id']}").json()["payment_status"] == "pending"

    def test_fail_post_contradicting_gateway_rejected(self, client, gateway, order):
        gateway.record_transaction(order["order_number"], "success")

        response = client.post("/payments/sslcommerz/cancel", data={"tran_id": order["order_number"]})

        assert response.status_code == 401

    def test_ipn_failure_checked_against_gateway(self, client, gateway, order):
        response = client.post(
            "/payments/sslcommerz/ipn",
            data={"tran_id": order["order_number"], "status": "FAILED"},
        )
        assert response.status_code == 401

        gateway.record_transaction(order["order_number"], "fail")
        response = client.post(
            "/payments/sslcommerz/ipn",
            data={"tran_id": order["order_number"], "status": "FAILED"},
        )
        assert response.json()["result"] == "failed"

    def test_unknown_transaction(self, client, order):
        response = client.post("/payments/sslcommerz/fail", data={"tran_id": "ORD-1999-999999"})
        assert response.status_code == 404

    def test_unknown_outcome(self, client, order):
        response = client.post("/payments/sslcommerz/refund", data={"tran_id": order["order_number"]})
        assert response.status_code == 404


class TestGatewayConfiguration:
    def test_configure_fake_gateway(self, client, gateway):
        response = client.post(
            "/payments/gateway/configure",
            json={"should_succeed": False, "failure_reason": "Maintenance window"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "should_succeed": False,
            "failure_reason": "Maintenance window",
            "available": True,
        }
        assert gateway.should_succeed is False

    def test_blocked_in_production(self, client, gateway, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")

        response = client.post("/payments/gateway/configure", json={"should_succeed": False})

        assert response.status_code == 403
        assert gateway.should_succeed is True
