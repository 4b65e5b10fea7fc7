"""SSLCommerz hosted-checkout adapter.

Opens sessions through ``/gwprocess/v4/api.php`` and confirms callbacks
through the validation API (``/validator/api/validationserverAPI.php``),
passing the ``val_id`` the gateway posted back as the callback token. Callbacks
without a ``val_id`` (fail, cancel) are checked against the transaction query
API (``/validator/api/merchantTransIDvalidationAPI.php``) by ``tran_id``.
"""

import requests

from storefront.payment.gateway.port import (
    InitiationResult,
    PaymentGateway,
    PaymentGatewayUnavailable,
    PaymentRequest,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SANDBOX_URL = "https://sandbox.sslcommerz.com"
LIVE_URL = "https://securepay.sslcommerz.com"

_VALID_STATUSES = ("VALID", "VALIDATED")

# Transaction query status -> callback outcome; PENDING and UNATTEMPTED are not settled
_TRANSACTION_OUTCOMES = {
    "VALID": "success",
    "VALIDATED": "success",
    "FAILED": "fail",
    "EXPIRED": "fail",
    "CANCELLED": "cancel",
}


class SSLCommerzGateway(PaymentGateway):
    def __init__(
        self,
        store_id: str,
        store_password: str,
        callback_base_url: str,
        sandbox: bool = True,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.store_id = store_id
        self.store_password = store_password
        self.callback_base_url = callback_base_url.rstrip("/")
        self.api_url = SANDBOX_URL if sandbox else LIVE_URL
        self.timeout = timeout
        self.session = session or requests.Session()

    def _callback_url(self, outcome: str) -> str:
        return f"{self.callback_base_url}/payments/sslcommerz/{outcome}"

    def _session_payload(self, request: PaymentRequest) -> dict:
        customer = request.customer
        return {
            "store_id": self.store_id,
            "store_passwd": self.store_password,
            "total_amount": f"{request.amount:.2f}",
            "currency": request.currency,
            "tran_id": request.order_number,
            "cus_name": customer.name,
            "cus_add1": customer.address,
            "cus_city": customer.city,
            "cus_postcode": customer.postal_code or "",
            "cus_country": customer.country,
            "cus_phone": customer.phone,
            "ship_name": customer.name,
            "ship_add1": customer.address,
            "ship_city": customer.city,
            "ship_postcode": customer.postal_code or "",
            "ship_country": customer.country,
            "product_name": f"Order #{request.order_number}",
            "product_category": "General",
            "product_profile": "general",
            "shipping_method": "NO",
            "num_of_item": request.item_count,
            "success_url": self._callback_url("success"),
            "fail_url": self._callback_url("fail"),
            "cancel_url": self._callback_url("cancel"),
            "ipn_url": self._callback_url("ipn"),
            "value_a": request.order_id,
        }

    def _call(self, method: str, path: str, operation: str, **kwargs) -> dict:
        try:
            response = self.session.request(method, f"{self.api_url}{path}", timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise PaymentGatewayUnavailable(f"SSLCommerz request failed: {exc}", operation=operation) from exc

        if response.status_code >= 500:
            raise PaymentGatewayUnavailable(f"SSLCommerz answered {response.status_code}", operation=operation)
        try:
            return response.json()
        except ValueError:
            logger.error("sslcommerz_unreadable_response", operation=operation, status=response.status_code)
            return {}

    def initiate_payment(self, request: PaymentRequest) -> InitiationResult:
        result = self._call(
            "POST",
            "/gwprocess/v4/api.php",
            operation="initiate_payment",
            data=self._session_payload(request),
        )

        if result.get("status") == "SUCCESS" and result.get("GatewayPageURL"):
            return InitiationResult(
                success=True,
                redirect_url=result["GatewayPageURL"],
                session_id=result.get("sessionkey"),
            )

        logger.warning(
            "sslcommerz_initiation_declined",
            order_id=request.order_id,
            reason=result.get("failedreason"),
        )
        return InitiationResult(
            success=False,
            failure_reason=result.get("failedreason") or "Payment initiation failed",
        )

    def verify_callback(self, order_number: str, token: str) -> bool:
        if not token:
            return False

        result = self._call(
            "GET",
            "/validator/api/validationserverAPI.php",
            operation="verify_callback",
            params={
                "val_id": token,
                "store_id": self.store_id,
                "store_passwd": self.store_password,
                "format": "json",
            },
        )
        return result.get("status") in _VALID_STATUSES and result.get("tran_id") == order_number

    def transaction_outcome(self, order_number: str) -> str | None:
        result = self._call(
            "GET",
            "/validator/api/merchantTransIDvalidationAPI.php",
            operation="transaction_outcome",
            params={
                "tran_id": order_number,
                "store_id": self.store_id,
                "store_passwd": self.store_password,
                "format": "json",
            },
        )
        outcomes = [
            _TRANSACTION_OUTCOMES.get(str(element.get("status", "")).upper())
            for element in result.get("element") or []
            if element.get("tran_id", order_number) == order_number
        ]
        # A captured payment wins over earlier failed attempts for the same order
        if "success" in outcomes:
            return "success"
        return next((outcome for outcome in outcomes if outcome), None)
