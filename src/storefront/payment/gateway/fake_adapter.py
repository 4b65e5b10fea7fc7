"""Configurable fake payment gateway for development and testing.

Simulates a hosted checkout without any external calls. It can be told to
accept or decline new sessions, or to behave as if the provider were down,
through ``configure()`` or the ``/payments/gateway/configure`` endpoint.
Successful callbacks are authentic when their token is ``test-signature``;
other outcomes are confirmed against transactions registered with
``record_transaction()``.
"""

from dataclasses import asdict
from uuid import uuid4

from storefront.payment.gateway.port import (
    InitiationResult,
    PaymentGateway,
    PaymentGatewayUnavailable,
    PaymentRequest,
)

TEST_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.available: bool = True
        self.failure_reason: str = "Payment initiation declined"
        self.calls: list[dict] = []
        self.transactions: dict[str, str] = {}

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Payment initiation declined",
        available: bool = True,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.available = available

    def initiate_payment(self, request: PaymentRequest) -> InitiationResult:
        self.calls.append({"method": "initiate_payment", **asdict(request)})

        if not self.available:
            raise PaymentGatewayUnavailable("Fake gateway is offline", operation="initiate_payment")

        if self.should_succeed:
            session_id = f"fake_session_{uuid4().hex[:12]}"
            return InitiationResult(
                success=True,
                redirect_url=f"https://gateway.test/pay/{session_id}",
                session_id=session_id,
            )
        return InitiationResult(success=False, failure_reason=self.failure_reason)

    def verify_callback(self, order_number: str, token: str) -> bool:
        self.calls.append({"method": "verify_callback", "order_number": order_number})
        return token == TEST_SIGNATURE

    def record_transaction(self, order_number: str, outcome: str) -> None:
        """Register how the order's payment ended, as the provider would see it."""
        self.transactions[order_number] = outcome

    def transaction_outcome(self, order_number: str) -> str | None:
        self.calls.append({"method": "transaction_outcome", "order_number": order_number})
        return self.transactions.get(order_number)
