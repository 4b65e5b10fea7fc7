"""Payment gateway port (abstract interface).

The storefront needs a page to send the customer to from a hosted-checkout
gateway, plus ways to confirm that a callback really came from the gateway:
a token check for successful payments and a transaction lookup for the rest.
Adapters translate these to the provider's API.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class PaymentGatewayUnavailable(Exception):
    """The gateway could not be reached or answered with a server error. Safe to retry."""

    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation


@dataclass(frozen=True)
class PaymentCustomer:
    name: str
    phone: str
    address: str
    city: str
    country: str
    postal_code: str | None = None


@dataclass(frozen=True)
class PaymentRequest:
    """What the gateway needs to open a payment session for an order."""

    order_id: str
    order_number: str
    amount: float
    currency: str
    customer: PaymentCustomer
    item_count: int = 1
    metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class InitiationResult:
    """Outcome of opening a payment session."""

    success: bool
    redirect_url: str | None = None
    session_id: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def initiate_payment(self, request: PaymentRequest) -> InitiationResult:
        """Open a hosted payment session and return where to send the customer."""
        ...

    @abstractmethod
    def verify_callback(self, order_number: str, token: str) -> bool:
        """Confirm that a callback for the order numbered ``order_number`` is authentic."""
        ...

    @abstractmethod
    def transaction_outcome(self, order_number: str) -> str | None:
        """The gateway's own record of how the order's payment ended.

        Returns ``"success"``, ``"fail"`` or ``"cancel"``, or None when the
        gateway has no settled transaction for the order. Used to confirm
        callbacks that carry no validation token.
        """
        ...
