"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing (the default)
- SSLCommerzGateway when ``SSLCZ_STORE_ID`` and ``SSLCZ_STORE_PASSWORD`` are set
"""

import os

from storefront.payment.gateway.fake_adapter import FakeGateway
from storefront.payment.gateway.port import PaymentGateway
from storefront.payment.gateway.sslcommerz_adapter import SSLCommerzGateway

_current_gateway: PaymentGateway | None = None


def gateway_from_env() -> PaymentGateway:
    """Build the gateway described by the environment, falling back to FakeGateway."""
    store_id = os.getenv("SSLCZ_STORE_ID")
    store_password = os.getenv("SSLCZ_STORE_PASSWORD")
    if not store_id or not store_password:
        return FakeGateway()

    return SSLCommerzGateway(
        store_id=store_id,
        store_password=store_password,
        callback_base_url=os.getenv("STOREFRONT_CALLBACK_BASE_URL", "http://localhost:8000"),
        sandbox=os.getenv("SSLCZ_SANDBOX", "true").lower() in ("1", "true", "yes"),
    )


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, building it from the environment on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = gateway_from_env()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
