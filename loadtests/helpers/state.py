"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state. Nothing is shared between
users, so every journey creates the products and coupons it needs.
"""

from dataclasses import dataclass, field


@dataclass
class CatalogueState:
    """Products and categories a simulated store manager has created."""

    category_ids: list[str] = field(default_factory=list)
    product_ids: list[str] = field(default_factory=list)
    attribute_ids: dict[str, str] = field(default_factory=dict)


@dataclass
class ShopperState:
    """A simulated customer's way from browsing to a paid order."""

    customer_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    cart_item_ids: list[str] = field(default_factory=list)
    coupon_code: str | None = None
    order_id: str | None = None
    order_number: str | None = None
    payment_url: str | None = None
    order_status: str = "none"
