"""Storefront domain: catalogue, coupons, carts, orders and payment callbacks.

Everything lives in one domain so that a checkout (order, stock decrements,
coupon redemption and order number) commits in a single unit of work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging(log_file_prefix="storefront")

logger = get_logger(__name__)

storefront = Domain(name="storefront")
