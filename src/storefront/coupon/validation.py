"""Read-only coupon validation used by the storefront and by checkout."""

from protean.utils.globals import current_domain

from storefront.coupon.coupon import INVALID_CODE, Coupon, CouponEvaluation, normalize_code
from storefront.domain import logger


def validate_coupon(code, order_total, category_ids=(), product_ids=(), now=None) -> CouponEvaluation:
    """Check ``code`` against an order without consuming it.

    Args:
        code: Coupon code as typed by the customer. Compared upper-cased.
        order_total: Subtotal the discount applies to.
        category_ids: Categories of the products in the order.
        product_ids: Products in the order.
    """
    coupon = current_domain.repository_for(Coupon).find_by_code(normalize_code(code))
    if coupon is None:
        evaluation = CouponEvaluation.rejected(INVALID_CODE)
    else:
        evaluation = coupon.evaluate(order_total, category_ids, product_ids, now=now)

    logger.debug(
        "coupon_evaluated",
        code=normalize_code(code),
        order_total=order_total,
        valid=evaluation.valid,
        coupon_message=evaluation.message,
    )
    return evaluation
