"""Domain events for the Coupon aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Coupon")
class CouponCreated:
    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    coupon_type = String(required=True)
    value = Float(required=True)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)


@storefront.event(part_of="Coupon")
class CouponUpdated:
    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)


@storefront.event(part_of="Coupon")
class CouponStatusChanged:
    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    status = String(required=True)


@storefront.event(part_of="Coupon")
class CouponRedeemed:
    """A coupon was used by a confirmed order. ``used_count`` is the new total."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    order_id = Identifier()
    used_count = Integer(required=True)
    redeemed_at = DateTime(required=True)
