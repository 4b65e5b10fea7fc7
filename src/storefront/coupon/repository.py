"""Repository for the Coupon aggregate."""

from storefront.coupon.coupon import Coupon, normalize_code
from storefront.domain import storefront


@storefront.repository(part_of=Coupon)
class CouponRepository:
    def find_by_code(self, code: str) -> Coupon | None:
        """Exact match on the stored (upper-cased) code."""
        return self._dao.query.filter(code=normalize_code(code)).all().first
