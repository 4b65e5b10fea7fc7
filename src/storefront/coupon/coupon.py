"""Coupon aggregate: discount rules, validity window and usage accounting.

Evaluating a coupon never changes it. ``used_count`` only moves through
``redeem()``, which order placement calls once per confirmed order.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text

from storefront.domain import storefront


class CouponType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CouponStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


INVALID_CODE = "Invalid coupon code"
NOT_YET_ACTIVE = "Coupon is not yet active"
EXPIRED = "Coupon has expired"
USAGE_LIMIT_EXCEEDED = "Coupon usage limit exceeded"
NOT_APPLICABLE = "Coupon is not applicable to the items in your order"
APPLIED = "Coupon applied successfully"

OPTIONAL_TERMS = ("min_order_value", "max_discount", "usage_limit", "applicable_categories", "applicable_products")

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


@dataclass(frozen=True)
class CouponEvaluation:
    """Outcome of checking a coupon against an order."""

    valid: bool
    discount_amount: float = 0.0
    message: str = INVALID_CODE
    coupon_id: str | None = None
    code: str | None = None

    @classmethod
    def rejected(cls, message, coupon=None):
        return cls(
            valid=False,
            message=message,
            coupon_id=str(coupon.id) if coupon is not None else None,
            code=coupon.code if coupon is not None else None,
        )


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def _as_utc(moment):
    if moment is None:
        return None
    if isinstance(moment, str):
        moment = datetime.fromisoformat(moment)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def _id_list(raw):
    if not raw:
        return []
    values = json.loads(raw) if isinstance(raw, str) else raw
    return [str(v) for v in values]


@storefront.aggregate
class Coupon:
    code = String(required=True, max_length=50)
    coupon_type = String(required=True, choices=CouponType)
    value = Float(required=True, min_value=0.0)
    min_order_value = Float(min_value=0.0)
    max_discount = Float(min_value=0.0)
    usage_limit = Integer(min_value=0)
    used_count = Integer(default=0, min_value=0)
    applicable_categories = Text()  # JSON array of category ids
    applicable_products = Text()  # JSON array of product ids
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    status = String(choices=CouponStatus, default=CouponStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def validity_window_must_be_ordered(self):
        if self.start_date and self.end_date and _as_utc(self.end_date) < _as_utc(self.start_date):
            raise ValidationError({"end_date": ["End date must be on or after the start date"]})

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.coupon_type == CouponType.PERCENTAGE.value and self.value is not None and self.value > 100:
            raise ValidationError({"value": ["A percentage coupon cannot exceed 100"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        code,
        coupon_type,
        value,
        start_date,
        end_date,
        min_order_value=None,
        max_discount=None,
        usage_limit=None,
        applicable_categories=None,
        applicable_products=None,
        status=None,
    ):
        from storefront.coupon.events import CouponCreated

        now = datetime.now(UTC)
        coupon = cls(
            code=normalize_code(code),
            coupon_type=coupon_type,
            value=value,
            min_order_value=min_order_value,
            max_discount=max_discount,
            usage_limit=usage_limit,
            used_count=0,
            applicable_categories=json.dumps(applicable_categories) if applicable_categories else None,
            applicable_products=json.dumps(applicable_products) if applicable_products else None,
            start_date=_as_utc(start_date),
            end_date=_as_utc(end_date),
            status=status or CouponStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        coupon.raise_(
            CouponCreated(
                coupon_id=coupon.id,
                code=coupon.code,
                coupon_type=coupon.coupon_type,
                value=coupon.value,
                start_date=coupon.start_date,
                end_date=coupon.end_date,
            )
        )
        return coupon

    def update_terms(
        self,
        code=_UNSET,
        coupon_type=_UNSET,
        value=_UNSET,
        start_date=_UNSET,
        end_date=_UNSET,
        min_order_value=_UNSET,
        max_discount=_UNSET,
        usage_limit=_UNSET,
        applicable_categories=_UNSET,
        applicable_products=_UNSET,
    ):
        """Change any of the coupon's terms. ``used_count`` is not editable here.

        Arguments left out are unchanged. Passing None removes an optional
        term (minimum order, discount cap, usage limit, applicability lists);
        the required terms ignore None.
        """
        from storefront.coupon.events import CouponUpdated

        with atomic_change(self):
            if code is not _UNSET and code:
                self.code = normalize_code(code)
            if coupon_type is not _UNSET and coupon_type is not None:
                self.coupon_type = coupon_type
            if value is not _UNSET and value is not None:
                self.value = value
            if start_date is not _UNSET and start_date is not None:
                self.start_date = _as_utc(start_date)
            if end_date is not _UNSET and end_date is not None:
                self.end_date = _as_utc(end_date)
            if min_order_value is not _UNSET:
                self.min_order_value = min_order_value
            if max_discount is not _UNSET:
                self.max_discount = max_discount
            if usage_limit is not _UNSET:
                self.usage_limit = usage_limit
            if applicable_categories is not _UNSET:
                self.applicable_categories = json.dumps(applicable_categories) if applicable_categories else None
            if applicable_products is not _UNSET:
                self.applicable_products = json.dumps(applicable_products) if applicable_products else None
            self.updated_at = datetime.now(UTC)

        self.raise_(CouponUpdated(coupon_id=self.id, code=self.code))

    def activate(self):
        self._change_status(CouponStatus.ACTIVE)

    def deactivate(self):
        self._change_status(CouponStatus.INACTIVE)

    def _change_status(self, status):
        from storefront.coupon.events import CouponStatusChanged

        if self.status == status.value:
            raise ValidationError({"status": [f"Coupon is already {status.value}"]})

        self.status = status.value
        self.updated_at = datetime.now(UTC)
        self.raise_(CouponStatusChanged(coupon_id=self.id, code=self.code, status=self.status))

    # -------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------
    @property
    def category_ids(self):
        return _id_list(self.applicable_categories)

    @property
    def product_ids(self):
        return _id_list(self.applicable_products)

    @property
    def usage_exhausted(self):
        return self.usage_limit is not None and self.used_count >= self.usage_limit

    def rejection_reason(self, order_total, category_ids=(), product_ids=(), now=None):
        """Return the first failed rule as a user-facing message, or None when usable."""
        now = _as_utc(now) or datetime.now(UTC)

        if self.status != CouponStatus.ACTIVE.value:
            return INVALID_CODE
        if now < _as_utc(self.start_date):
            return NOT_YET_ACTIVE
        if now > _as_utc(self.end_date):
            return EXPIRED
        if self.usage_exhausted:
            return USAGE_LIMIT_EXCEEDED
        if self.min_order_value is not None and order_total < self.min_order_value:
            return f"Minimum order value of {self.min_order_value:.2f} required"

        requested_categories = {str(c) for c in category_ids or () if c}
        if self.category_ids and not requested_categories.intersection(self.category_ids):
            return NOT_APPLICABLE
        requested_products = {str(p) for p in product_ids or () if p}
        if self.product_ids and not requested_products.intersection(self.product_ids):
            return NOT_APPLICABLE

        return None

    def calculate_discount(self, order_total):
        """Discount for ``order_total``: never negative, never more than the total."""
        order_total = max(order_total or 0.0, 0.0)
        if self.coupon_type == CouponType.PERCENTAGE.value:
            discount = order_total * self.value / 100
            if self.max_discount is not None:
                discount = min(discount, self.max_discount)
        else:
            discount = self.value

        return round(max(min(discount, order_total), 0.0), 2)

    def evaluate(self, order_total, category_ids=(), product_ids=(), now=None) -> CouponEvaluation:
        reason = self.rejection_reason(order_total, category_ids, product_ids, now=now)
        if reason is not None:
            return CouponEvaluation.rejected(reason, coupon=self)

        return CouponEvaluation(
            valid=True,
            discount_amount=self.calculate_discount(order_total),
            message=APPLIED,
            coupon_id=str(self.id),
            code=self.code,
        )

    # -------------------------------------------------------------------
    # Redemption
    # -------------------------------------------------------------------
    def redeem(self, order_id=None):
        """Count one use. Re-checks the usage limit at the moment of redemption."""
        from storefront.coupon.events import CouponRedeemed

        if self.usage_exhausted:
            raise ValidationError({"coupon_code": [USAGE_LIMIT_EXCEEDED]})

        now = datetime.now(UTC)
        self.used_count = (self.used_count or 0) + 1
        self.updated_at = now

        self.raise_(
            CouponRedeemed(
                coupon_id=self.id,
                code=self.code,
                order_id=order_id,
                used_count=self.used_count,
                redeemed_at=now,
            )
        )
