"""FastAPI routes for store staff: orders, review moderation, coupons and settings.

Authentication is handled in front of this service; ``user_id`` in request
bodies identifies the staff member for the order history.
"""

import json

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from storefront.api.catalogue import review_payload
from storefront.api.schemas import (
    AddOrderNoteRequest,
    CouponIdResponse,
    CreateCouponRequest,
    ModerateReviewRequest,
    StatusResponse,
    UpdateCouponRequest,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
    UpdateSettingRequest,
)
from storefront.api.shopping import order_payload
from storefront.coupon.coupon import OPTIONAL_TERMS
from storefront.coupon.management import ActivateCoupon, CreateCoupon, DeactivateCoupon, UpdateCoupon
from storefront.order.index import DEFAULT_PER_PAGE, order_index
from storefront.order.status import AddOrderNote, UpdateOrderStatus, UpdatePaymentStatus
from storefront.pricing.policy import current_pricing_policy
from storefront.review.moderation import ApproveReview, RejectReview
from storefront.review.review import Review
from storefront.setting.management import UpdateSetting
from storefront.utils.pagination import paginate

admin_router = APIRouter(prefix="/admin", tags=["admin"])
settings_router = APIRouter(prefix="/settings", tags=["settings"])


def _json_list(values):
    return json.dumps(values) if values is not None else None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@admin_router.get("/orders")
async def list_all_orders(
    search: str | None = None,
    order_status: str | None = None,
    payment_status: str | None = None,
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=DEFAULT_PER_PAGE, ge=1, le=100),
):
    """Every order, newest first."""
    result = order_index(
        search=search,
        order_status=order_status,
        payment_status=payment_status,
        page=page,
        per_page=per_page,
    )
    return {
        "items": [order_payload(order) for order in result.items],
        "total": result.total,
        "page": result.page,
        "per_page": result.per_page,
        "last_page": result.last_page,
    }


@admin_router.put("/orders/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    command = UpdateOrderStatus(order_id=order_id, status=body.status, user_id=body.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.post("/orders/{order_id}/notes", status_code=201, response_model=StatusResponse)
async def add_order_note(order_id: str, body: AddOrderNoteRequest) -> StatusResponse:
    command = AddOrderNote(order_id=order_id, note=body.note, user_id=body.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.put("/orders/{order_id}/payment-status", response_model=StatusResponse)
async def update_payment_status(order_id: str, body: UpdatePaymentStatusRequest) -> StatusResponse:
    command = UpdatePaymentStatus(order_id=order_id, payment_status=body.payment_status, user_id=body.user_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
@admin_router.get("/reviews")
async def list_reviews(
    status: str | None = None,
    rating: int | None = Query(default=None, ge=1, le=5),
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=15, ge=1, le=100),
):
    reviews = current_domain.repository_for(Review).search(status=status, rating=rating)
    result = paginate(reviews, page, per_page)
    return {
        "items": [review_payload(review) for review in result.items],
        "total": result.total,
        "page": result.page,
        "per_page": result.per_page,
        "last_page": result.last_page,
    }


@admin_router.put("/reviews/{review_id}/approve", response_model=StatusResponse)
async def approve_review(review_id: str, body: ModerateReviewRequest | None = None) -> StatusResponse:
    notes = body.reason if body else None
    current_domain.process(ApproveReview(review_id=review_id, notes=notes), asynchronous=False)
    return StatusResponse()


@admin_router.put("/reviews/{review_id}/reject", response_model=StatusResponse)
async def reject_review(review_id: str, body: ModerateReviewRequest | None = None) -> StatusResponse:
    reason = body.reason if body else None
    current_domain.process(RejectReview(review_id=review_id, reason=reason), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------------
@admin_router.post("/coupons", status_code=201, response_model=CouponIdResponse)
async def create_coupon(body: CreateCouponRequest) -> CouponIdResponse:
    command = CreateCoupon(
        code=body.code,
        coupon_type=body.type,
        value=body.value,
        start_date=body.start_date,
        end_date=body.end_date,
        min_order_value=body.min_order_value,
        max_discount=body.max_discount,
        usage_limit=body.usage_limit,
        applicable_categories=_json_list(body.applicable_categories),
        applicable_products=_json_list(body.applicable_products),
        status=body.status,
    )
    result = current_domain.process(command, asynchronous=False)
    return CouponIdResponse(coupon_id=result)


@admin_router.put("/coupons/{coupon_id}", response_model=StatusResponse)
async def update_coupon(coupon_id: str, body: UpdateCouponRequest) -> StatusResponse:
    # An optional term sent as an explicit null is removed from the coupon
    cleared = [name for name in OPTIONAL_TERMS if name in body.model_fields_set and getattr(body, name) is None]
    command = UpdateCoupon(
        coupon_id=coupon_id,
        code=body.code,
        coupon_type=body.type,
        value=body.value,
        start_date=body.start_date,
        end_date=body.end_date,
        min_order_value=body.min_order_value,
        max_discount=body.max_discount,
        usage_limit=body.usage_limit,
        applicable_categories=_json_list(body.applicable_categories),
        applicable_products=_json_list(body.applicable_products),
        clear_terms=json.dumps(cleared) if cleared else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.put("/coupons/{coupon_id}/activate", response_model=StatusResponse)
async def activate_coupon(coupon_id: str) -> StatusResponse:
    current_domain.process(ActivateCoupon(coupon_id=coupon_id), asynchronous=False)
    return StatusResponse()


@admin_router.put("/coupons/{coupon_id}/deactivate", response_model=StatusResponse)
async def deactivate_coupon(coupon_id: str) -> StatusResponse:
    current_domain.process(DeactivateCoupon(coupon_id=coupon_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------
@admin_router.put("/settings/{key}", response_model=StatusResponse)
async def update_setting(key: str, body: UpdateSettingRequest) -> StatusResponse:
    command = UpdateSetting(key=key, value=body.value, value_type=body.type, group=body.group)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@settings_router.get("/pricing")
async def pricing_settings():
    policy = current_pricing_policy()
    return {
        "tax_rate": policy.tax_rate_percent,
        "shipping_cost": policy.shipping.flat_rate,
        "free_shipping_threshold": policy.shipping.free_threshold,
        "currency_code": policy.currency,
    }
