"""Shared BDD fixtures and step definitions for coupons."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from pytest_bdd import given, parsers
from storefront.coupon.coupon import Coupon, CouponType

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture()
def now():
    return NOW


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a {coupon_type} coupon "{code}" worth {value:g}'),
    target_fixture="coupon",
)
def coupon_worth(coupon_type, code, value):
    coupon = Coupon.create(
        code=code,
        coupon_type=CouponType(coupon_type).value,
        value=value,
        start_date=NOW - timedelta(days=30),
        end_date=NOW + timedelta(days=30),
    )
    coupon._events.clear()
    return coupon


@given(parsers.cfparse("the coupon has a maximum discount of {amount:g}"))
def coupon_max_discount(coupon, amount):
    coupon.max_discount = amount


@given(parsers.cfparse("the coupon requires a minimum order of {amount:g}"))
def coupon_min_order(coupon, amount):
    coupon.min_order_value = amount


@given("the coupon expired yesterday")
def coupon_expired(coupon):
    coupon.end_date = NOW - timedelta(days=1)


@given("the coupon starts tomorrow")
def coupon_starts_tomorrow(coupon):
    coupon.start_date = NOW + timedelta(days=1)


@given(parsers.cfparse("the coupon has been used {used:d} times out of {limit:d}"))
def coupon_used(coupon, used, limit):
    coupon.usage_limit = limit
    coupon.used_count = used


@given("the coupon is deactivated")
def coupon_deactivated(coupon):
    coupon.deactivate()


@given(parsers.cfparse('the coupon is limited to category "{category_id}"'))
def coupon_limited_to_category(coupon, category_id):
    coupon.applicable_categories = json.dumps([category_id])
