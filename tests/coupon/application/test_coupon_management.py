"""Application tests for coupon management and validation."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from storefront.coupon.coupon import EXPIRED, INVALID_CODE, NOT_APPLICABLE, Coupon, CouponStatus
from storefront.coupon.management import ActivateCoupon, CreateCoupon, DeactivateCoupon, UpdateCoupon
from storefront.coupon.validation import validate_coupon

NOW = datetime.now(UTC)


def _create_coupon(**overrides):
    defaults = {
        "code": "EID20",
        "coupon_type": "percentage",
        "value": 20.0,
        "max_discount": 150.0,
        "start_date": NOW - timedelta(days=1),
        "end_date": NOW + timedelta(days=30),
    }
    defaults.update(overrides)
    return current_domain.process(CreateCoupon(**defaults), asynchronous=False)


def _coupon(coupon_id):
    return current_domain.repository_for(Coupon).get(coupon_id)


class TestCreateCoupon:
    def test_persists_normalized_code(self):
        coupon_id = _create_coupon(code="eid20")
        assert _coupon(coupon_id).code == "EID20"

    def test_codes_are_unique_case_insensitively(self):
        _create_coupon(code="EID20")
        with pytest.raises(ValidationError) as exc:
            _create_coupon(code="eid20")
        assert "already in use" in str(exc.value)

    def test_applicable_ids_stored(self):
        coupon_id = _create_coupon(applicable_categories=json.dumps(["cat-1", "cat-2"]))
        assert _coupon(coupon_id).category_ids == ["cat-1", "cat-2"]


class TestUpdateCoupon:
    def test_update_terms(self):
        coupon_id = _create_coupon()

        current_domain.process(UpdateCoupon(coupon_id=coupon_id, value=25.0, usage_limit=100), asynchronous=False)

        coupon = _coupon(coupon_id)
        assert coupon.value == 25.0
        assert coupon.usage_limit == 100
        assert coupon.max_discount == 150.0

    def test_rename_to_existing_code_rejected(self):
        _create_coupon(code="FIRST")
        second_id = _create_coupon(code="SECOND")

        with pytest.raises(ValidationError):
            current_domain.process(UpdateCoupon(coupon_id=second_id, code="first"), asynchronous=False)

    def test_keeping_own_code_allowed(self):
        coupon_id = _create_coupon(code="KEEP")
        current_domain.process(UpdateCoupon(coupon_id=coupon_id, code="KEEP", value=5.0), asynchronous=False)
        assert _coupon(coupon_id).value == 5.0

    def test_clear_optional_terms(self):
        coupon_id = _create_coupon(usage_limit=50, applicable_products=json.dumps(["prod-1"]))

        cleared = json.dumps(["usage_limit", "max_discount", "applicable_products"])
        command = UpdateCoupon(coupon_id=coupon_id, clear_terms=cleared)
        current_domain.process(command, asynchronous=False)

        coupon = _coupon(coupon_id)
        assert coupon.usage_limit is None
        assert coupon.max_discount is None
        assert coupon.applicable_products is None
        assert coupon.value == 20.0

    def test_required_terms_cannot_be_cleared(self):
        coupon_id = _create_coupon()

        command = UpdateCoupon(coupon_id=coupon_id, clear_terms=json.dumps(["value"]))
        with pytest.raises(ValidationError) as exc:
            current_domain.process(command, asynchronous=False)

        assert "clear_terms" in exc.value.messages
        assert _coupon(coupon_id).value == 20.0


class TestCouponStatus:
    def test_deactivate_and_activate(self):
        coupon_id = _create_coupon()

        current_domain.process(DeactivateCoupon(coupon_id=coupon_id), asynchronous=False)
        assert _coupon(coupon_id).status == CouponStatus.INACTIVE.value

        current_domain.process(ActivateCoupon(coupon_id=coupon_id), asynchronous=False)
        assert _coupon(coupon_id).status == CouponStatus.ACTIVE.value


class TestValidateCoupon:
    def test_valid_percentage_with_cap(self):
        _create_coupon()

        evaluation = validate_coupon("eid20", 1000.0)

        assert evaluation.valid is True
        assert evaluation.discount_amount == 150.0

    def test_unknown_code(self):
        evaluation = validate_coupon("NOPE", 1000.0)
        assert evaluation.valid is False
        assert evaluation.message == INVALID_CODE

    def test_deactivated_code_reads_as_unknown(self):
        coupon_id = _create_coupon()
        current_domain.process(DeactivateCoupon(coupon_id=coupon_id), asynchronous=False)

        assert validate_coupon("EID20", 1000.0).message == INVALID_CODE

    def test_expired(self):
        _create_coupon(start_date=NOW - timedelta(days=10), end_date=NOW - timedelta(days=1))
        assert validate_coupon("EID20", 1000.0).message == EXPIRED

    def test_category_restriction(self):
        _create_coupon(applicable_categories=json.dumps(["cat-shoes"]))

        assert validate_coupon("EID20", 1000.0, category_ids=["cat-shoes"]).valid is True
        assert validate_coupon("EID20", 1000.0, category_ids=["cat-books"]).message == NOT_APPLICABLE

    def test_validation_does_not_consume(self):
        coupon_id = _create_coupon(usage_limit=1)

        validate_coupon("EID20", 1000.0)
        validate_coupon("EID20", 1000.0)

        assert _coupon(coupon_id).used_count == 0
