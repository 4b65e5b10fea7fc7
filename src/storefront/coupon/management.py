"""Coupon management: commands and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.coupon.coupon import OPTIONAL_TERMS, Coupon, normalize_code
from storefront.domain import logger, storefront


@storefront.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=50)
    coupon_type = String(required=True, max_length=20)
    value = Float(required=True, min_value=0.0)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    min_order_value = Float(min_value=0.0)
    max_discount = Float(min_value=0.0)
    usage_limit = Integer(min_value=0)
    applicable_categories = Text()  # JSON array
    applicable_products = Text()  # JSON array
    status = String(max_length=20)


@storefront.command(part_of="Coupon")
class UpdateCoupon:
    coupon_id = Identifier(required=True)
    code = String(max_length=50)
    coupon_type = String(max_length=20)
    value = Float(min_value=0.0)
    start_date = DateTime()
    end_date = DateTime()
    min_order_value = Float(min_value=0.0)
    max_discount = Float(min_value=0.0)
    usage_limit = Integer(min_value=0)
    applicable_categories = Text()
    applicable_products = Text()
    clear_terms = Text()  # JSON array of optional term names to remove


@storefront.command(part_of="Coupon")
class ActivateCoupon:
    coupon_id = Identifier(required=True)


@storefront.command(part_of="Coupon")
class DeactivateCoupon:
    coupon_id = Identifier(required=True)


def _ids(raw):
    return json.loads(raw) if raw else None


@storefront.command_handler(part_of=Coupon)
class ManageCouponHandler:
    def _ensure_code_is_free(self, repo, code, coupon_id=None):
        existing = repo.find_by_code(code)
        if existing is not None and str(existing.id) != str(coupon_id):
            raise ValidationError({"code": [f"Coupon code '{normalize_code(code)}' is already in use"]})

    @handle(CreateCoupon)
    def create_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        self._ensure_code_is_free(repo, command.code)

        coupon = Coupon.create(
            code=command.code,
            coupon_type=command.coupon_type,
            value=command.value,
            start_date=command.start_date,
            end_date=command.end_date,
            min_order_value=command.min_order_value,
            max_discount=command.max_discount,
            usage_limit=command.usage_limit,
            applicable_categories=_ids(command.applicable_categories),
            applicable_products=_ids(command.applicable_products),
            status=command.status,
        )
        repo.add(coupon)

        logger.info("coupon_created", coupon_id=str(coupon.id), code=coupon.code)
        return str(coupon.id)

    @handle(UpdateCoupon)
    def update_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        if command.code:
            self._ensure_code_is_free(repo, command.code, coupon.id)

        changes = {
            "code": command.code,
            "coupon_type": command.coupon_type,
            "value": command.value,
            "start_date": command.start_date,
            "end_date": command.end_date,
            "min_order_value": command.min_order_value,
            "max_discount": command.max_discount,
            "usage_limit": command.usage_limit,
            "applicable_categories": _ids(command.applicable_categories),
            "applicable_products": _ids(command.applicable_products),
        }
        changes = {name: value for name, value in changes.items() if value is not None}

        cleared = json.loads(command.clear_terms) if command.clear_terms else []
        unknown = sorted(set(cleared) - set(OPTIONAL_TERMS))
        if unknown:
            raise ValidationError({"clear_terms": [f"Cannot remove required terms: {', '.join(unknown)}"]})
        changes.update({name: None for name in cleared})

        coupon.update_terms(**changes)
        repo.add(coupon)

    @handle(ActivateCoupon)
    def activate_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        coupon.activate()
        repo.add(coupon)

    @handle(DeactivateCoupon)
    def deactivate_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        coupon.deactivate()
        repo.add(coupon)
