"""Tests for the Product aggregate: creation, attributes, pricing and stock."""

import pytest
from protean.exceptions import ValidationError
from storefront.product.events import (
    ProductAttributeAdded,
    ProductAttributeRemoved,
    ProductCreated,
    ProductPriceChanged,
    StockLevelChanged,
)
from storefront.product.product import Product, ProductStatus, StockChangeReason


def _make_product(**overrides):
    defaults = {"name": "Classic Tee", "price": 500.0, "quantity": 10}
    defaults.update(overrides)
    return Product.create(**defaults)


class TestProductCreation:
    def test_slug_derived_from_name(self):
        product = _make_product(name="Summer T-Shirt!")
        assert product.slug == "summer-t-shirt"

    def test_explicit_slug_kept(self):
        product = _make_product(slug="tee-classic")
        assert product.slug == "tee-classic"

    def test_invalid_slug_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _make_product(slug="Not A Slug")
        assert "Slug must contain only lowercase" in str(exc.value)

    def test_defaults(self):
        product = _make_product()
        assert product.status == ProductStatus.ACTIVE.value
        assert product.track_quantity is True
        assert product.is_active is True

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(price=-1.0)

    def test_raises_created_event(self):
        product = _make_product()
        assert len(product._events) == 1
        assert isinstance(product._events[0], ProductCreated)


class TestDiscountPercentage:
    def test_with_compare_price(self):
        product = _make_product(price=750.0, compare_price=1000.0)
        assert product.discount_percentage == 25

    def test_without_compare_price(self):
        assert _make_product().discount_percentage == 0

    def test_compare_price_not_higher(self):
        product = _make_product(price=500.0, compare_price=400.0)
        assert product.discount_percentage == 0


class TestDetailsAndPricing:
    def test_update_details(self):
        product = _make_product()
        product.update_details(name="Classic Tee v2", status=ProductStatus.INACTIVE.value)

        assert product.name == "Classic Tee v2"
        assert product.is_active is False

    def test_update_details_rejects_bad_slug(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.update_details(slug="Bad Slug")

    def test_update_pricing_raises_event(self):
        product = _make_product()
        product._events.clear()

        product.update_pricing(price=450.0, compare_price=500.0)

        assert product.price == 450.0
        event = product._events[0]
        assert isinstance(event, ProductPriceChanged)
        assert event.previous_price == 500.0
        assert event.new_price == 450.0


class TestAttributes:
    def test_add_attribute(self):
        product = _make_product()
        product._events.clear()

        attribute = product.add_attribute(size="M", color="Red", additional_price=50.0, quantity=3)

        assert len(product.attributes) == 1
        assert attribute.display_name == "Size: M, Color: Red"
        assert isinstance(product._events[0], ProductAttributeAdded)

    def test_display_name_single_part(self):
        product = _make_product()
        attribute = product.add_attribute(color="Blue")
        assert attribute.display_name == "Color: Blue"

    def test_attribute_needs_size_or_color(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.add_attribute(additional_price=10.0)

    def test_duplicate_attribute_rejected(self):
        product = _make_product()
        product.add_attribute(size="M", color="Red")
        with pytest.raises(ValidationError) as exc:
            product.add_attribute(size="M", color="Red")
        assert "already exists" in str(exc.value)

    def test_remove_attribute(self):
        product = _make_product()
        attribute = product.add_attribute(size="L")
        product._events.clear()

        product.remove_attribute(attribute.id)

        assert len(product.attributes) == 0
        assert isinstance(product._events[0], ProductAttributeRemoved)

    def test_unknown_attribute_rejected(self):
        product = _make_product()
        with pytest.raises(ValidationError) as exc:
            product.find_attribute("missing")
        assert "does not belong to" in str(exc.value)

    def test_unit_price_with_attribute(self):
        product = _make_product(price=500.0)
        attribute = product.add_attribute(size="XL", additional_price=50.0)

        assert product.unit_price() == 500.0
        assert product.unit_price(attribute.id) == 550.0


class TestStock:
    def test_available_quantity_for_product(self):
        assert _make_product(quantity=7).available_quantity() == 7

    def test_available_quantity_for_attribute(self):
        product = _make_product(quantity=100)
        attribute = product.add_attribute(size="S", quantity=2)
        assert product.available_quantity(attribute.id) == 2

    def test_untracked_product_has_no_limit(self):
        product = _make_product(quantity=0, track_quantity=False)
        assert product.available_quantity() is None
        assert product.is_in_stock is True
        product.ensure_available(1000)

    def test_ensure_available_rejects_shortfall(self):
        product = _make_product(quantity=2)
        with pytest.raises(ValidationError) as exc:
            product.ensure_available(3)
        assert "Insufficient stock for Classic Tee" in str(exc.value)

    def test_ensure_available_names_attribute(self):
        product = _make_product()
        attribute = product.add_attribute(size="M", quantity=1)
        with pytest.raises(ValidationError) as exc:
            product.ensure_available(2, attribute.id)
        assert "Classic Tee (Size: M)" in str(exc.value)

    def test_decrease_stock(self):
        product = _make_product(quantity=10)
        product._events.clear()

        product.decrease_stock(4, order_id="ord-1")

        assert product.quantity == 6
        event = product._events[0]
        assert isinstance(event, StockLevelChanged)
        assert event.previous_quantity == 10
        assert event.new_quantity == 6
        assert event.reason == StockChangeReason.ORDER_PLACED.value

    def test_decrease_stock_to_zero(self):
        product = _make_product(quantity=3)
        product.decrease_stock(3)
        assert product.quantity == 0
        assert product.is_in_stock is False

    def test_decrease_stock_never_below_zero(self):
        product = _make_product(quantity=3)
        with pytest.raises(ValidationError):
            product.decrease_stock(4)
        assert product.quantity == 3

    def test_decrease_attribute_stock_leaves_product_stock(self):
        product = _make_product(quantity=10)
        attribute = product.add_attribute(size="M", quantity=5)

        product.decrease_stock(2, attribute_id=attribute.id)

        assert product.find_attribute(attribute.id).quantity == 3
        assert product.quantity == 10

    def test_untracked_stock_is_not_moved(self):
        product = _make_product(quantity=0, track_quantity=False)
        product._events.clear()

        product.decrease_stock(5)

        assert product.quantity == 0
        assert product._events == []

    def test_increase_stock(self):
        product = _make_product(quantity=1)
        product.increase_stock(4, order_id="ord-1")
        assert product.quantity == 5

    def test_adjust_stock_sets_absolute_level(self):
        product = _make_product(quantity=10)
        product._events.clear()

        product.adjust_stock(25)

        assert product.quantity == 25
        assert product._events[0].reason == StockChangeReason.ADJUSTMENT.value

    def test_adjust_stock_rejects_negative(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.adjust_stock(-1)
