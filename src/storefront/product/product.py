"""Product aggregate root with its ProductAttribute entities.

Stock is only enforced for products with ``track_quantity`` set. A cart or
order line that selects an attribute (a size/colour combination) draws on that
attribute's own quantity; a plain line draws on the product quantity.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.utils.slug import is_valid_slug, slugify


class ProductStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


class StockChangeReason(Enum):
    ORDER_PLACED = "order_placed"
    ORDER_CANCELLED = "order_cancelled"
    ADJUSTMENT = "adjustment"


@storefront.entity(part_of="Product")
class ProductAttribute:
    """A purchasable size/colour option with its own surcharge and stock."""

    size: String(max_length=50)
    color: String(max_length=50)
    additional_price: Float(default=0.0, min_value=0.0)
    quantity: Integer(default=0, min_value=0)

    @property
    def display_name(self):
        parts = []
        if self.size:
            parts.append(f"Size: {self.size}")
        if self.color:
            parts.append(f"Color: {self.color}")
        return ", ".join(parts)


@storefront.aggregate
class Product:
    """Product aggregate root."""

    category_id: Identifier()
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=255)
    description: Text()
    sku: String(max_length=100)
    price: Float(required=True, min_value=0.0)
    compare_price: Float(min_value=0.0)
    cost_price: Float(min_value=0.0)
    quantity: Integer(default=0, min_value=0)
    track_quantity: Boolean(default=True)
    status: String(choices=ProductStatus, default=ProductStatus.ACTIVE.value)
    featured: Boolean(default=False)
    image: String(max_length=500)
    attributes: HasMany(ProductAttribute)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def slug_must_be_url_safe(self):
        if not is_valid_slug(self.slug):
            raise ValidationError(
                {"slug": ["Slug must contain only lowercase alphanumeric characters separated by single hyphens"]}
            )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        price,
        slug=None,
        category_id=None,
        description=None,
        sku=None,
        compare_price=None,
        cost_price=None,
        quantity=0,
        track_quantity=True,
        status=None,
        featured=False,
        image=None,
    ):
        from storefront.product.events import ProductCreated

        now = datetime.now(UTC)
        product = cls(
            name=name,
            slug=slug or slugify(name),
            category_id=category_id,
            description=description,
            sku=sku,
            price=price,
            compare_price=compare_price,
            cost_price=cost_price,
            quantity=quantity,
            track_quantity=track_quantity,
            status=status or ProductStatus.ACTIVE.value,
            featured=featured,
            image=image,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                slug=product.slug,
                category_id=category_id,
                price=product.price,
                status=product.status,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Details and pricing
    # -------------------------------------------------------------------
    def update_details(
        self,
        name=None,
        slug=None,
        description=None,
        category_id=None,
        sku=None,
        status=None,
        featured=None,
        image=None,
    ):
        from storefront.product.events import ProductDetailsUpdated

        with atomic_change(self):
            if name is not None:
                self.name = name
            if slug is not None:
                self.slug = slug
            if description is not None:
                self.description = description
            if category_id is not None:
                self.category_id = category_id
            if sku is not None:
                self.sku = sku
            if status is not None:
                self.status = status
            if featured is not None:
                self.featured = featured
            if image is not None:
                self.image = image
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                slug=self.slug,
                status=self.status,
            )
        )

    def update_pricing(self, price, compare_price=None, cost_price=None):
        from storefront.product.events import ProductPriceChanged

        previous_price = self.price
        self.price = price
        self.compare_price = compare_price
        if cost_price is not None:
            self.cost_price = cost_price
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductPriceChanged(
                product_id=self.id,
                previous_price=previous_price,
                new_price=price,
                compare_price=compare_price,
            )
        )

    @property
    def is_active(self):
        return self.status == ProductStatus.ACTIVE.value

    @property
    def discount_percentage(self):
        """Whole-number saving against ``compare_price``, 0 when there is none."""
        if self.compare_price and self.compare_price > self.price:
            return round((self.compare_price - self.price) / self.compare_price * 100)
        return 0

    # -------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------
    def add_attribute(self, size=None, color=None, additional_price=0.0, quantity=0):
        from storefront.product.events import ProductAttributeAdded

        if not size and not color:
            raise ValidationError({"attributes": ["An attribute needs a size or a color"]})

        duplicate = next(
            (a for a in self.attributes if (a.size or None) == (size or None) and (a.color or None) == (color or None)),
            None,
        )
        if duplicate is not None:
            raise ValidationError({"attributes": [f"Attribute '{duplicate.display_name}' already exists"]})

        attribute = ProductAttribute(
            size=size,
            color=color,
            additional_price=additional_price or 0.0,
            quantity=quantity or 0,
        )
        self.add_attributes(attribute)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductAttributeAdded(
                product_id=self.id,
                attribute_id=attribute.id,
                size=size,
                color=color,
                additional_price=attribute.additional_price,
                quantity=attribute.quantity,
            )
        )
        return attribute

    def remove_attribute(self, attribute_id):
        from storefront.product.events import ProductAttributeRemoved

        attribute = self.find_attribute(attribute_id)
        self.remove_attributes(attribute)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductAttributeRemoved(
                product_id=self.id,
                attribute_id=attribute_id,
            )
        )

    def find_attribute(self, attribute_id):
        attribute = next((a for a in self.attributes if str(a.id) == str(attribute_id)), None)
        if attribute is None:
            raise ValidationError({"attribute_id": [f"Attribute {attribute_id} does not belong to {self.name}"]})
        return attribute

    def unit_price(self, attribute_id=None):
        """Base price plus the selected attribute's surcharge."""
        if attribute_id is None:
            return self.price
        return self.price + (self.find_attribute(attribute_id).additional_price or 0.0)

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def available_quantity(self, attribute_id=None):
        """Units on hand for the line, or ``None`` when stock is not tracked."""
        if not self.track_quantity:
            return None
        if attribute_id is not None:
            return self.find_attribute(attribute_id).quantity
        return self.quantity

    @property
    def is_in_stock(self):
        return not self.track_quantity or self.quantity > 0

    def ensure_available(self, quantity, attribute_id=None):
        available = self.available_quantity(attribute_id)
        if available is not None and quantity > available:
            label = self.name
            if attribute_id is not None:
                label = f"{self.name} ({self.find_attribute(attribute_id).display_name})"
            raise ValidationError({"stock": [f"Insufficient stock for {label}"]})

    def decrease_stock(self, quantity, attribute_id=None, order_id=None):
        if not self.track_quantity:
            return
        self.ensure_available(quantity, attribute_id)
        self._change_stock(-quantity, attribute_id, StockChangeReason.ORDER_PLACED, order_id)

    def increase_stock(self, quantity, attribute_id=None, order_id=None):
        if not self.track_quantity:
            return
        self._change_stock(quantity, attribute_id, StockChangeReason.ORDER_CANCELLED, order_id)

    def adjust_stock(self, quantity, attribute_id=None):
        """Set stock on hand to an absolute level (inventory correction)."""
        if quantity < 0:
            raise ValidationError({"quantity": ["Stock cannot be negative"]})
        current = self.find_attribute(attribute_id).quantity if attribute_id is not None else self.quantity
        self._change_stock(quantity - current, attribute_id, StockChangeReason.ADJUSTMENT, None)

    def _change_stock(self, delta, attribute_id, reason, order_id):
        from storefront.product.events import StockLevelChanged

        holder = self.find_attribute(attribute_id) if attribute_id is not None else self
        previous = holder.quantity
        holder.quantity = previous + delta
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockLevelChanged(
                product_id=self.id,
                attribute_id=attribute_id,
                previous_quantity=previous,
                new_quantity=holder.quantity,
                reason=reason.value,
                order_id=order_id,
            )
        )
