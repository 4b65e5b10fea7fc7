"""Shopping cart aggregate: one open cart per customer.

Lines hold product references and quantities only. Prices are resolved from
the catalogue whenever the cart is quoted, so a cart never carries a stale
price into checkout.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from storefront.domain import storefront


def _same_ref(left, right):
    return (str(left) if left else None) == (str(right) if right else None)


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    attribute_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    @property
    def is_empty(self):
        return not self.items

    def find_line(self, product_id, attribute_id=None):
        return next(
            (
                i
                for i in self.items
                if _same_ref(i.product_id, product_id) and _same_ref(i.attribute_id, attribute_id)
            ),
            None,
        )

    def quantity_of(self, product_id, attribute_id=None):
        line = self.find_line(product_id, attribute_id)
        return line.quantity if line else 0

    def get_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})
        return item

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, attribute_id=None):
        """Add a line, or increase the quantity of the matching product/attribute line."""
        now = datetime.now(UTC)
        existing = self.find_line(product_id, attribute_id)

        if existing:
            existing.quantity += quantity
            item_id = str(existing.id)
        else:
            item = CartItem(
                product_id=product_id,
                attribute_id=attribute_id,
                quantity=quantity,
                added_at=now,
            )
            self.add_items(item)
            item_id = str(item.id)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                item_id=item_id,
                product_id=str(product_id),
                attribute_id=str(attribute_id) if attribute_id else None,
                quantity=quantity,
            )
        )
        return item_id

    def update_item_quantity(self, item_id, new_quantity):
        item = self.get_item(item_id)

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        item = self.get_item(item_id)

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id)))

    def clear(self, order_id=None):
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                order_id=order_id,
                items_removed=removed,
            )
        )
