"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product (optionally a specific attribute of it) was added to the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    attribute_id = Identifier()
    quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.event(part_of="ShoppingCart")
class CartCleared:
    """All lines were removed, either by the customer or after an order was placed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    order_id = Identifier()
    items_removed = Integer(required=True)
