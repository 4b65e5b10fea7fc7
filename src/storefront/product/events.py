"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    category_id: Identifier()
    price: Float(required=True)
    status: String(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    """Descriptive fields of a product were changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    status: String(required=True)


@storefront.event(part_of="Product")
class ProductPriceChanged:
    __version__ = 1

    product_id: Identifier(required=True)
    previous_price: Float(required=True)
    new_price: Float(required=True)
    compare_price: Float()


@storefront.event(part_of="Product")
class ProductAttributeAdded:
    __version__ = 1

    product_id: Identifier(required=True)
    attribute_id: Identifier(required=True)
    size: String()
    color: String()
    additional_price: Float(required=True)
    quantity: Integer(required=True)


@storefront.event(part_of="Product")
class ProductAttributeRemoved:
    __version__ = 1

    product_id: Identifier(required=True)
    attribute_id: Identifier(required=True)


@storefront.event(part_of="Product")
class StockLevelChanged:
    """Stock on hand changed for a product or one of its attributes.

    ``reason`` is one of ``order_placed``, ``order_cancelled`` or ``adjustment``.
    """

    __version__ = 1

    product_id: Identifier(required=True)
    attribute_id: Identifier()
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)
    reason: String(required=True)
    order_id: Identifier()
