"""Product attribute management: commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.command(part_of="Product")
class AddProductAttribute:
    product_id: Identifier(required=True)
    size: String(max_length=50)
    color: String(max_length=50)
    additional_price: Float(default=0.0, min_value=0.0)
    quantity: Integer(default=0, min_value=0)


@storefront.command(part_of="Product")
class RemoveProductAttribute:
    product_id: Identifier(required=True)
    attribute_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ProductAttributesHandler:
    @handle(AddProductAttribute)
    def add_attribute(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        attribute = product.add_attribute(
            size=command.size,
            color=command.color,
            additional_price=command.additional_price,
            quantity=command.quantity,
        )
        repo.add(product)
        return str(attribute.id)

    @handle(RemoveProductAttribute)
    def remove_attribute(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.remove_attribute(command.attribute_id)
        repo.add(product)
