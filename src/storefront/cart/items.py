"""Cart item management: commands and handler.

Adding or increasing a line checks the product is on sale and, for tracked
products, that stock covers the whole quantity the cart would then hold.
Stock is not reserved; checkout checks again.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront
from storefront.product.product import Product


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    attribute_id = Identifier()
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


def _check_purchasable(product, attribute_id, quantity):
    if not product.is_active:
        raise ValidationError({"product_id": [f"{product.name} is not available"]})
    product.ensure_available(quantity, attribute_id)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    def _existing_cart(self, repo, customer_id):
        cart = repo.for_customer(customer_id)
        if cart is None:
            raise ValidationError({"cart": ["Cart is empty"]})
        return cart

    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_create(command.customer_id)

        product = current_domain.repository_for(Product).get(command.product_id)
        cumulative = cart.quantity_of(command.product_id, command.attribute_id) + command.quantity
        _check_purchasable(product, command.attribute_id, cumulative)

        item_id = cart.add_item(
            product_id=command.product_id,
            attribute_id=command.attribute_id,
            quantity=command.quantity,
        )
        repo.add(cart)
        return item_id

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = self._existing_cart(repo, command.customer_id)

        line = cart.get_item(command.item_id)
        product = current_domain.repository_for(Product).get(line.product_id)
        _check_purchasable(product, line.attribute_id, command.new_quantity)

        cart.update_item_quantity(item_id=command.item_id, new_quantity=command.new_quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = self._existing_cart(repo, command.customer_id)
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_customer(command.customer_id)
        if cart is None or cart.is_empty:
            return
        cart.clear()
        repo.add(cart)
