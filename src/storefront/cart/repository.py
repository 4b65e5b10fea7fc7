"""Repository for the ShoppingCart aggregate."""

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def for_customer(self, customer_id) -> ShoppingCart | None:
        return self._dao.query.filter(customer_id=str(customer_id)).all().first

    def get_or_create(self, customer_id) -> ShoppingCart:
        return self.for_customer(customer_id) or ShoppingCart.create(customer_id=customer_id)
