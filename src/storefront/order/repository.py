"""Repository for the Order aggregate."""

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_by_number(self, order_number: str) -> Order | None:
        return self._dao.query.filter(order_number=order_number).all().first

    def for_customer(self, customer_id, status=None) -> list[Order]:
        """A customer's orders, newest first, optionally filtered by order status."""
        filters = {"customer_id": str(customer_id)}
        if status:
            filters["order_status"] = status
        return self._dao.query.filter(**filters).order_by("-created_at").all().items

    def search(self, order_status=None, payment_status=None) -> list[Order]:
        """Every order, newest first, optionally filtered by order and payment status."""
        filters = {}
        if order_status:
            filters["order_status"] = order_status
        if payment_status:
            filters["payment_status"] = payment_status
        return self._dao.query.filter(**filters).order_by("-created_at").limit(None).all().items
