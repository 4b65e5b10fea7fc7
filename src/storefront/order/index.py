"""Staff order index: search and filter every order in the store."""

from protean.utils.globals import current_domain

from storefront.order.order import Order
from storefront.utils.pagination import Page, paginate

DEFAULT_PER_PAGE = 15


def _matches(order, term):
    address = order.shipping_address
    fields = (order.order_number, str(order.customer_id), address.name, address.phone)
    return any(term in value.lower() for value in fields if value)


def order_index(search=None, order_status=None, payment_status=None, page=1, per_page=DEFAULT_PER_PAGE) -> Page:
    """Orders newest first. ``search`` matches the order number, customer id or
    the shipping contact's name or phone, case-insensitively."""
    orders = current_domain.repository_for(Order).search(order_status=order_status, payment_status=payment_status)
    if search and search.strip():
        term = search.strip().lower()
        orders = [order for order in orders if _matches(order, term)]
    return paginate(orders, page, per_page)
