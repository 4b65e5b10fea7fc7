"""Admin order handling: status changes, notes and manual payment status."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.order.order import Order, OrderStatus
from storefront.product.product import Product


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    user_id = Identifier()


@storefront.command(part_of="Order")
class AddOrderNote:
    order_id = Identifier(required=True)
    note = Text(required=True)
    user_id = Identifier()


@storefront.command(part_of="Order")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)
    user_id = Identifier()


def _restock(order):
    """Put the order's units back on the shelf. Untracked products are skipped by the aggregate."""
    product_repo = current_domain.repository_for(Product)
    products = product_repo.get_many(item.product_id for item in order.items)
    for item in order.items:
        product = products[str(item.product_id)]
        attribute_id = item.attribute_id
        if attribute_id and not any(str(a.id) == str(attribute_id) for a in product.attributes):
            # The attribute was deleted after the sale; return the units to the product instead
            attribute_id = None
        product.increase_stock(item.quantity, attribute_id=attribute_id, order_id=str(order.id))
    for product in products.values():
        product_repo.add(product)


@storefront.command_handler(part_of=Order)
class OrderAdministrationHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous_status = order.order_status

        order.update_status(command.status, user_id=command.user_id)
        if order.order_status == OrderStatus.CANCELLED.value:
            _restock(order)
        repo.add(order)

        logger.info(
            "order_status_updated",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.order_status,
            user_id=command.user_id,
        )

    @handle(AddOrderNote)
    def add_order_note(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.add_note(command.note, user_id=command.user_id)
        repo.add(order)

    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_payment_status(command.payment_status, user_id=command.user_id)
        repo.add(order)

        logger.info(
            "payment_status_updated",
            order_id=str(order.id),
            payment_status=order.payment_status,
            user_id=command.user_id,
        )
