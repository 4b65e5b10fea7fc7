"""Manual stock corrections.

Order placement and cancellation move stock inside the order handlers; this
command is the admin's way to set an absolute level after a stock count.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.product.product import Product


@storefront.command(part_of="Product")
class AdjustStock:
    product_id: Identifier(required=True)
    attribute_id: Identifier()
    quantity: Integer(required=True, min_value=0)


@storefront.command_handler(part_of=Product)
class AdjustStockHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.adjust_stock(command.quantity, attribute_id=command.attribute_id)
        repo.add(product)

        logger.info(
            "stock_adjusted",
            product_id=str(product.id),
            attribute_id=command.attribute_id,
            quantity=command.quantity,
        )
