"""SubmitReview / EditReview: customers rating products.

One review per customer per product, enforced here because it needs a
repository lookup. A review may name the order the product came from; that
order must be the customer's and must contain the product.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.order.order import Order
from storefront.product.product import Product
from storefront.review.review import Review


@storefront.command(part_of="Review")
class SubmitReview:
    product_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    rating: Integer(required=True)
    comment: Text(required=True)
    order_id: Identifier()


@storefront.command(part_of="Review")
class EditReview:
    review_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    rating: Integer(required=True)
    comment: Text(required=True)


def _ensure_purchased(order_id, customer_id, product_id):
    order = current_domain.repository_for(Order).get(order_id)
    purchased = any(str(item.product_id) == str(product_id) for item in order.items)
    if str(order.customer_id) != str(customer_id) or not purchased:
        raise ValidationError({"order_id": ["Invalid order or product not purchased"]})


@storefront.command_handler(part_of=Review)
class ReviewSubmissionHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(Review)
        if repo.by_customer_for_product(command.customer_id, command.product_id) is not None:
            raise ValidationError({"review": ["You have already reviewed this product"]})

        if command.order_id:
            _ensure_purchased(command.order_id, command.customer_id, command.product_id)

        review = Review.submit(
            product_id=command.product_id,
            customer_id=command.customer_id,
            rating=command.rating,
            comment=command.comment,
            order_id=command.order_id,
        )
        repo.add(review)

        logger.info("review_submitted", review_id=str(review.id), product_id=str(command.product_id))
        return str(review.id)

    @handle(EditReview)
    def edit_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        if str(review.customer_id) != str(command.customer_id):
            raise ValidationError({"review": ["Only the author can edit a review"]})

        review.edit(rating=command.rating, comment=command.comment)
        repo.add(review)
