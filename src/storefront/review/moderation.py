"""ApproveReview / RejectReview: staff moderation of submitted reviews."""

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.review.review import Review


@storefront.command(part_of="Review")
class ApproveReview:
    review_id: Identifier(required=True)
    notes: Text()


@storefront.command(part_of="Review")
class RejectReview:
    review_id: Identifier(required=True)
    reason: Text()


@storefront.command_handler(part_of=Review)
class ReviewModerationHandler:
    @handle(ApproveReview)
    def approve_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        review.approve(notes=command.notes)
        repo.add(review)
        logger.info("review_approved", review_id=str(review.id), product_id=str(review.product_id))

    @handle(RejectReview)
    def reject_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        review.reject(reason=command.reason)
        repo.add(review)
        logger.info("review_rejected", review_id=str(review.id), product_id=str(review.product_id))
