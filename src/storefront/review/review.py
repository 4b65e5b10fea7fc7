"""Review aggregate: a customer's star rating and comment on a product.

Reviews are held back until a moderator approves them; only approved
reviews count towards a product's rating.

State machine:
    PENDING -> APPROVED | REJECTED
    APPROVED -> REJECTED
    REJECTED -> APPROVED
An edit by the customer sends the review back to PENDING.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront

MIN_RATING = 1
MAX_RATING = 5


class ReviewStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


_VALID_TRANSITIONS = {
    ReviewStatus.PENDING: {ReviewStatus.APPROVED, ReviewStatus.REJECTED},
    ReviewStatus.APPROVED: {ReviewStatus.REJECTED},
    ReviewStatus.REJECTED: {ReviewStatus.APPROVED},
}


@storefront.aggregate
class Review:
    product_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    order_id: Identifier()
    rating: Integer(required=True)
    comment: String(required=True, max_length=1000)
    status: String(choices=ReviewStatus, default=ReviewStatus.PENDING.value)
    moderation_notes: Text()
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def rating_must_be_in_range(self):
        if self.rating is not None and not MIN_RATING <= self.rating <= MAX_RATING:
            raise ValidationError({"rating": [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})

    @invariant.post
    def comment_must_not_be_blank(self):
        if self.comment is not None and not self.comment.strip():
            raise ValidationError({"comment": ["Review comment cannot be empty"]})

    @property
    def is_approved(self):
        return self.status == ReviewStatus.APPROVED.value

    @classmethod
    def submit(cls, product_id, customer_id, rating, comment, order_id=None):
        from storefront.review.events import ReviewSubmitted

        now = datetime.now(UTC)
        review = cls(
            product_id=product_id,
            customer_id=customer_id,
            order_id=order_id,
            rating=rating,
            comment=comment,
            status=ReviewStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        review.raise_(
            ReviewSubmitted(
                review_id=review.id,
                product_id=product_id,
                customer_id=customer_id,
                order_id=order_id,
                rating=rating,
                submitted_at=now,
            )
        )
        return review

    def edit(self, rating, comment):
        """Replace the rating and comment; the review goes back for moderation."""
        from storefront.review.events import ReviewEdited

        now = datetime.now(UTC)
        with atomic_change(self):
            self.rating = rating
            self.comment = comment
            self.status = ReviewStatus.PENDING.value
            self.moderation_notes = None
            self.updated_at = now

        self.raise_(ReviewEdited(review_id=self.id, product_id=self.product_id, rating=rating, edited_at=now))

    def _assert_can_transition(self, target):
        current = ReviewStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot move a review from {current.value} to {target.value}"]})

    def approve(self, notes=None):
        from storefront.review.events import ReviewApproved

        self._assert_can_transition(ReviewStatus.APPROVED)

        now = datetime.now(UTC)
        self.status = ReviewStatus.APPROVED.value
        self.moderation_notes = notes
        self.updated_at = now

        self.raise_(
            ReviewApproved(
                review_id=self.id,
                product_id=self.product_id,
                rating=self.rating,
                approved_at=now,
            )
        )

    def reject(self, reason=None):
        from storefront.review.events import ReviewRejected

        self._assert_can_transition(ReviewStatus.REJECTED)

        now = datetime.now(UTC)
        self.status = ReviewStatus.REJECTED.value
        self.moderation_notes = reason
        self.updated_at = now

        self.raise_(
            ReviewRejected(
                review_id=self.id,
                product_id=self.product_id,
                reason=reason,
                rejected_at=now,
            )
        )
