"""Domain events for the Review aggregate."""

from protean.fields import DateTime, Identifier, Integer, Text

from storefront.domain import storefront


@storefront.event(part_of="Review")
class ReviewSubmitted:
    __version__ = 1

    review_id: Identifier(required=True)
    product_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    order_id: Identifier()
    rating: Integer(required=True)
    submitted_at: DateTime(required=True)


@storefront.event(part_of="Review")
class ReviewEdited:
    """The customer changed the review; it is pending moderation again."""

    __version__ = 1

    review_id: Identifier(required=True)
    product_id: Identifier(required=True)
    rating: Integer(required=True)
    edited_at: DateTime(required=True)


@storefront.event(part_of="Review")
class ReviewApproved:
    __version__ = 1

    review_id: Identifier(required=True)
    product_id: Identifier(required=True)
    rating: Integer(required=True)
    approved_at: DateTime(required=True)


@storefront.event(part_of="Review")
class ReviewRejected:
    __version__ = 1

    review_id: Identifier(required=True)
    product_id: Identifier(required=True)
    reason: Text()
    rejected_at: DateTime(required=True)
