"""Product ratings derived from approved reviews.

A product without approved reviews has an average of 0.0 and a count of 0.
Pending and rejected reviews never count.
"""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from storefront.review.review import MAX_RATING, MIN_RATING, Review


def _empty_breakdown():
    return {score: 0 for score in range(MIN_RATING, MAX_RATING + 1)}


@dataclass
class RatingSummary:
    average_rating: float = 0.0
    review_count: int = 0
    breakdown: dict[int, int] = field(default_factory=_empty_breakdown)


def _average(breakdown):
    total = sum(breakdown.values())
    if total == 0:
        return 0.0
    return round(sum(score * count for score, count in breakdown.items()) / total, 1)


def rating_summaries(product_ids) -> dict[str, RatingSummary]:
    """Rating summary for each product, keyed by product id."""
    summaries = {str(product_id): RatingSummary() for product_id in product_ids}
    for review in current_domain.repository_for(Review).approved_for_products(summaries):
        summary = summaries[str(review.product_id)]
        summary.breakdown[review.rating] += 1

    for summary in summaries.values():
        summary.review_count = sum(summary.breakdown.values())
        summary.average_rating = _average(summary.breakdown)
    return summaries


def rating_summary(product_id) -> RatingSummary:
    return rating_summaries([product_id])[str(product_id)]
