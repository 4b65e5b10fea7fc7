"""Repository for the Review aggregate."""

from storefront.domain import storefront
from storefront.review.review import Review, ReviewStatus


@storefront.repository(part_of=Review)
class ReviewRepository:
    def by_customer_for_product(self, customer_id, product_id) -> Review | None:
        return self._dao.query.filter(customer_id=str(customer_id), product_id=str(product_id)).all().first

    def for_product(self, product_id, status=None) -> list[Review]:
        """A product's reviews, newest first, optionally filtered by status."""
        filters = {"product_id": str(product_id)}
        if status:
            filters["status"] = status
        return self._dao.query.filter(**filters).order_by("-created_at").limit(None).all().items

    def approved_for_products(self, product_ids) -> list[Review]:
        ids = [str(product_id) for product_id in product_ids]
        if not ids:
            return []
        return self._dao.query.filter(product_id__in=ids, status=ReviewStatus.APPROVED.value).limit(None).all().items

    def search(self, status=None, rating=None) -> list[Review]:
        """Every review, newest first, for the moderation list."""
        filters = {}
        if status:
            filters["status"] = status
        if rating:
            filters["rating"] = rating
        return self._dao.query.filter(**filters).order_by("-created_at").limit(None).all().items
