"""Repository for the Category aggregate."""

from storefront.category.category import Category
from storefront.domain import storefront


@storefront.repository(part_of=Category)
class CategoryRepository:
    def find_by_slug(self, slug: str) -> Category | None:
        return self._dao.query.filter(slug=slug).all().first
