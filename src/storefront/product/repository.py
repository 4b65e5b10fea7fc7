"""Repository for the Product aggregate."""

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_by_slug(self, slug: str) -> Product | None:
        return self._dao.query.filter(slug=slug).all().first

    def get_many(self, product_ids) -> dict[str, Product]:
        """Load each distinct product once, keyed by id."""
        products = {}
        for product_id in product_ids:
            key = str(product_id)
            if key not in products:
                products[key] = self.get(key)
        return products

    def listing(self, status=None, category_id=None, featured=None, min_price=None, max_price=None) -> list[Product]:
        """Every product matching the given filters. None skips a filter."""
        filters = {}
        if status:
            filters["status"] = status
        if category_id:
            filters["category_id"] = str(category_id)
        if featured is not None:
            filters["featured"] = featured
        if min_price is not None:
            filters["price__gte"] = min_price
        if max_price is not None:
            filters["price__lte"] = max_price
        return self._dao.query.filter(**filters).limit(None).all().items
