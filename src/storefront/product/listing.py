"""Storefront product listing: filtering, sorting and paging the catalogue.

Equality and price-range filters run in the repository query. The text
search (name, description or SKU, case-insensitive) and the stock filter are
applied to the loaded products because they span several fields.
"""

from enum import Enum

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.category.category import Category
from storefront.product.product import Product, ProductStatus
from storefront.utils.pagination import Page, paginate

DEFAULT_PER_PAGE = 12


class ProductSort(Enum):
    NEWEST = "newest"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    NAME = "name"


_SORT_KEYS = {
    ProductSort.NEWEST: (lambda product: product.created_at, True),
    ProductSort.PRICE_LOW: (lambda product: product.price, False),
    ProductSort.PRICE_HIGH: (lambda product: product.price, True),
    ProductSort.NAME: (lambda product: product.name.lower(), False),
}


def _matches(product, term):
    fields = (product.name, product.description, product.sku)
    return any(term in value.lower() for value in fields if value)


def list_products(
    search=None,
    category=None,
    category_id=None,
    min_price=None,
    max_price=None,
    in_stock=False,
    featured=False,
    status=ProductStatus.ACTIVE.value,
    sort=ProductSort.NEWEST.value,
    page=1,
    per_page=DEFAULT_PER_PAGE,
) -> Page:
    """One page of products matching every given filter.

    ``category`` is a category slug; a slug that names no category matches
    nothing.
    """
    try:
        order = ProductSort(sort)
    except ValueError:
        raise ValidationError({"sort": [f"Unknown sort '{sort}'"]}) from None

    if category:
        found = current_domain.repository_for(Category).find_by_slug(category)
        if found is None:
            return paginate([], page, per_page)
        category_id = found.id

    products = current_domain.repository_for(Product).listing(
        status=status,
        category_id=category_id,
        featured=True if featured else None,
        min_price=min_price,
        max_price=max_price,
    )

    if search and search.strip():
        term = search.strip().lower()
        products = [product for product in products if _matches(product, term)]
    if in_stock:
        products = [product for product in products if product.is_in_stock]

    key, reverse = _SORT_KEYS[order]
    products.sort(key=key, reverse=reverse)
    return paginate(products, page, per_page)
