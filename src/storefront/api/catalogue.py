"""FastAPI routes for the catalogue: products, attributes, stock, reviews and categories."""

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddAttributeRequest,
    AdjustStockRequest,
    AttributeIdResponse,
    CategoryIdResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    EditReviewRequest,
    MoveCategoryRequest,
    ProductIdResponse,
    ReviewIdResponse,
    StatusResponse,
    SubmitReviewRequest,
    UpdateCategoryRequest,
    UpdatePricingRequest,
    UpdateProductRequest,
)
from storefront.category.category import Category
from storefront.category.management import (
    CreateCategory,
    DeactivateCategory,
    MoveCategory,
    UpdateCategory,
    category_ancestors,
)
from storefront.product.attributes import AddProductAttribute, RemoveProductAttribute
from storefront.product.creation import CreateProduct
from storefront.product.details import UpdateProductDetails, UpdateProductPricing
from storefront.product.inventory import AdjustStock
from storefront.product.listing import DEFAULT_PER_PAGE, list_products
from storefront.product.product import Product
from storefront.review.rating import rating_summaries, rating_summary
from storefront.review.review import Review, ReviewStatus
from storefront.review.submission import EditReview, SubmitReview
from storefront.utils.pagination import paginate

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


def _product_payload(product, rating):
    return {
        "product_id": str(product.id),
        "name": product.name,
        "slug": product.slug,
        "category_id": str(product.category_id) if product.category_id else None,
        "description": product.description,
        "sku": product.sku,
        "price": product.price,
        "compare_price": product.compare_price,
        "discount_percentage": product.discount_percentage,
        "quantity": product.quantity,
        "track_quantity": product.track_quantity,
        "is_in_stock": product.is_in_stock,
        "status": product.status,
        "featured": product.featured,
        "image": product.image,
        "average_rating": rating.average_rating,
        "review_count": rating.review_count,
        "attributes": [
            {
                "attribute_id": str(attribute.id),
                "size": attribute.size,
                "color": attribute.color,
                "display_name": attribute.display_name,
                "additional_price": attribute.additional_price,
                "quantity": attribute.quantity,
            }
            for attribute in product.attributes
        ],
    }


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(**body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("")
async def list_catalogue(
    search: str | None = None,
    category: str | None = None,
    category_id: str | None = None,
    min_price: float | None = Query(default=None, ge=0),
    max_price: float | None = Query(default=None, ge=0),
    in_stock: bool = False,
    featured: bool = False,
    sort: str = "newest",
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=DEFAULT_PER_PAGE, ge=1, le=100),
):
    """Active products, newest first unless ``sort`` says otherwise."""
    result = list_products(
        search=search,
        category=category,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        featured=featured,
        sort=sort,
        page=page,
        per_page=per_page,
    )
    ratings = rating_summaries(product.id for product in result.items)
    return {
        "items": [_product_payload(product, ratings[str(product.id)]) for product in result.items],
        "total": result.total,
        "page": result.page,
        "per_page": result.per_page,
        "last_page": result.last_page,
    }


@product_router.get("/{product_id}")
async def get_product(product_id: str):
    product = current_domain.repository_for(Product).get(product_id)
    return _product_payload(product, rating_summary(product.id))


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    command = UpdateProductDetails(product_id=product_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/pricing", response_model=StatusResponse)
async def update_product_pricing(product_id: str, body: UpdatePricingRequest) -> StatusResponse:
    command = UpdateProductPricing(product_id=product_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/attributes", status_code=201, response_model=AttributeIdResponse)
async def add_product_attribute(product_id: str, body: AddAttributeRequest) -> AttributeIdResponse:
    command = AddProductAttribute(product_id=product_id, **body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return AttributeIdResponse(attribute_id=result)


@product_router.delete("/{product_id}/attributes/{attribute_id}", response_model=StatusResponse)
async def remove_product_attribute(product_id: str, attribute_id: str) -> StatusResponse:
    command = RemoveProductAttribute(product_id=product_id, attribute_id=attribute_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/stock", response_model=StatusResponse)
async def adjust_product_stock(product_id: str, body: AdjustStockRequest) -> StatusResponse:
    command = AdjustStock(product_id=product_id, attribute_id=body.attribute_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
def review_payload(review):
    return {
        "review_id": str(review.id),
        "product_id": str(review.product_id),
        "customer_id": str(review.customer_id),
        "order_id": str(review.order_id) if review.order_id else None,
        "rating": review.rating,
        "comment": review.comment,
        "status": review.status,
        "created_at": review.created_at.isoformat() if review.created_at else None,
    }


@product_router.post("/{product_id}/reviews", status_code=201, response_model=ReviewIdResponse)
async def submit_review(product_id: str, body: SubmitReviewRequest) -> ReviewIdResponse:
    """Reviews are held for moderation before they are shown or counted."""
    command = SubmitReview(product_id=product_id, **body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=result)


@product_router.put("/{product_id}/reviews/{review_id}", response_model=StatusResponse)
async def edit_review(product_id: str, review_id: str, body: EditReviewRequest) -> StatusResponse:
    command = EditReview(review_id=review_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.get("/{product_id}/reviews")
async def product_reviews(
    product_id: str,
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=10, ge=1, le=100),
):
    """Approved reviews, newest first, with the rating they add up to."""
    reviews = current_domain.repository_for(Review).for_product(product_id, status=ReviewStatus.APPROVED.value)
    rating = rating_summary(product_id)
    result = paginate(reviews, page, per_page)
    return {
        "items": [review_payload(review) for review in result.items],
        "total": result.total,
        "page": result.page,
        "per_page": result.per_page,
        "last_page": result.last_page,
        "average_rating": rating.average_rating,
        "review_count": rating.review_count,
        "rating_breakdown": {str(score): count for score, count in rating.breakdown.items()},
    }


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
@category_router.post("", status_code=201, response_model=CategoryIdResponse)
async def create_category(body: CreateCategoryRequest) -> CategoryIdResponse:
    command = CreateCategory(**body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return CategoryIdResponse(category_id=result)


@category_router.get("/{category_id}")
async def get_category(category_id: str):
    category = current_domain.repository_for(Category).get(category_id)
    return {
        "category_id": str(category.id),
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "parent_id": str(category.parent_id) if category.parent_id else None,
        "ancestor_ids": category_ancestors(category.id),
        "status": category.status,
        "sort_order": category.sort_order,
        "image": category.image,
    }


@category_router.put("/{category_id}", response_model=StatusResponse)
async def update_category(category_id: str, body: UpdateCategoryRequest) -> StatusResponse:
    command = UpdateCategory(category_id=category_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@category_router.put("/{category_id}/parent", response_model=StatusResponse)
async def move_category(category_id: str, body: MoveCategoryRequest) -> StatusResponse:
    command = MoveCategory(category_id=category_id, new_parent_id=body.parent_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@category_router.put("/{category_id}/deactivate", response_model=StatusResponse)
async def deactivate_category(category_id: str) -> StatusResponse:
    command = DeactivateCategory(category_id=category_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
