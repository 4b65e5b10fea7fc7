"""Pydantic request/response schemas for the storefront API.

These are the external contracts. They are kept separate from the Protean
commands they are translated into.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    name: str
    phone: str
    address: str
    city: str
    postal_code: str | None = None
    country: str = "Bangladesh"


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    name: str
    price: float = Field(ge=0)
    slug: str | None = None
    category_id: str | None = None
    description: str | None = None
    sku: str | None = None
    compare_price: float | None = Field(default=None, ge=0)
    cost_price: float | None = Field(default=None, ge=0)
    quantity: int = Field(default=0, ge=0)
    track_quantity: bool = True
    status: str | None = None
    featured: bool = False
    image: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Classic Tee",
                    "price": 500.0,
                    "compare_price": 650.0,
                    "quantity": 40,
                    "category_id": "cat-apparel",
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    category_id: str | None = None
    sku: str | None = None
    status: str | None = None
    featured: bool | None = None
    image: str | None = None


class UpdatePricingRequest(BaseModel):
    price: float = Field(ge=0)
    compare_price: float | None = Field(default=None, ge=0)
    cost_price: float | None = Field(default=None, ge=0)


class AddAttributeRequest(BaseModel):
    size: str | None = None
    color: str | None = None
    additional_price: float = Field(default=0.0, ge=0)
    quantity: int = Field(default=0, ge=0)


class AdjustStockRequest(BaseModel):
    quantity: int = Field(ge=0)
    attribute_id: str | None = None


class ProductIdResponse(BaseModel):
    product_id: str


class AttributeIdResponse(BaseModel):
    attribute_id: str


class CreateCategoryRequest(BaseModel):
    name: str
    slug: str | None = None
    description: str | None = None
    parent_id: str | None = None
    sort_order: int = 0
    image: str | None = None


class UpdateCategoryRequest(BaseModel):
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    sort_order: int | None = None
    image: str | None = None


class MoveCategoryRequest(BaseModel):
    parent_id: str | None = None


class CategoryIdResponse(BaseModel):
    category_id: str


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
class SubmitReviewRequest(BaseModel):
    customer_id: str
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1, max_length=1000)
    order_id: str | None = None


class EditReviewRequest(BaseModel):
    customer_id: str
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1, max_length=1000)


class ModerateReviewRequest(BaseModel):
    reason: str | None = None


class ReviewIdResponse(BaseModel):
    review_id: str


# ---------------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------------
class ValidateCouponRequest(BaseModel):
    code: str
    subtotal: float = Field(ge=0)
    category_ids: list[str] = Field(default_factory=list)
    product_ids: list[str] = Field(default_factory=list)

    @field_validator("code")
    @classmethod
    def upper_case_code(cls, value: str) -> str:
        return value.strip().upper()


class CouponEvaluationResponse(BaseModel):
    valid: bool
    discount_amount: float
    message: str
    code: str | None = None


class CreateCouponRequest(BaseModel):
    code: str
    type: str = Field(pattern="^(percentage|fixed)$")
    value: float = Field(ge=0)
    start_date: datetime
    end_date: datetime
    min_order_value: float | None = Field(default=None, ge=0)
    max_discount: float | None = Field(default=None, ge=0)
    usage_limit: int | None = Field(default=None, ge=0)
    applicable_categories: list[str] | None = None
    applicable_products: list[str] | None = None
    status: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "EID20",
                    "type": "percentage",
                    "value": 20,
                    "max_discount": 150,
                    "start_date": "2026-01-01T00:00:00Z",
                    "end_date": "2026-12-31T23:59:59Z",
                }
            ]
        }
    }


class UpdateCouponRequest(BaseModel):
    code: str | None = None
    type: str | None = Field(default=None, pattern="^(percentage|fixed)$")
    value: float | None = Field(default=None, ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    min_order_value: float | None = Field(default=None, ge=0)
    max_discount: float | None = Field(default=None, ge=0)
    usage_limit: int | None = Field(default=None, ge=0)
    applicable_categories: list[str] | None = None
    applicable_products: list[str] | None = None


class CouponIdResponse(BaseModel):
    coupon_id: str


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    attribute_id: str | None = None
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int = Field(ge=1)


class ItemIdResponse(BaseModel):
    item_id: str


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    customer_id: str
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    payment_method: str = Field(pattern="^(cod|online)$")
    coupon_code: str | None = None
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "shipping_address": {
                        "name": "Rahim Uddin",
                        "phone": "01700000000",
                        "address": "House 12, Road 5",
                        "city": "Dhaka",
                        "postal_code": "1207",
                        "country": "Bangladesh",
                    },
                    "payment_method": "cod",
                    "coupon_code": "EID20",
                }
            ]
        }
    }


class PlaceOrderResponse(BaseModel):
    order_id: str
    order_number: str
    total: float
    payment_url: str | None = None
    payment_error: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str
    user_id: str | None = None


class AddOrderNoteRequest(BaseModel):
    note: str = Field(min_length=1)
    user_id: str | None = None


class UpdatePaymentStatusRequest(BaseModel):
    payment_status: str
    user_id: str | None = None


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class PaymentCallbackRequest(BaseModel):
    order_id: str
    status: str = Field(pattern="^(success|fail|cancel)$")
    transaction_id: str | None = None
    reason: str | None = None


class PaymentCallbackResponse(BaseModel):
    result: str


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Payment initiation declined"
    available: bool = True


class GatewayConfigResponse(BaseModel):
    should_succeed: bool
    failure_reason: str
    available: bool


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------
class UpdateSettingRequest(BaseModel):
    value: str | None = None
    type: str | None = Field(default=None, pattern="^(text|number|boolean|json)$")
    group: str | None = None
