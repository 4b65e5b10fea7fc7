"""Storefront API package."""

from storefront.api.admin import admin_router, settings_router
from storefront.api.catalogue import category_router, product_router
from storefront.api.payments import payment_router
from storefront.api.shopping import cart_router, coupon_router, order_router

__all__ = [
    "admin_router",
    "cart_router",
    "category_router",
    "coupon_router",
    "order_router",
    "payment_router",
    "product_router",
    "settings_router",
]
