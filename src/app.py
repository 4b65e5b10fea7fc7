"""Storefront FastAPI application.

Web server that processes commands synchronously via HTTP. Every request
runs inside the storefront domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → in-memory providers
#   - "production" → PostgreSQL via DATABASE_URL
# Routers are imported first so every element they reference is registered
# before init() resolves the domain.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers
from storefront.api import (
    admin_router,
    cart_router,
    category_router,
    coupon_router,
    order_router,
    payment_router,
    product_router,
    settings_router,
)
from storefront.domain import logger, storefront
from storefront.payment.gateway.port import PaymentGatewayUnavailable

storefront.init()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Catalogue, cart, coupons, orders and payments",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context for each request."""
    with storefront.domain_context():
        response = await call_next(request)
    return response


register_exception_handlers(app)


@app.exception_handler(PaymentGatewayUnavailable)
async def gateway_unavailable_handler(request: Request, exc: PaymentGatewayUnavailable):
    logger.error("payment_gateway_unavailable", path=request.url.path, operation=exc.operation)
    return JSONResponse(
        status_code=503,
        content={"error": "Payment service is temporarily unavailable, please retry"},
    )


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(product_router)
app.include_router(category_router)
app.include_router(coupon_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(payment_router)
app.include_router(admin_router)
app.include_router(settings_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
