# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Storefront API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 5000
#   python -m app.main
# =============================================================================

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    StorefrontException,
    integrity_exception_handler,
    storefront_exception_handler,
    validation_exception_handler,
)
from app.routers import health, categories, products, cart, orders, shipments, reviews, users
from app.auth import routes as auth_routes
from lib.storage import StorageIntegrityError, create_storage, reset_storage, set_storage

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: pick and initialize the storage backend
    - Shutdown: close database connections
    """
    # Startup
    logger.info(f"Starting Storefront API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    storage = create_storage(settings)
    set_storage(storage)
    logger.info(f"Storage backend: {storage.name}")

    yield

    # Shutdown
    logger.info("Shutting down Storefront API")
    reset_storage()


# Create FastAPI application
app = FastAPI(
    title="Storefront API",
    description="""
## Multi-Role E-Commerce API

Backend for a storefront with customers, sellers and admins.

### Roles

| Role | Can |
|------|-----|
| **Customer** | Browse, keep a cart, check out, track orders, review purchases |
| **Seller** | List products (pending approval), see and ship orders for them |
| **Admin** | Manage categories, products, orders, shipments, reviews and users |

### Storage

Runs on PostgreSQL, MySQL or in memory. With `DB_TYPE=auto` the first
configured database wins and an unreachable one falls back to the next.

### Quick Start

```bash
# 1. Register (returns a bearer token)
curl -X POST http://localhost:5000/api/register \\
  -H "Content-Type: application/json" \\
  -d '{"username": "jdoe", "password": "secret123", "name": "Jane", "email": "jane@example.com"}'

# 2. Add to cart
curl -X POST http://localhost:5000/api/cart/items \\
  -H "Authorization: Bearer <token>" \\
  -H "Content-Type: application/json" \\
  -d '{"product_id": 1, "quantity": 2}'

# 3. Check out
curl -X POST http://localhost:5000/api/orders \\
  -H "Authorization: Bearer <token>" \\
  -H "Content-Type: application/json" \\
  -d '{"payment_method": "credit_card"}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Register, log in and read the current user",
        },
        {
            "name": "Categories",
            "description": "Browse and manage product categories",
        },
        {
            "name": "Products",
            "description": "Catalog browsing and seller/admin product management",
        },
        {
            "name": "Cart",
            "description": "The current user's shopping cart",
        },
        {
            "name": "Orders",
            "description": "Checkout and order tracking",
        },
        {
            "name": "Shipments",
            "description": "Shipment status and tracking updates",
        },
        {
            "name": "Reviews",
            "description": "Product reviews by customers",
        },
        {
            "name": "Users",
            "description": "User and seller administration",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    """Log method, path, status and duration of every /api request."""
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} in {duration_ms:.0f}ms"
        )
    return response


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(StorefrontException)
async def handle_storefront_exception(request: Request, exc: StorefrontException):
    """Handle custom Storefront exceptions."""
    return await storefront_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle invalid request bodies and parameters."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(StorageIntegrityError)
async def handle_integrity_exception(request: Request, exc: StorageIntegrityError):
    """Handle writes rejected by relational constraints."""
    return await integrity_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints (/api/register, /api/login, /api/logout, /api/user)
app.include_router(
    auth_routes.router,
    prefix="/api",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)

# Category endpoints
app.include_router(
    categories.router,
    prefix="/api/categories",
    tags=["Categories"]
)

# Product endpoints
app.include_router(
    products.router,
    prefix="/api/products",
    tags=["Products"]
)

# Cart endpoints
app.include_router(
    cart.router,
    prefix="/api/cart",
    tags=["Cart"]
)

# Checkout and order endpoints
app.include_router(
    orders.router,
    prefix="/api/orders",
    tags=["Orders"]
)

# Shipment endpoints
app.include_router(
    shipments.router,
    prefix="/api/shipments",
    tags=["Shipments"]
)

# Review endpoints
app.include_router(
    reviews.router,
    prefix="/api/reviews",
    tags=["Reviews"]
)

# User and seller administration endpoints
app.include_router(
    users.router,
    prefix="/api",
    tags=["Users"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Storefront API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
