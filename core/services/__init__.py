# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================
# Each service wraps one feature area and is built per request from the
# active storage backend:
#
#   service = ProductService(storage)
# =============================================================================

from .account_service import AccountService
from .category_service import CategoryService
from .product_service import ProductService
from .cart_service import CartService
from .order_service import OrderService
from .review_service import ReviewService

__all__ = [
    "AccountService",
    "CategoryService",
    "ProductService",
    "CartService",
    "OrderService",
    "ReviewService",
]
