# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: users and seller profiles
# - product.py: products, categories and their links
# - cart.py: carts and cart lines
# - order.py: orders, order lines, payments and shipments
# - review.py: product reviews
#
# "*Create" models are what storage inserts; plain models are stored rows;
# "*With*" / "*Detail" models are response shapes that embed related rows.
# =============================================================================

# -----------------------------------------------------------------------------
# Account Models
# -----------------------------------------------------------------------------
from .user import (
    Seller,
    SellerCreate,
    SellerUser,
    SellerWithUser,
    User,
    UserCreate,
    UserPublic,
    UserRole,
    UserSummary,
)

# -----------------------------------------------------------------------------
# Review Models
# -----------------------------------------------------------------------------
from .review import (
    Review,
    ReviewCreate,
    ReviewWithCustomer,
)

# -----------------------------------------------------------------------------
# Catalog Models
# -----------------------------------------------------------------------------
from .product import (
    Category,
    CategoryCreate,
    Product,
    ProductCategory,
    ProductCategoryCreate,
    ProductCreate,
    ProductDetail,
    ProductStatus,
    ProductWithCategories,
)

# -----------------------------------------------------------------------------
# Cart Models
# -----------------------------------------------------------------------------
from .cart import (
    Cart,
    CartCreate,
    CartItem,
    CartItemCreate,
    CartItemWithProduct,
    CartWithItems,
)

# -----------------------------------------------------------------------------
# Order Models
# -----------------------------------------------------------------------------
from .order import (
    CheckoutResult,
    Order,
    OrderCreate,
    OrderItem,
    OrderItemCreate,
    OrderItemWithProduct,
    OrderStatus,
    OrderWithDetails,
    Payment,
    PaymentCreate,
    PaymentMethod,
    PaymentStatus,
    Shipment,
    ShipmentCreate,
    ShipmentStatus,
)

__all__ = [
    # Accounts
    "Seller",
    "SellerCreate",
    "SellerUser",
    "SellerWithUser",
    "User",
    "UserCreate",
    "UserPublic",
    "UserRole",
    "UserSummary",
    # Reviews
    "Review",
    "ReviewCreate",
    "ReviewWithCustomer",
    # Catalog
    "Category",
    "CategoryCreate",
    "Product",
    "ProductCategory",
    "ProductCategoryCreate",
    "ProductCreate",
    "ProductDetail",
    "ProductStatus",
    "ProductWithCategories",
    # Cart
    "Cart",
    "CartCreate",
    "CartItem",
    "CartItemCreate",
    "CartItemWithProduct",
    "CartWithItems",
    # Orders
    "CheckoutResult",
    "Order",
    "OrderCreate",
    "OrderItem",
    "OrderItemCreate",
    "OrderItemWithProduct",
    "OrderStatus",
    "OrderWithDetails",
    "Payment",
    "PaymentCreate",
    "PaymentMethod",
    "PaymentStatus",
    "Shipment",
    "ShipmentCreate",
    "ShipmentStatus",
]
