# =============================================================================
# lib/storage/base.py - Storage Contract
# =============================================================================
# One flat CRUD contract for every entity in the storefront. Each backend
# (in-memory, PostgreSQL, MySQL) implements the same methods with the same
# semantics so the rest of the app never knows which one is active:
#
# - get_*     -> row or None
# - update_*  -> updated row or None when the id doesn't exist;
#                None-valued and unknown fields are ignored
# - delete_*  -> True when a row was removed
# - list_*    -> rows in id order
#
# Deletes cascade along the same foreign keys in every backend. Deleting a
# row that a non-cascading key still points at raises StorageIntegrityError.
# =============================================================================

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from core.models import (
    Cart,
    CartCreate,
    CartItem,
    CartItemCreate,
    Category,
    CategoryCreate,
    Order,
    OrderCreate,
    OrderItem,
    OrderItemCreate,
    Payment,
    PaymentCreate,
    Product,
    ProductCategory,
    ProductCategoryCreate,
    ProductCreate,
    Review,
    ReviewCreate,
    Seller,
    SellerCreate,
    Shipment,
    ShipmentCreate,
    User,
    UserCreate,
)
from lib.utils import ApplicationError, generate_public_id

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = (
    "Electronics",
    "Clothing",
    "Home & Kitchen",
    "Books",
    "Beauty",
    "Sports",
    "Toys",
)


class StorageError(ApplicationError):
    """Error raised by a storage backend."""

    def __init__(self, message: str, code: str = "STORAGE_ERROR", **kwargs: Any):
        super().__init__(message, code=code, **kwargs)


class StorageIntegrityError(StorageError):
    """
    A write would violate a relational constraint.

    Raised for deletes of rows still referenced by a non-cascading foreign
    key and for inserts that break a unique constraint or reference a
    missing row.
    """

    def __init__(self, message: str, suggestion: str | None = None, **kwargs: Any):
        super().__init__(message, code="STORAGE_INTEGRITY_ERROR", suggestion=suggestion, **kwargs)


class Storage(ABC):
    """
    Abstract storage backend.

    Subclasses implement every abstract method; `initialize` creates the
    schema (where there is one) and seeds the default categories.
    """

    #: Short backend name reported by the health endpoint
    name: str = "abstract"

    def __init__(self, seed_default_categories: bool = True):
        self.seed_default_categories = seed_default_categories

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self) -> None:
        """Prepare the backend for use and seed sample categories once."""
        self.create_schema()
        if self.seed_default_categories and not self.list_categories():
            for category_name in DEFAULT_CATEGORIES:
                self.create_category(
                    CategoryCreate(
                        category_id=generate_public_id("CAT"),
                        category_name=category_name,
                    )
                )
            logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} default categories into {self.name} storage")

    def create_schema(self) -> None:
        """Create tables if the backend has any. No-op by default."""

    def check_availability(self) -> bool:
        """Return True when the backend can serve requests."""
        return True

    def close(self) -> None:
        """Release connections. No-op by default."""

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def create_user(self, user: UserCreate) -> User: ...

    @abstractmethod
    def update_user(self, user_id: int, changes: dict[str, Any]) -> User | None: ...

    @abstractmethod
    def delete_user(self, user_id: int) -> bool: ...

    @abstractmethod
    def list_users(self) -> list[User]: ...

    # -------------------------------------------------------------------------
    # Sellers
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_seller(self, seller_id: int) -> Seller | None: ...

    @abstractmethod
    def get_seller_by_user_id(self, user_id: int) -> Seller | None: ...

    @abstractmethod
    def create_seller(self, seller: SellerCreate) -> Seller: ...

    @abstractmethod
    def update_seller(self, seller_id: int, changes: dict[str, Any]) -> Seller | None: ...

    @abstractmethod
    def delete_seller(self, seller_id: int) -> bool: ...

    @abstractmethod
    def list_sellers(self) -> list[Seller]: ...

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_product(self, product_id: int) -> Product | None: ...

    @abstractmethod
    def get_product_by_product_id(self, public_id: str) -> Product | None: ...

    @abstractmethod
    def create_product(self, product: ProductCreate) -> Product: ...

    @abstractmethod
    def update_product(self, product_id: int, changes: dict[str, Any]) -> Product | None: ...

    @abstractmethod
    def delete_product(self, product_id: int) -> bool: ...

    @abstractmethod
    def list_products(
        self,
        seller_id: int | None = None,
        category_id: int | None = None,
        status: str | None = None,
    ) -> list[Product]: ...

    @abstractmethod
    def search_products(self, query: str) -> list[Product]:
        """Case-insensitive substring match on name or description."""

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_category(self, category_id: int) -> Category | None: ...

    @abstractmethod
    def get_category_by_name(self, name: str) -> Category | None: ...

    @abstractmethod
    def create_category(self, category: CategoryCreate) -> Category: ...

    @abstractmethod
    def update_category(self, category_id: int, changes: dict[str, Any]) -> Category | None: ...

    @abstractmethod
    def delete_category(self, category_id: int) -> bool: ...

    @abstractmethod
    def list_categories(self) -> list[Category]: ...

    # -------------------------------------------------------------------------
    # Product <-> Category
    # -------------------------------------------------------------------------

    @abstractmethod
    def assign_product_to_category(self, link: ProductCategoryCreate) -> ProductCategory:
        """Link a product to a category; returns the existing link if present."""

    @abstractmethod
    def remove_product_from_category(self, product_id: int, category_id: int) -> bool: ...

    @abstractmethod
    def get_product_categories(self, product_id: int) -> list[Category]: ...

    @abstractmethod
    def get_category_products(self, category_id: int) -> list[Product]: ...

    # -------------------------------------------------------------------------
    # Carts
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_cart(self, cart_id: int) -> Cart | None: ...

    @abstractmethod
    def get_cart_by_user_id(self, user_id: int) -> Cart | None: ...

    @abstractmethod
    def create_cart(self, cart: CartCreate) -> Cart: ...

    @abstractmethod
    def delete_cart(self, cart_id: int) -> bool: ...

    # -------------------------------------------------------------------------
    # Cart Items
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_cart_item(self, item_id: int) -> CartItem | None: ...

    @abstractmethod
    def add_cart_item(self, item: CartItemCreate) -> CartItem:
        """Add a line, or add to the quantity of the existing line for that product."""

    @abstractmethod
    def update_cart_item(self, item_id: int, changes: dict[str, Any]) -> CartItem | None: ...

    @abstractmethod
    def remove_cart_item(self, item_id: int) -> bool: ...

    @abstractmethod
    def get_cart_items(self, cart_id: int) -> list[CartItem]: ...

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_order(self, order_id: int) -> Order | None: ...

    @abstractmethod
    def get_order_by_order_id(self, public_id: str) -> Order | None: ...

    @abstractmethod
    def create_order(self, order: OrderCreate) -> Order: ...

    @abstractmethod
    def update_order(self, order_id: int, changes: dict[str, Any]) -> Order | None: ...

    @abstractmethod
    def delete_order(self, order_id: int) -> bool: ...

    @abstractmethod
    def list_orders(self, customer_id: int | None = None) -> list[Order]: ...

    @abstractmethod
    def get_seller_orders(self, seller_id: int) -> list[Order]:
        """Distinct orders containing at least one of the seller's products."""

    # -------------------------------------------------------------------------
    # Order Items
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_order_item(self, item_id: int) -> OrderItem | None: ...

    @abstractmethod
    def add_order_item(self, item: OrderItemCreate) -> OrderItem: ...

    @abstractmethod
    def update_order_item(self, item_id: int, changes: dict[str, Any]) -> OrderItem | None: ...

    @abstractmethod
    def get_order_items(self, order_id: int) -> list[OrderItem]: ...

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_payment(self, payment_id: int) -> Payment | None: ...

    @abstractmethod
    def create_payment(self, payment: PaymentCreate) -> Payment: ...

    @abstractmethod
    def update_payment(self, payment_id: int, changes: dict[str, Any]) -> Payment | None: ...

    @abstractmethod
    def get_order_payment(self, order_id: int) -> Payment | None: ...

    # -------------------------------------------------------------------------
    # Shipments
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_shipment(self, shipment_id: int) -> Shipment | None: ...

    @abstractmethod
    def create_shipment(self, shipment: ShipmentCreate) -> Shipment: ...

    @abstractmethod
    def update_shipment(self, shipment_id: int, changes: dict[str, Any]) -> Shipment | None: ...

    @abstractmethod
    def get_order_shipment(self, order_id: int) -> Shipment | None: ...

    # -------------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_review(self, review_id: int) -> Review | None: ...

    @abstractmethod
    def create_review(self, review: ReviewCreate) -> Review: ...

    @abstractmethod
    def update_review(self, review_id: int, changes: dict[str, Any]) -> Review | None: ...

    @abstractmethod
    def delete_review(self, review_id: int) -> bool: ...

    @abstractmethod
    def get_product_reviews(self, product_id: int) -> list[Review]: ...

    @abstractmethod
    def get_user_reviews(self, user_id: int) -> list[Review]: ...
