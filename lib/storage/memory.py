# =============================================================================
# lib/storage/memory.py - In-Memory Storage Backend
# =============================================================================
# Keeps every table in a dict keyed by id with one counter per table.
# Used when no database is configured and by the test suite.
#
# The foreign keys of the SQL schema are reproduced by hand:
# - cascading keys are followed on delete (e.g. order -> items/payment/shipment)
# - restricting keys block the delete with StorageIntegrityError
# - inserts that reference a missing parent row raise StorageIntegrityError
#
# Rows are pydantic models. Callers always get copies, so mutating a returned
# object never changes what is stored.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel

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
from lib.storage.base import Storage, StorageIntegrityError
from lib.utils import utc_now

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=BaseModel)


# =============================================================================
# Table Helper
# =============================================================================

class _Table:
    """A dict of rows plus the next id to hand out."""

    def __init__(self, name: str):
        self.name = name
        self.rows: dict[int, BaseModel] = {}
        self._next_id = 1

    def next_id(self) -> int:
        row_id = self._next_id
        self._next_id += 1
        return row_id

    def insert(self, row: RowT) -> RowT:
        self.rows[row.id] = row
        return row.model_copy()

    def get(self, row_id: int) -> Any:
        row = self.rows.get(row_id)
        return row.model_copy() if row is not None else None

    def find(self, **criteria: Any) -> list[Any]:
        """Rows whose attributes equal every criterion, in id order."""
        return [
            row.model_copy()
            for _, row in sorted(self.rows.items())
            if all(getattr(row, key) == value for key, value in criteria.items())
        ]

    def first(self, **criteria: Any) -> Any:
        matches = self.find(**criteria)
        return matches[0] if matches else None

    def update(self, row_id: int, changes: dict[str, Any], stamp: bool = False) -> Any:
        row = self.rows.get(row_id)
        if row is None:
            return None
        fields = type(row).model_fields
        values = {
            key: value
            for key, value in changes.items()
            if key in fields and key != "id" and value is not None
        }
        if stamp:
            values["last_updated"] = utc_now()
        updated = type(row).model_validate({**row.model_dump(), **values})
        self.rows[row_id] = updated
        return updated.model_copy()

    def remove(self, row_id: int) -> bool:
        return self.rows.pop(row_id, None) is not None

    def clear(self) -> None:
        self.rows.clear()
        self._next_id = 1


class MemoryStorage(Storage):
    """
    Storage backend holding everything in process memory.

    Data is lost when the process exits.

    Example:
        storage = MemoryStorage()
        storage.initialize()
        storage.list_categories()  # the seven default categories
    """

    name = "memory"

    def __init__(self, seed_default_categories: bool = True):
        super().__init__(seed_default_categories=seed_default_categories)
        self.users = _Table("users")
        self.sellers = _Table("sellers")
        self.products = _Table("products")
        self.categories = _Table("categories")
        self.product_categories = _Table("product_categories")
        self.carts = _Table("carts")
        self.cart_items = _Table("cart_items")
        self.orders = _Table("orders")
        self.order_items = _Table("order_items")
        self.payments = _Table("payments")
        self.shipments = _Table("shipments")
        self.reviews = _Table("reviews")

    def _restrict(self, table: _Table, message: str, suggestion: str, **criteria: Any) -> None:
        """Refuse a delete while rows in `table` still reference the target."""
        if table.first(**criteria) is not None:
            logger.warning(f"Delete blocked by {table.name}: {criteria}")
            raise StorageIntegrityError(message, suggestion=suggestion)

    def _require(self, table: _Table, row_id: int, message: str) -> None:
        """Refuse an insert whose foreign key points at a missing row."""
        if table.get(row_id) is None:
            logger.warning(f"Insert blocked: {table.name} {row_id} does not exist")
            raise StorageIntegrityError(message)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_user(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        needle = username.lower()
        for user in self.users.find():
            if user.username.lower() == needle:
                return user
        return None

    def get_user_by_email(self, email: str) -> User | None:
        needle = email.lower()
        for user in self.users.find():
            if user.email.lower() == needle:
                return user
        return None

    def create_user(self, user: UserCreate) -> User:
        row = User(id=self.users.next_id(), registration_date=utc_now(), **user.model_dump())
        return self.users.insert(row)

    def update_user(self, user_id: int, changes: dict[str, Any]) -> User | None:
        return self.users.update(user_id, changes, stamp=True)

    def delete_user(self, user_id: int) -> bool:
        if self.users.get(user_id) is None:
            return False
        self._restrict(
            self.orders,
            "User still has orders",
            "Orders keep their customer; the account cannot be removed",
            customer_id=user_id,
        )
        self._restrict(
            self.reviews,
            "User still has reviews",
            "Delete the user's reviews first",
            customer_id=user_id,
        )
        seller = self.sellers.first(user_id=user_id)
        if seller is not None:
            self.delete_seller(seller.id)
        cart = self.carts.first(user_id=user_id)
        if cart is not None:
            self.delete_cart(cart.id)
        return self.users.remove(user_id)

    def list_users(self) -> list[User]:
        return self.users.find()

    # -------------------------------------------------------------------------
    # Sellers
    # -------------------------------------------------------------------------

    def get_seller(self, seller_id: int) -> Seller | None:
        return self.sellers.get(seller_id)

    def get_seller_by_user_id(self, user_id: int) -> Seller | None:
        return self.sellers.first(user_id=user_id)

    def create_seller(self, seller: SellerCreate) -> Seller:
        self._require(self.users, seller.user_id, "User does not exist")
        row = Seller(id=self.sellers.next_id(), joined_date=utc_now(), **seller.model_dump())
        return self.sellers.insert(row)

    def update_seller(self, seller_id: int, changes: dict[str, Any]) -> Seller | None:
        return self.sellers.update(seller_id, changes)

    def delete_seller(self, seller_id: int) -> bool:
        if self.sellers.get(seller_id) is None:
            return False
        self._restrict(
            self.products,
            "Seller still has products",
            "Delete or reassign the seller's products first",
            seller_id=seller_id,
        )
        return self.sellers.remove(seller_id)

    def list_sellers(self) -> list[Seller]:
        return self.sellers.find()

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def get_product(self, product_id: int) -> Product | None:
        return self.products.get(product_id)

    def get_product_by_product_id(self, public_id: str) -> Product | None:
        return self.products.first(product_id=public_id)

    def create_product(self, product: ProductCreate) -> Product:
        self._require(self.sellers, product.seller_id, "Seller does not exist")
        now = utc_now()
        row = Product(
            id=self.products.next_id(),
            added_date=now,
            last_updated=now,
            **product.model_dump(),
        )
        return self.products.insert(row)

    def update_product(self, product_id: int, changes: dict[str, Any]) -> Product | None:
        return self.products.update(product_id, changes, stamp=True)

    def delete_product(self, product_id: int) -> bool:
        if self.products.get(product_id) is None:
            return False
        self._restrict(
            self.order_items,
            "Product is part of existing orders",
            "Set the product status to 'delisted' instead of deleting it",
            product_id=product_id,
        )
        self._restrict(
            self.cart_items,
            "Product is in a customer's cart",
            "Set the product status to 'delisted' instead of deleting it",
            product_id=product_id,
        )
        for link in self.product_categories.find(product_id=product_id):
            self.product_categories.remove(link.id)
        for review in self.reviews.find(product_id=product_id):
            self.reviews.remove(review.id)
        return self.products.remove(product_id)

    def list_products(
        self,
        seller_id: int | None = None,
        category_id: int | None = None,
        status: str | None = None,
    ) -> list[Product]:
        criteria: dict[str, Any] = {}
        if seller_id is not None:
            criteria["seller_id"] = seller_id
        if status is not None:
            criteria["status"] = status
        products = self.products.find(**criteria)
        if category_id is not None:
            linked = {link.product_id for link in self.product_categories.find(category_id=category_id)}
            products = [product for product in products if product.id in linked]
        return products

    def search_products(self, query: str) -> list[Product]:
        needle = query.lower()
        return [
            product
            for product in self.products.find()
            if needle in product.name.lower() or needle in product.description.lower()
        ]

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def get_category(self, category_id: int) -> Category | None:
        return self.categories.get(category_id)

    def get_category_by_name(self, name: str) -> Category | None:
        return self.categories.first(category_name=name)

    def create_category(self, category: CategoryCreate) -> Category:
        row = Category(id=self.categories.next_id(), **category.model_dump())
        return self.categories.insert(row)

    def update_category(self, category_id: int, changes: dict[str, Any]) -> Category | None:
        return self.categories.update(category_id, changes)

    def delete_category(self, category_id: int) -> bool:
        if self.categories.get(category_id) is None:
            return False
        for link in self.product_categories.find(category_id=category_id):
            self.product_categories.remove(link.id)
        return self.categories.remove(category_id)

    def list_categories(self) -> list[Category]:
        return self.categories.find()

    # -------------------------------------------------------------------------
    # Product <-> Category
    # -------------------------------------------------------------------------

    def assign_product_to_category(self, link: ProductCategoryCreate) -> ProductCategory:
        existing = self.product_categories.first(
            product_id=link.product_id, category_id=link.category_id
        )
        if existing is not None:
            return existing
        if self.products.get(link.product_id) is None or self.categories.get(link.category_id) is None:
            raise StorageIntegrityError("Product or category does not exist")
        row = ProductCategory(id=self.product_categories.next_id(), **link.model_dump())
        return self.product_categories.insert(row)

    def remove_product_from_category(self, product_id: int, category_id: int) -> bool:
        link = self.product_categories.first(product_id=product_id, category_id=category_id)
        if link is None:
            return False
        return self.product_categories.remove(link.id)

    def get_product_categories(self, product_id: int) -> list[Category]:
        links = self.product_categories.find(product_id=product_id)
        categories = [self.categories.get(link.category_id) for link in links]
        return sorted((c for c in categories if c is not None), key=lambda c: c.id)

    def get_category_products(self, category_id: int) -> list[Product]:
        links = self.product_categories.find(category_id=category_id)
        products = [self.products.get(link.product_id) for link in links]
        return sorted((p for p in products if p is not None), key=lambda p: p.id)

    # -------------------------------------------------------------------------
    # Carts
    # -------------------------------------------------------------------------

    def get_cart(self, cart_id: int) -> Cart | None:
        return self.carts.get(cart_id)

    def get_cart_by_user_id(self, user_id: int) -> Cart | None:
        return self.carts.first(user_id=user_id)

    def create_cart(self, cart: CartCreate) -> Cart:
        self._require(self.users, cart.user_id, "User does not exist")
        row = Cart(id=self.carts.next_id(), created_at=utc_now(), **cart.model_dump())
        return self.carts.insert(row)

    def delete_cart(self, cart_id: int) -> bool:
        if self.carts.get(cart_id) is None:
            return False
        for item in self.cart_items.find(cart_id=cart_id):
            self.cart_items.remove(item.id)
        return self.carts.remove(cart_id)

    # -------------------------------------------------------------------------
    # Cart Items
    # -------------------------------------------------------------------------

    def get_cart_item(self, item_id: int) -> CartItem | None:
        return self.cart_items.get(item_id)

    def add_cart_item(self, item: CartItemCreate) -> CartItem:
        self._require(self.carts, item.cart_id, "Cart does not exist")
        self._require(self.products, item.product_id, "Product does not exist")
        existing = self.cart_items.first(cart_id=item.cart_id, product_id=item.product_id)
        if existing is not None:
            return self.cart_items.update(existing.id, {"quantity": existing.quantity + item.quantity})
        row = CartItem(id=self.cart_items.next_id(), added_date=utc_now(), **item.model_dump())
        return self.cart_items.insert(row)

    def update_cart_item(self, item_id: int, changes: dict[str, Any]) -> CartItem | None:
        return self.cart_items.update(item_id, changes)

    def remove_cart_item(self, item_id: int) -> bool:
        return self.cart_items.remove(item_id)

    def get_cart_items(self, cart_id: int) -> list[CartItem]:
        return self.cart_items.find(cart_id=cart_id)

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order | None:
        return self.orders.get(order_id)

    def get_order_by_order_id(self, public_id: str) -> Order | None:
        return self.orders.first(order_id=public_id)

    def create_order(self, order: OrderCreate) -> Order:
        self._require(self.users, order.customer_id, "Customer does not exist")
        row = Order(id=self.orders.next_id(), order_date=utc_now(), **order.model_dump())
        return self.orders.insert(row)

    def update_order(self, order_id: int, changes: dict[str, Any]) -> Order | None:
        return self.orders.update(order_id, changes)

    def delete_order(self, order_id: int) -> bool:
        if self.orders.get(order_id) is None:
            return False
        for table in (self.order_items, self.payments, self.shipments):
            for row in table.find(order_id=order_id):
                table.remove(row.id)
        return self.orders.remove(order_id)

    def list_orders(self, customer_id: int | None = None) -> list[Order]:
        if customer_id is None:
            return self.orders.find()
        return self.orders.find(customer_id=customer_id)

    def get_seller_orders(self, seller_id: int) -> list[Order]:
        product_ids = {product.id for product in self.products.find(seller_id=seller_id)}
        order_ids = {
            item.order_id
            for item in self.order_items.find()
            if item.product_id in product_ids
        }
        return [order for order in self.orders.find() if order.id in order_ids]

    # -------------------------------------------------------------------------
    # Order Items
    # -------------------------------------------------------------------------

    def get_order_item(self, item_id: int) -> OrderItem | None:
        return self.order_items.get(item_id)

    def add_order_item(self, item: OrderItemCreate) -> OrderItem:
        self._require(self.orders, item.order_id, "Order does not exist")
        self._require(self.products, item.product_id, "Product does not exist")
        row = OrderItem(id=self.order_items.next_id(), **item.model_dump())
        return self.order_items.insert(row)

    def update_order_item(self, item_id: int, changes: dict[str, Any]) -> OrderItem | None:
        return self.order_items.update(item_id, changes)

    def get_order_items(self, order_id: int) -> list[OrderItem]:
        return self.order_items.find(order_id=order_id)

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    def get_payment(self, payment_id: int) -> Payment | None:
        return self.payments.get(payment_id)

    def create_payment(self, payment: PaymentCreate) -> Payment:
        self._require(self.orders, payment.order_id, "Order does not exist")
        row = Payment(id=self.payments.next_id(), payment_date=utc_now(), **payment.model_dump())
        return self.payments.insert(row)

    def update_payment(self, payment_id: int, changes: dict[str, Any]) -> Payment | None:
        return self.payments.update(payment_id, changes)

    def get_order_payment(self, order_id: int) -> Payment | None:
        return self.payments.first(order_id=order_id)

    # -------------------------------------------------------------------------
    # Shipments
    # -------------------------------------------------------------------------

    def get_shipment(self, shipment_id: int) -> Shipment | None:
        return self.shipments.get(shipment_id)

    def create_shipment(self, shipment: ShipmentCreate) -> Shipment:
        self._require(self.orders, shipment.order_id, "Order does not exist")
        row = Shipment(id=self.shipments.next_id(), shipment_date=utc_now(), **shipment.model_dump())
        return self.shipments.insert(row)

    def update_shipment(self, shipment_id: int, changes: dict[str, Any]) -> Shipment | None:
        return self.shipments.update(shipment_id, changes)

    def get_order_shipment(self, order_id: int) -> Shipment | None:
        return self.shipments.first(order_id=order_id)

    # -------------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------------

    def get_review(self, review_id: int) -> Review | None:
        return self.reviews.get(review_id)

    def create_review(self, review: ReviewCreate) -> Review:
        self._require(self.products, review.product_id, "Product does not exist")
        self._require(self.users, review.customer_id, "Customer does not exist")
        row = Review(id=self.reviews.next_id(), review_date=utc_now(), **review.model_dump())
        return self.reviews.insert(row)

    def update_review(self, review_id: int, changes: dict[str, Any]) -> Review | None:
        return self.reviews.update(review_id, changes)

    def delete_review(self, review_id: int) -> bool:
        return self.reviews.remove(review_id)

    def get_product_reviews(self, product_id: int) -> list[Review]:
        return self.reviews.find(product_id=product_id)

    def get_user_reviews(self, user_id: int) -> list[Review]:
        return self.reviews.find(customer_id=user_id)
