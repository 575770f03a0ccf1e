# =============================================================================
# lib/storage/sql.py - SQLAlchemy Storage Backend
# =============================================================================
# One Storage implementation for every SQL dialect, on the SQLAlchemy 2.0 ORM:
# - PostgresStorage: postgresql+psycopg:// URLs
# - MySqlStorage:    mysql+pymysql:// URLs
# - SqlStorage itself also runs on sqlite:// (used by the test suite)
#
# Each public method opens its own short session and commits before
# returning, so a sequence of calls is never atomic as a whole.
# Constraint violations surface as StorageIntegrityError.
# =============================================================================

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel
from sqlalchemy import create_engine, delete, event, func, or_, select, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

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
from lib.storage.tables import (
    Base,
    CartItemTable,
    CartTable,
    CategoryTable,
    OrderItemTable,
    OrderTable,
    PaymentTable,
    ProductCategoryTable,
    ProductTable,
    ReviewTable,
    SellerTable,
    ShipmentTable,
    UserTable,
)
from lib.utils import utc_now

logger = logging.getLogger(__name__)


def _column_values(values: dict[str, Any]) -> dict[str, Any]:
    """Enum members become their plain values before reaching a column."""
    return {key: (value.value if isinstance(value, Enum) else value) for key, value in values.items()}


def _connect_args(url: str, connect_timeout: int) -> dict[str, Any]:
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        # TestClient calls the app from a worker thread
        return {"check_same_thread": False}
    return {"connect_timeout": connect_timeout}


class SqlStorage(Storage):
    """
    Storage backed by a relational database through SQLAlchemy.

    Args:
        url: SQLAlchemy database URL
        connect_timeout: Seconds to wait for a connection (network dialects)
        seed_default_categories: Seed categories on initialize()
        echo: Log every SQL statement
    """

    name = "sql"

    def __init__(
        self,
        url: str,
        connect_timeout: int = 3,
        seed_default_categories: bool = True,
        echo: bool = False,
    ):
        super().__init__(seed_default_categories=seed_default_categories)
        self.url = url
        self.engine: Engine = create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            connect_args=_connect_args(url, connect_timeout),
        )
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = sessionmaker(self.engine, expire_on_commit=False)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def check_availability(self) -> bool:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"{self.name} storage unavailable: {e}")
            return False

    def close(self) -> None:
        self.engine.dispose()

    # -------------------------------------------------------------------------
    # Session & Generic Helpers
    # -------------------------------------------------------------------------

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.warning(f"Constraint violation in {self.name} storage: {e.orig}")
            raise StorageIntegrityError(
                "Operation violates a database constraint",
                suggestion="Remove the rows that reference this record first",
                details={"error": str(e.orig)},
            ) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _get(self, table: type[Base], model: type[BaseModel], row_id: int) -> Any:
        with self._session() as session:
            row = session.get(table, row_id)
            return model.model_validate(row) if row is not None else None

    def _first(self, table: type[Base], model: type[BaseModel], *where: Any) -> Any:
        with self._session() as session:
            row = session.scalars(select(table).where(*where).order_by(table.id).limit(1)).first()
            return model.model_validate(row) if row is not None else None

    def _all(self, table: type[Base], model: type[BaseModel], *where: Any) -> list[Any]:
        with self._session() as session:
            rows = session.scalars(select(table).where(*where).order_by(table.id)).all()
            return [model.model_validate(row) for row in rows]

    def _insert(self, table: type[Base], model: type[BaseModel], data: BaseModel) -> Any:
        with self._session() as session:
            row = table(**_column_values(data.model_dump()))
            session.add(row)
            session.flush()
            return model.model_validate(row)

    def _update(
        self,
        table: type[Base],
        model: type[BaseModel],
        row_id: int,
        changes: dict[str, Any],
        stamp: bool = False,
    ) -> Any:
        with self._session() as session:
            row = session.get(table, row_id)
            if row is None:
                return None
            columns = table.__table__.columns.keys()
            values = {
                key: value
                for key, value in changes.items()
                if key in columns and key != "id" and value is not None
            }
            if stamp:
                values["last_updated"] = utc_now()
            # Validate the merged row so updates coerce like inserts do
            merged = model.model_validate({**model.model_validate(row).model_dump(), **values})
            for key, value in _column_values(merged.model_dump(include=set(values))).items():
                setattr(row, key, value)
            session.flush()
            return model.model_validate(row)

    def _delete(self, table: type[Base], *where: Any) -> bool:
        with self._session() as session:
            result = session.execute(delete(table).where(*where))
            return result.rowcount > 0

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_user(self, user_id: int) -> User | None:
        return self._get(UserTable, User, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return self._first(UserTable, User, func.lower(UserTable.username) == username.lower())

    def get_user_by_email(self, email: str) -> User | None:
        return self._first(UserTable, User, func.lower(UserTable.email) == email.lower())

    def create_user(self, user: UserCreate) -> User:
        return self._insert(UserTable, User, user)

    def update_user(self, user_id: int, changes: dict[str, Any]) -> User | None:
        return self._update(UserTable, User, user_id, changes, stamp=True)

    def delete_user(self, user_id: int) -> bool:
        return self._delete(UserTable, UserTable.id == user_id)

    def list_users(self) -> list[User]:
        return self._all(UserTable, User)

    # -------------------------------------------------------------------------
    # Sellers
    # -------------------------------------------------------------------------

    def get_seller(self, seller_id: int) -> Seller | None:
        return self._get(SellerTable, Seller, seller_id)

    def get_seller_by_user_id(self, user_id: int) -> Seller | None:
        return self._first(SellerTable, Seller, SellerTable.user_id == user_id)

    def create_seller(self, seller: SellerCreate) -> Seller:
        return self._insert(SellerTable, Seller, seller)

    def update_seller(self, seller_id: int, changes: dict[str, Any]) -> Seller | None:
        return self._update(SellerTable, Seller, seller_id, changes)

    def delete_seller(self, seller_id: int) -> bool:
        return self._delete(SellerTable, SellerTable.id == seller_id)

    def list_sellers(self) -> list[Seller]:
        return self._all(SellerTable, Seller)

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def get_product(self, product_id: int) -> Product | None:
        return self._get(ProductTable, Product, product_id)

    def get_product_by_product_id(self, public_id: str) -> Product | None:
        return self._first(ProductTable, Product, ProductTable.product_id == public_id)

    def create_product(self, product: ProductCreate) -> Product:
        return self._insert(ProductTable, Product, product)

    def update_product(self, product_id: int, changes: dict[str, Any]) -> Product | None:
        return self._update(ProductTable, Product, product_id, changes, stamp=True)

    def delete_product(self, product_id: int) -> bool:
        return self._delete(ProductTable, ProductTable.id == product_id)

    def list_products(
        self,
        seller_id: int | None = None,
        category_id: int | None = None,
        status: str | None = None,
    ) -> list[Product]:
        where = []
        if seller_id is not None:
            where.append(ProductTable.seller_id == seller_id)
        if status is not None:
            where.append(ProductTable.status == _column_values({"status": status})["status"])
        if category_id is not None:
            linked = select(ProductCategoryTable.product_id).where(
                ProductCategoryTable.category_id == category_id
            )
            where.append(ProductTable.id.in_(linked))
        return self._all(ProductTable, Product, *where)

    def search_products(self, query: str) -> list[Product]:
        needle = query.lower()
        return self._all(
            ProductTable,
            Product,
            or_(
                func.lower(ProductTable.name).contains(needle, autoescape=True),
                func.lower(ProductTable.description).contains(needle, autoescape=True),
            ),
        )

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def get_category(self, category_id: int) -> Category | None:
        return self._get(CategoryTable, Category, category_id)

    def get_category_by_name(self, name: str) -> Category | None:
        return self._first(CategoryTable, Category, CategoryTable.category_name == name)

    def create_category(self, category: CategoryCreate) -> Category:
        return self._insert(CategoryTable, Category, category)

    def update_category(self, category_id: int, changes: dict[str, Any]) -> Category | None:
        return self._update(CategoryTable, Category, category_id, changes)

    def delete_category(self, category_id: int) -> bool:
        return self._delete(CategoryTable, CategoryTable.id == category_id)

    def list_categories(self) -> list[Category]:
        return self._all(CategoryTable, Category)

    # -------------------------------------------------------------------------
    # Product <-> Category
    # -------------------------------------------------------------------------

    def assign_product_to_category(self, link: ProductCategoryCreate) -> ProductCategory:
        existing = self._first(
            ProductCategoryTable,
            ProductCategory,
            ProductCategoryTable.product_id == link.product_id,
            ProductCategoryTable.category_id == link.category_id,
        )
        if existing is not None:
            return existing
        return self._insert(ProductCategoryTable, ProductCategory, link)

    def remove_product_from_category(self, product_id: int, category_id: int) -> bool:
        return self._delete(
            ProductCategoryTable,
            ProductCategoryTable.product_id == product_id,
            ProductCategoryTable.category_id == category_id,
        )

    def get_product_categories(self, product_id: int) -> list[Category]:
        linked = select(ProductCategoryTable.category_id).where(
            ProductCategoryTable.product_id == product_id
        )
        return self._all(CategoryTable, Category, CategoryTable.id.in_(linked))

    def get_category_products(self, category_id: int) -> list[Product]:
        return self.list_products(category_id=category_id)

    # -------------------------------------------------------------------------
    # Carts
    # -------------------------------------------------------------------------

    def get_cart(self, cart_id: int) -> Cart | None:
        return self._get(CartTable, Cart, cart_id)

    def get_cart_by_user_id(self, user_id: int) -> Cart | None:
        return self._first(CartTable, Cart, CartTable.user_id == user_id)

    def create_cart(self, cart: CartCreate) -> Cart:
        return self._insert(CartTable, Cart, cart)

    def delete_cart(self, cart_id: int) -> bool:
        return self._delete(CartTable, CartTable.id == cart_id)

    # -------------------------------------------------------------------------
    # Cart Items
    # -------------------------------------------------------------------------

    def get_cart_item(self, item_id: int) -> CartItem | None:
        return self._get(CartItemTable, CartItem, item_id)

    def add_cart_item(self, item: CartItemCreate) -> CartItem:
        with self._session() as session:
            row = session.scalars(
                select(CartItemTable).where(
                    CartItemTable.cart_id == item.cart_id,
                    CartItemTable.product_id == item.product_id,
                )
            ).first()
            if row is None:
                row = CartItemTable(**item.model_dump())
                session.add(row)
            else:
                row.quantity += item.quantity
            session.flush()
            return CartItem.model_validate(row)

    def update_cart_item(self, item_id: int, changes: dict[str, Any]) -> CartItem | None:
        return self._update(CartItemTable, CartItem, item_id, changes)

    def remove_cart_item(self, item_id: int) -> bool:
        return self._delete(CartItemTable, CartItemTable.id == item_id)

    def get_cart_items(self, cart_id: int) -> list[CartItem]:
        return self._all(CartItemTable, CartItem, CartItemTable.cart_id == cart_id)

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order | None:
        return self._get(OrderTable, Order, order_id)

    def get_order_by_order_id(self, public_id: str) -> Order | None:
        return self._first(OrderTable, Order, OrderTable.order_id == public_id)

    def create_order(self, order: OrderCreate) -> Order:
        return self._insert(OrderTable, Order, order)

    def update_order(self, order_id: int, changes: dict[str, Any]) -> Order | None:
        return self._update(OrderTable, Order, order_id, changes)

    def delete_order(self, order_id: int) -> bool:
        return self._delete(OrderTable, OrderTable.id == order_id)

    def list_orders(self, customer_id: int | None = None) -> list[Order]:
        if customer_id is None:
            return self._all(OrderTable, Order)
        return self._all(OrderTable, Order, OrderTable.customer_id == customer_id)

    def get_seller_orders(self, seller_id: int) -> list[Order]:
        containing = (
            select(OrderItemTable.order_id)
            .join(ProductTable, ProductTable.id == OrderItemTable.product_id)
            .where(ProductTable.seller_id == seller_id)
        )
        return self._all(OrderTable, Order, OrderTable.id.in_(containing))

    # -------------------------------------------------------------------------
    # Order Items
    # -------------------------------------------------------------------------

    def get_order_item(self, item_id: int) -> OrderItem | None:
        return self._get(OrderItemTable, OrderItem, item_id)

    def add_order_item(self, item: OrderItemCreate) -> OrderItem:
        return self._insert(OrderItemTable, OrderItem, item)

    def update_order_item(self, item_id: int, changes: dict[str, Any]) -> OrderItem | None:
        return self._update(OrderItemTable, OrderItem, item_id, changes)

    def get_order_items(self, order_id: int) -> list[OrderItem]:
        return self._all(OrderItemTable, OrderItem, OrderItemTable.order_id == order_id)

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    def get_payment(self, payment_id: int) -> Payment | None:
        return self._get(PaymentTable, Payment, payment_id)

    def create_payment(self, payment: PaymentCreate) -> Payment:
        return self._insert(PaymentTable, Payment, payment)

    def update_payment(self, payment_id: int, changes: dict[str, Any]) -> Payment | None:
        return self._update(PaymentTable, Payment, payment_id, changes)

    def get_order_payment(self, order_id: int) -> Payment | None:
        return self._first(PaymentTable, Payment, PaymentTable.order_id == order_id)

    # -------------------------------------------------------------------------
    # Shipments
    # -------------------------------------------------------------------------

    def get_shipment(self, shipment_id: int) -> Shipment | None:
        return self._get(ShipmentTable, Shipment, shipment_id)

    def create_shipment(self, shipment: ShipmentCreate) -> Shipment:
        return self._insert(ShipmentTable, Shipment, shipment)

    def update_shipment(self, shipment_id: int, changes: dict[str, Any]) -> Shipment | None:
        return self._update(ShipmentTable, Shipment, shipment_id, changes)

    def get_order_shipment(self, order_id: int) -> Shipment | None:
        return self._first(ShipmentTable, Shipment, ShipmentTable.order_id == order_id)

    # -------------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------------

    def get_review(self, review_id: int) -> Review | None:
        return self._get(ReviewTable, Review, review_id)

    def create_review(self, review: ReviewCreate) -> Review:
        return self._insert(ReviewTable, Review, review)

    def update_review(self, review_id: int, changes: dict[str, Any]) -> Review | None:
        return self._update(ReviewTable, Review, review_id, changes)

    def delete_review(self, review_id: int) -> bool:
        return self._delete(ReviewTable, ReviewTable.id == review_id)

    def get_product_reviews(self, product_id: int) -> list[Review]:
        return self._all(ReviewTable, Review, ReviewTable.product_id == product_id)

    def get_user_reviews(self, user_id: int) -> list[Review]:
        return self._all(ReviewTable, Review, ReviewTable.customer_id == user_id)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite ignores foreign keys unless asked per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# =============================================================================
# Configured Backends
# =============================================================================

class PostgresStorage(SqlStorage):
    """SqlStorage on PostgreSQL via the psycopg driver."""

    name = "postgres"


class MySqlStorage(SqlStorage):
    """SqlStorage on MySQL via the PyMySQL driver."""

    name = "mysql"
