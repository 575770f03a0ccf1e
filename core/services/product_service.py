# =============================================================================
# core/services/product_service.py - Product Business Logic
# =============================================================================
# Handles the catalog: listing/search, seller and admin product management,
# category links and review listings.
#
# Ownership rules:
# - admins manage every product
# - sellers manage only products attached to their own seller profile
# - products created by sellers wait in "pending" until an admin activates them
# =============================================================================

import logging
from typing import Any

from app.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from core.models import (
    Product,
    ProductCategory,
    ProductCategoryCreate,
    ProductCreate,
    ProductDetail,
    ProductStatus,
    ProductWithCategories,
    ReviewWithCustomer,
    User,
    UserRole,
    UserSummary,
)
from core.services.account_service import AccountService
from lib.storage import Storage, StorageIntegrityError
from lib.utils import generate_public_id

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service for product operations.

    Provides a clean interface between API routes and storage.
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _get_or_404(self, product_id: int) -> Product:
        product = self.storage.get_product(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def _with_categories(self, product: Product) -> ProductWithCategories:
        return ProductWithCategories(
            **product.model_dump(),
            categories=self.storage.get_product_categories(product.id),
        )

    def _check_owner(self, user: User, product: Product, action: str) -> None:
        """Sellers may only touch their own products."""
        if user.role == UserRole.ADMIN:
            return
        seller = self.storage.get_seller_by_user_id(user.id)
        if seller is None or seller.id != product.seller_id:
            logger.info(f"User {user.id} denied {action} on product {product.id}")
            raise PermissionDeniedError(f"You don't have permission to {action} this product")

    def _assign_categories(self, product_id: int, category_ids: list[int]) -> None:
        """Link existing categories, skipping unknown ids."""
        for category_id in category_ids:
            if self.storage.get_category(category_id) is None:
                logger.warning(f"Skipping unknown category {category_id} for product {product_id}")
                continue
            self.storage.assign_product_to_category(
                ProductCategoryCreate(product_id=product_id, category_id=category_id)
            )

    def _sync_categories(self, product_id: int, category_ids: list[int]) -> None:
        """Make the product's category links exactly `category_ids`."""
        wanted = set(category_ids)
        current = {category.id for category in self.storage.get_product_categories(product_id)}
        self._assign_categories(product_id, [cid for cid in category_ids if cid not in current])
        for category_id in current - wanted:
            self.storage.remove_product_from_category(product_id, category_id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_products(
        self,
        seller_id: int | None = None,
        category_id: int | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> list[ProductWithCategories]:
        """
        List products with their categories.

        A non-empty `search` takes precedence over the other filters.
        """
        if search:
            products = self.storage.search_products(search)
        else:
            products = self.storage.list_products(
                seller_id=seller_id,
                category_id=category_id,
                status=status,
            )
        return [self._with_categories(product) for product in products]

    def get_product(self, product_id: int) -> ProductDetail:
        product = self._get_or_404(product_id)
        return ProductDetail(
            **product.model_dump(),
            categories=self.storage.get_product_categories(product.id),
            reviews=self.storage.get_product_reviews(product.id),
        )

    def get_product_reviews(self, product_id: int) -> list[ReviewWithCustomer]:
        """Reviews of a product, each with its author's public summary."""
        product = self._get_or_404(product_id)
        result = []
        for review in self.storage.get_product_reviews(product.id):
            customer = self.storage.get_user(review.customer_id)
            result.append(
                ReviewWithCustomer(
                    **review.model_dump(),
                    customer=UserSummary.model_validate(customer.model_dump()) if customer else None,
                )
            )
        return result

    # -------------------------------------------------------------------------
    # Management
    # -------------------------------------------------------------------------

    def create_product(
        self,
        user: User,
        name: str,
        description: str,
        price: float,
        stock: int,
        image_url: str | None = None,
        categories: list[int] | None = None,
        seller_id: int | None = None,
    ) -> ProductWithCategories:
        """
        Create a product for the calling seller, or for `seller_id` as admin.

        Sellers without a profile get one automatically. Seller products
        start pending; admin products start active.

        Raises:
            ValidationFailedError: Admin didn't name a seller
            NotFoundError: Admin named a seller that doesn't exist
        """
        if user.role == UserRole.SELLER:
            seller = AccountService(self.storage).ensure_seller_profile(user)
            status = ProductStatus.PENDING
        else:
            if seller_id is None:
                raise ValidationFailedError("seller_id is required when an admin creates a product")
            seller = self.storage.get_seller(seller_id)
            if seller is None:
                raise NotFoundError("Seller", seller_id)
            status = ProductStatus.ACTIVE

        product = self.storage.create_product(
            ProductCreate(
                product_id=generate_public_id("PROD"),
                seller_id=seller.id,
                name=name,
                description=description,
                price=price,
                stock=stock,
                image_url=image_url,
                status=status,
            )
        )
        logger.info(f"Created product {product.id} for seller {seller.id} with status {status.value}")

        if categories:
            self._assign_categories(product.id, categories)
        return self._with_categories(product)

    def update_product(self, user: User, product_id: int, changes: dict[str, Any]) -> ProductWithCategories:
        """
        Apply a partial update.

        `changes["categories"]`, when present, replaces the product's
        category links. Status changes are reserved for admins.
        """
        product = self._get_or_404(product_id)
        self._check_owner(user, product, "update")

        changes = dict(changes)
        category_ids = changes.pop("categories", None)
        if "status" in changes and user.role != UserRole.ADMIN:
            logger.warning(f"Ignoring status change by seller {user.id} on product {product_id}")
            changes.pop("status")

        updated = self.storage.update_product(product_id, changes)
        if updated is None:
            raise NotFoundError("Product", product_id)
        if "status" in changes and updated.status != product.status:
            logger.info(f"Product {product_id} status {product.status.value} -> {updated.status.value}")

        if category_ids is not None:
            self._sync_categories(product_id, category_ids)
        return self._with_categories(updated)

    def delete_product(self, user: User, product_id: int) -> None:
        """
        Raises:
            ConflictError: The product appears in orders or carts
        """
        product = self._get_or_404(product_id)
        self._check_owner(user, product, "delete")
        try:
            self.storage.delete_product(product_id)
        except StorageIntegrityError as e:
            raise ConflictError(
                "Product is referenced by existing orders or carts",
                suggestion="Set the product status to 'delisted' instead of deleting it",
            ) from e
        logger.info(f"Deleted product {product_id}")

    def add_category(self, user: User, product_id: int, category_id: int) -> ProductCategory:
        product = self._get_or_404(product_id)
        if self.storage.get_category(category_id) is None:
            raise NotFoundError("Category", category_id)
        self._check_owner(user, product, "update")
        return self.storage.assign_product_to_category(
            ProductCategoryCreate(product_id=product_id, category_id=category_id)
        )
