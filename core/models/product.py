# =============================================================================
# core/models/product.py - Catalog Schemas
# =============================================================================
# These models define the storage contract for the catalog:
# - Product: an item listed by a seller
# - Category: a browsing group (Electronics, Books, ...)
# - ProductCategory: many-to-many link between the two
#
# Product lifecycle:
#   seller creates -> pending -> (admin approves) -> active
#                            \-> (admin rejects)  -> rejected
#   active -> delisted
# Admin-created products start active.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .review import Review


class ProductStatus(str, Enum):
    """
    Listing state of a product.

    - active: visible and purchasable
    - pending: waiting for admin approval
    - delisted: withdrawn from sale
    - rejected: refused by an admin
    """
    ACTIVE = "active"
    PENDING = "pending"
    DELISTED = "delisted"
    REJECTED = "rejected"


# =============================================================================
# Product
# =============================================================================

class ProductCreate(BaseModel):
    """
    Schema for inserting a product.

    Example:
        {
            "product_id": "PROD-1a2b3c4d",
            "seller_id": 1,
            "name": "Wireless Mouse",
            "description": "2.4GHz, 18 month battery",
            "price": 24.99,
            "stock": 120,
            "status": "pending"
        }
    """

    product_id: str = Field(..., min_length=1, max_length=50)
    seller_id: int
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)

    # Stored as a double in every backend
    price: float = Field(..., gt=0)
    stock: int = Field(..., ge=0)
    image_url: str | None = None
    status: ProductStatus = ProductStatus.ACTIVE


class Product(BaseModel):
    """A stored product."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: str
    seller_id: int
    name: str
    description: str
    price: float
    stock: int
    image_url: str | None = None
    added_date: datetime
    last_updated: datetime | None = None
    status: ProductStatus = ProductStatus.ACTIVE


# =============================================================================
# Category
# =============================================================================

class CategoryCreate(BaseModel):
    """Schema for inserting a category."""

    category_id: str = Field(..., min_length=1, max_length=50)
    category_name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class Category(BaseModel):
    """A stored category."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: str
    category_name: str
    description: str | None = None


class ProductCategoryCreate(BaseModel):
    """Schema for linking a product to a category."""

    product_id: int
    category_id: int


class ProductCategory(BaseModel):
    """A stored product-category link."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    category_id: int


# =============================================================================
# Response Shapes
# =============================================================================

class ProductWithCategories(Product):
    """Product plus its categories, as listed by GET /api/products."""

    categories: list[Category] = Field(default_factory=list)


class ProductDetail(ProductWithCategories):
    """Product with categories and reviews, as returned by GET /api/products/{id}."""

    reviews: list[Review] = Field(default_factory=list)
