# =============================================================================
# app/routers/products.py - Product Endpoints
# =============================================================================
# Browsing is public. Sellers and admins manage products; sellers only their
# own. Also serves a product's category links and reviews.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field

from app.auth import AuthUser, require_roles
from app.dependencies import StorageDep
from app.exceptions import ValidationFailedError
from core.models import (
    ProductCategory,
    ProductDetail,
    ProductStatus,
    ProductWithCategories,
    ReviewWithCustomer,
    UserRole,
)
from core.services import ProductService

router = APIRouter()

seller_or_admin = require_roles(UserRole.SELLER, UserRole.ADMIN)


# =============================================================================
# Request Models
# =============================================================================

class ProductCreateRequest(BaseModel):
    """Body of POST /api/products."""
    name: str = Field(..., min_length=1, max_length=255, examples=["Wireless Mouse"])
    description: str = Field(..., min_length=1, examples=["2.4GHz, 18 month battery"])
    price: float = Field(..., gt=0, examples=[24.99])
    stock: int = Field(..., ge=0, examples=[120])
    image_url: str | None = None
    categories: list[int] | None = Field(default=None, description="Category ids to link")
    seller_id: int | None = Field(default=None, description="Owning seller (admins only)")

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Wireless Mouse",
                "description": "2.4GHz, 18 month battery",
                "price": 24.99,
                "stock": 120,
                "categories": [1],
            }
        }
    }


class ProductUpdateRequest(BaseModel):
    """
    Body of PUT /api/products/{id}.

    Omitted fields are left unchanged. `categories` replaces the product's
    category links. `status` is honored for admins only.
    """
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, gt=0)
    stock: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    status: ProductStatus | None = None
    categories: list[int] | None = None


class ProductCategoryRequest(BaseModel):
    """Body of POST /api/products/{id}/categories."""
    model_config = ConfigDict(populate_by_name=True)

    category_id: int | None = Field(default=None, alias="categoryId")


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=list[ProductWithCategories])
def list_products(
    storage: StorageDep,
    seller_id: Annotated[int | None, Query(alias="sellerId", description="Filter by seller")] = None,
    category_id: Annotated[int | None, Query(alias="categoryId", description="Filter by category")] = None,
    product_status: Annotated[ProductStatus | None, Query(alias="status", description="Filter by status")] = None,
    search: Annotated[str | None, Query(description="Search name and description (ignores filters)")] = None,
):
    """
    List products with their categories.

    `search` matches name or description case-insensitively and takes
    precedence over the filters.
    """
    return ProductService(storage).list_products(
        seller_id=seller_id,
        category_id=category_id,
        status=product_status.value if product_status else None,
        search=search,
    )


@router.get("/{product_id}", response_model=ProductDetail)
def get_product(
    product_id: Annotated[int, Path(description="Product id")],
    storage: StorageDep,
):
    """Get one product with its categories and reviews."""
    return ProductService(storage).get_product(product_id)


@router.post("", response_model=ProductWithCategories, status_code=status.HTTP_201_CREATED)
def create_product(
    request: ProductCreateRequest,
    storage: StorageDep,
    user: AuthUser = Depends(seller_or_admin),
):
    """
    Create a product.

    Seller products start pending approval; admin products start active
    and must name a seller_id.
    """
    return ProductService(storage).create_product(
        user,
        name=request.name,
        description=request.description,
        price=request.price,
        stock=request.stock,
        image_url=request.image_url,
        categories=request.categories,
        seller_id=request.seller_id,
    )


@router.put("/{product_id}", response_model=ProductWithCategories)
def update_product(
    product_id: Annotated[int, Path(description="Product id")],
    request: ProductUpdateRequest,
    storage: StorageDep,
    user: AuthUser = Depends(seller_or_admin),
):
    """Update a product (owner seller or admin)."""
    return ProductService(storage).update_product(
        user, product_id, request.model_dump(exclude_unset=True)
    )


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: Annotated[int, Path(description="Product id")],
    storage: StorageDep,
    user: AuthUser = Depends(seller_or_admin),
):
    """
    Delete a product (owner seller or admin).

    Products with order history can't be deleted; delist them instead.
    """
    ProductService(storage).delete_product(user, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{product_id}/categories",
    response_model=ProductCategory,
    status_code=status.HTTP_201_CREATED,
)
def add_product_category(
    product_id: Annotated[int, Path(description="Product id")],
    request: ProductCategoryRequest,
    storage: StorageDep,
    user: AuthUser = Depends(seller_or_admin),
):
    """Link a product to a category."""
    if not request.category_id:
        raise ValidationFailedError("categoryId is required")
    return ProductService(storage).add_category(user, product_id, request.category_id)


@router.get("/{product_id}/reviews", response_model=list[ReviewWithCustomer])
def list_product_reviews(
    product_id: Annotated[int, Path(description="Product id")],
    storage: StorageDep,
):
    """List a product's reviews with author info."""
    return ProductService(storage).get_product_reviews(product_id)
