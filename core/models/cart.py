# =============================================================================
# core/models/cart.py - Cart Schemas
# =============================================================================
# Each user has at most one cart, created lazily on first access.
# A cart holds one line per product; adding the same product again increases
# that line's quantity instead of creating a second line.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .product import Product


class CartCreate(BaseModel):
    """Schema for inserting a cart."""

    cart_id: str = Field(..., min_length=1, max_length=50)
    user_id: int


class Cart(BaseModel):
    """A stored cart."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    cart_id: str
    user_id: int
    created_at: datetime


class CartItemCreate(BaseModel):
    """Schema for inserting a cart line."""

    cart_id: int
    product_id: int
    quantity: int = Field(default=1, ge=1)


class CartItem(BaseModel):
    """A stored cart line."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    cart_id: int
    product_id: int
    quantity: int = 1
    added_date: datetime


class CartItemWithProduct(CartItem):
    """Cart line plus the product it points at."""

    product: Product | None = None


class CartWithItems(Cart):
    """Cart plus its lines, as returned by GET /api/cart."""

    items: list[CartItemWithProduct] = Field(default_factory=list)
