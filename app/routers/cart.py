# =============================================================================
# app/routers/cart.py - Shopping Cart Endpoints
# =============================================================================
# Operates on the authenticated user's own cart.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from pydantic import BaseModel, Field

from app.auth import AuthUser, get_current_user
from app.dependencies import StorageDep
from core.models import CartItemWithProduct, CartWithItems
from core.services import CartService

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================

class CartItemAddRequest(BaseModel):
    """Body of POST /api/cart/items."""
    product_id: int = Field(..., examples=[1])
    quantity: int = Field(default=1, ge=1, examples=[2])


class CartItemUpdateRequest(BaseModel):
    """Body of PUT /api/cart/items/{id}."""
    quantity: int = Field(..., ge=1, examples=[3])


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=CartWithItems)
def get_cart(
    storage: StorageDep,
    user: AuthUser = Depends(get_current_user),
):
    """Get the user's cart (created on first access) with product details."""
    return CartService(storage).get_cart(user)


@router.post("/items", response_model=CartItemWithProduct, status_code=status.HTTP_201_CREATED)
def add_cart_item(
    request: CartItemAddRequest,
    storage: StorageDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Add a product to the cart.

    Adding a product already in the cart increases that line's quantity.
    """
    return CartService(storage).add_item(user, request.product_id, request.quantity)


@router.put("/items/{item_id}", response_model=CartItemWithProduct)
def update_cart_item(
    item_id: Annotated[int, Path(description="Cart item id")],
    request: CartItemUpdateRequest,
    storage: StorageDep,
    user: AuthUser = Depends(get_current_user),
):
    """Change a cart line's quantity."""
    return CartService(storage).update_item(user, item_id, request.quantity)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_cart_item(
    item_id: Annotated[int, Path(description="Cart item id")],
    storage: StorageDep,
    user: AuthUser = Depends(get_current_user),
):
    """Remove a line from the cart."""
    CartService(storage).remove_item(user, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
