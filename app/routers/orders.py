# =============================================================================
# app/routers/orders.py - Checkout & Order Endpoints
# =============================================================================
# POST places an order from the cart; GET lists/reads orders by role;
# PUT lets admins move an order's status.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from pydantic import BaseModel, ConfigDict, Field

from app.auth import AuthUser, get_current_user, require_roles
from app.dependencies import StorageDep
from core.models import (
    CheckoutResult,
    Order,
    OrderStatus,
    OrderWithDetails,
    PaymentMethod,
    UserRole,
)
from core.services import OrderService

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================

class CheckoutRequest(BaseModel):
    """
    Body of POST /api/orders.

    The checkout form's shipping and contact fields are accepted and not
    stored. Totals and the customer always come from the server side.
    """
    model_config = ConfigDict(extra="ignore")

    payment_method: PaymentMethod | None = Field(default=None, examples=["credit_card"])


class OrderStatusRequest(BaseModel):
    """Body of PUT /api/orders/{id}."""
    status: OrderStatus = Field(..., examples=["shipped"])


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", response_model=CheckoutResult, status_code=status.HTTP_201_CREATED)
def checkout(
    storage: StorageDep,
    user: AuthUser = Depends(get_current_user),
    request: CheckoutRequest | None = None,
):
    """
    Place an order for everything in the cart.

    Creates the order, its lines, a completed mock payment and a shipment,
    decrements stock and empties the cart.
    """
    payment_method = request.payment_method if request else None
    return OrderService(storage).checkout(user, payment_method)


@router.get("", response_model=list[OrderWithDetails])
def list_orders(
    storage: StorageDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    List orders visible to the user.

    Customers see their own, sellers those containing their products,
    admins all.
    """
    return OrderService(storage).list_orders(user)


@router.get("/{order_id}", response_model=OrderWithDetails)
def get_order(
    order_id: Annotated[int, Path(description="Order id")],
    storage: StorageDep,
    user: AuthUser = Depends(get_current_user),
):
    """Get one order with lines, products, payment and shipment."""
    return OrderService(storage).get_order(user, order_id)


@router.put("/{order_id}", response_model=Order)
def update_order_status(
    order_id: Annotated[int, Path(description="Order id")],
    request: OrderStatusRequest,
    storage: StorageDep,
    user: AuthUser = Depends(require_roles(UserRole.ADMIN)),
):
    """Set an order's status (admin)."""
    return OrderService(storage).update_order_status(order_id, request.status)
