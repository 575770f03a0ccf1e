# =============================================================================
# app/routers/users.py - User & Seller Administration Endpoints
# =============================================================================
# Mounted at /api: serves /users (admin) and /sellers.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from app.auth import AuthUser, get_current_user, require_roles
from app.dependencies import StorageDep
from core.models import SellerWithUser, UserPublic, UserRole
from core.services import AccountService

router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)


# =============================================================================
# Users
# =============================================================================

@router.get("/users", response_model=list[UserPublic])
def list_users(
    storage: StorageDep,
    user: AuthUser = Depends(admin_only),
):
    """List every user without passwords (admin)."""
    return AccountService(storage).list_users()


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: Annotated[int, Path(description="User id")],
    storage: StorageDep,
    user: AuthUser = Depends(admin_only),
):
    """
    Delete a user (admin).

    Users with orders or reviews can't be deleted.
    """
    AccountService(storage).delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Sellers
# =============================================================================

@router.get("/sellers", response_model=list[SellerWithUser])
def list_sellers(
    storage: StorageDep,
    user: AuthUser = Depends(get_current_user),
    user_id: Annotated[int | None, Query(alias="userId", description="Owning user id")] = None,
):
    """
    List seller profiles with their accounts.

    Sellers get their own profile; admins get all, or the one for userId.
    """
    return AccountService(storage).list_sellers(user, user_id)


@router.delete("/sellers/{seller_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_seller(
    seller_id: Annotated[int, Path(description="Seller profile id")],
    storage: StorageDep,
    user: AuthUser = Depends(admin_only),
):
    """Delete a seller profile without products (admin)."""
    AccountService(storage).delete_seller(seller_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
