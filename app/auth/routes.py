# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for registering, logging in and reading the current user.
#
# Tokens are stateless JWTs: logout is acknowledged and the client drops
# its token.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, status

from app.auth.dependencies import get_current_user
from app.auth.models import AuthResponse, AuthUser, LoginRequest, RegisterRequest
from app.auth.security import create_access_token
from app.dependencies import StorageDep
from core.models import UserPublic
from core.services import AccountService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, storage: StorageDep) -> AuthResponse:
    """
    Create an account and log it in.

    Returns:
        AuthResponse: The new user (without password) and a bearer token

    Raises:
        400: If the username or email already exists
    """
    user = AccountService(storage).register(
        username=request.username,
        password=request.password,
        name=request.name,
        email=request.email,
        role=request.role,
        phone_number=request.phone_number,
        address=request.address,
        shop_name=request.shop_name,
    )
    return AuthResponse(user=user.to_public(), access_token=create_access_token(user))


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, storage: StorageDep) -> AuthResponse:
    """
    Exchange a username and password for a bearer token.

    Raises:
        401: If the credentials don't match
    """
    user = AccountService(storage).authenticate(request.username, request.password)
    logger.info(f"User {user.id} logged in")
    return AuthResponse(user=user.to_public(), access_token=create_access_token(user))


@router.post("/logout")
async def logout() -> dict:
    """Acknowledge a logout; the client discards its token."""
    return {"ok": True}


@router.get("/user", response_model=UserPublic)
def get_current_user_info(user: AuthUser = Depends(get_current_user)) -> UserPublic:
    """
    Get the current authenticated user.

    Raises:
        401: If not authenticated
    """
    return user.to_public()
