# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides bcrypt passwords and JWT bearer authentication.
#
# Usage:
#   from app.auth import get_current_user, require_roles, AuthUser
#
#   @router.get("/protected")
#   def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import get_current_user, require_roles
from app.auth.models import AuthResponse, AuthUser, LoginRequest, RegisterRequest

__all__ = [
    "get_current_user",
    "require_roles",
    "AuthResponse",
    "AuthUser",
    "LoginRequest",
    "RegisterRequest",
]
