# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and role checks.
#
# Usage:
#   from app.auth import get_current_user, require_roles, AuthUser
#
#   @router.get("/protected")
#   def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
#
#   @router.delete("/admin-only")
#   def admin_only(user: AuthUser = Depends(require_roles(UserRole.ADMIN))):
#       ...
# =============================================================================

import logging
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError

from app.auth.models import AuthUser, TokenPayload
from app.auth.security import decode_access_token
from app.dependencies import StorageDep
from app.exceptions import AuthenticationRequiredError, PermissionDeniedError
from core.models import UserRole

logger = logging.getLogger(__name__)

# Missing headers are reported by get_current_user, not by HTTPBearer
security_optional = HTTPBearer(auto_error=False)


def _resolve_user(token: str, storage: StorageDep) -> AuthUser:
    try:
        payload = TokenPayload(**decode_access_token(token))
    except ExpiredSignatureError:
        logger.warning("Access token has expired")
        raise AuthenticationRequiredError("Token has expired")
    except (JWTError, ValueError) as e:
        logger.warning(f"Access token validation failed: {e}")
        raise AuthenticationRequiredError("Invalid token")

    if payload.type not in (None, "access") or not payload.sub.isdigit():
        logger.warning(f"Rejected token with sub={payload.sub!r} type={payload.type!r}")
        raise AuthenticationRequiredError("Invalid token")

    user = storage.get_user(int(payload.sub))
    if user is None:
        # Account deleted after the token was issued
        raise AuthenticationRequiredError("Invalid token")

    logger.debug(f"Authenticated user: {user.id} ({user.role.value})")
    return user


def get_current_user(
    storage: StorageDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
) -> AuthUser:
    """
    Load the user behind the Bearer token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies signature and expiry
    3. Loads the account from storage (so role changes apply immediately)

    Raises:
        AuthenticationRequiredError: 401 if the token is missing, invalid,
            expired or names a user that no longer exists
    """
    if credentials is None:
        raise AuthenticationRequiredError("Not authenticated")
    return _resolve_user(credentials.credentials, storage)


def require_roles(*roles: UserRole) -> Callable:
    """
    Build a dependency that admits only the given roles.

    Anonymous requests get 401, authenticated users with another role 403.

    Usage:
        user: AuthUser = Depends(require_roles(UserRole.SELLER, UserRole.ADMIN))
    """
    allowed = set(roles)

    def dependency(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if user.role not in allowed:
            logger.info(f"User {user.id} with role {user.role.value} denied")
            raise PermissionDeniedError()
        return user

    return dependency
