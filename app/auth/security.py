# =============================================================================
# app/auth/security.py - Password Hashing & Access Tokens
# =============================================================================
# - Passwords: bcrypt hashes, never stored or returned in plain text
# - Tokens: HS256 JWTs signed with SECRET_KEY carrying the user id and role
#
# Tokens are stateless; logging out means the client drops its token.
# =============================================================================

from datetime import timedelta
from typing import Any

import bcrypt
from jose import jwt

from app.config import settings
from core.models import User
from lib.utils import utc_now

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def hash_password(plain_password: str) -> str:
    """
    Hash a password with a fresh bcrypt salt.

    Raises:
        ValueError: If the password is longer than 72 bytes in UTF-8
    """
    encoded = plain_password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes in UTF-8")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """
    Check a password against a stored bcrypt hash.

    Returns False (instead of raising) for hashes bcrypt can't parse, such
    as plain-text passwords left over from older data, and for passwords
    too long to have been hashed.
    """
    if not plain_password or not password_hash:
        return False
    encoded = plain_password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(user: User, expires_minutes: int | None = None) -> str:
    """
    Issue a signed access token for a user.

    Args:
        user: The authenticated user
        expires_minutes: Lifetime override (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        Encoded JWT string
    """
    issued_at = utc_now()
    lifetime = timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "role": user.role.value,
        "type": "access",
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        jose.JWTError: If the token is malformed, tampered with or expired
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
