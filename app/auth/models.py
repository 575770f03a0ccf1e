# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication requests and responses.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.auth.security import BCRYPT_MAX_PASSWORD_BYTES
from core.models import User, UserPublic, UserRole

# The authenticated user is the full stored account (role included)
AuthUser = User


class RegisterRequest(BaseModel):
    """
    Body of POST /api/register.

    A seller that supplies `shop_name` gets a seller profile right away;
    otherwise one is created on their first product.
    """
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=BCRYPT_MAX_PASSWORD_BYTES)
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=100, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    role: UserRole = UserRole.CUSTOMER
    phone_number: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    shop_name: Optional[str] = Field(default=None, max_length=100)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes in UTF-8")
        return value

    model_config = {
        "json_schema_extra": {
            "example": {
                "username": "jdoe",
                "password": "secret123",
                "name": "Jane Doe",
                "email": "jane@example.com",
                "role": "customer",
            }
        }
    }


class LoginRequest(BaseModel):
    """Body of POST /api/login."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    """Returned by register and login: the user plus a bearer token."""
    user: UserPublic
    access_token: str
    token_type: str = "bearer"


class TokenPayload(BaseModel):
    """Decoded access token claims."""
    sub: str  # User ID
    username: Optional[str] = None
    role: Optional[str] = None
    type: Optional[str] = None
    exp: int
    iat: Optional[int] = None
