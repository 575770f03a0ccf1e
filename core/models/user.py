# =============================================================================
# core/models/user.py - User & Seller Schemas
# =============================================================================
# These models define the storage contract for accounts:
# - UserCreate / User: a storefront account (customer, seller or admin)
# - UserPublic: a user as returned to clients (never includes the password)
# - SellerCreate / Seller: the shop profile attached to a seller account
#
# Every user has exactly one role. Sellers additionally own one Seller row,
# which products reference through seller_id.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """
    Authorization tier of an account.

    - customer: browses, buys and reviews
    - seller: lists products (pending admin approval) and ships orders
    - admin: manages everything
    """
    CUSTOMER = "customer"
    SELLER = "seller"
    ADMIN = "admin"


class UserCreate(BaseModel):
    """
    Schema for inserting a user.

    `password` is already hashed when it reaches storage.
    """

    username: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=1, description="bcrypt hash of the password")
    phone_number: str | None = Field(default=None, max_length=20)
    address: str | None = None
    role: UserRole = Field(default=UserRole.CUSTOMER)


class User(BaseModel):
    """A stored user row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    email: str
    password: str
    phone_number: str | None = None
    address: str | None = None
    registration_date: datetime
    role: UserRole = UserRole.CUSTOMER
    last_updated: datetime | None = None

    def to_public(self) -> "UserPublic":
        """Drop the password hash before the user leaves the API."""
        return UserPublic.model_validate(self.model_dump(exclude={"password"}))


class UserPublic(BaseModel):
    """
    Schema for returning a user to clients.

    Returned by:
    - POST /api/register, POST /api/login
    - GET /api/user
    - GET /api/users (admin)
    """

    id: int
    username: str
    name: str
    email: str
    phone_number: str | None = None
    address: str | None = None
    registration_date: datetime
    role: UserRole
    last_updated: datetime | None = None


class UserSummary(BaseModel):
    """Minimal author info embedded in a review."""

    id: int
    username: str
    name: str


class SellerUser(BaseModel):
    """Account info embedded in a seller listing."""

    id: int
    username: str
    name: str
    email: str
    role: UserRole


# =============================================================================
# Seller
# =============================================================================

class SellerCreate(BaseModel):
    """Schema for inserting a seller profile."""

    user_id: int
    seller_id: str = Field(..., min_length=1, max_length=50)
    shop_name: str = Field(..., min_length=1, max_length=100)
    rating: float = Field(default=5.0, ge=0.0, le=5.0)
    verified: bool = False


class Seller(BaseModel):
    """A stored seller profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    seller_id: str
    shop_name: str
    joined_date: datetime
    rating: float | None = 5.0
    verified: bool | None = False


class SellerWithUser(Seller):
    """Seller profile plus the owning account, as listed by GET /api/sellers."""

    user: SellerUser | None = None
