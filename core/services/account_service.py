# =============================================================================
# core/services/account_service.py - Users & Seller Profiles
# =============================================================================
# Handles registration, login checks, user administration and seller
# profiles. Separates HTTP concerns from storage/business logic.
# =============================================================================

import logging

from app.auth.security import hash_password, verify_password
from app.exceptions import (
    ConflictError,
    DuplicateError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
)
from core.models import (
    Seller,
    SellerCreate,
    SellerUser,
    SellerWithUser,
    User,
    UserCreate,
    UserPublic,
    UserRole,
)
from lib.storage import Storage
from lib.utils import generate_public_id

logger = logging.getLogger(__name__)


class AccountService:
    """
    Service for account operations.

    Provides a clean interface between API routes and storage.
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def register(
        self,
        username: str,
        password: str,
        name: str,
        email: str,
        role: UserRole = UserRole.CUSTOMER,
        phone_number: str | None = None,
        address: str | None = None,
        shop_name: str | None = None,
    ) -> User:
        """
        Create an account with a hashed password.

        Args:
            username: Unique login name (checked case-insensitively)
            password: Plain-text password, hashed before storage
            name: Display name
            email: Unique email (checked case-insensitively)
            role: customer, seller or admin
            phone_number: Optional phone
            address: Optional postal address
            shop_name: For sellers, creates the seller profile immediately

        Returns:
            The stored user

        Raises:
            DuplicateError: If the username or email is taken
        """
        if self.storage.get_user_by_username(username):
            raise DuplicateError("Username already exists")
        if self.storage.get_user_by_email(email):
            raise DuplicateError("Email already exists")

        user = self.storage.create_user(
            UserCreate(
                username=username,
                name=name,
                email=email,
                password=hash_password(password),
                phone_number=phone_number,
                address=address,
                role=role,
            )
        )
        logger.info(f"Registered user {user.id} ({user.username}) as {user.role.value}")

        if user.role == UserRole.SELLER and shop_name:
            self.storage.create_seller(
                SellerCreate(
                    user_id=user.id,
                    seller_id=generate_public_id("SELLER"),
                    shop_name=shop_name,
                )
            )
            logger.info(f"Created seller profile '{shop_name}' for user {user.id}")

        return user

    def authenticate(self, username: str, password: str) -> User:
        """
        Check a username/password pair.

        Raises:
            InvalidCredentialsError: If the user is unknown or the password is wrong
        """
        user = self.storage.get_user_by_username(username)
        if user is None or not verify_password(password, user.password):
            logger.info(f"Failed login for username '{username}'")
            raise InvalidCredentialsError()
        return user

    # -------------------------------------------------------------------------
    # User Administration
    # -------------------------------------------------------------------------

    def list_users(self) -> list[UserPublic]:
        return [user.to_public() for user in self.storage.list_users()]

    def delete_user(self, user_id: int) -> None:
        """
        Delete an account together with its cart and seller profile.

        Raises:
            NotFoundError: If the user doesn't exist
            ConflictError: If the user has order or review history
        """
        if self.storage.get_user(user_id) is None:
            raise NotFoundError("User", user_id)
        if self.storage.list_orders(customer_id=user_id) or self.storage.get_user_reviews(user_id):
            raise ConflictError(
                "User has orders or reviews and cannot be deleted",
                suggestion="Order and review history keep their author",
            )
        self.storage.delete_user(user_id)
        logger.info(f"Deleted user {user_id}")

    # -------------------------------------------------------------------------
    # Seller Profiles
    # -------------------------------------------------------------------------

    def ensure_seller_profile(self, user: User) -> Seller:
        """Return the user's seller profile, creating a default one if missing."""
        seller = self.storage.get_seller_by_user_id(user.id)
        if seller is not None:
            return seller

        seller = self.storage.create_seller(
            SellerCreate(
                user_id=user.id,
                seller_id=generate_public_id("SELLER"),
                shop_name=f"{user.name or user.username}'s Store",
                rating=5.0,
                verified=True,
            )
        )
        logger.info(f"Created seller profile for user: {user.id}")
        return seller

    def _with_user(self, seller: Seller) -> SellerWithUser:
        owner = self.storage.get_user(seller.user_id)
        return SellerWithUser(
            **seller.model_dump(),
            user=SellerUser.model_validate(owner.model_dump()) if owner else None,
        )

    def list_sellers(self, user: User, user_id: int | None = None) -> list[SellerWithUser]:
        """
        Seller profiles visible to `user`.

        - sellers see only their own profile
        - `user_id` narrows the result to that user's profile
        - admins without `user_id` see every profile

        Raises:
            PermissionDeniedError: Seller asking for someone else, or a
                customer listing all sellers
            NotFoundError: The requested profile doesn't exist
        """
        if user.role == UserRole.SELLER and user_id is not None and user_id != user.id:
            raise PermissionDeniedError("You can only view your own seller profile")

        if user.role == UserRole.SELLER and user_id is None:
            user_id = user.id

        if user_id is not None:
            seller = self.storage.get_seller_by_user_id(user_id)
            if seller is None:
                raise NotFoundError("Seller profile", user_id)
            return [self._with_user(seller)]

        if user.role == UserRole.ADMIN:
            return [self._with_user(seller) for seller in self.storage.list_sellers()]

        raise PermissionDeniedError("Unauthorized")

    def delete_seller(self, seller_id: int) -> None:
        """
        Delete a seller profile.

        Raises:
            NotFoundError: If the profile doesn't exist
            ConflictError: If the seller still lists products
        """
        if self.storage.get_seller(seller_id) is None:
            raise NotFoundError("Seller", seller_id)
        if self.storage.list_products(seller_id=seller_id):
            raise ConflictError(
                "Seller still has products",
                suggestion="Delete or delist the seller's products first",
            )
        self.storage.delete_seller(seller_id)
        logger.info(f"Deleted seller {seller_id}")
