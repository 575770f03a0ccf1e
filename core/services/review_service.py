# =============================================================================
# core/services/review_service.py - Review Business Logic
# =============================================================================
# Only customers review, only products they bought, once per product.
# =============================================================================

import logging

from app.exceptions import (
    DuplicateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from core.models import Review, ReviewCreate, User, UserRole
from lib.storage import Storage
from lib.utils import generate_public_id

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for posting and moderating reviews."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def _has_purchased(self, user_id: int, product_id: int) -> bool:
        for order in self.storage.list_orders(customer_id=user_id):
            if any(item.product_id == product_id for item in self.storage.get_order_items(order.id)):
                return True
        return False

    def create_review(
        self,
        user: User,
        product_id: int | None,
        rating: int,
        review_text: str | None = None,
    ) -> Review:
        """
        Post a review.

        Raises:
            PermissionDeniedError: Not a customer, or never bought the product
            ValidationFailedError: No product_id
            NotFoundError: Unknown product
            DuplicateError: Already reviewed this product
        """
        if user.role != UserRole.CUSTOMER:
            raise PermissionDeniedError("Only customers can post reviews")
        if not product_id:
            raise ValidationFailedError("product_id is required")
        if self.storage.get_product(product_id) is None:
            raise NotFoundError("Product", product_id)
        if not self._has_purchased(user.id, product_id):
            raise PermissionDeniedError("You can only review products you have purchased")
        if any(review.product_id == product_id for review in self.storage.get_user_reviews(user.id)):
            raise DuplicateError("You have already reviewed this product")

        review = self.storage.create_review(
            ReviewCreate(
                review_id=generate_public_id("REV"),
                product_id=product_id,
                customer_id=user.id,
                rating=rating,
                review_text=review_text,
            )
        )
        logger.info(f"User {user.id} reviewed product {product_id} ({rating}/5)")
        return review

    def delete_review(self, review_id: int) -> None:
        if not self.storage.delete_review(review_id):
            raise NotFoundError("Review", review_id)
        logger.info(f"Deleted review {review_id}")
