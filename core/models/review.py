# =============================================================================
# core/models/review.py - Review Schemas
# =============================================================================
# A review is a 1-5 star rating (plus optional text) left by a customer on a
# product they have purchased. One review per customer per product.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary


class ReviewCreate(BaseModel):
    """Schema for inserting a review."""

    review_id: str = Field(..., min_length=1, max_length=50)
    product_id: int
    customer_id: int
    rating: int = Field(..., ge=1, le=5)
    review_text: str | None = None


class Review(BaseModel):
    """A stored review."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    review_id: str
    product_id: int
    customer_id: int
    rating: int
    review_text: str | None = None
    review_date: datetime


class ReviewWithCustomer(Review):
    """Review plus author, as returned by GET /api/products/{id}/reviews."""

    customer: UserSummary | None = None
