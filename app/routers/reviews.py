# =============================================================================
# app/routers/reviews.py - Review Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from pydantic import BaseModel, Field

from app.auth import AuthUser, get_current_user, require_roles
from app.dependencies import StorageDep
from core.models import Review, UserRole
from core.services import ReviewService

router = APIRouter()


class ReviewCreateRequest(BaseModel):
    """Body of POST /api/reviews."""
    product_id: int | None = Field(default=None, examples=[1])
    rating: int = Field(..., ge=1, le=5, examples=[5])
    review_text: str | None = Field(default=None, examples=["Works great, battery lasts forever"])


@router.post("", response_model=Review, status_code=status.HTTP_201_CREATED)
def create_review(
    request: ReviewCreateRequest,
    storage: StorageDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Review a purchased product.

    Customers only, one review per product.
    """
    return ReviewService(storage).create_review(
        user,
        product_id=request.product_id,
        rating=request.rating,
        review_text=request.review_text,
    )


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: Annotated[int, Path(description="Review id")],
    storage: StorageDep,
    user: AuthUser = Depends(require_roles(UserRole.ADMIN)),
):
    """Delete a review (admin)."""
    ReviewService(storage).delete_review(review_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
