# =============================================================================
# app/routers/categories.py - Category Endpoints
# =============================================================================
# Reading categories is public; creating, updating and deleting is admin-only.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from pydantic import BaseModel, Field

from app.auth import AuthUser, require_roles
from app.dependencies import StorageDep
from core.models import Category, UserRole
from core.services import CategoryService

router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)


# =============================================================================
# Request Models
# =============================================================================

class CategoryCreateRequest(BaseModel):
    """Body of POST /api/categories."""
    category_name: str = Field(..., min_length=1, max_length=100, examples=["Garden"])
    description: str | None = Field(default=None, examples=["Tools, plants and outdoor furniture"])


class CategoryUpdateRequest(BaseModel):
    """Body of PUT /api/categories/{id}; omitted fields are left unchanged."""
    category_name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=list[Category])
def list_categories(storage: StorageDep):
    """List every category."""
    return CategoryService(storage).list_categories()


@router.get("/{category_id}", response_model=Category)
def get_category(
    category_id: Annotated[int, Path(description="Category id")],
    storage: StorageDep,
):
    """Get one category."""
    return CategoryService(storage).get_category(category_id)


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(
    request: CategoryCreateRequest,
    storage: StorageDep,
    user: AuthUser = Depends(admin_only),
):
    """Create a category (admin)."""
    return CategoryService(storage).create_category(request.category_name, request.description)


@router.put("/{category_id}", response_model=Category)
def update_category(
    category_id: Annotated[int, Path(description="Category id")],
    request: CategoryUpdateRequest,
    storage: StorageDep,
    user: AuthUser = Depends(admin_only),
):
    """Update a category (admin)."""
    return CategoryService(storage).update_category(
        category_id, request.model_dump(exclude_unset=True)
    )


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: Annotated[int, Path(description="Category id")],
    storage: StorageDep,
    user: AuthUser = Depends(admin_only),
):
    """Delete a category and its product links (admin)."""
    CategoryService(storage).delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
