# =============================================================================
# core/services/category_service.py - Category Business Logic
# =============================================================================

import logging
from typing import Any

from app.exceptions import NotFoundError
from core.models import Category, CategoryCreate
from lib.storage import Storage
from lib.utils import generate_public_id

logger = logging.getLogger(__name__)


class CategoryService:
    """Category CRUD; writes are admin-only at the route level."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def list_categories(self) -> list[Category]:
        return self.storage.list_categories()

    def get_category(self, category_id: int) -> Category:
        category = self.storage.get_category(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    def create_category(self, category_name: str, description: str | None = None) -> Category:
        category = self.storage.create_category(
            CategoryCreate(
                category_id=generate_public_id("CAT"),
                category_name=category_name,
                description=description,
            )
        )
        logger.info(f"Created category {category.id} ({category.category_name})")
        return category

    def update_category(self, category_id: int, changes: dict[str, Any]) -> Category:
        category = self.storage.update_category(category_id, changes)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    def delete_category(self, category_id: int) -> None:
        if not self.storage.delete_category(category_id):
            raise NotFoundError("Category", category_id)
        logger.info(f"Deleted category {category_id}")
