# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends

from lib.storage import Storage
from lib.storage import get_storage as get_active_storage


def get_storage() -> Storage:
    """
    Get the active storage backend.

    Tests replace it through app.dependency_overrides[get_storage].
    """
    return get_active_storage()


# Type alias for dependency injection
StorageDep = Annotated[Storage, Depends(get_storage)]
