# =============================================================================
# lib/storage/ - Storage Backends
# =============================================================================
# - base.py: the Storage contract and its errors
# - memory.py: in-process dict storage
# - tables.py: SQLAlchemy schema
# - sql.py: SQLAlchemy storage (PostgreSQL, MySQL, SQLite)
# - select.py: picks a backend from settings, with fallbacks
# =============================================================================

from .base import DEFAULT_CATEGORIES, Storage, StorageError, StorageIntegrityError
from .memory import MemoryStorage
from .select import (
    create_storage,
    get_storage,
    reset_storage,
    resolve_database_type,
    set_storage,
)
from .sql import MySqlStorage, PostgresStorage, SqlStorage

__all__ = [
    "DEFAULT_CATEGORIES",
    "Storage",
    "StorageError",
    "StorageIntegrityError",
    "MemoryStorage",
    "SqlStorage",
    "PostgresStorage",
    "MySqlStorage",
    "create_storage",
    "get_storage",
    "reset_storage",
    "resolve_database_type",
    "set_storage",
]
