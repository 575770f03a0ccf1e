# =============================================================================
# lib/storage/select.py - Backend Selection
# =============================================================================
# Picks the storage backend at startup:
#
#   DB_TYPE=postgres|mysql|memory  -> that backend
#   DB_TYPE=auto (default)         -> Postgres if DATABASE_URL is set,
#                                     else MySQL if MYSQL_DATABASE is set,
#                                     else in-memory
#
# A backend that fails to come up falls back down the chain:
#   postgres -> memory
#   mysql    -> postgres (if configured) -> memory
#
# There are no retries and no reconnection: the choice is made once per
# process. get_storage() hands out the process-wide instance.
# =============================================================================

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lib.storage.base import Storage
from lib.storage.memory import MemoryStorage
from lib.storage.sql import MySqlStorage, PostgresStorage

if TYPE_CHECKING:
    from app.config import Settings

logger = logging.getLogger(__name__)

_storage: Storage | None = None


def resolve_database_type(settings: "Settings") -> str:
    """
    Decide which backend the settings ask for.

    Returns:
        One of "postgres", "mysql", "memory"
    """
    if settings.DB_TYPE != "auto":
        logger.info(f"Storage backend set explicitly: DB_TYPE={settings.DB_TYPE}")
        return settings.DB_TYPE
    if settings.postgres_configured:
        logger.info("DATABASE_URL is set, selecting postgres")
        return "postgres"
    if settings.mysql_configured:
        logger.info("MYSQL_DATABASE is set, selecting mysql")
        return "mysql"
    logger.info("No database configured, selecting in-memory storage")
    return "memory"


def _create_memory(settings: "Settings") -> Storage:
    storage = MemoryStorage(seed_default_categories=settings.SEED_DEFAULT_CATEGORIES)
    storage.initialize()
    return storage


def _create_postgres(settings: "Settings") -> Storage:
    """Postgres, or in-memory when it can't be reached."""
    if not settings.postgres_url:
        logger.warning("DB_TYPE=postgres but DATABASE_URL is not set, using in-memory storage")
        return _create_memory(settings)
    try:
        storage = PostgresStorage(
            settings.postgres_url,
            connect_timeout=settings.DB_CONNECT_TIMEOUT,
            seed_default_categories=settings.SEED_DEFAULT_CATEGORIES,
        )
        storage.initialize()
    except Exception as e:
        logger.error(f"Failed to initialize PostgreSQL storage: {e}")
        logger.warning("Falling back to in-memory storage")
        return _create_memory(settings)
    logger.info("Using PostgreSQL storage")
    return storage


def _create_mysql(settings: "Settings") -> Storage:
    """MySQL, or the next backend in the chain when it can't be reached."""
    try:
        storage = MySqlStorage(
            settings.mysql_url,
            connect_timeout=settings.DB_CONNECT_TIMEOUT,
            seed_default_categories=settings.SEED_DEFAULT_CATEGORIES,
        )
        if storage.check_availability():
            storage.initialize()
            logger.info("Using MySQL storage")
            return storage
        storage.close()
        logger.warning("MySQL is not available")
    except Exception as e:
        logger.error(f"Failed to initialize MySQL storage: {e}")

    if settings.postgres_configured:
        logger.warning("Falling back to PostgreSQL storage")
        return _create_postgres(settings)
    logger.warning("Falling back to in-memory storage")
    return _create_memory(settings)


def create_storage(settings: "Settings") -> Storage:
    """
    Build and initialize the storage backend the settings select.

    Args:
        settings: Application settings

    Returns:
        An initialized Storage; never raises for an unreachable database
    """
    db_type = resolve_database_type(settings)
    if db_type == "postgres":
        return _create_postgres(settings)
    if db_type == "mysql":
        return _create_mysql(settings)
    if db_type != "memory":
        logger.warning(f"Unknown DB_TYPE '{db_type}', using in-memory storage")
    return _create_memory(settings)


# =============================================================================
# Process-Wide Instance
# =============================================================================

def get_storage() -> Storage:
    """Return the active storage, creating it from app settings on first use."""
    global _storage
    if _storage is None:
        from app.config import get_settings

        _storage = create_storage(get_settings())
    return _storage


def set_storage(storage: Storage) -> None:
    """Replace the active storage (app startup, tests)."""
    global _storage
    _storage = storage


def reset_storage() -> None:
    """Close and forget the active storage."""
    global _storage
    if _storage is not None:
        _storage.close()
    _storage = None
