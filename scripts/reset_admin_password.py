#!/usr/bin/env python3
# =============================================================================
# scripts/reset_admin_password.py - Reset Admin Password
# =============================================================================
# Sets the "admin" user's password back to "admin123", creating the admin
# account if it doesn't exist.
#
# Usage:
#   python scripts/reset_admin_password.py
# =============================================================================

import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.auth.security import hash_password
from app.config import get_settings
from core.models import UserCreate, UserRole
from lib.storage import Storage, create_storage

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("reset_admin_password")

DEFAULT_ADMIN_PASSWORD = "admin123"


def reset_admin_password(storage: Storage) -> None:
    hashed = hash_password(DEFAULT_ADMIN_PASSWORD)
    admin = storage.get_user_by_username("admin")

    if admin is not None:
        storage.update_user(admin.id, {"password": hashed})
        logger.info(f"Admin password has been reset to '{DEFAULT_ADMIN_PASSWORD}'")
        return

    storage.create_user(
        UserCreate(
            username="admin",
            name="Administrator",
            email="admin@example.com",
            password=hashed,
            role=UserRole.ADMIN,
        )
    )
    logger.info(f"Created new admin user with password '{DEFAULT_ADMIN_PASSWORD}'")


def main() -> int:
    storage = create_storage(get_settings())
    try:
        reset_admin_password(storage)
    finally:
        storage.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
