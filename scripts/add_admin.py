#!/usr/bin/env python3
# =============================================================================
# scripts/add_admin.py - Add Admin Account & Test Product
# =============================================================================
# Creates (if missing):
#   - the "admin" user with password "admin123"
#   - a seller profile for that admin ("Admin Test Shop")
#   - one active test product in the Electronics category
#
# Usage:
#   python scripts/add_admin.py
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
from core.models import (
    CategoryCreate,
    ProductCategoryCreate,
    ProductCreate,
    ProductStatus,
    Seller,
    SellerCreate,
    UserCreate,
    UserRole,
)
from lib.storage import Storage, create_storage
from lib.utils import generate_public_id

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("add_admin")


def add_admin(storage: Storage) -> int:
    existing = storage.get_user_by_username("admin")
    if existing is not None:
        logger.info("Admin user already exists, skipping creation.")
        return existing.id

    admin = storage.create_user(
        UserCreate(
            username="admin",
            name="Admin User",
            email="admin@example.com",
            password=hash_password("admin123"),
            role=UserRole.ADMIN,
        )
    )
    logger.info(f"Created admin user with ID: {admin.id}")
    return admin.id


def add_test_seller(storage: Storage, user_id: int) -> Seller:
    existing = storage.get_seller_by_user_id(user_id)
    if existing is not None:
        logger.info("Seller already exists for this user, skipping creation.")
        return existing

    seller = storage.create_seller(
        SellerCreate(
            user_id=user_id,
            seller_id=generate_public_id("SELLER"),
            shop_name="Admin Test Shop",
            rating=5.0,
            verified=True,
        )
    )
    logger.info(f"Created seller with ID: {seller.id}")
    return seller


def add_test_product(storage: Storage, seller_id: int) -> None:
    existing = storage.list_products(seller_id=seller_id)
    if existing:
        logger.info(f"Seller already has {len(existing)} products, skipping creation.")
        return

    product = storage.create_product(
        ProductCreate(
            product_id=generate_public_id("PROD"),
            seller_id=seller_id,
            name="Test Product",
            description="This is a test product",
            price=99.99,
            stock=100,
            image_url="https://picsum.photos/200",
            status=ProductStatus.ACTIVE,
        )
    )
    logger.info(f"Created product with ID: {product.id}")

    electronics = storage.get_category_by_name("Electronics")
    if electronics is None:
        electronics = storage.create_category(
            CategoryCreate(
                category_id=generate_public_id("CAT"),
                category_name="Electronics",
                description="Electronic devices and gadgets",
            )
        )
    storage.assign_product_to_category(
        ProductCategoryCreate(product_id=product.id, category_id=electronics.id)
    )
    logger.info(f"Assigned product to category: {electronics.category_name}")


def main() -> int:
    storage = create_storage(get_settings())
    try:
        admin_id = add_admin(storage)
        seller = add_test_seller(storage, admin_id)
        add_test_product(storage, seller.id)
    except Exception as e:
        logger.error(f"Error creating test data: {e}")
        return 1
    finally:
        storage.close()

    logger.info("All test data created successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
