#!/usr/bin/env python3
# =============================================================================
# scripts/seed_data.py - Load Sample Data
# =============================================================================
# Creates sample accounts, seller profiles, categories and products in the
# configured storage backend. Rows that already exist are left alone, so the
# script can be run repeatedly.
#
# Accounts created (username / password):
#   admin / admin123, seller1 / seller123, seller2 / seller123,
#   customer1 / customer123
#
# Usage:
#   python scripts/seed_data.py
# =============================================================================

import logging
import os
import random
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
    SellerCreate,
    UserCreate,
    UserRole,
)
from lib.storage import Storage, create_storage
from lib.utils import generate_public_id

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("seed_data")


SAMPLE_USERS = [
    ("admin", "Admin User", "admin@example.com", "admin123", UserRole.ADMIN),
    ("seller1", "Seller One", "seller1@example.com", "seller123", UserRole.SELLER),
    ("seller2", "Seller Two", "seller2@example.com", "seller123", UserRole.SELLER),
    ("customer1", "Customer One", "customer1@example.com", "customer123", UserRole.CUSTOMER),
]

SAMPLE_SHOPS = {
    "seller1": "Awesome Shop",
    "seller2": "Great Deals",
}

SAMPLE_CATEGORIES = [
    ("Electronics", "Electronic devices and accessories"),
    ("Home & Kitchen", "Products for your home and kitchen"),
    ("Clothing", "Apparel and fashion accessories"),
    ("Books", "Books and publications"),
]

# (seller username, name, description, price range, stock range, image, category)
SAMPLE_PRODUCTS = [
    ("seller1", "Smart Watch", "Track your fitness and stay connected with this smartwatch",
     (99, 199), (5, 20), "https://example.com/smartwatch.jpg", "Electronics"),
    ("seller1", "Wireless Earbuds", "High-quality sound with noise cancellation",
     (49, 129), (10, 30), "https://example.com/earbuds.jpg", "Electronics"),
    ("seller1", "Coffee Maker", "Programmable coffee maker with timer",
     (39, 89), (3, 15), "https://example.com/coffeemaker.jpg", "Home & Kitchen"),
    ("seller2", "Laptop Backpack", "Water-resistant backpack with laptop compartment",
     (29, 59), (15, 40), "https://example.com/backpack.jpg", "Clothing"),
    ("seller2", "Designer T-Shirt", "Premium cotton t-shirt with unique design",
     (19, 39), (20, 50), "https://example.com/tshirt.jpg", "Clothing"),
    ("seller2", "Bestselling Novel", "Award-winning fiction bestseller",
     (9, 19), (25, 60), "https://example.com/book.jpg", "Books"),
]


def seed_users(storage: Storage) -> dict[str, int]:
    """Create sample users; returns username -> user id."""
    user_ids = {}
    for username, name, email, password, role in SAMPLE_USERS:
        user = storage.get_user_by_username(username)
        if user is None:
            user = storage.create_user(
                UserCreate(
                    username=username,
                    name=name,
                    email=email,
                    password=hash_password(password),
                    role=role,
                )
            )
            logger.info(f"Created user: {username} ({role.value})")
        else:
            logger.info(f"User {username} already exists, skipping")
        user_ids[username] = user.id
    return user_ids


def seed_sellers(storage: Storage, user_ids: dict[str, int]) -> dict[str, int]:
    """Create seller profiles; returns username -> seller id."""
    seller_ids = {}
    for username, shop_name in SAMPLE_SHOPS.items():
        seller = storage.get_seller_by_user_id(user_ids[username])
        if seller is None:
            seller = storage.create_seller(
                SellerCreate(
                    user_id=user_ids[username],
                    seller_id=generate_public_id("SELLER"),
                    shop_name=shop_name,
                    rating=4.5,
                    verified=True,
                )
            )
            logger.info(f"Created seller: {shop_name} (ID: {seller.id})")
        seller_ids[username] = seller.id
    return seller_ids


def seed_categories(storage: Storage) -> dict[str, int]:
    """Create sample categories; returns name -> category id."""
    category_ids = {}
    for name, description in SAMPLE_CATEGORIES:
        category = storage.get_category_by_name(name)
        if category is None:
            category = storage.create_category(
                CategoryCreate(
                    category_id=generate_public_id("CAT"),
                    category_name=name,
                    description=description,
                )
            )
            logger.info(f"Created category: {name}")
        category_ids[name] = category.id
    return category_ids


def seed_products(storage: Storage, seller_ids: dict[str, int], category_ids: dict[str, int]) -> None:
    for seller_username, name, description, prices, stocks, image_url, category in SAMPLE_PRODUCTS:
        seller_id = seller_ids[seller_username]
        if any(product.name == name for product in storage.list_products(seller_id=seller_id)):
            logger.info(f"Product {name} already exists, skipping")
            continue

        product = storage.create_product(
            ProductCreate(
                product_id=generate_public_id("PROD"),
                seller_id=seller_id,
                name=name,
                description=description,
                price=round(random.uniform(*prices), 2),
                stock=random.randint(*stocks),
                image_url=image_url,
                status=ProductStatus.ACTIVE,
            )
        )
        storage.assign_product_to_category(
            ProductCategoryCreate(product_id=product.id, category_id=category_ids[category])
        )
        logger.info(f"Created product: {name} in {category}")


def main() -> int:
    settings = get_settings()
    storage = create_storage(settings)
    logger.info(f"Seeding {storage.name} storage...")
    if storage.name == "memory":
        logger.warning("In-memory storage is discarded when this script exits")

    try:
        user_ids = seed_users(storage)
        seller_ids = seed_sellers(storage, user_ids)
        category_ids = seed_categories(storage)
        seed_products(storage, seller_ids, category_ids)
    finally:
        storage.close()

    logger.info("Database seeding completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
