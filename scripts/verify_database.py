#!/usr/bin/env python3
# =============================================================================
# scripts/verify_database.py - Inspect Catalog Data
# =============================================================================
# Prints products, product-category links, the products in category 1 and
# the active products, to check that seeding and category links worked.
#
# Usage:
#   python scripts/verify_database.py
# =============================================================================

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.config import get_settings
from lib.storage import Storage, create_storage


def check_database(storage: Storage) -> None:
    print(f"Checking {storage.name} storage...")

    products = storage.list_products()
    print(f"Found {len(products)} products in the database:")
    for product in products:
        print(f" - Product {product.id}: {product.name} ({product.status.value})")

    links = [
        (product.id, category.id)
        for product in products
        for category in storage.get_product_categories(product.id)
    ]
    print(f"\nFound {len(links)} product-category associations:")
    for product_id, category_id in links:
        print(f" - Product {product_id} is in category {category_id}")

    first_category = storage.get_category(1)
    label = first_category.category_name if first_category else "category 1"
    in_first = storage.get_category_products(1)
    print(f"\nProducts in {label} ({len(in_first)}):")
    for product in in_first:
        print(f" - {product.id}: {product.name}")

    active = storage.list_products(status="active")
    print(f"\nActive products ({len(active)}):")
    for product in active:
        print(f" - {product.id}: {product.name}")


def main() -> int:
    storage = create_storage(get_settings())
    try:
        check_database(storage)
    finally:
        storage.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
