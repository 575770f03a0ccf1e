# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Gives every test a fresh storage, once in memory and once on a SQLite
#   file through SqlStorage
# - Provides an API client wired to that storage plus logged-in users of
#   each role
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("DB_TYPE", "memory")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-suite")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from app.auth.security import create_access_token, hash_password
from app.dependencies import get_storage
from app.main import app
from core.models import (
    ProductCreate,
    ProductStatus,
    SellerCreate,
    UserCreate,
    UserRole,
)
from lib.storage import MemoryStorage, SqlStorage
from lib.utils import generate_public_id


# =============================================================================
# Storage & Client
# =============================================================================

@pytest.fixture(params=["memory", "sqlite"])
def storage(request, tmp_path):
    """Fresh storage of each kind with the default categories."""
    if request.param == "memory":
        store = MemoryStorage()
    else:
        store = SqlStorage(f"sqlite:///{tmp_path / 'storefront.db'}")
    store.initialize()
    yield store
    store.close()


def memory_only(storage):
    """Skip tests that plant rows the SQL foreign keys would refuse."""
    if not isinstance(storage, MemoryStorage):
        pytest.skip("needs rows that foreign keys reject")


@pytest.fixture
def client(storage):
    """API client whose requests hit the `storage` fixture."""
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Users
# =============================================================================

def make_user(storage, username, role=UserRole.CUSTOMER, password="secret123"):
    """Create a user directly in storage and return (user, auth headers)."""
    user = storage.create_user(
        UserCreate(
            username=username,
            name=username.title(),
            email=f"{username}@example.com",
            password=hash_password(password),
            role=role,
        )
    )
    return user, {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def customer(storage):
    return make_user(storage, "customer1")


@pytest.fixture
def other_customer(storage):
    return make_user(storage, "customer2")


@pytest.fixture
def admin(storage):
    return make_user(storage, "admin", UserRole.ADMIN)


@pytest.fixture
def seller(storage):
    """A seller account with a seller profile: (user, headers, seller profile)."""
    user, headers = make_user(storage, "seller1", UserRole.SELLER)
    profile = storage.create_seller(
        SellerCreate(user_id=user.id, seller_id=generate_public_id("SELLER"), shop_name="Awesome Shop")
    )
    return user, headers, profile


@pytest.fixture
def other_seller(storage):
    user, headers = make_user(storage, "seller2", UserRole.SELLER)
    profile = storage.create_seller(
        SellerCreate(user_id=user.id, seller_id=generate_public_id("SELLER"), shop_name="Great Deals")
    )
    return user, headers, profile


# =============================================================================
# Catalog
# =============================================================================

def make_product(
    storage,
    seller_id,
    name="Wireless Mouse",
    price=25.0,
    stock=10,
    description=None,
    status=ProductStatus.ACTIVE,
):
    return storage.create_product(
        ProductCreate(
            product_id=generate_public_id("PROD"),
            seller_id=seller_id,
            name=name,
            description=description or f"{name} description",
            price=price,
            stock=stock,
            status=status,
        )
    )


@pytest.fixture
def product(storage, seller):
    """An active product owned by the `seller` fixture."""
    return make_product(storage, seller[2].id)
