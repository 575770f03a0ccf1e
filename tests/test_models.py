# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the storefront models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Response shapes never leak password hashes
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from datetime import datetime

import pytest
from pydantic import ValidationError

from core.models import (
    CartItemCreate,
    OrderStatus,
    Product,
    ProductCreate,
    ProductStatus,
    ReviewCreate,
    SellerCreate,
    User,
    UserCreate,
    UserRole,
)


# =============================================================================
# Account Model Tests
# =============================================================================

class TestUserModels:
    """Tests for user and seller models."""

    def test_user_create_defaults_to_customer(self):
        """Test that the role defaults to customer."""
        user = UserCreate(username="jdoe", name="Jane", email="jane@example.com", password="hash")

        assert user.role == UserRole.CUSTOMER
        assert user.phone_number is None
        assert user.address is None

    def test_user_create_rejects_unknown_role(self):
        """Test that only customer/seller/admin are accepted."""
        with pytest.raises(ValidationError):
            UserCreate(
                username="jdoe",
                name="Jane",
                email="jane@example.com",
                password="hash",
                role="superuser",
            )

    def test_to_public_drops_password(self):
        """Test that the public shape has no password field."""
        user = User(
            id=1,
            username="jdoe",
            name="Jane",
            email="jane@example.com",
            password="$2b$12$secret",
            registration_date=datetime(2024, 1, 15, 10, 0),
            role=UserRole.SELLER,
        )

        public = user.to_public()

        assert public.id == 1
        assert public.role == UserRole.SELLER
        assert "password" not in public.model_dump()

    def test_seller_create_defaults(self):
        """Test seller rating and verification defaults."""
        seller = SellerCreate(user_id=1, seller_id="SELLER-1a2b3c4d", shop_name="Shop")

        assert seller.rating == 5.0
        assert seller.verified is False

    def test_seller_rating_bounds(self):
        """Test that ratings must stay within 0..5."""
        with pytest.raises(ValidationError):
            SellerCreate(user_id=1, seller_id="SELLER-1", shop_name="Shop", rating=5.5)


# =============================================================================
# Catalog Model Tests
# =============================================================================

class TestProductModels:
    """Tests for product models."""

    def test_valid_product_create(self):
        """Test creating a valid product."""
        product = ProductCreate(
            product_id="PROD-1a2b3c4d",
            seller_id=1,
            name="Wireless Mouse",
            description="2.4GHz",
            price=24.99,
            stock=120,
        )

        assert product.status == ProductStatus.ACTIVE
        assert product.image_url is None

    @pytest.mark.parametrize("price", [0, -1.5])
    def test_price_must_be_positive(self, price):
        """Test that zero and negative prices are rejected."""
        with pytest.raises(ValidationError):
            ProductCreate(
                product_id="PROD-1", seller_id=1, name="X", description="Y", price=price, stock=1
            )

    def test_stock_cannot_be_negative(self):
        """Test that negative stock is rejected."""
        with pytest.raises(ValidationError):
            ProductCreate(
                product_id="PROD-1", seller_id=1, name="X", description="Y", price=1.0, stock=-1
            )

    def test_product_accepts_status_strings(self):
        """Test that stored status strings parse into the enum."""
        product = Product(
            id=1,
            product_id="PROD-1",
            seller_id=1,
            name="X",
            description="Y",
            price=1.0,
            stock=0,
            added_date=datetime(2024, 1, 1),
            status="rejected",
        )

        assert product.status == ProductStatus.REJECTED


# =============================================================================
# Cart, Order & Review Model Tests
# =============================================================================

class TestCommerceModels:
    """Tests for cart, order and review models."""

    def test_cart_item_quantity_defaults_to_one(self):
        item = CartItemCreate(cart_id=1, product_id=2)
        assert item.quantity == 1

    def test_cart_item_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            CartItemCreate(cart_id=1, product_id=2, quantity=0)

    @pytest.mark.parametrize("rating", [0, 6])
    def test_review_rating_bounds(self, rating):
        """Test that ratings outside 1..5 are rejected."""
        with pytest.raises(ValidationError):
            ReviewCreate(review_id="REV-1", product_id=1, customer_id=1, rating=rating)

    def test_order_status_values(self):
        """Test the order lifecycle values."""
        assert {status.value for status in OrderStatus} == {
            "processing",
            "shipped",
            "delivered",
            "cancelled",
        }
