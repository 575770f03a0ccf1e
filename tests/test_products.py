# =============================================================================
# tests/test_products.py - Catalog Endpoint Tests
# =============================================================================
# Covers /api/products (browsing, seller/admin management, category links,
# reviews listing) and /api/categories.
#
# Run with: pytest tests/test_products.py -v
# =============================================================================

from core.models import (
    OrderCreate,
    OrderItemCreate,
    ProductCategoryCreate,
    ProductStatus,
    ReviewCreate,
    UserRole,
)
from lib.storage import DEFAULT_CATEGORIES
from tests.conftest import make_product, make_user


def product_payload(**overrides):
    payload = {
        "name": "USB-C Hub",
        "description": "7 ports",
        "price": 39.5,
        "stock": 15,
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Browsing
# =============================================================================

class TestBrowseProducts:
    """Tests for the public product endpoints."""

    def test_list_includes_categories(self, client, storage, product):
        books = storage.get_category_by_name("Books")
        storage.assign_product_to_category(ProductCategoryCreate(product_id=product.id, category_id=books.id))

        response = client.get("/api/products")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["name"] == "Wireless Mouse"
        assert [c["category_name"] for c in data[0]["categories"]] == ["Books"]

    def test_filters(self, client, storage, seller, other_seller):
        mine = make_product(storage, seller[2].id, name="Mouse")
        make_product(storage, seller[2].id, name="Draft", status=ProductStatus.PENDING)
        make_product(storage, other_seller[2].id, name="Shirt")

        by_seller = client.get("/api/products", params={"sellerId": seller[2].id}).json()
        pending = client.get("/api/products", params={"status": "pending"}).json()

        assert [p["name"] for p in by_seller] == ["Mouse", "Draft"]
        assert [p["name"] for p in pending] == ["Draft"]
        assert mine.id in [p["id"] for p in by_seller]

    def test_search_overrides_filters(self, client, storage, seller, other_seller):
        make_product(storage, seller[2].id, name="Gaming Mouse")
        make_product(storage, other_seller[2].id, name="Mouse Pad")

        response = client.get("/api/products", params={"search": "MOUSE", "sellerId": seller[2].id})

        assert sorted(p["name"] for p in response.json()) == ["Gaming Mouse", "Mouse Pad"]

    def test_invalid_status_filter(self, client):
        response = client.get("/api/products", params={"status": "unknown"})
        assert response.status_code == 400

    def test_get_product_detail(self, client, storage, product, customer):
        storage.create_review(
            ReviewCreate(review_id="REV-1", product_id=product.id, customer_id=customer[0].id, rating=5)
        )

        response = client.get(f"/api/products/{product.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["product_id"] == product.product_id
        assert data["categories"] == []
        assert [r["rating"] for r in data["reviews"]] == [5]

    def test_get_missing_product(self, client):
        response = client.get("/api/products/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Product not found"

    def test_reviews_embed_author(self, client, storage, product, customer):
        storage.create_review(
            ReviewCreate(
                review_id="REV-1",
                product_id=product.id,
                customer_id=customer[0].id,
                rating=4,
                review_text="Solid",
            )
        )

        response = client.get(f"/api/products/{product.id}/reviews")

        assert response.status_code == 200
        review = response.json()[0]
        assert review["review_text"] == "Solid"
        assert review["customer"]["username"] == "customer1"
        assert "password" not in review["customer"]


# =============================================================================
# Management
# =============================================================================

class TestCreateProduct:
    """Tests for POST /api/products."""

    def test_seller_product_starts_pending(self, client, seller):
        _, headers, profile = seller

        response = client.post("/api/products", json=product_payload(categories=[1, 2, 999]), headers=headers)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["seller_id"] == profile.id
        assert data["product_id"].startswith("PROD-")
        assert [c["id"] for c in data["categories"]] == [1, 2]

    def test_seller_profile_created_on_demand(self, client, storage):
        user, headers = make_user(storage, "newseller", UserRole.SELLER)

        response = client.post("/api/products", json=product_payload(), headers=headers)

        assert response.status_code == 201
        profile = storage.get_seller_by_user_id(user.id)
        assert profile.shop_name == "Newseller's Store"
        assert profile.verified is True
        assert response.json()["seller_id"] == profile.id

    def test_admin_product_is_active(self, client, admin, seller):
        response = client.post(
            "/api/products",
            json=product_payload(seller_id=seller[2].id),
            headers=admin[1],
        )

        assert response.status_code == 201
        assert response.json()["status"] == "active"

    def test_admin_must_name_seller(self, client, admin):
        response = client.post("/api/products", json=product_payload(), headers=admin[1])
        assert response.status_code == 400

    def test_admin_unknown_seller(self, client, admin):
        response = client.post("/api/products", json=product_payload(seller_id=999), headers=admin[1])
        assert response.status_code == 404

    def test_customer_cannot_create(self, client, customer):
        response = client.post("/api/products", json=product_payload(), headers=customer[1])
        assert response.status_code == 403

    def test_anonymous_cannot_create(self, client):
        response = client.post("/api/products", json=product_payload())
        assert response.status_code == 401

    def test_price_must_be_positive(self, client, seller):
        response = client.post("/api/products", json=product_payload(price=0), headers=seller[1])
        assert response.status_code == 400


class TestUpdateProduct:
    """Tests for PUT /api/products/{id}."""

    def test_owner_updates_fields(self, client, seller, product):
        response = client.put(
            f"/api/products/{product.id}",
            json={"price": 19.99, "stock": 3},
            headers=seller[1],
        )

        assert response.status_code == 200
        data = response.json()
        assert data["price"] == 19.99
        assert data["stock"] == 3
        assert data["name"] == product.name

    def test_seller_cannot_change_status(self, client, seller, product):
        response = client.put(
            f"/api/products/{product.id}",
            json={"status": "delisted", "stock": 4},
            headers=seller[1],
        )

        assert response.status_code == 200
        assert response.json()["status"] == "active"
        assert response.json()["stock"] == 4

    def test_admin_approves(self, client, storage, admin, seller):
        pending = make_product(storage, seller[2].id, status=ProductStatus.PENDING)

        response = client.put(f"/api/products/{pending.id}", json={"status": "active"}, headers=admin[1])

        assert response.status_code == 200
        assert storage.get_product(pending.id).status == ProductStatus.ACTIVE

    def test_categories_replace_links(self, client, storage, seller, product):
        storage.assign_product_to_category(ProductCategoryCreate(product_id=product.id, category_id=1))

        response = client.put(
            f"/api/products/{product.id}",
            json={"categories": [2, 3]},
            headers=seller[1],
        )

        assert [c["id"] for c in response.json()["categories"]] == [2, 3]

    def test_other_seller_denied(self, client, other_seller, product):
        response = client.put(f"/api/products/{product.id}", json={"stock": 1}, headers=other_seller[1])

        assert response.status_code == 403
        assert response.json()["detail"] == "You don't have permission to update this product"

    def test_missing_product(self, client, seller):
        response = client.put("/api/products/999", json={"stock": 1}, headers=seller[1])
        assert response.status_code == 404


class TestDeleteProduct:
    """Tests for DELETE /api/products/{id}."""

    def test_owner_deletes(self, client, storage, seller, product):
        response = client.delete(f"/api/products/{product.id}", headers=seller[1])

        assert response.status_code == 204
        assert storage.get_product(product.id) is None

    def test_other_seller_denied(self, client, other_seller, product):
        response = client.delete(f"/api/products/{product.id}", headers=other_seller[1])

        assert response.status_code == 403
        assert response.json()["detail"] == "You don't have permission to delete this product"

    def test_ordered_product_conflicts(self, client, storage, admin, customer, product):
        order = storage.create_order(OrderCreate(order_id="ORD-1", customer_id=customer[0].id, total_price=25.0))
        storage.add_order_item(OrderItemCreate(order_id=order.id, product_id=product.id, quantity=1, price=25.0))

        response = client.delete(f"/api/products/{product.id}", headers=admin[1])

        assert response.status_code == 409
        assert storage.get_product(product.id) is not None


class TestProductCategories:
    """Tests for POST /api/products/{id}/categories."""

    def test_link_category(self, client, storage, seller, product):
        response = client.post(
            f"/api/products/{product.id}/categories",
            json={"categoryId": 3},
            headers=seller[1],
        )

        assert response.status_code == 201
        assert response.json()["category_id"] == 3
        assert [c.id for c in storage.get_product_categories(product.id)] == [3]

    def test_category_required(self, client, seller, product):
        response = client.post(f"/api/products/{product.id}/categories", json={}, headers=seller[1])

        assert response.status_code == 400
        assert response.json()["detail"] == "categoryId is required"

    def test_unknown_category(self, client, seller, product):
        response = client.post(
            f"/api/products/{product.id}/categories",
            json={"categoryId": 999},
            headers=seller[1],
        )
        assert response.status_code == 404


# =============================================================================
# Categories
# =============================================================================

class TestCategories:
    """Tests for /api/categories."""

    def test_list_default_categories(self, client):
        response = client.get("/api/categories")

        assert response.status_code == 200
        assert [c["category_name"] for c in response.json()] == list(DEFAULT_CATEGORIES)

    def test_admin_creates_category(self, client, admin):
        response = client.post(
            "/api/categories",
            json={"category_name": "Garden", "description": "Outdoors"},
            headers=admin[1],
        )

        assert response.status_code == 201
        data = response.json()
        assert data["category_name"] == "Garden"
        assert data["category_id"].startswith("CAT-")

    def test_seller_cannot_create_category(self, client, seller):
        response = client.post("/api/categories", json={"category_name": "Garden"}, headers=seller[1])
        assert response.status_code == 403

    def test_admin_updates_and_deletes(self, client, storage, admin, product):
        storage.assign_product_to_category(ProductCategoryCreate(product_id=product.id, category_id=1))

        updated = client.put("/api/categories/1", json={"description": "Gadgets"}, headers=admin[1])
        deleted = client.delete("/api/categories/1", headers=admin[1])

        assert updated.json()["description"] == "Gadgets"
        assert deleted.status_code == 204
        assert client.get("/api/categories/1").status_code == 404
        assert storage.get_product_categories(product.id) == []
