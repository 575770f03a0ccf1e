# =============================================================================
# tests/test_cart.py - Cart Endpoint Tests
# =============================================================================
# Covers /api/cart and /api/cart/items.
#
# Run with: pytest tests/test_cart.py -v
# =============================================================================

from core.models import CartItemCreate
from tests.conftest import make_product, memory_only


class TestGetCart:
    """Tests for GET /api/cart."""

    def test_cart_created_on_first_access(self, client, storage, customer):
        user, headers = customer

        response = client.get("/api/cart", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == user.id
        assert data["cart_id"].startswith("CART-")
        assert data["items"] == []
        assert storage.get_cart_by_user_id(user.id).id == data["id"]

    def test_same_cart_every_time(self, client, customer):
        first = client.get("/api/cart", headers=customer[1]).json()
        second = client.get("/api/cart", headers=customer[1]).json()

        assert first["id"] == second["id"]

    def test_requires_login(self, client):
        assert client.get("/api/cart").status_code == 401


class TestCartItems:
    """Tests for adding, changing and removing cart lines."""

    def test_add_item_with_product(self, client, customer, product):
        response = client.post(
            "/api/cart/items",
            json={"product_id": product.id, "quantity": 2},
            headers=customer[1],
        )

        assert response.status_code == 201
        data = response.json()
        assert data["quantity"] == 2
        assert data["product"]["name"] == "Wireless Mouse"

    def test_adding_twice_merges(self, client, customer, product):
        client.post("/api/cart/items", json={"product_id": product.id, "quantity": 2}, headers=customer[1])
        client.post("/api/cart/items", json={"product_id": product.id}, headers=customer[1])

        items = client.get("/api/cart", headers=customer[1]).json()["items"]

        assert len(items) == 1
        assert items[0]["quantity"] == 3

    def test_add_more_than_stock(self, client, customer, product):
        response = client.post(
            "/api/cart/items",
            json={"product_id": product.id, "quantity": 11},
            headers=customer[1],
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INSUFFICIENT_STOCK"

    def test_add_unknown_product(self, client, customer):
        response = client.post("/api/cart/items", json={"product_id": 999}, headers=customer[1])
        assert response.status_code == 404

    def test_quantity_must_be_positive(self, client, customer, product):
        response = client.post(
            "/api/cart/items",
            json={"product_id": product.id, "quantity": 0},
            headers=customer[1],
        )
        assert response.status_code == 400

    def test_update_quantity(self, client, customer, product):
        item = client.post("/api/cart/items", json={"product_id": product.id}, headers=customer[1]).json()

        response = client.put(f"/api/cart/items/{item['id']}", json={"quantity": 5}, headers=customer[1])

        assert response.status_code == 200
        assert response.json()["quantity"] == 5

    def test_update_beyond_stock(self, client, customer, product):
        item = client.post("/api/cart/items", json={"product_id": product.id}, headers=customer[1]).json()

        response = client.put(f"/api/cart/items/{item['id']}", json={"quantity": 50}, headers=customer[1])

        assert response.status_code == 400

    def test_remove_item(self, client, storage, customer, product):
        item = client.post("/api/cart/items", json={"product_id": product.id}, headers=customer[1]).json()

        response = client.delete(f"/api/cart/items/{item['id']}", headers=customer[1])

        assert response.status_code == 204
        assert storage.get_cart_item(item["id"]) is None

    def test_without_cart(self, client, customer):
        response = client.put("/api/cart/items/1", json={"quantity": 1}, headers=customer[1])

        assert response.status_code == 404
        assert response.json()["detail"] == "Cart not found"

    def test_cannot_touch_another_users_item(self, client, storage, customer, other_customer, seller):
        product = make_product(storage, seller[2].id)
        theirs = client.post("/api/cart/items", json={"product_id": product.id}, headers=other_customer[1]).json()
        client.get("/api/cart", headers=customer[1])

        update = client.put(f"/api/cart/items/{theirs['id']}", json={"quantity": 2}, headers=customer[1])
        delete = client.delete(f"/api/cart/items/{theirs['id']}", headers=customer[1])

        assert update.status_code == 404
        assert delete.status_code == 404
        assert storage.get_cart_item(theirs["id"]).quantity == 1

    def test_items_of_deleted_products_show_without_product(self, client, storage, customer, seller):
        memory_only(storage)
        product = make_product(storage, seller[2].id)
        cart = client.get("/api/cart", headers=customer[1]).json()
        storage.add_cart_item(CartItemCreate(cart_id=cart["id"], product_id=product.id))
        storage.products.remove(product.id)

        items = client.get("/api/cart", headers=customer[1]).json()["items"]

        assert items[0]["product"] is None
