# =============================================================================
# tests/test_reviews.py - Review Endpoint Tests
# =============================================================================
# Covers POST /api/reviews and DELETE /api/reviews/{id}.
#
# Run with: pytest tests/test_reviews.py -v
# =============================================================================

import pytest

from core.models import OrderCreate, OrderItemCreate, ReviewCreate


@pytest.fixture
def purchase(storage, customer, product):
    """Record that `customer` bought the `product` fixture."""
    order = storage.create_order(
        OrderCreate(order_id="ORD-test", customer_id=customer[0].id, total_price=product.price)
    )
    storage.add_order_item(
        OrderItemCreate(order_id=order.id, product_id=product.id, quantity=1, price=product.price)
    )
    return order


class TestCreateReview:
    """Tests for POST /api/reviews."""

    def test_buyer_reviews_product(self, client, storage, customer, product, purchase):
        response = client.post(
            "/api/reviews",
            json={"product_id": product.id, "rating": 5, "review_text": "Great"},
            headers=customer[1],
        )

        assert response.status_code == 201
        data = response.json()
        assert data["review_id"].startswith("REV-")
        assert data["customer_id"] == customer[0].id
        assert data["rating"] == 5
        assert [r.id for r in storage.get_product_reviews(product.id)] == [data["id"]]

    def test_only_once(self, client, customer, product, purchase):
        body = {"product_id": product.id, "rating": 4}
        client.post("/api/reviews", json=body, headers=customer[1])

        response = client.post("/api/reviews", json=body, headers=customer[1])

        assert response.status_code == 400
        assert response.json()["detail"] == "You have already reviewed this product"

    def test_must_have_purchased(self, client, customer, product):
        response = client.post(
            "/api/reviews",
            json={"product_id": product.id, "rating": 4},
            headers=customer[1],
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "You can only review products you have purchased"

    def test_only_customers(self, client, seller, product):
        response = client.post(
            "/api/reviews",
            json={"product_id": product.id, "rating": 4},
            headers=seller[1],
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Only customers can post reviews"

    def test_product_required(self, client, customer):
        response = client.post("/api/reviews", json={"rating": 4}, headers=customer[1])

        assert response.status_code == 400
        assert response.json()["detail"] == "product_id is required"

    def test_unknown_product(self, client, customer):
        response = client.post("/api/reviews", json={"product_id": 999, "rating": 4}, headers=customer[1])
        assert response.status_code == 404

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, client, customer, product, purchase, rating):
        response = client.post(
            "/api/reviews",
            json={"product_id": product.id, "rating": rating},
            headers=customer[1],
        )
        assert response.status_code == 400


class TestDeleteReview:
    """Tests for DELETE /api/reviews/{id}."""

    def test_admin_deletes(self, client, storage, admin, customer, product):
        review = storage.create_review(
            ReviewCreate(review_id="REV-1", product_id=product.id, customer_id=customer[0].id, rating=1)
        )

        response = client.delete(f"/api/reviews/{review.id}", headers=admin[1])

        assert response.status_code == 204
        assert storage.get_review(review.id) is None

    def test_author_cannot_delete(self, client, storage, customer, product):
        review = storage.create_review(
            ReviewCreate(review_id="REV-1", product_id=product.id, customer_id=customer[0].id, rating=1)
        )

        response = client.delete(f"/api/reviews/{review.id}", headers=customer[1])

        assert response.status_code == 403

    def test_missing_review(self, client, admin):
        assert client.delete("/api/reviews/999", headers=admin[1]).status_code == 404
