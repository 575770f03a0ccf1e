# =============================================================================
# tests/test_orders.py - Checkout, Order & Shipment Endpoint Tests
# =============================================================================
# Covers POST/GET /api/orders, GET/PUT /api/orders/{id} and
# PUT /api/shipments/{id}.
#
# Run with: pytest tests/test_orders.py -v
# =============================================================================

from datetime import timedelta

import pytest

from app.config import settings
from core.models import CartCreate, CartItemCreate, OrderStatus, ShipmentStatus
from lib.utils import utc_now
from tests.conftest import make_product, memory_only


def fill_cart(storage, user, *lines):
    """Put (product, quantity) lines into the user's cart."""
    cart = storage.get_cart_by_user_id(user.id) or storage.create_cart(
        CartCreate(cart_id=f"CART-{user.id}", user_id=user.id)
    )
    for product, quantity in lines:
        storage.add_cart_item(CartItemCreate(cart_id=cart.id, product_id=product.id, quantity=quantity))
    return cart


@pytest.fixture
def placed_order(client, storage, customer, product):
    """Checkout of 2 x the `product` fixture by `customer`."""
    fill_cart(storage, customer[0], (product, 2))
    response = client.post("/api/orders", headers=customer[1])
    assert response.status_code == 201
    return response.json()


# =============================================================================
# Checkout
# =============================================================================

class TestCheckout:
    """Tests for POST /api/orders."""

    def test_checkout_creates_order_payment_shipment(self, client, storage, customer, seller, other_seller):
        user, headers = customer
        mouse = make_product(storage, seller[2].id, name="Mouse", price=19.99, stock=5)
        shirt = make_product(storage, other_seller[2].id, name="Shirt", price=10.01, stock=3)
        cart = fill_cart(storage, user, (mouse, 2), (shirt, 1))

        response = client.post("/api/orders", json={"payment_method": "paypal"}, headers=headers)

        assert response.status_code == 201
        data = response.json()
        order, payment, shipment = data["order"], data["payment"], data["shipment"]

        assert order["order_id"].startswith("ORD-")
        assert order["customer_id"] == user.id
        assert order["total_price"] == 49.99
        assert order["status"] == "processing"

        assert payment["amount"] == 49.99
        assert payment["method"] == "paypal"
        assert payment["status"] == "completed"

        assert shipment["status"] == "processing"
        assert shipment["order_id"] == order["id"]

        assert storage.get_product(mouse.id).stock == 3
        assert storage.get_product(shirt.id).stock == 2
        assert storage.get_cart_items(cart.id) == []
        assert [(i.product_id, i.quantity, i.price) for i in storage.get_order_items(order["id"])] == [
            (mouse.id, 2, 19.99),
            (shirt.id, 1, 10.01),
        ]

    def test_default_payment_method_and_eta(self, client, storage, customer, product):
        fill_cart(storage, customer[0], (product, 1))
        before = utc_now()

        data = client.post("/api/orders", headers=customer[1]).json()

        assert data["payment"]["method"] == settings.DEFAULT_PAYMENT_METHOD
        shipment = storage.get_order_shipment(data["order"]["id"])
        expected = before + timedelta(days=settings.ESTIMATED_DELIVERY_DAYS)
        assert abs(shipment.estimated_delivery - expected) < timedelta(minutes=1)

    def test_order_price_is_captured(self, client, storage, customer, product):
        fill_cart(storage, customer[0], (product, 1))
        order = client.post("/api/orders", headers=customer[1]).json()["order"]

        storage.update_product(product.id, {"price": 99.0})

        assert storage.get_order_items(order["id"])[0].price == 25.0

    def test_empty_cart(self, client, storage, customer):
        fill_cart(storage, customer[0])

        response = client.post("/api/orders", headers=customer[1])

        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_no_cart_at_all(self, client, customer):
        response = client.post("/api/orders", headers=customer[1])
        assert response.status_code == 400

    def test_insufficient_stock_changes_nothing(self, client, storage, customer, product):
        cart = fill_cart(storage, customer[0], (product, 11))

        response = client.post("/api/orders", headers=customer[1])

        assert response.status_code == 400
        assert response.json()["detail"] == "Not enough stock for Wireless Mouse"
        assert storage.list_orders() == []
        assert storage.get_product(product.id).stock == 10
        assert len(storage.get_cart_items(cart.id)) == 1

    def test_deleted_product_in_cart(self, client, storage, customer, product):
        memory_only(storage)
        fill_cart(storage, customer[0], (product, 1))
        storage.products.remove(product.id)

        response = client.post("/api/orders", headers=customer[1])

        assert response.status_code == 400
        assert response.json()["detail"] == f"Product with ID {product.id} not found"

    def test_invalid_payment_method(self, client, storage, customer, product):
        fill_cart(storage, customer[0], (product, 1))

        response = client.post("/api/orders", json={"payment_method": "barter"}, headers=customer[1])

        assert response.status_code == 400
        assert storage.list_orders() == []


# =============================================================================
# Listing & Detail
# =============================================================================

class TestListOrders:
    """Tests for GET /api/orders role scoping."""

    def test_customer_sees_own(self, client, customer, other_customer, placed_order):
        mine = client.get("/api/orders", headers=customer[1]).json()
        theirs = client.get("/api/orders", headers=other_customer[1]).json()

        assert [o["id"] for o in mine] == [placed_order["order"]["id"]]
        assert mine[0]["payment"]["status"] == "completed"
        assert mine[0]["shipment"]["status"] == "processing"
        assert mine[0]["items"][0]["quantity"] == 2
        assert theirs == []

    def test_seller_sees_orders_with_their_products(self, client, seller, other_seller, placed_order):
        assert len(client.get("/api/orders", headers=seller[1]).json()) == 1
        assert client.get("/api/orders", headers=other_seller[1]).json() == []

    def test_admin_sees_all(self, client, admin, placed_order):
        assert len(client.get("/api/orders", headers=admin[1]).json()) == 1


class TestGetOrder:
    """Tests for GET /api/orders/{id}."""

    def test_owner_gets_items_with_products(self, client, customer, placed_order):
        order_id = placed_order["order"]["id"]

        response = client.get(f"/api/orders/{order_id}", headers=customer[1])

        assert response.status_code == 200
        data = response.json()
        assert data["items"][0]["product"]["name"] == "Wireless Mouse"
        assert data["payment"]["amount"] == 50.0

    def test_other_customer_denied(self, client, other_customer, placed_order):
        response = client.get(f"/api/orders/{placed_order['order']['id']}", headers=other_customer[1])

        assert response.status_code == 403
        assert response.json()["detail"] == "You don't have permission to view this order"

    def test_seller_access(self, client, seller, other_seller, placed_order):
        order_id = placed_order["order"]["id"]

        assert client.get(f"/api/orders/{order_id}", headers=seller[1]).status_code == 200
        assert client.get(f"/api/orders/{order_id}", headers=other_seller[1]).status_code == 403

    def test_missing_order(self, client, admin):
        assert client.get("/api/orders/999", headers=admin[1]).status_code == 404


class TestUpdateOrderStatus:
    """Tests for PUT /api/orders/{id}."""

    def test_admin_updates_status(self, client, storage, admin, placed_order):
        order_id = placed_order["order"]["id"]

        response = client.put(f"/api/orders/{order_id}", json={"status": "cancelled"}, headers=admin[1])

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert storage.get_order(order_id).status == OrderStatus.CANCELLED

    def test_customer_denied(self, client, customer, placed_order):
        response = client.put(
            f"/api/orders/{placed_order['order']['id']}",
            json={"status": "delivered"},
            headers=customer[1],
        )
        assert response.status_code == 403

    def test_invalid_status(self, client, admin, placed_order):
        response = client.put(
            f"/api/orders/{placed_order['order']['id']}",
            json={"status": "lost"},
            headers=admin[1],
        )
        assert response.status_code == 400

    def test_missing_order(self, client, admin):
        response = client.put("/api/orders/999", json={"status": "shipped"}, headers=admin[1])
        assert response.status_code == 404


# =============================================================================
# Shipments
# =============================================================================

class TestUpdateShipment:
    """Tests for PUT /api/shipments/{id}."""

    def test_seller_ships_and_order_follows(self, client, storage, seller, placed_order):
        shipment_id = placed_order["shipment"]["id"]

        response = client.put(
            f"/api/shipments/{shipment_id}",
            json={"status": "shipped", "tracking_number": "1Z999", "carrier": "UPS"},
            headers=seller[1],
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "shipped"
        assert data["tracking_number"] == "1Z999"
        assert storage.get_order(placed_order["order"]["id"]).status == OrderStatus.SHIPPED

    def test_delivered_is_mirrored(self, client, storage, admin, placed_order):
        client.put(
            f"/api/shipments/{placed_order['shipment']['id']}",
            json={"status": "delivered"},
            headers=admin[1],
        )
        assert storage.get_order(placed_order["order"]["id"]).status == OrderStatus.DELIVERED

    def test_unknown_status_rejected(self, client, storage, admin, placed_order):
        response = client.put(
            f"/api/shipments/{placed_order['shipment']['id']}",
            json={"status": "lost"},
            headers=admin[1],
        )

        assert response.status_code == 400
        shipment = storage.get_order_shipment(placed_order["order"]["id"])
        assert shipment.status == ShipmentStatus.PROCESSING

    def test_tracking_only_update(self, client, storage, admin, placed_order):
        response = client.put(
            f"/api/shipments/{placed_order['shipment']['id']}",
            json={"carrier": "DHL"},
            headers=admin[1],
        )

        assert response.json()["carrier"] == "DHL"
        assert response.json()["status"] == "processing"
        assert storage.get_order(placed_order["order"]["id"]).status == OrderStatus.PROCESSING

    def test_other_seller_denied(self, client, other_seller, placed_order):
        response = client.put(
            f"/api/shipments/{placed_order['shipment']['id']}",
            json={"status": "shipped"},
            headers=other_seller[1],
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "You don't have permission to update this shipment"

    def test_customer_denied(self, client, customer, placed_order):
        response = client.put(
            f"/api/shipments/{placed_order['shipment']['id']}",
            json={"status": "shipped"},
            headers=customer[1],
        )
        assert response.status_code == 403

    def test_missing_shipment(self, client, admin):
        response = client.put("/api/shipments/999", json={"carrier": "UPS"}, headers=admin[1])
        assert response.status_code == 404
