# =============================================================================
# core/services/order_service.py - Checkout, Orders & Shipments
# =============================================================================
# Checkout turns the user's cart into an order with a series of separate
# storage calls:
#
#   1. validate cart is not empty
#   2. validate every product exists and has stock, total the prices
#   3. create order (processing)
#   4. per line: add order item at current price, decrement stock
#   5. create payment (mock: always completed)
#   6. create shipment (processing, ETA = now + ESTIMATED_DELIVERY_DAYS)
#   7. empty the cart
#
# The steps are not wrapped in a transaction. A failure part way through
# leaves the earlier writes in place.
# =============================================================================

import logging
from datetime import timedelta
from typing import Any

from app.config import settings
from app.exceptions import (
    EmptyCartError,
    InsufficientStockError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from core.models import (
    CheckoutResult,
    Order,
    OrderCreate,
    OrderItemCreate,
    OrderItemWithProduct,
    OrderStatus,
    OrderWithDetails,
    PaymentCreate,
    PaymentMethod,
    PaymentStatus,
    Shipment,
    ShipmentCreate,
    ShipmentStatus,
    User,
    UserRole,
)
from lib.storage import Storage
from lib.utils import generate_public_id, utc_now

logger = logging.getLogger(__name__)

# Shipment statuses that move the order along with them
_MIRRORED_SHIPMENT_STATUSES = {
    ShipmentStatus.SHIPPED: OrderStatus.SHIPPED,
    ShipmentStatus.DELIVERED: OrderStatus.DELIVERED,
}


class OrderService:
    """
    Service for checkout and order tracking.

    Provides a clean interface between API routes and storage.
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    def checkout(self, user: User, payment_method: PaymentMethod | str | None = None) -> CheckoutResult:
        """
        Place an order for everything in the user's cart.

        Args:
            user: The buyer
            payment_method: Recorded on the payment (defaults to DEFAULT_PAYMENT_METHOD)

        Returns:
            The created order, payment and shipment

        Raises:
            EmptyCartError: No cart or no lines
            ValidationFailedError: A cart line points at a deleted product
            InsufficientStockError: A product has less stock than requested
        """
        # Step 1: cart
        cart = self.storage.get_cart_by_user_id(user.id)
        if cart is None:
            raise EmptyCartError()
        items = self.storage.get_cart_items(cart.id)
        if not items:
            raise EmptyCartError()

        # Step 2: stock check and total
        total = 0.0
        lines = []
        for item in items:
            product = self.storage.get_product(item.product_id)
            if product is None:
                raise ValidationFailedError(f"Product with ID {item.product_id} not found")
            if product.stock < item.quantity:
                raise InsufficientStockError(product.name)
            total += product.price * item.quantity
            lines.append((item, product))

        # Step 3: order header
        order = self.storage.create_order(
            OrderCreate(
                order_id=generate_public_id("ORD"),
                customer_id=user.id,
                total_price=round(total, 2),
                status=OrderStatus.PROCESSING,
            )
        )

        # Step 4: lines and stock
        for item, product in lines:
            self.storage.add_order_item(
                OrderItemCreate(
                    order_id=order.id,
                    product_id=product.id,
                    quantity=item.quantity,
                    price=product.price,
                )
            )
            self.storage.update_product(product.id, {"stock": product.stock - item.quantity})

        # Step 5: mock payment
        method = payment_method or settings.DEFAULT_PAYMENT_METHOD
        payment = self.storage.create_payment(
            PaymentCreate(
                payment_id=generate_public_id("PAY"),
                order_id=order.id,
                amount=order.total_price,
                method=method.value if isinstance(method, PaymentMethod) else method,
                status=PaymentStatus.COMPLETED,
            )
        )

        # Step 6: shipment
        shipment = self.storage.create_shipment(
            ShipmentCreate(
                shipment_id=generate_public_id("SHIP"),
                order_id=order.id,
                estimated_delivery=utc_now() + timedelta(days=settings.ESTIMATED_DELIVERY_DAYS),
                status=ShipmentStatus.PROCESSING,
            )
        )

        # Step 7: clear cart
        for item in items:
            self.storage.remove_cart_item(item.id)

        logger.info(
            f"Order {order.order_id} placed by user {user.id}: "
            f"{len(lines)} line(s), total {order.total_price:.2f}"
        )
        return CheckoutResult(order=order, payment=payment, shipment=shipment)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _details(self, order: Order, with_products: bool = False) -> OrderWithDetails:
        items = []
        for item in self.storage.get_order_items(order.id):
            product = self.storage.get_product(item.product_id) if with_products else None
            items.append(OrderItemWithProduct(**item.model_dump(), product=product))
        return OrderWithDetails(
            **order.model_dump(),
            items=items,
            payment=self.storage.get_order_payment(order.id),
            shipment=self.storage.get_order_shipment(order.id),
        )

    def list_orders(self, user: User) -> list[OrderWithDetails]:
        """
        Orders visible to the user.

        - customer: their own orders
        - seller: orders containing any of their products
        - admin: every order
        """
        if user.role == UserRole.ADMIN:
            orders = self.storage.list_orders()
        elif user.role == UserRole.SELLER:
            seller = self.storage.get_seller_by_user_id(user.id)
            orders = self.storage.get_seller_orders(seller.id) if seller else []
        else:
            orders = self.storage.list_orders(customer_id=user.id)
        return [self._details(order) for order in orders]

    def _check_seller_access(self, user: User, order: Order, denied_message: str) -> None:
        seller = self.storage.get_seller_by_user_id(user.id)
        if seller is None:
            raise PermissionDeniedError("Seller profile not found")
        product_ids = {product.id for product in self.storage.list_products(seller_id=seller.id)}
        if not any(item.product_id in product_ids for item in self.storage.get_order_items(order.id)):
            raise PermissionDeniedError(denied_message)

    def get_order(self, user: User, order_id: int) -> OrderWithDetails:
        """
        One order with its lines (and their products), payment and shipment.

        Raises:
            NotFoundError: Unknown order
            PermissionDeniedError: Customer viewing another's order, or a
                seller with no products in it
        """
        order = self.storage.get_order(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)

        denied = "You don't have permission to view this order"
        if user.role == UserRole.CUSTOMER and order.customer_id != user.id:
            raise PermissionDeniedError(denied)
        if user.role == UserRole.SELLER:
            self._check_seller_access(user, order, denied)

        return self._details(order, with_products=True)

    # -------------------------------------------------------------------------
    # Tracking Updates
    # -------------------------------------------------------------------------

    def update_order_status(self, order_id: int, status: OrderStatus) -> Order:
        order = self.storage.update_order(order_id, {"status": status})
        if order is None:
            raise NotFoundError("Order", order_id)
        logger.info(f"Order {order_id} status -> {order.status.value}")
        return order

    def update_shipment(self, user: User, shipment_id: int, changes: dict[str, Any]) -> Shipment:
        """
        Apply a partial shipment update.

        Sellers may only update shipments of orders containing their
        products. A new status of shipped/delivered is copied to the order.
        """
        shipment = self.storage.get_shipment(shipment_id)
        if shipment is None:
            raise NotFoundError("Shipment", shipment_id)

        if user.role == UserRole.SELLER:
            order = self.storage.get_order(shipment.order_id)
            if order is None:
                raise NotFoundError("Order", shipment.order_id)
            self._check_seller_access(user, order, "You don't have permission to update this shipment")

        updated = self.storage.update_shipment(shipment_id, changes)
        if updated is None:
            raise NotFoundError("Shipment", shipment_id)

        new_status = changes.get("status")
        if new_status is not None and ShipmentStatus(new_status) in _MIRRORED_SHIPMENT_STATUSES:
            order_status = _MIRRORED_SHIPMENT_STATUSES[ShipmentStatus(new_status)]
            self.storage.update_order(shipment.order_id, {"status": order_status})
            logger.info(f"Order {shipment.order_id} status -> {order_status.value} (shipment {shipment_id})")
        return updated
