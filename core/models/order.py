# =============================================================================
# core/models/order.py - Order, Payment & Shipment Schemas
# =============================================================================
# These models define the storage contract for checkout and tracking:
# - Order: header with customer, total and status
# - OrderItem: one purchased product, with the price paid at checkout
# - Payment: one mock payment per order (always completed at checkout)
# - Shipment: one shipment per order, tracked by sellers/admins
#
# Status flow:
#   order:    processing -> shipped -> delivered
#                       \-> cancelled
#   shipment: processing -> shipped -> delivered
# A shipment moving to shipped/delivered moves its order to the same status.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .product import Product


class OrderStatus(str, Enum):
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"


class ShipmentStatus(str, Enum):
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


# =============================================================================
# Order
# =============================================================================

class OrderCreate(BaseModel):
    """Schema for inserting an order header."""

    order_id: str = Field(..., min_length=1, max_length=50)
    customer_id: int
    total_price: float = Field(..., ge=0)
    status: OrderStatus = OrderStatus.PROCESSING


class Order(BaseModel):
    """A stored order."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: str
    customer_id: int
    total_price: float
    order_date: datetime
    status: OrderStatus = OrderStatus.PROCESSING


class OrderItemCreate(BaseModel):
    """Schema for inserting an order line."""

    order_id: int
    product_id: int
    quantity: int = Field(..., ge=1)

    # Price at time of purchase
    price: float = Field(..., ge=0)


class OrderItem(BaseModel):
    """A stored order line."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    product_id: int
    quantity: int
    price: float


# =============================================================================
# Payment & Shipment
# =============================================================================

class PaymentCreate(BaseModel):
    """Schema for inserting a payment."""

    payment_id: str = Field(..., min_length=1, max_length=50)
    order_id: int
    amount: float = Field(..., ge=0)
    method: str = Field(..., min_length=1, max_length=50)
    status: PaymentStatus = PaymentStatus.PENDING


class Payment(BaseModel):
    """A stored payment."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    payment_id: str
    order_id: int
    amount: float
    payment_date: datetime
    method: str
    status: PaymentStatus = PaymentStatus.PENDING


class ShipmentCreate(BaseModel):
    """Schema for inserting a shipment."""

    shipment_id: str = Field(..., min_length=1, max_length=50)
    order_id: int
    estimated_delivery: datetime | None = None
    tracking_number: str | None = None
    carrier: str | None = None
    status: ShipmentStatus = ShipmentStatus.PROCESSING


class Shipment(BaseModel):
    """A stored shipment."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    shipment_id: str
    order_id: int
    shipment_date: datetime | None = None
    estimated_delivery: datetime | None = None
    tracking_number: str | None = None
    carrier: str | None = None
    status: ShipmentStatus = ShipmentStatus.PROCESSING


# =============================================================================
# Response Shapes
# =============================================================================

class OrderItemWithProduct(OrderItem):
    """Order line plus the product it points at."""

    product: Product | None = None


class OrderWithDetails(Order):
    """
    Order with its lines, payment and shipment.

    Returned by GET /api/orders (lines without products) and
    GET /api/orders/{id} (lines with products).
    """

    items: list[OrderItemWithProduct] = Field(default_factory=list)
    payment: Payment | None = None
    shipment: Shipment | None = None


class CheckoutResult(BaseModel):
    """Everything checkout created, as returned by POST /api/orders."""

    order: Order
    payment: Payment
    shipment: Shipment
