# =============================================================================
# core/services/cart_service.py - Cart Business Logic
# =============================================================================
# Every user has one cart, created on first access. Quantities are checked
# against current stock when added or changed; stock is only reserved at
# checkout.
# =============================================================================

import logging

from app.exceptions import InsufficientStockError, NotFoundError
from core.models import (
    Cart,
    CartCreate,
    CartItem,
    CartItemCreate,
    CartItemWithProduct,
    CartWithItems,
    User,
)
from lib.storage import Storage
from lib.utils import generate_public_id

logger = logging.getLogger(__name__)


class CartService:
    """Service for the current user's shopping cart."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def get_or_create_cart(self, user: User) -> Cart:
        cart = self.storage.get_cart_by_user_id(user.id)
        if cart is None:
            cart = self.storage.create_cart(
                CartCreate(cart_id=generate_public_id("CART"), user_id=user.id)
            )
            logger.info(f"Created cart {cart.id} for user {user.id}")
        return cart

    def _with_product(self, item: CartItem) -> CartItemWithProduct:
        return CartItemWithProduct(
            **item.model_dump(),
            product=self.storage.get_product(item.product_id),
        )

    def _owned_item(self, user: User, item_id: int) -> CartItem:
        """The item, provided it sits in the user's own cart."""
        cart = self.storage.get_cart_by_user_id(user.id)
        if cart is None:
            raise NotFoundError("Cart", message="Cart not found")
        item = self.storage.get_cart_item(item_id)
        if item is None or item.cart_id != cart.id:
            raise NotFoundError("Cart item", item_id)
        return item

    def get_cart(self, user: User) -> CartWithItems:
        cart = self.get_or_create_cart(user)
        items = [self._with_product(item) for item in self.storage.get_cart_items(cart.id)]
        return CartWithItems(**cart.model_dump(), items=items)

    def add_item(self, user: User, product_id: int, quantity: int = 1) -> CartItemWithProduct:
        """
        Add a product to the cart, merging with an existing line.

        Raises:
            NotFoundError: Unknown product
            InsufficientStockError: Stock is below the requested quantity
        """
        cart = self.get_or_create_cart(user)
        product = self.storage.get_product(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        if product.stock < quantity:
            raise InsufficientStockError()

        item = self.storage.add_cart_item(
            CartItemCreate(cart_id=cart.id, product_id=product_id, quantity=quantity)
        )
        logger.debug(f"Cart {cart.id}: product {product_id} now x{item.quantity}")
        return CartItemWithProduct(**item.model_dump(), product=product)

    def update_item(self, user: User, item_id: int, quantity: int) -> CartItemWithProduct:
        item = self._owned_item(user, item_id)
        product = self.storage.get_product(item.product_id)
        if product is None or product.stock < quantity:
            raise InsufficientStockError()

        updated = self.storage.update_cart_item(item_id, {"quantity": quantity})
        if updated is None:
            raise NotFoundError("Cart item", item_id)
        return CartItemWithProduct(**updated.model_dump(), product=product)

    def remove_item(self, user: User, item_id: int) -> None:
        item = self._owned_item(user, item_id)
        self.storage.remove_cart_item(item.id)
