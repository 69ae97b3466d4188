"""Cart storage for mock restaurant"""

import uuid
from datetime import datetime
from typing import Optional

from ..models.cart import Cart, CartLine
from ..models.menu import MenuItem


class CartDatabase:
    """In-memory carts, one per customer"""

    def __init__(self):
        self.carts: dict[str, Cart] = {}

    def reset(self) -> None:
        self.carts = {}

    def get_cart(self, user_id: str) -> Cart:
        """Get the customer's cart, creating an empty one on first use"""
        cart = self.carts.get(user_id)
        if cart is None:
            now = datetime.utcnow()
            cart = Cart(user_id=user_id, items=[], created_at=now, updated_at=now)
            self.carts[user_id] = cart
        return cart

    def get_line(self, user_id: str, line_id: str) -> Optional[CartLine]:
        cart = self.get_cart(user_id)
        return next((line for line in cart.items if line.line_id == line_id), None)

    def add_item(
        self,
        user_id: str,
        item: MenuItem,
        unit_price: float,
        quantity: int = 1,
        variant: Optional[str] = None,
    ) -> Cart:
        """Add a dish; merges into the existing (product, variant) line"""
        cart = self.get_cart(user_id)

        existing = next(
            (line for line in cart.items if line.product == item.id and line.variant == variant),
            None,
        )

        if existing:
            existing.quantity += quantity
        else:
            cart.items.append(
                CartLine(
                    line_id=f"line-{uuid.uuid4().hex[:12]}",
                    product=item.id,
                    name=item.name,
                    price=unit_price,
                    quantity=quantity,
                    variant=variant,
                    image_url=item.image_url,
                    type=item.type,
                )
            )

        self._touch(cart)
        return cart

    def update_quantity(self, user_id: str, line_id: str, quantity: int) -> Optional[Cart]:
        """Set a line's quantity; None if the line does not exist"""
        line = self.get_line(user_id, line_id)
        if not line:
            return None

        cart = self.get_cart(user_id)
        if quantity <= 0:
            cart.items = [i for i in cart.items if i.line_id != line_id]
        else:
            line.quantity = quantity

        self._touch(cart)
        return cart

    def remove_item(self, user_id: str, line_id: str) -> Optional[Cart]:
        return self.update_quantity(user_id, line_id, 0)

    def clear_cart(self, user_id: str) -> Cart:
        """Remove all lines and the applied coupon"""
        cart = self.get_cart(user_id)
        cart.items = []
        cart.applied_coupon_code = None
        self._touch(cart)
        return cart

    def set_coupon(self, user_id: str, code: Optional[str]) -> Cart:
        cart = self.get_cart(user_id)
        cart.applied_coupon_code = code
        self._touch(cart)
        return cart

    @staticmethod
    def _touch(cart: Cart) -> None:
        cart.updated_at = datetime.utcnow()


# Singleton instance
cart_db = CartDatabase()
