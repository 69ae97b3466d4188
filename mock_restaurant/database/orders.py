"""Order storage for mock restaurant"""

import uuid
from datetime import datetime
from typing import Optional

from ..models.cart import Bill, Cart
from ..models.order import (
    Order,
    OrderLine,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    PlaceOrderRequest,
)


class OrderDatabase:
    """In-memory order storage"""

    def __init__(self):
        self.orders: dict[str, Order] = {}

    def reset(self) -> None:
        self.orders = {}

    def create_order(self, user_id: str, cart: Cart, bill: Bill, request: PlaceOrderRequest) -> Order:
        """Create an order from the customer's cart and its current bill"""
        now = datetime.utcnow()

        order_lines = [
            OrderLine(
                product=line.product,
                name=line.name,
                quantity=line.quantity,
                variant=line.variant,
                price=line.price,
            )
            for line in cart.items
        ]

        online = request.payment_method == PaymentMethod.ONLINE
        order = Order(
            id=f"ord-{uuid.uuid4().hex[:12]}",
            user_id=user_id,
            items=order_lines,
            total_amount=bill.items_total,
            tax=bill.tax,
            delivery_fee=bill.shipping,
            discount_applied=bill.discount,
            final_amount=bill.final_total,
            coupon_code=bill.applied_coupon.code if bill.applied_coupon else None,
            delivery_address=request.delivery_address,
            address=request.address,
            delivery_coordinates=request.delivery_coordinates,
            payment_method=request.payment_method,
            payment_status=PaymentStatus.PAID if online else PaymentStatus.PENDING,
            status=OrderStatus.CONFIRMED if online else OrderStatus.PLACED,
            razorpay_order_id=request.razorpay_order_id,
            razorpay_payment_id=request.razorpay_payment_id,
            created_at=now,
            updated_at=now,
        )

        self.orders[order.id] = order
        return order

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def find_by_payment_id(self, payment_id: str) -> Optional[Order]:
        return next(
            (o for o in self.orders.values() if o.razorpay_payment_id == payment_id),
            None,
        )

    def list_for_user(self, user_id: str, limit: int = 50) -> list[Order]:
        """List a customer's recent orders"""
        orders = [o for o in self.orders.values() if o.user_id == user_id]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[:limit]


# Singleton instance
order_db = OrderDatabase()
