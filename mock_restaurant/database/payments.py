"""Simulated payment-gateway transactions"""

import uuid
from datetime import datetime
from typing import Optional

from ..models.order import GatewayOrder


class PaymentDatabase:
    """In-memory gateway orders"""

    def __init__(self):
        self.orders: dict[str, GatewayOrder] = {}

    def reset(self) -> None:
        self.orders = {}

    def create_order(self, user_id: str, amount_minor: int, currency: str = "INR") -> GatewayOrder:
        """Open a gateway transaction; no restaurant order is created"""
        order = GatewayOrder(
            id=f"order_{uuid.uuid4().hex[:14]}",
            user_id=user_id,
            amount=amount_minor,
            currency=currency,
            created_at=datetime.utcnow(),
        )
        self.orders[order.id] = order
        return order

    def get_order(self, gateway_order_id: str) -> Optional[GatewayOrder]:
        return self.orders.get(gateway_order_id)

    def mark_paid(self, gateway_order_id: str, payment_id: str) -> Optional[GatewayOrder]:
        order = self.get_order(gateway_order_id)
        if not order:
            return None
        order.status = "paid"
        order.payment_id = payment_id
        return order


# Singleton instance
payment_db = PaymentDatabase()
