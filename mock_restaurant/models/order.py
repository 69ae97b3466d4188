"""Order and payment models for mock restaurant"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import Field, ValidationError

from .base import CamelModel
from .restaurant import Coordinates


class PaymentMethod(str, Enum):
    COD = "COD"
    ONLINE = "ONLINE"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


class OrderStatus(str, Enum):
    PLACED = "PLACED"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class OrderLineRequest(CamelModel):
    product: str
    quantity: int = Field(gt=0)
    variant: Optional[str] = "Standard"
    price: float


class PlaceOrderRequest(CamelModel):
    """Order as submitted by the storefront"""
    items: list[OrderLineRequest] = []
    total_amount: float
    discount_applied: float = 0.0
    final_amount: Optional[float] = None
    delivery_address: Optional[str] = None
    address: Optional[str] = None
    delivery_instruction: Optional[str] = None
    delivery_coordinates: Optional[Coordinates] = None
    payment_method: PaymentMethod
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None


class OrderLine(CamelModel):
    product: str
    name: str
    quantity: int
    variant: Optional[str] = None
    price: float


class Order(CamelModel):
    """Persisted order"""
    id: str = Field(alias="_id")
    user_id: str
    items: list[OrderLine]
    total_amount: float
    tax: float
    delivery_fee: float
    discount_applied: float
    final_amount: float
    coupon_code: Optional[str] = None
    delivery_address: Optional[str] = None
    address: Optional[str] = None
    delivery_coordinates: Optional[Coordinates] = None
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    status: OrderStatus = OrderStatus.PLACED
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OrderResponse(CamelModel):
    order: Order
    message: Optional[str] = None


class PaymentOrderRequest(CamelModel):
    amount: float = Field(ge=0)
    items: list[dict[str, Any]] = []
    delivery_address: Optional[Any] = None
    delivery_fee: Optional[float] = None

    def drop_coordinates(self) -> Optional[Coordinates]:
        """Coordinates embedded in a saved-address object, if any"""
        address = self.delivery_address
        if not isinstance(address, dict) or not isinstance(address.get("coordinates"), dict):
            return None
        try:
            return Coordinates.model_validate(address["coordinates"])
        except ValidationError:
            return None


class GatewayOrder(CamelModel):
    """Transaction opened at the payment gateway"""
    id: str
    user_id: str
    amount: int  # minor units
    currency: str = "INR"
    status: str = "created"
    payment_id: Optional[str] = None
    created_at: datetime


class PaymentOrderResponse(CamelModel):
    razorpay_order_id: str
    amount: int
    currency: str
