"""Checkout and order models"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from .cart import DeliveryLocation


class PaymentMethod(str, Enum):
    COD = "COD"
    ONLINE = "ONLINE"


class CheckoutState(str, Enum):
    """States of a single checkout attempt"""
    IDLE = "idle"
    # Cash on delivery
    PLACING = "placing"
    # Online payment
    AWAITING_GATEWAY_ORDER = "awaiting_gateway_order"
    AWAITING_USER_PAYMENT = "awaiting_user_payment"
    CONFIRMING = "confirming"
    # Terminal
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    PAYMENT_FAILED_OR_CANCELLED = "payment_failed_or_cancelled"
    CONFIRMED_PAYMENT_ORPHANED = "confirmed_payment_orphaned"


class DeliveryAddress(BaseModel):
    """Saved address chosen by the address-selection collaborator"""
    address_id: str
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    mobile: Optional[str] = None
    display_name: Optional[str] = None
    coordinates: Optional[DeliveryLocation] = None

    def as_text(self) -> str:
        parts = [
            self.address_line1,
            self.address_line2,
            self.city,
            self.state,
            self.postal_code,
        ]
        return ", ".join(p for p in parts if p)

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "_id": self.address_id,
            "addressLine1": self.address_line1,
            "addressLine2": self.address_line2,
            "city": self.city,
            "state": self.state,
            "postalCode": self.postal_code,
        }
        if self.mobile:
            data["mobile"] = self.mobile
        if self.coordinates:
            data["coordinates"] = self.coordinates.model_dump()
        return data


class OrderLine(BaseModel):
    """Item line submitted with an order"""
    product_id: str
    quantity: int = Field(gt=0)
    variant: str = "Standard"
    price: float

    def to_wire(self) -> dict[str, Any]:
        return {
            "product": self.product_id,
            "quantity": self.quantity,
            "variant": self.variant,
            "price": self.price,
        }


class GatewayPaymentIds(BaseModel):
    """Identifiers issued by the payment gateway on a successful payment"""
    gateway_order_id: str
    payment_id: str
    signature: str

    @classmethod
    def from_widget(cls, response: dict[str, Any]) -> "GatewayPaymentIds":
        return cls(
            gateway_order_id=response["razorpay_order_id"],
            payment_id=response["razorpay_payment_id"],
            signature=response["razorpay_signature"],
        )


class PaymentOrder(BaseModel):
    """Gateway-side transaction opened before any order exists"""
    gateway_order_id: str
    amount_minor: int
    currency: str

    @classmethod
    def from_wire(
        cls,
        data: dict[str, Any],
        final_total: float,
        currency: str,
    ) -> "PaymentOrder":
        gateway_order_id = data.get("razorpayOrderId") or data.get("id") or data.get("orderId")
        if not gateway_order_id:
            raise ValueError("Payment order response carries no gateway order id")
        return cls(
            gateway_order_id=gateway_order_id,
            amount_minor=int(data.get("amount") or round(final_total * 100)),
            currency=data.get("currency") or currency,
        )


class OrderPayload(BaseModel):
    """Order submitted to the order placement endpoint"""
    items: list[OrderLine]
    total_amount: float
    discount_applied: float = 0.0
    final_amount: float
    delivery_address: str
    address: str = ""
    delivery_coordinates: Optional[DeliveryLocation] = None
    payment_method: PaymentMethod
    gateway: Optional[GatewayPaymentIds] = None

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "items": [line.to_wire() for line in self.items],
            "totalAmount": self.total_amount,
            "discountApplied": self.discount_applied,
            "finalAmount": self.final_amount,
            "deliveryAddress": self.delivery_address,
            "address": self.address,
            "paymentMethod": self.payment_method.value,
        }
        if self.delivery_coordinates:
            data["deliveryCoordinates"] = self.delivery_coordinates.model_dump()
        if self.gateway:
            data["razorpayOrderId"] = self.gateway.gateway_order_id
            data["razorpayPaymentId"] = self.gateway.payment_id
            data["razorpaySignature"] = self.gateway.signature
        return data
