"""Cart models for mock restaurant"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import CamelModel
from .menu import FoodType


class CartLine(CamelModel):
    """Line in a customer's cart, keyed by (product, variant)"""
    line_id: str = Field(alias="_id")
    product: str
    name: str
    price: float
    quantity: int = Field(gt=0)
    variant: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageURL")
    type: Optional[FoodType] = None

    @property
    def total_price(self) -> float:
        return self.price * self.quantity


class Cart(CamelModel):
    """Server-side cart of one customer"""
    user_id: str
    items: list[CartLine] = []
    applied_coupon_code: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def subtotal(self) -> float:
        return round(sum(line.total_price for line in self.items), 2)


class AppliedCouponInfo(CamelModel):
    code: str
    discount_amount: float
    min_order_value: Optional[float] = None


class TaxBreakdown(CamelModel):
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0


class Bill(CamelModel):
    """Server-computed totals for a cart"""
    items_total: float = 0.0
    tax: float = 0.0
    tax_breakdown: TaxBreakdown = TaxBreakdown()
    shipping: float = 0.0
    discount: float = 0.0
    final_total: float = 0.0
    applied_coupon: Optional[AppliedCouponInfo] = None


class CartResponse(CamelModel):
    """Cart API response"""
    items: list[CartLine]
    total_price: float
    applied_coupon: Optional[AppliedCouponInfo] = None
    message: Optional[str] = None


class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = Field(default=1, gt=0)
    variant: Optional[str] = None


class UpdateCartItemRequest(CamelModel):
    quantity: int = Field(gt=0)


class ApplyCouponRequest(CamelModel):
    code: str = Field(min_length=1)
