"""Coupon models for mock restaurant"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import CamelModel


class DiscountType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FLAT = "FLAT"


class Coupon(CamelModel):
    """Discount coupon"""
    id: str = Field(alias="_id")
    code: str
    name: Optional[str] = None
    description: Optional[str] = None
    discount_type: DiscountType
    discount_percent: float = Field(default=0, ge=0, le=100)
    discount_amount: float = Field(default=0, ge=0)
    max_discount_amount: float = 0.0  # cap for percentage coupons, 0 = none
    min_order_value: float = 0.0
    usage_limit: Optional[int] = None
    used_count: int = 0
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool = True

    def check(self, order_amount: float, now: Optional[datetime] = None) -> tuple[bool, str]:
        """Check if coupon is valid for given order"""
        now = now or datetime.utcnow()

        if not self.is_active:
            return False, "Coupon is not active"
        if self.valid_from and now < self.valid_from:
            return False, "Coupon is not yet valid"
        if self.valid_until and now > self.valid_until:
            return False, "Coupon has expired"
        if self.usage_limit and self.used_count >= self.usage_limit:
            return False, "Coupon usage limit reached"
        if order_amount < self.min_order_value:
            return False, f"Minimum order value of ₹{self.min_order_value:g} required for this coupon"

        return True, "Coupon is valid"

    def calculate_discount(self, order_amount: float) -> float:
        if self.discount_type == DiscountType.PERCENTAGE:
            discount = order_amount * self.discount_percent / 100
            if self.max_discount_amount:
                discount = min(discount, self.max_discount_amount)
        else:
            discount = self.discount_amount
        return round(min(discount, order_amount), 2)


class ValidateCouponRequest(CamelModel):
    code: str
    order_total: float = Field(ge=0)


class ValidateCouponResponse(CamelModel):
    valid: bool
    discount: float = 0.0
    message: str
