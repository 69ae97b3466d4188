"""Coupon catalog models"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class DiscountType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FLAT = "FLAT"


class Coupon(BaseModel):
    """Coupon as listed in the public catalog"""
    coupon_id: str
    code: str
    name: Optional[str] = None
    description: Optional[str] = None
    discount_type: DiscountType
    discount_percent: float = 0.0
    discount_amount: float = 0.0
    max_discount_amount: float = 0.0
    min_order_value: Optional[float] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool = True

    @property
    def magnitude(self) -> float:
        """Percent for percentage coupons, currency for flat ones"""
        if self.discount_type == DiscountType.PERCENTAGE:
            return self.discount_percent
        return self.discount_amount

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "Coupon":
        return cls(
            coupon_id=str(data.get("_id") or data.get("code")),
            code=data["code"],
            name=data.get("name"),
            description=data.get("description"),
            discount_type=data.get("discountType") or DiscountType.FLAT,
            discount_percent=float(data.get("discountPercent") or 0),
            discount_amount=float(data.get("discountAmount") or 0),
            max_discount_amount=float(data.get("maxDiscountAmount") or 0),
            min_order_value=data.get("minOrderValue") or None,
            valid_from=data.get("validFrom"),
            valid_until=data.get("validUntil"),
            # absent flag counts as inactive
            is_active=bool(data.get("isActive", False)),
        )
