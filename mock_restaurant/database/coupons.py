"""Coupon storage for mock restaurant"""

from datetime import datetime, timedelta
from typing import Optional

from ..models.coupon import Coupon, DiscountType


def _seed_coupons() -> dict[str, Coupon]:
    now = datetime.utcnow()
    coupons = [
        Coupon(
            id="cpn-001",
            code="SAVE50",
            name="Flat ₹50 off",
            discount_type=DiscountType.FLAT,
            discount_amount=50,
            min_order_value=200,
            valid_until=now + timedelta(days=30),
        ),
        Coupon(
            id="cpn-002",
            code="FEAST20",
            name="20% off on feasts",
            description="Up to ₹120 off on orders above ₹500",
            discount_type=DiscountType.PERCENTAGE,
            discount_percent=20,
            max_discount_amount=120,
            min_order_value=500,
            valid_until=now + timedelta(days=30),
        ),
        Coupon(
            id="cpn-003",
            code="WELCOME100",
            name="₹100 off your first feast",
            discount_type=DiscountType.FLAT,
            discount_amount=100,
            min_order_value=699,
            usage_limit=1000,
        ),
        Coupon(
            id="cpn-004",
            code="MONSOON30",
            name="Monsoon special",
            discount_type=DiscountType.PERCENTAGE,
            discount_percent=30,
            valid_from=now - timedelta(days=90),
            valid_until=now - timedelta(days=1),
        ),
    ]
    return {coupon.code: coupon for coupon in coupons}


class CouponDatabase:
    """In-memory coupon storage"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.coupons = _seed_coupons()

    def list_coupons(self) -> list[Coupon]:
        return list(self.coupons.values())

    def get_by_code(self, code: str) -> Optional[Coupon]:
        """Case-insensitive lookup"""
        return self.coupons.get(code.strip().upper())

    def add_coupon(self, coupon: Coupon) -> Coupon:
        coupon.code = coupon.code.strip().upper()
        self.coupons[coupon.code] = coupon
        return coupon

    def mark_used(self, code: str) -> None:
        coupon = self.get_by_code(code)
        if coupon:
            coupon.used_count += 1


# Singleton instance
coupon_db = CouponDatabase()
