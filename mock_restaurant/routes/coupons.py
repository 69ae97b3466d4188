"""Coupon API routes for mock restaurant"""

from fastapi import APIRouter

from ..models.coupon import Coupon, ValidateCouponRequest, ValidateCouponResponse
from ..database.coupons import coupon_db

router = APIRouter(prefix="/api/coupons", tags=["Coupons"])


@router.get("", response_model=list[Coupon])
async def list_coupons():
    """Public coupon catalog"""
    return coupon_db.list_coupons()


@router.post("/validate", response_model=ValidateCouponResponse)
async def validate_coupon(request: ValidateCouponRequest):
    """Check a code against an order total without touching any cart"""
    coupon = coupon_db.get_by_code(request.code)
    if not coupon:
        return ValidateCouponResponse(valid=False, message="Invalid coupon code")

    valid, reason = coupon.check(request.order_total)
    if not valid:
        return ValidateCouponResponse(valid=False, message=reason)

    return ValidateCouponResponse(
        valid=True,
        discount=coupon.calculate_discount(request.order_total),
        message=reason,
    )
