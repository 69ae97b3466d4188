"""Bill computation for the mock restaurant"""

import logging
from datetime import datetime
from typing import Optional

from .database.coupons import coupon_db
from .database.restaurant import restaurant_db
from .models.cart import AppliedCouponInfo, Bill, Cart, TaxBreakdown
from .models.restaurant import Coordinates

logger = logging.getLogger(__name__)

GST_RATE = 0.05


def compute_tax(taxable: float, interstate: bool) -> TaxBreakdown:
    """5% GST: IGST across state lines, otherwise half CGST and half SGST"""
    if interstate:
        return TaxBreakdown(igst=round(taxable * GST_RATE, 2))
    half = round(taxable * GST_RATE / 2, 2)
    return TaxBreakdown(cgst=half, sgst=half)


def compute_bill(
    cart: Cart,
    location: Optional[Coordinates] = None,
    now: Optional[datetime] = None,
) -> Bill:
    """
    Price a cart.

    A coupon that no longer qualifies (e.g. the subtotal fell below its
    minimum order value after a removal) is left out of the bill.
    """
    items_total = cart.subtotal

    discount = 0.0
    applied = None
    if cart.applied_coupon_code:
        coupon = coupon_db.get_by_code(cart.applied_coupon_code)
        valid, reason = coupon.check(items_total, now) if coupon else (False, "Coupon not found")
        if valid:
            discount = coupon.calculate_discount(items_total)
            applied = AppliedCouponInfo(
                code=coupon.code,
                discount_amount=discount,
                min_order_value=coupon.min_order_value,
            )
        else:
            logger.info(f"Dropping coupon {cart.applied_coupon_code} from bill: {reason}")

    breakdown = compute_tax(items_total - discount, restaurant_db.get().interstate)
    tax = round(breakdown.cgst + breakdown.sgst + breakdown.igst, 2)
    shipping = restaurant_db.delivery_fee(location) if cart.items else 0.0

    return Bill(
        items_total=items_total,
        tax=tax,
        tax_breakdown=breakdown,
        shipping=shipping,
        discount=discount,
        final_total=round(items_total + tax + shipping - discount, 2),
        applied_coupon=applied,
    )
