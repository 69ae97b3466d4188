# Storefront Models

from .cart import (
    AppliedCoupon,
    CartItem,
    CartState,
    CartTotals,
    DeliveryLocation,
    ProductRef,
    TaxBreakdown,
)
from .coupon import Coupon, DiscountType
from .checkout import (
    CheckoutState,
    DeliveryAddress,
    GatewayPaymentIds,
    OrderLine,
    OrderPayload,
    PaymentMethod,
    PaymentOrder,
)

__all__ = [
    "AppliedCoupon",
    "CartItem",
    "CartState",
    "CartTotals",
    "DeliveryLocation",
    "ProductRef",
    "TaxBreakdown",
    "Coupon",
    "DiscountType",
    "CheckoutState",
    "DeliveryAddress",
    "GatewayPaymentIds",
    "OrderLine",
    "OrderPayload",
    "PaymentMethod",
    "PaymentOrder",
]
