# Mock Restaurant Models

from .restaurant import Coordinates, Restaurant
from .menu import FoodType, MenuItem, Variant
from .cart import (
    AddToCartRequest,
    AppliedCouponInfo,
    ApplyCouponRequest,
    Bill,
    Cart,
    CartLine,
    CartResponse,
    TaxBreakdown,
    UpdateCartItemRequest,
)
from .coupon import Coupon, DiscountType, ValidateCouponRequest, ValidateCouponResponse
from .order import (
    GatewayOrder,
    Order,
    OrderLine,
    OrderResponse,
    OrderStatus,
    PaymentMethod,
    PaymentOrderRequest,
    PaymentOrderResponse,
    PaymentStatus,
    PlaceOrderRequest,
)

__all__ = [
    "Coordinates",
    "Restaurant",
    "FoodType",
    "MenuItem",
    "Variant",
    "AddToCartRequest",
    "AppliedCouponInfo",
    "ApplyCouponRequest",
    "Bill",
    "Cart",
    "CartLine",
    "CartResponse",
    "TaxBreakdown",
    "UpdateCartItemRequest",
    "Coupon",
    "DiscountType",
    "ValidateCouponRequest",
    "ValidateCouponResponse",
    "GatewayOrder",
    "Order",
    "OrderLine",
    "OrderResponse",
    "OrderStatus",
    "PaymentMethod",
    "PaymentOrderRequest",
    "PaymentOrderResponse",
    "PaymentStatus",
    "PlaceOrderRequest",
]
