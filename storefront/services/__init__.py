# Services

from .api_client import RestaurantApiClient
from .cart_store import CartStore
from .coupons import CouponEngine
from .payment_gateway import (
    CheckoutOptions,
    CheckoutWidget,
    PaymentCancelled,
    PaymentGatewayAdapter,
    PaymentLoadFailed,
    PaymentOutcome,
    PaymentSucceeded,
)
from .checkout import CheckoutOrchestrator, CheckoutResult

__all__ = [
    "RestaurantApiClient",
    "CartStore",
    "CouponEngine",
    "CheckoutOptions",
    "CheckoutWidget",
    "PaymentCancelled",
    "PaymentGatewayAdapter",
    "PaymentLoadFailed",
    "PaymentOutcome",
    "PaymentSucceeded",
    "CheckoutOrchestrator",
    "CheckoutResult",
]
