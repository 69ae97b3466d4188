# API Routes

from .menu import router as menu_router
from .restaurant import router as restaurant_router
from .cart import router as cart_router
from .coupons import router as coupons_router
from .orders import router as orders_router

__all__ = [
    "menu_router",
    "restaurant_router",
    "cart_router",
    "coupons_router",
    "orders_router",
]
