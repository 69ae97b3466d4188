# Database modules

from .menu import menu_db, MenuDatabase
from .restaurant import restaurant_db, RestaurantDatabase
from .carts import cart_db, CartDatabase
from .coupons import coupon_db, CouponDatabase
from .orders import order_db, OrderDatabase
from .payments import payment_db, PaymentDatabase


def reset_databases() -> None:
    """Restore every store to its seeded state"""
    for db in (menu_db, restaurant_db, cart_db, coupon_db, order_db, payment_db):
        db.reset()


__all__ = [
    "menu_db",
    "MenuDatabase",
    "restaurant_db",
    "RestaurantDatabase",
    "cart_db",
    "CartDatabase",
    "coupon_db",
    "CouponDatabase",
    "order_db",
    "OrderDatabase",
    "payment_db",
    "PaymentDatabase",
    "reset_databases",
]
