"""
Restaurant storefront cart and checkout engine.

Keeps a local cart mirror in sync with the restaurant's server cart and
coordinates the payment gateway with order creation at checkout.
"""

from .app import Storefront, build_storefront, configure_logging
from .notifications import Notification, Notifier, Severity

__all__ = [
    "Storefront",
    "build_storefront",
    "configure_logging",
    "Notification",
    "Notifier",
    "Severity",
]
