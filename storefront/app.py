"""
Storefront composition root

Builds one API client, cart store, coupon engine, payment adapter and
checkout orchestrator, wired together, for a UI layer to consume.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from .core.config import Settings, get_settings
from .notifications import Notifier
from .services import (
    CartStore,
    CheckoutOrchestrator,
    CheckoutWidget,
    CouponEngine,
    PaymentGatewayAdapter,
    RestaurantApiClient,
)

logger = logging.getLogger(__name__)


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.logging_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@dataclass
class Storefront:
    """Everything a storefront UI talks to"""
    settings: Settings
    client: RestaurantApiClient
    notifier: Notifier
    cart: CartStore
    coupons: CouponEngine
    payments: PaymentGatewayAdapter
    checkout: CheckoutOrchestrator

    async def start(self) -> None:
        """Initial sync after sign-in"""
        await self.cart.fetch_cart()
        await self.checkout.refresh_restaurant_status()

    def sign_in(self, token: str) -> None:
        self.client.set_auth_token(token)

    async def close(self) -> None:
        await self.client.close()


def build_storefront(
    widget: CheckoutWidget,
    settings: Optional[Settings] = None,
    navigate: Optional[Callable[[str], None]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    notifier: Optional[Notifier] = None,
) -> Storefront:
    """
    Wire up a storefront.

    Args:
        widget: Hosted checkout widget used for online payments
        settings: Client settings (defaults to environment)
        navigate: Called with the order page path after a successful order
        transport: Optional httpx transport for the API client
        notifier: Notification sink (a new one by default)
    """
    settings = settings or get_settings()
    notifier = notifier or Notifier()

    client = RestaurantApiClient(
        base_url=settings.api_base_url,
        auth_token=settings.auth_token,
        timeout=settings.request_timeout,
        transport=transport,
    )
    cart = CartStore(
        client,
        notifier,
        fallback_tax_rate=settings.fallback_tax_rate,
        discard_stale_fetches=settings.discard_stale_cart_fetches,
        currency_symbol=settings.currency_symbol,
    )
    coupons = CouponEngine(client, cart, notifier, currency_symbol=settings.currency_symbol)
    payments = PaymentGatewayAdapter(
        widget,
        key_id=settings.gateway_key_id,
        merchant_name=settings.merchant_name,
        description=settings.payment_description,
        theme_color=settings.theme_color,
    )
    checkout = CheckoutOrchestrator(
        cart,
        client,
        payments,
        notifier,
        currency=settings.currency,
        navigate=navigate,
    )

    logger.info(f"Storefront wired against {settings.api_base_url}")
    return Storefront(
        settings=settings,
        client=client,
        notifier=notifier,
        cart=cart,
        coupons=coupons,
        payments=payments,
        checkout=checkout,
    )
