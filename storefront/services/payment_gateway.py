"""
Payment Gateway Adapter

Wraps a hosted, callback-driven checkout widget so callers can await a
single outcome: PaymentSucceeded, PaymentCancelled or PaymentLoadFailed.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, Union

from ..models.checkout import GatewayPaymentIds, PaymentOrder

logger = logging.getLogger(__name__)


@dataclass
class CheckoutOptions:
    """Options handed to the hosted checkout widget"""
    key: str
    amount: int  # minor currency units
    currency: str
    name: str
    description: str
    order_id: str
    on_success: Callable[[dict[str, Any]], None]
    on_dismiss: Callable[[], None]
    prefill: dict[str, str] = field(default_factory=dict)
    theme_color: Optional[str] = None


class CheckoutWidget(Protocol):
    """Third-party checkout widget"""

    async def load(self) -> bool:
        """Load the widget's script/resources; False on failure"""
        ...

    def open(self, options: CheckoutOptions) -> None:
        """Open the payment modal; completion is reported via callbacks"""
        ...


@dataclass(frozen=True)
class PaymentSucceeded:
    ids: GatewayPaymentIds


@dataclass(frozen=True)
class PaymentCancelled:
    reason: str = "dismissed"


@dataclass(frozen=True)
class PaymentLoadFailed:
    reason: str


PaymentOutcome = Union[PaymentSucceeded, PaymentCancelled, PaymentLoadFailed]


class PaymentGatewayAdapter:
    """
    Bridge between the checkout widget and the checkout orchestrator.

    Usage:
        adapter = PaymentGatewayAdapter(widget, key_id="rzp_test_...")
        outcome = await adapter.pay(payment_order, prefill={"email": "a@b.c"})
        if isinstance(outcome, PaymentSucceeded):
            ...
    """

    def __init__(
        self,
        widget: CheckoutWidget,
        key_id: str,
        merchant_name: str = "Food Delivery App",
        description: str = "Food Order Payment",
        theme_color: Optional[str] = None,
    ):
        self._widget = widget
        self.key_id = key_id
        self.merchant_name = merchant_name
        self.description = description
        self.theme_color = theme_color
        self._loaded = False
        self._load_lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def ensure_loaded(self) -> bool:
        """Load the widget once; later calls reuse it. Never raises."""
        async with self._load_lock:
            if self._loaded:
                return True
            try:
                self._loaded = bool(await self._widget.load())
            except Exception as e:
                logger.error(f"Payment widget failed to load: {e}", exc_info=True)
                self._loaded = False

            if not self._loaded:
                logger.error("Payment widget unavailable")
            return self._loaded

    def open(self, options: CheckoutOptions) -> None:
        """Open the payment modal and return immediately"""
        logger.info(f"Opening payment modal for gateway order {options.order_id}")
        self._widget.open(options)

    async def pay(
        self,
        payment_order: PaymentOrder,
        prefill: Optional[dict[str, str]] = None,
    ) -> PaymentOutcome:
        """
        Run one payment attempt to completion.

        The first callback to fire decides the outcome; any later callback
        for the same attempt is ignored.
        """
        if not await self.ensure_loaded():
            return PaymentLoadFailed("Failed to load payment gateway")

        outcome: asyncio.Future = asyncio.get_running_loop().create_future()

        def on_success(response: dict[str, Any]) -> None:
            if outcome.done():
                logger.warning(
                    f"Ignoring repeated gateway callback for order {payment_order.gateway_order_id}"
                )
                return
            try:
                ids = GatewayPaymentIds.from_widget(response)
            except (KeyError, TypeError) as e:
                logger.error(f"Malformed gateway success payload: {e}")
                outcome.set_result(PaymentLoadFailed("Malformed gateway response"))
                return
            outcome.set_result(PaymentSucceeded(ids))

        def on_dismiss() -> None:
            if outcome.done():
                return
            outcome.set_result(PaymentCancelled())

        options = CheckoutOptions(
            key=self.key_id,
            amount=payment_order.amount_minor,
            currency=payment_order.currency,
            name=self.merchant_name,
            description=self.description,
            order_id=payment_order.gateway_order_id,
            on_success=on_success,
            on_dismiss=on_dismiss,
            prefill={k: v for k, v in (prefill or {}).items() if v},
            theme_color=self.theme_color,
        )

        try:
            self.open(options)
        except Exception as e:
            logger.error(f"Payment modal failed to open: {e}", exc_info=True)
            return PaymentLoadFailed(str(e) or "Payment modal failed to open")

        return await outcome
