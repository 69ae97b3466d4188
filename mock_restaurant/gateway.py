"""
Simulated hosted checkout widget

Stands in for the payment gateway's browser widget: `open` returns at
once and the outcome arrives later through the options' callbacks,
signed the way the real gateway signs captured payments.
"""

import asyncio
import logging
import uuid
from typing import Any, Optional

from .security.signatures import get_key_secret, sign_payment

logger = logging.getLogger(__name__)

PAY = "pay"
DISMISS = "dismiss"
FAIL_LOAD = "fail_load"


class SimulatedCheckoutWidget:
    """
    Checkout widget driven by a fixed behavior.

    Args:
        behavior: "pay" completes the payment, "dismiss" closes the modal,
            "fail_load" makes the widget script fail to load
        key_secret: Secret used to sign payments (defaults to PAYMENT_KEY_SECRET)
        duplicate_callbacks: Fire the success callback twice, then dismiss
    """

    def __init__(
        self,
        behavior: str = PAY,
        key_secret: Optional[str] = None,
        duplicate_callbacks: bool = False,
    ):
        if behavior not in (PAY, DISMISS, FAIL_LOAD):
            raise ValueError(f"Unknown widget behavior: {behavior}")
        self.behavior = behavior
        self.key_secret = key_secret
        self.duplicate_callbacks = duplicate_callbacks
        self.load_calls = 0
        self.opened: list[Any] = []
        self.payments: list[dict[str, str]] = []

    async def load(self) -> bool:
        self.load_calls += 1
        await asyncio.sleep(0)
        return self.behavior != FAIL_LOAD

    def open(self, options: Any) -> None:
        self.opened.append(options)
        loop = asyncio.get_running_loop()

        if self.behavior == DISMISS:
            logger.info(f"Simulated gateway: modal dismissed for {options.order_id}")
            loop.call_soon(options.on_dismiss)
            return

        payment_id = f"pay_{uuid.uuid4().hex[:14]}"
        response = {
            "razorpay_order_id": options.order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": sign_payment(
                options.order_id, payment_id, self.key_secret or get_key_secret()
            ),
        }
        self.payments.append(response)
        logger.info(f"Simulated gateway: captured {payment_id} for {options.order_id}")

        loop.call_soon(options.on_success, response)
        if self.duplicate_callbacks:
            loop.call_soon(options.on_success, dict(response))
            loop.call_soon(options.on_dismiss)
