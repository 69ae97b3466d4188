"""
Checkout Orchestrator

Drives a checkout attempt from a selected address and payment method to
a persisted order.

Cash on delivery places the order directly. Online payment is two-phase:
a gateway transaction is opened first (no order exists yet), the
customer pays in the hosted modal, and only the gateway's success
callback leads to the order being created with the gateway identifiers
attached. If that final call fails the payment is orphaned: it is
reported with a contact-support message, never retried, and the cart
is kept.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..exceptions import ApiError, CartSyncError, StorefrontError, ValidationError
from ..models.checkout import (
    CheckoutState,
    DeliveryAddress,
    GatewayPaymentIds,
    OrderLine,
    OrderPayload,
    PaymentMethod,
    PaymentOrder,
)
from ..notifications import Notifier
from .api_client import RestaurantApiClient
from .cart_store import CartStore
from .payment_gateway import PaymentGatewayAdapter, PaymentLoadFailed, PaymentSucceeded

logger = logging.getLogger(__name__)

ORPHANED_PAYMENT_MESSAGE = "Payment received but order creation failed. Please contact support."
PAYMENT_CANCELLED_MESSAGE = "Payment cancelled or failed"


@dataclass
class CheckoutResult:
    """Outcome of one place_order call"""
    state: CheckoutState
    order_id: Optional[str] = None
    redirect_to: Optional[str] = None
    message: Optional[str] = None
    error: Optional[StorefrontError] = None

    @property
    def succeeded(self) -> bool:
        return self.state == CheckoutState.SUCCEEDED


def _order_id_from(response: dict[str, Any]) -> Optional[str]:
    order = response.get("order")
    if isinstance(order, dict) and order.get("_id"):
        return str(order["_id"])
    if response.get("_id"):
        return str(response["_id"])
    return None


def _server_message(error: ApiError, fallback: str) -> str:
    if error.message and not error.is_network_error:
        return error.message
    return fallback


class CheckoutOrchestrator:
    """Checkout page controller"""

    def __init__(
        self,
        store: CartStore,
        client: RestaurantApiClient,
        payments: PaymentGatewayAdapter,
        notifier: Notifier,
        currency: str = "INR",
        navigate: Optional[Callable[[str], None]] = None,
    ):
        self._store = store
        self._client = client
        self._payments = payments
        self._notifier = notifier
        self._currency = currency
        self._navigate = navigate

        self.payment_method = PaymentMethod.ONLINE
        self.address: Optional[DeliveryAddress] = None
        self.buyer_name: Optional[str] = None
        self.buyer_email: Optional[str] = None
        self.restaurant_open: Optional[bool] = None
        self.orphaned_payment: Optional[GatewayPaymentIds] = None

        self.state = CheckoutState.IDLE
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        """True while an order is being placed or the payment modal is open"""
        return self._in_flight

    @property
    def can_place_order(self) -> bool:
        return not self._in_flight and self.restaurant_open is not False

    def select_address(self, address: Optional[DeliveryAddress]) -> None:
        self.address = address

    def select_payment_method(self, method: PaymentMethod) -> None:
        self.payment_method = method

    def set_buyer(self, name: Optional[str] = None, email: Optional[str] = None) -> None:
        """Contact hints prefilled into the payment modal"""
        self.buyer_name = name
        self.buyer_email = email

    async def refresh_restaurant_status(self) -> Optional[bool]:
        try:
            restaurant = await self._client.get_restaurant()
        except ApiError as e:
            logger.warning(f"Could not refresh restaurant status: {e.message}")
            return self.restaurant_open
        self.restaurant_open = bool(restaurant.get("isOpen", True))
        return self.restaurant_open

    def _transition(self, state: CheckoutState) -> None:
        logger.debug(f"Checkout {self.state.value} -> {state.value}")
        self.state = state

    def _validate(self) -> DeliveryAddress:
        if self.address is None:
            raise ValidationError("Please select a delivery address")
        if not self._store.items:
            raise ValidationError("Your cart is empty")
        if self.restaurant_open is False:
            raise ValidationError("Restaurant is currently offline")
        return self.address

    def _build_order(self, address: DeliveryAddress, method: PaymentMethod) -> OrderPayload:
        totals = self._store.totals
        return OrderPayload(
            items=[
                OrderLine(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    variant=item.variant or "Standard",
                    price=item.unit_price,
                )
                for item in self._store.items
            ],
            total_amount=totals.items_subtotal,
            discount_applied=totals.discount_amount,
            final_amount=totals.final_total,
            delivery_address=address.address_id,
            address=address.as_text(),
            delivery_coordinates=address.coordinates,
            payment_method=method,
        )

    # ==================== Entry point ====================

    async def place_order(self, payment_method: Optional[PaymentMethod] = None) -> CheckoutResult:
        """
        Run one checkout attempt.

        Never raises for validation or network failures; the outcome is
        described by the returned CheckoutResult and a user notification.
        """
        if self._in_flight:
            logger.info("Ignoring place_order while a checkout is in flight")
            return CheckoutResult(
                state=self.state,
                message="Checkout already in progress",
                error=ValidationError("Checkout already in progress"),
            )

        method = payment_method or self.payment_method

        try:
            address = self._validate()
        except ValidationError as e:
            self._notifier.error(str(e))
            return CheckoutResult(state=CheckoutState.FAILED, message=str(e), error=e)

        self._in_flight = True
        try:
            order = self._build_order(address, method)
            if method == PaymentMethod.COD:
                return await self._place_cash_on_delivery(order)
            return await self._place_online(order, address)
        finally:
            self._in_flight = False

    # ==================== Cash on delivery ====================

    async def _place_cash_on_delivery(self, order: OrderPayload) -> CheckoutResult:
        self._transition(CheckoutState.PLACING)

        try:
            response = await self._client.place_order(order.to_wire())
        except ApiError as e:
            message = _server_message(e, "Failed to place order")
            self._transition(CheckoutState.FAILED)
            self._notifier.error(message)
            return CheckoutResult(state=CheckoutState.FAILED, message=message, error=e)

        return await self._complete(response, "Order placed successfully!")

    # ==================== Online payment ====================

    async def _place_online(self, order: OrderPayload, address: DeliveryAddress) -> CheckoutResult:
        self._transition(CheckoutState.AWAITING_GATEWAY_ORDER)
        totals = self._store.totals

        try:
            raw = await self._client.create_payment_order(
                amount=round(totals.final_total),
                items=[line.to_wire() for line in order.items],
                delivery_address=address.to_wire(),
                delivery_fee=totals.delivery_fee,
            )
        except ApiError as e:
            return self._payment_setup_failed(_server_message(e, "Payment initialization failed"), e)

        try:
            payment_order = PaymentOrder.from_wire(raw, totals.final_total, self._currency)
        except ValueError as e:
            logger.error(f"Unusable payment order response: {e}")
            return self._payment_setup_failed("Payment initialization failed")

        self._transition(CheckoutState.AWAITING_USER_PAYMENT)
        outcome = await self._payments.pay(
            payment_order,
            prefill={"name": self.buyer_name or "", "email": self.buyer_email or ""},
        )

        if not isinstance(outcome, PaymentSucceeded):
            if isinstance(outcome, PaymentLoadFailed):
                logger.warning(f"Payment gateway unavailable: {outcome.reason}")
            else:
                logger.info(f"Payment cancelled for gateway order {payment_order.gateway_order_id}")
            self._notifier.warning(PAYMENT_CANCELLED_MESSAGE)
            self._transition(CheckoutState.IDLE)
            return CheckoutResult(
                state=CheckoutState.PAYMENT_FAILED_OR_CANCELLED,
                message=PAYMENT_CANCELLED_MESSAGE,
            )

        return await self._confirm(order, outcome.ids)

    def _payment_setup_failed(self, message: str, error: Optional[ApiError] = None) -> CheckoutResult:
        """No gateway transaction exists, so nothing was committed"""
        self._notifier.error(message)
        self._transition(CheckoutState.IDLE)
        return CheckoutResult(
            state=CheckoutState.PAYMENT_FAILED_OR_CANCELLED,
            message=message,
            error=error,
        )

    async def _confirm(self, order: OrderPayload, ids: GatewayPaymentIds) -> CheckoutResult:
        """Create the order for a payment the gateway has confirmed. Called once per payment."""
        self._transition(CheckoutState.CONFIRMING)
        confirmed = order.model_copy(update={"payment_method": PaymentMethod.ONLINE, "gateway": ids})

        try:
            response = await self._client.place_order(confirmed.to_wire())
        except ApiError as e:
            self.orphaned_payment = ids
            self._transition(CheckoutState.CONFIRMED_PAYMENT_ORPHANED)
            logger.critical(
                f"Payment {ids.payment_id} for gateway order {ids.gateway_order_id} "
                f"(signature {ids.signature}) captured but order creation failed: {e.message}"
            )
            self._notifier.error(ORPHANED_PAYMENT_MESSAGE, duration_ms=10000)
            return CheckoutResult(
                state=CheckoutState.CONFIRMED_PAYMENT_ORPHANED,
                message=ORPHANED_PAYMENT_MESSAGE,
                error=e,
            )

        return await self._complete(response, "Payment successful! Order placed!")

    # ==================== Completion ====================

    async def _complete(self, response: dict[str, Any], message: str) -> CheckoutResult:
        order_id = _order_id_from(response)
        self._transition(CheckoutState.SUCCEEDED)
        logger.info(f"Order {order_id or '<unknown>'} placed")
        self._notifier.success(message)

        try:
            await self._store.clear_cart()
        except CartSyncError:
            logger.warning(f"Order {order_id} placed but the cart could not be cleared")

        redirect_to = f"/orders/{order_id}" if order_id else "/my-orders"
        if self._navigate:
            self._navigate(redirect_to)

        return CheckoutResult(
            state=CheckoutState.SUCCEEDED,
            order_id=order_id,
            redirect_to=redirect_to,
            message=message,
        )
