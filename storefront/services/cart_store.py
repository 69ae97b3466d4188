"""
Cart Synchronization Store

In-memory mirror of the customer's server-side cart.

Item mutations are applied locally first (with estimated totals), then
sent to the server, then followed by a refetch that replaces the local
state with the server's. A failed server call restores the snapshot
taken before the mutation. Coupon operations are never optimistic.

Overlapping mutations are not serialized: whichever refetch completes
last determines the state, unless stale-fetch discarding is enabled.
"""

import logging
from typing import Callable, Optional

from ..exceptions import (
    ApiError,
    CartSyncError,
    CouponRejectedError,
    NotAuthenticatedError,
    ValidationError,
)
from ..models.cart import (
    AppliedCoupon,
    CartItem,
    CartState,
    CartTotals,
    DeliveryLocation,
    ProductRef,
)
from ..notifications import Notifier
from . import pricing
from .api_client import RestaurantApiClient
from .coupons import shortfall_from_error

logger = logging.getLogger(__name__)

StateListener = Callable[[CartState], None]


def _lines_from_wire(raw_items: list) -> list[CartItem]:
    """Parse cart lines, skipping any the server reports with no quantity left"""
    items = []
    for raw in raw_items:
        item_quantity = raw.get("quantity")
        if item_quantity is not None and int(item_quantity) < 1:
            logger.debug(f"Skipping empty cart line {raw.get('_id')}")
            continue
        items.append(CartItem.from_wire(raw))
    return items


class CartStore:
    """
    Owner of all cart mutations.

    Usage:
        store = CartStore(client, notifier)
        await store.fetch_cart(DeliveryLocation(lat=12.97, lng=77.59))
        await store.add_item(ProductRef(product_id="dish-001", name="Idli", price=60))
        store.totals.final_total
    """

    def __init__(
        self,
        client: RestaurantApiClient,
        notifier: Notifier,
        fallback_tax_rate: float = pricing.DEFAULT_FALLBACK_TAX_RATE,
        discard_stale_fetches: bool = False,
        currency_symbol: str = "₹",
    ):
        self._client = client
        self._notifier = notifier
        self._fallback_tax_rate = fallback_tax_rate
        self._discard_stale_fetches = discard_stale_fetches
        self._currency_symbol = currency_symbol

        self._state = CartState()
        self._listeners: list[StateListener] = []
        self.location: Optional[DeliveryLocation] = None

        self._fetch_seq = 0
        self._applied_seq = 0
        self._pending_fetches = 0

    # ==================== State ====================

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self) -> list[CartItem]:
        return self._state.items

    @property
    def totals(self) -> CartTotals:
        return self._state.totals

    @property
    def applied_coupon(self) -> Optional[AppliedCoupon]:
        return self._state.applied_coupon

    @property
    def item_count(self) -> int:
        return self._state.item_count

    @property
    def is_loading(self) -> bool:
        return self._pending_fetches > 0

    def find_line(self, line_id: str) -> Optional[CartItem]:
        if not line_id:
            return None
        return next((item for item in self._state.items if item.line_id == line_id), None)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call `listener` with every new state; returns an unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: CartState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _apply_optimistic(self, previous: CartState, items: list[CartItem]) -> None:
        totals = pricing.estimate_totals(items, previous.totals, self._fallback_tax_rate)
        self._set_state(previous.model_copy(update={"items": items, "totals": totals}))

    def _rollback(self, previous: CartState, error: ApiError, fallback_message: str) -> CartSyncError:
        """Restore the pre-mutation snapshot and report the failure"""
        self._set_state(previous)
        message = error.message if error.message and not error.is_network_error else fallback_message
        logger.error(f"Cart mutation rolled back: {message}")
        self._notifier.error(message)
        return CartSyncError(message)

    # ==================== Refetch ====================

    async def fetch_cart(self, location: Optional[DeliveryLocation] = None) -> bool:
        """
        Replace local state with the server's cart and bill.

        Args:
            location: Delivery coordinates; remembered for later refetches

        Returns:
            True if the server state was applied
        """
        if location is not None:
            self.location = location

        self._fetch_seq += 1
        seq = self._fetch_seq
        self._pending_fetches += 1

        try:
            cart = await self._client.get_cart(self.location)
            items = _lines_from_wire(cart.get("items") or [])
            totals, coupon = await self._fetch_bill(cart, items)
        except NotAuthenticatedError:
            logger.debug("Cart fetch skipped: not authenticated")
            return False
        except ApiError as e:
            logger.error(f"Cart fetch failed: {e.message}")
            self._notifier.error("Could not refresh your cart")
            return False
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Cart fetch returned malformed data: {e}")
            self._notifier.error("Could not refresh your cart")
            return False
        finally:
            self._pending_fetches -= 1

        if self._discard_stale_fetches and seq < self._applied_seq:
            logger.warning(f"Discarding stale cart fetch #{seq} (applied #{self._applied_seq})")
            return False

        self._applied_seq = max(self._applied_seq, seq)
        self._set_state(CartState(items=items, totals=totals, applied_coupon=coupon))
        logger.debug(
            f"Cart fetch #{seq} applied: {len(items)} lines, total {totals.final_total}"
        )
        return True

    async def _fetch_bill(
        self,
        cart: dict,
        items: list[CartItem],
    ) -> tuple[CartTotals, Optional[AppliedCoupon]]:
        subtotal = pricing.items_subtotal(items)

        try:
            bill = await self._client.get_bill(self.location)
        except NotAuthenticatedError:
            raise
        except ApiError as e:
            logger.warning(f"Bill unavailable, using cart totals: {e.message}")
            totals = CartTotals(items_subtotal=subtotal, final_total=subtotal)
            return totals, AppliedCoupon.from_wire(cart.get("appliedCoupon"))

        totals = CartTotals.from_bill(bill, items_subtotal=subtotal)
        if not totals.is_consistent:
            logger.debug(
                f"Server final total {totals.final_total} differs from "
                f"{totals.expected_final_total}; keeping server value"
            )
        coupon = AppliedCoupon.from_wire(bill.get("appliedCoupon") or cart.get("appliedCoupon"))
        return totals, coupon

    # ==================== Item mutations ====================

    async def add_item(self, product: ProductRef) -> None:
        """Add one unit; merges into an existing (product, variant) line"""
        previous = self._state
        existing = next(
            (i for i in previous.items if i.matches(product.product_id, product.variant)),
            None,
        )
        if existing:
            items = [
                i.model_copy(update={"quantity": i.quantity + 1}) if i is existing else i
                for i in previous.items
            ]
        else:
            items = [*previous.items, CartItem.from_product(product)]

        self._apply_optimistic(previous, items)

        try:
            await self._client.add_to_cart(product.product_id, quantity=1, variant=product.variant)
        except ApiError as e:
            raise self._rollback(previous, e, "Failed to add item") from e

        logger.info(f"Added {product.name} ({product.product_id}) to cart")
        await self.fetch_cart()

    async def increment_item(self, line_id: str) -> None:
        await self._change_quantity(line_id, +1)

    async def decrement_item(self, line_id: str) -> None:
        item = self.find_line(line_id)
        if item is not None and item.quantity <= 1:
            await self.remove_item(line_id)
            return
        await self._change_quantity(line_id, -1)

    async def _change_quantity(self, line_id: str, delta: int) -> None:
        previous = self._state
        item = self.find_line(line_id)
        if item is None:
            logger.debug(f"Ignoring quantity change for unknown line {line_id!r}")
            return

        quantity = item.quantity + delta
        items = [
            i.model_copy(update={"quantity": quantity}) if i is item else i
            for i in previous.items
        ]
        self._apply_optimistic(previous, items)

        try:
            await self._client.update_cart_item(line_id, quantity)
        except ApiError as e:
            raise self._rollback(previous, e, "Update failed") from e

        await self.fetch_cart()

    async def remove_item(self, line_id: str) -> None:
        previous = self._state
        if self.find_line(line_id) is None:
            logger.debug(f"Ignoring removal of unknown line {line_id!r}")
            return

        items = [i for i in previous.items if i.line_id != line_id]
        self._apply_optimistic(previous, items)

        try:
            await self._client.remove_cart_item(line_id)
        except ApiError as e:
            raise self._rollback(previous, e, "Remove failed") from e

        await self.fetch_cart()

    async def clear_cart(self) -> None:
        """Reset to the empty cart; the whole prior snapshot is restored on failure"""
        previous = self._state
        self._set_state(CartState())

        try:
            await self._client.clear_cart()
        except ApiError as e:
            raise self._rollback(previous, e, "Failed to clear cart") from e

        await self.fetch_cart()

    # ==================== Coupons ====================

    async def apply_coupon(self, code: str) -> None:
        """
        Apply a coupon code. Waits for the server; nothing is optimistic.

        Raises:
            ValidationError: empty code (no request is made)
            CouponRejectedError: server refused; `shortfall` is set when the
                cart is below the coupon's minimum order value
        """
        code = (code or "").strip()
        if not code:
            self._notifier.error("Please enter a coupon code")
            raise ValidationError("Coupon code is required")

        try:
            await self._client.apply_coupon(code)
        except ApiError as e:
            shortfall = shortfall_from_error(e, self.totals.items_subtotal)
            if shortfall:
                message = f"Add {self._currency_symbol}{shortfall:.0f} more to use this coupon!"
                self._notifier.warning(message, duration_ms=4000)
                raise CouponRejectedError(message, shortfall=shortfall) from e

            message = e.message if e.message and not e.is_network_error else "Could not apply coupon"
            self._notifier.error(message)
            raise CouponRejectedError(message) from e

        # Only one coupon per cart; the server replaced whatever was there
        self._set_state(self._state.model_copy(update={"applied_coupon": None}))
        await self.fetch_cart()

        coupon = self.applied_coupon
        if coupon:
            logger.info(f"Coupon {coupon.code} applied: -{coupon.discount_amount}")
            self._notifier.success(f"Saved {self._currency_symbol}{coupon.discount_amount:.0f}!")
        else:
            self._notifier.success("Coupon applied")

    async def remove_coupon(self) -> None:
        try:
            await self._client.remove_coupon()
        except ApiError as e:
            self._notifier.error("Failed to remove coupon")
            raise CartSyncError("Failed to remove coupon") from e

        self._set_state(self._state.model_copy(update={"applied_coupon": None}))
        await self.fetch_cart()
        self._notifier.success("Coupon removed")
