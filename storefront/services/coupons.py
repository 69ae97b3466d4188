"""
Coupon eligibility

Ranks the coupon catalog against the cart subtotal and drives
apply/remove round trips through the cart store.
"""

import re
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Optional

from ..exceptions import ApiError, ValidationError
from ..models.coupon import Coupon, DiscountType
from ..notifications import Notifier

if TYPE_CHECKING:
    from .api_client import RestaurantApiClient
    from .cart_store import CartStore

logger = logging.getLogger(__name__)

_AMOUNT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)")


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_expired(coupon: Coupon, now: datetime) -> bool:
    """Inactive, or past its validity window"""
    if not coupon.is_active:
        return True
    if coupon.valid_until and _utc(coupon.valid_until) < _utc(now):
        return True
    return False


def is_eligible(coupon: Coupon, subtotal: float, now: datetime) -> bool:
    if is_expired(coupon, now):
        return False
    if coupon.min_order_value and subtotal < coupon.min_order_value:
        return False
    return True


def coupon_shortfall(coupon: Coupon, subtotal: float) -> float:
    """How much more the cart needs before the coupon qualifies"""
    if coupon.min_order_value and subtotal < coupon.min_order_value:
        return round(coupon.min_order_value - subtotal, 2)
    return 0.0


def pick_best_coupon(coupons: list[Coupon], now: datetime) -> Optional[Coupon]:
    """
    Pick the featured coupon.

    Percentage coupons are compared by percent and flat coupons by amount,
    without converting one into the other. Ties keep the earlier coupon.
    """
    best = None
    for coupon in coupons:
        if is_expired(coupon, now):
            continue
        if best is None or coupon.magnitude > best.magnitude:
            best = coupon
    return best


def discount_label(coupon: Coupon, currency_symbol: str = "₹") -> str:
    if coupon.discount_type == DiscountType.PERCENTAGE:
        return f"{coupon.discount_percent:g}% OFF"
    return f"{currency_symbol}{coupon.discount_amount:g} OFF"


def shortfall_from_error(error: ApiError, subtotal: float) -> Optional[float]:
    """
    Work out how much the cart falls short of a coupon's minimum order.

    Reads the structured `shortfall` / `minOrderValue` fields of the error
    body first; older servers only put the figure in the message text, so
    the first number found there is used as the minimum order value.
    """
    payload = error.payload or {}

    if payload.get("shortfall") is not None:
        try:
            shortfall = float(payload["shortfall"])
        except (TypeError, ValueError):
            shortfall = 0.0
        return round(shortfall, 2) if shortfall > 0 else None

    min_order = payload.get("minOrderValue")
    if min_order is None:
        match = _AMOUNT_PATTERN.search(error.message or "")
        if not match:
            return None
        min_order = match.group(1)

    try:
        deficit = float(min_order) - subtotal
    except (TypeError, ValueError):
        return None
    return round(deficit, 2) if deficit > 0 else None


class CouponEngine:
    """Coupon catalog view bound to the live cart subtotal"""

    def __init__(
        self,
        client: "RestaurantApiClient",
        store: "CartStore",
        notifier: Notifier,
        clock: Optional[Callable[[], datetime]] = None,
        currency_symbol: str = "₹",
    ):
        self._client = client
        self._store = store
        self._notifier = notifier
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._currency_symbol = currency_symbol
        self._coupons: Optional[list[Coupon]] = None

    @property
    def coupons(self) -> list[Coupon]:
        return list(self._coupons or [])

    @property
    def subtotal(self) -> float:
        return self._store.totals.items_subtotal

    async def load(self, force: bool = False) -> list[Coupon]:
        """Fetch the coupon catalog once; later calls reuse it unless forced"""
        if self._coupons is not None and not force:
            return self.coupons

        try:
            raw = await self._client.list_coupons()
        except ApiError as e:
            logger.warning(f"Coupon catalog unavailable: {e.message}")
            self._notifier.warning("Could not load coupons")
            return self.coupons

        coupons = []
        for item in raw or []:
            try:
                coupons.append(Coupon.from_wire(item))
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed coupon {item!r}: {e}")
        self._coupons = coupons
        logger.debug(f"Loaded {len(self._coupons)} coupons")
        return self.coupons

    async def refresh(self) -> list[Coupon]:
        return await self.load(force=True)

    def is_expired(self, coupon: Coupon) -> bool:
        return is_expired(coupon, self._clock())

    def is_eligible(self, coupon: Coupon, subtotal: Optional[float] = None) -> bool:
        return is_eligible(
            coupon,
            self.subtotal if subtotal is None else subtotal,
            self._clock(),
        )

    def shortfall(self, coupon: Coupon, subtotal: Optional[float] = None) -> float:
        return coupon_shortfall(coupon, self.subtotal if subtotal is None else subtotal)

    @property
    def best_coupon(self) -> Optional[Coupon]:
        return pick_best_coupon(self.coupons, self._clock())

    @property
    def eligible_coupons(self) -> list[Coupon]:
        return [c for c in self.coupons if self.is_eligible(c)]

    @property
    def other_coupons(self) -> list[Coupon]:
        best = self.best_coupon
        if best is None:
            return self.coupons
        return [c for c in self.coupons if c.coupon_id != best.coupon_id]

    def discount_label(self, coupon: Coupon) -> str:
        return discount_label(coupon, self._currency_symbol)

    async def apply(self, code: str) -> None:
        """Apply a coupon; replaces any coupon already on the cart"""
        if not code or not code.strip():
            self._notifier.error("Please enter a coupon code")
            raise ValidationError("Coupon code is required")
        await self._store.apply_coupon(code.strip())

    async def remove(self) -> None:
        await self._store.remove_coupon()
