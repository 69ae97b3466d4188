"""Cart API routes for mock restaurant"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from ..billing import compute_bill
from ..models.cart import (
    AddToCartRequest,
    ApplyCouponRequest,
    Bill,
    Cart,
    CartResponse,
    UpdateCartItemRequest,
)
from ..models.restaurant import Coordinates
from ..database.carts import cart_db
from ..database.coupons import coupon_db
from ..database.menu import menu_db
from ..security.auth import current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def delivery_location(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
) -> Optional[Coordinates]:
    """Drop coordinates from the query string, if both are given"""
    if lat is None or lng is None:
        return None
    return Coordinates(lat=lat, lng=lng)


def _cart_response(cart: Cart, message: Optional[str] = None) -> CartResponse:
    bill = compute_bill(cart)
    return CartResponse(
        items=cart.items,
        total_price=cart.subtotal,
        applied_coupon=bill.applied_coupon,
        message=message,
    )


@router.get("", response_model=CartResponse)
async def get_cart(user_id: str = Depends(current_user)):
    """Get the customer's cart"""
    return _cart_response(cart_db.get_cart(user_id))


@router.get("/bill", response_model=Bill)
async def get_bill(
    user_id: str = Depends(current_user),
    location: Optional[Coordinates] = Depends(delivery_location),
):
    """Tax, delivery fee, discount and final total for the cart"""
    return compute_bill(cart_db.get_cart(user_id), location)


@router.post("", response_model=CartResponse)
async def add_to_cart(request: AddToCartRequest, user_id: str = Depends(current_user)):
    """Add a dish to the cart"""
    item = menu_db.get_item(request.product_id)
    if not item:
        raise HTTPException(status_code=404, detail="Product not found")

    if not item.is_available:
        raise HTTPException(status_code=400, detail=f"{item.name} is currently unavailable")

    unit_price = item.effective_price(request.variant)
    if unit_price is None:
        raise HTTPException(status_code=400, detail=f"Unknown variant {request.variant!r} for {item.name}")

    cart = cart_db.add_item(user_id, item, unit_price, request.quantity, request.variant)
    logger.info(f"{user_id}: added {request.quantity}x {item.name}")
    return _cart_response(cart, f"Added {request.quantity}x {item.name} to cart")


@router.delete("", response_model=CartResponse)
async def clear_cart(user_id: str = Depends(current_user)):
    """Remove every line and the applied coupon"""
    return _cart_response(cart_db.clear_cart(user_id), "Cart cleared")


# Coupon routes are declared before /{line_id} so "coupon" is not taken for a line id

@router.post("/coupon", response_model=CartResponse)
async def apply_coupon(request: ApplyCouponRequest, user_id: str = Depends(current_user)):
    """Attach a coupon; it replaces any coupon already applied"""
    coupon = coupon_db.get_by_code(request.code)
    if not coupon:
        raise HTTPException(status_code=404, detail="Invalid coupon code")

    cart = cart_db.get_cart(user_id)
    subtotal = cart.subtotal
    valid, reason = coupon.check(subtotal)

    if not valid:
        if subtotal < coupon.min_order_value:
            raise HTTPException(
                status_code=400,
                detail={
                    "message": reason,
                    "minOrderValue": coupon.min_order_value,
                    "shortfall": round(coupon.min_order_value - subtotal, 2),
                },
            )
        raise HTTPException(status_code=400, detail=reason)

    cart = cart_db.set_coupon(user_id, coupon.code)
    logger.info(f"{user_id}: applied coupon {coupon.code}")
    return _cart_response(cart, "Coupon applied")


@router.delete("/coupon", response_model=CartResponse)
async def remove_coupon(user_id: str = Depends(current_user)):
    """Detach the applied coupon"""
    return _cart_response(cart_db.set_coupon(user_id, None), "Coupon removed")


@router.put("/{line_id}", response_model=CartResponse)
async def update_cart_item(
    line_id: str,
    request: UpdateCartItemRequest,
    user_id: str = Depends(current_user),
):
    """Set the quantity of a cart line"""
    cart = cart_db.update_quantity(user_id, line_id, request.quantity)
    if not cart:
        raise HTTPException(status_code=404, detail="Item not in cart")
    return _cart_response(cart, "Cart updated")


@router.delete("/{line_id}", response_model=CartResponse)
async def remove_from_cart(line_id: str, user_id: str = Depends(current_user)):
    """Remove a cart line"""
    cart = cart_db.remove_item(user_id, line_id)
    if not cart:
        raise HTTPException(status_code=404, detail="Item not in cart")
    return _cart_response(cart, "Item removed")
