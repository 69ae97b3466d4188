"""Order and payment routes for mock restaurant"""

import logging
from fastapi import APIRouter, HTTPException, Depends

from ..billing import compute_bill
from ..models.order import (
    Order,
    OrderResponse,
    PaymentMethod,
    PaymentOrderRequest,
    PaymentOrderResponse,
    PlaceOrderRequest,
)
from ..database.carts import cart_db
from ..database.coupons import coupon_db
from ..database.orders import order_db
from ..database.payments import payment_db
from ..database.restaurant import restaurant_db
from ..security.auth import current_user
from ..security.signatures import verify_payment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post("/payment/create", response_model=PaymentOrderResponse)
async def create_payment_order(
    request: PaymentOrderRequest,
    user_id: str = Depends(current_user),
):
    """
    Open a gateway transaction for the current cart.

    The amount charged is the server's bill, not the client's figure.
    No restaurant order is created here.
    """
    cart = cart_db.get_cart(user_id)
    if not cart.items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    bill = compute_bill(cart, request.drop_coordinates())
    amount_minor = round(bill.final_total * 100)
    if round(request.amount) != round(bill.final_total):
        logger.info(
            f"{user_id}: client amount {request.amount} differs from bill {bill.final_total}"
        )

    gateway_order = payment_db.create_order(user_id, amount_minor)
    logger.info(f"Gateway order {gateway_order.id} opened for {user_id}: {amount_minor} paise")

    return PaymentOrderResponse(
        razorpay_order_id=gateway_order.id,
        amount=gateway_order.amount,
        currency=gateway_order.currency,
    )


@router.post("", response_model=OrderResponse, status_code=201)
async def place_order(
    request: PlaceOrderRequest,
    user_id: str = Depends(current_user),
):
    """
    Persist an order from the customer's cart.

    ONLINE orders must carry a gateway order id, payment id and a valid
    signature; each payment can back at most one order.
    """
    if not restaurant_db.get().is_open:
        raise HTTPException(status_code=400, detail="Restaurant is currently offline")

    if request.payment_method == PaymentMethod.ONLINE:
        gateway_order = payment_db.get_order(request.razorpay_order_id or "")
        if not gateway_order or gateway_order.user_id != user_id:
            raise HTTPException(status_code=400, detail="Unknown payment order")

        check = verify_payment(
            request.razorpay_order_id,
            request.razorpay_payment_id,
            request.razorpay_signature,
        )
        if not check.is_valid:
            raise HTTPException(status_code=400, detail=check.error_message)

        if order_db.find_by_payment_id(request.razorpay_payment_id):
            raise HTTPException(status_code=409, detail="Order already exists for this payment")

    cart = cart_db.get_cart(user_id)
    if not cart.items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    bill = compute_bill(cart, request.delivery_coordinates)
    order = order_db.create_order(user_id, cart, bill, request)

    if request.payment_method == PaymentMethod.ONLINE:
        payment_db.mark_paid(request.razorpay_order_id, request.razorpay_payment_id)
    if order.coupon_code:
        coupon_db.mark_used(order.coupon_code)

    cart_db.clear_cart(user_id)

    logger.info(
        f"Order {order.id} placed by {user_id}: {order.final_amount} "
        f"({order.payment_method.value})"
    )
    return OrderResponse(order=order, message="Order placed successfully")


@router.get("/my-orders", response_model=list[Order])
async def list_my_orders(user_id: str = Depends(current_user)):
    """Customer's recent orders"""
    return order_db.list_for_user(user_id)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user_id: str = Depends(current_user)):
    """Get order details"""
    order = order_db.get_order(order_id)
    if not order or order.user_id != user_id:
        raise HTTPException(status_code=404, detail="Order not found")
    return OrderResponse(order=order)
