"""
Integration tests for the mock restaurant API.
"""

from mock_restaurant.database import coupon_db, order_db, payment_db, restaurant_db
from mock_restaurant.security.signatures import sign_payment

NEARBY = {"lat": 12.9716, "lng": 77.5946}
FAR = {"lat": 13.0358, "lng": 77.5970}


async def add(server, product_id, quantity=1, variant=None):
    body = {"productId": product_id, "quantity": quantity}
    if variant:
        body["variant"] = variant
    response = await server.post("/api/cart", json=body)
    assert response.status_code == 200, response.text
    return response.json()


async def paid_order_payload(server):
    """Open a gateway order and sign a payment for it."""
    response = await server.post("/api/orders/payment/create", json={"amount": 0, "items": []})
    gateway_order_id = response.json()["razorpayOrderId"]
    payment_id = "pay_test_1"
    return {
        "items": [],
        "totalAmount": 0,
        "deliveryAddress": "addr-1",
        "paymentMethod": "ONLINE",
        "razorpayOrderId": gateway_order_id,
        "razorpayPaymentId": payment_id,
        "razorpaySignature": sign_payment(gateway_order_id, payment_id),
    }


class TestPublicEndpoints:

    async def test_health(self, server):
        response = await server.get("/health")
        assert response.json() == {"status": "healthy", "service": "mock-restaurant"}

    async def test_menu_filters(self, server):
        veg = (await server.get("/api/menu", params={"type": "Veg"})).json()
        assert {item["_id"] for item in veg} == {"dish-001", "dish-002", "dish-003", "dish-005", "dish-007"}

        found = (await server.get("/api/menu", params={"search": "biryani"})).json()
        assert [item["name"] for item in found] == ["Chicken Biryani"]
        assert "imageURL" in found[0]

    async def test_unavailable_dish_hidden(self, server):
        ids = [item["_id"] for item in (await server.get("/api/menu")).json()]
        assert "dish-008" not in ids

    async def test_restaurant_status(self, server):
        body = (await server.get("/api/restaurant")).json()
        assert body["isOpen"] is True
        assert body["location"] == NEARBY

        closed = await server.put("/api/restaurant/status", json={"isOpen": False})
        assert closed.json()["isOpen"] is False

    async def test_coupon_catalog(self, server):
        coupons = (await server.get("/api/coupons")).json()
        feast = next(c for c in coupons if c["code"] == "FEAST20")

        assert feast["discountType"] == "PERCENTAGE"
        assert feast["discountPercent"] == 20
        assert feast["maxDiscountAmount"] == 120
        assert feast["isActive"] is True
        assert "_id" in feast

    async def test_validate_coupon(self, server):
        response = await server.post("/api/coupons/validate", json={"code": "feast20", "orderTotal": 1000})
        assert response.json() == {"valid": True, "discount": 120, "message": "Coupon is valid"}

        expired = await server.post("/api/coupons/validate", json={"code": "MONSOON30", "orderTotal": 1000})
        assert expired.json()["message"] == "Coupon has expired"


class TestAuthentication:

    async def test_missing_token(self, transport):
        import httpx

        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as anonymous:
            response = await anonymous.get("/api/cart")

        assert response.status_code == 401
        assert response.json() == {"message": "Not authenticated"}

    async def test_validation_errors_have_message(self, server):
        response = await server.post("/api/cart", json={"quantity": 1})

        assert response.status_code == 422
        assert "productId" in response.json()["message"]


class TestCart:
    """Tests for server-side cart rules."""

    async def test_lines_keyed_by_product_and_variant(self, server):
        await add(server, "dish-004", variant="Half")
        await add(server, "dish-004", variant="Half")
        cart = await add(server, "dish-004", variant="Full")

        assert [(line["variant"], line["quantity"], line["price"]) for line in cart["items"]] == [
            ("Half", 2, 220),
            ("Full", 1, 380),
        ]
        assert cart["totalPrice"] == 820
        assert all(line["_id"].startswith("line-") for line in cart["items"])

    async def test_unknown_variant(self, server):
        response = await server.post("/api/cart", json={"productId": "dish-004", "variant": "Jumbo"})
        assert response.status_code == 400

    async def test_unavailable_dish(self, server):
        response = await server.post("/api/cart", json={"productId": "dish-008"})
        assert response.json() == {"message": "Mutton Rogan Josh is currently unavailable"}

    async def test_update_and_remove_line(self, server):
        cart = await add(server, "dish-001")
        line_id = cart["items"][0]["_id"]

        updated = (await server.put(f"/api/cart/{line_id}", json={"quantity": 4})).json()
        assert updated["items"][0]["quantity"] == 4

        removed = (await server.delete(f"/api/cart/{line_id}")).json()
        assert removed["items"] == []

        missing = await server.delete(f"/api/cart/{line_id}")
        assert missing.status_code == 404

    async def test_carts_are_per_customer(self, server, transport):
        import httpx
        from mock_restaurant.security.auth import issue_token

        await add(server, "dish-001")
        async with httpx.AsyncClient(
            transport=transport,
            base_url="http://testserver",
            headers={"Authorization": f"Bearer {issue_token('customer-2')}"},
        ) as other:
            cart = (await other.get("/api/cart")).json()

        assert cart["items"] == []


class TestBill:
    """Tests for tax, delivery fee and discount computation."""

    async def test_intrastate_gst(self, server):
        await add(server, "dish-002", quantity=2)

        bill = (await server.get("/api/cart/bill", params=NEARBY)).json()

        assert bill["itemsTotal"] == 200
        assert bill["taxBreakdown"] == {"cgst": 5, "sgst": 5, "igst": 0}
        assert bill["tax"] == 10
        assert bill["shipping"] == 30
        assert bill["finalTotal"] == 240

    async def test_interstate_igst(self, server):
        restaurant_db.get().interstate = True
        await add(server, "dish-002", quantity=2)

        bill = (await server.get("/api/cart/bill", params=NEARBY)).json()

        assert bill["taxBreakdown"] == {"cgst": 0, "sgst": 0, "igst": 10}

    async def test_delivery_fee_by_distance(self, server):
        await add(server, "dish-001")

        far = (await server.get("/api/cart/bill", params=FAR)).json()
        unknown = (await server.get("/api/cart/bill")).json()

        assert far["shipping"] == 70
        assert unknown["shipping"] == 40

    async def test_empty_cart_has_no_fee(self, server):
        bill = (await server.get("/api/cart/bill", params=NEARBY)).json()
        assert bill["shipping"] == 0
        assert bill["finalTotal"] == 0

    async def test_discount_is_taxed_after(self, server):
        await add(server, "dish-002", quantity=2)
        await server.post("/api/cart/coupon", json={"code": "SAVE50"})

        bill = (await server.get("/api/cart/bill", params=NEARBY)).json()

        assert bill["discount"] == 50
        assert bill["tax"] == 7.5
        assert bill["finalTotal"] == 187.5
        assert bill["appliedCoupon"] == {"code": "SAVE50", "discountAmount": 50, "minOrderValue": 200}


class TestCoupons:

    async def test_shortfall_detail(self, server):
        await add(server, "dish-002")

        response = await server.post("/api/cart/coupon", json={"code": "SAVE50"})

        assert response.status_code == 400
        assert response.json() == {
            "message": "Minimum order value of ₹200 required for this coupon",
            "minOrderValue": 200,
            "shortfall": 100,
        }

    async def test_expired_coupon(self, server):
        await add(server, "dish-006", quantity=3)

        response = await server.post("/api/cart/coupon", json={"code": "MONSOON30"})

        assert response.json() == {"message": "Coupon has expired"}

    async def test_unknown_coupon(self, server):
        response = await server.post("/api/cart/coupon", json={"code": "BOGUS"})
        assert response.status_code == 404

    async def test_replace_and_remove(self, server):
        await add(server, "dish-006", quantity=2)

        first = (await server.post("/api/cart/coupon", json={"code": "SAVE50"})).json()
        second = (await server.post("/api/cart/coupon", json={"code": "feast20"})).json()
        removed = (await server.delete("/api/cart/coupon")).json()

        assert first["appliedCoupon"]["code"] == "SAVE50"
        assert second["appliedCoupon"] == {"code": "FEAST20", "discountAmount": 120, "minOrderValue": 500}
        assert removed["appliedCoupon"] is None

    async def test_clear_cart_drops_coupon(self, server):
        await add(server, "dish-006", quantity=2)
        await server.post("/api/cart/coupon", json={"code": "SAVE50"})

        cleared = (await server.delete("/api/cart")).json()

        assert cleared["items"] == []
        assert cleared["appliedCoupon"] is None


class TestOrders:
    """Tests for payment orders and order placement."""

    async def test_payment_order_uses_server_bill(self, server):
        await add(server, "dish-002", quantity=2)

        response = await server.post(
            "/api/orders/payment/create",
            json={"amount": 1, "items": [], "deliveryAddress": {"_id": "addr-1", "coordinates": NEARBY}},
        )

        body = response.json()
        assert body["razorpayOrderId"].startswith("order_")
        assert body["amount"] == 24000
        assert body["currency"] == "INR"
        assert order_db.list_for_user("customer-1") == []

    async def test_payment_order_needs_items(self, server):
        response = await server.post("/api/orders/payment/create", json={"amount": 0})
        assert response.json() == {"message": "Cart is empty"}

    async def test_cod_order(self, server):
        await add(server, "dish-006", quantity=2)
        await server.post("/api/cart/coupon", json={"code": "SAVE50"})

        response = await server.post("/api/orders", json={
            "items": [],
            "totalAmount": 640,
            "deliveryAddress": "addr-1",
            "deliveryCoordinates": NEARBY,
            "paymentMethod": "COD",
        })

        assert response.status_code == 201
        order = response.json()["order"]
        assert order["paymentStatus"] == "PENDING"
        assert order["couponCode"] == "SAVE50"
        assert order["discountApplied"] == 50
        assert coupon_db.get_by_code("SAVE50").used_count == 1
        assert (await server.get("/api/cart")).json()["items"] == []

        fetched = (await server.get(f"/api/orders/{order['_id']}")).json()
        assert fetched["order"]["_id"] == order["_id"]
        mine = (await server.get("/api/orders/my-orders")).json()
        assert [o["_id"] for o in mine] == [order["_id"]]

    async def test_closed_restaurant(self, server):
        await add(server, "dish-001")
        restaurant_db.set_open(False)

        response = await server.post("/api/orders", json={
            "totalAmount": 120,
            "deliveryAddress": "addr-1",
            "paymentMethod": "COD",
        })

        assert response.status_code == 400
        assert response.json() == {"message": "Restaurant is currently offline"}

    async def test_empty_cart(self, server):
        response = await server.post("/api/orders", json={"totalAmount": 0, "paymentMethod": "COD"})
        assert response.json() == {"message": "Cart is empty"}

    async def test_online_order(self, server):
        await add(server, "dish-001")
        payload = await paid_order_payload(server)

        response = await server.post("/api/orders", json=payload)

        assert response.status_code == 201
        order = response.json()["order"]
        assert order["paymentStatus"] == "PAID"
        assert payment_db.get_order(payload["razorpayOrderId"]).status == "paid"

    async def test_online_order_bad_signature(self, server):
        await add(server, "dish-001")
        payload = await paid_order_payload(server)
        payload["razorpaySignature"] = sign_payment(payload["razorpayOrderId"], "pay_other")

        response = await server.post("/api/orders", json=payload)

        assert response.status_code == 400
        assert response.json() == {"message": "Payment verification failed"}
        assert order_db.list_for_user("customer-1") == []

    async def test_online_order_unknown_gateway_order(self, server):
        await add(server, "dish-001")
        response = await server.post("/api/orders", json={
            "totalAmount": 120,
            "paymentMethod": "ONLINE",
            "razorpayOrderId": "order_missing",
            "razorpayPaymentId": "pay_1",
            "razorpaySignature": sign_payment("order_missing", "pay_1"),
        })
        assert response.json() == {"message": "Unknown payment order"}

    async def test_one_order_per_payment(self, server):
        await add(server, "dish-001")
        payload = await paid_order_payload(server)
        assert (await server.post("/api/orders", json=payload)).status_code == 201

        await add(server, "dish-001")
        duplicate = await server.post("/api/orders", json=payload)

        assert duplicate.status_code == 409
        assert len(order_db.list_for_user("customer-1")) == 1

    async def test_other_customers_order_hidden(self, server):
        response = await server.get("/api/orders/ord-unknown")
        assert response.status_code == 404
        assert response.json() == {"message": "Order not found"}
