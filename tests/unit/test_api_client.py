"""
Unit tests for the restaurant API client's error mapping.
"""

import json

import httpx
import pytest

from storefront.exceptions import ApiError, NotAuthenticatedError
from storefront.models import DeliveryLocation
from storefront.services import RestaurantApiClient


def client_for(handler, token="token-1"):
    return RestaurantApiClient(
        "http://restaurant.test/",
        auth_token=token,
        transport=httpx.MockTransport(handler),
    )


class TestRequests:

    async def test_bearer_token_and_query(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"items": [], "totalPrice": 0})

        client = client_for(handler)
        body = await client.get_cart(DeliveryLocation(lat=12.5, lng=77.25))
        await client.close()

        assert body == {"items": [], "totalPrice": 0}
        assert seen["auth"] == "Bearer token-1"
        assert seen["url"] == "http://restaurant.test/api/cart?lat=12.5&lng=77.25"

    async def test_camel_case_body(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={})

        client = client_for(handler)
        await client.add_to_cart("dish-004", quantity=1, variant="Half")
        await client.close()

        assert seen["body"] == {"productId": "dish-004", "quantity": 1, "variant": "Half"}

    async def test_public_endpoint_without_token(self):
        def handler(request):
            assert "Authorization" not in request.headers
            return httpx.Response(200, json=[])

        client = client_for(handler, token=None)
        assert await client.list_coupons() == []
        await client.close()


class TestErrors:
    """Tests for mapping failures to ApiError."""

    async def test_missing_token_makes_no_request(self):
        def handler(request):
            raise AssertionError("request should not be sent")

        client = client_for(handler, token=None)
        with pytest.raises(NotAuthenticatedError):
            await client.get_cart()
        await client.close()

    async def test_401(self):
        client = client_for(lambda request: httpx.Response(401, json={"message": "Not authenticated"}))

        with pytest.raises(NotAuthenticatedError) as exc_info:
            await client.get_bill()
        await client.close()

        assert exc_info.value.status_code == 401

    async def test_server_message_and_payload(self):
        detail = {"message": "Minimum order value of ₹200 required", "minOrderValue": 200, "shortfall": 100}
        client = client_for(lambda request: httpx.Response(400, json=detail))

        with pytest.raises(ApiError) as exc_info:
            await client.apply_coupon("SAVE50")
        await client.close()

        error = exc_info.value
        assert error.message == "Minimum order value of ₹200 required"
        assert error.status_code == 400
        assert error.payload["shortfall"] == 100
        assert not error.is_network_error

    async def test_detail_field(self):
        client = client_for(lambda request: httpx.Response(404, json={"detail": "Item not in cart"}))

        with pytest.raises(ApiError, match="Item not in cart"):
            await client.remove_cart_item("line-1")
        await client.close()

    async def test_non_json_error(self):
        client = client_for(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))

        with pytest.raises(ApiError) as exc_info:
            await client.place_order({})
        await client.close()

        assert exc_info.value.message == "Bad Gateway"

    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = client_for(handler)
        with pytest.raises(ApiError) as exc_info:
            await client.get_cart()
        await client.close()

        assert exc_info.value.is_network_error
        assert exc_info.value.message.startswith("Network error")
