"""
Restaurant API Client

HTTP client for the restaurant's cart, coupon, payment and order APIs.
Attaches the customer's bearer token to authenticated requests.
"""

import logging
from typing import Any, Optional

import httpx

from ..exceptions import ApiError, NotAuthenticatedError
from ..models.cart import DeliveryLocation

logger = logging.getLogger(__name__)


class RestaurantApiClient:
    """
    Client for the restaurant REST API.

    Every method returns the decoded JSON body. Non-2xx responses and
    transport failures are raised as ApiError; HTTP 401 (or calling an
    authenticated endpoint without a token) raises NotAuthenticatedError.
    """

    def __init__(
        self,
        base_url: str,
        auth_token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the restaurant API
            auth_token: Bearer token of the signed-in customer
            timeout: Request timeout in seconds
            transport: Optional httpx transport (in-process apps, tests)
        """
        self.base_url = base_url.rstrip("/")
        self._auth_token = auth_token
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    @property
    def is_authenticated(self) -> bool:
        return bool(self._auth_token)

    def set_auth_token(self, token: Optional[str]) -> None:
        self._auth_token = token

    def _generate_headers(self, auth: bool) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if auth and self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        return headers

    @staticmethod
    def _error_from_response(response: httpx.Response) -> ApiError:
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        message = payload.get("message") or payload.get("detail")
        if not isinstance(message, str):
            message = response.reason_phrase or f"HTTP {response.status_code}"

        error_class = NotAuthenticatedError if response.status_code == 401 else ApiError
        return error_class(message, status_code=response.status_code, payload=payload)

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
        auth: bool = True,
    ) -> Any:
        """Make an HTTP request and decode the JSON response"""
        if auth and not self._auth_token:
            raise NotAuthenticatedError("Not signed in")

        url = f"{self.base_url}{path}"

        try:
            response = await self._http_client.request(
                method=method,
                url=url,
                headers=self._generate_headers(auth),
                json=body,
                params=params,
            )
        except httpx.HTTPError as e:
            logger.error(f"Request failed: {method} {path} - {e}")
            raise ApiError(f"Network error: {e}") from e

        if response.status_code >= 400:
            error = self._error_from_response(response)
            if isinstance(error, NotAuthenticatedError):
                logger.debug(f"Request unauthenticated: {method} {path}")
            else:
                logger.error(f"Request failed: {response.status_code} - {response.text}")
            raise error

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid response: {method} {path} - {response.status_code} {response.text[:200]}")
            raise ApiError(
                "Invalid response from server",
                status_code=response.status_code,
            ) from e

    # ==================== Cart APIs ====================

    async def get_cart(self, location: Optional[DeliveryLocation] = None) -> dict:
        """Get the customer's cart"""
        params = location.to_params() if location else None
        return await self._request("GET", "/api/cart", params=params)

    async def get_bill(self, location: Optional[DeliveryLocation] = None) -> dict:
        """Get the server-computed bill for the cart"""
        params = location.to_params() if location else None
        return await self._request("GET", "/api/cart/bill", params=params)

    async def add_to_cart(
        self,
        product_id: str,
        quantity: int = 1,
        variant: Optional[str] = None,
    ) -> dict:
        """Add a product to the cart"""
        body: dict[str, Any] = {"productId": product_id, "quantity": quantity}
        if variant:
            body["variant"] = variant
        return await self._request("POST", "/api/cart", body=body)

    async def update_cart_item(self, line_id: str, quantity: int) -> dict:
        """Set the quantity of a cart line"""
        return await self._request("PUT", f"/api/cart/{line_id}", body={"quantity": quantity})

    async def remove_cart_item(self, line_id: str) -> dict:
        """Remove a cart line"""
        return await self._request("DELETE", f"/api/cart/{line_id}")

    async def clear_cart(self) -> dict:
        """Remove every line and the applied coupon"""
        return await self._request("DELETE", "/api/cart")

    async def apply_coupon(self, code: str) -> dict:
        """Attach a coupon to the cart"""
        return await self._request("POST", "/api/cart/coupon", body={"code": code})

    async def remove_coupon(self) -> dict:
        """Detach the applied coupon"""
        return await self._request("DELETE", "/api/cart/coupon")

    # ==================== Coupon APIs ====================

    async def list_coupons(self) -> list[dict]:
        """Get the public coupon catalog"""
        return await self._request("GET", "/api/coupons", auth=False)

    # ==================== Payment & Order APIs ====================

    async def create_payment_order(
        self,
        amount: int,
        items: list[dict],
        delivery_address: Any,
        delivery_fee: Optional[float] = None,
    ) -> dict:
        """
        Open a payment-gateway transaction.

        No order is persisted by this call.
        """
        body: dict[str, Any] = {
            "amount": amount,
            "items": items,
            "deliveryAddress": delivery_address,
        }
        if delivery_fee is not None:
            body["deliveryFee"] = delivery_fee
        return await self._request("POST", "/api/orders/payment/create", body=body)

    async def place_order(self, payload: dict) -> dict:
        """Persist an order"""
        return await self._request("POST", "/api/orders", body=payload)

    async def get_order(self, order_id: str) -> dict:
        """Get order details"""
        return await self._request("GET", f"/api/orders/{order_id}")

    # ==================== Restaurant & Menu APIs ====================

    async def get_restaurant(self) -> dict:
        """Get restaurant status (open/closed, location)"""
        return await self._request("GET", "/api/restaurant", auth=False)

    async def get_menu(
        self,
        category: Optional[str] = None,
        food_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[dict]:
        """List menu products"""
        params = {}
        if category:
            params["category"] = category
        if food_type:
            params["type"] = food_type
        if search:
            params["search"] = search
        return await self._request("GET", "/api/menu", params=params or None, auth=False)
