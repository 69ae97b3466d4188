"""Storefront exceptions"""

from typing import Any, Optional


class StorefrontError(Exception):
    """Base exception for storefront errors"""
    pass


class ApiError(StorefrontError):
    """Restaurant API request failed (non-2xx response or transport error)"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

    @property
    def is_network_error(self) -> bool:
        return self.status_code is None


class NotAuthenticatedError(ApiError):
    """No valid session for the request"""
    pass


class ValidationError(StorefrontError):
    """Input rejected before any network call"""
    pass


class CartSyncError(StorefrontError):
    """A cart mutation failed and local state was rolled back"""
    pass


class CouponRejectedError(CartSyncError):
    """Coupon could not be applied"""

    def __init__(self, message: str, shortfall: Optional[float] = None):
        super().__init__(message)
        self.shortfall = shortfall
