"""
Payment signature checks

The gateway signs `<gateway_order_id>|<payment_id>` with HMAC-SHA256
under the merchant's key secret; the hex digest is the signature the
storefront forwards with the order.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

logger = logging.getLogger(__name__)

DEFAULT_KEY_SECRET = "mock_gateway_key_secret"


@dataclass
class SignatureCheck:
    """Result of payment signature verification"""
    is_valid: bool
    error_message: Optional[str] = None


def get_key_secret() -> str:
    return os.getenv("PAYMENT_KEY_SECRET", DEFAULT_KEY_SECRET)


def _mac(key_secret: str, gateway_order_id: str, payment_id: str) -> hmac.HMAC:
    mac = hmac.HMAC(key_secret.encode(), hashes.SHA256())
    mac.update(f"{gateway_order_id}|{payment_id}".encode())
    return mac


def sign_payment(gateway_order_id: str, payment_id: str, key_secret: Optional[str] = None) -> str:
    """Hex HMAC-SHA256 signature for a captured payment"""
    return _mac(key_secret or get_key_secret(), gateway_order_id, payment_id).finalize().hex()


def verify_payment(
    gateway_order_id: Optional[str],
    payment_id: Optional[str],
    signature: Optional[str],
    key_secret: Optional[str] = None,
) -> SignatureCheck:
    """Verify the signature forwarded with an online order"""
    if not (gateway_order_id and payment_id and signature):
        return SignatureCheck(is_valid=False, error_message="Missing payment details")

    try:
        expected = bytes.fromhex(signature)
    except ValueError:
        return SignatureCheck(is_valid=False, error_message="Malformed payment signature")

    try:
        _mac(key_secret or get_key_secret(), gateway_order_id, payment_id).verify(expected)
    except InvalidSignature:
        logger.warning(f"Payment signature mismatch for {gateway_order_id}")
        return SignatureCheck(is_valid=False, error_message="Payment verification failed")

    return SignatureCheck(is_valid=True)
