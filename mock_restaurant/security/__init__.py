# Security modules

from .auth import current_user, decode_token, issue_token
from .signatures import SignatureCheck, sign_payment, verify_payment

__all__ = [
    "current_user",
    "decode_token",
    "issue_token",
    "SignatureCheck",
    "sign_payment",
    "verify_payment",
]
