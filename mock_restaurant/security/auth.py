"""
Customer authentication for the mock restaurant

Bearer tokens are HS256 JWTs whose subject is the customer id.
"""

import os
import time
import logging
from typing import Optional

import jwt
from fastapi import Header, HTTPException

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
TOKEN_TTL_SECONDS = 24 * 60 * 60


def _jwt_secret() -> str:
    return os.getenv("AUTH_TOKEN_SECRET", "mock-restaurant-development-secret-key")


def issue_token(user_id: str, ttl_seconds: int = TOKEN_TTL_SECONDS) -> str:
    """Create a signed bearer token for a customer"""
    now = int(time.time())
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + ttl_seconds,
    }
    return jwt.encode(payload, _jwt_secret(), algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> str:
    """Return the customer id of a valid token; raises jwt.InvalidTokenError"""
    payload = jwt.decode(token, _jwt_secret(), algorithms=[JWT_ALGORITHM])
    user_id = payload.get("sub")
    if not user_id:
        raise jwt.InvalidTokenError("Token has no subject")
    return user_id


async def current_user(authorization: Optional[str] = Header(None)) -> str:
    """FastAPI dependency: the authenticated customer id"""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        return decode_token(authorization[len("Bearer "):])
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token")
