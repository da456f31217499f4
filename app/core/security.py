"""
Admin Session Tokens - Best Outgoing Student Award Portal
app/core/security.py

Admin sessions are a signed token ``<issued_at_ms>.<hex hmac-sha256>``
stored in an httpOnly cookie. No server-side session state is kept.
"""

import hashlib
import hmac
import time
from typing import Optional

from app.config import get_settings


def _secret() -> bytes:
    return get_settings().ADMIN_SECRET.get_secret_value().encode()


def sign_token(payload: str, secret: Optional[bytes] = None) -> str:
    return hmac.new(secret or _secret(), payload.encode(), hashlib.sha256).hexdigest()


def create_admin_token(now_ms: Optional[int] = None) -> str:
    """Issue a token stamped with the current time in milliseconds."""
    issued_at = str(now_ms if now_ms is not None else int(time.time() * 1000))
    return f"{issued_at}.{sign_token(issued_at)}"


def verify_admin_token(token: Optional[str], now_ms: Optional[int] = None) -> bool:
    """True when the token is well-formed, unexpired and correctly signed."""
    if not token or token.count(".") != 1:
        return False
    issued_at, signature = token.split(".")
    if not issued_at.isdigit() or not signature:
        return False

    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    max_age_ms = get_settings().ADMIN_TOKEN_TTL_HOURS * 60 * 60 * 1000
    if now_ms - int(issued_at) > max_age_ms:
        return False

    return hmac.compare_digest(signature, sign_token(issued_at))


def check_admin_password(candidate: str) -> bool:
    """Constant-time comparison against ADMIN_PASSWORD (False when unset)."""
    configured = get_settings().ADMIN_PASSWORD
    if configured is None:
        return False
    return hmac.compare_digest(candidate.encode(), configured.get_secret_value().encode())
