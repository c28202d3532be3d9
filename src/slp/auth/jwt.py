"""
HS256 access tokens signed with the server secret ``SLP_JWT_SECRET``.

Nothing is stored server-side. The ``id``, ``username`` and ``isAdmin`` claims
are trusted only once :func:`verify_token` has checked signature, expiry,
issuer and token type.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from slp.config import get_settings

ACCESS_TOKEN_TYPE = "access"
REQUIRED_CLAIMS = ["exp", "iat", "sub"]


def access_token_ttl() -> timedelta:
    return timedelta(minutes=get_settings().jwt_access_token_expire_minutes)


def create_access_token(user_id: int, username: str, is_admin: bool = False) -> str:
    """Sign an access token for a user; it expires ``access_token_ttl()`` after issue."""
    settings = get_settings()
    issued_at = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "id": user_id,
        "username": username,
        "isAdmin": bool(is_admin),
        "iat": issued_at,
        "exp": issued_at + access_token_ttl(),
        "iss": settings.jwt_issuer,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> dict[str, Any]:
    """
    Decode ``token`` and return its claims.

    Raises:
        jwt.InvalidTokenError: Bad signature, wrong issuer, missing required
            claim, expired, or a ``type`` other than ``expected_type``. Expiry
            is reported as a plain InvalidTokenError so callers handle every
            rejection the same way.
    """
    settings = get_settings()
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError:
        msg = "Token has expired"
        raise jwt.InvalidTokenError(msg) from None

    token_type = claims.get("type")
    if token_type != expected_type:
        msg = f"Expected token type '{expected_type}', got '{token_type}'"
        raise jwt.InvalidTokenError(msg)
    return claims
