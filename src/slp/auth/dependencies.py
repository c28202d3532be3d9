"""FastAPI authentication dependencies.

``get_current_identity`` gates every personalised or mutating route:

* no bearer credential            -> 401 Unauthorized
* bad signature, expired, garbled -> 403 Forbidden
* valid                           -> Identity attached to ``request.state``

The check is stateless; the database is never consulted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import jwt
import structlog
from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from slp.auth.jwt import verify_token
from slp.errors import Forbidden, Unauthorized

logger = structlog.get_logger()

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as asserted by a verified access token."""

    id: int
    username: str
    is_admin: bool = False

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> Identity:
        """Build an identity from verified token claims.

        Raises:
            ValueError: If a required claim is missing or has the wrong type.
        """
        user_id = claims.get("id", claims.get("sub"))
        username = claims.get("username")
        if user_id is None or isinstance(user_id, bool) or not isinstance(username, str):
            msg = "Token is missing identity claims"
            raise ValueError(msg)
        return cls(id=int(user_id), username=username, is_admin=claims.get("isAdmin") is True)


async def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
) -> Identity:
    """Extract and verify the bearer token, return the caller's Identity."""
    if credentials is None or not credentials.credentials:
        raise Unauthorized

    try:
        claims = verify_token(credentials.credentials, expected_type="access")
        identity = Identity.from_claims(claims)
    except (jwt.InvalidTokenError, ValueError) as e:
        logger.info("token_rejected", reason=str(e))
        raise Forbidden from e

    request.state.identity = identity
    structlog.contextvars.bind_contextvars(user_id=identity.id)
    return identity


async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Same as get_current_identity but additionally requires the admin claim."""
    if not identity.is_admin:
        raise Forbidden("Administrator access required")
    return identity
