"""Authentication router: /login and /register."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from slp.auth.jwt import access_token_ttl, create_access_token
from slp.auth.password import PasswordStrengthError
from slp.auth.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    TokenUser,
)
from slp.auth.service import authenticate_user, register_user
from slp.database import atomic, get_session
from slp.errors import ValidationFailed

logger = structlog.get_logger()

router = APIRouter(tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
) -> LoginResponse:
    """Login with username + password and receive a one-hour access token."""
    user = await authenticate_user(db, body.username, body.password)

    token = create_access_token(user.id, user.username, user.is_admin)
    logger.info("login_succeeded", user_id=user.id)

    return LoginResponse(
        token=token,
        expires_in=int(access_token_ttl().total_seconds()),
        user=TokenUser(id=user.id, username=user.username, is_admin=user.is_admin),
    )


@router.post("/register", response_model=RegisterResponse)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_session),
) -> RegisterResponse:
    """Register a new user."""
    try:
        async with atomic(db):
            user = await register_user(
                db,
                username=body.username,
                password=body.password,
                security_question=body.security_question,
                security_answer=body.security_answer,
            )
    except PasswordStrengthError as e:
        raise ValidationFailed(str(e)) from e

    return RegisterResponse(user_id=user.id)
