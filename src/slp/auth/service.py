"""
Authentication business logic.

Handles user registration and credential verification.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from slp.auth.password import (
    burn_verification,
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from slp.db.models import User
from slp.errors import ConflictError, InvalidCredentials

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class UsernameTakenError(ConflictError):
    detail = "Username already taken"


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    """Fetch a user by exact username."""
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


async def register_user(
    db: AsyncSession,
    username: str,
    password: str,
    security_question: str | None = None,
    security_answer: str | None = None,
) -> User:
    """
    Create a user with a hashed password and hashed security answer.

    Raises:
        PasswordStrengthError: If the password fails the length policy.
        UsernameTakenError: If the username is already registered.
    """
    validate_password_strength(password)

    if await get_user_by_username(db, username) is not None:
        raise UsernameTakenError

    user = User(
        username=username,
        password_hash=hash_password(password),
        security_question=security_question,
        security_answer_hash=hash_password(security_answer.strip().lower()) if security_answer else None,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same name.
        await db.rollback()
        raise UsernameTakenError from e

    logger.info("user_registered", user_id=user.id)
    return user


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


async def authenticate_user(db: AsyncSession, username: str, password: str) -> User:
    """
    Verify a username + password pair.

    Unknown usernames and wrong passwords raise the same error, and both
    paths run one argon2 verification, so callers cannot tell them apart.

    Raises:
        InvalidCredentials: If the credentials do not match a user.
    """
    user = await get_user_by_username(db, username)
    if user is None:
        burn_verification(password)
        logger.info("login_failed")
        raise InvalidCredentials

    if not verify_password(password, user.password_hash):
        logger.info("login_failed")
        raise InvalidCredentials

    if check_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        await db.commit()
        logger.info("password_rehashed", user_id=user.id)

    return user
