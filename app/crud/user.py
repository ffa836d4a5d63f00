"""
Data access for the ``users`` table.

Every function takes the request's ``AsyncSession``.  Emails must already be
normalised (lower-cased) by the caller.  Connection-level failures surface as
``DatastoreUnavailableError`` so callers can tell them apart from
application outcomes such as a duplicate email.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import DisconnectionError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DatastoreUnavailableError, DuplicateEmailError
from app.models.user import User

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)


async def get_by_email(db: AsyncSession, email: str) -> User | None:
    try:
        result = await db.execute(select(User).where(User.email == email))
    except _CONNECTION_ERRORS as exc:
        logger.error("users lookup by email failed: %s", exc)
        raise DatastoreUnavailableError() from exc
    return result.scalar_one_or_none()


async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
    try:
        result = await db.execute(select(User).where(User.id == user_id))
    except _CONNECTION_ERRORS as exc:
        logger.error("users lookup by id failed: %s", exc)
        raise DatastoreUnavailableError() from exc
    return result.scalar_one_or_none()


async def create(
    db: AsyncSession,
    *,
    email: str,
    password_hash: str,
    name: str | None = None,
) -> User:
    """Insert a user and return it with id and timestamps populated.

    The unique index on ``email`` is the real guard against two concurrent
    registrations; losing that race raises ``DuplicateEmailError``.
    """
    user = User(email=email, password_hash=password_hash, name=name)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.info("Duplicate registration rejected by unique constraint: %s", email)
        raise DuplicateEmailError() from exc
    except _CONNECTION_ERRORS as exc:
        await db.rollback()
        logger.error("users insert failed: %s", exc)
        raise DatastoreUnavailableError() from exc
    await db.refresh(user)
    logger.info("User created: id=%s", user.id)
    return user
