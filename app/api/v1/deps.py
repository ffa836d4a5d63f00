"""
FastAPI dependencies — database session, auth services, bearer-token gate.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import UnauthorizedError
from app.core.security import PasswordHasher, TokenService, TokenVerificationError
from app.db.session import async_session_factory
from app.schemas.token import TokenClaims

logger = logging.getLogger(__name__)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Auth services (built once by the app factory) ──────────────────
def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an exact ``Bearer <token>`` header, else ``None``."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


# ── Auth gate ───────────────────────────────────────────────────────
async def get_current_claims(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """Verify the bearer token and attach its claims to ``request.state.user``.

    Purely a signature/expiry check: the store is not consulted, so a user
    deleted after issuance stays authenticated until the token expires.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise UnauthorizedError("Unauthorized")

    try:
        payload = tokens.verify(token)
    except TokenVerificationError as exc:
        logger.debug("Bearer token rejected (%s): %s", exc.reason, exc)
        raise UnauthorizedError("Invalid token") from exc

    try:
        claims = TokenClaims.model_validate(payload)
    except ValidationError as exc:
        logger.debug("Bearer token claims unusable: %s", exc)
        raise UnauthorizedError("Invalid token") from exc

    request.state.user = claims
    return claims
