"""
Auth endpoints — register, login (rate-limited) and current-user profile.

Each handler lets classified ``AppError``s through to the exception
handlers and turns anything else into a generic 500 after logging it.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.api.v1.deps import get_current_claims, get_db, get_password_hasher, get_token_service
from app.core.exceptions import (
    AppError,
    DuplicateEmailError,
    InfrastructureError,
    InvalidCredentialsError,
    NotFoundError,
)
from app.core.limiter import LOGIN_RATE_LIMIT, limiter
from app.core.security import PasswordHasher, TokenService
from app.crud import user as crud_user
from app.models.user import User
from app.schemas.token import TokenClaims
from app.schemas.user import AuthResponse, LoginRequest, MeResponse, RegisterRequest, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _issue_for(tokens: TokenService, user: User) -> str:
    return tokens.issue({"id": user.id, "email": user.email, "role": user.role})


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthResponse:
    """Create an account and return it together with a fresh access token."""
    try:
        if await crud_user.get_by_email(db, body.email) is not None:
            raise DuplicateEmailError()

        password_hash = await run_in_threadpool(hasher.hash, body.password)
        user = await crud_user.create(
            db,
            email=body.email,
            password_hash=password_hash,
            name=body.name,
        )
        token = _issue_for(tokens, user)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("POST /api/auth/register error: %s", exc)
        raise InfrastructureError("Failed to register user") from exc

    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthResponse:
    """Exchange email + password for an access token.

    Unknown email and wrong password produce the same 401 so the response
    never reveals whether an account exists.
    """
    try:
        user = await crud_user.get_by_email(db, body.email)
        if user is None:
            await run_in_threadpool(hasher.dummy_verify)
            raise InvalidCredentialsError()

        if not await run_in_threadpool(hasher.verify, body.password, user.password_hash):
            raise InvalidCredentialsError()

        token = _issue_for(tokens, user)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("POST /api/auth/login error: %s", exc)
        raise InfrastructureError("Failed to login") from exc

    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.get("/me", response_model=MeResponse)
async def read_current_user(
    claims: TokenClaims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
) -> MeResponse:
    """Return the profile of the user named by the bearer token."""
    try:
        user = await crud_user.get_by_id(db, claims.id)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("GET /api/auth/me error: %s", exc)
        raise InfrastructureError("Failed to fetch profile") from exc

    if user is None:
        raise NotFoundError("User not found")
    return MeResponse(user=UserRead.model_validate(user))
