"""
KGF Backend API — application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `crud/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.limiter import limiter
from app.core.security import PasswordHasher, TokenService
from app.db.base import Base
from app.db.session import engine

# Ensure all models are imported so metadata.create_all can see them
from app.models.content import Document, NewsItem, NewsletterSubscription  # noqa: F401
from app.models.user import User  # noqa: F401
from app.schemas.content import HealthResponse

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    logger.info("Server running -> http://localhost (API under %s)", settings.API_PREFIX)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


def register_security_headers(application: FastAPI) -> None:
    """Add a conservative set of security headers to every response."""

    @application.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Documents, news and newsletter API with email/password auth",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/api-docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Auth services: configuration is fixed here for the process lifetime
    application.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    application.state.token_service = TokenService(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.JWT_EXPIRE_MINUTES,
    )

    # Rate limiter (slowapi looks it up on app.state)
    application.state.limiter = limiter

    register_security_headers(application)

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    @application.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="server is alive :)")

    application.include_router(api_router, prefix=settings.API_PREFIX)

    return application


app = create_app()
