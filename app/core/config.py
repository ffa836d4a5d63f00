"""
Centralised application settings loaded from environment / .env file.

Uses pydantic-settings so every value can be overridden via env vars
or the .env file at the project root.  The settings object is built once
at import time and treated as read-only for the life of the process.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode

DEFAULT_JWT_SECRET = "dev-secret-change"


class Settings(BaseSettings):
    # ── Project ──────────────────────────────────────────────────────
    PROJECT_NAME: str = "KGF Backend API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # ── Database (async PostgreSQL via asyncpg) ─────────────────────
    # Prefer DATABASE_URL; when empty the DB_* parts are assembled instead.
    DATABASE_URL: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "kgf"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""

    # ── JWT ──────────────────────────────────────────────────────────
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # ── Passwords ────────────────────────────────────────────────────
    BCRYPT_ROUNDS: int = 12

    # ── Login rate limit ─────────────────────────────────────────────
    LOGIN_RATE_LIMIT_MAX: int = 20
    LOGIN_RATE_LIMIT_WINDOW_MINUTES: int = 15
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # ── Logging ──────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    # ── CORS ─────────────────────────────────────────────────────────
    # Comma separated ("a,b") or a JSON list
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v: object) -> list[str]:
        if isinstance(v, str):
            if v.lstrip().startswith("["):
                return json.loads(v)
            return [o.strip() for o in v.split(",") if o.strip()]
        return v  # type: ignore[return-value]

    @field_validator("JWT_SECRET")
    @classmethod
    def _validate_jwt_secret(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def _validate_jwt_algorithm(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith("HS"):
            raise ValueError("JWT_ALGORITHM must be an HMAC algorithm (HS256, HS384, HS512)")
        return v

    @field_validator("JWT_EXPIRE_MINUTES")
    @classmethod
    def _validate_jwt_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError("JWT_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def _validate_bcrypt_rounds(cls, v: int) -> int:
        # bcrypt only accepts log2 cost factors in this range
        if v < 4 or v > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @field_validator("LOGIN_RATE_LIMIT_MAX", "LOGIN_RATE_LIMIT_WINDOW_MINUTES")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("rate limit values must be positive")
        return v

    @model_validator(mode="after")
    def _assemble_database_url(self) -> "Settings":
        if not self.DATABASE_URL.strip():
            self.DATABASE_URL = (
                f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return self

    @property
    def login_rate_limit(self) -> str:
        """Limit string in the ``limits`` notation, e.g. ``20/15 minutes``."""
        return f"{self.LOGIN_RATE_LIMIT_MAX}/{self.LOGIN_RATE_LIMIT_WINDOW_MINUTES} minutes"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


settings = Settings()

if settings.JWT_SECRET == DEFAULT_JWT_SECRET:
    logging.getLogger("app.core.config").warning(
        "WARNING: You are running with the default INSECURE JWT secret! "
        "Set JWT_SECRET in your .env file before deploying."
    )
