"""Pydantic schemas for the auth endpoints."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.core.security import BCRYPT_MAX_PASSWORD_BYTES

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

PASSWORD_MIN_LEN = 8
NAME_MAX_LEN = 100


def normalize_email(value: str) -> str:
    """Lower-case and trim; the stored form of every email."""
    return value.strip().lower()


def _validate_email(v: str) -> str:
    v = normalize_email(v)
    if len(v) > 320 or not _EMAIL_RE.match(v):
        raise ValueError("Valid email required")
    return v


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str | None = None

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return _validate_email(v)

    @field_validator("password")
    @classmethod
    def _validate_password(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN_LEN:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LEN} characters")
        if len(v.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return v

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str | None) -> str | None:
        if v is not None and len(v) > NAME_MAX_LEN:
            raise ValueError("Name too long")
        return v or None


class LoginRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return _validate_email(v)


class UserRead(BaseModel):
    """Public view of a user. ``password_hash`` is never part of it."""

    id: int
    email: str
    name: str | None = None
    role: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    user: UserRead
    token: str


class MeResponse(BaseModel):
    user: UserRead
