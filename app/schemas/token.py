"""Pydantic schemas for JWT claims."""

from __future__ import annotations

from pydantic import BaseModel


class TokenClaims(BaseModel):
    """Identity carried by a verified bearer token."""

    id: int
    email: str
    role: str
    iat: int | None = None
    exp: int | None = None
