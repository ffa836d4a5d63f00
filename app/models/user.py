"""
User model — email/password identities for bearer-token auth.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, func

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    # Always stored lower-cased; the unique index is what makes registration race-safe.
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    password_hash: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    name: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    role: str = Column(  # type: ignore[assignment]
        String(32),
        nullable=False,
        default="user",
        server_default="user",
    )
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
