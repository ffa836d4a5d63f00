"""
Public content tables — documents page, news page, newsletter sign-ups.

These are plain read/append tables with no relationship to ``users``.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, Integer, String, Text, func

from app.db.base import Base


class Document(Base):
    __tablename__ = "documents_page"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    title: str = Column(String(255), nullable=False)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    url: str | None = Column(String(2048), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )


class NewsItem(Base):
    __tablename__ = "news_page"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    title: str = Column(String(255), nullable=False)  # type: ignore[assignment]
    body: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    published_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )


class NewsletterSubscription(Base):
    __tablename__ = "newsletter_store"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    # Stored as given; sign-ups are not validated or de-duplicated.
    email: str | None = Column(String(320), nullable=True)  # type: ignore[assignment]
    created_at: date = Column(Date, nullable=False, default=date.today)  # type: ignore[assignment]
