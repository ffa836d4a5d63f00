"""
Public content endpoints — documents, news, newsletter sign-up.

No auth on any of these; each is a single query.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_db
from app.core.exceptions import InfrastructureError
from app.models.content import Document, NewsItem, NewsletterSubscription
from app.schemas.content import (
    DocumentRead,
    MessageResponse,
    NewsItemRead,
    NewsletterRequest,
)

router = APIRouter(tags=["content"])
logger = logging.getLogger(__name__)


@router.get("/documents", response_model=list[DocumentRead])
async def list_documents(db: AsyncSession = Depends(get_db)) -> list[Document]:
    """Fetch all documents."""
    try:
        result = await db.execute(select(Document).order_by(Document.id))
    except SQLAlchemyError as exc:
        logger.error("HTTP GET /api/documents error: %s", exc, exc_info=True)
        raise InfrastructureError("Failed to fetch all documents") from exc
    return list(result.scalars().all())


@router.get("/news", response_model=list[NewsItemRead])
async def list_news(db: AsyncSession = Depends(get_db)) -> list[NewsItem]:
    """Fetch all news."""
    try:
        result = await db.execute(select(NewsItem).order_by(NewsItem.id))
    except SQLAlchemyError as exc:
        logger.error("HTTP GET /api/news error: %s", exc, exc_info=True)
        raise InfrastructureError("Failed to fetch all news") from exc
    return list(result.scalars().all())


@router.post(
    "/newsletter",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def subscribe_newsletter(
    body: NewsletterRequest | None = None,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Store the given email (or none) with today's date."""
    email = body.email if body is not None else None
    db.add(NewsletterSubscription(email=email, created_at=date.today()))
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("HTTP POST /api/newsletter error: %s", exc, exc_info=True)
        raise InfrastructureError("Failed to store email") from exc
    return MessageResponse(message="Subscribed")
