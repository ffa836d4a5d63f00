"""Pydantic schemas for the public content endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class DocumentRead(BaseModel):
    id: int
    title: str
    description: str | None = None
    url: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class NewsItemRead(BaseModel):
    id: int
    title: str
    body: str | None = None
    published_at: datetime | None = None

    model_config = {"from_attributes": True}


class NewsletterRequest(BaseModel):
    email: str | None = None


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
