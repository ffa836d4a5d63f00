"""Tests for the public content endpoints, health check and response headers."""

from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.content import Document, NewsItem, NewsletterSubscription


@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "server is alive :)"}


@pytest.mark.asyncio
async def test_security_headers_present(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "SAMEORIGIN"


@pytest.mark.asyncio
async def test_cors_allows_configured_origin(async_client: AsyncClient):
    resp = await async_client.options(
        "/api/auth/login",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert resp.headers["access-control-allow-credentials"] == "true"


@pytest.mark.asyncio
async def test_cors_rejects_unknown_origin(async_client: AsyncClient):
    resp = await async_client.options(
        "/api/auth/login",
        headers={"Origin": "http://evil.example", "Access-Control-Request-Method": "POST"},
    )
    assert "access-control-allow-origin" not in resp.headers


@pytest.mark.asyncio
async def test_list_documents(async_client: AsyncClient, db_session: AsyncSession):
    db_session.add_all([
        Document(title="Annual report", url="https://example.com/report.pdf"),
        Document(title="Bylaws", description="Club bylaws"),
    ])
    await db_session.commit()

    resp = await async_client.get("/api/documents")
    assert resp.status_code == 200
    data = resp.json()
    assert [d["title"] for d in data] == ["Annual report", "Bylaws"]
    assert data[1]["description"] == "Club bylaws"


@pytest.mark.asyncio
async def test_list_documents_empty(async_client: AsyncClient):
    resp = await async_client.get("/api/documents")
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_list_news(async_client: AsyncClient, db_session: AsyncSession):
    db_session.add(NewsItem(title="Season opens", body="See you there"))
    await db_session.commit()

    resp = await async_client.get("/api/news")
    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 1
    assert data[0]["title"] == "Season opens"
    assert data[0]["published_at"] is not None


@pytest.mark.asyncio
async def test_newsletter_subscribe(async_client: AsyncClient, db_session: AsyncSession):
    resp = await async_client.post("/api/newsletter", json={"email": "reader@example.com"})
    assert resp.status_code == 201
    assert resp.json() == {"message": "Subscribed"}

    rows = (await db_session.execute(select(NewsletterSubscription))).scalars().all()
    assert len(rows) == 1
    assert rows[0].email == "reader@example.com"
    assert rows[0].created_at == date.today()


@pytest.mark.asyncio
async def test_newsletter_subscribe_without_body(async_client: AsyncClient, db_session: AsyncSession):
    """No body is accepted; a row with a null email is stored."""
    resp = await async_client.post("/api/newsletter")
    assert resp.status_code == 201

    rows = (await db_session.execute(select(NewsletterSubscription))).scalars().all()
    assert len(rows) == 1
    assert rows[0].email is None


@pytest.mark.asyncio
async def test_unknown_route_uses_error_shape(async_client: AsyncClient):
    resp = await async_client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


# ── Datastore failures ──────────────────────────────────────────────
def _driver_error(*_args, **_kwargs):
    raise OperationalError("SELECT * FROM documents_page", {}, Exception("password=hunter2"))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path, detail",
    [
        ("/api/documents", "Failed to fetch all documents"),
        ("/api/news", "Failed to fetch all news"),
    ],
)
async def test_content_query_failure_is_generic_500(
    async_client: AsyncClient, monkeypatch, caplog, path: str, detail: str
):
    """Driver errors are logged but never echoed to the client."""

    async def _boom(self, *args, **kwargs):
        _driver_error()

    monkeypatch.setattr(AsyncSession, "execute", _boom)
    resp = await async_client.get(path)
    assert resp.status_code == 500
    assert resp.json() == {"detail": detail, "success": False}
    assert "hunter2" not in resp.text
    assert "documents_page" not in resp.text
    assert "hunter2" in caplog.text


@pytest.mark.asyncio
async def test_newsletter_store_failure_is_generic_500(async_client: AsyncClient, monkeypatch, caplog):
    async def _boom(self, *args, **kwargs):
        _driver_error()

    monkeypatch.setattr(AsyncSession, "commit", _boom)
    resp = await async_client.post("/api/newsletter", json={"email": "reader@example.com"})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Failed to store email", "success": False}
    assert "hunter2" not in resp.text
    assert "hunter2" in caplog.text
