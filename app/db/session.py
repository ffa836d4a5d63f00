"""
Async SQLAlchemy engine & session factory (asyncpg driver).
"""

from __future__ import annotations

import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings

logger = logging.getLogger(__name__)

engine_args = {
    "echo": False,
    "pool_pre_ping": True,
}

if "postgresql" in settings.DATABASE_URL:
    engine_args.update(
        {
            "pool_size": 20,
            "max_overflow": 10,
            "pool_recycle": 300,
            "pool_timeout": 30,
        }
    )

engine = create_async_engine(
    settings.DATABASE_URL,
    **engine_args,
)

_url = make_url(settings.DATABASE_URL)
logger.info(
    "DB config snapshot: driver=%s host=%s port=%s database=%s user=%s",
    _url.drivername,
    _url.host or "-",
    _url.port or "-",
    _url.database or "-",
    _url.username or "-",
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
