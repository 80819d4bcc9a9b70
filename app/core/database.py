"""Async SQLAlchemy engine, session factory and request-scoped session dependency."""

import logging
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from app.core.config import settings

logger = logging.getLogger(__name__)

_engine_kwargs: dict = {"echo": False}

if not settings.DATABASE_URL.startswith("sqlite"):
    # asyncpg: `timeout` bounds connection setup, `command_timeout` every statement
    _engine_kwargs.update(
        pool_pre_ping=True,
        pool_timeout=settings.DB_POOL_TIMEOUT_SECONDS,
        connect_args={
            "timeout": settings.DB_CONNECT_TIMEOUT_SECONDS,
            "command_timeout": settings.DB_COMMAND_TIMEOUT_SECONDS,
        },
    )
elif ":memory:" in settings.DATABASE_URL:
    # One shared connection, otherwise every checkout sees an empty database
    _engine_kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})

engine = create_async_engine(settings.DATABASE_URL, **_engine_kwargs)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db():
    """Yield a session per request; roll back whatever the handler left uncommitted."""
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
