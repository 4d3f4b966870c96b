"""Async SQLAlchemy engine and session management."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from faucet.core.config import Settings

from .base import Base


def build_engine(settings: Settings) -> AsyncEngine:
    engine_kwargs: dict[str, Any] = {
        "echo": settings.database.echo or settings.debug,
    }
    return create_async_engine(settings.database_url, **engine_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create missing tables (migrations preferred for managed deployments)."""
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
