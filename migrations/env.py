"""Alembic environment for the faucet ledger tables.

The database URL comes from ``FAUCET_DATABASE__URL`` unless overridden with
``alembic -x db_url=...``. SQLite schemas are altered in batch mode.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from faucet.core.config import get_settings
from faucet.infrastructure.database import models  # noqa: F401
from faucet.infrastructure.database.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_SYNC_DRIVERS = {
    "sqlite+aiosqlite": "sqlite",
    "postgresql+asyncpg": "postgresql",
}


def _database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("db_url") or get_settings().database_url


def _sync_url(url: str) -> str:
    scheme, sep, rest = url.partition("://")
    return f"{_SYNC_DRIVERS.get(scheme, scheme)}{sep}{rest}"


def _configure(url: str, /, **kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=url.startswith("sqlite"),
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    url = _sync_url(_database_url())
    _configure(url, url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection, url: str) -> None:
    _configure(url, connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    url = _database_url()
    engine = create_async_engine(url)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate, url)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
