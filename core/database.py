"""
Async database access.

Engine is created lazily from DATABASE_URL. Use get_connection() for reads
and get_transaction() for writes (commits on exit, rolls back on error).
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from .tables import metadata

_engine: AsyncEngine | None = None


def _async_url(database_url: str) -> str:
    """Point plain postgres URLs at the asyncpg driver."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    return database_url


def get_engine() -> AsyncEngine:
    """Return the shared engine, creating it on first use."""
    global _engine
    if _engine is None:
        database_url = os.environ.get("DATABASE_URL", "")
        if not database_url:
            raise RuntimeError("DATABASE_URL environment variable is required")
        _engine = create_async_engine(_async_url(database_url), pool_pre_ping=True)
    return _engine


async def close_engine() -> None:
    """Dispose the shared engine (app shutdown, tests)."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None


@asynccontextmanager
async def get_connection(engine: AsyncEngine | None = None) -> AsyncIterator[AsyncConnection]:
    """Connection for read-only work."""
    async with (engine or get_engine()).connect() as conn:
        yield conn


@asynccontextmanager
async def get_transaction(engine: AsyncEngine | None = None) -> AsyncIterator[AsyncConnection]:
    """Connection inside a transaction, committed when the block exits cleanly."""
    async with (engine or get_engine()).begin() as conn:
        yield conn


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create tables that don't exist yet."""
    async with (engine or get_engine()).begin() as conn:
        await conn.run_sync(metadata.create_all)
