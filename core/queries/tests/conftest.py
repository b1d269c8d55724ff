"""Pytest fixtures for core query tests."""

import pytest_asyncio


@pytest_asyncio.fixture
async def db_conn(sqlite_engine):
    """
    Provide a DB connection that rolls back after each test.

    All changes made during the test are visible within the test,
    but rolled back afterward so the DB stays clean.
    """
    async with sqlite_engine.connect() as conn:
        txn = await conn.begin()
        try:
            yield conn
        finally:
            await txn.rollback()
