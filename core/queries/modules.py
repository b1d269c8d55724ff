"""Module queries."""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import lessons, modules


async def create_module(
    conn: AsyncConnection,
    title: str,
    description: str | None = None,
    difficulty: str | None = None,
) -> dict[str, Any]:
    """Insert a module and return its row."""
    result = await conn.execute(
        insert(modules)
        .values(
            module_id=str(uuid.uuid4()),
            title=title,
            description=description,
            difficulty=difficulty,
            created_at=datetime.now(timezone.utc),
        )
        .returning(modules)
    )
    return dict(result.mappings().first())


async def get_module(conn: AsyncConnection, module_id: str) -> dict[str, Any] | None:
    result = await conn.execute(select(modules).where(modules.c.module_id == module_id))
    row = result.mappings().first()
    return dict(row) if row else None


async def list_modules(conn: AsyncConnection) -> list[dict[str, Any]]:
    """
    List modules newest first, each with a lesson_count.
    """
    lesson_count = (
        select(func.count(lessons.c.lesson_id))
        .where(lessons.c.module_id == modules.c.module_id)
        .scalar_subquery()
    )
    result = await conn.execute(
        select(modules, lesson_count.label("lesson_count"))
        .order_by(modules.c.created_at.desc())
    )
    return [dict(row) for row in result.mappings()]
