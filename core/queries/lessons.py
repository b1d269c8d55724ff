"""Lesson queries. All functions take an open connection and return plain dicts."""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import lessons

# Everything except the content body, for listings
SUMMARY_COLUMNS = [c for c in lessons.c if c.name != "content"]


async def create_lesson(conn: AsyncConnection, **fields: Any) -> dict[str, Any]:
    """
    Insert a lesson with a fresh id and timestamps.

    Args:
        conn: Database connection (should be in a transaction)
        **fields: Column values (topic, title, learning_outcomes, ...)

    Returns:
        The inserted row
    """
    now = datetime.now(timezone.utc)
    values = {
        "lesson_id": str(uuid.uuid4()),
        "created_at": now,
        "updated_at": now,
        **fields,
    }
    result = await conn.execute(insert(lessons).values(**values).returning(lessons))
    return dict(result.mappings().first())


async def get_lesson(conn: AsyncConnection, lesson_id: str) -> dict[str, Any] | None:
    """Get a lesson row by id, or None."""
    result = await conn.execute(select(lessons).where(lessons.c.lesson_id == lesson_id))
    row = result.mappings().first()
    return dict(row) if row else None


async def update_lesson(
    conn: AsyncConnection,
    lesson_id: str,
    **fields: Any,
) -> dict[str, Any] | None:
    """
    Update a lesson's columns and bump updated_at.

    Returns:
        Updated row, or None if no lesson has this id
    """
    fields["updated_at"] = datetime.now(timezone.utc)
    result = await conn.execute(
        update(lessons)
        .where(lessons.c.lesson_id == lesson_id)
        .values(**fields)
        .returning(lessons)
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def delete_lesson(conn: AsyncConnection, lesson_id: str) -> bool:
    """
    Delete a lesson.

    Returns:
        True if deleted, False if not found
    """
    result = await conn.execute(delete(lessons).where(lessons.c.lesson_id == lesson_id))
    return result.rowcount > 0


async def list_lessons(
    conn: AsyncConnection,
    module_id: str | None = None,
) -> list[dict[str, Any]]:
    """
    List lessons newest first, without their content body.

    Args:
        conn: Database connection
        module_id: If provided, restrict results to this module
    """
    query = select(*SUMMARY_COLUMNS).order_by(lessons.c.created_at.desc())
    if module_id is not None:
        query = query.where(lessons.c.module_id == module_id)
    result = await conn.execute(query)
    return [dict(row) for row in result.mappings()]
