"""
Lesson record store.

LessonStore is the persistence contract the editing session and the
dashboard rely on. DatabaseLessonStore implements it with the query
functions in core.queries.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Protocol

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine

from core.database import get_connection, get_transaction
from core.queries import lessons as lesson_queries
from core.queries import modules as module_queries
from .errors import NotFoundError, StoreUnavailableError
from .types import Lesson, Module

logger = logging.getLogger(__name__)


class LessonStore(Protocol):
    async def create(self, lesson: Lesson) -> Lesson: ...

    async def update(self, lesson_id: str, fields: dict[str, Any]) -> Lesson: ...

    async def get(self, lesson_id: str) -> Lesson: ...

    async def delete(self, lesson_id: str) -> None: ...

    async def list(self) -> list[Lesson]: ...

    async def list_modules(self) -> list[Module]: ...

    async def create_module(self, module: Module) -> Module: ...

    async def assign_module(self, lesson_id: str, module_id: str | None) -> Lesson: ...

    async def list_module_lessons(self, module_id: str) -> list[Lesson]: ...


# Record key -> lessons column
_RECORD_COLUMNS = {
    "topic": "topic",
    "title": "title",
    "description": "description",
    "learningOutcomes": "learning_outcomes",
    "keyConcepts": "key_concepts",
    "activities": "activities",
    "metadata": "lesson_metadata",
    "content": "content",
    "moduleId": "module_id",
}


def record_to_columns(record: dict[str, Any]) -> dict[str, Any]:
    """Map a lesson record (camelCase keys) to column values. Unknown keys are dropped."""
    return {
        column: record[key]
        for key, column in _RECORD_COLUMNS.items()
        if key in record
    }


def lesson_from_row(row: dict[str, Any]) -> Lesson:
    record = {key: row[column] for key, column in _RECORD_COLUMNS.items() if column in row}
    record["id"] = row["lesson_id"]
    record["createdAt"] = row.get("created_at")
    record["updatedAt"] = row.get("updated_at")
    return Lesson.from_dict(record)


def module_from_row(row: dict[str, Any]) -> Module:
    return Module(
        id=row["module_id"],
        title=row["title"],
        description=row.get("description"),
        difficulty=row.get("difficulty"),
        created_at=row.get("created_at"),
        lesson_count=row.get("lesson_count") or 0,
    )


@asynccontextmanager
async def _store_errors(action: str):
    """Re-raise connection-level failures as StoreUnavailableError."""
    try:
        yield
    except (OperationalError, InterfaceError, OSError) as e:
        logger.warning("Store unavailable during %s: %s", action, e)
        raise StoreUnavailableError(f"Store unavailable during {action}") from e


class DatabaseLessonStore:
    """LessonStore backed by the relational database."""

    def __init__(self, engine: AsyncEngine | None = None):
        """
        Args:
            engine: Engine to use; defaults to the shared engine from DATABASE_URL
        """
        self._engine = engine

    async def create(self, lesson: Lesson) -> Lesson:
        async with _store_errors("create"):
            async with get_transaction(self._engine) as conn:
                row = await lesson_queries.create_lesson(
                    conn, **record_to_columns(lesson.to_record())
                )
        logger.info("Created lesson %s (%r)", row["lesson_id"], row["topic"])
        return lesson_from_row(row)

    async def update(self, lesson_id: str, fields: dict[str, Any]) -> Lesson:
        """
        Update a lesson from a (partial) record.

        Raises:
            NotFoundError: If no lesson has this id
        """
        async with _store_errors("update"):
            async with get_transaction(self._engine) as conn:
                row = await lesson_queries.update_lesson(
                    conn, lesson_id, **record_to_columns(fields)
                )
        if row is None:
            raise NotFoundError(f"Lesson not found: {lesson_id}")
        logger.info("Updated lesson %s", lesson_id)
        return lesson_from_row(row)

    async def get(self, lesson_id: str) -> Lesson:
        async with _store_errors("get"):
            async with get_connection(self._engine) as conn:
                row = await lesson_queries.get_lesson(conn, lesson_id)
        if row is None:
            raise NotFoundError(f"Lesson not found: {lesson_id}")
        return lesson_from_row(row)

    async def delete(self, lesson_id: str) -> None:
        """
        Permanently delete a lesson.

        Raises:
            NotFoundError: If no lesson has this id (deleting twice is NotFound)
        """
        async with _store_errors("delete"):
            async with get_transaction(self._engine) as conn:
                deleted = await lesson_queries.delete_lesson(conn, lesson_id)
        if not deleted:
            raise NotFoundError(f"Lesson not found: {lesson_id}")
        logger.info("Deleted lesson %s", lesson_id)

    async def list(self) -> list[Lesson]:
        """All lessons newest first, content left out."""
        async with _store_errors("list"):
            async with get_connection(self._engine) as conn:
                rows = await lesson_queries.list_lessons(conn)
        return [lesson_from_row(row) for row in rows]

    async def list_modules(self) -> list[Module]:
        async with _store_errors("list_modules"):
            async with get_connection(self._engine) as conn:
                rows = await module_queries.list_modules(conn)
        return [module_from_row(row) for row in rows]

    async def create_module(self, module: Module) -> Module:
        async with _store_errors("create_module"):
            async with get_transaction(self._engine) as conn:
                row = await module_queries.create_module(
                    conn,
                    title=module.title,
                    description=module.description,
                    difficulty=module.difficulty,
                )
        logger.info("Created module %s (%r)", row["module_id"], row["title"])
        return module_from_row(row)

    async def assign_module(self, lesson_id: str, module_id: str | None) -> Lesson:
        """
        Point a lesson at a module (or detach it with None).

        Raises:
            NotFoundError: If the lesson or the module does not exist
        """
        async with _store_errors("assign_module"):
            async with get_transaction(self._engine) as conn:
                if module_id is not None:
                    if await module_queries.get_module(conn, module_id) is None:
                        raise NotFoundError(f"Module not found: {module_id}")
                try:
                    row = await lesson_queries.update_lesson(conn, lesson_id, module_id=module_id)
                except IntegrityError as e:
                    raise NotFoundError(f"Module not found: {module_id}") from e
        if row is None:
            raise NotFoundError(f"Lesson not found: {lesson_id}")
        return lesson_from_row(row)

    async def list_module_lessons(self, module_id: str) -> list[Lesson]:
        """
        Lessons of one module, newest first.

        Raises:
            NotFoundError: If the module does not exist
        """
        async with _store_errors("list_module_lessons"):
            async with get_connection(self._engine) as conn:
                if await module_queries.get_module(conn, module_id) is None:
                    raise NotFoundError(f"Module not found: {module_id}")
                rows = await lesson_queries.list_lessons(conn, module_id=module_id)
        return [lesson_from_row(row) for row in rows]
