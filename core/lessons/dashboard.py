"""
Dashboard listing: lessons and modules for overview pages.

Read-only aggregation over the store, plus the module bookkeeping the
dashboard offers (create a module, file a lesson under it).
"""

import logging
from typing import Any

from .errors import ValidationError
from .store import LessonStore
from .types import Module

logger = logging.getLogger(__name__)


async def list_dashboard(store: LessonStore) -> dict[str, list[dict[str, Any]]]:
    """
    Get everything the dashboard shows.

    Returns:
        {"lessons": [...], "modules": [...]}, both newest first. Lessons are
        summaries without content; modules carry lessonCount.
    """
    lessons = await store.list()
    modules = await store.list_modules()
    return {
        "lessons": [lesson.to_summary() for lesson in lessons],
        "modules": [module.to_dict() for module in modules],
    }


async def delete_lesson(store: LessonStore, lesson_id: str) -> None:
    """
    Permanently delete a lesson.

    Raises:
        NotFoundError: If the lesson doesn't exist (also on a second delete)
        StoreUnavailableError: If the store can't be reached
    """
    await store.delete(lesson_id)


async def create_module(
    store: LessonStore,
    title: str,
    description: str | None = None,
    difficulty: str | None = None,
) -> Module:
    """
    Create an empty module.

    Raises:
        ValidationError: If title is blank
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError("Module title is required")
    return await store.create_module(
        Module(title=title, description=description, difficulty=difficulty)
    )


async def add_lesson_to_module(store: LessonStore, lesson_id: str, module_id: str | None):
    """File a lesson under a module; module_id=None takes it out of its module."""
    lesson = await store.assign_module(lesson_id, module_id)
    logger.info("Lesson %s moved to module %s", lesson_id, module_id)
    return lesson


async def get_module_lessons(store: LessonStore, module_id: str) -> list[dict[str, Any]]:
    """Summaries of one module's lessons, newest first."""
    lessons = await store.list_module_lessons(module_id)
    return [lesson.to_summary() for lesson in lessons]
