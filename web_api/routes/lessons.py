# web_api/routes/lessons.py
"""
Lesson and dashboard API routes.

Endpoints:
- GET /api/dashboard - Lessons and modules for the dashboard
- GET /api/lessons - List lessons (newest first, no content)
- GET /api/lessons/{lesson_id} - Full lesson
- DELETE /api/lessons/{lesson_id} - Delete a lesson permanently
- PUT /api/lessons/{lesson_id}/module - File a lesson under a module
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.lessons import LessonStore, add_lesson_to_module, delete_lesson, list_dashboard
from web_api.dependencies import get_store

router = APIRouter(prefix="/api", tags=["lessons"])


class ModuleAssignment(BaseModel):
    """Request body for moving a lesson into (or out of) a module."""

    module_id: str | None = None


@router.get("/dashboard")
async def get_dashboard(store: LessonStore = Depends(get_store)) -> dict[str, Any]:
    """Lessons and modules, newest first. Modules carry lessonCount."""
    return await list_dashboard(store)


@router.get("/lessons")
async def list_lessons(store: LessonStore = Depends(get_store)) -> dict[str, Any]:
    lessons = await store.list()
    return {"lessons": [lesson.to_summary() for lesson in lessons]}


@router.get("/lessons/{lesson_id}")
async def get_lesson(lesson_id: str, store: LessonStore = Depends(get_store)) -> dict[str, Any]:
    lesson = await store.get(lesson_id)
    return lesson.to_dict()


@router.delete("/lessons/{lesson_id}")
async def remove_lesson(lesson_id: str, store: LessonStore = Depends(get_store)) -> dict[str, Any]:
    """
    Delete a lesson permanently.

    Returns 404 if the lesson doesn't exist, including on a repeated delete.
    """
    await delete_lesson(store, lesson_id)
    return {"status": "deleted", "id": lesson_id}


@router.put("/lessons/{lesson_id}/module")
async def set_lesson_module(
    lesson_id: str,
    body: ModuleAssignment,
    store: LessonStore = Depends(get_store),
) -> dict[str, Any]:
    lesson = await add_lesson_to_module(store, lesson_id, body.module_id)
    return {"status": "updated", "lesson": lesson.to_summary()}
