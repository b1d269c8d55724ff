"""
Module API routes.

Endpoints:
- GET /api/modules - List modules with lesson counts
- POST /api/modules - Create a module
- GET /api/modules/{module_id}/lessons - Lessons filed under a module
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.lessons import LessonStore, create_module, get_module_lessons
from web_api.dependencies import get_store

router = APIRouter(prefix="/api/modules", tags=["modules"])


class ModuleCreate(BaseModel):
    """Schema for creating a module."""

    title: str
    description: str | None = None
    difficulty: str | None = None


@router.get("")
async def list_modules(store: LessonStore = Depends(get_store)) -> dict[str, Any]:
    modules = await store.list_modules()
    return {"modules": [module.to_dict() for module in modules]}


@router.post("", status_code=201)
async def add_module(body: ModuleCreate, store: LessonStore = Depends(get_store)) -> dict[str, Any]:
    module = await create_module(store, body.title, body.description, body.difficulty)
    return {"status": "created", "module": module.to_dict()}


@router.get("/{module_id}/lessons")
async def list_module_lessons(module_id: str, store: LessonStore = Depends(get_store)) -> dict[str, Any]:
    return {"lessons": await get_module_lessons(store, module_id)}
