"""Shared pytest fixtures: in-memory store, generator and staging."""

import copy
import itertools
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from core.database import init_db
from core.lessons import (
    EditingSession,
    MemoryStaging,
    NotFoundError,
    StoreUnavailableError,
    TemplateGenerator,
)
from core.lessons.types import Lesson, Module


class InMemoryLessonStore:
    """
    LessonStore kept in dicts.

    Set `available = False` to make every call raise StoreUnavailableError.
    Records every call in `calls` as (method, lesson_id).
    """

    def __init__(self):
        self.lessons: dict[str, Lesson] = {}
        self.modules: dict[str, Module] = {}
        self.available = True
        self.calls: list[tuple[str, str | None]] = []
        self._ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _check(self, method: str, lesson_id: str | None = None) -> None:
        self.calls.append((method, lesson_id))
        if not self.available:
            raise StoreUnavailableError(f"Store unavailable during {method}")

    def _now(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    async def create(self, lesson: Lesson) -> Lesson:
        self._check("create")
        stored = lesson.copy()
        stored.id = f"L{next(self._ids)}"
        stored.created_at = stored.updated_at = self._now()
        self.lessons[stored.id] = stored
        return stored.copy()

    async def update(self, lesson_id: str, fields: dict) -> Lesson:
        self._check("update", lesson_id)
        if lesson_id not in self.lessons:
            raise NotFoundError(f"Lesson not found: {lesson_id}")
        current = self.lessons[lesson_id].to_dict()
        current.update(copy.deepcopy(fields))
        stored = Lesson.from_dict(current)
        stored.updated_at = self._now()
        self.lessons[lesson_id] = stored
        return stored.copy()

    async def get(self, lesson_id: str) -> Lesson:
        self._check("get", lesson_id)
        if lesson_id not in self.lessons:
            raise NotFoundError(f"Lesson not found: {lesson_id}")
        return self.lessons[lesson_id].copy()

    async def delete(self, lesson_id: str) -> None:
        self._check("delete", lesson_id)
        if self.lessons.pop(lesson_id, None) is None:
            raise NotFoundError(f"Lesson not found: {lesson_id}")

    async def list(self) -> list:
        self._check("list")
        ordered = sorted(self.lessons.values(), key=lambda l: l.created_at, reverse=True)
        return [lesson.copy() for lesson in ordered]

    async def list_modules(self) -> list:
        self._check("list_modules")
        result = []
        for module in sorted(self.modules.values(), key=lambda m: m.created_at, reverse=True):
            count = sum(1 for l in self.lessons.values() if l.module_id == module.id)
            result.append(Module(**{**module.__dict__, "lesson_count": count}))
        return result

    async def create_module(self, module: Module) -> Module:
        self._check("create_module")
        stored = Module(
            title=module.title,
            description=module.description,
            difficulty=module.difficulty,
            id=f"M{next(self._ids)}",
            created_at=self._now(),
        )
        self.modules[stored.id] = stored
        return stored

    async def assign_module(self, lesson_id: str, module_id: str | None) -> Lesson:
        self._check("assign_module", lesson_id)
        if module_id is not None and module_id not in self.modules:
            raise NotFoundError(f"Module not found: {module_id}")
        if lesson_id not in self.lessons:
            raise NotFoundError(f"Lesson not found: {lesson_id}")
        self.lessons[lesson_id].module_id = module_id
        return self.lessons[lesson_id].copy()

    async def list_module_lessons(self, module_id: str) -> list:
        self._check("list_module_lessons")
        if module_id not in self.modules:
            raise NotFoundError(f"Module not found: {module_id}")
        return [l for l in await self.list() if l.module_id == module_id]


@pytest.fixture
def fake_store():
    return InMemoryLessonStore()


@pytest.fixture
def generator():
    return TemplateGenerator(delay=0)


@pytest.fixture
def staging():
    return MemoryStaging()


@pytest.fixture
def session(fake_store, generator, staging):
    return EditingSession(fake_store, generator, staging=staging, timeout=5)


@pytest_asyncio.fixture
async def sqlite_engine():
    """Fresh in-memory database with all tables, one per test."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_db(engine)
    yield engine
    await engine.dispose()
