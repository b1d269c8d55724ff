"""
FastAPI dependencies for the lesson routes.

Overridable through app.dependency_overrides (tests swap in fakes).
"""

from typing import Callable

from core.lessons import (
    DatabaseLessonStore,
    JsonFileStaging,
    LessonGenerator,
    LessonStore,
    MemoryStaging,
    StagingArea,
    TemplateGenerator,
)


def get_store() -> LessonStore:
    return DatabaseLessonStore()


def get_generator() -> LessonGenerator:
    return TemplateGenerator()


def staging_for_client(client_id: str | None) -> StagingArea:
    """File-backed staging slot per client; anonymous clients get a throwaway slot."""
    if client_id:
        return JsonFileStaging(slot=client_id)
    return MemoryStaging()


def get_staging_factory() -> Callable[[str | None], StagingArea]:
    return staging_for_client
