"""Lesson management module."""

from .types import (
    Activity,
    KeyConcept,
    Lesson,
    LessonMetadata,
    Module,
)
from .errors import (
    LessonError,
    NotFoundError,
    ValidationError,
    NoActiveDraftError,
    StoreUnavailableError,
    IndexOutOfRangeError,
    InvalidFieldPathError,
    RegenerationInProgressError,
    GenerationError,
)
from .fields import (
    ScalarField,
    MetadataField,
    ListItemField,
    parse_field_path,
)
from .generator import (
    LessonGenerator,
    TemplateGenerator,
    REGENERATED_SECTION_SIZE,
)
from .store import LessonStore, DatabaseLessonStore
from .staging import StagingArea, MemoryStaging, JsonFileStaging
from .session import EditingSession
from .dashboard import (
    list_dashboard,
    delete_lesson,
    create_module,
    add_lesson_to_module,
    get_module_lessons,
)

__all__ = [
    "Activity",
    "KeyConcept",
    "Lesson",
    "LessonMetadata",
    "Module",
    "LessonError",
    "NotFoundError",
    "ValidationError",
    "NoActiveDraftError",
    "StoreUnavailableError",
    "IndexOutOfRangeError",
    "InvalidFieldPathError",
    "RegenerationInProgressError",
    "GenerationError",
    "ScalarField",
    "MetadataField",
    "ListItemField",
    "parse_field_path",
    "LessonGenerator",
    "TemplateGenerator",
    "REGENERATED_SECTION_SIZE",
    "LessonStore",
    "DatabaseLessonStore",
    "StagingArea",
    "MemoryStaging",
    "JsonFileStaging",
    "EditingSession",
    "list_dashboard",
    "delete_lesson",
    "create_module",
    "add_lesson_to_module",
    "get_module_lessons",
]
