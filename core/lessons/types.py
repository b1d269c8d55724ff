# core/lessons/types.py
"""Dataclasses for lessons, their sections, and modules."""

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from core.enums import ListSection, MetadataKey, Section
from .errors import ValidationError


@dataclass
class KeyConcept:
    """A named idea covered by the lesson."""
    name: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "description": self.description}


@dataclass
class Activity:
    """An exercise students do during the lesson."""
    title: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "description": self.description}


@dataclass
class LessonMetadata:
    """Difficulty, timing and prerequisites of a lesson."""
    difficulty: str = "Beginner"
    estimated_time: str = "45 minutes"
    prerequisites: list[str] = field(default_factory=list)

    def merge(self, changes: dict[str, Any]) -> "LessonMetadata":
        """
        Return a copy with only the given keys changed.

        Args:
            changes: Dict keyed by metadata key ("difficulty", "estimatedTime",
                     "prerequisites"); keys not present keep their value.

        Returns:
            New LessonMetadata

        Raises:
            ValidationError: prerequisites is not a list of strings
        """
        updates = {}
        for key, value in changes.items():
            key = MetadataKey(key)
            if key is MetadataKey.prerequisites:
                if value is None:
                    value = []
                if not isinstance(value, (list, tuple)) or not all(
                    isinstance(item, str) for item in value
                ):
                    raise ValidationError(
                        f"prerequisites must be a list of strings, got {value!r}"
                    )
                updates["prerequisites"] = list(value)
            elif key is MetadataKey.estimatedTime:
                updates["estimated_time"] = value
            else:
                updates["difficulty"] = value
        return replace(self, **updates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "difficulty": self.difficulty,
            "estimatedTime": self.estimated_time,
            "prerequisites": list(self.prerequisites),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "LessonMetadata":
        data = data or {}
        defaults = cls()
        return cls(
            difficulty=data.get("difficulty", defaults.difficulty),
            estimated_time=data.get("estimatedTime", defaults.estimated_time),
            prerequisites=list(data.get("prerequisites") or []),
        )


# Lesson attribute holding each section
SECTION_ATTRS: dict[str, str] = {
    Section.title: "title",
    Section.description: "description",
    Section.learningOutcomes: "learning_outcomes",
    Section.keyConcepts: "key_concepts",
    Section.activities: "activities",
}


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class Lesson:
    """
    A draft or persisted lesson.

    A draft has no id; the store assigns id and created_at on first save.
    The section lists are never None.
    """
    topic: str
    title: str = ""
    description: str = ""
    learning_outcomes: list[str] = field(default_factory=list)
    key_concepts: list[KeyConcept] = field(default_factory=list)
    activities: list[Activity] = field(default_factory=list)
    metadata: LessonMetadata = field(default_factory=LessonMetadata)
    content: Any = None  # Block editor document, opaque here
    module_id: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        # Coerce None sections coming from partial records
        if self.learning_outcomes is None:
            self.learning_outcomes = []
        if self.key_concepts is None:
            self.key_concepts = []
        if self.activities is None:
            self.activities = []
        if self.metadata is None:
            self.metadata = LessonMetadata()

    def assign_identity(self, lesson_id: str, created_at: datetime | None) -> None:
        """Record the id/created_at confirmed by the store. An id never changes once set."""
        if self.id is not None and self.id != lesson_id:
            raise ValueError(f"Lesson id is immutable: {self.id} -> {lesson_id}")
        self.id = lesson_id
        if created_at is not None:
            self.created_at = created_at

    def get_section(self, section: Section | str):
        return getattr(self, SECTION_ATTRS[Section(section)])

    def copy(self) -> "Lesson":
        return copy.deepcopy(self)

    def section_items(self, section: ListSection) -> list:
        return getattr(self, SECTION_ATTRS[Section(section.value)])

    def to_record(self, include_module: bool = True) -> dict[str, Any]:
        """
        Editable fields as stored by the record store (no id/timestamps).

        Args:
            include_module: Include moduleId. Module membership is changed
                            through assign_module, so editor saves leave it out.
        """
        record = {
            "topic": self.topic,
            "title": self.title,
            "description": self.description,
            "learningOutcomes": list(self.learning_outcomes),
            "keyConcepts": [c.to_dict() for c in self.key_concepts],
            "activities": [a.to_dict() for a in self.activities],
            "metadata": self.metadata.to_dict(),
            "content": copy.deepcopy(self.content),
        }
        if include_module:
            record["moduleId"] = self.module_id
        return record

    def to_dict(self) -> dict[str, Any]:
        """Flat JSON-compatible record."""
        return {
            "id": self.id,
            **self.to_record(),
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }

    def to_summary(self) -> dict[str, Any]:
        """Record for listings; the content body is left out."""
        data = self.to_dict()
        del data["content"]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Lesson":
        return cls(
            id=data.get("id"),
            topic=data.get("topic") or "",
            title=data.get("title") or "",
            description=data.get("description") or "",
            learning_outcomes=list(data.get("learningOutcomes") or []),
            key_concepts=[
                KeyConcept(name=c.get("name", ""), description=c.get("description", ""))
                for c in data.get("keyConcepts") or []
            ],
            activities=[
                Activity(title=a.get("title", ""), description=a.get("description", ""))
                for a in data.get("activities") or []
            ],
            metadata=LessonMetadata.from_dict(data.get("metadata")),
            content=data.get("content"),
            module_id=data.get("moduleId"),
            created_at=_parse_datetime(data.get("createdAt")),
            updated_at=_parse_datetime(data.get("updatedAt")),
        )


@dataclass
class Module:
    """A named grouping of lessons. Lessons point at it through module_id."""
    title: str
    description: str | None = None
    difficulty: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    lesson_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty,
            "createdAt": _isoformat(self.created_at),
            "lessonCount": self.lesson_count,
        }
