"""Enum definitions for lesson sections and editable fields."""

import enum


class Section(str, enum.Enum):
    """Regenerable parts of a lesson."""
    title = "title"
    description = "description"
    learningOutcomes = "learningOutcomes"
    keyConcepts = "keyConcepts"
    activities = "activities"

    @property
    def is_list(self) -> bool:
        return self in LIST_SECTIONS


class ScalarFieldName(str, enum.Enum):
    topic = "topic"
    title = "title"
    description = "description"


class MetadataKey(str, enum.Enum):
    difficulty = "difficulty"
    estimatedTime = "estimatedTime"
    prerequisites = "prerequisites"


class ListSection(str, enum.Enum):
    learningOutcomes = "learningOutcomes"
    keyConcepts = "keyConcepts"
    activities = "activities"


# Subfields each list section's elements carry (None = plain string items)
LIST_ITEM_FIELDS: dict[ListSection, tuple[str, ...] | None] = {
    ListSection.learningOutcomes: None,
    ListSection.keyConcepts: ("name", "description"),
    ListSection.activities: ("title", "description"),
}

LIST_SECTIONS = frozenset(
    {Section.learningOutcomes, Section.keyConcepts, Section.activities}
)
