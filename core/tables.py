"""SQLAlchemy Core table definitions."""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
)

metadata = MetaData()


modules = Table(
    "modules",
    metadata,
    Column("module_id", String(36), primary_key=True),
    Column("title", String(200), nullable=False),
    Column("description", Text, nullable=True),
    Column("difficulty", String(50), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)


lessons = Table(
    "lessons",
    metadata,
    Column("lesson_id", String(36), primary_key=True),
    Column("topic", String(500), nullable=False),
    Column("title", String(500), nullable=False, default=""),
    Column("description", Text, nullable=False, default=""),
    Column("learning_outcomes", JSON, nullable=False),  # list[str]
    Column("key_concepts", JSON, nullable=False),  # list[{name, description}]
    Column("activities", JSON, nullable=False),  # list[{title, description}]
    Column("lesson_metadata", JSON, nullable=False),  # {difficulty, estimatedTime, prerequisites}
    Column("content", JSON, nullable=True),  # block editor document
    Column(
        "module_id",
        String(36),
        ForeignKey("modules.module_id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("idx_lessons_created_at", "created_at"),
    Index("idx_lessons_module_id", "module_id"),
)
