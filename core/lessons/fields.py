"""
Editable field paths.

A path names exactly one editable spot in a lesson draft:
- ScalarField: topic, title, description
- MetadataField: one metadata key (merged into the existing metadata)
- ListItemField: one element (or one subfield of one element) of a list section

Paths are checked when they are built, so an invalid path never reaches a draft.
"""

from dataclasses import dataclass

from core.enums import LIST_ITEM_FIELDS, ListSection, MetadataKey, ScalarFieldName
from .errors import InvalidFieldPathError


def _coerce(enum_cls, value, kind: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidFieldPathError(f"Unknown {kind} '{value}'. Allowed: {allowed}") from None


@dataclass(frozen=True)
class ScalarField:
    name: ScalarFieldName

    def __post_init__(self):
        object.__setattr__(self, "name", _coerce(ScalarFieldName, self.name, "field"))

    def __str__(self) -> str:
        return self.name.value


@dataclass(frozen=True)
class MetadataField:
    key: MetadataKey

    def __post_init__(self):
        object.__setattr__(self, "key", _coerce(MetadataKey, self.key, "metadata key"))

    def __str__(self) -> str:
        return f"metadata.{self.key.value}"


@dataclass(frozen=True)
class ListItemField:
    section: ListSection
    index: int
    subfield: str | None = None

    def __post_init__(self):
        section = _coerce(ListSection, self.section, "list section")
        object.__setattr__(self, "section", section)

        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise InvalidFieldPathError(f"List index must be an int, got {self.index!r}")

        allowed = LIST_ITEM_FIELDS[section]
        if allowed is None:
            if self.subfield is not None:
                raise InvalidFieldPathError(
                    f"{section.value} items are plain strings; no subfield allowed"
                )
        elif self.subfield not in allowed:
            raise InvalidFieldPathError(
                f"{section.value} items need a subfield in {allowed}, got {self.subfield!r}"
            )

    def __str__(self) -> str:
        parts = [self.section.value, str(self.index)]
        if self.subfield:
            parts.append(self.subfield)
        return ".".join(parts)


FieldPath = ScalarField | MetadataField | ListItemField


def parse_field_path(path: str) -> FieldPath:
    """
    Build a field path from its dotted form.

    Examples:
        "title"                  -> ScalarField("title")
        "metadata.estimatedTime" -> MetadataField("estimatedTime")
        "learningOutcomes.0"     -> ListItemField("learningOutcomes", 0)
        "keyConcepts.2.name"     -> ListItemField("keyConcepts", 2, "name")

    Raises:
        InvalidFieldPathError: If the path names no editable field
    """
    parts = path.split(".") if path else []

    if len(parts) == 1:
        return ScalarField(parts[0])

    if len(parts) == 2 and parts[0] == "metadata":
        return MetadataField(parts[1])

    if len(parts) in (2, 3) and parts[0] in {s.value for s in ListSection}:
        try:
            index = int(parts[1])
        except ValueError:
            raise InvalidFieldPathError(f"Bad list index in path '{path}'") from None
        subfield = parts[2] if len(parts) == 3 else None
        return ListItemField(parts[0], index, subfield)

    raise InvalidFieldPathError(f"Unknown field path '{path}'")
