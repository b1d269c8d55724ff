# core/lessons/session.py
"""
Lesson editing session.

One EditingSession owns one lesson draft from generation (or load) through
field edits, section regeneration and content edits until it is saved or
discarded. Views hold a reference to the session; nothing here is global.
"""

import asyncio
import logging
import os
from dataclasses import replace
from typing import Any

from core.enums import Section
from .errors import (
    GenerationError,
    IndexOutOfRangeError,
    InvalidFieldPathError,
    LessonError,
    NoActiveDraftError,
    NotFoundError,
    RegenerationInProgressError,
    StoreUnavailableError,
    ValidationError,
)
from .fields import FieldPath, ListItemField, MetadataField, ScalarField, parse_field_path
from .generator import LessonGenerator
from .staging import MemoryStaging, StagingArea
from .store import LessonStore
from .types import SECTION_ATTRS, Lesson

logger = logging.getLogger(__name__)

DEFAULT_GENERATOR_TIMEOUT = 30.0


class EditingSession:
    """Owns a single lesson draft and every change made to it."""

    def __init__(
        self,
        store: LessonStore,
        generator: LessonGenerator,
        staging: StagingArea | None = None,
        timeout: float | None = None,
    ):
        """
        Args:
            store: Persistence for lessons
            generator: Produces new drafts and regenerated sections
            staging: Slot that keeps an unsaved draft across reloads
            timeout: Seconds allowed per generator call or lesson lookup
                     (default: GENERATOR_TIMEOUT_SECONDS, or 30)
        """
        self.store = store
        self.generator = generator
        self.staging = staging if staging is not None else MemoryStaging()
        if timeout is None:
            timeout = float(os.environ.get("GENERATOR_TIMEOUT_SECONDS", DEFAULT_GENERATOR_TIMEOUT))
        self.timeout = timeout

        self.draft: Lesson | None = None
        self._regenerating: set[Section] = set()
        self._save_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def has_draft(self) -> bool:
        return self.draft is not None

    @property
    def regenerating(self) -> frozenset[Section]:
        """Sections with a regeneration in flight."""
        return frozenset(self._regenerating)

    def is_regenerating(self, section: Section | str) -> bool:
        return Section(section) in self._regenerating

    def _require_draft(self) -> Lesson:
        if self.draft is None:
            raise NoActiveDraftError("No lesson draft is active in this session")
        return self.draft

    def _stage(self) -> None:
        """Mirror an unsaved draft into the staging slot."""
        if self.draft is not None and self.draft.id is None:
            self.staging.write(self.draft.to_dict())

    async def _call_generator(self, coro):
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise GenerationError(f"Generator timed out after {self.timeout}s") from e
        except LessonError:
            raise
        except Exception as e:
            raise GenerationError(f"Generator failed: {e}") from e

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(
        self,
        *,
        topic: str | None = None,
        lesson_id: str | None = None,
        hint: str = "",
    ) -> Lesson:
        """
        Seed the session with a draft.

        - lesson_id: load the persisted lesson
        - topic: generate a new draft (staged until first save)
        - neither: keep the current draft, or resume the staged one

        Raises:
            NotFoundError: lesson_id matches no lesson; the session is left empty
            StoreUnavailableError: store failed or the lookup timed out
            NoActiveDraftError: nothing to resume
            ValidationError: topic is blank
            GenerationError: generator failed or timed out
        """
        if topic is not None and lesson_id is not None:
            raise ValueError("Pass either topic or lesson_id, not both")

        if lesson_id is not None:
            try:
                lesson = await asyncio.wait_for(self.store.get(lesson_id), timeout=self.timeout)
            except NotFoundError:
                self.draft = None
                raise
            except asyncio.TimeoutError as e:
                raise StoreUnavailableError(
                    f"Loading lesson {lesson_id} timed out after {self.timeout}s"
                ) from e
            self.draft = lesson
            logger.info("Opened lesson %s for editing", lesson_id)
            return lesson

        if topic is not None:
            lesson = await self._call_generator(self.generator.generate(topic, hint))
            self.draft = lesson
            self._stage()
            return lesson

        if self.draft is not None:
            return self.draft

        record = self.staging.read()
        if record is None:
            raise NoActiveDraftError("No lesson draft to resume; generate one first")
        self.draft = Lesson.from_dict(record)
        logger.info("Resumed staged draft for topic %r", self.draft.topic)
        return self.draft

    def discard(self) -> None:
        """Drop the draft and its staged copy. Cannot be undone."""
        self.draft = None
        self.staging.clear()

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def edit_field(self, path: FieldPath | str, value: Any) -> None:
        """
        Set a scalar field or one metadata key.

        Metadata keys are merged: other metadata keys keep their values.
        A ListItemField path is forwarded to edit_list_item.
        """
        draft = self._require_draft()
        if isinstance(path, str):
            path = parse_field_path(path)

        if isinstance(path, ListItemField):
            self.edit_list_item(path.section, path.index, value, field=path.subfield)
            return

        if isinstance(path, ScalarField):
            setattr(draft, path.name.value, value)
        elif isinstance(path, MetadataField):
            draft.metadata = draft.metadata.merge({path.key.value: value})
        else:
            raise InvalidFieldPathError(f"Not a field path: {path!r}")
        self._stage()

    def edit_metadata(self, **changes: Any) -> None:
        """Merge several metadata keys, e.g. edit_metadata(difficulty="Advanced")."""
        draft = self._require_draft()
        keys = [MetadataField(key).key.value for key in changes]
        draft.metadata = draft.metadata.merge(dict(zip(keys, changes.values())))
        self._stage()

    def edit_list_item(
        self,
        section: str,
        index: int,
        value: Any,
        field: str | None = None,
    ) -> None:
        """
        Change one element of a list section.

        Args:
            section: "learningOutcomes", "keyConcepts" or "activities"
            index: Position in the current list
            value: New outcome text, or new value for `field`
            field: Subfield to change for key concepts / activities

        Raises:
            IndexOutOfRangeError: index is outside the current list (list unchanged)
        """
        draft = self._require_draft()
        path = ListItemField(section, index, field)
        items = draft.section_items(path.section)

        if not 0 <= path.index < len(items):
            raise IndexOutOfRangeError(
                f"{path.section.value} index {path.index} out of range (length {len(items)})"
            )

        if path.subfield is None:
            items[path.index] = value
        else:
            items[path.index] = replace(items[path.index], **{path.subfield: value})
        self._stage()

    def set_content(self, document: Any) -> None:
        """Replace the rich-text document as reported by the editor."""
        draft = self._require_draft()
        draft.content = document
        self._stage()

    # ------------------------------------------------------------------
    # Regeneration
    # ------------------------------------------------------------------

    async def regenerate_section(self, section: Section | str):
        """
        Replace one section with freshly generated content.

        Different sections may regenerate concurrently. A second request for a
        section that is already regenerating is rejected. The new value is
        applied in a single assignment once complete; a failed or timed-out
        request leaves the draft as it was.

        Returns:
            The new value of the section

        Raises:
            RegenerationInProgressError: section is already regenerating
            NoActiveDraftError: no draft, or it was discarded/replaced meanwhile
            GenerationError: generator failed or timed out
        """
        draft = self._require_draft()
        try:
            section = Section(section)
        except ValueError:
            raise InvalidFieldPathError(f"Not a regenerable section: {section!r}") from None
        if section in self._regenerating:
            raise RegenerationInProgressError(section.value)

        self._regenerating.add(section)
        try:
            value = await self._call_generator(self.generator.regenerate(draft.topic, section))
        finally:
            self._regenerating.discard(section)

        if self.draft is not draft:
            logger.info("Dropped regenerated %s: draft changed while generating", section.value)
            raise NoActiveDraftError("Draft was discarded or replaced during regeneration")

        if section.is_list:
            value = list(value)
        setattr(draft, SECTION_ATTRS[section], value)
        self._stage()
        logger.info("Regenerated %s for topic %r", section.value, draft.topic)
        return value

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def save(self) -> Lesson:
        """
        Persist the draft as it is at the moment of the call.

        Creates the lesson when the draft has no id, updates it otherwise.
        Saves are serialized, so saving a new draft twice creates it once.

        Returns:
            The persisted lesson with id and created_at

        Raises:
            ValidationError: topic is blank (draft unchanged)
            StoreUnavailableError: store failed (draft unchanged, retry is safe)
            NotFoundError: the lesson was deleted elsewhere (draft unchanged)
        """
        async with self._save_lock:
            draft = self._require_draft()
            if not (draft.topic or "").strip():
                raise ValidationError("Topic is required")

            record = draft.to_record(include_module=False)
            is_new = draft.id is None
            try:
                if is_new:
                    saved = await self.store.create(Lesson.from_dict(record))
                else:
                    saved = await self.store.update(draft.id, record)
            except (StoreUnavailableError, NotFoundError) as e:
                logger.warning("Saving lesson %s failed; draft kept: %s", draft.id or "(new)", e)
                raise

            if self.draft is draft:
                draft.assign_identity(saved.id, saved.created_at)
                draft.updated_at = saved.updated_at
                draft.module_id = saved.module_id
                if is_new:
                    self.staging.clear()

        logger.info("Saved lesson %s", saved.id)
        return saved
