"""
Lesson editor API routes.

Endpoints:
- POST /api/editor/sessions - Open a session (new topic, existing lesson, or resume)
- GET /api/editor/sessions/{session_id} - Current draft
- PATCH /api/editor/sessions/{session_id}/fields - Edit one field
- PATCH /api/editor/sessions/{session_id}/metadata - Merge metadata keys
- PUT /api/editor/sessions/{session_id}/content - Replace the rich-text document
- POST /api/editor/sessions/{session_id}/regenerate/{section} - Regenerate a section
- POST /api/editor/sessions/{session_id}/save - Save the draft
- DELETE /api/editor/sessions/{session_id} - Discard the draft and close the session
"""

from typing import Any, Callable

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from core.lessons import (
    EditingSession,
    LessonGenerator,
    LessonStore,
    StagingArea,
)
from web_api.dependencies import get_generator, get_staging_factory, get_store
from web_api.sessions import close_session, get_session, register_session

router = APIRouter(prefix="/api/editor", tags=["editor"])


class OpenSessionRequest(BaseModel):
    """
    Request body for opening an editing session.

    Give a topic to generate a new lesson, a lesson_id to edit a saved one,
    or neither to resume the draft staged for client_id.
    """

    topic: str | None = None
    additional_info: str = ""
    lesson_id: str | None = None
    client_id: str | None = Field(None, pattern=r"^[A-Za-z0-9_-]+$")


class FieldEdit(BaseModel):
    """A dotted field path (e.g. "title", "metadata.difficulty", "keyConcepts.1.name") and its new value."""

    path: str
    value: Any


class MetadataEdit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    difficulty: str | None = None
    estimated_time: str | None = Field(None, alias="estimatedTime")
    prerequisites: list[str] | None = None


class ContentUpdate(BaseModel):
    document: Any = None


def _session_payload(session_id: str, session: EditingSession) -> dict[str, Any]:
    return {
        "sessionId": session_id,
        "lesson": session.draft.to_dict() if session.draft else None,
        "regenerating": sorted(section.value for section in session.regenerating),
    }


@router.post("/sessions", status_code=201)
async def open_session(
    body: OpenSessionRequest,
    store: LessonStore = Depends(get_store),
    generator: LessonGenerator = Depends(get_generator),
    staging_factory: Callable[[str | None], StagingArea] = Depends(get_staging_factory),
) -> dict[str, Any]:
    """
    Open a session.

    Returns 404 for an unknown lesson_id, 409 when there is nothing to resume.
    """
    if body.topic is not None and body.lesson_id is not None:
        raise HTTPException(400, "Give either topic or lesson_id, not both")

    session = EditingSession(store, generator, staging=staging_factory(body.client_id))
    await session.initialize(
        topic=body.topic,
        lesson_id=body.lesson_id,
        hint=body.additional_info,
    )
    session_id = register_session(session)
    return _session_payload(session_id, session)


@router.get("/sessions/{session_id}")
async def read_session(session_id: str) -> dict[str, Any]:
    return _session_payload(session_id, get_session(session_id))


@router.patch("/sessions/{session_id}/fields")
async def edit_field(session_id: str, body: FieldEdit) -> dict[str, Any]:
    session = get_session(session_id)
    session.edit_field(body.path, body.value)
    return _session_payload(session_id, session)


@router.patch("/sessions/{session_id}/metadata")
async def edit_metadata(session_id: str, body: MetadataEdit) -> dict[str, Any]:
    """Only the keys present in the body change."""
    session = get_session(session_id)
    session.edit_metadata(**body.model_dump(exclude_unset=True, by_alias=True))
    return _session_payload(session_id, session)


@router.put("/sessions/{session_id}/content")
async def set_content(session_id: str, body: ContentUpdate) -> dict[str, Any]:
    session = get_session(session_id)
    session.set_content(body.document)
    return _session_payload(session_id, session)


@router.post("/sessions/{session_id}/regenerate/{section}")
async def regenerate_section(session_id: str, section: str) -> dict[str, Any]:
    """Returns 409 while the same section is still regenerating."""
    session = get_session(session_id)
    await session.regenerate_section(section)
    return _session_payload(session_id, session)


@router.post("/sessions/{session_id}/save")
async def save_session(session_id: str) -> dict[str, Any]:
    """
    Save the draft.

    On 422/503 the draft stays in the session unchanged and the save can be retried.
    """
    session = get_session(session_id)
    lesson = await session.save()
    return {"status": "saved", "lesson": lesson.to_dict()}


@router.delete("/sessions/{session_id}")
async def discard_session(session_id: str) -> dict[str, Any]:
    session = get_session(session_id)
    session.discard()
    close_session(session_id)
    return {"status": "discarded"}
