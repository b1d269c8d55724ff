"""Tests for the lesson editor endpoints."""

import asyncio

import httpx
import pytest

from core.enums import Section
from core.lessons import GenerationError, TemplateGenerator
from main import app
from web_api.dependencies import get_generator


def open_session(client, **body):
    response = client.post("/api/editor/sessions", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_open_generates_draft(client):
    data = open_session(client, topic="Photosynthesis", additional_info="for 10 year olds")

    assert data["sessionId"]
    assert data["lesson"]["title"] == "Understanding Photosynthesis"
    assert data["lesson"]["id"] is None
    assert data["regenerating"] == []


def test_open_blank_topic_is_422(client):
    response = client.post("/api/editor/sessions", json={"topic": "   "})
    assert response.status_code == 422


def test_open_with_topic_and_lesson_id_is_400(client):
    response = client.post("/api/editor/sessions", json={"topic": "Tides", "lesson_id": "L1"})
    assert response.status_code == 400


def test_open_unknown_lesson_is_404(client):
    response = client.post("/api/editor/sessions", json={"lesson_id": "missing"})
    assert response.status_code == 404


def test_resume_without_staged_draft_is_409(client):
    response = client.post("/api/editor/sessions", json={"client_id": "tab-1"})
    assert response.status_code == 409


def test_resume_staged_draft(client):
    first = open_session(client, topic="Tides", client_id="tab-1")
    client.patch(
        f"/api/editor/sessions/{first['sessionId']}/fields",
        json={"path": "title", "value": "All About Tides"},
    )

    resumed = open_session(client, client_id="tab-1")
    assert resumed["sessionId"] != first["sessionId"]
    assert resumed["lesson"]["title"] == "All About Tides"


def test_invalid_client_id_is_rejected(client):
    response = client.post("/api/editor/sessions", json={"topic": "Tides", "client_id": "../etc"})
    assert response.status_code == 422


def test_edit_fields(client):
    sid = open_session(client, topic="Photosynthesis")["sessionId"]

    response = client.patch(
        f"/api/editor/sessions/{sid}/fields",
        json={"path": "keyConcepts.1.name", "value": "Chlorophyll"},
    )
    assert response.status_code == 200
    lesson = response.json()["lesson"]
    assert lesson["keyConcepts"][1]["name"] == "Chlorophyll"

    response = client.patch(
        f"/api/editor/sessions/{sid}/fields",
        json={"path": "metadata.difficulty", "value": "Advanced"},
    )
    metadata = response.json()["lesson"]["metadata"]
    assert metadata == {
        "difficulty": "Advanced",
        "estimatedTime": "45 minutes",
        "prerequisites": [],
    }


def test_edit_bad_paths(client):
    sid = open_session(client, topic="Photosynthesis")["sessionId"]

    out_of_range = client.patch(
        f"/api/editor/sessions/{sid}/fields",
        json={"path": "learningOutcomes.99", "value": "x"},
    )
    assert out_of_range.status_code == 400

    unknown = client.patch(
        f"/api/editor/sessions/{sid}/fields",
        json={"path": "nonsense", "value": "x"},
    )
    assert unknown.status_code == 400


def test_edit_metadata_merges(client):
    sid = open_session(client, topic="Photosynthesis")["sessionId"]

    response = client.patch(
        f"/api/editor/sessions/{sid}/metadata",
        json={"estimatedTime": "60 minutes"},
    )
    assert response.status_code == 200
    metadata = response.json()["lesson"]["metadata"]
    assert metadata["estimatedTime"] == "60 minutes"
    assert metadata["difficulty"] == "Beginner"


def test_set_content(client):
    sid = open_session(client, topic="Photosynthesis")["sessionId"]
    document = [{"type": "heading", "content": "Light"}]

    response = client.put(f"/api/editor/sessions/{sid}/content", json={"document": document})
    assert response.json()["lesson"]["content"] == document


def test_regenerate_section(client):
    sid = open_session(client, topic="Photosynthesis")["sessionId"]

    response = client.post(f"/api/editor/sessions/{sid}/regenerate/{Section.keyConcepts.value}")
    assert response.status_code == 200
    data = response.json()
    assert len(data["lesson"]["keyConcepts"]) == 4
    assert data["regenerating"] == []


def test_regenerate_unknown_section_is_400(client):
    sid = open_session(client, topic="Photosynthesis")["sessionId"]
    response = client.post(f"/api/editor/sessions/{sid}/regenerate/metadata")
    assert response.status_code == 400


class GatedGenerator(TemplateGenerator):
    """Regeneration waits until `release` is set."""

    def __init__(self):
        super().__init__(delay=0)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def regenerate(self, topic, section):
        self.started.set()
        await self.release.wait()
        return await super().regenerate(topic, section)


@pytest.mark.asyncio
async def test_concurrent_same_section_regeneration_is_409(client):
    gated = GatedGenerator()
    app.dependency_overrides[get_generator] = lambda: gated

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        opened = await http.post("/api/editor/sessions", json={"topic": "Photosynthesis"})
        sid = opened.json()["sessionId"]
        url = f"/api/editor/sessions/{sid}/regenerate/{Section.keyConcepts.value}"

        first = asyncio.create_task(http.post(url))
        await gated.started.wait()

        second = await http.post(url)
        assert second.status_code == 409
        during = await http.get(f"/api/editor/sessions/{sid}")
        assert during.json()["regenerating"] == ["keyConcepts"]

        gated.release.set()
        response = await first
        assert response.status_code == 200
        assert response.json()["regenerating"] == []
        assert len(response.json()["lesson"]["keyConcepts"]) == 4


def test_prerequisites_as_string_is_422(client):
    sid = open_session(client, topic="Photosynthesis")["sessionId"]

    response = client.patch(
        f"/api/editor/sessions/{sid}/fields",
        json={"path": "metadata.prerequisites", "value": "Arithmetic"},
    )
    assert response.status_code == 422
    draft = client.get(f"/api/editor/sessions/{sid}").json()["lesson"]
    assert draft["metadata"]["prerequisites"] == []


def test_generator_failure_is_502(client):
    class BrokenGenerator(TemplateGenerator):
        async def generate(self, topic, hint=""):
            raise GenerationError("model offline")

    app.dependency_overrides[get_generator] = lambda: BrokenGenerator(delay=0)
    response = client.post("/api/editor/sessions", json={"topic": "Tides"})
    assert response.status_code == 502


def test_save_creates_then_updates(client, fake_store):
    sid = open_session(client, topic="Photosynthesis")["sessionId"]

    first = client.post(f"/api/editor/sessions/{sid}/save")
    assert first.status_code == 200
    lesson_id = first.json()["lesson"]["id"]
    assert lesson_id

    client.patch(
        f"/api/editor/sessions/{sid}/fields",
        json={"path": "title", "value": "Photosynthesis Basics"},
    )
    second = client.post(f"/api/editor/sessions/{sid}/save")
    assert second.json()["lesson"]["id"] == lesson_id
    assert list(fake_store.lessons) == [lesson_id]
    assert fake_store.lessons[lesson_id].title == "Photosynthesis Basics"


def test_save_store_unavailable_keeps_draft(client, fake_store):
    sid = open_session(client, topic="Photosynthesis")["sessionId"]
    fake_store.available = False

    response = client.post(f"/api/editor/sessions/{sid}/save")
    assert response.status_code == 503

    fake_store.available = True
    draft = client.get(f"/api/editor/sessions/{sid}").json()["lesson"]
    assert draft["id"] is None
    assert draft["title"] == "Understanding Photosynthesis"
    assert client.post(f"/api/editor/sessions/{sid}/save").status_code == 200


def test_save_blank_topic_is_422(client):
    sid = open_session(client, topic="Photosynthesis")["sessionId"]
    client.patch(f"/api/editor/sessions/{sid}/fields", json={"path": "topic", "value": " "})

    response = client.post(f"/api/editor/sessions/{sid}/save")
    assert response.status_code == 422


def test_discard_closes_session(client):
    sid = open_session(client, topic="Photosynthesis")["sessionId"]

    response = client.delete(f"/api/editor/sessions/{sid}")
    assert response.json() == {"status": "discarded"}
    assert client.get(f"/api/editor/sessions/{sid}").status_code == 404
