"""Fixtures for API tests: the app wired to in-memory fakes."""

import pytest
from fastapi.testclient import TestClient

from core.lessons import MemoryStaging
from main import app
from web_api.dependencies import get_generator, get_staging_factory, get_store
from web_api.sessions import clear_sessions


@pytest.fixture
def staging_slots():
    """Staging slots by client id, shared across sessions of one test."""
    return {}


@pytest.fixture
def client(fake_store, generator, staging_slots):
    def staging_factory(client_id):
        if client_id is None:
            return MemoryStaging()
        return staging_slots.setdefault(client_id, MemoryStaging())

    app.dependency_overrides[get_store] = lambda: fake_store
    app.dependency_overrides[get_generator] = lambda: generator
    app.dependency_overrides[get_staging_factory] = lambda: staging_factory
    yield TestClient(app)
    app.dependency_overrides.clear()
    clear_sessions()
