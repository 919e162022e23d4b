import os

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from tomatxt.commands import CommandAPI, get_command_api  # noqa: E402
from tomatxt.main import app  # noqa: E402
from tomatxt.repositories import InMemoryRepository  # noqa: E402
from tomatxt.settings import get_settings  # noqa: E402


@pytest.fixture
def api():
    """A CommandAPI over a fresh in-memory repository."""
    return CommandAPI(InMemoryRepository(), get_settings())


@pytest.fixture
def client(api):
    """TestClient whose routes all talk to the ``api`` fixture."""
    app.dependency_overrides[get_command_api] = lambda: api
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
