"""
Fixtures for the API tests: a fresh app (and engine) per test, talking to the
shared test database.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from postboard.api.app import create_app


@pytest.fixture
def client(server_settings, database):
    with TestClient(create_app(settings=server_settings)) as client:
        yield client


@pytest.fixture
def example_settings(server_settings, database):
    yield server_settings.model_copy(update={"create_example_user": True})


@pytest.fixture
def example_client(example_settings):
    with TestClient(create_app(settings=example_settings)) as client:
        yield client


@pytest_asyncio.fixture
async def api_app(server_settings, database):
    app = create_app(settings=server_settings)
    yield app
    await app.database_manager.engine.dispose()
