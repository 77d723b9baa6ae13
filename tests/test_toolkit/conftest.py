"""
Fixtures for the client toolkit tests.
"""

import pytest
from fake_backend import FakeBackend

from postboard.config.settings import Settings


@pytest.fixture
def backend():
    yield FakeBackend()


@pytest.fixture
def settings():
    yield Settings(_env_file=None, hostname="http://localhost:8000")


@pytest.fixture
def token_settings(settings):
    yield settings.model_copy(update={"auth_mode": "token"})
