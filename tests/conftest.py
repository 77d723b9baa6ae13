"""
Core configuration
"""

import pytest_asyncio

from postboard.config.settings import Settings


@pytest_asyncio.fixture(scope="session")
def database_path(tmp_path_factory):
    yield tmp_path_factory.mktemp("database") / "postboard.db"


@pytest_asyncio.fixture(scope="session")
def server_settings(database_path):
    yield Settings(
        _env_file=None,
        database_type="sqlite",
        database_db=str(database_path),
        hostname="http://testserver",
        frontend_hostname="http://testserver",
        auth_mode="cookie",
    )


@pytest_asyncio.fixture(scope="session")
def database(server_settings: Settings):
    server_settings.sync_manager().migrate()
