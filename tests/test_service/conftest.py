"""
Configuration variables and fixtures for the service layer tests.
"""

import pytest_asyncio
import structlog

from postboard.config.settings import Settings
from postboard.service import user as user_service


@pytest_asyncio.fixture(scope="session")
def session_manager(server_settings: Settings, database):
    yield server_settings.async_manager()


@pytest_asyncio.fixture(scope="session")
def logger():
    yield structlog.get_logger()


@pytest_asyncio.fixture(scope="session")
async def user(session_manager, logger):
    async with session_manager.session() as conn:
        async with conn.begin():
            user = await user_service.create(
                name="Admin User",
                email="admin@postboard.local",
                password="correct horse battery staple",
                conn=conn,
                log=logger,
            )

            USER_ID = user.user_id

    yield USER_ID

    async with session_manager.session() as conn:
        async with conn.begin():
            await user_service.delete(
                email="admin@postboard.local",
                conn=conn,
                log=logger,
            )
