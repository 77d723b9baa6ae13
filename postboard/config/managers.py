"""
Database session management. The schema itself is owned by the migrations
in `postboard.migrations`, not by `SQLModel.metadata`.
"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import sessionmaker
from structlog.typing import FilteringBoundLogger

from postboard.migrations.runner import MigrationRunner


class SyncSessionManager:
    """
    A manager for synchronous sessions. Expected usage of this class to interact:

    manager = SyncSessionManager(conn_url)

    with manager.session() as conn:
        user = conn.get(User, user_id)
    """

    connection_url: str
    engine: Engine
    session: sessionmaker

    def __init__(self, connection_url: str, echo: bool = False):
        self.connection_url = connection_url
        self.engine = create_engine(self.connection_url, echo=echo)
        self.session = sessionmaker(self.engine)

    def migrator(self, log: FilteringBoundLogger | None = None) -> MigrationRunner:
        return MigrationRunner(engine=self.engine, log=log)

    def migrate(self) -> list[str]:
        """
        Apply all pending migrations. Required to set up the table schema.
        """
        return self.migrator().migrate()


class AsyncSessionManager:
    """
    A manager for asynchronous sessions. Expected usage of this class to interact:

    manager = AsyncSessionManager(conn_url)

    async with manager.session() as conn:
        user = await user_service.read_by_email(email="me@example.com", conn=conn)
    """

    connection_url: str
    engine: AsyncEngine
    session: async_sessionmaker

    def __init__(self, connection_url: str, echo: bool = False):
        self.connection_url = connection_url
        self.engine = create_async_engine(self.connection_url, echo=echo)
        self.session = async_sessionmaker(self.engine, expire_on_commit=False)
