"""
Main settings object.
"""

from datetime import timedelta
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import URL

from .managers import AsyncSessionManager, SyncSessionManager

AuthMode = Literal["cookie", "token"]


class Settings(BaseSettings):
    database_type: Literal["sqlite", "postgres"] = "sqlite"
    database_user: str | None = None
    database_password: str | None = None
    database_port: int | None = None
    database_host: str | None = None
    database_db: str = "postboard.db"

    database_echo: bool = False

    # Example/testing setup
    create_example_user: bool = False
    example_user_email: str = "example@postboard.local"
    example_user_password: str = "password"

    # Sessions. The session token travels either in the session cookie or as
    # a bearer token, depending on `auth_mode` on the client side.
    auth_mode: AuthMode = "cookie"
    session_cookie_name: str = "postboard_session"
    csrf_cookie_name: str = "XSRF-TOKEN"
    csrf_header_name: str = "X-XSRF-TOKEN"
    session_expiry: timedelta = timedelta(minutes=120)
    remember_expiry: timedelta = timedelta(weeks=4)
    secure_cookies: bool = False

    # Production setup
    hostname: str = "http://localhost:8000"
    api_path: str = "/api"
    frontend_hostname: str = "http://localhost:8001"

    # Client-side persistence (the 'local storage' of the CLI client)
    storage_path: Path = Path.home() / ".config/postboard/storage.json"

    model_config = SettingsConfigDict(env_prefix="POSTBOARD_", env_file=".env")

    @property
    def api_base_url(self) -> str:
        return f"{self.hostname}{self.api_path}"

    @property
    def csrf_cookie_url(self) -> str:
        return f"{self.hostname}/sanctum/csrf-cookie"

    @property
    def sync_driver(self) -> str:
        match self.database_type:
            case "sqlite":
                return "sqlite"
            case "postgres":
                return "postgresql+psycopg"
            case _:
                raise ValueError

    @property
    def async_driver(self) -> str:
        match self.database_type:
            case "sqlite":
                return "sqlite+aiosqlite"
            case "postgres":
                return "postgresql+asyncpg"
            case _:
                raise ValueError

    @property
    def sync_uri(self) -> URL:
        return URL.create(
            drivername=self.sync_driver,
            username=self.database_user,
            password=self.database_password,
            host=self.database_host,
            port=self.database_port,
            database=self.database_db,
        )

    def sync_manager(self) -> SyncSessionManager:
        return SyncSessionManager(connection_url=self.sync_uri, echo=self.database_echo)

    @property
    def async_uri(self) -> URL:
        return URL.create(
            drivername=self.async_driver,
            username=self.database_user,
            password=self.database_password,
            host=self.database_host,
            port=self.database_port,
            database=self.database_db,
        )

    def async_manager(self) -> AsyncSessionManager:
        return AsyncSessionManager(
            connection_url=self.async_uri, echo=self.database_echo
        )
