"""
Dependencies used by the API.
"""

import secrets
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger
from structlog.typing import FilteringBoundLogger

from postboard.config.settings import Settings
from postboard.database.session import LoginSession
from postboard.service import session as session_service

SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}

# Laravel's status for a failed CSRF check; clients already know it.
HTTP_419_CSRF_MISMATCH = 419


@lru_cache
def SETTINGS():
    return Settings()


def get_settings(request: Request) -> Settings:
    return request.app.settings


async def get_async_session(request: Request):
    async with request.app.database_manager.session() as session:
        async with session.begin():
            yield session


def logger():
    return get_logger()


SettingsDependency = Annotated[Settings, Depends(get_settings)]
DatabaseDependency = Annotated[AsyncSession, Depends(get_async_session)]
LoggerDependency = Annotated[FilteringBoundLogger, Depends(logger)]


def bearer_token(request: Request) -> str | None:
    if "Authorization" not in request.headers:
        return None

    contents = request.headers["Authorization"].split(" ")

    if len(contents) != 2 or contents[0] != "Bearer":
        return None

    return contents[1]


async def verify_csrf(
    request: Request, settings: SettingsDependency, log: LoggerDependency
):
    """
    Double-submit CSRF check for state-changing requests: the header must echo
    the CSRF cookie. Bearer-authenticated requests are exempt.
    """

    if request.method in SAFE_METHODS or bearer_token(request) is not None:
        return

    cookie = request.cookies.get(settings.csrf_cookie_name)
    header = request.headers.get(settings.csrf_header_name)

    if not cookie or not header or not secrets.compare_digest(cookie, header):
        log = log.bind(path=request.url.path, has_cookie=bool(cookie))
        await log.ainfo("api.csrf.mismatch")
        raise HTTPException(
            status_code=HTTP_419_CSRF_MISMATCH, detail="CSRF token mismatch."
        )


async def current_session(
    request: Request,
    settings: SettingsDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> LoginSession:
    """
    Resolve the session for this request, from the bearer token if present
    and otherwise from the session cookie. Raises a 401 if there is none.
    """

    unauthenticated = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthenticated."
    )

    token = bearer_token(request) or request.cookies.get(settings.session_cookie_name)

    if token is None:
        await log.adebug("api.auth.no_token")
        raise unauthenticated

    try:
        return await session_service.read_by_token(token=token, conn=conn)
    except session_service.SessionNotFound:
        await log.adebug("api.auth.unknown_session")
        raise unauthenticated
    except session_service.SessionExpired:
        await log.adebug("api.auth.expired_session")
        raise unauthenticated


CsrfDependency = Depends(verify_csrf)
SessionDependency = Annotated[LoginSession, Depends(current_session)]
