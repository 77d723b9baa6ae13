"""
Service layer for login sessions. A session is identified by an opaque token
that only the client holds; we keep its checksum. Sessions slide: every
successful read pushes the expiry back by the session's original length.
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from postboard.config.settings import Settings
from postboard.core.hashing import checksum
from postboard.core.random import session_token
from postboard.core.timestamps import as_utc
from postboard.database.session import LoginSession
from postboard.database.user import User


class SessionNotFound(Exception):
    pass


class SessionExpired(Exception):
    pass


async def expire_stale_sessions(conn: AsyncSession, log: FilteringBoundLogger):
    """
    Delete every session that has passed its expiry time.
    """

    current_time = datetime.now(timezone.utc)

    result = await conn.execute(
        delete(LoginSession).where(LoginSession.expires_at < current_time)
    )

    await log.adebug("session.expire_stale", removed=result.rowcount)

    return


async def create(
    user: User,
    remember: bool,
    settings: Settings,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> tuple[LoginSession, str]:
    """
    Start a new session for `user`. Returns the session and the plain token,
    which must be handed to the client and is not recoverable afterwards.
    """

    current_time = datetime.now(timezone.utc)
    length = settings.remember_expiry if remember else settings.session_expiry

    token = session_token()

    login_session = LoginSession(
        user_id=user.user_id,
        user=user,
        hashed_token=checksum(token),
        created_at=current_time,
        last_activity=current_time,
        expires_at=current_time + length,
    )

    conn.add(login_session)
    await conn.flush()

    log = log.bind(
        user_id=user.user_id,
        session_id=login_session.session_id,
        remember=remember,
        expires_at=login_session.expires_at,
    )
    await log.ainfo("session.created")

    return login_session, token


async def read_by_token(token: str, conn: AsyncSession) -> LoginSession:
    """
    Find the live session for `token` and slide its expiry forward.

    Raises
    ------
    SessionNotFound
        If no session carries this token.
    SessionExpired
        If the session exists but has expired.
    """

    query = select(LoginSession).filter(LoginSession.hashed_token == checksum(token))
    login_session = (await conn.execute(query)).unique().scalar_one_or_none()

    if login_session is None:
        raise SessionNotFound("No session for this token")

    current_time = datetime.now(timezone.utc)
    expires_at = as_utc(login_session.expires_at)

    if expires_at <= current_time:
        raise SessionExpired(f"Session {login_session.session_id} has expired")

    length: timedelta = expires_at - as_utc(login_session.last_activity)

    login_session.last_activity = current_time
    login_session.expires_at = current_time + length

    conn.add(login_session)

    return login_session


async def expire(
    login_session: LoginSession, conn: AsyncSession, log: FilteringBoundLogger
):
    """
    End a session (logout).
    """

    log = log.bind(
        session_id=login_session.session_id, user_id=login_session.user_id
    )

    await conn.delete(login_session)

    await log.ainfo("session.expired")

    return
