"""
Session management: CSRF cookie, registration, login, logout and the current
user.
"""

from fastapi import APIRouter, Response, status

from postboard.config.settings import Settings
from postboard.core.models import AuthResponse, LoginContent, RegisterContent
from postboard.core.random import csrf_token
from postboard.core.user import UserData
from postboard.service import session as session_service
from postboard.service import user as user_service

from .dependencies import (
    CsrfDependency,
    DatabaseDependency,
    LoggerDependency,
    SessionDependency,
    SettingsDependency,
)
from .errors import UnprocessableContent

csrf_app = APIRouter(tags=["CSRF Protection"])
auth_app = APIRouter(tags=["Login and Session Management"])


def set_session_cookie(
    response: Response,
    token: str,
    remember: bool,
    settings: Settings,
):
    length = settings.remember_expiry if remember else settings.session_expiry

    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=int(length.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
    )


@csrf_app.get(
    "/sanctum/csrf-cookie",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Initialize CSRF protection",
    description=(
        "Sets the `XSRF-TOKEN` cookie. Clients must echo its value in the "
        "`X-XSRF-TOKEN` header on every state-changing request that is not "
        "authenticated with a bearer token."
    ),
)
async def csrf_cookie(
    response: Response, settings: SettingsDependency, log: LoggerDependency
):
    response.set_cookie(
        key=settings.csrf_cookie_name,
        value=csrf_token(),
        max_age=int(settings.session_expiry.total_seconds()),
        # Must be readable by the client so it can echo it back.
        httponly=False,
        samesite="lax",
        secure=settings.secure_cookies,
    )

    await log.adebug("api.csrf.issued")

    return


@auth_app.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[CsrfDependency],
    summary="Register a new user",
    description=(
        "Create a user and start a session for them. The session token is "
        "set as a cookie and also returned in the body."
    ),
    responses={
        201: {"description": "User created and logged in"},
        419: {"description": "CSRF token mismatch"},
        422: {"description": "Validation failed"},
    },
)
async def register(
    content: RegisterContent,
    response: Response,
    settings: SettingsDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> AuthResponse:
    try:
        user = await user_service.create(
            name=content.name,
            email=content.email,
            password=content.password,
            password_confirmation=content.password_confirmation,
            conn=conn,
            log=log,
        )
    except user_service.RegistrationInvalid as e:
        raise UnprocessableContent(message=str(e), errors=e.errors)
    except user_service.UserExistsError:
        raise UnprocessableContent(
            message="The email has already been taken.",
            errors={"email": ["The email has already been taken."]},
        )

    login_session, token = await session_service.create(
        user=user, remember=False, settings=settings, conn=conn, log=log
    )

    set_session_cookie(
        response=response,
        token=token,
        remember=False,
        settings=settings,
    )

    await log.ainfo(
        "api.auth.register.success",
        user_id=user.user_id,
        session_id=login_session.session_id,
    )

    return AuthResponse(user=user.to_core(), token=token)


@auth_app.post(
    "/login",
    response_model=AuthResponse,
    dependencies=[CsrfDependency],
    summary="Start a session",
    description=(
        "Check the credentials and start a session. The session token is set "
        "as a cookie and also returned in the body. Set `remember` for a "
        "long-lived session."
    ),
    responses={
        200: {"description": "Logged in"},
        419: {"description": "CSRF token mismatch"},
        422: {"description": "Invalid credentials"},
    },
)
async def login(
    content: LoginContent,
    response: Response,
    settings: SettingsDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
) -> AuthResponse:
    try:
        user = await user_service.authenticate(
            email=content.email, password=content.password, conn=conn, log=log
        )
    except user_service.InvalidCredentials as e:
        raise UnprocessableContent(message=str(e), errors={"email": [str(e)]})

    await session_service.expire_stale_sessions(conn=conn, log=log)

    login_session, token = await session_service.create(
        user=user, remember=content.remember, settings=settings, conn=conn, log=log
    )

    set_session_cookie(
        response=response,
        token=token,
        remember=content.remember,
        settings=settings,
    )

    await log.ainfo(
        "api.auth.login.success",
        user_id=user.user_id,
        session_id=login_session.session_id,
    )

    return AuthResponse(user=user.to_core(), token=token)


@auth_app.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[CsrfDependency],
    summary="End the current session",
    responses={
        204: {"description": "Logged out"},
        401: {"description": "Not logged in"},
        419: {"description": "CSRF token mismatch"},
    },
)
async def logout(
    login_session: SessionDependency,
    response: Response,
    settings: SettingsDependency,
    conn: DatabaseDependency,
    log: LoggerDependency,
):
    await session_service.expire(login_session=login_session, conn=conn, log=log)

    response.delete_cookie(settings.session_cookie_name)

    return


@auth_app.get(
    "/user",
    response_model=UserData,
    summary="The authenticated user",
    responses={401: {"description": "Not logged in"}},
)
async def user(login_session: SessionDependency) -> UserData:
    return login_session.user.to_core()
