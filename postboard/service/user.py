"""
Service layer for users
"""

import re
from datetime import datetime, timezone

from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from postboard.core.hashing import hash_password, verify_password
from postboard.core.uuid import UUID
from postboard.database.meta import LoginSession, SocialAccount, User

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MINIMUM_PASSWORD_LENGTH = 8


class UserNotFound(Exception):
    pass


class UserExistsError(Exception):
    pass


class InvalidCredentials(Exception):
    pass


class RegistrationInvalid(Exception):
    """
    Raised with a mapping of field name to error messages.
    """

    errors: dict[str, list[str]]

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        super().__init__(next(iter(errors.values()))[0])


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_registration(
    name: str, email: str, password: str, password_confirmation: str | None
) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}

    if not name.strip():
        errors.setdefault("name", []).append("The name field is required.")

    if not EMAIL_PATTERN.match(email.strip()):
        errors.setdefault("email", []).append(
            "The email field must be a valid email address."
        )

    if len(password) < MINIMUM_PASSWORD_LENGTH:
        errors.setdefault("password", []).append(
            f"The password field must be at least {MINIMUM_PASSWORD_LENGTH} characters."
        )

    if password_confirmation is not None and password != password_confirmation:
        errors.setdefault("password", []).append(
            "The password field confirmation does not match."
        )

    return errors


async def create(
    name: str,
    email: str,
    password: str,
    conn: AsyncSession,
    log: FilteringBoundLogger,
    password_confirmation: str | None = None,
) -> User:
    """
    Registers a new user, if the details are valid and the email is not
    already taken.

    Raises
    ------
    RegistrationInvalid
        If any of the fields fail validation.
    UserExistsError
        If a user with this email already exists.
    """

    email = normalize_email(email)

    log = log.bind(email=email)

    errors = validate_registration(
        name=name,
        email=email,
        password=password,
        password_confirmation=password_confirmation,
    )

    if errors:
        log = log.bind(errors=errors)
        await log.ainfo("user.create.invalid")
        raise RegistrationInvalid(errors)

    try:
        await read_by_email(email=email, conn=conn)
        await log.ainfo("user.create.exists")
        raise UserExistsError(f"User with email {email} already exists")
    except UserNotFound:
        pass

    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        created_at=datetime.now(timezone.utc),
    )

    conn.add(user)
    await conn.flush()

    log = log.bind(user_id=user.user_id)
    await log.ainfo("user.created")

    return user


async def read_by_id(user_id: UUID, conn: AsyncSession) -> User:
    res = await conn.get(User, user_id)

    if res is None:
        raise UserNotFound(f"User with ID {user_id} not found in the database")

    return res


async def read_by_email(email: str, conn: AsyncSession) -> User:
    email = normalize_email(email)

    query = select(User).filter(User.email == email)
    res = (await conn.execute(query)).unique().scalar_one_or_none()

    if res is None:
        raise UserNotFound(f"User with email {email} not found in the database")

    return res


async def authenticate(
    email: str, password: str, conn: AsyncSession, log: FilteringBoundLogger
) -> User:
    """
    Check a user's credentials, returning the user if they match.

    Raises
    ------
    InvalidCredentials
        If there is no such user or the password is wrong; the two cases
        share one message.
    """
    log = log.bind(email=normalize_email(email))

    try:
        user = await read_by_email(email=email, conn=conn)
    except UserNotFound:
        await log.ainfo("user.authenticate.unknown_user")
        raise InvalidCredentials("These credentials do not match our records.")

    if not verify_password(password=password, password_hash=user.password_hash):
        await log.ainfo("user.authenticate.bad_password", user_id=user.user_id)
        raise InvalidCredentials("These credentials do not match our records.")

    await log.ainfo("user.authenticate.success", user_id=user.user_id)

    return user


async def delete(email: str, conn: AsyncSession, log: FilteringBoundLogger):
    """
    Deletes the user; their sessions and social accounts go with them.
    """
    user = await read_by_email(email=email, conn=conn)

    log = log.bind(user_id=user.user_id)

    await conn.execute(
        sql_delete(LoginSession).where(LoginSession.user_id == user.user_id)
    )
    await conn.execute(
        sql_delete(SocialAccount).where(SocialAccount.user_id == user.user_id)
    )
    await conn.delete(user)

    await log.ainfo("user.deleted")

    return
