"""
This file contains code to perform initial setup of the API: the schema is
migrated and, in example mode, a demo user with linked accounts is created.
"""

from datetime import datetime, timezone

from sqlalchemy import select
from structlog import get_logger

from postboard.config.settings import Settings
from postboard.core.hashing import hash_password

EXAMPLE_ACCOUNTS = (
    ("facebook", "100012345678901", "Example Page", None),
    ("instagram", "17841400000000000", "example.user", None),
    ("x", "1400000000000000000", "example_user", None),
)


def initial_setup(settings: Settings) -> list[str]:
    """
    Bring the database schema up to date. Returns the migrations applied.
    """
    return settings.sync_manager().migrate()


def example_setup(settings: Settings) -> str | None:
    """
    Performs the 'example' setup where we create a fake user and their social
    accounts. Returns the example user's email, or None if not in example mode.
    """

    if not settings.create_example_user:
        return None

    from postboard.database.meta import SocialAccount, User

    log = get_logger().bind(email=settings.example_user_email)

    manager = settings.sync_manager()
    manager.migrate()

    with manager.session() as conn:
        existing = conn.execute(
            select(User).filter(User.email == settings.example_user_email)
        ).scalar_one_or_none()

        if existing is not None:
            log.info("setup.example.exists")
            return settings.example_user_email

        now = datetime.now(timezone.utc)

        user = User(
            name="Example User",
            email=settings.example_user_email,
            password_hash=hash_password(settings.example_user_password),
            created_at=now,
        )

        accounts = [
            SocialAccount(
                user_id=user.user_id,
                platform=platform,
                account_id=account_id,
                username=username,
                avatar=avatar,
                created_at=now,
            )
            for platform, account_id, username, avatar in EXAMPLE_ACCOUNTS
        ]

        conn.add(user)
        conn.flush()
        conn.add_all(accounts)
        conn.commit()

        log.info("setup.example.created", user_id=user.user_id)

    return settings.example_user_email
