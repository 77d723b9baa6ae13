"""
Service layer for linked social accounts.
"""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.typing import FilteringBoundLogger

from postboard.core.social import SocialAccountData
from postboard.core.uuid import UUID
from postboard.database.social import SocialAccount


async def create(
    user_id: UUID,
    platform: str,
    account_id: str,
    username: str | None,
    avatar: str | None,
    conn: AsyncSession,
    log: FilteringBoundLogger,
) -> SocialAccount:
    """
    Link a social account to a user. There is no public API for this; it is
    used when seeding data.
    """

    platform = platform.strip().lower()

    log = log.bind(user_id=user_id, platform=platform, account_id=account_id)

    account = SocialAccount(
        user_id=user_id,
        platform=platform,
        account_id=account_id,
        username=username,
        avatar=avatar,
        created_at=datetime.now(timezone.utc),
    )

    conn.add(account)
    await conn.flush()

    log = log.bind(social_account_id=account.social_account_id)
    await log.ainfo("social.created")

    return account


async def read_by_user(user_id: UUID, conn: AsyncSession) -> list[SocialAccountData]:
    """
    All accounts linked by `user_id`, oldest first.
    """
    query = (
        select(SocialAccount)
        .filter(SocialAccount.user_id == user_id)
        .order_by(SocialAccount.created_at, SocialAccount.social_account_id)
    )
    res = (await conn.execute(query)).scalars().all()

    return [account.to_core() for account in res]
