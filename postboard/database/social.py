"""
ORM for linked social accounts.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from postboard.core.social import SocialAccountData
from postboard.core.timestamps import as_utc
from postboard.core.uuid import UUID, uuid7


class SocialAccount(SQLModel, table=True):
    __tablename__ = "social_accounts"

    social_account_id: UUID = Field(primary_key=True, default_factory=uuid7)

    user_id: UUID = Field(foreign_key="users.user_id", ondelete="CASCADE")

    # e.g. facebook, instagram, x
    platform: str
    # The identifier of the account on the platform itself
    account_id: str
    username: str | None = None
    avatar: str | None = None

    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))

    def to_core(self) -> SocialAccountData:
        return SocialAccountData(
            social_account_id=self.social_account_id,
            platform=self.platform,
            account_id=self.account_id,
            username=self.username,
            avatar=self.avatar,
            created_at=as_utc(self.created_at),
        )
