"""
ORM for user information.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel

from postboard.core.timestamps import as_utc
from postboard.core.user import UserData
from postboard.core.uuid import UUID, uuid7


class User(SQLModel, table=True):
    __tablename__ = "users"

    user_id: UUID = Field(primary_key=True, default_factory=uuid7)

    name: str
    email: str = Field(unique=True)
    password_hash: str

    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))

    def to_core(self) -> UserData:
        return UserData(
            user_id=self.user_id,
            name=self.name,
            email=self.email,
            created_at=as_utc(self.created_at),
        )
