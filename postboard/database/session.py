"""
ORM for server-side login sessions.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlmodel import Field, Relationship, SQLModel

from postboard.core.uuid import UUID, uuid7
from postboard.database.user import User


class LoginSession(SQLModel, table=True):
    __tablename__ = "sessions"

    session_id: UUID = Field(primary_key=True, default_factory=uuid7)

    user_id: UUID = Field(foreign_key="users.user_id", ondelete="CASCADE")
    user: User = Relationship(sa_relationship_kwargs=dict(lazy="joined"))

    # The token itself is only ever handed to the client.
    hashed_token: str = Field(unique=True)

    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))
    last_activity: datetime = Field(sa_column=Column(DateTime(timezone=True)))
    expires_at: datetime = Field(sa_column=Column(DateTime(timezone=True)))
