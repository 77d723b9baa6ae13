"""
A shared social account object that is serialized.
"""

from datetime import datetime

from pydantic import BaseModel

from postboard.core.uuid import UUID


class SocialAccountData(BaseModel):
    social_account_id: UUID
    platform: str
    account_id: str
    username: str | None
    avatar: str | None
    created_at: datetime
