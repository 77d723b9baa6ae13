"""
A shared user object that is serialized.
"""

from datetime import datetime

from pydantic import BaseModel

from postboard.core.uuid import UUID


class UserData(BaseModel):
    user_id: UUID
    name: str
    email: str
    created_at: datetime
