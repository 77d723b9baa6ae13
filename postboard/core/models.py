"""
Pydantic models for request/responses to APIs.
"""

from pydantic import BaseModel

from postboard.core.user import UserData


class RegisterContent(BaseModel):
    name: str
    email: str
    password: str
    password_confirmation: str | None = None


class LoginContent(BaseModel):
    email: str
    password: str
    remember: bool = False


class AuthResponse(BaseModel):
    user: UserData
    # The opaque session token. Cookie clients can ignore it; token clients
    # store it and send it back as a bearer token.
    token: str


class ErrorResponse(BaseModel):
    message: str
    errors: dict[str, list[str]] | None = None
