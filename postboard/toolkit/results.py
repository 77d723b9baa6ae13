"""
Outcomes of client actions. Actions never raise for network, HTTP or decoding
problems; they return a `Failure` saying which of those it was, and leave the
choice of what to show (or whether to retry) to the caller.
"""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

# transport: the request never got a response (connection refused, timeout...)
# status: the server answered with a non-success status
# decode: the response body was not the JSON we expected
FailureKind = Literal["transport", "status", "decode"]


class Success(BaseModel, Generic[T]):
    ok: Literal[True] = True
    value: T | None = None


class Failure(BaseModel):
    ok: Literal[False] = False
    kind: FailureKind
    message: str
    status_code: int | None = None


Result = Success[Any] | Failure
