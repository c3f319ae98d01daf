"""Success response envelope.

Every successful response body is wrapped as
``{success: true, data, timestamp, path}`` so clients can branch on
``success`` alone.
"""

from typing import Generic, Literal, TypeVar

from fastapi import Request
from pydantic import BaseModel, Field

from quizflow.common.dates import utcnow

T = TypeVar("T")


def request_path(request: Request) -> str:
    """Request path including the query string, as the client sent it."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


class SuccessResponse(BaseModel, Generic[T]):
    success: Literal[True] = True
    data: T
    timestamp: str = Field(default_factory=lambda: utcnow().isoformat())
    path: str


def ok(request: Request, data: T) -> SuccessResponse[T]:
    """Wrap a payload in the success envelope."""
    return SuccessResponse(data=data, path=request_path(request))
