from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiError(BaseModel):
    service: str
    message: str
    status: int
    # network | http | malformed | configuration | booking; never serialized
    kind: str | None = Field(default=None, exclude=True)


class Envelope(BaseModel, Generic[T]):
    success: bool
    data: T | None = None
    error: ApiError | None = None
    status: int
    message: str | None = None

    @classmethod
    def ok(cls, data: T, status: int = 200, message: str | None = None) -> Envelope[T]:
        return cls(success=True, data=data, status=status, message=message)

    @classmethod
    def fail(cls, error: ApiError, message: str | None = None) -> Envelope[T]:
        return cls(success=False, error=error, status=error.status, message=message or error.message)
