"""Response envelope shared by all success responses."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: {success: true, message, data}."""

    success: bool = True
    message: str
    data: T | None = Field(default=None)


class ErrorResponse(BaseModel):
    """Error envelope rendered by the exception handlers."""

    success: bool = False
    error: str
    message: str
    details: dict | list | None = None
