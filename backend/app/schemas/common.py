"""Common schemas used across the application."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint.

    Usage:
        response_model=ApiResponse[AuthPayload]

    Returns:
        {
            "success": true,
            "message": "Login successful",
            "data": {...}
        }

    Errors use the same keys with `success: false`; see
    app.middleware.exceptions.create_error_response.
    """
    success: bool = True
    message: str | None = None
    data: T | None = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str
