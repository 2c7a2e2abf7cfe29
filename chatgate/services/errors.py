"""Error kinds raised by the chat services.

Each kind is an :class:`~fastapi.HTTPException` so routers can let them
propagate untouched; the status code is fixed per kind.
"""
from __future__ import annotations

from fastapi import HTTPException, status


class ChatServiceError(HTTPException):
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Chat service error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(status_code=self.http_status, detail=detail or self.default_detail)


class Unauthenticated(ChatServiceError):
    http_status = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail)
        self.headers = {"WWW-Authenticate": "Bearer"}


class ValidationFailed(ChatServiceError):
    http_status = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class InvalidOperation(ValidationFailed):
    """A user tried to target themselves."""

    default_detail = "Operation not allowed on yourself"


class Forbidden(ChatServiceError):
    http_status = status.HTTP_403_FORBIDDEN
    default_detail = "Not allowed"


class NotFound(ChatServiceError):
    http_status = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Conflict(ChatServiceError):
    http_status = status.HTTP_409_CONFLICT
    default_detail = "Conflicting state"


class StorageFailure(ChatServiceError):
    default_detail = "Storage failure"


__all__ = [
    "ChatServiceError",
    "Unauthenticated",
    "ValidationFailed",
    "InvalidOperation",
    "Forbidden",
    "NotFound",
    "Conflict",
    "StorageFailure",
]
