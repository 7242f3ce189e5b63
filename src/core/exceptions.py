"""
Custom exceptions for the application.

Provides structured error handling with HTTP status codes. Every exception
carries a JSON ``payload`` that the registered handler returns verbatim.
"""

from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse


class AppException(HTTPException):
    """Base exception for application errors."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        payload: dict[str, Any] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.payload = payload if payload is not None else {"error": detail}


class BadRequestError(AppException):
    """Unreadable or empty request body."""

    def __init__(self, detail: str = "Cannot read request body"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidFieldsError(AppException):
    """Write rejected because the body names fields the content type lacks."""

    def __init__(self, invalid_fields: list[str], valid_fields: list[str]):
        self.invalid_fields = invalid_fields
        self.valid_fields = valid_fields
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid fields provided",
            payload={
                "error": "Invalid fields provided",
                "invalidFields": invalid_fields,
                "validFields": valid_fields,
            },
        )


class NotFoundError(AppException):
    """Resource not found error."""

    def __init__(self, resource: str = "Content item"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found"
        )


class ConflictError(AppException):
    """Resource conflict error (e.g., duplicate entry)."""

    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UnauthorizedError(AppException):
    """Authentication required error."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)
        self.headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppException):
    """Permission denied error."""

    def __init__(self, method: str, content_type: str):
        message = f"User does not have permission to {method} {content_type}"
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=message,
            payload={"error": "Forbidden", "message": message},
        )


class DatabaseError(AppException):
    """Database operation error."""

    def __init__(self, detail: str = "Database operation failed"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail
        )


async def app_exception_handler(_request: Request, exc: AppException) -> JSONResponse:
    """Render an application exception as its JSON payload."""
    return JSONResponse(
        status_code=exc.status_code, content=exc.payload, headers=exc.headers
    )
