"""Backend API error hierarchy.

All API errors inherit from CourseDeskError for consistent exception handling.
"""

from __future__ import annotations

from coursedesk.exceptions import CourseDeskError


class APIClientError(CourseDeskError):
    """Base for all backend API errors."""


class APIResponseError(APIClientError):
    """Non-2xx response from the backend.

    Attributes:
        status_code: HTTP status of the response.
        detail: Human-readable message supplied by the server, or None when
            the body carried no ``detail``/``message`` field.
    """

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"HTTP {status_code}"
        if detail:
            message = f"{message} - {detail}"
        super().__init__(message)


class APIAuthError(APIResponseError):
    """Authentication failed (401/403)."""


class APIConnectionError(APIClientError):
    """Network or transport failure before any response was received."""

    def __init__(self, message: str = "Connection error") -> None:
        super().__init__(message)
