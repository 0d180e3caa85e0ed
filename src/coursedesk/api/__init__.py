"""Backend API access for CourseDesk.

Provides the async backend client and its error hierarchy.
"""

from coursedesk.api.client import CourseDeskClient, UploadSource
from coursedesk.api.errors import (
    APIAuthError,
    APIClientError,
    APIConnectionError,
    APIResponseError,
)

__all__ = [
    "CourseDeskClient",
    "UploadSource",
    "APIClientError",
    "APIResponseError",
    "APIAuthError",
    "APIConnectionError",
]
