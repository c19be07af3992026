"""REST client for the TaskSubmit backend."""

from tasksubmit.api.client import (
    ApiClientError,
    ApiNetworkError,
    ApiResponseError,
    ProjectFile,
    SessionExpiredError,
    TaskSubmitClient,
    error_message,
)

__all__ = [
    "ApiClientError",
    "ApiNetworkError",
    "ApiResponseError",
    "ProjectFile",
    "SessionExpiredError",
    "TaskSubmitClient",
    "error_message",
]
