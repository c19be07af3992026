"""
Async client for the TaskSubmit REST backend.

Every failure is normalised into an ApiClientError subclass carrying a
user-facing message, so stores only ever need to record ``exc.message``.
"""

from __future__ import annotations

import mimetypes
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from tasksubmit.api import endpoints
from tasksubmit.api.schemas import (
    AuthResponse,
    Course,
    DashboardStats,
    EvaluationRequest,
    LoginRequest,
    SignupRequest,
    Submission,
)
from tasksubmit.core.auth import Role, bearer_headers
from tasksubmit.core.config import Settings, get_settings

logger = structlog.get_logger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please try again."
SESSION_EXPIRED_MESSAGE = "Session expired. Please log in again."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"

T = TypeVar("T")

TokenProvider = Callable[[], str | None]
UnauthorizedHandler = Callable[[], None]

_COURSE_LIST = TypeAdapter(list[Course])
_SUBMISSION_LIST = TypeAdapter(list[Submission])


class ApiClientError(Exception):
    """Base exception for backend calls; ``message`` is safe to show users."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ApiNetworkError(ApiClientError):
    """Raised when the request could not be sent or timed out."""


class ApiResponseError(ApiClientError):
    """Raised for non-success responses from the backend."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SessionExpiredError(ApiClientError):
    """Raised after an authenticated call was rejected with 401.

    The unauthorized handler has already run by the time this propagates.
    """


@dataclass(slots=True)
class ProjectFile:
    """A file chosen for upload."""

    filename: str
    content: bytes
    content_type: str | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> ProjectFile:
        file_path = Path(path)
        content_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            filename=file_path.name,
            content=file_path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )


def error_message(error: Any) -> str:
    """Render any error value as a message fit for display.

    Every store writes its ``error`` fields through this, so the shell only
    ever sees plain text.
    """
    if isinstance(error, str):
        return error
    if isinstance(error, ApiClientError):
        return error.message
    if isinstance(error, dict):
        return error.get("message") or error.get("error") or UNEXPECTED_ERROR_MESSAGE
    if isinstance(error, Exception) and str(error):
        return str(error)
    return UNEXPECTED_ERROR_MESSAGE


class TaskSubmitClient:
    """Async TaskSubmit API client."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        token_provider: TokenProvider | None = None,
        on_unauthorized: UnauthorizedHandler | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.base_url = (base_url or settings.normalized_api_base_url).rstrip("/")
        self.timeout = (
            timeout_seconds if timeout_seconds is not None else settings.http_timeout_seconds
        )
        self.token_provider = token_provider or (lambda: None)
        self.on_unauthorized = on_unauthorized
        self.transport = transport

    # --- Authentication (unauthenticated calls) ---

    async def login(self, *, email: str, password: str) -> AuthResponse:
        payload = LoginRequest(email=email, password=password)
        response = await self._send(
            "POST",
            endpoints.LOGIN,
            failure="Login failed",
            authenticated=False,
            reason_fallback=False,
            json=payload.model_dump(mode="json"),
        )
        return self._parse(TypeAdapter(AuthResponse), response, "Login failed")

    async def signup(
        self,
        *,
        email: str,
        password: str,
        name: str,
        role: Role | str,
    ) -> AuthResponse:
        payload = SignupRequest(email=email, password=password, name=name, role=role)
        response = await self._send(
            "POST",
            endpoints.SIGNUP,
            failure="Signup failed",
            authenticated=False,
            reason_fallback=False,
            json=payload.model_dump(mode="json"),
        )
        return self._parse(TypeAdapter(AuthResponse), response, "Signup failed")

    # --- Catalog ---

    async def list_courses(self) -> list[Course]:
        failure = "Failed to fetch courses"
        response = await self._send("GET", endpoints.COURSES, failure=failure)
        return self._parse(_COURSE_LIST, response, failure)

    # --- Submissions ---

    async def submit_project(
        self,
        *,
        course_id: str,
        file: ProjectFile | None = None,
        github_link: str | None = None,
    ) -> dict[str, Any]:
        """Upload a project as multipart/form-data.

        Plain fields are sent as filename-less parts so the body stays
        multipart even when no file is attached.
        """
        parts: list[tuple[str, tuple[Any, ...]]] = [
            ("courseId", (None, course_id.encode("utf-8"))),
        ]
        if github_link:
            parts.append(("githubLink", (None, github_link.encode("utf-8"))))
        if file is not None:
            content_type = file.content_type or "application/octet-stream"
            parts.append(("file", (file.filename, file.content, content_type)))

        response = await self._send(
            "POST",
            endpoints.PROJECT_SUBMIT,
            failure="Submission failed",
            reason_fallback=False,
            files=parts,
        )
        return self._json_body(response)

    async def list_user_submissions(self, user_id: str) -> list[Submission]:
        failure = "Failed to fetch submissions"
        response = await self._send(
            "GET", endpoints.learner_submissions_path(user_id), failure=failure
        )
        return self._parse(_SUBMISSION_LIST, response, failure)

    async def get_dashboard_stats(self) -> DashboardStats:
        failure = "Failed to fetch dashboard stats"
        response = await self._send("GET", endpoints.PROJECT_DASHBOARD, failure=failure)
        return self._parse(TypeAdapter(DashboardStats), response, failure)

    async def list_submissions(
        self,
        *,
        course_id: str | None = None,
        status: str | None = None,
    ) -> list[Submission]:
        failure = "Failed to fetch submissions"
        response = await self._send(
            "GET",
            endpoints.PROJECT_SUBMISSIONS,
            failure=failure,
            params=endpoints.submission_filters(course_id, status),
        )
        return self._parse(_SUBMISSION_LIST, response, failure)

    async def evaluate_submission(self, request: EvaluationRequest) -> dict[str, Any]:
        response = await self._send(
            "POST",
            endpoints.PROJECT_EVALUATE,
            failure="Failed to evaluate submission",
            json=request.to_payload(),
        )
        return self._json_body(response)

    # --- Transport ---

    async def _send(
        self,
        method: str,
        path: str,
        *,
        failure: str,
        authenticated: bool = True,
        reason_fallback: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = bearer_headers(self.token_provider()) if authenticated else {}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(method, path, headers=headers, **kwargs)
        except httpx.RequestError as exc:
            await logger.awarning(
                "api_request_failed",
                method=method,
                path=path,
                error=str(exc) or exc.__class__.__name__,
            )
            raise ApiNetworkError(NETWORK_ERROR_MESSAGE) from exc

        if authenticated and response.status_code == 401:
            await logger.awarning("api_session_expired", method=method, path=path)
            if self.on_unauthorized is not None:
                self.on_unauthorized()
            raise SessionExpiredError(SESSION_EXPIRED_MESSAGE)

        if not response.is_success:
            message = _extract_error(response, failure, reason_fallback=reason_fallback)
            await logger.awarning(
                "api_error_response",
                method=method,
                path=path,
                status_code=response.status_code,
                message=message,
            )
            raise ApiResponseError(message, status_code=response.status_code)

        await logger.adebug(
            "api_response", method=method, path=path, status_code=response.status_code
        )
        return response

    def _parse(self, adapter: TypeAdapter[T], response: httpx.Response, failure: str) -> T:
        try:
            return adapter.validate_json(response.content)
        except ValidationError as exc:
            raise ApiResponseError(
                f"{failure}: unexpected response from server",
                status_code=response.status_code,
            ) from exc

    def _json_body(self, response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as exc:
            raise ApiResponseError(
                "Unexpected response from server", status_code=response.status_code
            ) from exc
        return data if isinstance(data, dict) else {"data": data}


def _extract_error(response: httpx.Response, failure: str, *, reason_fallback: bool) -> str:
    """Pick the most specific message: body message, body error, status text, generic."""
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        for key in ("message", "error"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value

    if reason_fallback and response.reason_phrase:
        return f"{failure}: {response.reason_phrase}"
    return failure
