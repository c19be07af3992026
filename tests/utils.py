from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from tasksubmit.api.client import TaskSubmitClient
from tasksubmit.core.auth import Role
from tasksubmit.core.config import Settings

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it was handed."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        async def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            result = handler(request)
            if isinstance(result, Awaitable):
                result = await result
            return result

        super().__init__(recording_handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def json_response(status_code: int, payload: Any) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


def respond_with(status_code: int, payload: Any = None) -> RecordingTransport:
    """Transport answering every request with the same JSON payload."""
    return RecordingTransport(lambda request: json_response(status_code, payload))


def make_client(
    transport: httpx.AsyncBaseTransport,
    *,
    token: str | None = "test-token",
    on_unauthorized: Callable[[], None] | None = None,
) -> TaskSubmitClient:
    return TaskSubmitClient(
        settings=Settings(API_BASE_URL="http://test/api", CLIENT_STORAGE_URL="sqlite://"),
        token_provider=lambda: token,
        on_unauthorized=on_unauthorized,
        transport=transport,
    )


def user_payload(
    user_id: str = "u1", name: str = "Ada", role: Role = Role.LEARNER
) -> dict[str, str]:
    return {"id": user_id, "name": name, "role": role.value}


def submission_payload(
    submission_id: str = "s1",
    *,
    user_id: str = "u1",
    course_id: str = "c1",
    status: str = "pending",
    **extra: Any,
) -> dict[str, Any]:
    payload = {
        "_id": submission_id,
        "userId": user_id,
        "courseId": course_id,
        "status": status,
        "submittedAt": "2024-05-01T10:00:00Z",
    }
    payload.update(extra)
    return payload


def multipart_fields(request: httpx.Request) -> dict[str, str]:
    """Crudely pull the named parts out of a multipart body, for assertions."""
    body = request.read().decode("utf-8", errors="replace")
    boundary = request.headers["content-type"].split("boundary=")[1]
    fields: dict[str, str] = {}
    for chunk in body.split(f"--{boundary}"):
        if 'name="' not in chunk:
            continue
        headers, _, value = chunk.partition("\r\n\r\n")
        name = headers.split('name="')[1].split('"')[0]
        fields[name] = value.rstrip("\r\n")
    return fields


def json_body(request: httpx.Request) -> Any:
    return json.loads(request.read())


class FakeRoutes:
    """Route table keyed by "METHOD /path" answering canned JSON."""

    def __init__(self, routes: dict[str, tuple[int, Any]]) -> None:
        self.routes = routes
        self.transport = RecordingTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        key = f"{request.method} {request.url.path}"
        status_code, payload = self.routes.get(key, (404, {"message": f"no route {key}"}))
        return json_response(status_code, payload)

    def calls(self) -> list[str]:
        return [f"{r.method} {r.url.path}" for r in self.transport.requests]


def overlapping_transport(
    first_payload: Any, second_payload: Any
) -> tuple[RecordingTransport, asyncio.Event, asyncio.Event]:
    """First request answers only after ``release_first`` is set.

    Returns the transport plus the ``first_started`` and ``release_first`` events.
    """
    first_started = asyncio.Event()
    release_first = asyncio.Event()
    payloads = [first_payload, second_payload]
    counter = {"calls": 0}

    async def handler(request: httpx.Request) -> httpx.Response:
        index = counter["calls"]
        counter["calls"] += 1
        if index == 0:
            first_started.set()
            await release_first.wait()
        return json_response(200, payloads[index])

    return RecordingTransport(handler), first_started, release_first


async def run_overlapping(
    first_call: Callable[[], Awaitable[Any]],
    second_call: Callable[[], Awaitable[Any]],
    first_started: asyncio.Event,
    release_first: asyncio.Event,
) -> None:
    """Start ``first_call``, finish ``second_call`` meanwhile, then let the first land."""
    first = asyncio.create_task(first_call())
    await first_started.wait()
    await second_call()
    release_first.set()
    await first
