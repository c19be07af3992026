from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest

from tasksubmit.context import AppContext
from tasksubmit.core.auth import Role
from tasksubmit.core.config import Settings
from tasksubmit.core.logging import clear_session_context
from tasksubmit.infrastructure.repositories.credential_store import CredentialStore
from tests.fake_backend import FakeBackend, create_fake_backend


@pytest.fixture()
def settings() -> Settings:
    return Settings(API_BASE_URL="http://test/api", CLIENT_STORAGE_URL="sqlite://")


@pytest.fixture()
def storage(settings: Settings) -> CredentialStore:
    """Fresh in-memory credential storage per test."""
    return CredentialStore.from_url(settings.storage_url)


@pytest.fixture()
def fake_backend() -> FakeBackend:
    backend = create_fake_backend()
    backend.add_user(
        email="learner@example.com",
        password="secret",
        name="Lena Learner",
        role=Role.LEARNER.value,
    )
    backend.add_user(
        email="instructor@example.com",
        password="secret",
        name="Ian Instructor",
        role=Role.INSTRUCTOR.value,
    )
    backend.add_course("React Basics", "Components, props and state")
    backend.add_course("Node APIs", "Building REST services")
    return backend


@pytest.fixture()
def context(
    settings: Settings, storage: CredentialStore, fake_backend: FakeBackend
) -> Iterator[AppContext]:
    """App context talking to the in-memory backend through ASGI."""
    transport = httpx.ASGITransport(app=fake_backend.app)  # type: ignore[arg-type]
    app_context = AppContext(settings, storage=storage, transport=transport)
    app_context.start()
    yield app_context
    clear_session_context()
