"""Application context wiring storage, the REST client and every store."""

from __future__ import annotations

import httpx
import structlog

from tasksubmit.api.client import TaskSubmitClient
from tasksubmit.core.config import Settings, get_settings
from tasksubmit.core.logging import setup_logging
from tasksubmit.domain.models import SessionState
from tasksubmit.domain.services import (
    CourseCatalogStore,
    EvaluationService,
    InstructorSubmissionStore,
    LearnerSubmissionStore,
    NotificationCenter,
    SessionStore,
    SubmissionService,
)
from tasksubmit.infrastructure.repositories.credential_store import CredentialStore

logger = structlog.get_logger(__name__)


class AppContext:
    """Everything the presentation layer needs, passed around explicitly.

    ``start()`` must run once before auth-dependent views render; it ends
    with ``session.state.is_hydrated`` set.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        storage: CredentialStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.storage = storage or CredentialStore.from_url(self.settings.storage_url)
        self.notifications = NotificationCenter()
        self.client = TaskSubmitClient(
            settings=self.settings,
            token_provider=self.storage.get_token,
            on_unauthorized=self.handle_unauthorized,
            transport=transport,
        )

        discard = self.settings.discard_stale_responses
        self.session = SessionStore(self.client, self.storage)
        self.courses = CourseCatalogStore(self.client, discard_stale_responses=discard)
        self.learner_submissions = LearnerSubmissionStore(
            self.client, discard_stale_responses=discard
        )
        self.instructor_submissions = InstructorSubmissionStore(
            self.client, discard_stale_responses=discard
        )
        self.submissions = SubmissionService(self.client, self.session, self.learner_submissions)
        self.evaluations = EvaluationService(
            self.client, self.instructor_submissions, self.notifications
        )
        self.reload_count = 0

    def start(self) -> SessionState:
        return self.session.restore_session()

    async def load_learner_dashboard(self) -> None:
        """Fetch the catalog and, once the learner is known, their submissions."""
        await self.courses.fetch_courses()
        user = self.session.user
        if user is not None:
            await self.learner_submissions.fetch_user_submissions(user.id)

    async def load_instructor_dashboard(self) -> None:
        await self.instructor_submissions.load_dashboard(self.courses)

    def handle_unauthorized(self) -> None:
        """A 401 invalidates the session: drop credentials and reload."""
        user = self.session.user
        logger.warning("session_invalidated", user_id=user.id if user else None)
        self.storage.clear()
        self.reload()

    def reload(self) -> SessionState:
        """Start over as a freshly launched client would."""
        self.session.reset()
        self.courses.reset()
        self.learner_submissions.reset()
        self.instructor_submissions.reset()
        self.notifications.clear()
        self.reload_count += 1
        return self.session.restore_session()


def create_context(settings: Settings | None = None) -> AppContext:
    """Factory used by entry points: configures logging, restores the session."""
    setup_logging()
    context = AppContext(settings)
    logger.info(
        "client_startup",
        app=context.settings.app_name,
        environment=context.settings.environment,
        version=context.settings.version,
        api_base_url=context.client.base_url,
    )
    context.start()
    return context
