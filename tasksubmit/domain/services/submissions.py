"""
Submission retrieval and the submit/resubmit operation.

Lists are never patched locally: every submit or evaluate is followed by a
full re-fetch, so what is shown always mirrors the backend.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from tasksubmit.api.client import (
    ApiClientError,
    ProjectFile,
    SessionExpiredError,
    TaskSubmitClient,
    error_message,
)
from tasksubmit.api.endpoints import ALL
from tasksubmit.api.schemas import DashboardStats, Submission
from tasksubmit.domain.models import (
    InstructorDashboardState,
    LearnerSubmissionsState,
    SubmissionForm,
)
from tasksubmit.domain.reference_data import STATUS_FILTERS
from tasksubmit.domain.services.base import ObservableStore, RequestSequence

if TYPE_CHECKING:
    from tasksubmit.domain.services.courses import CourseCatalogStore
    from tasksubmit.domain.services.session import SessionStore

logger = structlog.get_logger(__name__)


class InvalidFilterError(ValueError):
    """Raised when a status filter outside the known values is selected."""


class LearnerSubmissionStore(ObservableStore):
    """The signed-in learner's own submissions."""

    def __init__(self, client: TaskSubmitClient, *, discard_stale_responses: bool = True) -> None:
        super().__init__()
        self.client = client
        self.state = LearnerSubmissionsState()
        self._sequence = RequestSequence(enabled=discard_stale_responses)

    @property
    def submissions(self) -> list[Submission]:
        return self.state.submissions

    async def fetch_user_submissions(self, user_id: str) -> list[Submission]:
        ticket = self._sequence.next()
        self.state.user_id = user_id
        self.state.loading = True
        self.state.error = None
        self._notify()

        try:
            submissions = await self.client.list_user_submissions(user_id)
        except SessionExpiredError:
            self._settle(ticket)
            return self.state.submissions
        except ApiClientError as exc:
            if self._settle(ticket):
                self.state.error = error_message(exc)
                await logger.awarning(
                    "learner_submissions_fetch_failed", user_id=user_id, error=exc.message
                )
                self._notify()
            return self.state.submissions

        if self._settle(ticket):
            self.state.submissions = submissions
            await logger.ainfo(
                "learner_submissions_fetched", user_id=user_id, count=len(submissions)
            )
            self._notify()
        return self.state.submissions

    async def refresh(self) -> list[Submission]:
        """Re-fetch for the learner fetched last; no-op before any fetch."""
        if self.state.user_id is None:
            return self.state.submissions
        return await self.fetch_user_submissions(self.state.user_id)

    def for_course(self, course_id: str) -> Submission | None:
        return next(
            (item for item in self.state.submissions if item.course_id == course_id),
            None,
        )

    def has_submission(self, course_id: str) -> bool:
        return self.for_course(course_id) is not None

    def reset(self) -> None:
        self.state = LearnerSubmissionsState()
        self._notify()

    def _settle(self, ticket: int) -> bool:
        if self._sequence.is_stale(ticket):
            logger.info("stale_response_discarded", store="learner_submissions", ticket=ticket)
            return False
        self.state.loading = False
        return True


class InstructorSubmissionStore(ObservableStore):
    """Filtered submission inbox and dashboard counts for instructors."""

    def __init__(self, client: TaskSubmitClient, *, discard_stale_responses: bool = True) -> None:
        super().__init__()
        self.client = client
        self.state = InstructorDashboardState()
        self._sequence = RequestSequence(enabled=discard_stale_responses)

    @property
    def submissions(self) -> list[Submission]:
        return self.state.submissions

    async def load_dashboard(self, catalog: CourseCatalogStore) -> None:
        """Initial load: stats and courses together, then the submission list."""
        self.state.loading = True
        self.state.error = None
        self._notify()

        try:
            stats, _ = await asyncio.gather(
                self.client.get_dashboard_stats(),
                catalog.fetch_courses(),
            )
        except SessionExpiredError:
            self.state.loading = False
            return
        except ApiClientError as exc:
            self.state.loading = False
            self.state.error = error_message(exc)
            await logger.awarning("dashboard_load_failed", error=exc.message)
            self._notify()
            return

        self.state.stats = stats
        await self.refresh()
        if catalog.state.error and not self.state.error:
            self.state.error = catalog.state.error
        self.state.loading = False
        self._notify()

    async def fetch_dashboard_stats(self) -> DashboardStats:
        try:
            stats = await self.client.get_dashboard_stats()
        except SessionExpiredError:
            return self.state.stats
        except ApiClientError as exc:
            self.state.error = error_message(exc)
            await logger.awarning("dashboard_stats_fetch_failed", error=exc.message)
            self._notify()
            return self.state.stats

        self.state.stats = stats
        await logger.ainfo(
            "dashboard_stats_fetched",
            total=stats.total,
            pending=stats.pending,
            evaluated=stats.evaluated,
        )
        self._notify()
        return stats

    async def fetch_filtered_submissions(
        self,
        course_id: str | None = None,
        status: str | None = None,
    ) -> list[Submission]:
        """Fetch the inbox; ``None`` or ``"all"`` leaves a filter unset."""
        ticket = self._sequence.next()
        self.state.error = None
        self._notify()

        try:
            submissions = await self.client.list_submissions(course_id=course_id, status=status)
        except SessionExpiredError:
            return self.state.submissions
        except ApiClientError as exc:
            if not self._sequence.is_stale(ticket):
                self.state.error = error_message(exc)
                await logger.awarning("submissions_fetch_failed", error=exc.message)
                self._notify()
            return self.state.submissions

        if self._sequence.is_stale(ticket):
            logger.info("stale_response_discarded", store="instructor_submissions", ticket=ticket)
            return self.state.submissions

        self.state.submissions = submissions
        await logger.ainfo(
            "submissions_fetched",
            course_id=course_id or ALL,
            status=status or ALL,
            count=len(submissions),
        )
        self._notify()
        return submissions

    async def set_filters(
        self,
        *,
        course: str | None = None,
        status: str | None = None,
    ) -> list[Submission]:
        """Change the selection and re-fetch if anything changed.

        The shell only offers values from ``STATUS_FILTERS``, so an unknown
        status is a caller bug: ``InvalidFilterError`` is raised and nothing
        is fetched. Backend failures are still recorded in ``state.error``.
        """
        if status is not None and status not in STATUS_FILTERS:
            raise InvalidFilterError(f"Unknown status filter: {status}")

        changed = False
        if course is not None and course != self.state.course_filter:
            self.state.course_filter = course
            changed = True
        if status is not None and status != self.state.status_filter:
            self.state.status_filter = status
            changed = True

        if not changed:
            return self.state.submissions
        return await self.refresh()

    async def refresh(self) -> list[Submission]:
        return await self.fetch_filtered_submissions(
            self.state.course_filter, self.state.status_filter
        )

    def get(self, submission_id: str) -> Submission | None:
        return next(
            (item for item in self.state.submissions if item.id == submission_id),
            None,
        )

    def reset(self) -> None:
        self.state = InstructorDashboardState()
        self._notify()


class SubmissionService:
    """Submits a file and/or repository link for the signed-in learner."""

    def __init__(
        self,
        client: TaskSubmitClient,
        session: SessionStore,
        learner_submissions: LearnerSubmissionStore,
    ) -> None:
        self.client = client
        self.session = session
        self.learner_submissions = learner_submissions

    def open_form(self, course_id: str) -> SubmissionForm:
        return SubmissionForm(course_id=course_id)

    def is_resubmission(self, course_id: str) -> bool:
        """Resubmitting is inferred from an existing submission for the course."""
        return self.learner_submissions.has_submission(course_id)

    async def submit_project(
        self,
        course_id: str,
        file: ProjectFile | None = None,
        github_link: str | None = None,
    ) -> SubmissionForm:
        form = SubmissionForm(course_id=course_id, file=file, github_link=github_link or "")
        await self.submit(form)
        return form

    async def submit(self, form: SubmissionForm) -> bool:
        """Send the form; True when the backend accepted it.

        Without a file or link, a signed-in user or a course this is a no-op.
        """
        user = self.session.user
        if not form.can_submit or user is None or not form.course_id:
            return False

        github_link = form.github_link.strip() or None
        resubmission = self.is_resubmission(form.course_id)
        form.loading = True
        form.error = None
        form.succeeded = False

        try:
            await self.client.submit_project(
                course_id=form.course_id,
                file=form.file,
                github_link=github_link,
            )
        except SessionExpiredError:
            form.open = False
            return False
        except ApiClientError as exc:
            form.error = error_message(exc)
            await logger.awarning(
                "project_submit_failed",
                course_id=form.course_id,
                error=exc.message,
            )
            return False
        finally:
            form.loading = False

        await logger.ainfo(
            "project_submitted",
            course_id=form.course_id,
            has_file=form.file is not None,
            has_link=github_link is not None,
            resubmission=resubmission,
        )
        form.succeeded = True
        form.cancel()
        form.open = False
        await self.learner_submissions.fetch_user_submissions(user.id)
        return True
