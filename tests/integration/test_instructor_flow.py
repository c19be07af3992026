"""End-to-end instructor flows against the in-memory backend."""

from __future__ import annotations

import httpx
import pytest

from tasksubmit.context import AppContext
from tasksubmit.core.config import Settings
from tasksubmit.domain.services import InvalidFilterError
from tasksubmit.infrastructure.repositories.credential_store import CredentialStore
from tests.fake_backend import FakeBackend


@pytest.fixture()
async def learner_submitted(settings: Settings, fake_backend: FakeBackend) -> str:
    """A learner (in a separate client) submits to the first course."""
    learner = AppContext(
        settings,
        storage=CredentialStore.from_url("sqlite://"),
        transport=httpx.ASGITransport(app=fake_backend.app),  # type: ignore[arg-type]
    )
    learner.start()
    await learner.session.login("learner@example.com", "secret")
    course_id = fake_backend.courses[0]["_id"]
    form = await learner.submissions.submit_project(
        course_id, github_link="https://github.com/lena/react-app"
    )
    assert form.succeeded
    learner.session.logout()
    return course_id


class TestInstructorFlow:
    """End-to-end instructor tests."""

    @pytest.mark.asyncio
    async def test_dashboard_shows_counts_and_inbox(
        self, context: AppContext, learner_submitted: str
    ) -> None:
        """Dashboard should show counts and the submitted project."""
        assert await context.session.login("instructor@example.com", "secret")

        await context.load_instructor_dashboard()

        state = context.instructor_submissions.state
        assert (state.stats.total, state.stats.pending, state.stats.evaluated) == (1, 1, 0)
        [submission] = state.submissions
        assert submission.learner_name == "Lena Learner"
        assert submission.course_name == "React Basics"
        assert submission.course_id == learner_submitted
        assert len(context.courses.courses) == 2
        assert state.loading is False

    @pytest.mark.asyncio
    async def test_all_courses_with_pending_status_sends_only_status(
        self, context: AppContext, fake_backend: FakeBackend, learner_submitted: str
    ) -> None:
        """Pending filter across all courses should send only status."""
        await context.session.login("instructor@example.com", "secret")
        await context.load_instructor_dashboard()

        await context.instructor_submissions.set_filters(course="all", status="pending")

        last = fake_backend.requests[-1]
        assert last.path == "/api/project/submissions"
        assert last.query == {"status": "pending"}
        assert len(context.instructor_submissions.submissions) == 1

    @pytest.mark.asyncio
    async def test_evaluate_then_refetch_shows_evaluated(
        self, context: AppContext, fake_backend: FakeBackend, learner_submitted: str
    ) -> None:
        """Evaluated submission should show its feedback after re-fetch."""
        await context.session.login("instructor@example.com", "secret")
        await context.load_instructor_dashboard()
        submission_id = context.instructor_submissions.submissions[0].id

        form = context.evaluations.open_form(submission_id)
        form.rating = 8
        form.comment = "Clean components"
        form.add_tag("React")
        form.add_tag("Responsive Design")
        assert await context.evaluations.submit(form)

        assert fake_backend.paths()[-2:] == [
            "POST /api/project/evaluate",
            "GET /api/project/submissions",
        ]
        evaluated = context.instructor_submissions.get(submission_id)
        assert evaluated.is_evaluated
        assert evaluated.feedback.rating == 8
        assert evaluated.feedback.tags == ["React", "Responsive Design"]

        again = context.evaluations.open_form(submission_id)
        assert (again.rating, again.comment) == (8, "Clean components")

    @pytest.mark.asyncio
    async def test_evaluated_item_leaves_pending_inbox(
        self, context: AppContext, learner_submitted: str
    ) -> None:
        """Evaluated submission should leave the pending inbox."""
        await context.session.login("instructor@example.com", "secret")
        await context.load_instructor_dashboard()
        await context.instructor_submissions.set_filters(status="pending")
        submission_id = context.instructor_submissions.submissions[0].id

        await context.evaluations.evaluate_submission(submission_id, 6, "ok", ["CSS"])

        assert context.instructor_submissions.submissions == []
        await context.instructor_submissions.set_filters(status="evaluated")
        assert [s.id for s in context.instructor_submissions.submissions] == [submission_id]
        await context.instructor_submissions.fetch_dashboard_stats()
        assert context.instructor_submissions.state.stats.evaluated == 1

    @pytest.mark.asyncio
    async def test_evaluate_unknown_submission_notifies(self, context: AppContext) -> None:
        """Evaluating a missing submission should show an error toast."""
        await context.session.login("instructor@example.com", "secret")

        form = await context.evaluations.evaluate_submission("missing", 7)

        assert form.error == "Submission not found"
        assert context.notifications.notifications[-1].description == "Submission not found"

    @pytest.mark.asyncio
    async def test_invalid_filter(self, context: AppContext) -> None:
        """Unknown filter should raise without a request."""
        await context.session.login("instructor@example.com", "secret")

        with pytest.raises(InvalidFilterError):
            await context.instructor_submissions.set_filters(status="archived")

    @pytest.mark.asyncio
    async def test_expired_token_during_evaluation(
        self, context: AppContext, fake_backend: FakeBackend, learner_submitted: str
    ) -> None:
        """Expired token during evaluation should clear the session."""
        await context.session.login("instructor@example.com", "secret")
        await context.load_instructor_dashboard()
        submission_id = context.instructor_submissions.submissions[0].id
        fake_backend.revoke_tokens()

        form = await context.evaluations.evaluate_submission(submission_id, 9)

        assert form.open is False
        assert context.reload_count == 1
        assert context.instructor_submissions.submissions == []
        assert context.session.user is None
        assert context.notifications.notifications == []
