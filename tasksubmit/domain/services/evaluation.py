"""
Evaluation operation: rating, comment and skill tags for one submission.

Input is validated locally before anything is sent; an accepted evaluation is
followed by a re-fetch of the instructor inbox so the item's status and
feedback come from the backend.
"""

from __future__ import annotations

import structlog
from pydantic import ValidationError

from tasksubmit.api.client import ApiClientError, SessionExpiredError, TaskSubmitClient
from tasksubmit.api.schemas import EvaluationRequest
from tasksubmit.domain.models import EvaluationForm
from tasksubmit.domain.reference_data import MAX_RATING, MIN_RATING
from tasksubmit.domain.services.notifications import NotificationCenter
from tasksubmit.domain.services.submissions import InstructorSubmissionStore

logger = structlog.get_logger(__name__)

EVALUATION_FAILED_MESSAGE = "Evaluation failed. Please try again."


class EvaluationValidationError(ValueError):
    """Raised when an evaluation does not meet its local preconditions."""


def build_evaluation_request(
    submission_id: str | None,
    *,
    rating: int,
    comment: str = "",
    tags: list[str] | None = None,
) -> EvaluationRequest:
    """Validate an evaluation and return the request body for it."""
    if not submission_id:
        raise EvaluationValidationError("No submission selected")
    try:
        return EvaluationRequest(
            submission_id=submission_id,
            rating=rating,
            comment=comment,
            tags=tags or [],
        )
    except ValidationError as exc:
        fields = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        if "rating" in fields:
            raise EvaluationValidationError(
                f"Rating must be a whole number from {MIN_RATING} to {MAX_RATING}"
            ) from exc
        if "tags" in fields:
            raise EvaluationValidationError("Tags must not be empty") from exc
        raise EvaluationValidationError("Invalid evaluation") from exc


class EvaluationService:
    """Sends instructor evaluations and refreshes the inbox afterwards."""

    def __init__(
        self,
        client: TaskSubmitClient,
        submissions: InstructorSubmissionStore,
        notifications: NotificationCenter,
    ) -> None:
        self.client = client
        self.submissions = submissions
        self.notifications = notifications

    def open_form(self, submission_id: str) -> EvaluationForm:
        """Start evaluating, pre-filled from existing feedback when present."""
        submission = self.submissions.get(submission_id)
        if submission is None:
            return EvaluationForm(submission_id=submission_id)
        return EvaluationForm.for_submission(submission)

    async def evaluate_submission(
        self,
        submission_id: str,
        rating: int,
        comment: str = "",
        tags: list[str] | None = None,
    ) -> EvaluationForm:
        form = EvaluationForm(
            submission_id=submission_id,
            rating=rating,
            comment=comment,
            tags=list(tags or []),
        )
        await self.submit(form)
        return form

    async def submit(self, form: EvaluationForm) -> bool:
        """Send the form; True when the backend accepted it.

        On failure the form stays open with its rating, comment and tags.
        """
        try:
            request = build_evaluation_request(
                form.submission_id,
                rating=form.rating,
                comment=form.comment,
                tags=form.tags,
            )
        except EvaluationValidationError as exc:
            form.error = str(exc)
            await logger.ainfo(
                "evaluation_rejected_locally",
                submission_id=form.submission_id,
                reason=form.error,
            )
            return False

        form.loading = True
        form.error = None
        try:
            await self.client.evaluate_submission(request)
        except SessionExpiredError:
            form.open = False
            return False
        except ApiClientError as exc:
            form.error = exc.message or EVALUATION_FAILED_MESSAGE
            await logger.awarning(
                "evaluation_failed",
                submission_id=request.submission_id,
                error=form.error,
            )
            self.notifications.error(form.error)
            return False
        finally:
            form.loading = False

        await logger.ainfo(
            "submission_evaluated",
            submission_id=request.submission_id,
            rating=request.rating,
            tag_count=len(request.tags),
        )
        await self.submissions.refresh()
        form.open = False
        return True
