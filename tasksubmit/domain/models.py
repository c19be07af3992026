from __future__ import annotations

from dataclasses import dataclass, field

from tasksubmit.api.client import ProjectFile
from tasksubmit.api.endpoints import ALL
from tasksubmit.api.schemas import Course, DashboardStats, Submission, User
from tasksubmit.domain.reference_data import DEFAULT_RATING, SUGGESTED_TAGS


@dataclass(slots=True)
class SessionState:
    """Authentication state of the running client."""

    user: User | None = None
    token: str | None = None
    is_authenticated: bool = False
    loading: bool = False
    error: str | None = None
    is_hydrated: bool = False

    @property
    def ready(self) -> bool:
        """True once auth-dependent views may render."""
        return self.is_hydrated and not self.loading


@dataclass(slots=True)
class CatalogState:
    courses: list[Course] = field(default_factory=list)
    loading: bool = False
    error: str | None = None


@dataclass(slots=True)
class LearnerSubmissionsState:
    user_id: str | None = None
    submissions: list[Submission] = field(default_factory=list)
    loading: bool = False
    error: str | None = None


@dataclass(slots=True)
class InstructorDashboardState:
    stats: DashboardStats = field(default_factory=DashboardStats)
    submissions: list[Submission] = field(default_factory=list)
    course_filter: str = ALL
    status_filter: str = ALL
    loading: bool = False
    error: str | None = None


@dataclass(slots=True)
class SubmissionForm:
    """Local state of the submit/resubmit form for one course."""

    course_id: str | None
    file: ProjectFile | None = None
    github_link: str = ""
    confirming: bool = False
    open: bool = True
    loading: bool = False
    error: str | None = None
    succeeded: bool = False

    @property
    def can_submit(self) -> bool:
        return self.file is not None or bool(self.github_link.strip())

    def request_confirmation(self) -> bool:
        """Move to the confirmation step; refused while both inputs are empty."""
        if not self.can_submit:
            return False
        self.confirming = True
        return True

    def cancel(self) -> None:
        self.file = None
        self.github_link = ""
        self.confirming = False

    def reset(self) -> None:
        self.cancel()
        self.error = None
        self.succeeded = False


@dataclass(slots=True)
class EvaluationForm:
    """Local state of the evaluation form for one submission."""

    submission_id: str | None
    rating: int = DEFAULT_RATING
    comment: str = ""
    tags: list[str] = field(default_factory=list)
    open: bool = True
    loading: bool = False
    error: str | None = None

    @classmethod
    def for_submission(cls, submission: Submission) -> EvaluationForm:
        """Open the form, pre-filled with existing feedback for edit in place."""
        feedback = submission.feedback
        if feedback is None:
            return cls(submission_id=submission.id)
        return cls(
            submission_id=submission.id,
            rating=feedback.rating,
            comment=feedback.comment,
            tags=list(feedback.tags),
        )

    def add_tag(self, tag: str) -> bool:
        cleaned = tag.strip()
        if not cleaned or cleaned in self.tags:
            return False
        self.tags.append(cleaned)
        return True

    def remove_tag(self, tag: str) -> None:
        self.tags = [existing for existing in self.tags if existing != tag]

    def suggested_tags(self) -> list[str]:
        return [tag for tag in SUGGESTED_TAGS if tag not in self.tags]
