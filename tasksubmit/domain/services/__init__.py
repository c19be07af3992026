"""Client-side stores and operations."""

from tasksubmit.domain.services.courses import CourseCatalogStore
from tasksubmit.domain.services.evaluation import (
    EvaluationService,
    EvaluationValidationError,
    build_evaluation_request,
)
from tasksubmit.domain.services.notifications import (
    Notification,
    NotificationCenter,
    NotificationVariant,
)
from tasksubmit.domain.services.session import SessionStore
from tasksubmit.domain.services.submissions import (
    InstructorSubmissionStore,
    InvalidFilterError,
    LearnerSubmissionStore,
    SubmissionService,
)

__all__ = [
    "CourseCatalogStore",
    "EvaluationService",
    "EvaluationValidationError",
    "InstructorSubmissionStore",
    "InvalidFilterError",
    "LearnerSubmissionStore",
    "Notification",
    "NotificationCenter",
    "NotificationVariant",
    "SessionStore",
    "SubmissionService",
    "build_evaluation_request",
]
