"""Typed records exchanged with the TaskSubmit backend."""

from tasksubmit.api.schemas.auth import AuthResponse, LoginRequest, SignupRequest, User
from tasksubmit.api.schemas.courses import Course
from tasksubmit.api.schemas.submissions import (
    CourseRef,
    DashboardStats,
    EvaluationRequest,
    Feedback,
    Submission,
    SubmissionStatus,
    UserRef,
)

__all__ = [
    "AuthResponse",
    "Course",
    "CourseRef",
    "DashboardStats",
    "EvaluationRequest",
    "Feedback",
    "LoginRequest",
    "SignupRequest",
    "Submission",
    "SubmissionStatus",
    "User",
    "UserRef",
]
