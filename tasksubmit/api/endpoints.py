"""REST paths of the TaskSubmit backend, relative to the API base URL."""

from __future__ import annotations

LOGIN = "/auth/login"
SIGNUP = "/auth/register"
COURSES = "/course"
PROJECT_SUBMIT = "/project/submit"
PROJECT_EVALUATION = "/project/evaluation"
PROJECT_DASHBOARD = "/project/dashboard"
PROJECT_SUBMISSIONS = "/project/submissions"
PROJECT_EVALUATE = "/project/evaluate"

# Filter value meaning "no filter"; never sent to the backend.
ALL = "all"


def learner_submissions_path(user_id: str) -> str:
    return f"{PROJECT_EVALUATION}/{user_id}"


def submission_filters(course_id: str | None, status: str | None) -> dict[str, str]:
    """Build query params for the instructor listing, omitting unset filters."""
    params: dict[str, str] = {}
    if course_id and course_id != ALL:
        params["courseId"] = course_id
    if status and status != ALL:
        params["status"] = status
    return params
