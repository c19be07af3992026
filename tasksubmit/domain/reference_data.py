"""Static values used by the submission and evaluation flows."""

from __future__ import annotations

from tasksubmit.api.endpoints import ALL
from tasksubmit.api.schemas import SubmissionStatus

MIN_RATING = 1
MAX_RATING = 10
DEFAULT_RATING = 7

SUGGESTED_TAGS: tuple[str, ...] = (
    "React",
    "JavaScript",
    "CSS",
    "HTML",
    "Redux",
    "Node.js",
    "API Integration",
    "Responsive Design",
)

STATUS_FILTERS: tuple[str, ...] = (ALL, *(status.value for status in SubmissionStatus))

UNKNOWN_COURSE = "Unknown Course"
