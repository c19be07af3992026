"""Pydantic schemas for project submissions and evaluations."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    field_validator,
)


class SubmissionStatus(str, Enum):
    """Submission review status."""

    PENDING = "pending"
    EVALUATED = "evaluated"


class UserRef(BaseModel):
    """Owner reference as populated on the instructor listing."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    name: str = Field(default="")
    email: str | None = Field(default=None)


class CourseRef(BaseModel):
    """Course reference as populated on the instructor listing."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    name: str = Field(default="")


class Feedback(BaseModel):
    """Instructor-authored evaluation attached to one submission."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    rating: int = Field(..., description="Rating from 1 to 10")
    tags: list[str] = Field(default_factory=list, description="Skill tags")
    comment: str = Field(default="", description="Free-text feedback")
    evaluated_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("evaluatedAt", "evaluated_at"),
    )


class Submission(BaseModel):
    """A learner's project submission for one course."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    user: str | UserRef = Field(..., validation_alias=AliasChoices("userId", "user"))
    course: str | CourseRef = Field(..., validation_alias=AliasChoices("courseId", "course"))
    file_url: str | None = Field(
        default=None, validation_alias=AliasChoices("fileUrl", "file_url")
    )
    github_link: str | None = Field(
        default=None, validation_alias=AliasChoices("githubLink", "github_link")
    )
    status: SubmissionStatus = Field(default=SubmissionStatus.PENDING)
    submitted_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("submittedAt", "submitted_at")
    )
    feedback: Feedback | None = Field(default=None)

    @property
    def owner_id(self) -> str:
        return self.user.id if isinstance(self.user, UserRef) else self.user

    @property
    def course_id(self) -> str:
        return self.course.id if isinstance(self.course, CourseRef) else self.course

    @property
    def learner_name(self) -> str | None:
        return self.user.name if isinstance(self.user, UserRef) else None

    @property
    def course_name(self) -> str | None:
        return self.course.name if isinstance(self.course, CourseRef) else None

    @property
    def is_evaluated(self) -> bool:
        return self.status is SubmissionStatus.EVALUATED

    def file_download_url(self, upload_base_url: str) -> str | None:
        """Resolve the stored file path against the upload host."""
        if not self.file_url:
            return None
        if self.file_url.startswith(("http://", "https://")):
            return self.file_url
        return f"{upload_base_url.rstrip('/')}/{self.file_url.lstrip('/')}"


class DashboardStats(BaseModel):
    """Server-computed submission counts."""

    model_config = ConfigDict(extra="ignore")

    total: int = 0
    pending: int = 0
    evaluated: int = 0


class EvaluationRequest(BaseModel):
    """Request body for POST /project/evaluate.

    Validation runs before any request is issued, so an out-of-range rating or
    an empty tag never reaches the backend.
    """

    submission_id: str = Field(..., min_length=1, serialization_alias="submissionId")
    rating: StrictInt = Field(..., ge=1, le=10, description="Rating from 1 to 10")
    comment: str = Field(default="", description="Free-text feedback")
    tags: list[str] = Field(default_factory=list, description="Skill tags")

    @field_validator("comment")
    @classmethod
    def _strip_comment(cls, value: str) -> str:
        return value.strip()

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        tags: list[str] = []
        for tag in value:
            cleaned = tag.strip()
            if not cleaned:
                raise ValueError("Tags must not be empty")
            if cleaned not in tags:
                tags.append(cleaned)
        return tags

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
