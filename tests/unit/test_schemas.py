"""Unit tests for wire schemas, endpoints and settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tasksubmit.api import endpoints
from tasksubmit.api.schemas import EvaluationRequest, Submission, User
from tasksubmit.core.auth import Role, bearer_headers
from tasksubmit.core.config import Settings


class TestSubmission:
    """Tests for the submission schema."""

    def test_plain_references(self) -> None:
        """Plain id references should be kept as ids."""
        submission = Submission.model_validate(
            {"_id": "s1", "userId": "u1", "courseId": "c1", "fileUrl": "uploads/a.zip"}
        )

        assert submission.owner_id == "u1"
        assert submission.course_id == "c1"
        assert submission.learner_name is None
        assert submission.is_evaluated is False
        assert submission.feedback is None

    def test_file_download_url(self) -> None:
        """Relative file URL should be joined to the upload base."""
        submission = Submission.model_validate(
            {"_id": "s1", "userId": "u1", "courseId": "c1", "fileUrl": "/uploads/a.zip"}
        )

        assert submission.file_download_url("http://host:5000/") == "http://host:5000/uploads/a.zip"

    def test_absolute_file_url_kept(self) -> None:
        """Absolute file URL should be kept as is."""
        submission = Submission.model_validate(
            {"_id": "s1", "userId": "u1", "courseId": "c1", "fileUrl": "https://cdn/a.zip"}
        )

        assert submission.file_download_url("http://host") == "https://cdn/a.zip"

    def test_link_only_has_no_download(self) -> None:
        """Link-only submission should have no download URL."""
        submission = Submission.model_validate(
            {"_id": "s1", "userId": "u1", "courseId": "c1", "githubLink": "https://gh/x"}
        )

        assert submission.file_download_url("http://host") is None


class TestUserAndRequests:
    """Tests for user and request schemas."""

    def test_user_accepts_either_id_key(self) -> None:
        """User should accept id or _id."""
        assert User.model_validate({"_id": "a", "role": "learner"}).id == "a"
        assert User.model_validate({"id": "b", "role": "instructor"}).is_instructor

    def test_unknown_role_rejected(self) -> None:
        """Unknown role should fail validation."""
        with pytest.raises(ValidationError):
            User.model_validate({"id": "a", "role": "admin"})

    def test_evaluation_rating_must_be_int(self) -> None:
        """Rating should be an integer."""
        with pytest.raises(ValidationError):
            EvaluationRequest(submission_id="s1", rating="8")  # type: ignore[arg-type]

    def test_role_contains(self) -> None:
        """Role lookup should accept only known values."""
        assert Role.contains("learner")
        assert not Role.contains("admin")

    def test_bearer_headers(self) -> None:
        """Bearer headers should only be built with a token."""
        assert bearer_headers(None) == {}
        assert bearer_headers("t") == {"Authorization": "Bearer t"}


class TestEndpoints:
    """Tests for endpoint paths and query parameters."""

    def test_learner_path(self) -> None:
        """Learner path should embed the user id."""
        assert endpoints.learner_submissions_path("u1") == "/project/evaluation/u1"

    @pytest.mark.parametrize(
        ("course", "status", "expected"),
        [
            (None, None, {}),
            ("all", "all", {}),
            ("c1", "all", {"courseId": "c1"}),
            ("all", "pending", {"status": "pending"}),
        ],
    )
    def test_submission_filters(self, course, status, expected) -> None:
        """Filter params should skip unset and all values."""
        assert endpoints.submission_filters(course, status) == expected


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Defaults should apply without environment overrides."""
        for name in ("API_BASE_URL", "HTTP_TIMEOUT_SECONDS", "DISCARD_STALE_RESPONSES"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.normalized_api_base_url == "http://localhost:5000/api"
        assert settings.http_timeout_seconds is None
        assert settings.discard_stale_responses is True

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables should override defaults."""
        monkeypatch.setenv("API_BASE_URL", "https://api.example.com/api/")
        monkeypatch.setenv("DISCARD_STALE_RESPONSES", "false")

        settings = Settings(_env_file=None)

        assert settings.normalized_api_base_url == "https://api.example.com/api"
        assert settings.discard_stale_responses is False
