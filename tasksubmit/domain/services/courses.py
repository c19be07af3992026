"""Course catalog store."""

from __future__ import annotations

import structlog

from tasksubmit.api.client import (
    ApiClientError,
    SessionExpiredError,
    TaskSubmitClient,
    error_message,
)
from tasksubmit.api.schemas import Course
from tasksubmit.domain.models import CatalogState
from tasksubmit.domain.reference_data import UNKNOWN_COURSE
from tasksubmit.domain.services.base import ObservableStore, RequestSequence

logger = structlog.get_logger(__name__)


class CourseCatalogStore(ObservableStore):
    """Caches the read-only course list."""

    def __init__(self, client: TaskSubmitClient, *, discard_stale_responses: bool = True) -> None:
        super().__init__()
        self.client = client
        self.state = CatalogState()
        self._sequence = RequestSequence(enabled=discard_stale_responses)

    @property
    def courses(self) -> list[Course]:
        return self.state.courses

    async def fetch_courses(self) -> list[Course]:
        """Replace the cached list with the backend's; keep it on failure."""
        ticket = self._sequence.next()
        self.state.loading = True
        self.state.error = None
        self._notify()

        try:
            courses = await self.client.list_courses()
        except SessionExpiredError:
            self._settle(ticket)
            return self.state.courses
        except ApiClientError as exc:
            if self._settle(ticket):
                self.state.error = error_message(exc)
                await logger.awarning("courses_fetch_failed", error=exc.message)
                self._notify()
            return self.state.courses

        if self._settle(ticket):
            self.state.courses = courses
            self.state.error = None
            await logger.ainfo("courses_fetched", count=len(courses))
            self._notify()
        return self.state.courses

    def get(self, course_id: str) -> Course | None:
        return next((course for course in self.state.courses if course.id == course_id), None)

    def course_name(self, course_id: str) -> str:
        course = self.get(course_id)
        return course.name if course else UNKNOWN_COURSE

    def clear_error(self) -> None:
        self.state.error = None
        self._notify()

    def reset(self) -> None:
        self.state = CatalogState()
        self._notify()

    def _settle(self, ticket: int) -> bool:
        """Clear ``loading`` for the newest request; False if ``ticket`` is stale."""
        if self._sequence.is_stale(ticket):
            logger.info("stale_response_discarded", store="courses", ticket=ticket)
            return False
        self.state.loading = False
        return True
