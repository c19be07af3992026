from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum

import structlog

from tasksubmit.domain.services.base import ObservableStore

logger = structlog.get_logger(__name__)


class NotificationVariant(str, Enum):
    DEFAULT = "default"
    SUCCESS = "success"
    DESTRUCTIVE = "destructive"


@dataclass(slots=True)
class Notification:
    id: str
    description: str
    title: str | None = None
    variant: NotificationVariant = NotificationVariant.DEFAULT


class NotificationCenter(ObservableStore):
    """Queue of toasts waiting to be shown and dismissed by the shell."""

    def __init__(self) -> None:
        super().__init__()
        self.notifications: list[Notification] = []

    def show(
        self,
        description: str,
        *,
        title: str | None = None,
        variant: NotificationVariant = NotificationVariant.DEFAULT,
    ) -> Notification:
        notification = Notification(
            id=uuid.uuid4().hex[:9],
            description=description,
            title=title,
            variant=variant,
        )
        self.notifications.append(notification)
        logger.info("notification_shown", variant=variant.value, description=description)
        self._notify()
        return notification

    def success(self, message: str) -> Notification:
        return self.show(message, variant=NotificationVariant.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.show(message, variant=NotificationVariant.DESTRUCTIVE)

    def dismiss(self, notification_id: str) -> None:
        self.notifications = [n for n in self.notifications if n.id != notification_id]
        self._notify()

    def clear(self) -> None:
        self.notifications = []
        self._notify()
