# app/core/interfaces/notification_notifier.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class NotificationCreatedEvent:
    notification_id: int
    user_id: int
    type: str
    message: str
    link: str | None
    created_at_iso: str
    data: dict[str, Any] | None = None


class NotificationNotifier(Protocol):
    def notify_notification_created(self, event: NotificationCreatedEvent) -> None:
        ...
