# app/core/interfaces/request_notifier.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class NotificationType(str, Enum):
    REQUEST_CREATED = "REQUEST_CREATED"
    REQUEST_ASSIGNED = "REQUEST_ASSIGNED"
    REQUEST_CANCELLATION_REQUESTED = "REQUEST_CANCELLATION_REQUESTED"
    REQUEST_CANCELLED = "REQUEST_CANCELLED"
    REQUEST_COMPLETED = "REQUEST_COMPLETED"


@dataclass(frozen=True)
class NotificationDraft:
    # user_id None = será definido por destinatário (ex.: cada admin)
    user_id: int | None
    type: NotificationType
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    link: str | None = None


class NotificationSender(Protocol):
    """Fronteira fire-and-forget usada pelo RequestService."""

    def create_notification(
        self,
        *,
        user_id: int,
        type: NotificationType,
        message: str,
        data: dict[str, Any] | None = None,
        link: str | None = None,
    ) -> Any:
        ...
