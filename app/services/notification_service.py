# app/services/notification_service.py

from __future__ import annotations

from datetime import timezone
from typing import Any

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.core.interfaces.notification_notifier import NotificationCreatedEvent, NotificationNotifier
from app.core.interfaces.request_notifier import NotificationType
from app.core.time_utils import as_utc
from app.infrastructure.database.models.notification_model import NotificationModel
from app.repositories.notification_repository import NotificationRepository


class NotificationService:
    def __init__(
        self,
        *,
        session: Session,
        repo: NotificationRepository,
        notifier: NotificationNotifier | None = None,
    ) -> None:
        self._session = session
        self._repo = repo
        self._notifier = notifier

    def create_notification(
        self,
        *,
        user_id: int,
        type: NotificationType | str,
        message: str,
        data: dict[str, Any] | None = None,
        link: str | None = None,
    ) -> NotificationModel:
        type_value = type.value if isinstance(type, NotificationType) else str(type)

        # SAVEPOINT: uma falha aqui não pode contaminar a transação principal
        with self._session.begin_nested():
            model = self._repo.add(
                NotificationModel(
                    user_id=int(user_id),
                    type=type_value,
                    message=message,
                    data=data,
                    link=link,
                )
            )
        self._session.refresh(model)

        if self._notifier:
            self._notifier.notify_notification_created(
                NotificationCreatedEvent(
                    notification_id=int(model.id),
                    user_id=int(model.user_id),
                    type=model.type,
                    message=model.message,
                    link=model.link,
                    created_at_iso=as_utc(model.created_at).astimezone(timezone.utc).isoformat(),
                    data=model.data,
                )
            )
        return model

    def list_for_user(
        self,
        *,
        user_id: int,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[NotificationModel], int]:
        items = self._repo.list_by_user(user_id=user_id, unread_only=unread_only, limit=limit, offset=offset)
        return items, self._repo.count_unread(user_id)

    def mark_read(self, *, notification_id: int, user_id: int) -> None:
        ok = self._repo.mark_read(notification_id=notification_id, user_id=user_id)
        if not ok:
            raise NotFoundError("Notificação não encontrada.")
