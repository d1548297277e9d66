# app/infrastructure/realtime/socketio_notification_notifier.py
from __future__ import annotations

from app.core.interfaces.notification_notifier import (
    NotificationCreatedEvent,
    NotificationNotifier,
)
from app.infrastructure.realtime.socketio_server import socketio, user_room


class SocketIONotificationNotifier(NotificationNotifier):
    def notify_notification_created(self, event: NotificationCreatedEvent) -> None:
        payload = {
            "id": event.notification_id,
            "user_id": event.user_id,
            "type": event.type,
            "message": event.message,
            "link": event.link,
            "created_at": event.created_at_iso,
        }
        if event.data is not None:
            payload["data"] = event.data

        # só o destinatário recebe (sem fallback global)
        socketio.emit("notification:created", payload, to=user_room(event.user_id))
