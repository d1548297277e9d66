# app/infrastructure/realtime/socketio_server.py
from __future__ import annotations

from flask_socketio import SocketIO

from app.config.settings import settings

socketio = SocketIO(
    cors_allowed_origins=settings.cors_origins,
    async_mode=settings.socketio_async_mode,
)


def user_room(user_id: int) -> str:
    return f"user:{int(user_id)}"
