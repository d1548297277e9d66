# app/api/realtime/socket_handlers.py
from __future__ import annotations

from flask import request
from flask_socketio import disconnect, join_room
from loguru import logger

from app.core.exceptions import UnauthorizedError
from app.infrastructure.realtime.socketio_server import socketio, user_room
from app.infrastructure.security.jwt_provider import JwtProvider


def _get_bearer_token(auth: dict | None) -> str | None:
    # 1) payload de handshake: io({ auth: { token } })
    if isinstance(auth, dict) and auth.get("token"):
        return str(auth["token"]).strip()

    # 2) Authorization: Bearer <token>
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header.split(" ", 1)[1].strip()

    # 3) querystring ?token=...
    token = request.args.get("token")
    if token:
        return str(token).strip()

    return None


def register_socket_handlers() -> None:
    @socketio.on("connect")
    def on_connect(auth=None):
        token = _get_bearer_token(auth)
        if not token:
            return disconnect()

        try:
            claims = JwtProvider().decode(token)
        except UnauthorizedError as e:
            logger.debug(f"Socket recusado: {e}")
            return disconnect()

        user_id = int(claims["sub"])
        request.environ["auth_user_id"] = user_id

        # cada usuário escuta só a própria sala de notificações
        join_room(user_room(user_id))
