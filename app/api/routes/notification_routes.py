# app/api/routes/notification_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request

from app.api.middlewares.auth_middleware import RouteRequirement, current_principal, register_route
from app.api.schemas.notification_schema import NotificationListResponse, NotificationResponse
from app.core.exceptions import BadRequestError
from app.core.roles import ALL_ROLES
from app.infrastructure.database.session import db_session
from app.repositories.notification_repository import NotificationRepository
from app.services.notification_service import NotificationService

bp_notifications = Blueprint("notifications", __name__)


def _build_service(session) -> NotificationService:
    # leitura/marcação não emitem eventos
    return NotificationService(session=session, repo=NotificationRepository(session))


def list_notifications():
    principal = current_principal()
    try:
        limit = min(int(request.args.get("limit", 50)), 200)
        offset = int(request.args.get("offset", 0))
    except ValueError:
        raise BadRequestError("Parâmetros limit/offset inválidos.")
    unread_only = (request.args.get("unread") or "").lower() in ("1", "true", "yes")

    with db_session() as session:
        items, unread = _build_service(session).list_for_user(
            user_id=principal.user_id,
            unread_only=unread_only,
            limit=limit,
            offset=offset,
        )
        body = NotificationListResponse(
            items=[NotificationResponse.model_validate(n, from_attributes=True) for n in items],
            unread_count=unread,
            limit=limit,
            offset=offset,
        ).model_dump()

    return jsonify(body), 200


def mark_notification_read(notification_id: int):
    principal = current_principal()

    with db_session() as session:
        _build_service(session).mark_read(notification_id=notification_id, user_id=principal.user_id)

    return ("", 204)


_ANY = RouteRequirement(roles=ALL_ROLES, feature="notifications")

register_route(bp_notifications, "", list_notifications, methods=["GET"], requirement=_ANY)
register_route(bp_notifications, "/<int:notification_id>/read", mark_notification_read,
               methods=["PATCH"], requirement=_ANY)
