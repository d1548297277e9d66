# app/api/routes/request_routes.py

from __future__ import annotations

from datetime import datetime

from flask import Blueprint, jsonify, request
from loguru import logger

from app.api.middlewares.auth_middleware import RouteRequirement, current_principal, register_route
from app.api.schemas.request_schema import (
    AssignRequestInput,
    CancelRequestInput,
    CompleteRequestInput,
    CreateRequestInput,
    RequestCountResponse,
    RequestListResponse,
    RequestResponse,
    UpdateRequestInput,
)
from app.config.settings import settings
from app.core.audit.audit_actions import AuditAction
from app.core.audit.audit_entities import AuditEntity
from app.core.exceptions import AppError, BadRequestError
from app.core.roles import ALL_ROLES, STAFF_ROLES, UserRole
from app.core.status_transition import RequestStatus
from app.infrastructure.database.session import db_session
from app.infrastructure.realtime.socketio_notification_notifier import SocketIONotificationNotifier
from app.infrastructure.storage.local_folder_storage import LocalFolderStorage, LocalFolderStorageConfig
from app.repositories.audit_log_repository import AuditLogRepository
from app.repositories.counter_repository import CounterRepository
from app.repositories.location_repository import LocationRepository
from app.repositories.notification_repository import NotificationRepository
from app.repositories.request_repository import RequestFilters, RequestRepository
from app.repositories.service_repository import ServiceRepository
from app.repositories.user_repository import UserRepository
from app.services.audit_service import AuditService
from app.services.folder_service import RequestFolderService
from app.services.notification_service import NotificationService
from app.services.request_service import RequestService

bp_req = Blueprint("requests", __name__)

FEATURE = "requests"
MAX_LIMIT = 200


# -------------------------
# Helpers
# -------------------------

def _build_folders() -> RequestFolderService | None:
    try:
        storage = LocalFolderStorage(config=LocalFolderStorageConfig(base_path=settings.folders_base_path))
    except AppError as e:
        # sem storage, a request é criada mesmo assim
        logger.warning(f"Storage de pastas indisponível: {e}")
        return None
    return RequestFolderService(storage=storage)


def _build_service(session) -> RequestService:
    return RequestService(
        req_repo=RequestRepository(session),
        service_repo=ServiceRepository(session),
        location_repo=LocationRepository(session),
        user_repo=UserRepository(session),
        counter_repo=CounterRepository(session),
        notifications=NotificationService(
            session=session,
            repo=NotificationRepository(session),
            notifier=SocketIONotificationNotifier(),
        ),
        folders=_build_folders(),
    )


def _build_audit(session) -> AuditService:
    return AuditService(AuditLogRepository(session))


def _int_arg(name: str, default: int | None = None) -> int | None:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise BadRequestError(f"Parâmetro {name} inválido.")


def _datetime_arg(name: str) -> datetime | None:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise BadRequestError(f"Parâmetro {name} inválido. Use ISO-8601 (ex.: 2025-01-31T12:00:00Z).")


def _parse_filters() -> RequestFilters:
    status = (request.args.get("status") or "").strip().upper() or None
    if status is not None and status not in {s.value for s in RequestStatus}:
        raise BadRequestError(f"Status inválido: {status}.")

    return RequestFilters(
        status=status,
        service_id=_int_arg("service_id"),
        assigned_to_id=_int_arg("assigned_to_id"),
        start_date=_datetime_arg("start_date"),
        end_date=_datetime_arg("end_date"),
    )


def _parse_paging() -> tuple[int, int]:
    limit = _int_arg("limit", 50)
    offset = _int_arg("offset", 0)
    if limit < 1 or offset < 0:
        raise BadRequestError("Parâmetros limit/offset inválidos.")
    return min(limit, MAX_LIMIT), offset


def _pack(req) -> dict:
    return RequestResponse.from_model(req).model_dump()


# -------------------------
# CRUD
# -------------------------

def create_request():
    principal = current_principal()
    payload = CreateRequestInput.model_validate(request.get_json(force=True))

    with db_session() as session:
        svc = _build_service(session)
        audit = _build_audit(session)

        req = svc.create(client_id=principal.user_id, **payload.model_dump())

        audit.log(
            entity_name=AuditEntity.REQUEST,
            entity_id=req.id,
            action_name=AuditAction.CREATED,
            user_id=principal.user_id,
            details=f"service_id={req.service_id}; custom_id={req.custom_id}",
        )
        body = _pack(req)

    return jsonify(body), 201


def list_requests():
    principal = current_principal()
    filters = _parse_filters()
    limit, offset = _parse_paging()

    with db_session() as session:
        svc = _build_service(session)
        items = svc.find_all(
            actor_id=principal.user_id,
            role=principal.role,
            filters=filters,
            limit=limit,
            offset=offset,
        )
        total = svc.count(actor_id=principal.user_id, role=principal.role, filters=filters)

        body = RequestListResponse(
            items=[RequestResponse.from_model(r) for r in items],
            total=total,
            limit=limit,
            offset=offset,
        ).model_dump()

    return jsonify(body), 200


def count_requests():
    principal = current_principal()
    filters = _parse_filters()

    with db_session() as session:
        svc = _build_service(session)
        total = svc.count(actor_id=principal.user_id, role=principal.role, filters=filters)
        by_status = svc.count_by_status(actor_id=principal.user_id, role=principal.role, filters=filters)

    return jsonify(RequestCountResponse(count=total, by_status=by_status).model_dump()), 200


def get_request(request_id: int):
    principal = current_principal()

    with db_session() as session:
        req = _build_service(session).find_one(
            request_id=request_id, actor_id=principal.user_id, role=principal.role
        )
        body = _pack(req)

    return jsonify(body), 200


def update_request(request_id: int):
    principal = current_principal()
    payload = UpdateRequestInput.model_validate(request.get_json(force=True))
    values = payload.patch_values()

    with db_session() as session:
        svc = _build_service(session)
        audit = _build_audit(session)

        req = svc.update(
            request_id=request_id,
            values=values,
            actor_id=principal.user_id,
            role=principal.role,
        )

        audit.log(
            entity_name=AuditEntity.REQUEST,
            entity_id=request_id,
            action_name=AuditAction.STATUS_CHANGED if "status" in values else AuditAction.UPDATED,
            user_id=principal.user_id,
            details=f"changed_keys={sorted(values)}",
        )
        body = _pack(req)

    return jsonify(body), 200


def delete_request(request_id: int):
    principal = current_principal()

    with db_session() as session:
        svc = _build_service(session)
        audit = _build_audit(session)

        svc.remove(request_id=request_id, actor_id=principal.user_id, role=principal.role)

        audit.log(
            entity_name=AuditEntity.REQUEST,
            entity_id=request_id,
            action_name=AuditAction.DELETED,
            user_id=principal.user_id,
            details="request soft-deleted",
        )

    return ("", 204)


# -------------------------
# Ciclo de vida
# -------------------------

def assign_request(request_id: int):
    principal = current_principal()
    payload = AssignRequestInput.model_validate(request.get_json(force=True))

    with db_session() as session:
        svc = _build_service(session)
        audit = _build_audit(session)

        req = svc.assign(
            request_id=request_id,
            assigned_to_id=payload.assigned_to_id,
            actor_id=principal.user_id,
            role=principal.role,
        )

        audit.log(
            entity_name=AuditEntity.REQUEST,
            entity_id=request_id,
            action_name=AuditAction.ASSIGNED,
            user_id=principal.user_id,
            details=f"assigned_to_id={payload.assigned_to_id}",
        )
        body = _pack(req)

    return jsonify(body), 200


def cancel_request(request_id: int):
    principal = current_principal()
    payload = CancelRequestInput.model_validate(request.get_json(silent=True) or {})

    with db_session() as session:
        svc = _build_service(session)
        audit = _build_audit(session)

        req = svc.request_cancellation(
            request_id=request_id,
            actor_id=principal.user_id,
            role=principal.role,
            reason=payload.reason,
        )

        audit.log(
            entity_name=AuditEntity.REQUEST,
            entity_id=request_id,
            action_name=AuditAction.CANCELLATION_REQUESTED,
            user_id=principal.user_id,
            details=f"status={req.status}",
        )
        body = _pack(req)

    return jsonify(body), 200


def complete_request(request_id: int):
    principal = current_principal()
    payload = CompleteRequestInput.model_validate(request.get_json(silent=True) or {})

    with db_session() as session:
        svc = _build_service(session)
        audit = _build_audit(session)

        req = svc.complete(
            request_id=request_id,
            actor_id=principal.user_id,
            role=principal.role,
            notes=payload.notes,
        )

        audit.log(
            entity_name=AuditEntity.REQUEST,
            entity_id=request_id,
            action_name=AuditAction.COMPLETED,
            user_id=principal.user_id,
            details=f"has_notes={bool(payload.notes)}",
        )
        body = _pack(req)

    return jsonify(body), 200


# -------------------------
# Registro (cada rota com requisito explícito)
# -------------------------

_ANY = RouteRequirement(roles=ALL_ROLES, feature=FEATURE)

register_route(bp_req, "", create_request, methods=["POST"],
               requirement=RouteRequirement(roles={UserRole.CLIENT}, feature=FEATURE))
register_route(bp_req, "", list_requests, methods=["GET"], requirement=_ANY)
register_route(bp_req, "/stats/count", count_requests, methods=["GET"], requirement=_ANY)
register_route(bp_req, "/<int:request_id>", get_request, methods=["GET"], requirement=_ANY)
register_route(bp_req, "/<int:request_id>", update_request, methods=["PATCH"], requirement=_ANY)
register_route(bp_req, "/<int:request_id>", delete_request, methods=["DELETE"], requirement=_ANY)
register_route(bp_req, "/<int:request_id>/assign", assign_request, methods=["POST"],
               requirement=RouteRequirement(roles=STAFF_ROLES, feature=FEATURE))
register_route(bp_req, "/<int:request_id>/cancel", cancel_request, methods=["POST"],
               requirement=RouteRequirement(roles={UserRole.CLIENT, UserRole.ADMIN}, feature=FEATURE))
register_route(bp_req, "/<int:request_id>/complete", complete_request, methods=["POST"],
               requirement=RouteRequirement(roles=STAFF_ROLES, feature=FEATURE))
