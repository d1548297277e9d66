# app/api/routes/user_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request

from app.api.middlewares.auth_middleware import RouteRequirement, current_principal, register_route
from app.api.schemas.user_schema import CreateUserRequest, UserResponse, UsersListResponse
from app.core.audit.audit_actions import AuditAction
from app.core.audit.audit_entities import AuditEntity
from app.core.exceptions import BadRequestError
from app.core.roles import UserRole
from app.infrastructure.database.session import db_session
from app.repositories.audit_log_repository import AuditLogRepository
from app.repositories.user_repository import UserRepository
from app.services.audit_service import AuditService
from app.services.user_service import UserService

bp_users = Blueprint("users", __name__)


# -------------------------
# Helpers
# -------------------------

def _build_service(session) -> UserService:
    return UserService(UserRepository(session))


def _build_audit(session) -> AuditService:
    return AuditService(AuditLogRepository(session))


def _pack(u) -> dict:
    return UserResponse(
        id=u.id,
        full_name=u.full_name,
        email=u.email,
        role=u.role,
        created_at=u.created_at,
    ).model_dump()


# -------------------------
# ADMIN
# -------------------------

def create_user():
    principal = current_principal()
    payload = CreateUserRequest.model_validate(request.get_json(force=True))

    with db_session() as session:
        service = _build_service(session)
        audit = _build_audit(session)

        created = service.create_user(**payload.model_dump())
        session.refresh(created)

        audit.log(
            entity_name=AuditEntity.USER,
            entity_id=int(created.id),
            action_name=AuditAction.CREATED,
            user_id=principal.user_id,
            details=f"email={created.email}; role={created.role}",
        )
        body = _pack(created)

    return jsonify(body), 201


def list_users():
    try:
        limit = int(request.args.get("limit", 50))
        offset = int(request.args.get("offset", 0))
    except ValueError:
        raise BadRequestError("Parâmetros limit/offset inválidos.")

    raw_role = (request.args.get("role") or "").strip().upper()
    try:
        role = UserRole(raw_role) if raw_role else None
    except ValueError:
        raise BadRequestError(f"Papel inválido: {raw_role}.")

    with db_session() as session:
        users, total = _build_service(session).list_users(limit=limit, offset=offset, role=role)
        body = UsersListResponse(
            items=[UserResponse(id=u.id, full_name=u.full_name, email=u.email, role=u.role, created_at=u.created_at)
                   for u in users],
            total=total,
            limit=limit,
            offset=offset,
        ).model_dump()

    return jsonify(body), 200


_ADMIN = RouteRequirement(roles={UserRole.ADMIN})

register_route(bp_users, "", create_user, methods=["POST"], requirement=_ADMIN)
register_route(bp_users, "", list_users, methods=["GET"], requirement=_ADMIN)
