# app/api/routes/service_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request

from app.api.middlewares.auth_middleware import RouteRequirement, current_principal, register_route
from app.api.schemas.catalog_schema import CategoryMiniResponse, CreateServiceInput, ServiceResponse
from app.core.audit.audit_actions import AuditAction
from app.core.audit.audit_entities import AuditEntity
from app.core.exceptions import BadRequestError
from app.core.roles import ALL_ROLES, UserRole
from app.infrastructure.database.session import db_session
from app.repositories.audit_log_repository import AuditLogRepository
from app.repositories.category_repository import CategoryRepository
from app.repositories.service_repository import ServiceRepository
from app.services.audit_service import AuditService
from app.services.catalog_service import CatalogService

bp_services = Blueprint("services", __name__)


def _build_service(session) -> CatalogService:
    return CatalogService(
        service_repo=ServiceRepository(session),
        category_repo=CategoryRepository(session),
    )


def _build_audit(session) -> AuditService:
    return AuditService(AuditLogRepository(session))


def _pack(s) -> dict:
    return ServiceResponse(
        id=s.id,
        name=s.name,
        code=s.code,
        category=CategoryMiniResponse(id=s.category.id, name=s.category.name) if s.category else None,
        request_template=s.request_template,
        created_at=s.created_at,
    ).model_dump()


def list_services():
    raw = request.args.get("category_id")
    try:
        category_id = int(raw) if raw else None
    except ValueError:
        raise BadRequestError("Parâmetro category_id inválido.")

    with db_session() as session:
        items = [_pack(s) for s in _build_service(session).list_services(category_id=category_id)]

    return jsonify(items), 200


def create_service():
    principal = current_principal()
    payload = CreateServiceInput.model_validate(request.get_json(force=True))

    with db_session() as session:
        svc = _build_service(session)
        audit = _build_audit(session)

        created = svc.create_service(**payload.model_dump())
        session.refresh(created)

        audit.log(
            entity_name=AuditEntity.SERVICE,
            entity_id=created.id,
            action_name=AuditAction.CREATED,
            user_id=principal.user_id,
            details=f"code={created.code}",
        )
        body = _pack(created)

    return jsonify(body), 201


def delete_service(service_id: int):
    principal = current_principal()

    with db_session() as session:
        _build_service(session).delete_service(service_id=service_id)
        _build_audit(session).log(
            entity_name=AuditEntity.SERVICE,
            entity_id=service_id,
            action_name=AuditAction.DELETED,
            user_id=principal.user_id,
            details="service soft-deleted",
        )

    return ("", 204)


_ADMIN = RouteRequirement(roles={UserRole.ADMIN})

register_route(bp_services, "", list_services, methods=["GET"], requirement=RouteRequirement(roles=ALL_ROLES))
register_route(bp_services, "", create_service, methods=["POST"], requirement=_ADMIN)
register_route(bp_services, "/<int:service_id>", delete_service, methods=["DELETE"], requirement=_ADMIN)
