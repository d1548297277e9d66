# app/api/routes/location_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request

from app.api.middlewares.auth_middleware import RouteRequirement, current_principal, register_route
from app.api.schemas.catalog_schema import CreateLocationInput, LocationResponse
from app.core.audit.audit_actions import AuditAction
from app.core.audit.audit_entities import AuditEntity
from app.core.roles import ALL_ROLES
from app.infrastructure.database.session import db_session
from app.repositories.audit_log_repository import AuditLogRepository
from app.repositories.location_repository import LocationRepository
from app.services.audit_service import AuditService
from app.services.location_service import LocationService

bp_locations = Blueprint("locations", __name__)


def _pack(loc) -> dict:
    return LocationResponse.model_validate(loc, from_attributes=True).model_dump()


def list_my_locations():
    principal = current_principal()

    with db_session() as session:
        items = [_pack(x) for x in LocationService(LocationRepository(session)).list_mine(user_id=principal.user_id)]

    return jsonify(items), 200


def create_location():
    principal = current_principal()
    payload = CreateLocationInput.model_validate(request.get_json(force=True))

    with db_session() as session:
        loc = LocationService(LocationRepository(session)).create(user_id=principal.user_id, **payload.model_dump())

        AuditService(AuditLogRepository(session)).log(
            entity_name=AuditEntity.LOCATION,
            entity_id=loc.id,
            action_name=AuditAction.CREATED,
            user_id=principal.user_id,
            details=f"city={loc.city}",
        )
        body = _pack(loc)

    return jsonify(body), 201


_ANY = RouteRequirement(roles=ALL_ROLES)

register_route(bp_locations, "", list_my_locations, methods=["GET"], requirement=_ANY)
register_route(bp_locations, "", create_location, methods=["POST"], requirement=_ANY)
