# app/api/middlewares/auth_middleware.py
"""
Guardas de rota.

Cada rota declara um `RouteRequirement` explícito no registro:

    register_route(bp_req, "/<int:request_id>/assign", assign_request,
                   methods=["POST"], requirement=RouteRequirement(roles=STAFF_ROLES))

`guard(requirement)` compõe autenticação bearer + papel + feature flag.
O usuário autenticado fica em `g.principal`.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, TypeVar

from flask import Blueprint, g, request

from app.config.settings import settings
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.roles import ALL_ROLES, UserRole
from app.infrastructure.security.jwt_provider import JwtProvider

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: UserRole


@dataclass(frozen=True)
class RouteRequirement:
    roles: frozenset[UserRole] = ALL_ROLES
    feature: str | None = None

    def __post_init__(self) -> None:
        # aceita qualquer iterável de papéis (set, tupla, strings)
        object.__setattr__(self, "roles", frozenset(UserRole(r) for r in self.roles))


def _get_bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    parts = auth.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    raise UnauthorizedError("Token ausente.")


def authenticate() -> Principal:
    claims = JwtProvider().decode(_get_bearer_token())

    try:
        principal = Principal(user_id=int(claims["sub"]), role=UserRole(str(claims.get("role"))))
    except (TypeError, ValueError) as e:
        raise UnauthorizedError("Token inválido.") from e

    g.principal = principal
    return principal


def current_principal() -> Principal:
    principal = getattr(g, "principal", None)
    if principal is None:
        raise UnauthorizedError("Token ausente.")
    return principal


def guard(requirement: RouteRequirement) -> Callable[[F], F]:
    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            principal = authenticate()

            if principal.role not in requirement.roles:
                raise ForbiddenError("Acesso negado.")

            if requirement.feature and requirement.feature.lower() not in settings.enabled_features:
                raise ForbiddenError(f'Funcionalidade "{requirement.feature}" desabilitada.')

            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def register_route(
    bp: Blueprint,
    rule: str,
    view: Callable[..., Any],
    *,
    methods: list[str],
    requirement: RouteRequirement,
) -> None:
    bp.add_url_rule(rule, endpoint=view.__name__, view_func=guard(requirement)(view), methods=methods)
