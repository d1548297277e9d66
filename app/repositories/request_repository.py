# app/repositories/request_repository.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from app.core.base_repository import SoftDeleteRepository
from app.core.roles import UserRole
from app.infrastructure.database.models.request_model import RequestModel


@dataclass(frozen=True)
class RequestScope:
    """Visibilidade por papel: CLIENT vê as próprias; EMPLOYEE as suas ou sem responsável; ADMIN tudo."""

    actor_id: int
    role: UserRole

    def apply(self, stmt: Select) -> Select:
        if self.role == UserRole.CLIENT:
            return stmt.where(RequestModel.user_id == self.actor_id)
        if self.role == UserRole.EMPLOYEE:
            return stmt.where(
                or_(
                    RequestModel.assigned_to_id == self.actor_id,
                    RequestModel.assigned_to_id.is_(None),
                )
            )
        return stmt

    def can_see(self, req: RequestModel) -> bool:
        if self.role == UserRole.CLIENT:
            return req.user_id == self.actor_id
        if self.role == UserRole.EMPLOYEE:
            return req.assigned_to_id is None or req.assigned_to_id == self.actor_id
        return True


@dataclass(frozen=True)
class RequestFilters:
    status: str | None = None
    service_id: int | None = None
    assigned_to_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    def apply(self, stmt: Select) -> Select:
        if self.status:
            stmt = stmt.where(RequestModel.status == self.status)
        if self.service_id is not None:
            stmt = stmt.where(RequestModel.service_id == self.service_id)
        if self.assigned_to_id is not None:
            stmt = stmt.where(RequestModel.assigned_to_id == self.assigned_to_id)
        # limites inclusivos
        if self.start_date is not None:
            stmt = stmt.where(RequestModel.execution_date_time >= self.start_date)
        if self.end_date is not None:
            stmt = stmt.where(RequestModel.execution_date_time <= self.end_date)
        return stmt


class RequestRepository(SoftDeleteRepository[RequestModel]):
    model = RequestModel

    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def list_visible(
        self,
        *,
        scope: RequestScope,
        filters: RequestFilters | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[RequestModel]:
        stmt = scope.apply(self._select())
        if filters is not None:
            stmt = filters.apply(stmt)

        stmt = stmt.order_by(RequestModel.created_at.desc(), RequestModel.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        return list(self._session.execute(stmt).scalars().all())

    def count(self, *, scope: RequestScope, filters: RequestFilters | None = None) -> int:
        stmt = scope.apply(select(func.count(RequestModel.id)).where(RequestModel.deleted_at.is_(None)))
        if filters is not None:
            stmt = filters.apply(stmt)
        return int(self._session.execute(stmt).scalar_one())

    def count_by_status(self, *, scope: RequestScope, filters: RequestFilters | None = None) -> dict[str, int]:
        stmt = scope.apply(
            select(RequestModel.status, func.count(RequestModel.id)).where(RequestModel.deleted_at.is_(None))
        )
        if filters is not None:
            stmt = filters.apply(stmt)
        stmt = stmt.group_by(RequestModel.status)
        return {status: int(total) for status, total in self._session.execute(stmt).all()}

    def update_fields(self, req: RequestModel, values: dict) -> RequestModel:
        for key, value in values.items():
            setattr(req, key, value)
        self._session.flush()
        # recarrega relacionamentos (assigned_to etc.) após mudar FKs
        self._session.refresh(req)
        return req
