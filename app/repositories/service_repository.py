# app/repositories/service_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.base_repository import SoftDeleteRepository
from app.infrastructure.database.models.service_model import ServiceModel


class ServiceRepository(SoftDeleteRepository[ServiceModel]):
    model = ServiceModel

    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_by_code(self, code: str) -> ServiceModel | None:
        # code é único mesmo entre deletados
        stmt = select(ServiceModel).where(ServiceModel.code == code)
        return self._session.execute(stmt).scalars().first()

    def list_active(self, *, category_id: int | None = None) -> list[ServiceModel]:
        stmt = self._select()
        if category_id is not None:
            stmt = stmt.where(ServiceModel.category_id == category_id)
        stmt = stmt.order_by(ServiceModel.name.asc())
        return list(self._session.execute(stmt).scalars().unique().all())
