# app/repositories/location_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.base_repository import BaseRepository
from app.infrastructure.database.models.work_location_model import WorkLocationModel


class LocationRepository(BaseRepository[WorkLocationModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_owned(self, *, location_id: int, user_id: int) -> WorkLocationModel | None:
        stmt = select(WorkLocationModel).where(
            WorkLocationModel.id == location_id,
            WorkLocationModel.user_id == user_id,
        )
        return self._session.execute(stmt).scalars().first()

    def list_by_user(self, user_id: int) -> list[WorkLocationModel]:
        stmt = (
            select(WorkLocationModel)
            .where(WorkLocationModel.user_id == user_id)
            .order_by(WorkLocationModel.id.asc())
        )
        return list(self._session.execute(stmt).scalars().all())
