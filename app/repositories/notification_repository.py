# app/repositories/notification_repository.py

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.core.base_repository import BaseRepository
from app.core.time_utils import utcnow
from app.infrastructure.database.models.notification_model import NotificationModel


class NotificationRepository(BaseRepository[NotificationModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def list_by_user(
        self,
        *,
        user_id: int,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[NotificationModel]:
        stmt = select(NotificationModel).where(NotificationModel.user_id == user_id)
        if unread_only:
            stmt = stmt.where(NotificationModel.read_at.is_(None))

        stmt = stmt.order_by(NotificationModel.id.desc()).limit(limit).offset(offset)
        return list(self._session.execute(stmt).scalars().all())

    def count_unread(self, user_id: int) -> int:
        stmt = select(func.count(NotificationModel.id)).where(
            NotificationModel.user_id == user_id,
            NotificationModel.read_at.is_(None),
        )
        return int(self._session.execute(stmt).scalar_one())

    def mark_read(self, *, notification_id: int, user_id: int) -> bool:
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
            )
            .values(read_at=func.coalesce(NotificationModel.read_at, utcnow()))
            .execution_options(synchronize_session=False)
        )
        res = self._session.execute(stmt)
        return (res.rowcount or 0) > 0
