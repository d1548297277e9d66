from typing import ClassVar, Generic, TypeVar

from sqlalchemy import Select, select, update
from sqlalchemy.orm import Session

from app.core.time_utils import utcnow

TModel = TypeVar("TModel")


class BaseRepository(Generic[TModel]):
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, model: TModel) -> TModel:
        self._session.add(model)
        self._session.flush()
        return model


class SoftDeleteRepository(BaseRepository[TModel]):
    """
    Toda leitura montada por `_select` já filtra `deleted_at IS NULL`.
    `include_deleted=True` é só para ferramentas de admin.
    """

    model: ClassVar[type]

    def _select(self, *, include_deleted: bool = False) -> Select:
        stmt = select(self.model)
        if not include_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))
        return stmt

    def get_by_id(self, entity_id: int, *, include_deleted: bool = False) -> TModel | None:
        stmt = self._select(include_deleted=include_deleted).where(self.model.id == entity_id)
        return self._session.execute(stmt).scalars().first()

    def soft_delete(self, entity_id: int) -> bool:
        now = utcnow()
        stmt = (
            update(self.model)
            .where(self.model.id == entity_id, self.model.deleted_at.is_(None))
            .values(deleted_at=now, updated_at=now)
        )
        res = self._session.execute(stmt)
        return (res.rowcount or 0) > 0
