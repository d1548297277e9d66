# app/repositories/counter_repository.py

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.core.base_repository import BaseRepository
from app.infrastructure.database.models.counter_model import CounterModel


class CounterRepository(BaseRepository[CounterModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def next_value(self, name: str) -> int:
        """Incrementa e devolve o contador `name` (cria com 1 se não existir)."""
        stmt = (
            update(CounterModel)
            .where(CounterModel.name == name)
            .values(value=CounterModel.value + 1)
            .execution_options(synchronize_session=False)
        )
        res = self._session.execute(stmt)
        if (res.rowcount or 0) == 0:
            self.add(CounterModel(name=name, value=1))
            return 1

        value = self._session.execute(
            select(CounterModel.value).where(CounterModel.name == name)
        ).scalar_one()
        return int(value)
