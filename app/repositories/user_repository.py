# app/repositories/user_repository.py

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.base_repository import BaseRepository
from app.core.roles import UserRole
from app.infrastructure.database.models.user_model import UserModel


class UserRepository(BaseRepository[UserModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_by_email(self, email: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.email == email, UserModel.is_deleted.is_(False))
        return self._session.execute(stmt).scalar_one_or_none()

    def get_by_id(self, user_id: int) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id, UserModel.is_deleted.is_(False))
        return self._session.execute(stmt).scalar_one_or_none()

    def list_ids_by_role(self, role: UserRole) -> list[int]:
        stmt = select(UserModel.id).where(
            UserModel.role == role.value,
            UserModel.is_deleted.is_(False),
        )
        return [int(x) for x in self._session.execute(stmt).scalars().all()]

    def list_active(self, *, limit: int = 50, offset: int = 0, role: UserRole | None = None) -> list[UserModel]:
        stmt = select(UserModel).where(UserModel.is_deleted.is_(False))
        if role is not None:
            stmt = stmt.where(UserModel.role == role.value)

        stmt = stmt.order_by(UserModel.id.desc()).limit(limit).offset(offset)
        return list(self._session.execute(stmt).scalars().all())

    def count_active(self, *, role: UserRole | None = None) -> int:
        stmt = select(func.count(UserModel.id)).where(UserModel.is_deleted.is_(False))
        if role is not None:
            stmt = stmt.where(UserModel.role == role.value)
        return int(self._session.execute(stmt).scalar_one())
