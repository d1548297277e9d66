# app/services/user_service.py

from app.core.exceptions import ConflictError
from app.core.roles import UserRole
from app.infrastructure.database.models.user_model import UserModel
from app.repositories.user_repository import UserRepository


class UserService:
    def __init__(self, user_repository: UserRepository) -> None:
        self._user_repository = user_repository

    def create_user(self, *, full_name: str, email: str, role: UserRole = UserRole.CLIENT) -> UserModel:
        normalized = email.strip().lower()
        if self._user_repository.get_by_email(normalized) is not None:
            raise ConflictError("Email já cadastrado.")

        model = UserModel(
            full_name=full_name.strip(),
            email=normalized,
            role=UserRole(role).value,
            is_deleted=False,
        )
        return self._user_repository.add(model)

    def list_users(
        self,
        *,
        limit: int = 50,
        offset: int = 0,
        role: UserRole | None = None,
    ) -> tuple[list[UserModel], int]:
        items = self._user_repository.list_active(limit=limit, offset=offset, role=role)
        total = self._user_repository.count_active(role=role)
        return items, total
