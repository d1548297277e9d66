# app/repositories/category_repository.py

from sqlalchemy.orm import Session

from app.core.base_repository import SoftDeleteRepository
from app.infrastructure.database.models.category_model import CategoryModel


class CategoryRepository(SoftDeleteRepository[CategoryModel]):
    model = CategoryModel

    def __init__(self, session: Session) -> None:
        super().__init__(session)
