# app/services/catalog_service.py

from typing import Any

from loguru import logger

from app.core.exceptions import ConflictError, NotFoundError
from app.infrastructure.database.models.service_model import ServiceModel
from app.repositories.category_repository import CategoryRepository
from app.repositories.service_repository import ServiceRepository


class CatalogService:
    """Serviços oferecidos aos clientes (e suas categorias)."""

    def __init__(self, *, service_repo: ServiceRepository, category_repo: CategoryRepository) -> None:
        self._service_repo = service_repo
        self._category_repo = category_repo

    def list_services(self, *, category_id: int | None = None) -> list[ServiceModel]:
        return self._service_repo.list_active(category_id=category_id)

    def create_service(
        self,
        *,
        name: str,
        code: str | None = None,
        category_id: int | None = None,
        request_template: dict[str, Any] | None = None,
    ) -> ServiceModel:
        code = code.strip().upper() if code else None
        if code and self._service_repo.get_by_code(code) is not None:
            raise ConflictError(f'Já existe um serviço com o código "{code}".')

        if category_id is not None and self._category_repo.get_by_id(category_id) is None:
            raise NotFoundError(f'Categoria "{category_id}" não encontrada.')

        model = self._service_repo.add(
            ServiceModel(
                name=name.strip(),
                code=code,
                category_id=category_id,
                request_template=request_template,
            )
        )
        logger.info(f"Serviço {model.id} criado (code={code})")
        return model

    def delete_service(self, *, service_id: int) -> None:
        if not self._service_repo.soft_delete(service_id):
            raise NotFoundError(f'Serviço "{service_id}" não encontrado.')
