# app/services/folder_service.py
from __future__ import annotations

from loguru import logger

from app.core.single_flight import SingleFlight
from app.infrastructure.storage.folder_storage import FolderStorage, StoredFolder

# compartilhado pelo processo: os services são recriados a cada requisição HTTP
_folder_flight: SingleFlight[tuple[str, int], StoredFolder] = SingleFlight()


class RequestFolderService:
    """
    Provisiona pastas por usuário e por solicitação:

        user-<user_id>/request-<request_id>

    Chamadas concorrentes para a mesma pasta esperam a primeira (single-flight),
    então uma pasta nunca é criada em duplicidade.
    """

    def __init__(
        self,
        *,
        storage: FolderStorage,
        flight: SingleFlight[tuple[str, int], StoredFolder] | None = None,
    ) -> None:
        self._storage = storage
        self._flight = flight if flight is not None else _folder_flight

    def _find_or_create(self, *, name: str, parent_id: str | None) -> StoredFolder:
        existing = self._storage.find_folder(name=name, parent_id=parent_id)
        if existing is not None:
            return existing

        created = self._storage.create_folder(name=name, parent_id=parent_id)
        logger.info(f"Pasta criada: {created.folder_id}")
        return created

    def ensure_user_folder(self, user_id: int) -> StoredFolder:
        return self._flight.do(
            ("user", int(user_id)),
            lambda: self._find_or_create(name=f"user-{int(user_id)}", parent_id=None),
        )

    def ensure_request_folder(self, *, request_id: int, user_id: int) -> StoredFolder:
        parent = self.ensure_user_folder(user_id)
        return self._flight.do(
            ("request", int(request_id)),
            lambda: self._find_or_create(name=f"request-{int(request_id)}", parent_id=parent.folder_id),
        )
