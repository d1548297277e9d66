# app/infrastructure/storage/folder_storage.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class StoredFolder:
    folder_id: str
    name: str
    parent_id: str | None


class FolderStorage(Protocol):
    def find_folder(self, *, name: str, parent_id: str | None) -> StoredFolder | None:
        """Procura uma pasta pelo nome dentro de `parent_id` (None = raiz)."""
        raise NotImplementedError

    def create_folder(self, *, name: str, parent_id: str | None) -> StoredFolder:
        """Cria a pasta. Não é idempotente: chamar duas vezes pode gerar duplicata."""
        raise NotImplementedError
