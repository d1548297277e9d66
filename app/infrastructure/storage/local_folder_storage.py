# app/infrastructure/storage/local_folder_storage.py
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from app.core.exceptions import ConflictError
from app.infrastructure.storage.folder_storage import FolderStorage, StoredFolder

_SAFE_NAME = re.compile(r"^[A-Za-z0-9._-]+$")


@dataclass(frozen=True)
class LocalFolderStorageConfig:
    base_path: str


class LocalFolderStorage(FolderStorage):
    def __init__(self, *, config: LocalFolderStorageConfig) -> None:
        raw = (config.base_path or "").strip()
        if not raw:
            raise ConflictError("Storage de pastas não configurado (FOLDERS_BASE_PATH vazio).")

        self._base = Path(raw).expanduser().resolve()

        try:
            self._base.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            raise ConflictError(
                f"Sem permissão para criar/acessar a pasta base: '{self._base}'. "
                "Verifique permissões do usuário do serviço e/ou ajuste FOLDERS_BASE_PATH."
            )
        except OSError as e:
            raise ConflictError(f"Falha ao inicializar storage local em '{self._base}': {e}")

        if not os.access(self._base, os.W_OK):
            raise ConflictError(f"Pasta base sem permissão de escrita: '{self._base}'.")

    def _abs_path(self, folder_id: str | None) -> Path:
        if not folder_id:
            return self._base

        # folder_id é relativo à base (ex.: users/12/requests/40)
        abs_path = (self._base / Path(folder_id)).resolve()

        # anti path traversal
        base_str = str(self._base)
        abs_str = str(abs_path)
        if not (abs_str == base_str or abs_str.startswith(base_str + os.sep)):
            raise ValueError("folder_id inválido (path traversal).")

        return abs_path

    def _folder_id(self, abs_path: Path) -> str:
        return abs_path.relative_to(self._base).as_posix()

    def find_folder(self, *, name: str, parent_id: str | None) -> StoredFolder | None:
        target = self._abs_path(parent_id) / name
        if not target.is_dir():
            return None
        return StoredFolder(folder_id=self._folder_id(target), name=name, parent_id=parent_id)

    def create_folder(self, *, name: str, parent_id: str | None) -> StoredFolder:
        if not _SAFE_NAME.match(name):
            raise ValueError(f"Nome de pasta inválido: {name!r}")

        target = self._abs_path(parent_id) / name
        try:
            target.mkdir(parents=True, exist_ok=False)
        except FileExistsError:
            raise ConflictError(f"Pasta já existe: '{self._folder_id(target)}'.")
        except PermissionError:
            raise ConflictError(f"Sem permissão para criar a pasta '{target}'.")

        return StoredFolder(folder_id=self._folder_id(target), name=name, parent_id=parent_id)
