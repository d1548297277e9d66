"""Tests for request folder provisioning."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.core.exceptions import ConflictError
from app.core.single_flight import SingleFlight
from app.infrastructure.storage.folder_storage import StoredFolder
from app.infrastructure.storage.local_folder_storage import LocalFolderStorage, LocalFolderStorageConfig
from app.services.folder_service import RequestFolderService
from tests.fixtures.db_fixtures import future
from tests.fixtures.notification_fixtures import build_request_service


class SlowStorage:
    """In-memory storage whose create is slow and NOT idempotent."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.folders: dict[tuple[str | None, str], StoredFolder] = {}
        self.creates: list[str] = []

    def find_folder(self, *, name, parent_id):
        with self._lock:
            return self.folders.get((parent_id, name))

    def create_folder(self, *, name, parent_id):
        time.sleep(0.05)
        folder_id = f"{parent_id}/{name}" if parent_id else name
        with self._lock:
            self.creates.append(folder_id)
            folder = StoredFolder(folder_id=folder_id, name=name, parent_id=parent_id)
            self.folders[(parent_id, name)] = folder
            return folder


def test_concurrent_calls_create_each_folder_once():
    storage = SlowStorage()
    svc = RequestFolderService(storage=storage, flight=SingleFlight())

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: svc.ensure_request_folder(request_id=40, user_id=12), range(8)))

    assert sorted(storage.creates) == ["user-12", "user-12/request-40"]
    assert {r.folder_id for r in results} == {"user-12/request-40"}


def test_existing_folder_is_reused():
    storage = SlowStorage()
    svc = RequestFolderService(storage=storage, flight=SingleFlight())

    first = svc.ensure_user_folder(3)
    second = svc.ensure_user_folder(3)

    assert first == second
    assert storage.creates == ["user-3"]


def test_local_storage_layout(tmp_path):
    storage = LocalFolderStorage(config=LocalFolderStorageConfig(base_path=str(tmp_path)))
    svc = RequestFolderService(storage=storage, flight=SingleFlight())

    folder = svc.ensure_request_folder(request_id=7, user_id=2)

    assert folder.folder_id == "user-2/request-7"
    assert (tmp_path / "user-2" / "request-7").is_dir()


def test_local_storage_create_is_not_idempotent(tmp_path):
    storage = LocalFolderStorage(config=LocalFolderStorageConfig(base_path=str(tmp_path)))
    storage.create_folder(name="user-1", parent_id=None)

    with pytest.raises(ConflictError):
        storage.create_folder(name="user-1", parent_id=None)


def test_local_storage_rejects_path_traversal(tmp_path):
    storage = LocalFolderStorage(config=LocalFolderStorageConfig(base_path=str(tmp_path)))

    with pytest.raises(ValueError):
        storage.create_folder(name="x", parent_id="../../etc")
    with pytest.raises(ValueError):
        storage.create_folder(name="../escape", parent_id=None)


def test_request_creation_provisions_folder(session, world, tmp_path):
    storage = LocalFolderStorage(config=LocalFolderStorageConfig(base_path=str(tmp_path)))
    svc = build_request_service(session, folders=RequestFolderService(storage=storage, flight=SingleFlight()))

    req = svc.create(
        client_id=world.client_id,
        service_id=world.service_id,
        location_id=world.location_id,
        execution_date_time=future(),
    )

    assert (tmp_path / f"user-{world.client_id}" / f"request-{req.id}").is_dir()


class _BrokenStorage:
    def find_folder(self, *, name, parent_id):
        raise OSError("disk unavailable")

    def create_folder(self, *, name, parent_id):
        raise OSError("disk unavailable")


def test_folder_failure_does_not_fail_creation(session, world):
    svc = build_request_service(
        session, folders=RequestFolderService(storage=_BrokenStorage(), flight=SingleFlight())
    )

    req = svc.create(
        client_id=world.client_id,
        service_id=world.service_id,
        location_id=world.location_id,
        execution_date_time=future(),
    )

    assert req.id is not None
