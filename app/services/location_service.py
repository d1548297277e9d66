# app/services/location_service.py

from app.infrastructure.database.models.work_location_model import WorkLocationModel
from app.repositories.location_repository import LocationRepository


class LocationService:
    def __init__(self, repo: LocationRepository) -> None:
        self._repo = repo

    def list_mine(self, *, user_id: int) -> list[WorkLocationModel]:
        return self._repo.list_by_user(user_id)

    def create(self, *, user_id: int, **fields) -> WorkLocationModel:
        return self._repo.add(WorkLocationModel(user_id=user_id, **fields))
