# app/api/schemas/request_schema.py

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_serializer

from app.api.schemas._datetime_serializer import serialize_dt
from app.core.status_transition import RequestStatus

NON_NULLABLE_PATCH_FIELDS = frozenset({"location_id", "execution_date_time", "status"})


class UserMiniResponse(BaseModel):
    id: int
    full_name: str


class ServiceMiniResponse(BaseModel):
    id: int
    name: str
    code: Optional[str] = None


class LocationMiniResponse(BaseModel):
    id: int
    street: str
    city: str
    state: str


# -------- Input --------
class CreateRequestInput(BaseModel):
    service_id: int = Field(gt=0)
    location_id: int = Field(gt=0)
    execution_date_time: datetime
    template_responses: Optional[dict[str, Any]] = None
    note: Optional[dict[str, Any]] = None


class UpdateRequestInput(BaseModel):
    """Todos opcionais; só as chaves enviadas no JSON entram no patch (`model_fields_set`)."""

    location_id: Optional[int] = Field(default=None, gt=0)
    execution_date_time: Optional[datetime] = None
    template_responses: Optional[dict[str, Any]] = None
    note: Optional[dict[str, Any]] = None
    status: Optional[RequestStatus] = None
    assigned_to_id: Optional[int] = None

    def patch_values(self) -> dict[str, Any]:
        # null em campo obrigatório = chave ausente do patch
        return {
            k: getattr(self, k)
            for k in self.model_fields_set
            if getattr(self, k) is not None or k not in NON_NULLABLE_PATCH_FIELDS
        }


class AssignRequestInput(BaseModel):
    assigned_to_id: int = Field(gt=0)


class CancelRequestInput(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=1000)


class CompleteRequestInput(BaseModel):
    notes: Optional[str] = Field(default=None, max_length=4000)


# -------- Output --------
class RequestResponse(BaseModel):
    id: int
    custom_id: Optional[str] = None

    user_id: int
    service_id: int
    location_id: int
    assigned_to_id: Optional[int] = None

    user: Optional[UserMiniResponse] = None
    service: Optional[ServiceMiniResponse] = None
    location: Optional[LocationMiniResponse] = None
    assigned_to: Optional[UserMiniResponse] = None

    status: RequestStatus
    execution_date_time: datetime
    completed_at: Optional[datetime] = None

    cancellation_requested: bool
    cancellation_requested_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None

    template_responses: Optional[dict[str, Any]] = None
    note: Optional[dict[str, Any]] = None

    created_by: int
    updated_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_serializer(
        "execution_date_time",
        "completed_at",
        "cancellation_requested_at",
        "created_at",
        "updated_at",
    )
    def serialize_dates(self, value: datetime | None):
        return serialize_dt(value)

    @classmethod
    def from_model(cls, req) -> "RequestResponse":
        return cls(
            id=req.id,
            custom_id=req.custom_id,
            user_id=req.user_id,
            service_id=req.service_id,
            location_id=req.location_id,
            assigned_to_id=req.assigned_to_id,
            user=UserMiniResponse(id=req.user.id, full_name=req.user.full_name) if req.user else None,
            service=(
                ServiceMiniResponse(id=req.service.id, name=req.service.name, code=req.service.code)
                if req.service
                else None
            ),
            location=(
                LocationMiniResponse(
                    id=req.location.id,
                    street=req.location.street,
                    city=req.location.city,
                    state=req.location.state,
                )
                if req.location
                else None
            ),
            assigned_to=(
                UserMiniResponse(id=req.assigned_to.id, full_name=req.assigned_to.full_name)
                if req.assigned_to
                else None
            ),
            status=req.status,
            execution_date_time=req.execution_date_time,
            completed_at=req.completed_at,
            cancellation_requested=bool(req.cancellation_requested),
            cancellation_requested_at=req.cancellation_requested_at,
            cancellation_reason=req.cancellation_reason,
            template_responses=req.template_responses,
            note=req.note,
            created_by=req.created_by,
            updated_by=req.updated_by,
            created_at=req.created_at,
            updated_at=req.updated_at,
        )


class RequestListResponse(BaseModel):
    items: List[RequestResponse]
    total: int
    limit: int
    offset: int


class RequestCountResponse(BaseModel):
    count: int
    by_status: dict[str, int] = Field(default_factory=dict)
