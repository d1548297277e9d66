# app/api/schemas/notification_schema.py

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_serializer

from app.api.schemas._datetime_serializer import serialize_dt


class NotificationResponse(BaseModel):
    id: int
    type: str
    message: str
    data: Optional[dict[str, Any]] = None
    link: Optional[str] = None
    read_at: Optional[datetime] = None
    created_at: datetime

    @field_serializer("read_at", "created_at")
    def serialize_dates(self, value: datetime | None):
        return serialize_dt(value)


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    unread_count: int
    limit: int
    offset: int
