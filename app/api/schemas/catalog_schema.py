# app/api/schemas/catalog_schema.py

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_serializer

from app.api.schemas._datetime_serializer import serialize_dt


class CreateServiceInput(BaseModel):
    name: str = Field(min_length=2, max_length=150)
    code: Optional[str] = Field(default=None, min_length=2, max_length=20, pattern=r"^[A-Za-z0-9]+$")
    category_id: Optional[int] = Field(default=None, gt=0)
    request_template: Optional[dict[str, Any]] = None


class CategoryMiniResponse(BaseModel):
    id: int
    name: str


class ServiceResponse(BaseModel):
    id: int
    name: str
    code: Optional[str] = None
    category: Optional[CategoryMiniResponse] = None
    request_template: Optional[dict[str, Any]] = None
    created_at: datetime

    @field_serializer("created_at")
    def serialize_dates(self, value: datetime | None):
        return serialize_dt(value)


class CreateLocationInput(BaseModel):
    street: str = Field(min_length=2, max_length=200)
    city: str = Field(min_length=2, max_length=100)
    state: str = Field(min_length=2, max_length=100)
    zip: Optional[str] = Field(default=None, max_length=20)
    building: Optional[str] = Field(default=None, max_length=100)
    tower: Optional[str] = Field(default=None, max_length=50)
    floor: Optional[str] = Field(default=None, max_length=20)
    unit: Optional[str] = Field(default=None, max_length=20)


class LocationResponse(BaseModel):
    id: int
    user_id: int
    street: str
    city: str
    state: str
    zip: Optional[str] = None
    building: Optional[str] = None
    tower: Optional[str] = None
    floor: Optional[str] = None
    unit: Optional[str] = None
