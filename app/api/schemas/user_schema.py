# app/api/schemas/user_schema.py
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_serializer

from app.api.schemas._datetime_serializer import serialize_dt
from app.core.roles import UserRole


class CreateUserRequest(BaseModel):
    full_name: str = Field(min_length=3, max_length=100)
    email: EmailStr
    role: UserRole = UserRole.CLIENT


class UserResponse(BaseModel):
    id: int
    full_name: str
    email: EmailStr
    role: UserRole
    created_at: datetime | None = None

    @field_serializer("created_at")
    def serialize_dates(self, value: datetime | None):
        return serialize_dt(value)


class UsersListResponse(BaseModel):
    items: list[UserResponse]
    total: int
    limit: int
    offset: int
