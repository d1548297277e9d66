# app/infrastructure/database/models/request_model.py

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.database.base_model import BaseModel, BigIntPK
from app.infrastructure.database.models.service_model import ServiceModel
from app.infrastructure.database.models.user_model import UserModel
from app.infrastructure.database.models.work_location_model import WorkLocationModel


class RequestModel(BaseModel):
    __tablename__ = "requests"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    # legível para humanos (ex.: PLB-0007); só existe quando o serviço tem code
    custom_id: Mapped[str | None] = mapped_column(String(40), nullable=True, unique=True)

    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=False, index=True
    )
    service_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("services.id"), nullable=False
    )
    location_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("work_locations.id"), nullable=False
    )
    assigned_to_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id"), nullable=True, index=True
    )

    # PENDING | ONGOING | COMPLETED | CANCELLED
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    execution_date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    cancellation_requested: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cancellation_requested_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    template_responses: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    note: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    created_by: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)
    updated_by: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped[UserModel] = relationship(foreign_keys=[user_id], lazy="selectin")
    service: Mapped[ServiceModel] = relationship(lazy="selectin")
    location: Mapped[WorkLocationModel] = relationship(lazy="selectin")
    assigned_to: Mapped[UserModel | None] = relationship(foreign_keys=[assigned_to_id], lazy="selectin")
