# app/infrastructure/database/models/service_model.py

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.database.base_model import BaseModel, BigIntPK
from app.infrastructure.database.models.category_model import CategoryModel


class ServiceModel(BaseModel):
    __tablename__ = "services"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(150), nullable=False)

    # prefixo do custom_id das solicitações (ex.: "PLB" -> PLB-0001)
    code: Mapped[str | None] = mapped_column(String(20), nullable=True, unique=True)

    category_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("categories.id"), nullable=True
    )
    request_template: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    category: Mapped[CategoryModel | None] = relationship(lazy="joined")
