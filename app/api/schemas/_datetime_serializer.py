# app/api/schemas/_datetime_serializer.py
from datetime import datetime

from app.core.time_utils import as_utc


def serialize_dt(dt: datetime | None) -> str | None:
    # sempre ISO-8601 em UTC (SQLite devolve naive)
    if dt is None:
        return None
    return as_utc(dt).isoformat()
