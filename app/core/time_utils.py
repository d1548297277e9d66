# app/core/time_utils.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def as_utc(dt: datetime) -> datetime:
    # datetimes sem tz (ex.: lidos do sqlite) são tratados como UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
