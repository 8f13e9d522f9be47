from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo


def local_now() -> datetime:
    return datetime.now()


def to_local_naive(value: datetime, tz_name: Optional[str] = None) -> datetime:
    """Convert an aware datetime to naive local wall-clock time.

    Naive values are already local and pass through untouched. ``tz_name``
    selects the wall clock (falls back to the system zone when unset).
    """
    if value.tzinfo is None:
        return value
    target = ZoneInfo(tz_name) if tz_name else None
    return value.astimezone(target).replace(tzinfo=None)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    # [00:00:00.000, 23:59:59.999], inclusive both ends
    start = datetime.combine(day, time.min)
    end = datetime.combine(day, time(23, 59, 59, 999000))
    return start, end


def parse_day(value: str) -> date:
    """Parse ``YYYY-MM-DD`` (a full ISO timestamp is accepted, its date is used)."""
    return datetime.fromisoformat(value.strip()).date()


def to_storage_precision(value: datetime) -> datetime:
    # BSON datetimes keep milliseconds only
    return value.replace(microsecond=value.microsecond // 1000 * 1000)
