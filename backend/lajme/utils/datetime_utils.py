from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_today_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Return the naive UTC [start, end) bounds of the day containing ``now``."""
    current = to_naive_utc(now) if now is not None else utc_now_naive()
    start = current.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)
