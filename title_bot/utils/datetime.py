from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import InvalidTimezone


UTC = timezone.utc


def now_utc() -> datetime:
    return datetime.now(tz=UTC)


def resolve_timezone(tz_name: str) -> ZoneInfo:
    name = tz_name.strip()
    if not name:
        raise InvalidTimezone(tz_name)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidTimezone(tz_name) from exc


def to_local(dt: datetime, tz_name: str) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(resolve_timezone(tz_name))
