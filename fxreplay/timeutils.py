"""UTC time helpers."""

from datetime import datetime, timedelta, timezone
from typing import Union


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_instant(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed) or datetime into UTC.

    Raises:
        ValueError: If the string is not a valid ISO-8601 timestamp.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(text))


def floor_to_interval(value: datetime, interval_minutes: int) -> datetime:
    """Round a UTC datetime down to the start of its interval bucket."""
    value = to_utc(value).replace(second=0, microsecond=0)
    minutes_into_day = value.hour * 60 + value.minute
    offset = minutes_into_day % interval_minutes if interval_minutes < 1440 else minutes_into_day
    return value - timedelta(minutes=offset)
