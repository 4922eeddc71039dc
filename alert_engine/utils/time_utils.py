"""
Time helpers shared by the scoring and scheduling services.

All timestamps inside the engine are timezone-aware. Naive datetimes handed in
by a caller are interpreted as UTC.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utc_now() -> datetime:
    """Current time as a tz-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to tz-aware UTC.

    Naive values are assumed to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """Return ``now`` normalized to UTC, or the current time when omitted."""
    return ensure_utc(now) if now is not None else utc_now()


def get_zone(name: str) -> ZoneInfo:
    """
    Look up an IANA timezone.

    Raises:
        ValueError: If the zone name is unknown or malformed.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ValueError(f"Unknown timezone: {name!r}") from e


def parse_hhmm(value: str) -> Tuple[int, int]:
    """Split an ``HH:MM`` string into (hours, minutes)."""
    hours, minutes = value.split(":")
    return int(hours), int(minutes)


def minutes_since_midnight(value: str) -> int:
    """Convert ``HH:MM`` to minutes since midnight (``"07:30"`` -> 450)."""
    hours, minutes = parse_hhmm(value)
    return hours * 60 + minutes


def hours_between(later: datetime, earlier: datetime) -> float:
    """Signed number of hours from ``earlier`` to ``later``."""
    return (ensure_utc(later) - ensure_utc(earlier)).total_seconds() / 3600.0
