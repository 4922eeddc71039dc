"""
Delivery Scheduling Service

Decides when a prioritized alert is delivered:

1. critical alerts go out now, even inside quiet hours
2. inside the recipient's quiet hours, high alerts go out now and everything
   else waits for the next end of the quiet window
3. alerts routed to email for a recipient on an hourly/daily digest are
   aligned to the next digest slot
4. everything else goes out now

Quiet hours and digest slots are evaluated as wall-clock times in the
recipient's timezone (``quietHours.timezone``). Quiet windows whose start is
later than their end wrap past midnight (22:00-07:00 covers 23:30 and 02:00
but not 12:00). A window whose start equals its end is empty.

Returned timestamps are tz-aware UTC and never earlier than the alert's own
timestamp.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from alert_engine.models.enums import DeliveryChannel, DigestFrequency, PriorityLevel
from alert_engine.models.schemas import DeliveryPreferences, PrioritizedAlert, QuietHours
from alert_engine.utils.time_utils import (
    get_zone,
    minutes_since_midnight,
    parse_hhmm,
    resolve_now,
)


logger = logging.getLogger(__name__)

DEFAULT_DIGEST_HOUR = 9


def is_in_quiet_hours(moment: datetime, quiet_hours: QuietHours) -> bool:
    """
    Check whether ``moment`` falls inside the quiet window.

    The window includes its start minute and excludes its end minute.

    Args:
        moment: The instant to test (naive values are read as UTC)
        quiet_hours: The recipient's quiet hours

    Returns:
        True if quiet hours are enabled and the local time is inside the window
    """
    if not quiet_hours.enabled:
        return False

    local = resolve_now(moment).astimezone(get_zone(quiet_hours.timezone))
    current = local.hour * 60 + local.minute
    start = minutes_since_midnight(quiet_hours.start)
    end = minutes_since_midnight(quiet_hours.end)

    if start == end:
        return False
    if start < end:
        return start <= current < end
    # Window crosses midnight
    return current >= start or current < end


def next_quiet_hours_end(moment: datetime, quiet_hours: QuietHours) -> datetime:
    """
    Next occurrence of the quiet window's end strictly after ``moment``.

    At 23:00 inside 22:00-07:00 this is 07:00 the next day; at 02:00 it is
    07:00 the same day.
    """
    zone = get_zone(quiet_hours.timezone)
    local = resolve_now(moment).astimezone(zone)
    hours, minutes = parse_hhmm(quiet_hours.end)

    candidate = local.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    if candidate <= local:
        candidate += timedelta(days=1)
    return candidate.astimezone(timezone.utc)


def next_digest_slot(
    moment: datetime,
    frequency: DigestFrequency,
    timezone_name: str = "UTC",
    digest_hour: int = DEFAULT_DIGEST_HOUR
) -> datetime:
    """
    Align ``moment`` to the recipient's next email digest slot.

    Args:
        moment: Reference instant
        frequency: hourly -> top of the next hour; daily -> ``digest_hour``:00
            on the next day; immediate -> ``moment`` unchanged
        timezone_name: Recipient timezone the slot is computed in
        digest_hour: Local hour of the daily slot

    Returns:
        Slot time as tz-aware UTC
    """
    moment = resolve_now(moment)
    local = moment.astimezone(get_zone(timezone_name))

    if frequency == DigestFrequency.HOURLY:
        slot = local.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
    elif frequency == DigestFrequency.DAILY:
        slot = (local + timedelta(days=1)).replace(
            hour=digest_hour, minute=0, second=0, microsecond=0
        )
    else:
        return moment

    return slot.astimezone(timezone.utc)


def schedule_delivery(
    alert: PrioritizedAlert,
    preferences: DeliveryPreferences,
    now: Optional[datetime] = None,
    digest_hour: int = DEFAULT_DIGEST_HOUR
) -> datetime:
    """
    Schedule delivery of a prioritized alert.

    Args:
        alert: The prioritized alert (its level and channels drive the decision)
        preferences: The recipient's delivery preferences
        now: Reference instant (defaults to current UTC time)
        digest_hour: Local hour of the daily email digest

    Returns:
        Delivery time as tz-aware UTC, never earlier than ``alert.timestamp``
    """
    now = resolve_now(now)
    quiet_hours = preferences.quietHours
    email = preferences.channels.email

    if alert.priorityLevel == PriorityLevel.CRITICAL:
        scheduled = now
        reason = "critical"
    elif is_in_quiet_hours(now, quiet_hours):
        if alert.priorityLevel == PriorityLevel.HIGH:
            scheduled = now
            reason = "high priority during quiet hours"
        else:
            scheduled = next_quiet_hours_end(now, quiet_hours)
            reason = "deferred past quiet hours"
    elif DeliveryChannel.EMAIL in alert.deliveryChannel and email.frequency != DigestFrequency.IMMEDIATE:
        scheduled = next_digest_slot(now, email.frequency, quiet_hours.timezone, digest_hour)
        reason = f"{email.frequency.value} email digest"
    else:
        scheduled = now
        reason = "immediate"

    # An alert stamped slightly in the future is never delivered before it happened
    scheduled = max(scheduled, alert.timestamp)

    logger.debug(f"Scheduled alert {alert.id} for {scheduled.isoformat()} ({reason})")
    return scheduled


__all__ = [
    "schedule_delivery",
    "is_in_quiet_hours",
    "next_quiet_hours_end",
    "next_digest_slot",
    "DEFAULT_DIGEST_HOUR",
]
