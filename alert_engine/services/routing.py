"""
Delivery Routing Service

Selects the notification channels an alert is delivered through, given its
priority level and the recipient's preferences.

Rules:
- dashboard: included whenever the recipient has it enabled
- email / slack: enabled AND level at or above the channel's minimum priority
- sms: only for critical or high alerts, and only when enabled and the
  channel's minimum priority is met

Channels are returned in the fixed order dashboard, email, slack, sms.
"""

from typing import List

from alert_engine.models.enums import DeliveryChannel, PriorityLevel
from alert_engine.models.schemas import DeliveryPreferences


SMS_ELIGIBLE_LEVELS = (PriorityLevel.CRITICAL, PriorityLevel.HIGH)


def should_deliver(alert_priority: PriorityLevel, minimum_priority: PriorityLevel) -> bool:
    """True if ``alert_priority`` is at or above ``minimum_priority``."""
    return PriorityLevel(alert_priority).ordinal >= PriorityLevel(minimum_priority).ordinal


def get_delivery_channels(
    priority_level: PriorityLevel,
    preferences: DeliveryPreferences
) -> List[DeliveryChannel]:
    """
    Determine delivery channels for an alert.

    Args:
        priority_level: The alert's priority level
        preferences: The recipient's delivery preferences

    Returns:
        Ordered list of channels (possibly empty)
    """
    channels_prefs = preferences.channels
    channels: List[DeliveryChannel] = []

    if channels_prefs.dashboard.enabled:
        channels.append(DeliveryChannel.DASHBOARD)

    if channels_prefs.email.enabled and should_deliver(
        priority_level, channels_prefs.email.minimumPriority
    ):
        channels.append(DeliveryChannel.EMAIL)

    if channels_prefs.slack.enabled and should_deliver(
        priority_level, channels_prefs.slack.minimumPriority
    ):
        channels.append(DeliveryChannel.SLACK)

    # SMS never goes out below high, whatever the configured minimum
    if (
        priority_level in SMS_ELIGIBLE_LEVELS
        and channels_prefs.sms.enabled
        and should_deliver(priority_level, channels_prefs.sms.minimumPriority)
    ):
        channels.append(DeliveryChannel.SMS)

    return channels


__all__ = [
    "get_delivery_channels",
    "should_deliver",
]
