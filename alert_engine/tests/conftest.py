"""
Pytest Configuration and Shared Fixtures for the Alert Engine Tests.

This module provides fixtures and factories for all engine tests:
- A fixed reference instant (NOW) so every time-dependent result is deterministic
- Alert factories producing raw dicts and validated Alert models
- Delivery preference fixtures (defaults, all channels, quiet hours)
- A default-configured engine

Dependencies:
- pytest
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator, List, Optional

import pytest

from alert_engine.core.config import get_settings
from alert_engine.models import (
    Alert,
    AlertEngineConfig,
    BusinessContext,
    DeliveryChannel,
    DeliveryPreferences,
    EffortLevel,
    PrioritizedAlert,
    PriorityLevel,
)
from alert_engine.services.engine import AlertPrioritizationEngine


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Configure custom pytest markers for test organization.

    Custom markers defined:
    - slow: Marks tests as slow (deselect with -m "not slow")
    - parity: Marks tests pinning behavior of the reference alerting product

    Args:
        config: Pytest configuration object
    """
    config.addinivalue_line(
        'markers',
        'slow: marks tests as slow (deselect with -m "not slow")'
    )
    config.addinivalue_line(
        'markers',
        'parity: marks tests pinning behavior of the reference alerting product'
    )


# ============================================================
# TIME CONSTANTS
# ============================================================

# Wednesday noon UTC, outside the default 22:00-07:00 quiet window
NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)


# ============================================================
# FACTORIES
# ============================================================

def make_alert_data(
    alert_id: str = "alert-1",
    alert_type: str = "content-published",
    severity: str = "medium",
    timestamp: Optional[datetime] = None,
    competitor_id: str = "competitor-a",
    impact: float = 50,
    urgency: float = 50,
    confidence: float = 50,
    action_required: bool = False,
    related_entities: Optional[List[str]] = None,
    data: Optional[Dict[str, Any]] = None,
    efforts: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Build a raw alert payload as the collector would send it.

    Defaults to a medium content-published alert stamped 10 minutes before NOW.
    """
    return {
        "id": alert_id,
        "type": alert_type,
        "severity": severity,
        "timestamp": (timestamp or NOW - timedelta(minutes=10)).isoformat(),
        "competitorId": competitor_id,
        "actionRequired": action_required,
        "metadata": {
            "impact": impact,
            "urgency": urgency,
            "confidence": confidence,
            "relatedEntities": related_entities or [],
            "data": data or {},
        },
        "recommendations": [{"effort": effort} for effort in (efforts or [])],
    }


def make_alert(**kwargs: Any) -> Alert:
    """Build a validated Alert; accepts the same arguments as make_alert_data."""
    return Alert.model_validate(make_alert_data(**kwargs))


def make_prioritized(
    alert_id: str = "alert-1",
    score: float = 60.0,
    level: PriorityLevel = PriorityLevel.MEDIUM,
    channels: Optional[List[DeliveryChannel]] = None,
    scheduled: Optional[datetime] = None,
    **kwargs: Any,
) -> PrioritizedAlert:
    """
    Build a PrioritizedAlert directly, bypassing scoring.

    Useful for clustering and digest tests that need exact scores.
    """
    alert = make_alert(alert_id=alert_id, **kwargs)
    return PrioritizedAlert(
        **alert.model_dump(),
        priorityScore=score,
        priorityLevel=level,
        deliveryChannel=channels if channels is not None else [DeliveryChannel.DASHBOARD],
        scheduledDelivery=scheduled or NOW,
        businessContext=BusinessContext(
            strategicImpact=50,
            resourceRequirement=EffortLevel.LOW,
            timeToAction=12,
            competitorThreatLevel=50,
        ),
    )


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def now() -> datetime:
    """The fixed reference instant used across the suite."""
    return NOW


@pytest.fixture
def config() -> AlertEngineConfig:
    """Default engine configuration."""
    return AlertEngineConfig()


@pytest.fixture
def engine() -> AlertPrioritizationEngine:
    """Engine with the default configuration."""
    return AlertPrioritizationEngine()


@pytest.fixture
def default_preferences() -> DeliveryPreferences:
    """Dashboard only, no quiet hours."""
    return DeliveryPreferences(userId="user-1")


@pytest.fixture
def all_channel_preferences() -> DeliveryPreferences:
    """
    Every channel enabled with the lowest minimum each channel accepts.

    Email and slack accept low, sms accepts high.
    """
    return DeliveryPreferences(
        userId="user-1",
        channels={
            "dashboard": {"enabled": True},
            "email": {"enabled": True, "address": "ops@example.com", "minimumPriority": "low"},
            "slack": {"enabled": True, "channel": "#intel", "minimumPriority": "low"},
            "sms": {"enabled": True, "phoneNumber": "+15550100", "minimumPriority": "high"},
        },
    )


@pytest.fixture
def quiet_preferences() -> DeliveryPreferences:
    """Dashboard and email, quiet hours 22:00-07:00 UTC."""
    return DeliveryPreferences(
        userId="user-1",
        channels={"email": {"enabled": True, "minimumPriority": "low"}},
        quietHours={"enabled": True, "start": "22:00", "end": "07:00", "timezone": "UTC"},
    )


@pytest.fixture
def critical_alert_data() -> Dict[str, Any]:
    """Fresh critical threat with action required (scores 100)."""
    return make_alert_data(
        alert_id="alert-critical",
        alert_type="threat-detected",
        severity="critical",
        timestamp=NOW - timedelta(minutes=5),
        impact=90,
        urgency=95,
        confidence=80,
        action_required=True,
    )


@pytest.fixture
def clean_settings_cache() -> Generator[None, None, None]:
    """Clear the cached settings before and after a test that touches the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
