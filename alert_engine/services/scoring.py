"""
Priority Scoring Service

Computes the normalized [0, 100] priority score of an alert and maps it onto
the discrete priority ladder.

Score model:
    base     = severityScore * w.severity + impact * w.impact
               + urgency * w.urgency + confidence * w.confidence
    modifier = 1.0
               + 0.20  if the alert is under 1 hour old AND severity is critical
               - 0.10  if the alert is over 24 hours old
               + type bonus (threat-detected 0.15, ranking-change 0.10,
                             opportunity-identified 0.05, content-published 0.02)
               + 0.10  if action is required
    score    = clamp(base * modifier, 0, 100)

Both functions are pure: the only time dependency is the alert's age, which is
measured against an explicit ``now``.
"""

from datetime import datetime
from typing import Dict, Optional

from alert_engine.models.enums import AlertSeverity, AlertType, PriorityLevel
from alert_engine.models.schemas import (
    Alert,
    AlertEngineConfig,
    PriorityThresholds,
)
from alert_engine.utils.time_utils import hours_between, resolve_now


# =============================================================================
# Modifier Constants
# =============================================================================

RECENT_ALERT_HOURS = 1.0
STALE_ALERT_HOURS = 24.0

RECENT_CRITICAL_BOOST = 0.20
STALE_ALERT_PENALTY = 0.10
ACTION_REQUIRED_BOOST = 0.10

# Types not listed contribute no bonus
TYPE_MODIFIERS: Dict[AlertType, float] = {
    AlertType.THREAT_DETECTED: 0.15,
    AlertType.RANKING_CHANGE: 0.10,
    AlertType.OPPORTUNITY_IDENTIFIED: 0.05,
    AlertType.CONTENT_PUBLISHED: 0.02,
}

MIN_SCORE = 0.0
MAX_SCORE = 100.0


def clamp(value: float, lower: float = MIN_SCORE, upper: float = MAX_SCORE) -> float:
    """Clamp ``value`` into [lower, upper]."""
    return min(upper, max(lower, value))


def calculate_base_score(alert: Alert, config: AlertEngineConfig) -> float:
    """
    Weighted combination of severity, impact, urgency and confidence.

    Args:
        alert: The alert being scored
        config: Engine configuration providing weights and severity scores

    Returns:
        Unclamped weighted base score
    """
    weights = config.weights
    metadata = alert.metadata
    severity_score = config.severityScores.for_severity(alert.severity)

    return (
        severity_score * weights.severity
        + metadata.impact * weights.impact
        + metadata.urgency * weights.urgency
        + metadata.confidence * weights.confidence
    )


def calculate_modifier(alert: Alert, now: Optional[datetime] = None) -> float:
    """
    Business context multiplier applied to the base score.

    Args:
        alert: The alert being scored
        now: Reference time for the alert's age (defaults to current UTC time)

    Returns:
        Multiplier starting at 1.0
    """
    now = resolve_now(now)
    modifier = 1.0

    # Time sensitivity
    hours_since_alert = hours_between(now, alert.timestamp)
    if hours_since_alert < RECENT_ALERT_HOURS and alert.severity == AlertSeverity.CRITICAL:
        modifier += RECENT_CRITICAL_BOOST
    elif hours_since_alert > STALE_ALERT_HOURS:
        modifier -= STALE_ALERT_PENALTY

    modifier += TYPE_MODIFIERS.get(alert.type, 0.0)

    if alert.actionRequired:
        modifier += ACTION_REQUIRED_BOOST

    return modifier


def calculate_priority_score(
    alert: Alert,
    config: AlertEngineConfig,
    now: Optional[datetime] = None
) -> float:
    """
    Calculate the priority score of an alert.

    Args:
        alert: The alert to score
        config: Engine configuration
        now: Reference time for the alert's age (defaults to current UTC time)

    Returns:
        Priority score clamped to [0, 100]

    Example:
        A fresh critical threat-detected alert with impact 90, urgency 95,
        confidence 80 and action required scores base 94 with modifier 1.45,
        which clamps to 100.
    """
    base = calculate_base_score(alert, config)
    modifier = calculate_modifier(alert, now)
    return clamp(base * modifier)


def get_priority_level(score: float, thresholds: PriorityThresholds) -> PriorityLevel:
    """
    Map a priority score onto the priority ladder.

    Evaluated top-down. Scores below ``lowPriorityAlert`` are still LOW; there
    is no tier beneath it.

    Args:
        score: Priority score
        thresholds: Ladder cut points (strictly descending)

    Returns:
        PriorityLevel for the score
    """
    if score >= thresholds.criticalAlert:
        return PriorityLevel.CRITICAL
    elif score >= thresholds.highPriorityAlert:
        return PriorityLevel.HIGH
    elif score >= thresholds.mediumPriorityAlert:
        return PriorityLevel.MEDIUM
    return PriorityLevel.LOW


__all__ = [
    "calculate_priority_score",
    "calculate_base_score",
    "calculate_modifier",
    "get_priority_level",
    "clamp",
    "TYPE_MODIFIERS",
]
