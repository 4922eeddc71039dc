"""
Business Context Service

Derives strategic-value metadata for an alert:
- strategicImpact: impact scaled by a per-type multiplier, capped at 100
- resourceRequirement: the highest effort among the alert's recommendations
- timeToAction: hours available to act, shrinking as urgency rises
- competitorThreatLevel: per-type base level adjusted by ranking and search volume

Every branch has a default so no alert can make this service raise.
"""

from typing import Dict

from alert_engine.models.enums import AlertSeverity, AlertType, EffortLevel
from alert_engine.models.schemas import Alert, BusinessContext
from alert_engine.services.scoring import clamp


# =============================================================================
# Lookup Tables
# =============================================================================

STRATEGIC_IMPACT_MULTIPLIERS: Dict[AlertType, float] = {
    AlertType.THREAT_DETECTED: 1.3,
    AlertType.MARKET_MOVEMENT: 1.2,
    AlertType.OPPORTUNITY_IDENTIFIED: 1.1,
}

# Hours to act before the urgency adjustment
BASE_TIME_TO_ACTION: Dict[AlertSeverity, float] = {
    AlertSeverity.CRITICAL: 2.0,
    AlertSeverity.HIGH: 8.0,
    AlertSeverity.MEDIUM: 24.0,
    AlertSeverity.LOW: 72.0,
}
DEFAULT_TIME_TO_ACTION = 48.0

BASE_THREAT_LEVELS: Dict[AlertType, float] = {
    AlertType.THREAT_DETECTED: 90,
    AlertType.STRATEGY_SHIFT: 75,
    AlertType.RANKING_CHANGE: 70,
    AlertType.PERFORMANCE_IMPROVEMENT: 65,
    AlertType.BACKLINK_GAINED: 60,
    AlertType.CONTENT_PUBLISHED: 40,
    AlertType.OPPORTUNITY_IDENTIFIED: 30,
}
DEFAULT_THREAT_LEVEL = 50


def calculate_strategic_impact(alert: Alert) -> float:
    multiplier = STRATEGIC_IMPACT_MULTIPLIERS.get(alert.type, 1.0)
    return min(100.0, alert.metadata.impact * multiplier)


def assess_resource_requirement(alert: Alert) -> EffortLevel:
    """
    Aggregate recommendation effort into a single resource requirement.

    No recommendations means nothing to resource, so LOW.
    """
    efforts = {recommendation.effort for recommendation in alert.recommendations}
    if EffortLevel.HIGH in efforts:
        return EffortLevel.HIGH
    elif EffortLevel.MEDIUM in efforts:
        return EffortLevel.MEDIUM
    return EffortLevel.LOW


def calculate_time_to_action(alert: Alert) -> float:
    """
    Hours available before the alert should be acted upon.

    info severity has no entry in the base table and falls back to 48 hours.
    """
    base_hours = BASE_TIME_TO_ACTION.get(alert.severity, DEFAULT_TIME_TO_ACTION)
    return base_hours * (100 - alert.metadata.urgency) / 100


def calculate_competitor_threat_level(alert: Alert) -> float:
    """
    Threat posed by the competitor behind the alert.

    Starts from a per-type base level, then:
    - +20 if the competitor ranks in the top 3, else +10 if in the top 10
    - +15 if search volume exceeds 50,000, else +10 above 10,000, else +5 above 1,000

    Args:
        alert: The alert to assess

    Returns:
        Threat level clamped to [0, 100]
    """
    threat_level = BASE_THREAT_LEVELS.get(alert.type, DEFAULT_THREAT_LEVEL)
    signals = alert.metadata.data

    ranking = signals.competitorRanking
    if ranking is not None:
        if ranking <= 3:
            threat_level += 20
        elif ranking <= 10:
            threat_level += 10

    volume = signals.searchVolume
    if volume is not None:
        if volume > 50000:
            threat_level += 15
        elif volume > 10000:
            threat_level += 10
        elif volume > 1000:
            threat_level += 5

    return clamp(float(threat_level))


def calculate_business_context(alert: Alert) -> BusinessContext:
    """
    Calculate the business context of an alert.

    Args:
        alert: The alert to analyze

    Returns:
        BusinessContext with strategic impact, resource requirement,
        time to action and competitor threat level
    """
    return BusinessContext(
        strategicImpact=calculate_strategic_impact(alert),
        resourceRequirement=assess_resource_requirement(alert),
        timeToAction=calculate_time_to_action(alert),
        competitorThreatLevel=calculate_competitor_threat_level(alert),
    )


__all__ = [
    "calculate_business_context",
    "calculate_strategic_impact",
    "assess_resource_requirement",
    "calculate_time_to_action",
    "calculate_competitor_threat_level",
]
