"""
Enumeration definitions for the alert prioritization engine.

All enums inherit from both `str` and `Enum` so they serialize as their plain
string values inside Pydantic models and compare equal to the raw strings an
upstream collector sends (e.g. ``AlertType.THREAT_DETECTED == "threat-detected"``).

Vocabularies:
- AlertType, AlertSeverity, AlertStatus: what the collector reports
- PriorityLevel: the engine's discrete priority tier
- DeliveryChannel, DigestFrequency: delivery preferences and routing output
- EffortLevel: recommendation effort / resource requirement
- RecommendationPriority: recommendation time horizon
- ClusterCategory: category of a batched alert cluster
"""

from enum import Enum


class AlertType(str, Enum):
    """
    Kind of competitive event an alert describes.

    Drives the type modifier in priority scoring, the strategic impact
    multiplier, the base competitor threat level, and the cluster category.
    """
    THREAT_DETECTED = "threat-detected"
    RANKING_CHANGE = "ranking-change"
    BACKLINK_GAINED = "backlink-gained"
    STRATEGY_SHIFT = "strategy-shift"
    PERFORMANCE_IMPROVEMENT = "performance-improvement"
    CONTENT_PUBLISHED = "content-published"
    OPPORTUNITY_IDENTIFIED = "opportunity-identified"
    MARKET_MOVEMENT = "market-movement"


class AlertSeverity(str, Enum):
    """
    Source-assigned coarse urgency tag.

    Distinct from the computed PriorityLevel: severity is an input to the
    score, priority level is derived from it.
    """
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class AlertStatus(str, Enum):
    """Workflow status of an alert as tracked by the surrounding product."""
    NEW = "new"
    ACKNOWLEDGED = "acknowledged"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class PriorityLevel(str, Enum):
    """
    Discrete priority tier derived from the priority score.

    There is no tier below LOW: scores under the low threshold are still LOW.
    """
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def ordinal(self) -> int:
        """Rank used for minimum-priority comparisons (critical=4 ... low=1)."""
        return PRIORITY_ORDINALS[self]


PRIORITY_ORDINALS = {
    PriorityLevel.CRITICAL: 4,
    PriorityLevel.HIGH: 3,
    PriorityLevel.MEDIUM: 2,
    PriorityLevel.LOW: 1,
}


class DeliveryChannel(str, Enum):
    """Notification transports an alert can be routed to."""
    DASHBOARD = "dashboard"
    EMAIL = "email"
    SLACK = "slack"
    SMS = "sms"


class DigestFrequency(str, Enum):
    """Email digest cadence chosen by the recipient."""
    IMMEDIATE = "immediate"
    HOURLY = "hourly"
    DAILY = "daily"


class EffortLevel(str, Enum):
    """Effort of a recommendation, and the aggregated resource requirement."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RecommendationPriority(str, Enum):
    """Time horizon attached to a recommendation by the collector."""
    IMMEDIATE = "immediate"
    SHORT_TERM = "short-term"
    MEDIUM_TERM = "medium-term"
    LONG_TERM = "long-term"


class ClusterCategory(str, Enum):
    """
    Category of an alert cluster, inferred from its member types.

    - content: all members are content-published
    - seo: all members are ranking-change, or all are backlink-gained
    - performance: all members are performance-improvement
    - market: all members are market-movement, or all are threat-detected
    - mixed: members of different types, or a type without a bucket
    """
    CONTENT = "content"
    SEO = "seo"
    PERFORMANCE = "performance"
    MARKET = "market"
    MIXED = "mixed"
