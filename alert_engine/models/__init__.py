"""
Package initialization file for engine models.

Exports all Pydantic schemas and enumerations from schemas.py and enums.py so
other modules can import data models without knowing the internal layout.

Usage:
    from alert_engine.models import (
        Alert,
        AlertType,
        DeliveryPreferences,
        PrioritizedAlert,
        # ... etc
    )
"""

# =============================================================================
# Enums
# =============================================================================

from alert_engine.models.enums import (
    AlertSeverity,
    AlertStatus,
    AlertType,
    ClusterCategory,
    DeliveryChannel,
    DigestFrequency,
    EffortLevel,
    PRIORITY_ORDINALS,
    PriorityLevel,
    RecommendationPriority,
)


# =============================================================================
# Schemas
# =============================================================================

from alert_engine.models.schemas import (
    # -------------------------------------------------------------------------
    # Engine configuration
    # -------------------------------------------------------------------------
    AlertEngineConfig,
    BusinessHours,
    PriorityThresholds,
    PriorityWeights,
    SeverityScores,

    # -------------------------------------------------------------------------
    # Alert input
    # -------------------------------------------------------------------------
    Alert,
    AlertMetadata,
    AlertSignals,
    Recommendation,

    # -------------------------------------------------------------------------
    # Engine output
    # -------------------------------------------------------------------------
    AlertCluster,
    BusinessContext,
    ClusteringResult,
    PrioritizedAlert,
    TimeWindow,

    # -------------------------------------------------------------------------
    # Delivery preferences
    # -------------------------------------------------------------------------
    ChannelPreferences,
    DashboardPreferences,
    DeliveryPreferences,
    EmailPreferences,
    KeywordPreferences,
    QuietHours,
    SlackPreferences,
    SmsPreferences,

    # -------------------------------------------------------------------------
    # Ingestion
    # -------------------------------------------------------------------------
    AlertDiagnostic,
    IngestionResult,
)


__all__ = [
    # Enums
    "AlertSeverity",
    "AlertStatus",
    "AlertType",
    "ClusterCategory",
    "DeliveryChannel",
    "DigestFrequency",
    "EffortLevel",
    "PRIORITY_ORDINALS",
    "PriorityLevel",
    "RecommendationPriority",
    # Configuration
    "AlertEngineConfig",
    "BusinessHours",
    "PriorityThresholds",
    "PriorityWeights",
    "SeverityScores",
    # Alert input
    "Alert",
    "AlertMetadata",
    "AlertSignals",
    "Recommendation",
    # Engine output
    "AlertCluster",
    "BusinessContext",
    "ClusteringResult",
    "PrioritizedAlert",
    "TimeWindow",
    # Preferences
    "ChannelPreferences",
    "DashboardPreferences",
    "DeliveryPreferences",
    "EmailPreferences",
    "KeywordPreferences",
    "QuietHours",
    "SlackPreferences",
    "SmsPreferences",
    # Ingestion
    "AlertDiagnostic",
    "IngestionResult",
]
