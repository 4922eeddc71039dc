"""
Alert Engine Services Module

This module contains the decision logic of the alert prioritization engine.
Every service is a set of pure functions over validated models; the engine
class composes them and owns the configuration.

Services:
- scoring: Weighted priority score and priority ladder mapping
- business_context: Strategic impact, effort, time to action, threat level
- routing: Delivery channel selection per recipient preferences
- scheduling: Quiet hours and digest-aware delivery scheduling
- clustering: Seed-anchored grouping of related alerts
- ingestion: Boundary validation of raw alert payloads
- engine: AlertPrioritizationEngine orchestrating all of the above
"""

# =============================================================================
# Scoring Service Exports
# =============================================================================

from alert_engine.services.scoring import (
    calculate_priority_score,
    calculate_base_score,
    calculate_modifier,
    get_priority_level,
    clamp,
    TYPE_MODIFIERS,
)

# =============================================================================
# Business Context Service Exports
# =============================================================================

from alert_engine.services.business_context import (
    calculate_business_context,
    calculate_strategic_impact,
    assess_resource_requirement,
    calculate_time_to_action,
    calculate_competitor_threat_level,
)

# =============================================================================
# Routing and Scheduling Service Exports
# =============================================================================

from alert_engine.services.routing import (
    get_delivery_channels,
    should_deliver,
)

from alert_engine.services.scheduling import (
    schedule_delivery,
    is_in_quiet_hours,
    next_quiet_hours_end,
    next_digest_slot,
    DEFAULT_DIGEST_HOUR,
)

# =============================================================================
# Clustering Service Exports
# =============================================================================

from alert_engine.services.clustering import (
    cluster_alerts,
    partition_alerts,
    are_alerts_related,
    determine_cluster_category,
    calculate_aggregated_priority,
    generate_cluster_summary,
    generate_cluster_action,
    create_alert_cluster,
    DEFAULT_WINDOW_HOURS,
)

# =============================================================================
# Ingestion Service Exports
# =============================================================================

from alert_engine.services.ingestion import (
    ingest_alerts,
    parse_alert,
    format_validation_errors,
)

# =============================================================================
# Engine Exports
# =============================================================================

from alert_engine.services.engine import (
    AlertPrioritizationEngine,
    build_config,
)


__all__ = [
    # Scoring
    "calculate_priority_score",
    "calculate_base_score",
    "calculate_modifier",
    "get_priority_level",
    "clamp",
    "TYPE_MODIFIERS",
    # Business context
    "calculate_business_context",
    "calculate_strategic_impact",
    "assess_resource_requirement",
    "calculate_time_to_action",
    "calculate_competitor_threat_level",
    # Routing
    "get_delivery_channels",
    "should_deliver",
    # Scheduling
    "schedule_delivery",
    "is_in_quiet_hours",
    "next_quiet_hours_end",
    "next_digest_slot",
    "DEFAULT_DIGEST_HOUR",
    # Clustering
    "cluster_alerts",
    "partition_alerts",
    "are_alerts_related",
    "determine_cluster_category",
    "calculate_aggregated_priority",
    "generate_cluster_summary",
    "generate_cluster_action",
    "create_alert_cluster",
    "DEFAULT_WINDOW_HOURS",
    # Ingestion
    "ingest_alerts",
    "parse_alert",
    "format_validation_errors",
    # Engine
    "AlertPrioritizationEngine",
    "build_config",
]
