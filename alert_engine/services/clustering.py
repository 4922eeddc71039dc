"""
Alert Clustering Service

Groups prioritized alerts into clusters of related alerts for batched
notification.

Relatedness:
    Two alerts are related when their timestamps are at most ``window_hours``
    apart AND they share a competitor, share a type, or share at least one
    related entity.

Grouping is seed-anchored, not a transitive closure:
    Alerts are visited in input order. Each unprocessed alert becomes a seed;
    every unprocessed alert related to the seed (the seed included) forms its
    group. Groups of two or more become clusters and all members are marked
    processed. A seed with no partner is marked processed and ends up in the
    un-clustered remainder. Every input alert therefore lands in exactly one
    cluster or in the remainder.

Candidate lookup uses a timestamp-sorted index so only alerts inside the
seed's window are tested; the resulting groups are identical to a pairwise
scan of the whole batch.
"""

import logging
import math
from bisect import bisect_left, bisect_right
from datetime import datetime, timedelta
from typing import List, Sequence, Set
from uuid import uuid4

import numpy as np

from alert_engine.models.enums import AlertType, ClusterCategory, PriorityLevel
from alert_engine.models.schemas import (
    AlertCluster,
    ClusteringResult,
    PrioritizedAlert,
    TimeWindow,
)
from alert_engine.services.scoring import clamp


logger = logging.getLogger(__name__)

DEFAULT_WINDOW_HOURS = 1.0
MIN_CLUSTER_SIZE = 2

CATEGORY_BY_TYPE = {
    AlertType.CONTENT_PUBLISHED: ClusterCategory.CONTENT,
    AlertType.RANKING_CHANGE: ClusterCategory.SEO,
    AlertType.BACKLINK_GAINED: ClusterCategory.SEO,
    AlertType.PERFORMANCE_IMPROVEMENT: ClusterCategory.PERFORMANCE,
    AlertType.MARKET_MOVEMENT: ClusterCategory.MARKET,
    AlertType.THREAT_DETECTED: ClusterCategory.MARKET,
}

ESCALATED_ACTIONS = {
    ClusterCategory.CONTENT: "Review competitor content strategy and identify content gaps",
    ClusterCategory.SEO: "Analyze SEO changes and update your optimization strategy",
    ClusterCategory.PERFORMANCE: "Benchmark performance improvements and implement similar optimizations",
    ClusterCategory.MARKET: "Assess market impact and adjust strategic positioning",
    ClusterCategory.MIXED: "Review all alerts and prioritize strategic response",
}
MONITOR_ACTION = "Monitor developments and assess for potential strategic implications"


# =============================================================================
# Relatedness
# =============================================================================

def are_alerts_related(
    first: PrioritizedAlert,
    second: PrioritizedAlert,
    window_hours: float = DEFAULT_WINDOW_HOURS
) -> bool:
    """
    Check if two alerts should be clustered together.

    Args:
        first: An alert
        second: Another alert
        window_hours: Maximum time distance in hours (inclusive)

    Returns:
        True if within the window and sharing a competitor, type or entity
    """
    time_diff = abs(first.timestamp - second.timestamp)
    if time_diff.total_seconds() > window_hours * 3600:
        return False

    if first.competitorId == second.competitorId:
        return True

    if first.type == second.type:
        return True

    shared_entities = set(first.metadata.relatedEntities) & set(second.metadata.relatedEntities)
    return len(shared_entities) > 0


# =============================================================================
# Cluster Attributes
# =============================================================================

def determine_cluster_category(alerts: Sequence[PrioritizedAlert]) -> ClusterCategory:
    """Category of the single shared member type, or MIXED."""
    unique_types = {alert.type for alert in alerts}
    if len(unique_types) == 1:
        return CATEGORY_BY_TYPE.get(unique_types.pop(), ClusterCategory.MIXED)
    return ClusterCategory.MIXED


def calculate_aggregated_priority(alerts: Sequence[PrioritizedAlert]) -> float:
    """
    Priority-weighted average of member scores.

    Each member is weighted by ``score / 100`` so high-priority members pull
    the aggregate up. Returns 0 when every member scores 0.
    """
    if not alerts:
        return 0.0

    scores = np.array([alert.priorityScore for alert in alerts], dtype=float)
    weights = scores / 100.0
    if weights.sum() <= 0:
        return 0.0
    return clamp(float(np.average(scores, weights=weights)))


def generate_cluster_summary(
    alerts: Sequence[PrioritizedAlert],
    category: ClusterCategory
) -> str:
    count = len(alerts)
    competitor_count = len({alert.competitorId for alert in alerts})

    if category == ClusterCategory.CONTENT:
        return f"{count} content-related alerts from {competitor_count} competitor(s)"
    elif category == ClusterCategory.SEO:
        return f"{count} SEO changes detected across {competitor_count} competitor(s)"
    elif category == ClusterCategory.PERFORMANCE:
        return f"{count} performance improvements by {competitor_count} competitor(s)"
    elif category == ClusterCategory.MARKET:
        return f"{count} market movements affecting {competitor_count} competitor(s)"
    return f"{count} competitive alerts from {competitor_count} competitor(s)"


def generate_cluster_action(
    alerts: Sequence[PrioritizedAlert],
    category: ClusterCategory
) -> str:
    """Category-specific action when any member is critical or high, else monitor."""
    escalated = any(
        alert.priorityLevel in (PriorityLevel.CRITICAL, PriorityLevel.HIGH)
        for alert in alerts
    )
    if escalated:
        return ESCALATED_ACTIONS[category]
    return MONITOR_ACTION


def create_alert_cluster(alerts: Sequence[PrioritizedAlert]) -> AlertCluster:
    """Build a cluster from a group of related alerts (two or more)."""
    category = determine_cluster_category(alerts)
    timestamps = [alert.timestamp for alert in alerts]

    return AlertCluster(
        id=f"cluster-{uuid4().hex[:12]}",
        category=category,
        alerts=list(alerts),
        summary=generate_cluster_summary(alerts, category),
        recommendedAction=generate_cluster_action(alerts, category),
        aggregatedPriority=calculate_aggregated_priority(alerts),
        timeWindow=TimeWindow(start=min(timestamps), end=max(timestamps)),
    )


# =============================================================================
# Partitioning
# =============================================================================

def _window_bounds(sorted_times: List[datetime], center: datetime, window: timedelta) -> slice:
    """Slice of ``sorted_times`` within ``window`` of ``center``, clamped to the batch edges."""
    if center - sorted_times[0] <= window:
        low = 0
    else:
        low = bisect_left(sorted_times, center - window)
    if sorted_times[-1] - center <= window:
        high = len(sorted_times)
    else:
        high = bisect_right(sorted_times, center + window)
    return slice(low, high)


def partition_alerts(
    alerts: Sequence[PrioritizedAlert],
    window_hours: float = DEFAULT_WINDOW_HOURS
) -> ClusteringResult:
    """
    Partition a batch into clusters and un-clustered singletons.

    Args:
        alerts: Prioritized alerts, usually in descending score order
        window_hours: Maximum time distance between a seed and its members

    Returns:
        ClusteringResult with clusters sorted by descending aggregated
        priority, and the remaining alerts in input order

    Raises:
        ValueError: If window_hours is negative or not finite
    """
    if not math.isfinite(window_hours) or window_hours < 0:
        raise ValueError(f"window_hours must be a finite number >= 0, got {window_hours}")

    order = sorted(range(len(alerts)), key=lambda i: alerts[i].timestamp)
    sorted_times = [alerts[i].timestamp for i in order]

    # A window wider than the batch span covers every alert
    window = None
    if sorted_times and window_hours * 3600 < (sorted_times[-1] - sorted_times[0]).total_seconds():
        window = timedelta(hours=window_hours)

    processed: Set[int] = set()
    clustered: Set[int] = set()
    clusters: List[AlertCluster] = []

    for seed_index, seed in enumerate(alerts):
        if seed_index in processed:
            continue

        if window is None:
            candidates = range(len(alerts))
        else:
            candidates = sorted(order[_window_bounds(sorted_times, seed.timestamp, window)])

        group = [
            index for index in candidates
            if index not in processed
            and are_alerts_related(seed, alerts[index], window_hours)
        ]

        if len(group) >= MIN_CLUSTER_SIZE:
            clusters.append(create_alert_cluster([alerts[index] for index in group]))
            processed.update(group)
            clustered.update(group)
        else:
            processed.add(seed_index)

    # Singletons are reported in input order
    unclustered = [alert for index, alert in enumerate(alerts) if index not in clustered]

    clusters.sort(key=lambda cluster: cluster.aggregatedPriority, reverse=True)

    logger.info(
        f"Clustered {len(alerts)} alerts into {len(clusters)} clusters "
        f"({len(unclustered)} un-clustered, window {window_hours}h)"
    )
    return ClusteringResult(clusters=clusters, unclustered=unclustered)


def cluster_alerts(
    alerts: Sequence[PrioritizedAlert],
    window_hours: float = DEFAULT_WINDOW_HOURS
) -> List[AlertCluster]:
    """
    Cluster related alerts for batched notification.

    Args:
        alerts: Prioritized alerts
        window_hours: Maximum time distance between a seed and its members

    Returns:
        Clusters of two or more alerts, sorted by descending aggregated priority
    """
    return partition_alerts(alerts, window_hours).clusters


__all__ = [
    "cluster_alerts",
    "partition_alerts",
    "are_alerts_related",
    "determine_cluster_category",
    "calculate_aggregated_priority",
    "generate_cluster_summary",
    "generate_cluster_action",
    "create_alert_cluster",
    "DEFAULT_WINDOW_HOURS",
]
