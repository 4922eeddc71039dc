"""
Notification jobs for the alert prioritization engine.

This module provides payload builders that run after a batch has been
prioritized and clustered:
- Cluster digest (cluster_digest.py): Slack Block Kit digest of a clustered
  batch plus a per-batch summary

Delivery itself is performed by the notification transports; nothing here
opens a network connection.

Usage Examples:
---------------
    from alert_engine.jobs import build_digest_payload, summarize_batch

    result = engine.partition_alerts(prioritized)
    payload = build_digest_payload(result.clusters, result.unclustered)
"""

from alert_engine.jobs.cluster_digest import (
    BatchSummary,
    build_digest_payload,
    format_cluster_digest,
    format_cluster_section,
    summarize_batch,
)


__all__ = [
    "BatchSummary",
    "build_digest_payload",
    "format_cluster_digest",
    "format_cluster_section",
    "summarize_batch",
]
