"""
Cluster digest job for the alert prioritization engine.

This module turns a prioritized, clustered batch into a Slack Block Kit
message for the chat notification transport. It only builds the payload;
posting it (webhook, bot token, retries) belongs to the transport.

Key Features:
- Batch summary: counts per priority level and per channel, alerts going out
  now versus deferred, mean priority score
- One section per cluster with its summary, recommended action and
  aggregated priority
- The highest-priority un-clustered alerts listed individually
- Blocks built with slack_sdk.models.blocks so Slack's field limits are
  validated before anything leaves the engine

Usage:
    prioritized = engine.prioritize_alerts(alerts, preferences, now=now)
    result = engine.partition_alerts(prioritized)

    summary = summarize_batch(prioritized, result.clusters, now=now)
    payload = build_digest_payload(result.clusters, result.unclustered, generated_at=now)
    # payload == {"text": "...", "blocks": [{...}, ...]}

Dependencies:
    - slack-sdk (Block Kit models)
    - numpy (mean priority score)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from slack_sdk.models.blocks import (
    Block,
    ContextBlock,
    DividerBlock,
    HeaderBlock,
    MarkdownTextObject,
    SectionBlock,
)

from alert_engine.models.enums import DeliveryChannel, PriorityLevel
from alert_engine.models.schemas import AlertCluster, PrioritizedAlert
from alert_engine.utils.time_utils import resolve_now


logger = logging.getLogger(__name__)

DEFAULT_MAX_ALERTS = 5

# Slack rejects section text longer than this
SECTION_TEXT_LIMIT = 3000

PRIORITY_EMOJI = {
    PriorityLevel.CRITICAL: ":rotating_light:",
    PriorityLevel.HIGH: ":warning:",
    PriorityLevel.MEDIUM: ":large_yellow_circle:",
    PriorityLevel.LOW: ":white_circle:",
}


# =============================================================================
# Batch Summary
# =============================================================================

@dataclass
class BatchSummary:
    """
    Aggregate view of one prioritized batch.

    Attributes:
        total_alerts: Number of prioritized alerts in the batch.
        by_level: Alert count per priority level (every level present, possibly 0).
        by_channel: Alert count per delivery channel (an alert counts once per channel).
        immediate_count: Alerts scheduled at or before the batch's ``now``.
        deferred_count: Alerts scheduled after ``now`` (quiet hours or digest).
        mean_score: Mean priority score, 0.0 for an empty batch.
        cluster_count: Number of clusters formed.
        clustered_alert_count: Alerts that ended up inside a cluster.
    """
    total_alerts: int
    by_level: Dict[PriorityLevel, int] = field(default_factory=dict)
    by_channel: Dict[DeliveryChannel, int] = field(default_factory=dict)
    immediate_count: int = 0
    deferred_count: int = 0
    mean_score: float = 0.0
    cluster_count: int = 0
    clustered_alert_count: int = 0


def summarize_batch(
    prioritized: Sequence[PrioritizedAlert],
    clusters: Sequence[AlertCluster] = (),
    now: Optional[datetime] = None
) -> BatchSummary:
    """
    Summarize a prioritized batch and its clusters.

    Args:
        prioritized: Output of ``prioritize_alerts``.
        clusters: Output of ``cluster_alerts`` for the same batch.
        now: The instant the batch was prioritized against; alerts scheduled
            after it count as deferred.

    Returns:
        BatchSummary for the batch.
    """
    now = resolve_now(now)

    by_level = {level: 0 for level in PriorityLevel}
    by_channel = {channel: 0 for channel in DeliveryChannel}
    immediate_count = 0

    for alert in prioritized:
        by_level[alert.priorityLevel] += 1
        for channel in alert.deliveryChannel:
            by_channel[channel] += 1
        if alert.scheduledDelivery is None or alert.scheduledDelivery <= now:
            immediate_count += 1

    scores = np.array([alert.priorityScore for alert in prioritized], dtype=float)
    mean_score = float(scores.mean()) if scores.size else 0.0

    return BatchSummary(
        total_alerts=len(prioritized),
        by_level=by_level,
        by_channel=by_channel,
        immediate_count=immediate_count,
        deferred_count=len(prioritized) - immediate_count,
        mean_score=round(mean_score, 1),
        cluster_count=len(clusters),
        clustered_alert_count=sum(len(cluster.alerts) for cluster in clusters),
    )


# =============================================================================
# Block Kit Formatting
# =============================================================================

def _truncate(text: str, limit: int = SECTION_TEXT_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def _alert_line(alert: PrioritizedAlert) -> str:
    emoji = PRIORITY_EMOJI.get(alert.priorityLevel, "")
    label = alert.title or alert.type.value
    return (
        f"{emoji} *{label}* ({alert.competitorId}) | "
        f"score {alert.priorityScore:.0f} | {alert.priorityLevel.value}"
    )


def format_cluster_section(cluster: AlertCluster, max_alerts: int = DEFAULT_MAX_ALERTS) -> SectionBlock:
    """Section block describing one cluster and its top members."""
    members = sorted(cluster.alerts, key=lambda alert: alert.priorityScore, reverse=True)
    lines = [
        f"*{cluster.summary}*",
        f"Category: `{cluster.category.value}`  |  Priority: *{cluster.aggregatedPriority:.0f}*",
        f"_Recommended:_ {cluster.recommendedAction}",
    ]
    lines.extend(f"• {_alert_line(alert)}" for alert in members[:max_alerts])
    if len(members) > max_alerts:
        lines.append(f"…and {len(members) - max_alerts} more")

    return SectionBlock(
        block_id=cluster.id,
        text=MarkdownTextObject(text=_truncate("\n".join(lines))),
    )


def format_cluster_digest(
    clusters: Sequence[AlertCluster],
    unclustered: Sequence[PrioritizedAlert] = (),
    generated_at: Optional[datetime] = None,
    max_alerts: int = DEFAULT_MAX_ALERTS
) -> List[Block]:
    """
    Format a clustered batch into Slack Block Kit blocks.

    The message includes:
    - Header
    - Summary line (clusters, clustered and un-clustered alert counts)
    - One section per cluster, in the order given (highest priority first
      when passed straight from ``cluster_alerts``)
    - The top ``max_alerts`` un-clustered alerts by priority score
    - Footer with the generation timestamp

    Args:
        clusters: Clusters to report.
        unclustered: Alerts that did not join any cluster.
        generated_at: Timestamp shown in the footer (defaults to now, UTC).
        max_alerts: Maximum alerts listed per cluster and in the un-clustered section.

    Returns:
        List of slack_sdk Block objects.
    """
    generated_at = resolve_now(generated_at)
    blocks: List[Block] = []

    blocks.append(HeaderBlock(text="Competitive Alert Digest"))

    clustered_count = sum(len(cluster.alerts) for cluster in clusters)
    blocks.append(SectionBlock(text=MarkdownTextObject(text=(
        f"*{len(clusters)}* cluster(s) covering *{clustered_count}* alert(s)  |  "
        f"*{len(unclustered)}* un-clustered alert(s)"
    ))))

    if clusters:
        blocks.append(DividerBlock())
        for cluster in clusters:
            blocks.append(format_cluster_section(cluster, max_alerts))

    if unclustered:
        top_alerts = sorted(unclustered, key=lambda alert: alert.priorityScore, reverse=True)
        lines = ["*Other alerts*"]
        lines.extend(f"• {_alert_line(alert)}" for alert in top_alerts[:max_alerts])
        if len(top_alerts) > max_alerts:
            lines.append(f"…and {len(top_alerts) - max_alerts} more")

        blocks.append(DividerBlock())
        blocks.append(SectionBlock(text=MarkdownTextObject(text=_truncate("\n".join(lines)))))

    blocks.append(DividerBlock())

    timestamp = generated_at.strftime('%Y-%m-%d %H:%M:%S UTC')
    blocks.append(ContextBlock(elements=[
        MarkdownTextObject(text=f"Generated at {timestamp}")
    ]))

    return blocks


def build_digest_payload(
    clusters: Sequence[AlertCluster],
    unclustered: Sequence[PrioritizedAlert] = (),
    generated_at: Optional[datetime] = None,
    max_alerts: int = DEFAULT_MAX_ALERTS
) -> Dict[str, Any]:
    """
    Build a webhook-ready payload for a clustered batch.

    Returns:
        Dict with a plain ``text`` fallback and the serialized ``blocks``.

    Raises:
        slack_sdk.errors.SlackObjectFormationError: If a block violates Slack's limits.
    """
    blocks = format_cluster_digest(clusters, unclustered, generated_at, max_alerts)
    text = (
        f"{len(clusters)} alert cluster(s) and "
        f"{len(unclustered)} un-clustered alert(s)"
    )

    logger.info(f"Built cluster digest with {len(blocks)} blocks: {text}")
    return {
        "text": text,
        "blocks": [block.to_dict() for block in blocks],
    }


__all__ = [
    "BatchSummary",
    "summarize_batch",
    "format_cluster_section",
    "format_cluster_digest",
    "build_digest_payload",
]
