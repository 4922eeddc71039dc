"""
Pytest test module for alert clustering.

Tests cover:
- Relatedness (time window AND shared competitor, type or entity)
- Seed-anchored grouping (no transitive closure)
- Partition property: every alert lands in exactly one cluster or the remainder
- No singleton clusters
- Category inference, summary and recommended action templates
- Priority-weighted aggregated priority
- Agreement of the windowed candidate lookup with a naive pairwise scan

Test Categories:
- TestRelatedness
- TestClusterAttributes
- TestPartition
- TestNaiveScanAgreement
"""

import re
from datetime import timedelta
from typing import List, Set

import numpy as np
import pytest

from alert_engine.models import ClusterCategory, PrioritizedAlert, PriorityLevel
from alert_engine.services.clustering import (
    MONITOR_ACTION,
    are_alerts_related,
    calculate_aggregated_priority,
    cluster_alerts,
    create_alert_cluster,
    determine_cluster_category,
    generate_cluster_summary,
    partition_alerts,
)
from alert_engine.tests.conftest import NOW, make_prioritized


def naive_partition(alerts: List[PrioritizedAlert], window_hours: float) -> List[List[str]]:
    """Reference seed-anchored grouping with a full pairwise scan."""
    processed: Set[int] = set()
    groups: List[List[str]] = []
    for seed_index, seed in enumerate(alerts):
        if seed_index in processed:
            continue
        group = [
            index for index, other in enumerate(alerts)
            if index not in processed and are_alerts_related(seed, other, window_hours)
        ]
        if len(group) >= 2:
            groups.append([alerts[index].id for index in group])
            processed.update(group)
        else:
            processed.add(seed_index)
    return groups


# =============================================================================
# Relatedness
# =============================================================================

class TestRelatedness:

    def test_shared_competitor(self):
        first = make_prioritized("a", alert_type="content-published", competitor_id="acme")
        second = make_prioritized("b", alert_type="ranking-change", competitor_id="acme")
        assert are_alerts_related(first, second) is True

    def test_shared_type(self):
        first = make_prioritized("a", alert_type="ranking-change", competitor_id="acme")
        second = make_prioritized("b", alert_type="ranking-change", competitor_id="globex")
        assert are_alerts_related(first, second) is True

    def test_shared_entity(self):
        first = make_prioritized(
            "a", alert_type="content-published", competitor_id="acme",
            related_entities=["pricing", "checkout"],
        )
        second = make_prioritized(
            "b", alert_type="backlink-gained", competitor_id="globex",
            related_entities=["checkout"],
        )
        assert are_alerts_related(first, second) is True

    def test_nothing_shared(self):
        first = make_prioritized(
            "a", alert_type="content-published", competitor_id="acme", related_entities=["x"],
        )
        second = make_prioritized(
            "b", alert_type="backlink-gained", competitor_id="globex", related_entities=["y"],
        )
        assert are_alerts_related(first, second) is False

    def test_window_is_inclusive(self):
        first = make_prioritized("a", competitor_id="acme", timestamp=NOW - timedelta(hours=1))
        second = make_prioritized("b", competitor_id="acme", timestamp=NOW)
        assert are_alerts_related(first, second, window_hours=1) is True

    def test_outside_window(self):
        first = make_prioritized("a", competitor_id="acme", timestamp=NOW - timedelta(hours=2))
        second = make_prioritized("b", competitor_id="acme", timestamp=NOW)

        assert are_alerts_related(first, second, window_hours=1) is False
        assert are_alerts_related(first, second, window_hours=2) is True


# =============================================================================
# Cluster Attributes
# =============================================================================

class TestClusterAttributes:

    @pytest.mark.parametrize("alert_type,expected", [
        ("content-published", ClusterCategory.CONTENT),
        ("ranking-change", ClusterCategory.SEO),
        ("backlink-gained", ClusterCategory.SEO),
        ("performance-improvement", ClusterCategory.PERFORMANCE),
        ("market-movement", ClusterCategory.MARKET),
        ("threat-detected", ClusterCategory.MARKET),
        ("strategy-shift", ClusterCategory.MIXED),
        ("opportunity-identified", ClusterCategory.MIXED),
    ])
    def test_single_type_category(self, alert_type, expected):
        alerts = [
            make_prioritized("a", alert_type=alert_type, competitor_id="acme"),
            make_prioritized("b", alert_type=alert_type, competitor_id="globex"),
        ]
        assert determine_cluster_category(alerts) == expected

    def test_seo_types_do_not_merge_category(self):
        alerts = [
            make_prioritized("a", alert_type="ranking-change"),
            make_prioritized("b", alert_type="backlink-gained"),
        ]
        assert determine_cluster_category(alerts) == ClusterCategory.MIXED

    def test_aggregated_priority_is_priority_weighted(self):
        alerts = [make_prioritized("a", score=80), make_prioritized("b", score=60)]
        # (80*0.8 + 60*0.6) / (0.8 + 0.6)
        assert calculate_aggregated_priority(alerts) == pytest.approx(100 / 1.4)

    def test_aggregated_priority_of_zero_scores(self):
        alerts = [make_prioritized("a", score=0), make_prioritized("b", score=0)]
        assert calculate_aggregated_priority(alerts) == 0.0

    def test_aggregated_priority_matches_numpy_formula(self):
        scores = [12.5, 48.0, 91.0, 67.25]
        alerts = [make_prioritized(f"a{i}", score=s) for i, s in enumerate(scores)]
        weights = np.array(scores) / 100
        expected = float((np.array(scores) * weights).sum() / weights.sum())
        assert calculate_aggregated_priority(alerts) == pytest.approx(expected)

    @pytest.mark.parametrize("category,expected", [
        (ClusterCategory.CONTENT, "3 content-related alerts from 2 competitor(s)"),
        (ClusterCategory.SEO, "3 SEO changes detected across 2 competitor(s)"),
        (ClusterCategory.PERFORMANCE, "3 performance improvements by 2 competitor(s)"),
        (ClusterCategory.MARKET, "3 market movements affecting 2 competitor(s)"),
        (ClusterCategory.MIXED, "3 competitive alerts from 2 competitor(s)"),
    ])
    def test_summary_templates(self, category, expected):
        alerts = [
            make_prioritized("a", competitor_id="acme"),
            make_prioritized("b", competitor_id="acme"),
            make_prioritized("c", competitor_id="globex"),
        ]
        assert generate_cluster_summary(alerts, category) == expected

    def test_escalated_action_with_high_member(self):
        cluster = create_alert_cluster([
            make_prioritized("a", alert_type="content-published", level=PriorityLevel.HIGH, score=75),
            make_prioritized("b", alert_type="content-published", level=PriorityLevel.LOW, score=35),
        ])
        assert cluster.recommendedAction == (
            "Review competitor content strategy and identify content gaps"
        )

    def test_monitor_action_without_urgent_members(self):
        cluster = create_alert_cluster([
            make_prioritized("a", level=PriorityLevel.MEDIUM),
            make_prioritized("b", level=PriorityLevel.LOW, score=35),
        ])
        assert cluster.recommendedAction == MONITOR_ACTION

    def test_time_window_and_id(self):
        cluster = create_alert_cluster([
            make_prioritized("a", timestamp=NOW - timedelta(minutes=40)),
            make_prioritized("b", timestamp=NOW - timedelta(minutes=5)),
            make_prioritized("c", timestamp=NOW - timedelta(minutes=20)),
        ])
        assert cluster.timeWindow.start == NOW - timedelta(minutes=40)
        assert cluster.timeWindow.end == NOW - timedelta(minutes=5)
        assert re.fullmatch(r"cluster-[0-9a-f]{12}", cluster.id)


# =============================================================================
# Partition
# =============================================================================

class TestPartition:

    @pytest.mark.parity
    def test_shared_competitor_forms_mixed_cluster(self):
        first = make_prioritized(
            "a", alert_type="content-published", competitor_id="acme",
            score=80, level=PriorityLevel.HIGH, timestamp=NOW - timedelta(minutes=30),
        )
        second = make_prioritized(
            "b", alert_type="ranking-change", competitor_id="acme",
            score=60, level=PriorityLevel.MEDIUM, timestamp=NOW,
        )
        clusters = cluster_alerts([first, second], window_hours=1)

        assert len(clusters) == 1
        cluster = clusters[0]
        assert [alert.id for alert in cluster.alerts] == ["a", "b"]
        assert cluster.category == ClusterCategory.MIXED
        assert cluster.aggregatedPriority == pytest.approx((80 * 0.8 + 60 * 0.6) / 1.4)
        assert cluster.summary == "2 competitive alerts from 1 competitor(s)"

    def test_grouping_is_seed_anchored(self):
        # a~b (competitor) and b~c (type), but a and c are 100 minutes apart
        a = make_prioritized("a", alert_type="content-published", competitor_id="acme",
                             timestamp=NOW - timedelta(minutes=100))
        b = make_prioritized("b", alert_type="ranking-change", competitor_id="acme",
                             timestamp=NOW - timedelta(minutes=50))
        c = make_prioritized("c", alert_type="ranking-change", competitor_id="globex",
                             timestamp=NOW)
        result = partition_alerts([a, b, c], window_hours=1)

        assert [[alert.id for alert in cluster.alerts] for cluster in result.clusters] == [["a", "b"]]
        assert [alert.id for alert in result.unclustered] == ["c"]

    def test_no_singleton_clusters(self):
        alerts = [
            make_prioritized("a", alert_type="content-published", competitor_id="acme"),
            make_prioritized("b", alert_type="backlink-gained", competitor_id="globex"),
            make_prioritized("c", alert_type="market-movement", competitor_id="initech"),
        ]
        result = partition_alerts(alerts)

        assert result.clusters == []
        assert [alert.id for alert in result.unclustered] == ["a", "b", "c"]

    def test_partition_covers_every_alert_once(self):
        alerts = [
            make_prioritized(
                f"alert-{i}",
                alert_type=["content-published", "ranking-change", "market-movement"][i % 3],
                competitor_id=f"competitor-{i % 4}",
                timestamp=NOW - timedelta(minutes=17 * i),
                score=float(20 + (i * 7) % 80),
            )
            for i in range(24)
        ]
        result = partition_alerts(alerts)

        clustered_ids = [alert.id for cluster in result.clusters for alert in cluster.alerts]
        unclustered_ids = [alert.id for alert in result.unclustered]
        all_ids = clustered_ids + unclustered_ids

        assert len(all_ids) == len(set(all_ids))
        assert sorted(all_ids) == sorted(alert.id for alert in alerts)
        assert all(len(cluster.alerts) >= 2 for cluster in result.clusters)

    def test_clusters_sorted_by_aggregated_priority(self):
        alerts = [
            make_prioritized("low-1", competitor_id="acme", score=30, timestamp=NOW),
            make_prioritized("low-2", competitor_id="acme", score=35, timestamp=NOW),
            make_prioritized("high-1", alert_type="market-movement", competitor_id="globex",
                             score=90, timestamp=NOW - timedelta(hours=5)),
            make_prioritized("high-2", alert_type="market-movement", competitor_id="globex",
                             score=88, timestamp=NOW - timedelta(hours=5)),
        ]
        clusters = cluster_alerts(alerts)

        assert [cluster.alerts[0].id for cluster in clusters] == ["high-1", "low-1"]
        priorities = [cluster.aggregatedPriority for cluster in clusters]
        assert priorities == sorted(priorities, reverse=True)

    def test_zero_window_clusters_simultaneous_alerts(self):
        alerts = [
            make_prioritized("a", competitor_id="acme", timestamp=NOW),
            make_prioritized("b", competitor_id="acme", timestamp=NOW),
            make_prioritized("c", competitor_id="acme", timestamp=NOW + timedelta(seconds=1)),
        ]
        result = partition_alerts(alerts, window_hours=0)

        assert [[alert.id for alert in cluster.alerts] for cluster in result.clusters] == [["a", "b"]]
        assert [alert.id for alert in result.unclustered] == ["c"]

    @pytest.mark.parametrize("window_hours", [-1, float("nan"), float("inf")])
    def test_invalid_window_rejected(self, window_hours):
        with pytest.raises(ValueError):
            partition_alerts([make_prioritized("a")], window_hours=window_hours)

    def test_window_wider_than_any_datetime_range(self):
        alerts = [
            make_prioritized("a", competitor_id="acme", timestamp=NOW),
            make_prioritized("b", competitor_id="acme", timestamp=NOW - timedelta(days=400)),
            make_prioritized("c", competitor_id="globex", alert_type="market-movement", timestamp=NOW),
        ]
        result = partition_alerts(alerts, window_hours=1e8)

        assert [[alert.id for alert in cluster.alerts] for cluster in result.clusters] == [["a", "b"]]
        assert [alert.id for alert in result.unclustered] == ["c"]
        assert are_alerts_related(alerts[0], alerts[1], window_hours=1e12) is True

    def test_empty_batch(self):
        result = partition_alerts([])
        assert result.clusters == []
        assert result.unclustered == []


# =============================================================================
# Naive Scan Agreement
# =============================================================================

class TestNaiveScanAgreement:

    @pytest.mark.slow
    @pytest.mark.parametrize("window_hours", [0.25, 1.0, 3.0])
    def test_windowed_lookup_matches_pairwise_scan(self, window_hours):
        rng = np.random.default_rng(seed=7)
        types = ["content-published", "ranking-change", "backlink-gained", "market-movement"]
        alerts = [
            make_prioritized(
                f"alert-{i}",
                alert_type=types[int(rng.integers(len(types)))],
                competitor_id=f"competitor-{int(rng.integers(12))}",
                related_entities=[f"kw-{int(rng.integers(30))}"],
                timestamp=NOW - timedelta(minutes=int(rng.integers(0, 24 * 60))),
                score=float(rng.uniform(0, 100)),
            )
            for i in range(150)
        ]
        result = partition_alerts(alerts, window_hours)

        expected = naive_partition(alerts, window_hours)
        actual = [[alert.id for alert in cluster.alerts] for cluster in result.clusters]
        assert sorted(actual) == sorted(expected)
