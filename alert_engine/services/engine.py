"""
Alert Prioritization Engine

Composes the scoring, business context, routing, scheduling and clustering
services into the engine's public operations:

- prioritize_alerts: score, contextualize, route and schedule every alert of a
  batch, then sort by descending priority score
- cluster_alerts / partition_alerts: group a prioritized batch into clusters
- prioritize_alerts_with_diagnostics: ingest raw payloads, then prioritize the
  valid ones

The engine holds only its immutable, validated configuration, so one instance
can be shared across callers and threads. Configuration problems surface once,
at construction, as ConfigValidationError.

Usage:
    engine = AlertPrioritizationEngine()
    prioritized = engine.prioritize_alerts(alerts, preferences)
    clusters = engine.cluster_alerts(prioritized, window_hours=1)
"""

import logging
import math
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from alert_engine.core.config import Settings, get_settings
from alert_engine.core.exceptions import ConfigValidationError
from alert_engine.models.enums import DeliveryChannel, PriorityLevel
from alert_engine.models.schemas import (
    Alert,
    AlertCluster,
    AlertDiagnostic,
    AlertEngineConfig,
    BusinessContext,
    ClusteringResult,
    DeliveryPreferences,
    PrioritizedAlert,
)
from alert_engine.services.business_context import calculate_business_context
from alert_engine.services.clustering import DEFAULT_WINDOW_HOURS, partition_alerts
from alert_engine.services.ingestion import RawAlert, ingest_alerts
from alert_engine.services.routing import get_delivery_channels
from alert_engine.services.scheduling import DEFAULT_DIGEST_HOUR, schedule_delivery
from alert_engine.services.scoring import calculate_priority_score, get_priority_level
from alert_engine.utils.time_utils import resolve_now


logger = logging.getLogger(__name__)

ConfigInput = Union[AlertEngineConfig, Mapping[str, Any], None]


def build_config(config: ConfigInput = None) -> AlertEngineConfig:
    """
    Validate engine configuration.

    Args:
        config: A ready AlertEngineConfig, a (possibly partial) mapping of
            config sections, or None for the defaults

    Returns:
        The validated, immutable AlertEngineConfig

    Raises:
        ConfigValidationError: If any section is malformed
    """
    if isinstance(config, AlertEngineConfig):
        return config
    try:
        return AlertEngineConfig.model_validate(dict(config or {}))
    except ValidationError as e:
        errors = e.errors()
        raise ConfigValidationError(
            f"Invalid alert engine configuration ({len(errors)} error(s)): {e}",
            errors=errors,
        ) from e
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(f"Invalid alert engine configuration: {e}") from e


class AlertPrioritizationEngine:
    """
    Scores, routes, schedules and clusters competitive-intelligence alerts.

    Args:
        config: Engine configuration (AlertEngineConfig, mapping, or None for defaults)
        cluster_window_hours: Default clustering window in hours
        digest_hour: Local hour of the daily email digest slot

    Raises:
        ConfigValidationError: If the configuration is malformed
    """

    def __init__(
        self,
        config: ConfigInput = None,
        cluster_window_hours: float = DEFAULT_WINDOW_HOURS,
        digest_hour: int = DEFAULT_DIGEST_HOUR
    ):
        self._config = build_config(config)
        if not math.isfinite(cluster_window_hours) or cluster_window_hours < 0:
            raise ConfigValidationError(f"cluster_window_hours must be a finite number >= 0, got {cluster_window_hours}")
        self._cluster_window_hours = cluster_window_hours
        if not 0 <= digest_hour <= 23:
            raise ConfigValidationError(f"digest_hour must be within 0-23, got {digest_hour}")
        self._digest_hour = digest_hour

        weight_total = self._config.weights.total
        if not math.isclose(weight_total, 1.0, abs_tol=1e-6):
            logger.warning(f"Priority weights sum to {weight_total:.3f}, not 1.0; scores will be scaled")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AlertPrioritizationEngine":
        """
        Build an engine from environment-driven settings.

        Raises:
            ConfigValidationError: If the settings cannot be loaded or are invalid
        """
        if settings is None:
            try:
                settings = get_settings()
            except ValidationError as e:
                raise ConfigValidationError(
                    f"Invalid alert engine settings: {e}", errors=e.errors()
                ) from e
        return cls(
            settings.to_engine_config(),
            cluster_window_hours=settings.cluster_window_hours,
            digest_hour=settings.digest_hour,
        )

    @property
    def config(self) -> AlertEngineConfig:
        return self._config

    @property
    def cluster_window_hours(self) -> float:
        return self._cluster_window_hours

    @property
    def digest_hour(self) -> int:
        return self._digest_hour

    # =========================================================================
    # Single-alert operations
    # =========================================================================

    def score(self, alert: Alert, now: Optional[datetime] = None) -> float:
        return calculate_priority_score(alert, self._config, now)

    def level(self, score: float) -> PriorityLevel:
        return get_priority_level(score, self._config.thresholds)

    def analyze_business_context(self, alert: Alert) -> BusinessContext:
        return calculate_business_context(alert)

    def delivery_channels(
        self,
        priority_level: PriorityLevel,
        preferences: DeliveryPreferences
    ) -> List[DeliveryChannel]:
        return get_delivery_channels(priority_level, preferences)

    def schedule_delivery(
        self,
        alert: PrioritizedAlert,
        preferences: DeliveryPreferences,
        now: Optional[datetime] = None
    ) -> datetime:
        return schedule_delivery(alert, preferences, now, digest_hour=self._digest_hour)

    def prioritize_alert(
        self,
        alert: Alert,
        preferences: DeliveryPreferences,
        now: Optional[datetime] = None
    ) -> PrioritizedAlert:
        """
        Derive the prioritized snapshot of one alert.

        Args:
            alert: The raw alert
            preferences: Recipient delivery preferences
            now: Reference instant for age and scheduling

        Returns:
            A new, immutable PrioritizedAlert
        """
        now = resolve_now(now)
        priority_score = self.score(alert, now)
        priority_level = self.level(priority_score)

        prioritized = PrioritizedAlert(
            **alert.model_dump(include=set(Alert.model_fields)),
            priorityScore=priority_score,
            priorityLevel=priority_level,
            deliveryChannel=self.delivery_channels(priority_level, preferences),
            escalationLevel=0,
            businessContext=self.analyze_business_context(alert),
        )
        scheduled = self.schedule_delivery(prioritized, preferences, now)
        return prioritized.model_copy(update={"scheduledDelivery": scheduled})

    # =========================================================================
    # Batch operations
    # =========================================================================

    def prioritize_alerts(
        self,
        alerts: Iterable[Alert],
        preferences: DeliveryPreferences,
        now: Optional[datetime] = None
    ) -> List[PrioritizedAlert]:
        """
        Prioritize a batch of alerts.

        The reference instant is captured once so every alert in the batch is
        scored and scheduled against the same ``now``.

        Args:
            alerts: Raw alerts
            preferences: Recipient delivery preferences
            now: Reference instant (defaults to current UTC time)

        Returns:
            Prioritized alerts sorted by descending priority score; alerts with
            equal scores keep their input order
        """
        now = resolve_now(now)
        prioritized = [self.prioritize_alert(alert, preferences, now) for alert in alerts]

        # sorted() is stable, so equal scores keep input order
        prioritized = sorted(prioritized, key=lambda item: item.priorityScore, reverse=True)

        logger.info(
            f"Prioritized {len(prioritized)} alerts "
            f"({sum(1 for a in prioritized if a.priorityLevel == PriorityLevel.CRITICAL)} critical)"
        )
        return prioritized

    def prioritize_alerts_with_diagnostics(
        self,
        items: Iterable[RawAlert],
        preferences: DeliveryPreferences,
        now: Optional[datetime] = None
    ) -> Tuple[List[PrioritizedAlert], List[AlertDiagnostic]]:
        """
        Ingest raw alert payloads and prioritize the valid ones.

        Returns:
            Tuple of (prioritized alerts, diagnostics for rejected items)
        """
        ingestion = ingest_alerts(items)
        return self.prioritize_alerts(ingestion.alerts, preferences, now), ingestion.diagnostics

    def partition_alerts(
        self,
        alerts: Sequence[PrioritizedAlert],
        window_hours: Optional[float] = None
    ) -> ClusteringResult:
        if window_hours is None:
            window_hours = self._cluster_window_hours
        return partition_alerts(alerts, window_hours)

    def cluster_alerts(
        self,
        alerts: Sequence[PrioritizedAlert],
        window_hours: Optional[float] = None
    ) -> List[AlertCluster]:
        """
        Cluster related prioritized alerts for batched notification.

        Returns:
            Clusters of two or more alerts, sorted by descending aggregated priority
        """
        return self.partition_alerts(alerts, window_hours).clusters


__all__ = [
    "AlertPrioritizationEngine",
    "build_config",
]
