"""
Settings and environment management for the alert prioritization engine.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Nested sections overridable with a ``__`` delimiter
- Singleton pattern via @lru_cache for efficient access
- Conversion into the immutable AlertEngineConfig consumed by the engine

Environment Variables (all optional, prefix ALERT_ENGINE_):
- ALERT_ENGINE_WEIGHTS__SEVERITY / __IMPACT / __URGENCY / __CONFIDENCE
- ALERT_ENGINE_SEVERITY_SCORES__CRITICAL / __HIGH / __MEDIUM / __LOW / __INFO
- ALERT_ENGINE_THRESHOLDS__CRITICALALERT / __HIGHPRIORITYALERT / ...
- ALERT_ENGINE_BUSINESS_HOURS__START / __END / __TIMEZONE
- ALERT_ENGINE_CLUSTER_WINDOW_HOURS: Default clustering window (default: 1.0)
- ALERT_ENGINE_DIGEST_HOUR: Local hour of the daily email digest slot (default: 9)

Usage:
    from alert_engine.core.config import get_settings

    settings = get_settings()
    engine = AlertPrioritizationEngine(settings.to_engine_config())
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from alert_engine.models.schemas import (
    AlertEngineConfig,
    BusinessHours,
    PriorityThresholds,
    PriorityWeights,
    SeverityScores,
)


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Attributes:
        weights: Score component weights.
        severity_scores: Base score per source severity.
        thresholds: Priority ladder cut points.
        business_hours: Business hours metadata (not consumed by computations).
        cluster_window_hours: Default time window for alert clustering.
        digest_hour: Local hour at which the daily email digest goes out.
    """

    model_config = SettingsConfigDict(
        env_prefix='ALERT_ENGINE_',
        env_nested_delimiter='__',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # Scoring
    # =========================================================================

    weights: PriorityWeights = Field(default_factory=PriorityWeights)
    severity_scores: SeverityScores = Field(default_factory=SeverityScores)
    thresholds: PriorityThresholds = Field(default_factory=PriorityThresholds)

    # Reserved: no computation reads business hours in this version
    business_hours: BusinessHours = Field(default_factory=BusinessHours)

    # =========================================================================
    # Clustering and scheduling
    # =========================================================================

    # Alerts further apart than this are never clustered together
    cluster_window_hours: float = Field(default=1.0, ge=0)

    # Daily digests are aligned to this local hour on the following day
    digest_hour: int = Field(default=9, ge=0, le=23)

    def to_engine_config(self) -> AlertEngineConfig:
        """Build the immutable engine configuration from these settings."""
        return AlertEngineConfig(
            weights=self.weights,
            severityScores=self.severity_scores,
            thresholds=self.thresholds,
            businessHours=self.business_hours,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get the settings singleton.

    Returns:
        Settings: The settings instance with all configuration values.

    Raises:
        pydantic.ValidationError: If an environment override has an invalid value.

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
