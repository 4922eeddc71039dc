"""
Pydantic models for the alert prioritization engine.

This module provides validated data contracts for everything that crosses the
engine boundary:
- Engine configuration (weights, severity scores, thresholds, business hours)
- Raw alerts handed in by the competitive-intelligence collector
- Prioritized alerts, business context and clusters produced by the engine
- Recipient delivery preferences consumed read-only by routing/scheduling
- Ingestion diagnostics for alerts rejected at the boundary

Field names of the alert, preference and cluster contracts are camelCase so
the models round-trip the JSON the collector and the web product exchange.

All models use Pydantic v2 syntax.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from alert_engine.utils.time_utils import ensure_utc, get_zone
from alert_engine.models.enums import (
    AlertSeverity,
    AlertStatus,
    AlertType,
    ClusterCategory,
    DeliveryChannel,
    DigestFrequency,
    EffortLevel,
    PriorityLevel,
    RecommendationPriority,
)


HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# =============================================================================
# Engine Configuration
# =============================================================================


class PriorityWeights(BaseModel):
    """
    Weights of the four score components.

    Designed to sum to roughly 1.0 but this is not enforced; the engine logs a
    warning when they do not.
    """
    model_config = ConfigDict(frozen=True)

    severity: float = Field(default=0.4, ge=0.0, le=1.0)
    impact: float = Field(default=0.3, ge=0.0, le=1.0)
    urgency: float = Field(default=0.2, ge=0.0, le=1.0)
    confidence: float = Field(default=0.1, ge=0.0, le=1.0)

    @property
    def total(self) -> float:
        return self.severity + self.impact + self.urgency + self.confidence


class SeverityScores(BaseModel):
    """Base score contributed by each source severity."""
    model_config = ConfigDict(frozen=True)

    critical: float = Field(default=100, gt=0)
    high: float = Field(default=80, gt=0)
    medium: float = Field(default=60, gt=0)
    low: float = Field(default=40, gt=0)
    info: float = Field(default=20, gt=0)

    def for_severity(self, severity: AlertSeverity) -> float:
        return getattr(self, AlertSeverity(severity).value)


class PriorityThresholds(BaseModel):
    """
    Score cut points of the priority ladder.

    Must be strictly descending so that every score maps to exactly one level.
    """
    model_config = ConfigDict(frozen=True)

    criticalAlert: float = Field(default=85, ge=0, le=100)
    highPriorityAlert: float = Field(default=70, ge=0, le=100)
    mediumPriorityAlert: float = Field(default=50, ge=0, le=100)
    lowPriorityAlert: float = Field(default=30, ge=0, le=100)

    @model_validator(mode="after")
    def check_descending(self) -> "PriorityThresholds":
        ladder = [
            self.criticalAlert,
            self.highPriorityAlert,
            self.mediumPriorityAlert,
            self.lowPriorityAlert,
        ]
        if any(upper <= lower for upper, lower in zip(ladder, ladder[1:])):
            raise ValueError(
                "thresholds must be strictly descending: "
                f"criticalAlert={self.criticalAlert} > highPriorityAlert={self.highPriorityAlert} "
                f"> mediumPriorityAlert={self.mediumPriorityAlert} > lowPriorityAlert={self.lowPriorityAlert}"
            )
        return self


class BusinessHours(BaseModel):
    """Business hours metadata. Carried on the config, not consumed by any computation."""
    model_config = ConfigDict(frozen=True)

    start: int = Field(default=9, ge=0, le=23)
    end: int = Field(default=17, ge=0, le=23)
    timezone: str = Field(default="UTC")

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        get_zone(value)
        return value


class AlertEngineConfig(BaseModel):
    """
    Immutable, validated engine configuration.

    Example:
        >>> config = AlertEngineConfig(weights={"severity": 0.5, "impact": 0.2,
        ...                                     "urgency": 0.2, "confidence": 0.1})
        >>> config.thresholds.criticalAlert
        85
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    weights: PriorityWeights = Field(default_factory=PriorityWeights)
    severityScores: SeverityScores = Field(default_factory=SeverityScores)
    thresholds: PriorityThresholds = Field(default_factory=PriorityThresholds)
    businessHours: BusinessHours = Field(default_factory=BusinessHours)


# =============================================================================
# Alert Input Models (produced by the upstream collector)
# =============================================================================


class AlertSignals(BaseModel):
    """
    Typed optional signals attached to an alert.

    Only ``competitorRanking`` and ``searchVolume`` are consulted by the engine.
    Other signals the collector attaches are preserved as extra fields.
    """
    model_config = ConfigDict(extra="allow")

    competitorRanking: Optional[int] = Field(
        default=None,
        ge=1,
        description="Competitor's search ranking position (1 = top)"
    )
    searchVolume: Optional[int] = Field(
        default=None,
        ge=0,
        description="Monthly search volume of the affected query"
    )


class AlertMetadata(BaseModel):
    """Quantitative metadata the collector attaches to every alert."""

    impact: float = Field(..., ge=0, le=100)
    urgency: float = Field(..., ge=0, le=100)
    confidence: float = Field(..., ge=0, le=100)
    relatedEntities: List[str] = Field(
        default_factory=list,
        description="Keywords, URLs or topics the alert concerns"
    )
    source: Optional[str] = Field(default=None, description="Collector that produced the alert")
    data: AlertSignals = Field(default_factory=AlertSignals)


class Recommendation(BaseModel):
    """A suggested response to an alert."""

    effort: EffortLevel = Field(..., description="Effort required to act on the recommendation")
    action: Optional[str] = None
    priority: Optional[RecommendationPriority] = None
    description: Optional[str] = None
    expectedOutcome: Optional[str] = None


class Alert(BaseModel):
    """
    A single competitive-intelligence event requiring triage.

    Owned by the upstream collector and handed to the engine once.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "id": "alert-001",
                "type": "threat-detected",
                "severity": "critical",
                "timestamp": "2026-10-18T12:00:00Z",
                "competitorId": "competitor-acme",
                "actionRequired": True,
                "metadata": {
                    "impact": 90,
                    "urgency": 95,
                    "confidence": 80,
                    "relatedEntities": ["pricing"],
                    "data": {"competitorRanking": 2, "searchVolume": 12000},
                },
                "recommendations": [{"effort": "high"}],
            }
        }
    )

    id: str = Field(..., min_length=1, description="Unique alert identifier")
    type: AlertType
    severity: AlertSeverity
    timestamp: datetime = Field(..., description="Event time (naive values are read as UTC)")
    competitorId: str = Field(..., min_length=1)
    actionRequired: bool = False
    metadata: AlertMetadata
    recommendations: List[Recommendation] = Field(default_factory=list)
    title: Optional[str] = None
    description: Optional[str] = None
    status: AlertStatus = AlertStatus.NEW

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)


# =============================================================================
# Engine Output Models
# =============================================================================


class BusinessContext(BaseModel):
    """Derived strategic-value metadata for an alert."""
    model_config = ConfigDict(frozen=True)

    strategicImpact: float = Field(..., ge=0, le=100)
    resourceRequirement: EffortLevel
    timeToAction: float = Field(..., ge=0, description="Hours available to act")
    competitorThreatLevel: float = Field(..., ge=0, le=100)


class PrioritizedAlert(Alert):
    """
    Immutable snapshot of an alert with its prioritization decisions.

    Re-scoring an alert always produces a new PrioritizedAlert; instances are
    never mutated.
    """
    model_config = ConfigDict(frozen=True)

    priorityScore: float = Field(..., ge=0, le=100)
    priorityLevel: PriorityLevel
    deliveryChannel: List[DeliveryChannel] = Field(default_factory=list)
    scheduledDelivery: Optional[datetime] = None
    escalationLevel: int = Field(
        default=0,
        ge=0,
        description="Reserved for re-notification of unacknowledged alerts; always 0"
    )
    businessContext: BusinessContext

    @field_validator("scheduledDelivery")
    @classmethod
    def normalize_scheduled_delivery(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None


class TimeWindow(BaseModel):
    """Span between the earliest and latest member timestamps of a cluster."""
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime


class AlertCluster(BaseModel):
    """A group of two or more related alerts bundled for batched notification."""
    model_config = ConfigDict(frozen=True)

    id: str
    category: ClusterCategory
    alerts: List[PrioritizedAlert] = Field(..., min_length=2)
    summary: str
    recommendedAction: str
    aggregatedPriority: float = Field(..., ge=0, le=100)
    timeWindow: TimeWindow


class ClusteringResult(BaseModel):
    """
    Partition of a prioritized batch.

    Every input alert appears exactly once, either inside one cluster or in
    ``unclustered``.
    """
    model_config = ConfigDict(frozen=True)

    clusters: List[AlertCluster] = Field(default_factory=list)
    unclustered: List[PrioritizedAlert] = Field(default_factory=list)


# =============================================================================
# Delivery Preferences (per recipient, consumed read-only)
# =============================================================================


class DashboardPreferences(BaseModel):
    enabled: bool = True


class EmailPreferences(BaseModel):
    enabled: bool = False
    address: Optional[str] = None
    frequency: DigestFrequency = DigestFrequency.IMMEDIATE
    minimumPriority: PriorityLevel = PriorityLevel.HIGH


class SlackPreferences(BaseModel):
    enabled: bool = False
    webhook: Optional[str] = None
    channel: Optional[str] = None
    minimumPriority: PriorityLevel = PriorityLevel.HIGH


class SmsPreferences(BaseModel):
    enabled: bool = False
    phoneNumber: Optional[str] = None
    minimumPriority: PriorityLevel = PriorityLevel.CRITICAL

    @field_validator("minimumPriority")
    @classmethod
    def check_sms_priority(cls, value: PriorityLevel) -> PriorityLevel:
        if value not in (PriorityLevel.CRITICAL, PriorityLevel.HIGH):
            raise ValueError("sms minimumPriority must be 'critical' or 'high'")
        return value


class ChannelPreferences(BaseModel):
    dashboard: DashboardPreferences = Field(default_factory=DashboardPreferences)
    email: EmailPreferences = Field(default_factory=EmailPreferences)
    slack: SlackPreferences = Field(default_factory=SlackPreferences)
    sms: SmsPreferences = Field(default_factory=SmsPreferences)


class QuietHours(BaseModel):
    """
    Per-recipient window during which only high-urgency alerts go out immediately.

    ``start``/``end`` are 24h ``HH:MM`` wall-clock times in ``timezone``. A
    window with ``start > end`` wraps past midnight (e.g. 22:00-07:00).
    """

    enabled: bool = False
    start: str = Field(default="22:00", pattern=HHMM_PATTERN)
    end: str = Field(default="07:00", pattern=HHMM_PATTERN)
    timezone: str = "UTC"

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        get_zone(value)
        return value


class KeywordPreferences(BaseModel):
    """Keyword allow/block lists applied by upstream filtering, not by the engine."""

    highPriority: List[str] = Field(default_factory=list)
    blocked: List[str] = Field(default_factory=list)


class DeliveryPreferences(BaseModel):
    """
    A recipient's delivery preferences.

    Example:
        >>> prefs = DeliveryPreferences(
        ...     userId="user-1",
        ...     channels={"email": {"enabled": True, "frequency": "daily",
        ...                         "minimumPriority": "medium"}},
        ...     quietHours={"enabled": True, "start": "22:00", "end": "07:00",
        ...                 "timezone": "Europe/Berlin"},
        ... )
    """

    userId: Optional[str] = None
    channels: ChannelPreferences = Field(default_factory=ChannelPreferences)
    quietHours: QuietHours = Field(default_factory=QuietHours)
    keywords: KeywordPreferences = Field(default_factory=KeywordPreferences)


# =============================================================================
# Ingestion Diagnostics
# =============================================================================


class AlertDiagnostic(BaseModel):
    """Why a raw alert was rejected at the ingestion boundary."""

    index: int = Field(..., ge=0, description="Position of the item in the raw batch")
    alertId: Optional[str] = Field(default=None, description="The item's id, when one could be read")
    errors: List[str] = Field(default_factory=list)


class IngestionResult(BaseModel):
    """Valid alerts (input order preserved) plus diagnostics for rejected items."""

    alerts: List[Alert] = Field(default_factory=list)
    diagnostics: List[AlertDiagnostic] = Field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.diagnostics)
