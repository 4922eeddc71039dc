"""
Alert Ingestion Service

Validates raw alert payloads from the competitive-intelligence collector into
``Alert`` models at the engine boundary.

Key Features:
- Required field, type and range validation via the Alert schema
- Typed signal validation (competitorRanking, searchVolume)
- Id uniqueness enforcement within a batch (the first occurrence wins)
- Per-item diagnostics instead of a mid-batch exception, so one malformed
  alert never blocks, or silently skews, the rest of the batch
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Set, Union

from pydantic import ValidationError

from alert_engine.core.exceptions import AlertValidationError
from alert_engine.models.schemas import Alert, AlertDiagnostic, IngestionResult


# Configure module logger
logger = logging.getLogger(__name__)

RawAlert = Union[Alert, Mapping[str, Any]]


def _read_alert_id(item: Any) -> Optional[str]:
    """Best-effort id lookup for diagnostics on items that failed validation."""
    if isinstance(item, Alert):
        return item.id
    if isinstance(item, Mapping):
        value = item.get("id")
        return str(value) if value is not None else None
    return None


def format_validation_errors(error: ValidationError) -> List[str]:
    """
    Flatten a pydantic ValidationError into readable ``location: message`` strings.

    Example:
        ["metadata.impact: Input should be less than or equal to 100"]
    """
    messages: List[str] = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ())) or "<root>"
        messages.append(f"{location}: {detail.get('msg', 'invalid value')}")
    return messages


def parse_alert(item: RawAlert) -> Alert:
    """
    Validate a single raw alert.

    Args:
        item: An Alert instance or a mapping of alert fields

    Returns:
        The validated Alert

    Raises:
        AlertValidationError: If the item does not describe a valid alert
    """
    if isinstance(item, Alert):
        return item
    if not isinstance(item, Mapping):
        raise AlertValidationError(
            f"Expected a mapping, got {type(item).__name__}",
            errors=[f"<root>: expected a mapping, got {type(item).__name__}"],
        )
    try:
        return Alert.model_validate(item)
    except ValidationError as e:
        alert_id = _read_alert_id(item)
        raise AlertValidationError(
            f"Alert {alert_id or '<unknown>'} failed validation",
            alert_id=alert_id,
            errors=format_validation_errors(e),
        ) from e


def ingest_alerts(items: Iterable[RawAlert]) -> IngestionResult:
    """
    Validate a raw batch, collecting diagnostics rather than raising.

    Args:
        items: Raw alert mappings (or already-built Alert models)

    Returns:
        IngestionResult with the valid alerts in input order and one
        AlertDiagnostic per rejected item
    """
    alerts: List[Alert] = []
    diagnostics: List[AlertDiagnostic] = []
    seen_ids: Set[str] = set()

    for index, item in enumerate(items):
        try:
            alert = parse_alert(item)
        except AlertValidationError as e:
            diagnostics.append(AlertDiagnostic(index=index, alertId=e.alert_id, errors=e.errors))
            continue

        if alert.id in seen_ids:
            diagnostics.append(AlertDiagnostic(
                index=index,
                alertId=alert.id,
                errors=[f"id: duplicate alert id '{alert.id}' in batch"],
            ))
            continue

        seen_ids.add(alert.id)
        alerts.append(alert)

    if diagnostics:
        logger.warning(
            f"Rejected {len(diagnostics)} of {len(alerts) + len(diagnostics)} alerts at ingestion"
        )
    return IngestionResult(alerts=alerts, diagnostics=diagnostics)


__all__ = [
    "ingest_alerts",
    "parse_alert",
    "format_validation_errors",
]
