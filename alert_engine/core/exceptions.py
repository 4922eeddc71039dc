"""
Exceptions raised by the alert prioritization engine.

Hierarchy:
    AlertEngineError (base)
    ├── ConfigValidationError   - malformed engine configuration, raised at construction
    └── AlertValidationError    - a single raw alert failed ingestion validation
"""

from typing import Any, Dict, List, Optional


class AlertEngineError(Exception):
    """Base class for all engine errors."""


class ConfigValidationError(AlertEngineError):
    """
    Engine configuration failed validation.

    Raised once, when the engine is constructed, and never mid-batch. The
    individual field errors reported by pydantic are kept on ``errors``.
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class AlertValidationError(AlertEngineError):
    """A raw alert could not be parsed into an ``Alert`` model."""

    def __init__(
        self,
        message: str,
        alert_id: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.alert_id = alert_id
        self.errors = errors or []
