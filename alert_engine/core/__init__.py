"""
Core infrastructure for the alert prioritization engine.

Provides:
- Configuration management via pydantic-settings
- The engine's exception hierarchy

Re-exports allow simplified imports like:

    from alert_engine.core import get_settings, ConfigValidationError
"""

from alert_engine.core.config import Settings, get_settings
from alert_engine.core.exceptions import (
    AlertEngineError,
    AlertValidationError,
    ConfigValidationError,
)

__all__ = [
    'Settings',
    'get_settings',
    'AlertEngineError',
    'AlertValidationError',
    'ConfigValidationError',
]
