"""Core module containing data models, configuration and the alert engine."""

from .models import (
    Alert,
    AlertStatus,
    Severity,
    Snapshot,
    ThresholdConfig,
)
from .config import Config, ConfigError
from .engine import AlertEngine
from .status import (
    StatusError,
    StatusPoisonedError,
    StatusStore,
    StatusUninitializedError,
)

__all__ = [
    "Alert",
    "AlertStatus",
    "Severity",
    "Snapshot",
    "ThresholdConfig",
    "Config",
    "ConfigError",
    "AlertEngine",
    "StatusError",
    "StatusPoisonedError",
    "StatusStore",
    "StatusUninitializedError",
]
