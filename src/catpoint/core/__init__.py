"""
Core of the security controller: contracts, listener registry, the alarm
engine and the configuration service.
"""

from .config import ConfigError, ConfigService, ConfigSnapshot
from .contracts import (
    AlarmStatus,
    ArmingStatus,
    ImageClassifier,
    SecurityRepository,
    Sensor,
    SensorType,
    StatusListener,
)
from .listeners import StatusListenerRegistry
from .service import SecurityService, SensorNotFoundError

__all__ = [
    "AlarmStatus",
    "ArmingStatus",
    "ConfigError",
    "ConfigService",
    "ConfigSnapshot",
    "ImageClassifier",
    "SecurityRepository",
    "SecurityService",
    "Sensor",
    "SensorNotFoundError",
    "SensorType",
    "StatusListener",
    "StatusListenerRegistry",
]
