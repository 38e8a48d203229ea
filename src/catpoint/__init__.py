"""
Catpoint - home security alarm engine

Decides the alarm status of a home-security controller from sensor
activations, arming changes and camera cat detections.
"""

__version__ = "0.1.0"

from catpoint.core import (
    AlarmStatus,
    ArmingStatus,
    SecurityService,
    Sensor,
    SensorNotFoundError,
    SensorType,
    StatusListenerRegistry,
)

__all__ = [
    "AlarmStatus",
    "ArmingStatus",
    "SecurityService",
    "Sensor",
    "SensorNotFoundError",
    "SensorType",
    "StatusListenerRegistry",
]
