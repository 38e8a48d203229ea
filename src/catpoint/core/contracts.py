"""
Contracts shared by the security engine and its collaborators.

The engine never owns state: statuses and sensors live behind the
`SecurityRepository` protocol, cat detection sits behind `ImageClassifier`,
and observers only need to satisfy `StatusListener`.
"""

from __future__ import annotations

import uuid
from collections.abc import Set
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class _DescribedEnum(str, Enum):
    """String enum whose members carry a human readable description."""

    description: str

    def __new__(cls, value: str, description: str) -> _DescribedEnum:
        member = str.__new__(cls, value)
        member._value_ = value
        member.description = description
        return member

    @classmethod
    def parse(cls, value: Any) -> Any:
        """Case-insensitive lookup used when reading configuration or CLI input."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(value.strip().lower())
        return value


class ArmingStatus(_DescribedEnum):
    """Whether the system is disarmed or armed with a home/away profile."""

    DISARMED = ("disarmed", "Disarmed")
    ARMED_HOME = ("armed_home", "Armed - At Home")
    ARMED_AWAY = ("armed_away", "Armed - Away")


class AlarmStatus(_DescribedEnum):
    """Three-level escalation state."""

    NO_ALARM = ("no_alarm", "Cool and Good")
    PENDING_ALARM = ("pending_alarm", "I'm in Danger...")
    ALARM = ("alarm", "Awooga!")


class SensorType(str, Enum):
    """Kinds of physical inputs the controller knows about."""

    DOOR = "door"
    WINDOW = "window"
    MOTION = "motion"


@dataclass(unsafe_hash=True)
class Sensor:
    """
    A door/window/motion input with a binary active flag.

    Identity is the generated `sensor_id`; two sensors with the same name and
    type are still distinct entities.
    """

    name: str = field(compare=False)
    sensor_type: SensorType = field(compare=False)
    active: bool = field(default=False, compare=False)
    sensor_id: uuid.UUID = field(default_factory=uuid.uuid4)


@runtime_checkable
class SecurityRepository(Protocol):
    """Storage for the current statuses and the sensor roster."""

    def get_arming_status(self) -> ArmingStatus: ...

    def set_arming_status(self, arming_status: ArmingStatus) -> None: ...

    def get_alarm_status(self) -> AlarmStatus: ...

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None: ...

    def get_sensors(self) -> Set[Sensor]: ...

    def add_sensor(self, sensor: Sensor) -> None: ...

    def remove_sensor(self, sensor: Sensor) -> None: ...

    def update_sensor(self, sensor: Sensor) -> None: ...


@runtime_checkable
class ImageClassifier(Protocol):
    """Black-box classifier answering whether an image contains a cat."""

    def contains_cat(self, image: Any, confidence_threshold: float) -> bool: ...


@runtime_checkable
class StatusListener(Protocol):
    """Observer notified by the engine after state changes."""

    def on_alarm_status_changed(self, alarm_status: AlarmStatus) -> None: ...

    def on_cat_detected(self, detected: bool) -> None: ...

    def on_sensors_changed(self) -> None: ...


__all__ = [
    "AlarmStatus",
    "ArmingStatus",
    "ImageClassifier",
    "SecurityRepository",
    "Sensor",
    "SensorType",
    "StatusListener",
]
