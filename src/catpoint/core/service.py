"""
Alarm-status decision engine.

`SecurityService` turns sensor activations, arming changes and cat-detection
results into alarm status transitions. Every status and sensor lives in the
injected `SecurityRepository`; the service only keeps the result of the most
recent image classification.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Set
from typing import Any

from .contracts import (
    AlarmStatus,
    ArmingStatus,
    ImageClassifier,
    SecurityRepository,
    Sensor,
    StatusListener,
)
from .listeners import StatusListenerRegistry

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.5


class SensorNotFoundError(LookupError):
    """Raised when a sensor is not registered with the repository."""

    def __init__(self, name: str, sensor_id: uuid.UUID | None = None) -> None:
        detail = f" ({sensor_id})" if sensor_id is not None else ""
        super().__init__(f"Sensor '{name}'{detail} is not registered")
        self.name = name
        self.sensor_id = sensor_id


class SecurityService:
    """
    Synchronous state machine driving NO_ALARM -> PENDING_ALARM -> ALARM.

    Each public call performs at most one alarm status transition, persisted
    through the repository and broadcast to listeners exactly once.
    """

    def __init__(
        self,
        repository: SecurityRepository,
        image_classifier: ImageClassifier,
        *,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        listeners: StatusListenerRegistry | None = None,
    ) -> None:
        if not 0.0 <= confidence_threshold <= 1.0:
            raise ValueError("confidence_threshold must be within [0, 1]")
        self._repository = repository
        self._image_classifier = image_classifier
        self._confidence_threshold = confidence_threshold
        self._listeners = listeners if listeners is not None else StatusListenerRegistry()
        self._cat_detected = False

    @property
    def confidence_threshold(self) -> float:
        return self._confidence_threshold

    @property
    def cat_detected(self) -> bool:
        """Result of the most recent `process_image` call."""
        return self._cat_detected

    # Listeners -------------------------------------------------------------

    def add_status_listener(self, listener: StatusListener) -> None:
        self._listeners.add(listener)

    def remove_status_listener(self, listener: StatusListener) -> None:
        self._listeners.remove(listener)

    # Repository pass-through -----------------------------------------------

    def get_alarm_status(self) -> AlarmStatus:
        return self._repository.get_alarm_status()

    def get_arming_status(self) -> ArmingStatus:
        return self._repository.get_arming_status()

    def get_sensors(self) -> Set[Sensor]:
        return self._repository.get_sensors()

    def add_sensor(self, sensor: Sensor) -> None:
        known = sensor in self._repository.get_sensors()
        self._repository.add_sensor(sensor)
        if not known:
            self._listeners.notify_sensors_changed()

    def remove_sensor(self, sensor: Sensor) -> None:
        known = sensor in self._repository.get_sensors()
        self._repository.remove_sensor(sensor)
        if known:
            self._listeners.notify_sensors_changed()

    # State machine ---------------------------------------------------------

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """
        Change the arming status.

        Disarming always forces NO_ALARM. Arming resets every sensor to
        inactive, and arming at home while a cat is in view raises the alarm.
        """
        if arming_status is ArmingStatus.DISARMED:
            self._set_alarm_status(AlarmStatus.NO_ALARM)
        else:
            self._reset_sensors()
            if arming_status is ArmingStatus.ARMED_HOME and self._cat_detected:
                self._set_alarm_status(AlarmStatus.ALARM)
        self._repository.set_arming_status(arming_status)
        logger.info("Arming status set to %s", arming_status.value)

    def change_sensor_activation_status(self, sensor: Sensor, active: bool) -> None:
        """
        Record a sensor reading and apply the alarm escalation rules.

        Raises `SensorNotFoundError` if the repository does not know the sensor.
        """
        stored = self._find_sensor(sensor)
        was_active = stored.active
        alarm_status = self._repository.get_alarm_status()

        if alarm_status is AlarmStatus.ALARM:
            logger.debug("Alarm active; ignoring sensor %s for alarm status", stored.name)
        elif active:
            # Re-activating an already active sensor counts as a new trip.
            self._handle_sensor_activated(alarm_status)
        elif was_active:
            self._handle_sensor_deactivated(stored, alarm_status)
        else:
            logger.debug("Sensor %s already inactive; alarm status unchanged", stored.name)

        stored.active = active
        if stored is not sensor:
            sensor.active = active
        self._repository.update_sensor(stored)
        if was_active != active:
            self._listeners.notify_sensors_changed()

    def process_image(self, image: Any) -> bool:
        """Classify an image and apply the cat-detection rules."""
        cat_detected = bool(
            self._image_classifier.contains_cat(image, self._confidence_threshold)
        )
        self._cat_detected = cat_detected
        if cat_detected:
            if self._repository.get_arming_status() is ArmingStatus.ARMED_HOME:
                self._set_alarm_status(AlarmStatus.ALARM)
            else:
                logger.debug("Cat detected while not armed at home; alarm status unchanged")
        elif self._any_sensor_active():
            logger.debug("No cat detected but sensors are active; alarm status unchanged")
        else:
            self._set_alarm_status(AlarmStatus.NO_ALARM)
        self._listeners.notify_cat_detected(cat_detected)
        return cat_detected

    def _handle_sensor_activated(self, alarm_status: AlarmStatus) -> None:
        if self._repository.get_arming_status() is ArmingStatus.DISARMED:
            logger.debug("System disarmed; sensor activation ignored")
            return
        if alarm_status is AlarmStatus.NO_ALARM:
            self._set_alarm_status(AlarmStatus.PENDING_ALARM)
        elif alarm_status is AlarmStatus.PENDING_ALARM:
            self._set_alarm_status(AlarmStatus.ALARM)

    def _handle_sensor_deactivated(self, stored: Sensor, alarm_status: AlarmStatus) -> None:
        if alarm_status is not AlarmStatus.PENDING_ALARM:
            return
        others_active = any(
            other.active for other in self._repository.get_sensors() if other != stored
        )
        if others_active:
            logger.debug("Sensor %s cleared but other sensors remain active", stored.name)
            return
        self._set_alarm_status(AlarmStatus.NO_ALARM)

    def _reset_sensors(self) -> None:
        reset = 0
        for sensor in self._repository.get_sensors():
            if not sensor.active:
                continue
            sensor.active = False
            self._repository.update_sensor(sensor)
            reset += 1
        if reset:
            logger.info("Reset %d active sensor(s) on arming", reset)
            self._listeners.notify_sensors_changed()

    def _any_sensor_active(self) -> bool:
        return any(sensor.active for sensor in self._repository.get_sensors())

    def _find_sensor(self, sensor: Sensor) -> Sensor:
        for candidate in self._repository.get_sensors():
            if candidate == sensor:
                return candidate
        raise SensorNotFoundError(sensor.name, sensor.sensor_id)

    def _set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        self._repository.set_alarm_status(alarm_status)
        logger.info("Alarm status set to %s", alarm_status.value)
        self._listeners.notify_alarm_status(alarm_status)


__all__ = [
    "DEFAULT_CONFIDENCE_THRESHOLD",
    "SecurityService",
    "SensorNotFoundError",
]
