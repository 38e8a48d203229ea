"""
Process-local repository keeping statuses and sensors in memory.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from ...core.contracts import AlarmStatus, ArmingStatus, Sensor

logger = logging.getLogger(__name__)


class InMemorySecurityRepository:
    """Dictionary-backed implementation of the `SecurityRepository` protocol."""

    def __init__(
        self,
        *,
        sensors: Iterable[Sensor] = (),
        arming_status: ArmingStatus = ArmingStatus.DISARMED,
        alarm_status: AlarmStatus = AlarmStatus.NO_ALARM,
    ) -> None:
        self._sensors: dict[uuid.UUID, Sensor] = {}
        for sensor in sensors:
            self._sensors.setdefault(sensor.sensor_id, sensor)
        self._arming_status = arming_status
        self._alarm_status = alarm_status

    def get_arming_status(self) -> ArmingStatus:
        return self._arming_status

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        logger.debug("Persisting arming status %s", arming_status.value)
        self._arming_status = arming_status

    def get_alarm_status(self) -> AlarmStatus:
        return self._alarm_status

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        logger.debug("Persisting alarm status %s", alarm_status.value)
        self._alarm_status = alarm_status

    def get_sensors(self) -> set[Sensor]:
        return set(self._sensors.values())

    def add_sensor(self, sensor: Sensor) -> None:
        key = sensor.sensor_id
        if key in self._sensors:
            logger.debug("Sensor %s already registered", sensor.name)
            return
        self._sensors[key] = sensor
        logger.debug("Registered sensor %s (%s)", sensor.name, sensor.sensor_type.value)

    def remove_sensor(self, sensor: Sensor) -> None:
        if self._sensors.pop(sensor.sensor_id, None) is not None:
            logger.debug("Removed sensor %s", sensor.name)

    def update_sensor(self, sensor: Sensor) -> None:
        self._sensors[sensor.sensor_id] = sensor
        logger.debug("Updated sensor %s active=%s", sensor.name, sensor.active)


__all__ = ["InMemorySecurityRepository"]
