"""
Status listener that mirrors engine notifications into the log.
"""

from __future__ import annotations

import logging

from ...core.contracts import AlarmStatus

logger = logging.getLogger(__name__)


class LoggingStatusListener:
    """Writes every notification to a logger; ALARM is logged as a warning."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def on_alarm_status_changed(self, alarm_status: AlarmStatus) -> None:
        level = logging.WARNING if alarm_status is AlarmStatus.ALARM else logging.INFO
        self._log.log(level, "Alarm status: %s", alarm_status.description)

    def on_cat_detected(self, detected: bool) -> None:
        if detected:
            self._log.info("Cat detected in camera image")
        else:
            self._log.info("No cat in camera image")

    def on_sensors_changed(self) -> None:
        self._log.debug("Sensor roster or states changed")


__all__ = ["LoggingStatusListener"]
