"""
Observer registry for status listeners.

The registry behaves like an ordered set of opaque handles: registering the
same listener twice or removing an unknown one is a no-op. Broadcasts are
synchronous and any exception raised by a listener reaches the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .contracts import AlarmStatus, StatusListener

logger = logging.getLogger(__name__)


class StatusListenerRegistry:
    """Ordered set of listeners plus broadcast helpers."""

    def __init__(self) -> None:
        self._listeners: dict[StatusListener, None] = {}

    def add(self, listener: StatusListener) -> None:
        """Register a listener; duplicates are ignored."""
        if listener in self._listeners:
            return
        self._listeners[listener] = None
        logger.debug("Registered status listener %s", listener)

    def remove(self, listener: StatusListener) -> None:
        """Detach a listener if it is registered."""
        if listener in self._listeners:
            del self._listeners[listener]
            logger.debug("Removed status listener %s", listener)

    def __contains__(self, listener: object) -> bool:
        return listener in self._listeners

    def __len__(self) -> int:
        return len(self._listeners)

    def __iter__(self) -> Iterator[StatusListener]:
        return iter(list(self._listeners))

    def notify_alarm_status(self, alarm_status: AlarmStatus) -> None:
        for listener in self:
            listener.on_alarm_status_changed(alarm_status)

    def notify_cat_detected(self, detected: bool) -> None:
        for listener in self:
            listener.on_cat_detected(detected)

    def notify_sensors_changed(self) -> None:
        for listener in self:
            listener.on_sensors_changed()


__all__ = ["StatusListenerRegistry"]
