"""Status listeners."""

from .log_listener import LoggingStatusListener

__all__ = ["LoggingStatusListener"]
