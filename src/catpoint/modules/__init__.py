"""
Collaborator implementations grouped by responsibility.
"""

from .data.memory_repository import InMemorySecurityRepository
from .image.fake_classifier import FakeImageClassifier
from .image.yolo_classifier import YoloCatClassifier
from .status.log_listener import LoggingStatusListener

__all__ = [
    "FakeImageClassifier",
    "InMemorySecurityRepository",
    "LoggingStatusListener",
    "YoloCatClassifier",
]
