"""Image decoding and cat classifiers."""

from .fake_classifier import FakeImageClassifier
from .yolo_classifier import DetectionCandidate, YoloCatClassifier

__all__ = ["DetectionCandidate", "FakeImageClassifier", "YoloCatClassifier"]
