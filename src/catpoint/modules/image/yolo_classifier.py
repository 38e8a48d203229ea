"""
Cat classifier backed by a YOLO object detector.

The predictor is created lazily so the module can run with either the real
Ultralytics model or a stubbed predictor during unit tests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from .decoding import as_array

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionCandidate:
    """Represents a single detection result from the predictor."""

    label: str
    confidence: float
    bbox: tuple[float, float, float, float]


class PredictorProtocol:
    """Small protocol so we can swap predictor implementations."""

    def predict(self, image: np.ndarray) -> list[DetectionCandidate]:  # pragma: no cover - protocol
        raise NotImplementedError


class UltralyticsPredictor(PredictorProtocol):
    """Adapter that wraps an Ultralytics YOLO model."""

    def __init__(self, model_path: str | None = None) -> None:
        try:
            from ultralytics import YOLO
        except ModuleNotFoundError as exc:  # pragma: no cover - import guard
            raise RuntimeError("Ultralytics is not installed") from exc
        self._model = YOLO(model_path or "yolov8n.pt")

    def predict(self, image: np.ndarray) -> list[DetectionCandidate]:  # pragma: no cover - heavy
        results = self._model(image, verbose=False)
        candidates: list[DetectionCandidate] = []
        for result in results:
            boxes = getattr(result, "boxes", None)
            names = getattr(result, "names", {})
            if boxes is None:
                continue
            for xyxy, cls_id, conf in zip(boxes.xyxy, boxes.cls, boxes.conf, strict=False):
                label = names.get(int(cls_id), str(int(cls_id)))
                bbox = tuple(float(value) for value in xyxy.tolist())  # type: ignore[assignment]
                candidates.append(
                    DetectionCandidate(label=label, confidence=float(conf), bbox=bbox)  # type: ignore[arg-type]
                )
        return candidates


class YoloCatClassifier:
    """`ImageClassifier` that looks for cat labels among YOLO detections."""

    def __init__(
        self,
        *,
        model_path: str | None = None,
        cat_labels: Iterable[str] = ("cat",),
        predictor_factory: Callable[[str | None], PredictorProtocol] | None = None,
    ) -> None:
        self._model_path = model_path
        self._cat_labels = {str(label).lower() for label in cat_labels}
        self._predictor_factory = predictor_factory or UltralyticsPredictor
        self._predictor: PredictorProtocol | None = None

    @property
    def cat_labels(self) -> Sequence[str]:
        return sorted(self._cat_labels)

    def contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        if self._predictor is None:
            self._predictor = self._predictor_factory(self._model_path)
            logger.info("YoloCatClassifier loaded predictor (model=%s)", self._model_path)
        candidates = self._predictor.predict(as_array(image))
        for candidate in candidates:
            if candidate.label.lower() not in self._cat_labels:
                continue
            if candidate.confidence >= confidence_threshold:
                logger.debug(
                    "Cat detected as %s with confidence %.2f", candidate.label, candidate.confidence
                )
                return True
        logger.debug("No cat among %d detections", len(candidates))
        return False


__all__ = [
    "DetectionCandidate",
    "PredictorProtocol",
    "UltralyticsPredictor",
    "YoloCatClassifier",
]
