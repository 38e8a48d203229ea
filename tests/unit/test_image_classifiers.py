from __future__ import annotations

import io
import random
from pathlib import Path

import imageio.v3 as iio
import numpy as np
import pytest

from catpoint.core.contracts import ImageClassifier
from catpoint.modules.image.decoding import as_array, decode_image
from catpoint.modules.image.fake_classifier import FakeImageClassifier
from catpoint.modules.image.yolo_classifier import DetectionCandidate, YoloCatClassifier


class FakePredictor:
    def __init__(self, candidates: list[DetectionCandidate]) -> None:
        self.candidates = candidates
        self.images: list[np.ndarray] = []

    def predict(self, image: np.ndarray) -> list[DetectionCandidate]:
        self.images.append(image)
        return self.candidates


def _png_bytes(array: np.ndarray) -> bytes:
    with io.BytesIO() as buffer:
        iio.imwrite(buffer, array, extension=".png")
        return buffer.getvalue()


def _classifier(
    candidates: list[DetectionCandidate], **kwargs: object
) -> tuple[YoloCatClassifier, FakePredictor]:
    predictor = FakePredictor(candidates)
    classifier = YoloCatClassifier(
        predictor_factory=lambda _: predictor, **kwargs  # type: ignore[arg-type]
    )
    return classifier, predictor


def test_yolo_classifier_detects_cat_above_threshold() -> None:
    classifier, predictor = _classifier(
        [
            DetectionCandidate(label="person", confidence=0.99, bbox=(0, 0, 1, 1)),
            DetectionCandidate(label="Cat", confidence=0.8, bbox=(0, 0, 2, 2)),
        ]
    )
    image = np.zeros((4, 4, 3), dtype=np.uint8)

    assert classifier.contains_cat(image, 0.5) is True
    assert predictor.images[0] is image


def test_yolo_classifier_ignores_low_confidence_and_other_labels() -> None:
    classifier, _ = _classifier(
        [
            DetectionCandidate(label="cat", confidence=0.3, bbox=(0, 0, 1, 1)),
            DetectionCandidate(label="dog", confidence=0.95, bbox=(0, 0, 1, 1)),
        ]
    )
    assert classifier.contains_cat(np.zeros((4, 4, 3), dtype=np.uint8), 0.5) is False


def test_yolo_classifier_custom_labels() -> None:
    classifier, _ = _classifier(
        [DetectionCandidate(label="kitten", confidence=0.7, bbox=(0, 0, 1, 1))],
        cat_labels=["Kitten"],
    )
    assert classifier.cat_labels == ["kitten"]
    assert classifier.contains_cat(np.zeros((2, 2, 3), dtype=np.uint8), 0.7) is True


def test_yolo_classifier_builds_predictor_once() -> None:
    calls: list[str | None] = []
    predictor = FakePredictor([])

    def factory(model_path: str | None) -> FakePredictor:
        calls.append(model_path)
        return predictor

    classifier = YoloCatClassifier(model_path="weights.pt", predictor_factory=factory)
    image = np.zeros((2, 2, 3), dtype=np.uint8)
    classifier.contains_cat(image, 0.5)
    classifier.contains_cat(image, 0.5)

    assert calls == ["weights.pt"]


def test_yolo_classifier_accepts_encoded_bytes_and_paths(tmp_path: Path) -> None:
    classifier, predictor = _classifier([])
    array = np.full((3, 5, 3), 200, dtype=np.uint8)
    encoded = _png_bytes(array)
    path = tmp_path / "frame.png"
    path.write_bytes(encoded)

    classifier.contains_cat(encoded, 0.5)
    classifier.contains_cat(path, 0.5)

    assert predictor.images[0].shape == (3, 5, 3)
    assert np.array_equal(predictor.images[1], array)


def test_decode_image_round_trip() -> None:
    array = np.arange(27, dtype=np.uint8).reshape((3, 3, 3))
    assert np.array_equal(decode_image(_png_bytes(array), "image/png"), array)


def test_as_array_passes_content_type_to_decoder() -> None:
    array = np.arange(12, dtype=np.uint8).reshape((2, 2, 3))
    assert np.array_equal(as_array(_png_bytes(array), "image/png"), array)


def test_decode_image_detects_jpeg_without_hint() -> None:
    array = np.full((8, 6, 3), 128, dtype=np.uint8)
    with io.BytesIO() as buffer:
        iio.imwrite(buffer, array, extension=".jpg")
        jpeg_bytes = buffer.getvalue()

    assert decode_image(jpeg_bytes).shape == (8, 6, 3)
    assert as_array(jpeg_bytes).shape == (8, 6, 3)


def test_as_array_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        as_array(42)


def test_fake_classifier_is_seedable() -> None:
    first = FakeImageClassifier(seed=11)
    second = FakeImageClassifier(seed=11)
    answers = [first.contains_cat(None, 0.5) for _ in range(20)]
    assert answers == [second.contains_cat(None, 0.5) for _ in range(20)]
    assert all(isinstance(answer, bool) for answer in answers)


def test_fake_classifier_uses_injected_rng() -> None:
    class AlwaysLow(random.Random):
        def random(self) -> float:
            return 0.1

    assert FakeImageClassifier(rng=AlwaysLow()).contains_cat(None, 0.9) is True


def test_classifiers_satisfy_protocol() -> None:
    assert isinstance(FakeImageClassifier(), ImageClassifier)
    yolo = YoloCatClassifier(predictor_factory=lambda _: FakePredictor([]))
    assert isinstance(yolo, ImageClassifier)
