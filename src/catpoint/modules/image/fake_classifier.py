"""
Stand-in classifier that flips a coin instead of looking at the image.
"""

from __future__ import annotations

import logging
import random
from typing import Any

logger = logging.getLogger(__name__)


class FakeImageClassifier:
    """Randomly reports cats; useful for demos and wiring checks."""

    def __init__(self, *, seed: int | None = None, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random(seed)

    def contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        result = self._rng.random() < 0.5
        logger.debug("FakeImageClassifier answered %s", result)
        return result


__all__ = ["FakeImageClassifier"]
