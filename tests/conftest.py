from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from catpoint.core.config import ConfigService
from catpoint.core.contracts import (
    ImageClassifier,
    SecurityRepository,
    Sensor,
    SensorType,
    StatusListener,
)


def _write_yaml(path: Path, content: str) -> None:
    path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")


@pytest.fixture
def sample_config_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary configuration directory for tests.
    """

    config_dir = tmp_path / "config"
    config_dir.mkdir()
    config_yaml = """
    security:
      arming_status: ARMED_AWAY
      alarm_status: no_alarm

    image:
      classifier: fake
      confidence_threshold: 0.65
      cat_labels: ["cat", "Kitten"]
      seed: 7

    sensors:
      - name: "door"
        sensor_type: DOOR
      - name: "window"
        sensor_type: window
      - name: "motion"
        sensor_type: motion
        active: true

    logging:
      level: DEBUG
      max_mb: 1
      backup_count: 1
    """
    _write_yaml(config_dir / "config.yaml", config_yaml)
    return config_dir


@pytest.fixture
def sample_config_service(sample_config_dir: Path) -> ConfigService:
    """Return a ConfigService wired to the temporary configuration."""

    return ConfigService(config_dir=sample_config_dir)


@pytest.fixture
def sensors() -> set[Sensor]:
    return {
        Sensor("door", SensorType.DOOR),
        Sensor("window", SensorType.WINDOW),
        Sensor("motion", SensorType.MOTION),
    }


@pytest.fixture
def repository() -> MagicMock:
    repo = MagicMock(spec=SecurityRepository)
    repo.get_sensors.return_value = set()
    return repo


@pytest.fixture
def image_classifier() -> MagicMock:
    return MagicMock(spec=ImageClassifier)


@pytest.fixture
def status_listener() -> MagicMock:
    return MagicMock(spec=StatusListener)
