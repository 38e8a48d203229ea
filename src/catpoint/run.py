"""
CLI entrypoint that wires the security engine from configuration.

The runner seeds an in-memory repository with the configured sensors, applies
arming and sensor changes given on the command line, classifies any image
files passed as arguments and prints the resulting statuses.
"""

from __future__ import annotations

import argparse
import logging
import logging.handlers
from collections.abc import Iterable, Sequence
from pathlib import Path

from .core.config import ConfigError, ConfigService, ConfigSnapshot, ImageSettings
from .core.contracts import ArmingStatus, ImageClassifier, Sensor, StatusListener
from .core.service import SecurityService, SensorNotFoundError
from .modules.data.memory_repository import InMemorySecurityRepository
from .modules.image.decoding import read_image
from .modules.image.fake_classifier import FakeImageClassifier
from .modules.image.yolo_classifier import YoloCatClassifier
from .modules.status.log_listener import LoggingStatusListener

LOGGER = logging.getLogger(__name__)
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _ensure_rotating_file_handler(
    log_file: Path,
    *,
    max_mb: int = 10,
    backup_count: int = 3,
) -> None:
    """Attach a rotating file handler pointed at ``log_file`` if missing."""

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Unable to create log directory %s: %s", log_file.parent, exc)
        return

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            existing = getattr(handler, "baseFilename", None)
            if existing and Path(existing) == log_file.resolve():
                return

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=max_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def configure_logging(
    level: str,
    *,
    log_file: Path | None = None,
    max_mb: int = 10,
    backup_count: int = 3,
) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
    )
    if log_file is not None:
        _ensure_rotating_file_handler(log_file, max_mb=max_mb, backup_count=backup_count)


def build_image_classifier(settings: ImageSettings) -> ImageClassifier:
    """Instantiate the classifier selected in configuration."""
    if settings.classifier == "yolo":
        return YoloCatClassifier(model_path=settings.model_path, cat_labels=settings.cat_labels)
    return FakeImageClassifier(seed=settings.seed)


def build_security_service(
    snapshot: ConfigSnapshot,
    *,
    image_classifier: ImageClassifier | None = None,
    listeners: Iterable[StatusListener] = (),
) -> SecurityService:
    """Create a service backed by an in-memory repository seeded from ``snapshot``."""
    repository = InMemorySecurityRepository(
        sensors=snapshot.build_sensors(),
        arming_status=snapshot.security.arming_status,
        alarm_status=snapshot.security.alarm_status,
    )
    service = SecurityService(
        repository,
        image_classifier or build_image_classifier(snapshot.image),
        confidence_threshold=snapshot.image.confidence_threshold,
    )
    for listener in listeners:
        service.add_status_listener(listener)
    return service


def find_sensor(service: SecurityService, name: str) -> Sensor:
    for sensor in service.get_sensors():
        if sensor.name == name:
            return sensor
    raise SensorNotFoundError(name)


def run_session(
    service: SecurityService,
    *,
    arming_status: ArmingStatus | None = None,
    activate: Sequence[str] = (),
    deactivate: Sequence[str] = (),
    images: Sequence[Path] = (),
) -> None:
    """Apply arming, sensor changes and image checks in that order."""
    if arming_status is not None:
        service.set_arming_status(arming_status)
    for name in activate:
        service.change_sensor_activation_status(find_sensor(service, name), True)
    for name in deactivate:
        service.change_sensor_activation_status(find_sensor(service, name), False)
    for path in images:
        LOGGER.info("Processing image %s", path)
        service.process_image(read_image(path))


def render_summary(service: SecurityService) -> str:
    lines = [
        f"Arming status: {service.get_arming_status().value} "
        f"({service.get_arming_status().description})",
        f"Alarm status: {service.get_alarm_status().value} "
        f"({service.get_alarm_status().description})",
    ]
    for sensor in sorted(service.get_sensors(), key=lambda item: item.name):
        state = "active" if sensor.active else "inactive"
        lines.append(f"  {sensor.name} [{sensor.sensor_type.value}]: {state}")
    return "\n".join(lines)


def parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Catpoint security controller runner.")
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory that contains config.yaml (default: repo config/).",
    )
    parser.add_argument(
        "--arm",
        choices=[status.value for status in ArmingStatus],
        default=None,
        help="Arming status to apply before processing sensors and images.",
    )
    parser.add_argument(
        "--activate",
        action="append",
        default=[],
        metavar="SENSOR",
        help="Name of a sensor to activate (repeatable).",
    )
    parser.add_argument(
        "--deactivate",
        action="append",
        default=[],
        metavar="SENSOR",
        help="Name of a sensor to deactivate (repeatable).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Python logging level (default: value from config, else INFO).",
    )
    parser.add_argument(
        "images",
        nargs="*",
        type=Path,
        help="Image files to run through the cat classifier.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        snapshot = ConfigService(config_dir=args.config_dir).snapshot
    except ConfigError as exc:
        configure_logging(args.log_level or "INFO")
        LOGGER.error("Configuration failed: %s", exc)
        return 2
    configure_logging(
        args.log_level or snapshot.logging.level,
        log_file=snapshot.logging.file,
        max_mb=snapshot.logging.max_mb,
        backup_count=snapshot.logging.backup_count,
    )
    try:
        service = build_security_service(snapshot, listeners=[LoggingStatusListener()])
        run_session(
            service,
            arming_status=ArmingStatus.parse(args.arm) if args.arm else None,
            activate=args.activate,
            deactivate=args.deactivate,
            images=args.images,
        )
    except KeyboardInterrupt:
        LOGGER.info("Interrupted by user.")
        return 0
    except SensorNotFoundError as exc:
        LOGGER.error("%s", exc)
        return 2
    except Exception:  # pragma: no cover - surfaced to operator
        LOGGER.exception("Catpoint runner crashed.")
        return 1
    print(render_summary(service))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())


__all__ = [
    "build_image_classifier",
    "build_security_service",
    "main",
    "render_summary",
    "run_session",
]
