"""
Dynaconf-powered configuration loader with Pydantic validation.

Layered YAML files are merged by Dynaconf, then mapped section by section into
a strongly typed `ConfigSnapshot` that the runner uses to seed the repository,
pick an image classifier and set up logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from dynaconf import Dynaconf
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .contracts import AlarmStatus, ArmingStatus, Sensor, SensorType
from .service import DEFAULT_CONFIDENCE_THRESHOLD


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    """Case-insensitive dictionary lookup helper."""
    value = raw.get(key) or raw.get(key.upper()) or raw.get(key.lower())
    if isinstance(value, dict):
        return value
    return {}


def _section_list(raw: dict[str, Any], key: str) -> list[dict[str, Any]]:
    """List-aware helper for case-insensitive lookups."""
    value = raw.get(key) or raw.get(key.upper()) or raw.get(key.lower())
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    if isinstance(value, dict):
        return [value]
    return []


def _deep_merge(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries without mutating the originals."""
    result: dict[str, Any] = {**base}
    for key, value in updates.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


CONFIG_FILENAMES = ("config.yaml", "config.local.yaml")
_REPO_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_DIR = _REPO_ROOT / "config"


class ConfigError(RuntimeError):
    """Raised when configuration files are missing or invalid."""


class SecuritySettings(BaseModel):
    """Initial statuses used to seed the repository."""

    model_config = ConfigDict(extra="ignore")

    arming_status: ArmingStatus = Field(default=ArmingStatus.DISARMED)
    alarm_status: AlarmStatus = Field(default=AlarmStatus.NO_ALARM)

    @field_validator("arming_status", mode="before")
    @classmethod
    def _parse_arming(cls, value: Any) -> Any:
        return ArmingStatus.parse(value)

    @field_validator("alarm_status", mode="before")
    @classmethod
    def _parse_alarm(cls, value: Any) -> Any:
        return AlarmStatus.parse(value)

    @model_validator(mode="after")
    def _disarmed_means_no_alarm(self) -> SecuritySettings:
        if (
            self.arming_status is ArmingStatus.DISARMED
            and self.alarm_status is not AlarmStatus.NO_ALARM
        ):
            raise ValueError("A disarmed system must start with alarm_status no_alarm")
        return self


class ImageSettings(BaseModel):
    """Cat classifier selection and tuning."""

    model_config = ConfigDict(extra="ignore")

    classifier: Literal["fake", "yolo"] = Field(default="fake")
    confidence_threshold: float = Field(default=DEFAULT_CONFIDENCE_THRESHOLD, ge=0.0, le=1.0)
    model_path: str | None = Field(default=None)
    cat_labels: list[str] = Field(default_factory=lambda: ["cat"])
    seed: int | None = Field(
        default=None, description="Optional RNG seed for the fake classifier."
    )

    @field_validator("classifier", mode="before")
    @classmethod
    def _normalize_classifier(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("cat_labels")
    @classmethod
    def _require_labels(cls, value: list[str]) -> list[str]:
        labels = [label.strip().lower() for label in value if label.strip()]
        if not labels:
            raise ValueError("cat_labels must contain at least one label")
        return labels


class SensorSettings(BaseModel):
    """Sensor declared in configuration."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    sensor_type: SensorType
    active: bool = Field(default=False)

    @field_validator("sensor_type", mode="before")
    @classmethod
    def _parse_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_sensor(self) -> Sensor:
        return Sensor(name=self.name, sensor_type=self.sensor_type, active=self.active)


class LoggingSettings(BaseModel):
    """Log level and optional rotating log file."""

    model_config = ConfigDict(extra="ignore")

    level: str = Field(default="INFO")
    file: Path | None = Field(default=None)
    max_mb: int = Field(default=10, gt=0)
    backup_count: int = Field(default=3, ge=0)


class ConfigSnapshot(BaseModel):
    """
    Validated, strongly typed view of the merged configuration.
    """

    model_config = ConfigDict(extra="ignore")

    security: SecuritySettings = Field(default_factory=SecuritySettings)
    image: ImageSettings = Field(default_factory=ImageSettings)
    sensors: list[SensorSettings] = Field(default_factory=list)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="after")
    def _unique_sensor_names(self) -> ConfigSnapshot:
        seen: set[str] = set()
        for sensor in self.sensors:
            if sensor.name in seen:
                raise ValueError(f"Duplicate sensor name '{sensor.name}'")
            seen.add(sensor.name)
        return self

    def build_sensors(self) -> list[Sensor]:
        """Create fresh `Sensor` entities for every configured sensor."""
        return [sensor.to_sensor() for sensor in self.sensors]


class ConfigService:
    """
    Runtime facade for loading and validating configuration.
    """

    def __init__(
        self,
        *,
        config_dir: str | Path | None = None,
        settings: Dynaconf | None = None,
    ) -> None:
        self._config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        settings_files = [self._config_dir / name for name in CONFIG_FILENAMES]
        existing_files = [str(path) for path in settings_files if path.exists()]
        if settings is None and not existing_files:
            raise ConfigError(
                f"No configuration files found in {self._config_dir}. "
                "Expected at least config.yaml."
            )

        self._settings = settings or Dynaconf(
            envvar_prefix="CATPOINT",
            settings_files=existing_files,
            load_dotenv=True,
            environments=False,
        )
        self._snapshot = self._build_snapshot()

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def snapshot(self) -> ConfigSnapshot:
        """Latest validated configuration snapshot."""
        return self._snapshot

    def refresh(self) -> ConfigSnapshot:
        """Reload configuration files and rebuild the snapshot."""
        self._settings.reload()
        self._snapshot = self._build_snapshot()
        return self._snapshot

    def apply_changes(self, changes: dict[str, Any]) -> ConfigSnapshot:
        """
        Merge the provided changes into the current configuration snapshot.

        This does not persist the changes to disk.
        """
        raw = self._settings.as_dict()
        merged = _deep_merge(raw, {key.upper(): value for key, value in changes.items()})
        self._snapshot = self._build_snapshot(merged)
        return self._snapshot

    def _build_snapshot(self, raw: dict[str, Any] | None = None) -> ConfigSnapshot:
        data = self._extract_snapshot_data(raw or self._settings.as_dict())
        try:
            return ConfigSnapshot.model_validate(data)
        except ValidationError as exc:
            raise ConfigError("Configuration validation failed") from exc

    def _extract_snapshot_data(self, raw: dict[str, Any]) -> dict[str, Any]:
        return {
            "security": _section(raw, "security"),
            "image": _section(raw, "image"),
            "sensors": _section_list(raw, "sensors"),
            "logging": _section(raw, "logging"),
        }


__all__ = [
    "ConfigError",
    "ConfigService",
    "ConfigSnapshot",
    "ImageSettings",
    "LoggingSettings",
    "SecuritySettings",
    "SensorSettings",
]
