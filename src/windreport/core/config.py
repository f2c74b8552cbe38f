"""Pydantic configuration model for the wind reporter.

Configuration is loaded from YAML or JSON files. Option names used by the
Signal K plugin settings screen (``apiKey``, ``submitInterval``,
``GpsSource``...) are accepted as aliases of the snake_case field names so
existing plugin settings can be pasted in unchanged.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
)

from windreport.core.state import (
    DEFAULT_WIND_DIRECTION_PATH,
    DEFAULT_WIND_SPEED_PATH,
)
from windreport.exceptions import ConfigurationError

DEFAULT_API_BASE = "https://stations.windy.com/pws/update/"


class ReporterConfig(BaseModel):
    """Top-level reporter configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Station API
    api_key: SecretStr = Field(
        validation_alias=AliasChoices("api_key", "apiKey"),
        description="API key obtained from stations.windy.com",
    )
    api_base: str = DEFAULT_API_BASE
    request_timeout: Annotated[float, Field(gt=0)] = 30.0  # seconds

    # Schedule
    submit_interval: Annotated[
        float,
        Field(
            gt=0,
            validation_alias=AliasChoices("submit_interval", "submitInterval"),
            description="Submission interval in minutes",
        ),
    ] = 5.0
    status_interval: Annotated[float, Field(gt=0)] = 10.0  # seconds

    # Station metadata
    station_id: Annotated[
        int,
        Field(ge=0, validation_alias=AliasChoices("station_id", "stationId")),
    ]
    vessel_name: str = Field(
        default="", validation_alias=AliasChoices("vessel_name", "name")
    )
    provider: str = ""
    url: str = ""
    elevation: float = 1.0  # metres

    # Telemetry
    gps_source: str | None = Field(
        default=None,
        validation_alias=AliasChoices("gps_source", "GpsSource"),
        description="Only accept positions from this source",
    )
    wind_speed_path: str = Field(
        default=DEFAULT_WIND_SPEED_PATH,
        validation_alias=AliasChoices("wind_speed_path", "WindSpeedPath"),
    )
    wind_direction_path: str = Field(
        default=DEFAULT_WIND_DIRECTION_PATH,
        validation_alias=AliasChoices("wind_direction_path", "WindDirectionPath"),
    )
    calculate_direction: bool = Field(
        default=False,
        validation_alias=AliasChoices("calculate_direction", "Calc"),
        description="Derive direction from heading and apparent wind angle",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: SecretStr) -> SecretStr:
        """Reject blank API keys."""
        if not v.get_secret_value().strip():
            msg = "API key is required"
            raise ValueError(msg)
        return v

    @field_validator("gps_source", mode="before")
    @classmethod
    def blank_source_is_none(cls, v: Any) -> Any:
        """Treat an empty source filter as no filter."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("wind_speed_path", "wind_direction_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Ensure telemetry paths are non-empty."""
        v = v.strip()
        if not v:
            msg = "Telemetry path cannot be empty"
            raise ValueError(msg)
        return v

    @property
    def api_uri(self) -> str:
        """Full submission URI: API base followed by the key."""
        return self.api_base + self.api_key.get_secret_value()

    @property
    def submit_interval_seconds(self) -> float:
        """Submission interval in seconds."""
        return self.submit_interval * 60


def validate_config(data: dict[str, Any]) -> ReporterConfig:
    """Validate configuration data without loading from file.

    Args:
        data: Configuration dictionary.

    Returns:
        Validated ReporterConfig object.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    try:
        return ReporterConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


def load_config(path: str | Path) -> ReporterConfig:
    """Load reporter configuration from YAML or JSON file.

    Args:
        path: Path to configuration file.

    Returns:
        Validated ReporterConfig object.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigurationError: If the file cannot be parsed or is invalid.
    """
    path = Path(path)

    if not path.exists():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        try:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            msg = f"Cannot parse {path}: {e}"
            raise ConfigurationError(msg) from e

    if not isinstance(data, dict):
        msg = f"Configuration in {path} must be a mapping"
        raise ConfigurationError(msg)

    return validate_config(data)


def save_config(config: ReporterConfig, path: str | Path) -> None:
    """Save reporter configuration to YAML or JSON file.

    The API key is written in clear text.

    Args:
        config: Configuration to save.
        path: Output file path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_none=True)
    data["api_key"] = config.api_key.get_secret_value()

    with path.open("w") as f:
        if path.suffix in (".yaml", ".yml"):
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)
