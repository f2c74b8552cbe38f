"""Value types shared across the reporter.

This module defines the data that flows through the reporter:

- TelemetryKind / TelemetryUpdate: one resolved telemetry delta
- Position: latest vessel position
- WindowSnapshot: what a submission tick read from the current window
- StationRecord / Observation / SubmissionRecord: the outgoing report
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

POSITION_PATH = "navigation.position"
HEADING_PATH = "navigation.headingTrue"
APPARENT_ANGLE_PATH = "environment.wind.angleApparent"
DEFAULT_WIND_SPEED_PATH = "environment.wind.speedOverGround"
DEFAULT_WIND_DIRECTION_PATH = "environment.wind.angleTrueGround"

SHARE_OPTION_OPEN = "Open"
STATION_TYPE = "Signal K Windy Plugin"


class TelemetryKind(str, Enum):
    """Known telemetry streams consumed by the aggregation engine."""

    POSITION = "position"
    WIND_SPEED = "wind_speed"
    WIND_DIRECTION = "wind_direction"
    HEADING = "heading"
    APPARENT_ANGLE = "apparent_angle"
    UNKNOWN = "unknown"


class WindowPhase(str, Enum):
    """How much of a report the current window holds."""

    EMPTY = "empty"
    PARTIAL = "partial"
    READY = "ready"


@dataclass(frozen=True)
class TelemetryUpdate:
    """A single path/value/source delta.

    Attributes:
        path: Signal K path of the value.
        value: Raw value (number or object).
        source: Label of the source that produced the value.
        kind: Telemetry kind resolved from the path.
    """

    path: str
    value: Any
    source: str | None = None
    kind: TelemetryKind = TelemetryKind.UNKNOWN


@dataclass(frozen=True)
class Position:
    """Vessel position in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class WindowSnapshot:
    """Immutable view of a ready window taken at submission time.

    Attributes:
        position: Position at the time of the tick.
        wind: Median wind speed in m/s, 2 decimal places.
        gust: Maximum sample of the window in m/s.
        direction: True wind direction in whole degrees.
        sample_count: Number of samples the median was computed from.
        generation: Update counter of the engine when the snapshot was taken.
    """

    position: Position
    wind: float
    gust: float
    direction: int
    sample_count: int
    generation: int


@dataclass(frozen=True)
class StationRecord:
    """Station identity and metadata sent with every report."""

    station: int
    name: str
    provider: str
    url: str
    lat: float
    lon: float
    elevation: float
    share_option: str = SHARE_OPTION_OPEN
    type: str = STATION_TYPE

    def to_dict(self) -> dict[str, Any]:
        """Convert to the station API's JSON shape."""
        return {
            "station": self.station,
            "name": self.name,
            "shareOption": self.share_option,
            "type": self.type,
            "provider": self.provider,
            "url": self.url,
            "lat": self.lat,
            "lon": self.lon,
            "elevation": self.elevation,
        }


@dataclass(frozen=True)
class Observation:
    """One summarized wind observation."""

    station: int
    wind: float
    gust: float
    winddir: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to the station API's JSON shape."""
        return {
            "station": self.station,
            "wind": self.wind,
            "gust": self.gust,
            "winddir": self.winddir,
        }


@dataclass(frozen=True)
class SubmissionRecord:
    """Complete request body for one submission.

    Built at tick time and discarded once the transport call returns.
    """

    stations: tuple[StationRecord, ...]
    observations: tuple[Observation, ...]
    created: datetime | None = field(default=None, compare=False)

    def to_payload(self) -> dict[str, list[dict[str, Any]]]:
        """Convert to the JSON body expected by the station API."""
        return {
            "stations": [station.to_dict() for station in self.stations],
            "observations": [obs.to_dict() for obs in self.observations],
        }
