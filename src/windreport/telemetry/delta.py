"""Signal K delta parsing and path resolution.

Deltas arrive from the telemetry subscription in the Signal K shape::

    {"updates": [{"$source": "gps1", "values": [{"path": ..., "value": ...}]}]}

This module turns them into flat :class:`TelemetryUpdate` records whose
``kind`` is resolved once here, so the aggregation engine only ever
dispatches on :class:`TelemetryKind`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from windreport.core.state import (
    APPARENT_ANGLE_PATH,
    DEFAULT_WIND_DIRECTION_PATH,
    DEFAULT_WIND_SPEED_PATH,
    HEADING_PATH,
    POSITION_PATH,
    TelemetryKind,
    TelemetryUpdate,
)

if TYPE_CHECKING:
    from windreport.core.config import ReporterConfig

logger = logging.getLogger(__name__)

POLL_INTERVAL = 1.0  # seconds between subscription updates


@dataclass(frozen=True)
class PathResolver:
    """Maps Signal K paths to telemetry kinds.

    Attributes:
        wind_speed_path: Configured wind-speed path.
        wind_direction_path: Configured wind-direction path.
    """

    wind_speed_path: str = DEFAULT_WIND_SPEED_PATH
    wind_direction_path: str = DEFAULT_WIND_DIRECTION_PATH

    @classmethod
    def from_config(cls, config: ReporterConfig) -> PathResolver:
        """Create a resolver for the configured wind paths."""
        return cls(
            wind_speed_path=config.wind_speed_path,
            wind_direction_path=config.wind_direction_path,
        )

    def resolve(self, path: str) -> TelemetryKind:
        """Resolve a path to its telemetry kind."""
        if path == POSITION_PATH:
            return TelemetryKind.POSITION
        if path == self.wind_speed_path:
            return TelemetryKind.WIND_SPEED
        if path == self.wind_direction_path:
            return TelemetryKind.WIND_DIRECTION
        if path == HEADING_PATH:
            return TelemetryKind.HEADING
        if path == APPARENT_ANGLE_PATH:
            return TelemetryKind.APPARENT_ANGLE
        return TelemetryKind.UNKNOWN

    def subscription_paths(self) -> list[str]:
        """Paths the reporter subscribes to, in subscription order."""
        return [
            POSITION_PATH,
            self.wind_direction_path,
            self.wind_speed_path,
            HEADING_PATH,
            APPARENT_ANGLE_PATH,
        ]

    def subscription(self, period: float = POLL_INTERVAL) -> dict[str, Any]:
        """Signal K subscription message for the own vessel.

        Args:
            period: Update period in seconds.

        Returns:
            Subscription request body.
        """
        return {
            "context": "vessels.self",
            "subscribe": [
                {"path": path, "period": int(period * 1000)}
                for path in self.subscription_paths()
            ],
        }


def _source_label(update: dict[str, Any]) -> str | None:
    source = update.get("$source")
    if isinstance(source, str):
        return source
    detail = update.get("source")
    if isinstance(detail, dict) and isinstance(detail.get("label"), str):
        return detail["label"]
    return None


def parse_delta(
    message: Any,
    resolver: PathResolver | None = None,
) -> list[TelemetryUpdate]:
    """Flatten a Signal K delta into telemetry updates.

    Malformed messages and entries are skipped; a message with no usable
    values yields an empty list.

    Args:
        message: Decoded delta message.
        resolver: Path resolver; defaults to the standard wind paths.

    Returns:
        Updates in message order.
    """
    resolver = resolver or PathResolver()
    if not isinstance(message, dict):
        return []
    updates = message.get("updates")
    if not isinstance(updates, list):
        return []

    result: list[TelemetryUpdate] = []
    for update in updates:
        if not isinstance(update, dict):
            continue
        values = update.get("values")
        if not isinstance(values, list):
            continue
        source = _source_label(update)
        for entry in values:
            if not isinstance(entry, dict) or not isinstance(entry.get("path"), str):
                logger.debug("Skipping malformed delta value: %r", entry)
                continue
            if "value" not in entry:
                continue
            path = entry["path"]
            result.append(
                TelemetryUpdate(
                    path=path,
                    value=entry["value"],
                    source=source,
                    kind=resolver.resolve(path),
                )
            )
    return result
