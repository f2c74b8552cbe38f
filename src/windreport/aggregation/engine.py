"""Aggregation engine: the state of one submission window.

The engine owns everything collected between two successful submissions:

1. Latest position (optionally restricted to one source)
2. Wind-speed samples and gust (SampleBuffer)
3. Latest true wind direction (DirectionResolver)
4. Time of the last successful submission

Telemetry enters through :meth:`AggregationEngine.on_update`. All state is
mutated on the caller's event loop only; the submission tick reads it with
:meth:`AggregationEngine.snapshot` and settles it with
:meth:`AggregationEngine.complete_submission`.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from windreport.aggregation.buffer import SampleBuffer
from windreport.aggregation.direction import (
    DirectionMode,
    DirectionResolver,
    as_number,
)
from windreport.core.state import (
    Position,
    TelemetryKind,
    TelemetryUpdate,
    WindowPhase,
    WindowSnapshot,
)
from windreport.telemetry.delta import PathResolver
from windreport.telemetry.store import SelfDataStore

if TYPE_CHECKING:
    from windreport.core.config import ReporterConfig

logger = logging.getLogger(__name__)


def _parse_position(value: Any) -> Position | None:
    if not isinstance(value, dict):
        return None
    lat = as_number(value.get("latitude"))
    lon = as_number(value.get("longitude"))
    if lat is None or lon is None:
        return None
    return Position(latitude=lat, longitude=lon)


class AggregationEngine:
    """Accumulates telemetry for the current submission window.

    The window moves through three phases: EMPTY (nothing collected),
    PARTIAL (some of position/speed/direction present) and READY (all three
    present). A successful submission returns it to EMPTY.
    """

    def __init__(
        self,
        *,
        gps_source: str | None = None,
        direction_mode: DirectionMode = DirectionMode.DIRECT,
        resolver: PathResolver | None = None,
        store: SelfDataStore | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            gps_source: Only accept positions from this source, if set.
            direction_mode: Direct sensor or computed from heading + AWA.
            resolver: Path-to-kind resolver for incoming updates.
            store: Latest-value store shared with the host; a private one is
                created if omitted.
        """
        self._gps_source = gps_source
        self._paths = resolver or PathResolver()
        self._store = store if store is not None else SelfDataStore()
        self._direction_resolver = DirectionResolver(direction_mode, self._store.value)
        self._buffer = SampleBuffer()

        self._position: Position | None = None
        self._direction: int | None = None
        self._last_success: datetime | None = None

        # Monotonic counter of window mutations, used to detect updates that
        # arrive while a submission is in flight.
        self._generation = 0
        self._position_generation = 0
        self._direction_generation = 0

    @classmethod
    def from_config(
        cls,
        config: ReporterConfig,
        store: SelfDataStore | None = None,
    ) -> AggregationEngine:
        """Create an engine from reporter configuration."""
        return cls(
            gps_source=config.gps_source,
            direction_mode=(
                DirectionMode.COMPUTED
                if config.calculate_direction
                else DirectionMode.DIRECT
            ),
            resolver=PathResolver.from_config(config),
            store=store,
        )

    # =========================================================================
    # Read-only view
    # =========================================================================

    @property
    def position(self) -> Position | None:
        """Latest accepted position."""
        return self._position

    @property
    def direction(self) -> int | None:
        """Latest true wind direction in whole degrees."""
        return self._direction

    @property
    def gust(self) -> float | None:
        """Largest wind-speed sample of the window."""
        return self._buffer.gust

    @property
    def latest_speed(self) -> float | None:
        """Most recent wind-speed sample."""
        return self._buffer.latest

    @property
    def samples(self) -> tuple[float, ...]:
        """Wind-speed samples of the window in arrival order."""
        return self._buffer.samples

    @property
    def sample_count(self) -> int:
        """Number of wind-speed samples in the window."""
        return len(self._buffer)

    @property
    def last_success(self) -> datetime | None:
        """Time of the last acknowledged submission."""
        return self._last_success

    @property
    def direction_mode(self) -> DirectionMode:
        """How wind direction is resolved."""
        return self._direction_resolver.mode

    @property
    def store(self) -> SelfDataStore:
        """Latest-value store fed by every update."""
        return self._store

    @property
    def paths(self) -> PathResolver:
        """Path resolver used for incoming updates."""
        return self._paths

    @property
    def phase(self) -> WindowPhase:
        """Current window phase."""
        present = sum(
            (
                self._position is not None,
                not self._buffer.is_empty(),
                self._direction is not None,
            )
        )
        if present == 0:
            return WindowPhase.EMPTY
        if present == 3:
            return WindowPhase.READY
        return WindowPhase.PARTIAL

    def is_ready(self) -> bool:
        """Whether position, at least one speed sample and direction are set."""
        return (
            self._position is not None
            and not self._buffer.is_empty()
            and self._direction is not None
        )

    def missing_fields(self) -> list[str]:
        """Names of the report fields still missing, in report order."""
        missing = []
        if self._position is None:
            missing.append("position")
        if self._buffer.is_empty():
            missing.append("speed")
        if self._direction is None:
            missing.append("direction")
        return missing

    # =========================================================================
    # Telemetry input
    # =========================================================================

    def on_update(self, path: str, value: Any, source: str | None = None) -> None:
        """Apply one path/value/source delta."""
        self.apply(
            TelemetryUpdate(
                path=path,
                value=value,
                source=source,
                kind=self._paths.resolve(path),
            )
        )

    def apply(self, update: TelemetryUpdate) -> None:
        """Apply a resolved telemetry update.

        Unknown paths and malformed values are ignored.
        """
        self._store.update(update.path, update.value, update.source)

        match update.kind:
            case TelemetryKind.POSITION:
                self.apply_position_update(update.value, update.source)
            case TelemetryKind.WIND_SPEED:
                self.apply_speed_update(update.value)
            case TelemetryKind.WIND_DIRECTION:
                self.apply_direction_update(update.value)
            case TelemetryKind.HEADING | TelemetryKind.APPARENT_ANGLE:
                # Read on demand from the store when a speed sample arrives.
                pass
            case _:
                logger.debug("Unknown path: %s", update.path)

    def apply_position_update(self, value: Any, source: str | None = None) -> None:
        """Overwrite the position unless filtered out by source."""
        if self._gps_source and source != self._gps_source:
            logger.debug("Ignoring position from source %s", source)
            return
        position = _parse_position(value)
        if position is None:
            logger.debug("Ignoring malformed position: %r", value)
            return
        self._position = position
        self._position_generation = self._bump()

    def apply_speed_update(self, value: Any) -> None:
        """Add a wind-speed sample; recompute direction in computed mode."""
        speed = as_number(value)
        if speed is None:
            logger.debug("Ignoring unusable wind speed: %r", value)
            return
        self._buffer.add_sample(speed)
        self._bump()

        if self._direction_resolver.computed:
            direction = self._direction_resolver.resolve_computed()
            if direction is not None:
                self._set_direction(direction)

    def apply_direction_update(self, value: Any) -> None:
        """Store a direction-sensor reading (direct mode only)."""
        if self._direction_resolver.computed:
            return
        direction = self._direction_resolver.resolve_direct(value)
        if direction is None:
            logger.debug("Ignoring unusable wind direction: %r", value)
            return
        self._set_direction(direction)

    def _set_direction(self, direction: int) -> None:
        self._direction = direction
        self._direction_generation = self._bump()

    def _bump(self) -> int:
        self._generation += 1
        return self._generation

    # =========================================================================
    # Submission support
    # =========================================================================

    def snapshot(self) -> WindowSnapshot | None:
        """Read and reduce the window for submission.

        Returns:
            Snapshot of the window, or None if it is not ready.
        """
        if self._position is None or self._direction is None:
            return None
        if self._buffer.is_empty():
            return None
        wind, gust = self._buffer.reduce()
        return WindowSnapshot(
            position=self._position,
            wind=wind,
            gust=gust,
            direction=self._direction,
            sample_count=len(self._buffer),
            generation=self._generation,
        )

    def complete_submission(
        self,
        snapshot: WindowSnapshot,
        when: datetime | None = None,
    ) -> None:
        """Settle the window after the station API acknowledged a snapshot.

        Updates that arrived while the submission was in flight are kept for
        the next window; everything the snapshot consumed is cleared.

        Args:
            snapshot: The snapshot that was submitted.
            when: Time of the acknowledgment (defaults to now).
        """
        self._last_success = when or datetime.now(UTC)

        if self._generation == snapshot.generation:
            self.reset()
            return

        self._buffer.discard(snapshot.sample_count)
        if self._position_generation <= snapshot.generation:
            self._position = None
        if self._direction_generation <= snapshot.generation:
            self._direction = None
        logger.debug(
            "Kept %d samples received during submission", len(self._buffer)
        )

    def reset(self) -> None:
        """Clear position, samples, gust and direction.

        The time of the last successful submission is kept.
        """
        self._position = None
        self._direction = None
        self._buffer.clear()
