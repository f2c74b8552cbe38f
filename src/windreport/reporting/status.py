"""Human-readable status line for the reporter."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from windreport.core.events import EventBus, EventType, get_event_bus

if TYPE_CHECKING:
    from windreport.aggregation.engine import AggregationEngine

WAITING_MESSAGE = "Waiting for data"

# Largest unit first; months and years use fixed 30- and 365-day lengths.
_TIME_UNITS: tuple[tuple[str, int], ...] = (
    ("year", 31_536_000),
    ("month", 2_592_000),
    ("day", 86_400),
    ("hour", 3_600),
    ("minute", 60),
)


def time_since(then: datetime, now: datetime | None = None) -> str:
    """Describe elapsed time using the largest whole unit.

    Args:
        then: Start of the interval.
        now: End of the interval (defaults to current UTC time).

    Returns:
        Text such as ``"5 minutes"`` or ``"1 day"``.
    """
    now = now or datetime.now(UTC)
    seconds = max(int((now - then).total_seconds()), 0)
    for unit, length in _TIME_UNITS:
        count = seconds // length
        if count >= 1:
            return f"{count} {unit}{'' if count == 1 else 's'}"
    return f"{seconds} second{'' if seconds == 1 else 's'}"


class StatusReporter:
    """Renders the status line from the engine without modifying it."""

    def __init__(
        self,
        engine: AggregationEngine,
        *,
        event_bus: EventBus | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._engine = engine
        self._event_bus = event_bus or get_event_bus()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._status = WAITING_MESSAGE

    @property
    def status(self) -> str:
        """Most recently published status line."""
        return self._status

    def render(self) -> str:
        """Build the status line for the current state."""
        engine = self._engine
        parts: list[str] = []
        if engine.last_success is not None:
            since = time_since(engine.last_success, self._clock())
            parts.append(f"Successful submission {since} ago.")
        if engine.latest_speed is not None and engine.gust is not None:
            direction = engine.direction if engine.direction is not None else "unknown"
            parts.append(
                f"Wind speed is {engine.latest_speed}m/s and max gust is "
                f"{engine.gust}m/s. Direction is {direction}."
            )
        return " ".join(parts) or WAITING_MESSAGE

    def tick(self) -> str:
        """Render and publish the status line."""
        self._status = self.render()
        self._event_bus.emit_simple(
            EventType.STATUS_UPDATE,
            source="status",
            message=self._status,
        )
        return self._status
