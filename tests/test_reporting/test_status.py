"""Tests for the status line."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from windreport.aggregation.engine import AggregationEngine
from windreport.core.events import EventBus, EventType
from windreport.core.state import (
    DEFAULT_WIND_DIRECTION_PATH,
    DEFAULT_WIND_SPEED_PATH,
)
from windreport.reporting.status import WAITING_MESSAGE, StatusReporter, time_since

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


class TestTimeSince:
    """Tests for time_since."""

    @pytest.mark.parametrize(
        ("delta", "expected"),
        [
            (timedelta(seconds=0), "0 seconds"),
            (timedelta(seconds=1), "1 second"),
            (timedelta(seconds=45), "45 seconds"),
            (timedelta(seconds=60), "1 minute"),
            (timedelta(minutes=5, seconds=59), "5 minutes"),
            (timedelta(hours=1), "1 hour"),
            (timedelta(hours=23), "23 hours"),
            (timedelta(days=2), "2 days"),
            (timedelta(days=30), "1 month"),
            (timedelta(days=400), "1 year"),
        ],
    )
    def test_units(self, delta: timedelta, expected: str) -> None:
        """Largest whole unit is used."""
        assert time_since(NOW - delta, NOW) == expected

    def test_future_is_zero(self) -> None:
        """Times in the future count as no time."""
        assert time_since(NOW + timedelta(minutes=1), NOW) == "0 seconds"


class TestStatusReporter:
    """Tests for StatusReporter."""

    def test_waiting(self, engine: AggregationEngine) -> None:
        """Nothing collected yet."""
        reporter = StatusReporter(engine, clock=lambda: NOW)
        assert reporter.render() == WAITING_MESSAGE
        assert reporter.status == WAITING_MESSAGE

    def test_wind_without_direction(self, engine: AggregationEngine) -> None:
        """Unknown direction is spelled out."""
        engine.on_update(DEFAULT_WIND_SPEED_PATH, 5.0)
        engine.on_update(DEFAULT_WIND_SPEED_PATH, 3.25)
        reporter = StatusReporter(engine, clock=lambda: NOW)
        assert reporter.render() == (
            "Wind speed is 3.25m/s and max gust is 5.0m/s. Direction is unknown."
        )

    def test_full_status(self, ready_engine: AggregationEngine) -> None:
        """Last success is reported before the wind."""
        snapshot = ready_engine.snapshot()
        assert snapshot is not None
        ready_engine.complete_submission(snapshot, NOW - timedelta(minutes=3))
        ready_engine.on_update(DEFAULT_WIND_SPEED_PATH, 6.0)
        ready_engine.on_update(DEFAULT_WIND_DIRECTION_PATH, 0.0)

        reporter = StatusReporter(ready_engine, clock=lambda: NOW)
        assert reporter.render() == (
            "Successful submission 3 minutes ago. "
            "Wind speed is 6.0m/s and max gust is 6.0m/s. Direction is 0."
        )

    def test_success_only(self, ready_engine: AggregationEngine) -> None:
        """After a submission with no new samples only the success shows."""
        snapshot = ready_engine.snapshot()
        assert snapshot is not None
        ready_engine.complete_submission(snapshot, NOW - timedelta(hours=2))
        reporter = StatusReporter(ready_engine, clock=lambda: NOW)
        assert reporter.render() == "Successful submission 2 hours ago."

    def test_tick_publishes(self, ready_engine: AggregationEngine) -> None:
        """Tick stores the status and emits it."""
        bus = EventBus()
        reporter = StatusReporter(ready_engine, event_bus=bus, clock=lambda: NOW)
        status = reporter.tick()

        assert reporter.status == status
        (event,) = bus.get_history(event_type=EventType.STATUS_UPDATE)
        assert event.message == status

    def test_render_does_not_modify(self, ready_engine: AggregationEngine) -> None:
        """Rendering leaves the window untouched."""
        StatusReporter(ready_engine, clock=lambda: NOW).tick()
        assert ready_engine.is_ready()
        assert ready_engine.sample_count == 3
