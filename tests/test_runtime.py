"""Tests for the reporter runtime."""

from __future__ import annotations

import asyncio
import io
import json
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from windreport.core.config import ReporterConfig, save_config
from windreport.core.events import EventBus, EventType
from windreport.core.state import (
    DEFAULT_WIND_DIRECTION_PATH,
    DEFAULT_WIND_SPEED_PATH,
    POSITION_PATH,
)
from windreport.reporting.scheduler import SubmissionOutcome
from windreport.runtime import Reporter
from windreport.telemetry.source import JsonLinesDeltaSource

if TYPE_CHECKING:
    from conftest import FakeTransport


def delta_stream() -> io.StringIO:
    """A recorded log holding one complete window."""
    values = [
        (POSITION_PATH, {"latitude": 60.1, "longitude": 24.9}),
        (DEFAULT_WIND_SPEED_PATH, 3.0),
        (DEFAULT_WIND_SPEED_PATH, 4.0),
        (DEFAULT_WIND_SPEED_PATH, 2.0),
        (DEFAULT_WIND_DIRECTION_PATH, 1.5707963267948966),
    ]
    lines = []
    for path, value in values:
        update = {"$source": "log", "values": [{"path": path, "value": value}]}
        lines.append(json.dumps({"updates": [update]}) + "\n")
    return io.StringIO("".join(lines))


class TestReporter:
    """Tests for Reporter."""

    def test_creation(self, config: ReporterConfig, transport: FakeTransport) -> None:
        """Reporter wires engine, submitter and status together."""
        reporter = Reporter(config, transport=transport, event_bus=EventBus())
        assert reporter.config is config
        assert reporter.running is False
        assert reporter.submitter.last_outcome is None
        assert reporter.status.status == "Waiting for data"

    def test_from_file(
        self, tmp_path: Path, config: ReporterConfig, transport: FakeTransport
    ) -> None:
        """Reporter can be created from a config file."""
        path = tmp_path / "reporter.yaml"
        save_config(config, path)
        reporter = Reporter.from_file(path, transport=transport)
        assert reporter.config.station_id == 1234

    @pytest.mark.asyncio
    async def test_run_with_flush(
        self, config: ReporterConfig, transport: FakeTransport
    ) -> None:
        """Replaying a log and flushing submits one report."""
        bus = EventBus()
        reporter = Reporter(config, transport=transport, event_bus=bus)
        source = JsonLinesDeltaSource(
            delta_stream(), reporter.engine.apply, reporter.engine.paths
        )

        await reporter.run(source, flush=True)

        assert reporter.submitter.last_outcome is SubmissionOutcome.SUBMITTED
        assert len(transport.records) == 1
        (observation,) = transport.records[0].observations
        assert (observation.wind, observation.gust, observation.winddir) == (
            3.0,
            4.0,
            90,
        )
        assert reporter.running is False

        (start,) = bus.get_history(event_type=EventType.REPORTER_START)
        assert start.message == "Submitting weather report every 5 minutes"
        assert len(bus.get_history(event_type=EventType.REPORTER_STOP)) == 1

    @pytest.mark.asyncio
    async def test_run_without_flush(
        self, config: ReporterConfig, transport: FakeTransport
    ) -> None:
        """Without flushing, a short log ends before the first tick."""
        reporter = Reporter(config, transport=transport, event_bus=EventBus())
        source = JsonLinesDeltaSource(
            delta_stream(), reporter.engine.apply, reporter.engine.paths
        )

        await reporter.run(source)

        assert transport.records == []
        assert reporter.engine.is_ready()

    @pytest.mark.asyncio
    async def test_request_stop(
        self, config: ReporterConfig, transport: FakeTransport
    ) -> None:
        """Without a source the reporter runs until asked to stop."""
        reporter = Reporter(config, transport=transport, event_bus=EventBus())
        task = asyncio.create_task(reporter.run())
        while not reporter.running:
            await asyncio.sleep(0)

        reporter.request_stop()
        await asyncio.wait_for(task, timeout=5)
        assert reporter.running is False

    @pytest.mark.asyncio
    async def test_owned_transport_closed(self, config: ReporterConfig) -> None:
        """Stopping releases the transport the reporter created."""
        reporter = Reporter(config, event_bus=EventBus())
        reporter.start()
        assert reporter.running
        await reporter.stop()
        assert reporter.running is False
