"""Reporter runtime: wires the engine to its timers and transport.

The runtime owns one :class:`AggregationEngine` and drives it from a single
asyncio event loop:

- telemetry updates are applied synchronously as they arrive
- the submission timer fires every ``submit_interval`` minutes
- the status timer fires every ``status_interval`` seconds

Both timers are APScheduler interval jobs limited to one running instance,
so a slow submission never overlaps the next one.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from windreport.aggregation.engine import AggregationEngine
from windreport.core.config import ReporterConfig, load_config
from windreport.core.events import EventBus, EventType, get_event_bus
from windreport.reporting.scheduler import SubmissionOutcome, SubmissionScheduler
from windreport.reporting.status import StatusReporter
from windreport.reporting.transport import WindyTransport

if TYPE_CHECKING:
    from windreport.reporting.scheduler import Submitter
    from windreport.telemetry.source import JsonLinesDeltaSource
    from windreport.telemetry.store import SelfDataStore

logger = logging.getLogger(__name__)

SUBMIT_JOB_ID = "submit"
STATUS_JOB_ID = "status"


class Reporter:
    """A running weather reporter for one vessel."""

    def __init__(
        self,
        config: ReporterConfig,
        *,
        transport: Submitter | None = None,
        event_bus: EventBus | None = None,
        store: SelfDataStore | None = None,
    ) -> None:
        """Initialize reporter.

        Args:
            config: Validated reporter configuration.
            transport: Submission transport; an httpx transport for the
                configured API is created if omitted.
            event_bus: Bus for reporter events; the global bus if omitted.
            store: Latest-value store shared with the telemetry host.
        """
        self._config = config
        self._event_bus = event_bus or get_event_bus()
        self._owned_transport: WindyTransport | None = None
        if transport is None:
            self._owned_transport = WindyTransport(
                config.api_key.get_secret_value(),
                base_url=config.api_base,
                timeout=config.request_timeout,
            )
            transport = self._owned_transport

        self.engine = AggregationEngine.from_config(config, store)
        self.submitter = SubmissionScheduler(
            self.engine, transport, config, event_bus=self._event_bus
        )
        self.status = StatusReporter(self.engine, event_bus=self._event_bus)

        self._timers: AsyncIOScheduler | None = None
        self._stop_requested: asyncio.Event | None = None
        self._source: JsonLinesDeltaSource | None = None

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        transport: Submitter | None = None,
        event_bus: EventBus | None = None,
    ) -> Reporter:
        """Create a reporter from a YAML or JSON configuration file."""
        return cls(load_config(path), transport=transport, event_bus=event_bus)

    @property
    def config(self) -> ReporterConfig:
        """Reporter configuration."""
        return self._config

    @property
    def running(self) -> bool:
        """Whether the timers are active."""
        return self._timers is not None and self._timers.running

    def start(self) -> None:
        """Start both timers on the running event loop.

        Raises:
            RuntimeError: If called outside a running event loop.
        """
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._stop_requested = asyncio.Event()
        self._timers = AsyncIOScheduler(event_loop=loop)
        self._timers.add_job(
            self._submit_tick,
            IntervalTrigger(seconds=self._config.submit_interval_seconds),
            id=SUBMIT_JOB_ID,
            max_instances=1,
            coalesce=True,
        )
        self._timers.add_job(
            self._status_tick,
            IntervalTrigger(seconds=self._config.status_interval),
            id=STATUS_JOB_ID,
            max_instances=1,
            coalesce=True,
        )
        self._timers.start()

        minutes = self._config.submit_interval
        message = f"Submitting weather report every {minutes:g} minutes"
        logger.info("%s", message)
        self._event_bus.emit_simple(EventType.REPORTER_START, "reporter", message)

    async def _submit_tick(self) -> SubmissionOutcome:
        return await self.submitter.tick()

    async def _status_tick(self) -> str:
        # Async so APScheduler runs it on the loop rather than a worker thread.
        return self.status.tick()

    def request_stop(self) -> None:
        """Ask :meth:`run` to return."""
        if self._stop_requested is not None:
            self._stop_requested.set()
        if self._source is not None:
            self._source.stop()

    async def stop(self) -> None:
        """Cancel both timers and release the transport."""
        if self._timers is not None and self._timers.running:
            self._timers.shutdown(wait=False)
            logger.info("Reporter stopped")
            self._event_bus.emit_simple(
                EventType.REPORTER_STOP, "reporter", "Reporter stopped"
            )
        self._timers = None
        if self._owned_transport is not None:
            await self._owned_transport.close()
            self._owned_transport = None

    async def run(
        self,
        source: JsonLinesDeltaSource | None = None,
        *,
        flush: bool = False,
    ) -> None:
        """Run until the telemetry source ends or a stop is requested.

        Args:
            source: Telemetry source feeding the engine; without one the
                reporter waits for :meth:`request_stop`.
            flush: Run one last submission tick before stopping.
        """
        self.start()
        self._source = source
        try:
            if source is not None:
                await source.run()
            elif self._stop_requested is not None:
                await self._stop_requested.wait()
            if flush:
                await self.submitter.tick()
        finally:
            self._source = None
            await self.stop()
