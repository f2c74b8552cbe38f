"""Submission tick: decide, reduce, send, settle.

Each tick of the submission timer:
1. Skips if the window lacks position, speed or direction
2. Snapshots and reduces the window (median speed, gust)
3. Builds the submission record from station metadata and the snapshot
4. Sends it through the transport
5. Settles the window on a 2xx acknowledgment, leaves it untouched otherwise

Failed submissions are not retried. The next tick reports whatever the
window holds by then.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from windreport.core.events import EventBus, EventType, get_event_bus
from windreport.core.state import (
    Observation,
    StationRecord,
    SubmissionRecord,
    WindowSnapshot,
)
from windreport.exceptions import TransportError, TransportStatusError

if TYPE_CHECKING:
    from windreport.aggregation.engine import AggregationEngine
    from windreport.core.config import ReporterConfig
    from windreport.reporting.transport import TransportResponse

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


class Submitter(Protocol):
    """Anything that can deliver a submission record."""

    async def submit(self, record: SubmissionRecord) -> TransportResponse: ...


class SubmissionOutcome(str, Enum):
    """Result of one submission tick."""

    SKIPPED_INCOMPLETE = "skipped_incomplete"
    SKIPPED_BUSY = "skipped_busy"
    SUBMITTED = "submitted"
    FAILED = "failed"


def build_submission_record(
    config: ReporterConfig,
    snapshot: WindowSnapshot,
    created: datetime | None = None,
) -> SubmissionRecord:
    """Assemble the request body for one snapshot.

    Args:
        config: Reporter configuration holding the station metadata.
        snapshot: Reduced window.
        created: Build time, kept for logging only.

    Returns:
        Submission record with one station and one observation.
    """
    station = StationRecord(
        station=config.station_id,
        name=config.vessel_name,
        provider=config.provider,
        url=config.url,
        lat=snapshot.position.latitude,
        lon=snapshot.position.longitude,
        elevation=config.elevation,
    )
    observation = Observation(
        station=config.station_id,
        wind=snapshot.wind,
        gust=snapshot.gust,
        winddir=snapshot.direction,
    )
    return SubmissionRecord(
        stations=(station,),
        observations=(observation,),
        created=created,
    )


class SubmissionScheduler:
    """Runs submission ticks against one aggregation engine."""

    def __init__(
        self,
        engine: AggregationEngine,
        transport: Submitter,
        config: ReporterConfig,
        *,
        event_bus: EventBus | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize scheduler.

        Args:
            engine: Window state to report from.
            transport: Delivery mechanism for submission records.
            config: Reporter configuration (station metadata).
            event_bus: Bus for outcome events; the global bus if omitted.
            clock: Source of the current time.
        """
        self._engine = engine
        self._transport = transport
        self._config = config
        self._event_bus = event_bus or get_event_bus()
        self._clock = clock
        self._in_flight = False
        self._last_outcome: SubmissionOutcome | None = None

    @property
    def in_flight(self) -> bool:
        """Whether a submission is awaiting the transport."""
        return self._in_flight

    @property
    def last_outcome(self) -> SubmissionOutcome | None:
        """Outcome of the most recent tick."""
        return self._last_outcome

    async def tick(self) -> SubmissionOutcome:
        """Run one submission tick.

        Never raises for incomplete data or transport failures.

        Returns:
            What the tick did.
        """
        if self._in_flight:
            logger.debug("NO SUBMISSION: previous submission still in flight")
            return self._finish(SubmissionOutcome.SKIPPED_BUSY)

        # Read and reduce in one synchronous step; no update can interleave.
        snapshot = self._engine.snapshot()
        if snapshot is None:
            missing = self._engine.missing_fields()
            logger.debug("NO SUBMISSION: missing %s", ", ".join(missing))
            self._event_bus.emit_simple(
                EventType.SUBMISSION_SKIPPED,
                source="scheduler",
                message=f"No {', '.join(missing)} data",
                missing=missing,
            )
            return self._finish(SubmissionOutcome.SKIPPED_INCOMPLETE)

        record = build_submission_record(self._config, snapshot, self._clock())
        payload = record.to_payload()
        logger.debug("Submitting data: %s", payload)

        self._in_flight = True
        try:
            response = await self._transport.submit(record)
            if not response.ok:
                raise TransportStatusError(response.status_code, response.body)
        except TransportError as e:
            logger.warning("Error submitting to station API: %s", e)
            return self._fail(str(e), getattr(e, "status_code", None))
        except Exception as e:
            # Any other submitter failure counts as a failed submission
            logger.exception("Unexpected error submitting to station API")
            return self._fail(f"Unexpected error: {e}", None)
        finally:
            self._in_flight = False

        self._engine.complete_submission(snapshot, self._clock())
        logger.info(
            "Weather report submitted: wind %.2f m/s, gust %.2f m/s, %d deg",
            snapshot.wind,
            snapshot.gust,
            snapshot.direction,
        )
        self._event_bus.emit_simple(
            EventType.SUBMISSION_SUCCESS,
            source="scheduler",
            message="Weather report successfully submitted",
            payload=payload,
            status_code=response.status_code,
        )
        return self._finish(SubmissionOutcome.SUBMITTED)

    def _fail(self, message: str, status_code: int | None) -> SubmissionOutcome:
        self._event_bus.emit_simple(
            EventType.SUBMISSION_FAILED,
            source="scheduler",
            message=message,
            status_code=status_code,
        )
        return self._finish(SubmissionOutcome.FAILED)

    def _finish(self, outcome: SubmissionOutcome) -> SubmissionOutcome:
        self._last_outcome = outcome
        return outcome
