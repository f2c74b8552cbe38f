"""Shared pytest fixtures for windreport tests."""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

import pytest

from windreport.aggregation.engine import AggregationEngine
from windreport.core.config import ReporterConfig
from windreport.core.events import reset_event_bus
from windreport.core.state import (
    DEFAULT_WIND_DIRECTION_PATH,
    DEFAULT_WIND_SPEED_PATH,
    POSITION_PATH,
    SubmissionRecord,
)
from windreport.reporting.transport import TransportResponse

# =============================================================================
# Autouse fixtures for test isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_global_state() -> None:
    """Reset the global event bus before each test for isolation."""
    reset_event_bus()


# =============================================================================
# Configuration fixtures
# =============================================================================


@pytest.fixture
def config_data() -> dict[str, Any]:
    """Plugin-style settings for a station."""
    return {
        "apiKey": "secret-key",
        "submitInterval": 5,
        "stationId": 1234,
        "name": "Aurora",
        "provider": "Aurora Sailing",
        "url": "https://aurora.example",
    }


@pytest.fixture
def config(config_data: dict[str, Any]) -> ReporterConfig:
    """Validated reporter configuration."""
    return ReporterConfig.model_validate(config_data)


# =============================================================================
# Engine fixtures
# =============================================================================


def feed_ready_window(
    engine: AggregationEngine,
    speeds: tuple[float, ...] = (3.0, 4.0, 2.0),
    direction: float = math.pi / 2,
) -> None:
    """Give an engine position, wind-speed samples and a direction."""
    engine.on_update(POSITION_PATH, {"latitude": 60.1, "longitude": 24.9}, "gps1")
    for speed in speeds:
        engine.on_update(DEFAULT_WIND_SPEED_PATH, speed, "anemometer")
    engine.on_update(DEFAULT_WIND_DIRECTION_PATH, direction, "anemometer")


@pytest.fixture
def feed() -> Callable[..., None]:
    """Helper that fills an engine with a complete window."""
    return feed_ready_window


@pytest.fixture
def engine() -> AggregationEngine:
    """Engine in direct direction mode with no source filter."""
    return AggregationEngine()


@pytest.fixture
def ready_engine(engine: AggregationEngine) -> AggregationEngine:
    """Engine holding a complete window."""
    feed_ready_window(engine)
    return engine


# =============================================================================
# Transport fixtures
# =============================================================================


class FakeTransport:
    """Records submitted records and answers with a canned result.

    Attributes:
        records: Every record passed to :meth:`submit`.
        status_code: Status code of the canned response.
        error: Exception raised instead of answering, if set.
        on_submit: Hook called while the submission is in flight.
    """

    def __init__(
        self,
        status_code: int = 200,
        error: Exception | None = None,
    ) -> None:
        self.records: list[SubmissionRecord] = []
        self.status_code = status_code
        self.error = error
        self.on_submit: Callable[[], Any] | None = None

    async def submit(self, record: SubmissionRecord) -> TransportResponse:
        self.records.append(record)
        if self.on_submit is not None:
            result = self.on_submit()
            if hasattr(result, "__await__"):
                await result
        if self.error is not None:
            raise self.error
        return TransportResponse(status_code=self.status_code, body="OK")


@pytest.fixture
def transport_cls() -> type[FakeTransport]:
    """Fake transport class for tests that need a custom answer."""
    return FakeTransport


@pytest.fixture
def transport() -> FakeTransport:
    """Transport that acknowledges every submission with HTTP 200."""
    return FakeTransport()
