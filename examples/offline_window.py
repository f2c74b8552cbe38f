#!/usr/bin/env python3
"""Offline aggregation example.

This script feeds ten minutes of synthetic anemometer readings into an
aggregation engine and prints the report that would be sent to the
station API, without contacting it.

Run with: uv run python examples/offline_window.py
"""

import json
import math

import numpy as np

from windreport.aggregation.engine import AggregationEngine
from windreport.core.config import ReporterConfig
from windreport.core.state import (
    APPARENT_ANGLE_PATH,
    DEFAULT_WIND_SPEED_PATH,
    HEADING_PATH,
    POSITION_PATH,
)
from windreport.reporting.scheduler import build_submission_record
from windreport.reporting.status import StatusReporter


def main() -> None:
    """Aggregate one window and print the resulting payload."""
    config = ReporterConfig(
        api_key="example",
        station_id=1234,
        vessel_name="Aurora",
        calculate_direction=True,
    )
    engine = AggregationEngine.from_config(config)
    rng = np.random.default_rng(42)

    engine.on_update(POSITION_PATH, {"latitude": 60.15, "longitude": 24.95}, "gps1")
    engine.on_update(HEADING_PATH, math.radians(350))
    engine.on_update(APPARENT_ANGLE_PATH, math.radians(30))

    # One reading per second, with occasional gusts
    for speed in rng.gamma(shape=9.0, scale=0.6, size=600):
        engine.on_update(DEFAULT_WIND_SPEED_PATH, float(speed))

    print(StatusReporter(engine).render())
    print()

    snapshot = engine.snapshot()
    if snapshot is None:
        print(f"Window incomplete: missing {', '.join(engine.missing_fields())}")
        return

    print(f"Samples: {snapshot.sample_count}")
    print(f"Median wind: {snapshot.wind} m/s, gust: {snapshot.gust} m/s")
    print(f"Direction: {snapshot.direction} deg")
    print()
    record = build_submission_record(config, snapshot)
    print(json.dumps(record.to_payload(), indent=2))


if __name__ == "__main__":
    main()
