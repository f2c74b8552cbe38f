"""Telemetry input: Signal K deltas, path resolution and latest values."""

from windreport.telemetry.delta import POLL_INTERVAL, PathResolver, parse_delta
from windreport.telemetry.source import JsonLinesDeltaSource
from windreport.telemetry.store import SelfDataStore, StoredValue

__all__ = [
    "POLL_INTERVAL",
    "JsonLinesDeltaSource",
    "PathResolver",
    "SelfDataStore",
    "StoredValue",
    "parse_delta",
]
