"""Core module for the wind reporter.

This module provides the foundations shared by every component:
- Value types for telemetry, windows and submission records
- Configuration loading and validation
- Unit conversions and rounding
- Event system for reporter activity
"""

from windreport.core.config import ReporterConfig, load_config, save_config
from windreport.core.events import Event, EventBus, EventType, get_event_bus
from windreport.core.state import (
    Observation,
    Position,
    StationRecord,
    SubmissionRecord,
    TelemetryKind,
    TelemetryUpdate,
    WindowPhase,
    WindowSnapshot,
)

__all__ = [
    # Config
    "ReporterConfig",
    "load_config",
    "save_config",
    # Events
    "Event",
    "EventBus",
    "EventType",
    "get_event_bus",
    # State
    "Observation",
    "Position",
    "StationRecord",
    "SubmissionRecord",
    "TelemetryKind",
    "TelemetryUpdate",
    "WindowPhase",
    "WindowSnapshot",
]
