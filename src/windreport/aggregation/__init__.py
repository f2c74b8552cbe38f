"""Aggregation of wind telemetry over one submission window."""

from windreport.aggregation.buffer import SampleBuffer
from windreport.aggregation.direction import DirectionMode, DirectionResolver
from windreport.aggregation.engine import AggregationEngine

__all__ = [
    "AggregationEngine",
    "DirectionMode",
    "DirectionResolver",
    "SampleBuffer",
]
