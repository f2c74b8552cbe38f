"""Submission and status reporting."""

from windreport.reporting.scheduler import (
    SubmissionOutcome,
    SubmissionScheduler,
    build_submission_record,
)
from windreport.reporting.status import StatusReporter, time_since
from windreport.reporting.transport import TransportResponse, WindyTransport

__all__ = [
    "StatusReporter",
    "SubmissionOutcome",
    "SubmissionScheduler",
    "TransportResponse",
    "WindyTransport",
    "build_submission_record",
    "time_since",
]
