"""Exception hierarchy for windreport."""

from __future__ import annotations


class WindReportError(Exception):
    """Base exception for all windreport errors."""


class ConfigurationError(WindReportError):
    """Raised when the reporter cannot start with the given settings."""


class EmptyWindowError(WindReportError):
    """Raised when reducing a window that holds no wind-speed samples."""


class TransportError(WindReportError):
    """Base exception for failures talking to the station API."""


class TransportConnectionError(TransportError):
    """Raised when the station API cannot be reached."""


class TransportTimeoutError(TransportError):
    """Raised when a submission request times out."""


class TransportStatusError(TransportError):
    """Raised when the station API answers with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")
