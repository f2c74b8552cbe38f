"""HTTP transport for the station API, wrapping httpx."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from windreport.core.config import DEFAULT_API_BASE
from windreport.core.state import SubmissionRecord
from windreport.exceptions import (
    TransportConnectionError,
    TransportStatusError,
    TransportTimeoutError,
)

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class TransportResponse:
    """Acknowledgment returned by the station API."""

    status_code: int
    body: str = ""

    @property
    def ok(self) -> bool:
        """Whether the status code is a 2xx success."""
        return 200 <= self.status_code < 300


def _check_response(response: httpx.Response) -> TransportResponse:
    """Validate the status and wrap the response."""
    result = TransportResponse(status_code=response.status_code, body=response.text)
    if not result.ok:
        raise TransportStatusError(
            status_code=response.status_code, message=response.text
        )
    return result


class WindyTransport:
    """Asynchronous submission transport using httpx.AsyncClient."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize transport.

        Args:
            api_key: Station API key, appended to ``base_url``.
            base_url: Submission endpoint prefix.
            timeout: Request timeout in seconds.
            client: Preconfigured client; one is created if omitted.
        """
        self._uri = base_url + api_key
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def submit(self, record: SubmissionRecord) -> TransportResponse:
        """POST one submission record.

        Args:
            record: Report to send.

        Returns:
            The API acknowledgment.

        Raises:
            TransportConnectionError: If the API cannot be reached
                or the submission URL is invalid.
            TransportTimeoutError: If the request times out.
            TransportStatusError: If the API answers with a non-2xx status.
        """
        try:
            response = await self._client.post(self._uri, json=record.to_payload())
        except httpx.TimeoutException as exc:
            raise TransportTimeoutError(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise TransportConnectionError(str(exc)) from exc
        except httpx.InvalidURL as exc:
            msg = f"Invalid submission URL: {exc}"
            raise TransportConnectionError(msg) from exc
        return _check_response(response)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> WindyTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
