"""Newline-delimited JSON delta source.

Reads one Signal K delta per line from a text stream (a recorded log file
or a pipe from a Signal K client on stdin) and hands every resulting
update to the aggregation engine.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import TextIO

from windreport.core.state import TelemetryUpdate
from windreport.telemetry.delta import POLL_INTERVAL, PathResolver, parse_delta

logger = logging.getLogger(__name__)

UpdateHandler = Callable[[TelemetryUpdate], None]


class JsonLinesDeltaSource:
    """Feeds deltas read from a line-oriented stream into a handler.

    Attributes:
        lines_read: Number of lines consumed so far.
        updates_applied: Number of updates handed to the handler.
    """

    def __init__(
        self,
        stream: TextIO,
        handler: UpdateHandler,
        resolver: PathResolver | None = None,
        *,
        follow: bool = False,
        line_delay: float = 0.0,
        idle_interval: float = POLL_INTERVAL,
    ) -> None:
        """Initialize source.

        Args:
            stream: Text stream yielding one JSON delta per line.
            handler: Callback receiving each parsed update.
            resolver: Path resolver used to tag update kinds.
            follow: Keep polling for new lines after reaching end of stream.
            line_delay: Pause between lines in seconds (replay pacing).
            idle_interval: Poll interval in seconds while following.
        """
        self._stream = stream
        self._handler = handler
        self._resolver = resolver or PathResolver()
        self._follow = follow
        self._line_delay = line_delay
        self._idle_interval = idle_interval
        self._stopped = False
        self.lines_read = 0
        self.updates_applied = 0

    def feed_line(self, line: str) -> int:
        """Parse one line and apply its updates.

        Args:
            line: Raw line from the stream.

        Returns:
            Number of updates applied.
        """
        line = line.strip()
        if not line:
            return 0
        self.lines_read += 1
        try:
            message = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning(
                "Skipping unreadable delta on line %d: %s", self.lines_read, e
            )
            return 0

        updates = parse_delta(message, self._resolver)
        for update in updates:
            self._handler(update)
        self.updates_applied += len(updates)
        return len(updates)

    def stop(self) -> None:
        """Ask :meth:`run` to return after the current line."""
        self._stopped = True

    async def run(self) -> int:
        """Consume the stream until it ends or :meth:`stop` is called.

        Blocking reads happen in a worker thread; updates are applied on the
        event loop that awaits this coroutine.

        Returns:
            Number of updates applied.
        """
        while not self._stopped:
            line = await asyncio.to_thread(self._stream.readline)
            if not line:
                if not self._follow:
                    break
                await asyncio.sleep(self._idle_interval)
                continue
            self.feed_line(line)
            if self._line_delay > 0:
                await asyncio.sleep(self._line_delay)
        logger.debug(
            "Delta source finished after %d lines (%d updates)",
            self.lines_read,
            self.updates_applied,
        )
        return self.updates_applied
