"""Wind-speed sample buffer for one submission window."""

from __future__ import annotations

import numpy as np

from windreport.core.units import round_speed
from windreport.exceptions import EmptyWindowError


class SampleBuffer:
    """Wind-speed samples collected since the last successful submission.

    Samples are rounded to 2 decimals on entry. The window is reduced to its
    median, which rejects anemometer spikes, while the gust keeps the largest
    instantaneous reading.
    """

    def __init__(self) -> None:
        self._samples: list[float] = []
        self._gust: float | None = None

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def samples(self) -> tuple[float, ...]:
        """Samples in arrival order."""
        return tuple(self._samples)

    @property
    def gust(self) -> float | None:
        """Largest sample of the window, or None when empty."""
        return self._gust

    @property
    def latest(self) -> float | None:
        """Most recent sample, or None when empty."""
        return self._samples[-1] if self._samples else None

    def is_empty(self) -> bool:
        """Whether no sample has been collected."""
        return not self._samples

    def add_sample(self, value: float) -> float:
        """Append a wind-speed reading.

        Args:
            value: Wind speed in m/s.

        Returns:
            The stored (rounded) sample.
        """
        speed = round_speed(value)
        self._samples.append(speed)
        if self._gust is None or speed > self._gust:
            self._gust = speed
        return speed

    def reduce(self) -> tuple[float, float]:
        """Reduce the window to a single observation.

        Returns:
            Tuple of (median speed rounded to 2 decimals, gust).

        Raises:
            EmptyWindowError: If no sample has been collected.
        """
        if not self._samples or self._gust is None:
            msg = "Cannot reduce an empty sample window"
            raise EmptyWindowError(msg)
        median = float(np.median(np.asarray(self._samples, dtype=float)))
        return round_speed(median), self._gust

    def discard(self, count: int) -> None:
        """Drop the oldest ``count`` samples and recompute the gust.

        Args:
            count: Number of samples to remove from the front.
        """
        del self._samples[: max(count, 0)]
        self._gust = max(self._samples) if self._samples else None

    def clear(self) -> None:
        """Empty the series and unset the gust."""
        self._samples.clear()
        self._gust = None
