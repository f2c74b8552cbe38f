"""True wind direction resolution."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from enum import Enum
from typing import Any

from windreport.core.state import APPARENT_ANGLE_PATH, HEADING_PATH
from windreport.core.units import normalize_turn, to_compass_degrees

logger = logging.getLogger(__name__)

ValueReader = Callable[[str], Any]

MAX_READING = 1e9
"""Largest magnitude accepted from a sensor; anything above is a glitch."""


class DirectionMode(str, Enum):
    """Where the reported wind direction comes from."""

    DIRECT = "direct"
    COMPUTED = "computed"


def as_number(value: Any) -> float | None:
    """Return value as a finite float, or None if it is not a usable number.

    Magnitudes above :data:`MAX_READING` are rejected so that later
    rounding always stays within decimal precision.
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if abs(value) > MAX_READING or not math.isfinite(value):
        return None
    return float(value)


class DirectionResolver:
    """Compute true wind direction in whole degrees.

    In direct mode the configured direction sensor already reports true wind
    direction and only needs converting. In computed mode the direction is
    derived from true heading plus apparent wind angle, both read on demand
    through ``reader`` so the resolver itself keeps no copy of them.

    Attributes:
        mode: Selected resolution mode.
    """

    def __init__(
        self,
        mode: DirectionMode = DirectionMode.DIRECT,
        reader: ValueReader | None = None,
        *,
        heading_path: str = HEADING_PATH,
        apparent_path: str = APPARENT_ANGLE_PATH,
    ) -> None:
        """Initialize resolver.

        Args:
            mode: Direct or computed resolution.
            reader: Callable returning the latest value for a path, or None.
                Required in computed mode.
            heading_path: Path of the true heading (radians).
            apparent_path: Path of the apparent wind angle (radians).
        """
        if mode is DirectionMode.COMPUTED and reader is None:
            msg = "Computed direction mode needs a value reader"
            raise ValueError(msg)
        self._mode = mode
        self._reader = reader
        self._heading_path = heading_path
        self._apparent_path = apparent_path

    @property
    def mode(self) -> DirectionMode:
        """Selected resolution mode."""
        return self._mode

    @property
    def computed(self) -> bool:
        """Whether direction is derived from heading and apparent angle."""
        return self._mode is DirectionMode.COMPUTED

    def resolve_direct(self, radians: Any) -> int | None:
        """Convert a direction-sensor reading to degrees.

        Args:
            radians: True wind direction in radians.

        Returns:
            Whole degrees in [0, 360), or None if the reading is not a number.
        """
        angle = as_number(radians)
        if angle is None:
            return None
        return to_compass_degrees(angle)

    def resolve_computed(self) -> int | None:
        """Derive direction from the latest heading and apparent wind angle.

        Returns:
            Whole degrees in [0, 360), or None while either input is missing.
        """
        if self._reader is None:
            return None
        heading = as_number(self._reader(self._heading_path))
        apparent = as_number(self._reader(self._apparent_path))
        logger.debug("Computing wind direction: heading=%s awa=%s", heading, apparent)
        if heading is None or apparent is None:
            return None
        return to_compass_degrees(normalize_turn(heading + apparent))
