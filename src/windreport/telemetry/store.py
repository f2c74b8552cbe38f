"""Latest-value store for the vessel's own telemetry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class StoredValue:
    """A value as last reported on a path."""

    value: Any
    source: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


class SelfDataStore:
    """Keeps the most recent value of every path seen for the own vessel.

    Components that need a reading on demand (heading and apparent wind angle
    for computed direction) look it up here instead of caching it.
    """

    def __init__(self) -> None:
        self._values: dict[str, StoredValue] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._values

    def __len__(self) -> int:
        return len(self._values)

    def update(self, path: str, value: Any, source: str | None = None) -> None:
        """Record the latest value for a path."""
        self._values[path] = StoredValue(value=value, source=source)

    def get(self, path: str) -> StoredValue | None:
        """Latest stored entry for a path, or None if never seen."""
        return self._values.get(path)

    def value(self, path: str) -> Any:
        """Latest value for a path, or None if never seen."""
        entry = self._values.get(path)
        return entry.value if entry is not None else None

    def paths(self) -> list[str]:
        """All paths seen so far, sorted."""
        return sorted(self._values)

    def clear(self) -> None:
        """Forget every stored value."""
        self._values.clear()
