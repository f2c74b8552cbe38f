"""Tests for Signal K delta parsing."""

from __future__ import annotations

from typing import Any

import pytest

from windreport.core.config import ReporterConfig
from windreport.core.state import (
    APPARENT_ANGLE_PATH,
    DEFAULT_WIND_DIRECTION_PATH,
    DEFAULT_WIND_SPEED_PATH,
    HEADING_PATH,
    POSITION_PATH,
    TelemetryKind,
)
from windreport.telemetry.delta import PathResolver, parse_delta


class TestPathResolver:
    """Tests for PathResolver."""

    @pytest.mark.parametrize(
        ("path", "kind"),
        [
            (POSITION_PATH, TelemetryKind.POSITION),
            (DEFAULT_WIND_SPEED_PATH, TelemetryKind.WIND_SPEED),
            (DEFAULT_WIND_DIRECTION_PATH, TelemetryKind.WIND_DIRECTION),
            (HEADING_PATH, TelemetryKind.HEADING),
            (APPARENT_ANGLE_PATH, TelemetryKind.APPARENT_ANGLE),
            ("navigation.speedOverGround", TelemetryKind.UNKNOWN),
        ],
    )
    def test_resolve(self, path: str, kind: TelemetryKind) -> None:
        """Known paths resolve to their kind."""
        assert PathResolver().resolve(path) is kind

    def test_from_config(self, config: ReporterConfig) -> None:
        """Resolver uses the configured wind paths."""
        resolver = PathResolver.from_config(config)
        assert resolver.wind_speed_path == config.wind_speed_path
        assert resolver.wind_direction_path == config.wind_direction_path

    def test_subscription(self) -> None:
        """Subscription lists all five paths at one-second period."""
        message = PathResolver().subscription()
        assert message["context"] == "vessels.self"
        assert [s["path"] for s in message["subscribe"]] == [
            POSITION_PATH,
            DEFAULT_WIND_DIRECTION_PATH,
            DEFAULT_WIND_SPEED_PATH,
            HEADING_PATH,
            APPARENT_ANGLE_PATH,
        ]
        assert all(s["period"] == 1000 for s in message["subscribe"])


class TestParseDelta:
    """Tests for parse_delta."""

    def test_single_value(self) -> None:
        """A one-value delta yields one update."""
        message = {
            "updates": [
                {
                    "$source": "anemometer",
                    "values": [{"path": DEFAULT_WIND_SPEED_PATH, "value": 4.2}],
                }
            ]
        }
        (update,) = parse_delta(message)
        assert update.path == DEFAULT_WIND_SPEED_PATH
        assert update.value == 4.2
        assert update.source == "anemometer"
        assert update.kind is TelemetryKind.WIND_SPEED

    def test_all_values_flattened(self) -> None:
        """Every value of every update is returned in order."""
        message = {
            "updates": [
                {
                    "$source": "gps1",
                    "values": [
                        {"path": POSITION_PATH, "value": {"latitude": 1.0}},
                        {"path": HEADING_PATH, "value": 0.5},
                    ],
                },
                {
                    "source": {"label": "wind"},
                    "values": [{"path": APPARENT_ANGLE_PATH, "value": 0.1}],
                },
            ]
        }
        updates = parse_delta(message)
        assert [u.path for u in updates] == [
            POSITION_PATH,
            HEADING_PATH,
            APPARENT_ANGLE_PATH,
        ]
        assert [u.source for u in updates] == ["gps1", "gps1", "wind"]

    @pytest.mark.parametrize(
        "message",
        [
            None,
            [],
            {},
            {"updates": "nope"},
            {"updates": [{"values": None}]},
            {"updates": ["bad"]},
        ],
    )
    def test_malformed_messages(self, message: Any) -> None:
        """Malformed deltas yield nothing."""
        assert parse_delta(message) == []

    def test_malformed_entries_skipped(self) -> None:
        """Bad entries are skipped while good ones survive."""
        message = {
            "updates": [
                {
                    "values": [
                        "bad",
                        {"value": 1.0},
                        {"path": HEADING_PATH},
                        {"path": HEADING_PATH, "value": 1.0},
                    ]
                }
            ]
        }
        updates = parse_delta(message)
        assert len(updates) == 1
        assert updates[0].source is None

    def test_custom_resolver(self) -> None:
        """Resolver decides the update kind."""
        resolver = PathResolver(wind_speed_path="environment.wind.speedTrue")
        message = {
            "updates": [
                {"values": [{"path": "environment.wind.speedTrue", "value": 3.0}]}
            ]
        }
        (update,) = parse_delta(message, resolver)
        assert update.kind is TelemetryKind.WIND_SPEED
