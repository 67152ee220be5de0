"""Tests for uptime tracking."""

import pytest

from rapibot.core.uptime import UptimeTracker, _to_base36, format_duration


class SecondsClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        ("ms", "expected"),
        [
            (0, "0s"),
            (999, "0s"),
            (61_000, "1m 1s"),
            (3_600_000, "1h"),
            (90_061_000, "1d 1h 1m 1s"),
            (-10, "0s"),
        ],
    )
    def test_format(self, ms: int, expected: str) -> None:
        assert format_duration(ms) == expected


class TestUptimeTracker:
    """Tests for UptimeTracker."""

    def test_base36(self) -> None:
        assert _to_base36(0) == "0"
        assert _to_base36(35) == "z"
        assert _to_base36(36) == "10"

    def test_uptime_follows_clock(self) -> None:
        clock = SecondsClock()
        tracker = UptimeTracker(clock=clock)
        clock.now += 65

        assert tracker.uptime_ms() == 65_000
        assert tracker.formatted_uptime() == "1m 5s"

    def test_command_counter(self) -> None:
        tracker = UptimeTracker(clock=SecondsClock())
        for _ in range(3):
            tracker.increment_commands()
        assert tracker.commands_executed == 3

    def test_reset_starts_new_session(self) -> None:
        clock = SecondsClock()
        tracker = UptimeTracker(clock=clock)
        tracker.increment_commands()
        clock.now += 10

        tracker.reset()

        assert tracker.commands_executed == 0
        assert tracker.uptime_ms() == 0
        assert tracker.start_ms == 1_700_000_010_000

    def test_deployment_id_prefix_is_start_time(self) -> None:
        tracker = UptimeTracker(clock=SecondsClock())
        prefix, suffix = tracker.deployment_id.split("-")

        assert prefix == _to_base36(tracker.start_ms)
        assert len(suffix) == 6

    def test_deployment_info(self) -> None:
        clock = SecondsClock()
        tracker = UptimeTracker(clock=clock)
        tracker.increment_commands()
        clock.now += 1

        info = tracker.deployment_info()

        assert info["uptime"] == 1000
        assert info["formatted_uptime"] == "1s"
        assert info["start_time"] == tracker.start_ms
        assert info["start_date"].startswith("2023-11-14T")
        assert info["commands_executed"] == 1
        assert info["deployment_id"] == tracker.deployment_id
