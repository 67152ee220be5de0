"""Session uptime and command counting for ``/age``."""

import random
import string
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def format_duration(ms: int) -> str:
    """Format milliseconds as ``"1d 2h 3m 4s"``, omitting zero parts."""
    total_seconds = max(0, ms) // 1000
    days, rem = divmod(total_seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds or not parts:
        parts.append(f"{seconds}s")
    return " ".join(parts)


class UptimeTracker:
    """Tracks when this process started and how many commands it ran."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self.reset()

    def reset(self) -> None:
        """Restart the session: new start time, new deployment id, zero count."""
        self._start_ms = int(self._clock() * 1000)
        self._deployment_id = self._generate_deployment_id()
        self._commands_executed = 0

    def _generate_deployment_id(self) -> str:
        suffix = "".join(random.choices(_BASE36, k=6))
        return f"{_to_base36(self._start_ms)}-{suffix}"

    @property
    def start_ms(self) -> int:
        return self._start_ms

    @property
    def deployment_id(self) -> str:
        return self._deployment_id

    @property
    def commands_executed(self) -> int:
        return self._commands_executed

    def increment_commands(self) -> None:
        self._commands_executed += 1

    def uptime_ms(self) -> int:
        return int(self._clock() * 1000) - self._start_ms

    def formatted_uptime(self) -> str:
        return format_duration(self.uptime_ms())

    def deployment_info(self) -> dict[str, Any]:
        """Snapshot for reporting."""
        uptime = self.uptime_ms()
        return {
            "uptime": uptime,
            "formatted_uptime": format_duration(uptime),
            "start_time": self._start_ms,
            "start_date": datetime.fromtimestamp(self._start_ms / 1000, tz=UTC).isoformat(),
            "deployment_id": self._deployment_id,
            "commands_executed": self._commands_executed,
        }
