"""Rate limiting for commands.

Two independent limiters live here:

* ``CooldownLimiter``: a fixed cooldown per (scope, user), persisted to a
  JSON ``UsageStore`` per scope so it survives restarts. Used for the daily
  ``/lucky`` roll.
* ``ChatCommandLimiter``: an in-memory hourly quota per (guild, user) shared
  by the keyword chat commands in ``RATE_LIMITED_COMMANDS``.
"""

import asyncio
import re
import time
from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

from rapibot.core.errors import PersistenceError, RateLimitedError
from rapibot.core.logging import get_logger
from rapibot.core.usage_store import UsageStore

logger = get_logger(__name__)

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE
ONE_DAY_MS = 24 * MS_PER_HOUR

# Keyword chat commands that share the hourly quota
RATE_LIMITED_COMMANDS: frozenset[str] = frozenset({
    "booba?",
    "booty?",
    "sounds like...",
    "sounds like…",
    "seggs?",
    "kinda weird...",
    "i swear she is actually 3000 years old",
    "12+ game",
    "justice for...",
    "whale levels",
    "lap of discipline.",
    "wrong girl",
    "mold rates are not that bad",
    "ready rapi?",
    "bad girl",
    "reward?",
    "damn train",
    "damn gravedigger",
    "dead spicy?",
    "belorta...",
    "ccp rules...",
    "best girl?",
    "99%",
    "ccp #1",
    "is it over?",
    "absolute...",
    "we had a plan!",
    "ccp leadership",
    "good idea!",
    "quiet rapi",
    "entertainmentttt",
    "we casual",
})


def is_rate_limited_command(command: str) -> bool:
    """Check if a chat command name counts against the hourly quota."""
    return command.lower() in RATE_LIMITED_COMMANDS


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def format_remaining(remaining_ms: int) -> tuple[int, int]:
    """Split a wait into whole hours and leftover whole minutes (floored)."""
    remaining_ms = max(0, remaining_ms)
    hours = remaining_ms // MS_PER_HOUR
    minutes = (remaining_ms % MS_PER_HOUR) // MS_PER_MINUTE
    return hours, minutes


def describe_remaining(remaining_ms: int) -> str:
    """Human-readable wait, e.g. ``"5 hours and 12 minutes"``."""
    hours, minutes = format_remaining(remaining_ms)
    return f"{hours} hours and {minutes} minutes"


def scope_slug(scope: str) -> str:
    """Filesystem-safe name for a scope (``"booba?"`` -> ``"booba"``)."""
    slug = re.sub(r"[^a-z0-9]+", "_", scope.lower()).strip("_")
    return slug or "scope"


@dataclass(frozen=True)
class CooldownResult:
    """Result of a cooldown check.

    Attributes:
        allowed: Whether the command may run now.
        remaining_ms: Milliseconds left in the cooldown (0 when allowed).
    """

    allowed: bool
    remaining_ms: int = 0

    @classmethod
    def allow(cls) -> "CooldownResult":
        return cls(allowed=True, remaining_ms=0)

    @classmethod
    def deny(cls, remaining_ms: int) -> "CooldownResult":
        return cls(allowed=False, remaining_ms=remaining_ms)


class CooldownLimiter:
    """Per-(scope, user) cooldown backed by one UsageStore per scope.

    Check and record run under a lock per (scope, user), so two interleaved
    invocations by the same user cannot both be allowed. The lock is local to
    this process; several bot processes sharing one file are not coordinated.

    Example:
        limiter = CooldownLimiter({"lucky": lucky_store}, data_dir=Path("data"))
        result = await limiter.check_and_record("lucky", "123", ONE_DAY_MS)
        if not result.allowed:
            print(describe_remaining(result.remaining_ms))
    """

    def __init__(
        self,
        stores: Mapping[str, UsageStore] | None = None,
        data_dir: str | Path = "data",
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialize the limiter.

        Args:
            stores: Pre-loaded stores keyed by scope.
            data_dir: Directory for stores of scopes not in ``stores``.
            clock: Returns the current time in epoch milliseconds.
        """
        self._stores: dict[str, UsageStore] = dict(stores or {})
        self._data_dir = Path(data_dir)
        self._clock = clock
        # (scope, user) -> [lock, holders and waiters]
        self._locks: dict[tuple[str, str], list] = {}

    def store_for(self, scope: str) -> UsageStore:
        """Return the store for a scope, creating and loading it on first use."""
        store = self._stores.get(scope)
        if store is None:
            store = UsageStore(self._data_dir / f"{scope_slug(scope)}.json")
            store.load()
            self._stores[scope] = store
            logger.info("usage_store_created", scope=scope, path=str(store.path))
        return store

    @property
    def scopes(self) -> list[str]:
        """Scopes with a store attached."""
        return list(self._stores)

    @asynccontextmanager
    async def _user_lock(self, scope: str, user_id: str) -> AsyncIterator[None]:
        """Hold the (scope, user) lock, dropping it once nobody holds or awaits it."""
        key = (scope, user_id)
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    async def check_and_record(
        self, scope: str, user_id: str | int, cooldown_ms: int
    ) -> CooldownResult:
        """Decide whether ``user_id`` may use ``scope`` now and record it if so.

        The boundary is inclusive: a call exactly ``cooldown_ms`` after the
        last use is allowed. On an allowed call the store is persisted; a
        write failure is logged and the in-memory update is kept.

        Args:
            scope: Rate-limiting bucket, typically the command name.
            user_id: The calling user.
            cooldown_ms: Cooldown window length in milliseconds.

        Returns:
            CooldownResult describing the decision.
        """
        user_key = str(user_id)
        store = self.store_for(scope)

        async with self._user_lock(scope, user_key):
            now = self._clock()
            record = store.get(user_key)

            if record is not None:
                elapsed = now - record.last_time
                if elapsed < cooldown_ms:
                    remaining = cooldown_ms - elapsed
                    logger.debug(
                        "cooldown_denied",
                        scope=scope,
                        user_id=user_key,
                        remaining_ms=remaining,
                    )
                    return CooldownResult.deny(remaining)

            store.set(user_key, now)
            try:
                await store.save_async()
            except PersistenceError as ex:
                logger.error(
                    "usage_store_save_failed",
                    scope=scope,
                    path=ex.path,
                    error=str(ex),
                )

            logger.debug("cooldown_allowed", scope=scope, user_id=user_key)
            return CooldownResult.allow()

    async def enforce(self, scope: str, user_id: str | int, cooldown_ms: int) -> None:
        """Like ``check_and_record`` but raise when denied.

        Raises:
            RateLimitedError: If the user is still inside the cooldown.
        """
        result = await self.check_and_record(scope, user_id, cooldown_ms)
        if not result.allowed:
            raise RateLimitedError(result.remaining_ms, scope=scope)


@dataclass
class ChatQuota:
    """Hourly chat-command quota configuration.

    Attributes:
        max_commands: Allowed commands per user per UTC hour.
        violator_threshold: Attempts after which a user is listed as a violator.
        timeout_threshold: Attempts after which a user is timed out.
    """

    max_commands: int = 3
    violator_threshold: int = 5
    timeout_threshold: int = 8


@dataclass
class ChatUsageStats:
    """Per-guild quota statistics for ``/spam stats``."""

    total_users: int = 0
    total_usage: int = 0
    active_users: int = 0
    top_violators: list[tuple[str, int]] = field(default_factory=list)
    most_used_commands: list[tuple[str, int]] = field(default_factory=list)


@dataclass
class _HourUsage:
    hour_key: str
    count: int = 0


def _utc_now() -> datetime:
    return datetime.now(UTC)


def hour_key(moment: datetime) -> str:
    """Bucket key for the UTC hour containing ``moment``."""
    moment = moment.astimezone(UTC)
    return f"{moment.year}-{moment.month}-{moment.day}-{moment.hour}"


class ChatCommandLimiter:
    """Fixed-window (UTC hour) quota per (guild, user) for chat commands.

    Every call to ``check`` counts as an attempt, including blocked ones, so
    spamming past the quota raises the user's violation count.
    """

    def __init__(
        self,
        quota: ChatQuota | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.quota = quota or ChatQuota()
        self._clock = clock
        self._usage: dict[str, dict[str, _HourUsage]] = {}
        self._violators: dict[str, dict[str, int]] = {}
        self._command_usage: dict[str, dict[str, int]] = {}
        self._guild_counts: dict[str, int] = {}
        self._global_count = 0

    def check(self, guild_id: str | int, user_id: str | int, command: str | None = None) -> bool:
        """Count an attempt and report whether it fits in the current hour.

        Args:
            guild_id: Guild the command was used in.
            user_id: The calling user.
            command: Command name, for per-command statistics.

        Returns:
            True if the command may run.
        """
        guild, user = str(guild_id), str(user_id)
        current = hour_key(self._clock())

        guild_usage = self._usage.setdefault(guild, {})
        usage = guild_usage.get(user)
        if usage is None or usage.hour_key != current:
            usage = _HourUsage(hour_key=current)
            guild_usage[user] = usage

        violators = self._violators.setdefault(guild, {})
        violators[user] = violators.get(user, 0) + 1

        if command:
            commands = self._command_usage.setdefault(guild, {})
            commands[command] = commands.get(command, 0) + 1

        self._global_count += 1
        self._guild_counts[guild] = self._guild_counts.get(guild, 0) + 1

        if usage.count >= self.quota.max_commands:
            return False
        usage.count += 1
        return True

    def remaining_time_ms(self) -> int:
        """Milliseconds until the next UTC hour, when every quota resets."""
        now = self._clock().astimezone(UTC)
        next_hour = now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
        return int((next_hour - now).total_seconds() * 1000)

    def remaining_commands(self, guild_id: str | int, user_id: str | int) -> int:
        """Commands the user may still run this hour."""
        usage = self._usage.get(str(guild_id), {}).get(str(user_id))
        if usage is None or usage.hour_key != hour_key(self._clock()):
            return self.quota.max_commands
        return max(0, self.quota.max_commands - usage.count)

    def violations(self, guild_id: str | int, user_id: str | int) -> int:
        """Total attempts recorded for a user, blocked ones included."""
        return self._violators.get(str(guild_id), {}).get(str(user_id), 0)

    def should_timeout(self, guild_id: str | int, user_id: str | int) -> bool:
        return self.violations(guild_id, user_id) >= self.quota.timeout_threshold

    def reset_user(self, guild_id: str | int, user_id: str | int) -> None:
        """Forget a user's usage and violations in one guild."""
        guild, user = str(guild_id), str(user_id)
        self._usage.get(guild, {}).pop(user, None)
        self._violators.get(guild, {}).pop(user, None)

    def usage_stats(self, guild_id: str | int) -> ChatUsageStats:
        """Aggregate statistics for one guild."""
        guild = str(guild_id)
        guild_usage = self._usage.get(guild)
        if not guild_usage:
            return ChatUsageStats()

        current = hour_key(self._clock())
        violators = sorted(
            (
                (user, attempts)
                for user, attempts in self._violators.get(guild, {}).items()
                if attempts >= self.quota.violator_threshold
            ),
            key=lambda item: item[1],
            reverse=True,
        )
        commands = sorted(
            self._command_usage.get(guild, {}).items(),
            key=lambda item: item[1],
            reverse=True,
        )

        return ChatUsageStats(
            total_users=len(guild_usage),
            total_usage=sum(u.count for u in guild_usage.values()),
            active_users=sum(
                1 for u in guild_usage.values() if u.hour_key == current and u.count > 0
            ),
            top_violators=violators[:5],
            most_used_commands=commands[:5],
        )

    def global_command_count(self) -> int:
        return self._global_count

    def guild_command_count(self, guild_id: str | int) -> int:
        return self._guild_counts.get(str(guild_id), 0)

    def cleanup(self) -> int:
        """Drop usage buckets from past hours.

        Returns:
            Number of user buckets removed.
        """
        current = hour_key(self._clock())
        removed = 0
        for guild in list(self._usage):
            users = self._usage[guild]
            for user in [u for u, usage in users.items() if usage.hour_key != current]:
                del users[user]
                removed += 1
            if not users:
                del self._usage[guild]
        return removed
